"""
Configuration management for scoresplit.

Usage:
    from infra.config import get_split_settings, SettingsConfigManager

    settings = get_split_settings()          # cached, from config.yaml
    manager = SettingsConfigManager(root)    # explicit load/save/update
"""

from .schemas import (
    SplitSettings,
    SplitterConfig,
)

from .settings_config import (
    SettingsConfigManager,
    load_splitter_config,
)

from .runtime import (
    get_storage_root,
    get_splitter_config,
    get_split_settings,
    get_log_dir,
    reload_config,
)


__all__ = [
    "SplitSettings",
    "SplitterConfig",
    "SettingsConfigManager",
    "load_splitter_config",
    "get_storage_root",
    "get_splitter_config",
    "get_split_settings",
    "get_log_dir",
    "reload_config",
]
