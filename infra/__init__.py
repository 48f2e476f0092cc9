from infra.config import (
    SplitSettings,
    SplitterConfig,
    SettingsConfigManager,
    get_storage_root,
    get_split_settings,
)

from infra.pipeline import (
    PipelineLogger,
    create_logger,
)

__all__ = [
    "SplitSettings",
    "SplitterConfig",
    "SettingsConfigManager",
    "get_storage_root",
    "get_split_settings",
    "PipelineLogger",
    "create_logger",
]
