"""
Config file loading and management.

The config is stored at {storage_root}/config.yaml. A missing file means
defaults.
"""

from pathlib import Path
import yaml

from .schemas import SplitterConfig


CONFIG_FILENAME = "config.yaml"


class SettingsConfigManager:
    """
    Manages the config file.

    Usage:
        manager = SettingsConfigManager(storage_root)
        config = manager.load()  # Returns SplitterConfig
        manager.save(config)     # Persists to disk
    """

    def __init__(self, storage_root: Path):
        self.storage_root = Path(storage_root).expanduser().resolve()
        self.config_path = self.storage_root / CONFIG_FILENAME

    def exists(self) -> bool:
        return self.config_path.exists()

    def load(self) -> SplitterConfig:
        """
        Load config from disk.

        Returns SplitterConfig with defaults if file doesn't exist.
        """
        if not self.config_path.exists():
            return SplitterConfig.with_defaults()

        with open(self.config_path, "r") as f:
            data = yaml.safe_load(f) or {}

        return SplitterConfig.model_validate(data)

    def save(self, config: SplitterConfig) -> None:
        self.storage_root.mkdir(parents=True, exist_ok=True)

        data = config.model_dump(exclude_none=True)

        with open(self.config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def update(self, updates: dict) -> SplitterConfig:
        """
        Update specific fields in the config.

        Args:
            updates: Dict of fields to update (can be nested, e.g. {"split": {"fill_gaps": False}})

        Returns:
            Updated SplitterConfig
        """
        config = self.load()
        data = config.model_dump()

        _deep_merge(data, updates)

        new_config = SplitterConfig.model_validate(data)
        self.save(new_config)
        return new_config


def _deep_merge(base: dict, updates: dict) -> None:
    for key, value in updates.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value


def load_splitter_config(storage_root: Path) -> SplitterConfig:
    return SettingsConfigManager(storage_root).load()
