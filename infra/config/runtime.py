"""
Runtime configuration access.

Single source of truth: {storage_root}/config.yaml

The only environment variable used is SCORESPLIT_ROOT to locate the storage
root (a .env file in the working directory is honoured).
"""

import os
from pathlib import Path
from functools import lru_cache

from dotenv import load_dotenv

from .schemas import SplitterConfig, SplitSettings

load_dotenv()


def get_storage_root() -> Path:
    """Get the storage root from environment."""
    return Path(os.getenv('SCORESPLIT_ROOT', '~/Documents/scoresplit')).expanduser().resolve()


@lru_cache(maxsize=1)
def get_splitter_config() -> SplitterConfig:
    """
    Load and cache the configuration.

    Returns SplitterConfig with defaults if config.yaml doesn't exist.
    """
    from .settings_config import load_splitter_config
    return load_splitter_config(get_storage_root())


def get_split_settings() -> SplitSettings:
    return get_splitter_config().split


def get_log_dir() -> Path:
    config = get_splitter_config()
    if config.log_dir:
        return Path(config.log_dir).expanduser().resolve()
    return get_storage_root() / "logs"


def reload_config() -> SplitterConfig:
    """Force reload of config (clears cache)."""
    get_splitter_config.cache_clear()
    return get_splitter_config()
