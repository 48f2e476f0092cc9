"""
Tests for infra/config/ module.

Tests the configuration system:
- Settings schema defaults and validation
- Config file loading/saving/updating
- Storage root and log dir resolution from the environment

All tests use temporary directories - no production data touched.
"""

import pytest
import yaml
from pydantic import ValidationError

from infra.config import (
    SplitSettings,
    SplitterConfig,
    SettingsConfigManager,
    load_splitter_config,
    get_storage_root,
    get_split_settings,
    get_log_dir,
    reload_config,
)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def tmp_storage(tmp_path):
    """Create a temporary storage root directory."""
    storage = tmp_path / "scoresplit"
    storage.mkdir()
    return storage


@pytest.fixture
def manager(tmp_storage):
    return SettingsConfigManager(tmp_storage)


@pytest.fixture
def env_storage(tmp_storage, monkeypatch):
    """Point SCORESPLIT_ROOT at the temp storage and reset the config cache."""
    monkeypatch.setenv("SCORESPLIT_ROOT", str(tmp_storage))
    reload_config()
    yield tmp_storage
    monkeypatch.delenv("SCORESPLIT_ROOT")
    reload_config()


# =============================================================================
# Schema Tests
# =============================================================================

class TestSplitSettings:
    """Test split settings defaults and bounds."""

    def test_defaults(self):
        settings = SplitSettings()
        assert settings.text_layer_threshold == 0.60
        assert settings.header_height_fraction == 0.20
        assert settings.max_full_text_chars == 500
        assert settings.segmentation_confidence_threshold == 70
        assert settings.max_pages_per_part == 12
        assert settings.auto_fix_overlaps is True
        assert settings.fill_gaps is True
        assert settings.max_pages is None

    @pytest.mark.parametrize("field,value", [
        ("text_layer_threshold", 1.5),
        ("header_height_fraction", 0),
        ("segmentation_confidence_threshold", 101),
        ("max_pages_per_part", 0),
        ("max_pages", 0),
    ])
    def test_out_of_range_rejected(self, field, value):
        with pytest.raises(ValidationError):
            SplitSettings(**{field: value})


class TestSplitterConfig:
    """Test top-level config."""

    def test_empty_config_valid(self):
        config = SplitterConfig()
        assert config.split == SplitSettings()
        assert config.log_level == "INFO"
        assert config.log_dir is None

    def test_log_level_normalized(self):
        assert SplitterConfig(log_level=" debug ").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            SplitterConfig(log_level="chatty")

    def test_with_defaults(self):
        assert SplitterConfig.with_defaults() == SplitterConfig()


# =============================================================================
# Manager Tests
# =============================================================================

class TestSettingsConfigManager:
    """Test config file operations."""

    def test_exists_false_initially(self, manager):
        assert not manager.exists()

    def test_load_returns_defaults_when_no_file(self, manager):
        config = manager.load()
        assert config == SplitterConfig.with_defaults()

    def test_save_creates_file(self, manager, tmp_storage):
        manager.save(SplitterConfig())
        assert manager.exists()
        assert (tmp_storage / "config.yaml").exists()

    def test_save_and_load_roundtrip(self, manager):
        config = SplitterConfig(
            split=SplitSettings(max_pages_per_part=20, fill_gaps=False),
            log_level="WARNING",
            log_dir="/var/log/scoresplit",
        )
        manager.save(config)

        loaded = manager.load()
        assert loaded == config

    def test_partial_file_uses_defaults(self, manager, tmp_storage):
        with open(tmp_storage / "config.yaml", "w") as f:
            yaml.dump({"split": {"text_layer_threshold": 0.8}}, f)

        config = manager.load()
        assert config.split.text_layer_threshold == 0.8
        assert config.split.max_pages_per_part == 12
        assert config.log_level == "INFO"

    def test_empty_file_uses_defaults(self, manager, tmp_storage):
        (tmp_storage / "config.yaml").write_text("")
        assert manager.load() == SplitterConfig()

    def test_update_merges_changes(self, manager):
        manager.save(SplitterConfig(split=SplitSettings(max_pages_per_part=20)))

        updated = manager.update({"split": {"fill_gaps": False}})

        assert updated.split.fill_gaps is False
        assert updated.split.max_pages_per_part == 20
        assert manager.load() == updated

    def test_invalid_update_not_written(self, manager):
        manager.save(SplitterConfig())

        with pytest.raises(ValidationError):
            manager.update({"split": {"max_pages_per_part": -1}})

        assert manager.load().split.max_pages_per_part == 12

    def test_config_file_is_valid_yaml(self, manager, tmp_storage):
        manager.save(SplitterConfig())

        with open(tmp_storage / "config.yaml") as f:
            data = yaml.safe_load(f)

        assert data["split"]["text_layer_threshold"] == 0.6
        assert data["log_level"] == "INFO"
        assert "log_dir" not in data


# =============================================================================
# Runtime Tests
# =============================================================================

class TestRuntime:
    """Test environment-driven access."""

    def test_storage_root_from_env(self, env_storage):
        assert get_storage_root() == env_storage.resolve()

    def test_settings_loaded_from_storage_root(self, env_storage):
        SettingsConfigManager(env_storage).save(
            SplitterConfig(split=SplitSettings(max_pages_per_part=30))
        )
        reload_config()
        assert get_split_settings().max_pages_per_part == 30

    def test_log_dir_default(self, env_storage):
        assert get_log_dir() == env_storage.resolve() / "logs"

    def test_log_dir_from_config(self, env_storage, tmp_path):
        SettingsConfigManager(env_storage).save(SplitterConfig(log_dir=str(tmp_path / "elsewhere")))
        reload_config()
        assert get_log_dir() == (tmp_path / "elsewhere").resolve()

    def test_load_splitter_config(self, tmp_storage):
        SettingsConfigManager(tmp_storage).save(SplitterConfig(log_level="ERROR"))
        assert load_splitter_config(tmp_storage).log_level == "ERROR"
