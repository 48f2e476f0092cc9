"""
scoresplit init command - Create the config file with defaults.
"""

from infra.config import SettingsConfigManager, SplitterConfig, get_storage_root


def cmd_init(args):
    """Initialize configuration."""
    storage_root = get_storage_root()
    manager = SettingsConfigManager(storage_root)

    if manager.exists() and not args.force:
        print(f"✗ Config already exists at: {manager.config_path}")
        print("  Use --force to overwrite")
        return

    config = SplitterConfig.with_defaults()
    manager.save(config)
    print(f"✓ Created config at: {manager.config_path}")

    print("\nConfiguration summary:")
    print(f"  Storage root: {storage_root}")
    print(f"  Text layer threshold: {config.split.text_layer_threshold:.0%}")
    print(f"  Segmentation confidence threshold: {config.split.segmentation_confidence_threshold}")
    print(f"  Max pages per part: {config.split.max_pages_per_part}")
    print(f"  Log level: {config.log_level}")
