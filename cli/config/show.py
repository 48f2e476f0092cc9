"""
scoresplit config show command - Display configuration.
"""

import json

from infra.config import SettingsConfigManager, get_storage_root


def cmd_config_show(args):
    """Show configuration (defaults when no config file exists)."""
    manager = SettingsConfigManager(get_storage_root())
    config = manager.load()

    if args.json:
        print(json.dumps(config.model_dump(), indent=2, default=str))
        return

    source = manager.config_path if manager.exists() else f"{manager.config_path} (not created, showing defaults)"
    print(f"\n📋 Configuration")
    print(f"   Path: {source}\n")

    print("Split settings:")
    for name, value in config.split.model_dump().items():
        print(f"  {name}: {value}")

    print("\nLogging:")
    print(f"  log_level: {config.log_level}")
    print(f"  log_dir: {config.log_dir or '(default: {storage_root}/logs)'}")
    print()
