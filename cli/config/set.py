"""
scoresplit config set command - Set configuration values.
"""

import json

from pydantic import ValidationError

from infra.config import SettingsConfigManager, get_storage_root, reload_config


def cmd_config_set(args):
    """Set a configuration value."""
    manager = SettingsConfigManager(get_storage_root())

    key = args.key
    parsed_value = _parse_value(args.value)

    # Nested keys: "split.max_pages_per_part"
    parts = key.split('.')

    updates = {}
    current = updates
    for part in parts[:-1]:
        current[part] = {}
        current = current[part]
    current[parts[-1]] = parsed_value

    try:
        config = manager.update(updates)
    except ValidationError as e:
        print(f"✗ Failed to set {key}: {e}")
        return

    reload_config()
    print(f"✓ Set {key} = {parsed_value}")

    result = config.model_dump()
    for part in parts:
        result = result.get(part, {}) if isinstance(result, dict) else None
    print(f"  Current value: {result}")


def _parse_value(value: str):
    """
    Parse a string value into appropriate Python type.

    Handles:
    - Booleans (true, false)
    - null / none
    - Numbers (int, float)
    - JSON arrays and objects
    - Strings (default)
    """
    if value.lower() == 'true':
        return True
    if value.lower() == 'false':
        return False
    if value.lower() in ('null', 'none'):
        return None

    try:
        if '.' in value:
            return float(value)
        return int(value)
    except ValueError:
        pass

    if value.startswith('[') or value.startswith('{'):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass

    return value
