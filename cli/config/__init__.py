"""
Config CLI commands.

Commands for creating, showing and editing {storage_root}/config.yaml.
"""

from cli.config.init import cmd_init
from cli.config.show import cmd_config_show
from cli.config.set import cmd_config_set


def setup_parser(subparsers):
    """Setup config command parser."""
    # scoresplit init
    init_parser = subparsers.add_parser(
        'init',
        help='Create config.yaml with default settings'
    )
    init_parser.add_argument(
        '--force',
        action='store_true',
        help='Overwrite existing config'
    )
    init_parser.set_defaults(func=cmd_init)

    # scoresplit config ...
    config_parser = subparsers.add_parser(
        'config',
        help='Manage configuration'
    )
    config_subparsers = config_parser.add_subparsers(
        dest='config_command',
        help='Config command'
    )
    config_subparsers.required = True

    # scoresplit config show
    show_parser = config_subparsers.add_parser(
        'show',
        help='Show configuration'
    )
    show_parser.add_argument(
        '--json',
        action='store_true',
        help='Output as JSON'
    )
    show_parser.set_defaults(func=cmd_config_show)

    # scoresplit config set <key> <value>
    set_parser = config_subparsers.add_parser(
        'set',
        help='Set a configuration value'
    )
    set_parser.add_argument(
        'key',
        help='Config key (e.g., split.max_pages_per_part, log_level)'
    )
    set_parser.add_argument(
        'value',
        help='Value to set'
    )
    set_parser.set_defaults(func=cmd_config_set)


__all__ = [
    'setup_parser',
    'cmd_init',
    'cmd_config_show',
    'cmd_config_set',
]
