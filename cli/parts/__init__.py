"""
Part split CLI commands.

Commands for detecting part boundaries, validating cutting instructions
and building cut plans.
"""

from cli.parts.detect import cmd_detect
from cli.parts.validate import cmd_validate
from cli.parts.plan import cmd_plan


def setup_parser(subparsers):
    """Setup detect/validate/plan command parsers."""
    # scoresplit detect <pdf>
    detect_parser = subparsers.add_parser(
        'detect',
        help='Detect part boundaries from the PDF text layer'
    )
    detect_parser.add_argument('pdf', help='Path to a multi-part PDF')
    detect_parser.add_argument(
        '--max-pages',
        type=int,
        default=None,
        help='Only read the first N pages'
    )
    detect_parser.add_argument(
        '--pages',
        action='store_true',
        help='Also list the label chosen for every page'
    )
    detect_parser.add_argument(
        '--json',
        action='store_true',
        help='Output the segmentation result as JSON'
    )
    detect_parser.set_defaults(func=cmd_detect)

    # scoresplit validate <instructions.json> --pages N
    validate_parser = subparsers.add_parser(
        'validate',
        help='Validate cutting instructions against a page count'
    )
    validate_parser.add_argument(
        'instructions',
        help='JSON file: instruction array or {"cuttingInstructions": [...]}'
    )
    validate_parser.add_argument(
        '--pages',
        type=int,
        required=True,
        help='Total pages in the source PDF'
    )
    validate_parser.add_argument(
        '--one-indexed',
        action='store_true',
        help='Page numbers in the file start at 1'
    )
    validate_parser.add_argument(
        '--allow-overlaps',
        action='store_true',
        help='Report overlaps as warnings instead of errors'
    )
    validate_parser.add_argument(
        '--auto-fix',
        action='store_true',
        help='Truncate overlapping ranges'
    )
    validate_parser.add_argument(
        '--detect-gaps',
        action='store_true',
        help='Warn about pages no instruction covers'
    )
    validate_parser.add_argument(
        '--json',
        action='store_true',
        help='Output the validation result as JSON'
    )
    validate_parser.set_defaults(func=cmd_validate)

    # scoresplit plan <pdf> [--llm file] [--headers file]
    plan_parser = subparsers.add_parser(
        'plan',
        help='Build the cut plan for a PDF'
    )
    plan_parser.add_argument('pdf', help='Path to a multi-part PDF')
    plan_parser.add_argument(
        '--llm',
        help='JSON file of 1-indexed classifier instructions (used when there is no text layer)'
    )
    plan_parser.add_argument(
        '--headers',
        help='JSON array of per-page header strings from OCR (used when there is no text layer)'
    )
    plan_parser.add_argument(
        '--json',
        action='store_true',
        help='Output the plan as JSON'
    )
    plan_parser.set_defaults(func=cmd_plan)


__all__ = [
    'setup_parser',
    'cmd_detect',
    'cmd_validate',
    'cmd_plan',
]
