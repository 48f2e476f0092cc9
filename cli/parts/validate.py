import sys

from rich.console import Console

from pipeline.part_split.cutting_instructions import validate_and_normalize_instructions
from pipeline.part_split.schemas import ValidationOptions
from cli.helpers import read_json_file, unwrap_instructions
from cli.parts.display import print_instructions, print_messages


def cmd_validate(args):
    """Validate a JSON file of cutting instructions against a page count."""
    raw = unwrap_instructions(read_json_file(args.instructions))

    options = ValidationOptions(
        one_indexed=args.one_indexed,
        allow_overlaps=args.allow_overlaps,
        auto_fix_overlaps=args.auto_fix,
        detect_gaps=args.detect_gaps,
    )
    result = validate_and_normalize_instructions(raw, args.pages, options)

    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        console = Console()
        if result.instructions:
            print_instructions(console, result.instructions, title="Normalized instructions")
        print_messages(console, result)
        if result.is_valid:
            console.print(f"[green]✅ Valid ({len(result.instructions)} instructions)[/]")

    if not result.is_valid:
        sys.exit(1)
