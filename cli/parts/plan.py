from rich.console import Console
from rich.markup import escape

from infra.config import get_split_settings
from pipeline.part_split.planner import plan_cuts
from pipeline.part_split.text_extractor import extract_pdf_page_headers, headers_from_strings
from cli.helpers import (
    open_run_logger,
    read_header_strings,
    read_json_file,
    read_pdf_bytes,
    unwrap_instructions,
)
from cli.parts.display import print_instructions, print_messages, print_segmentation


def cmd_plan(args):
    """Build the full cut plan for a PDF."""
    pdf_bytes = read_pdf_bytes(args.pdf)
    settings = get_split_settings()

    llm_instructions = unwrap_instructions(read_json_file(args.llm)) if args.llm else None
    header_strings = read_header_strings(args.headers)
    vision_headers = headers_from_strings(header_strings) if header_strings else None

    with open_run_logger(args.pdf, "plan") as run_logger:
        extraction = extract_pdf_page_headers(pdf_bytes, settings=settings)
        run_logger.info(
            f"Extracted {len(extraction.page_headers)}/{extraction.total_pages} pages",
            stage="extract",
        )
        plan = plan_cuts(
            extraction,
            llm_instructions=llm_instructions,
            vision_headers=vision_headers,
            settings=settings,
            pipeline_logger=run_logger,
        )

    if args.json:
        print(plan.model_dump_json(indent=2))
        return

    console = Console()
    console.print(f"\n📄 {escape(args.pdf)}: {plan.total_pages} pages, instructions from [bold]{plan.source}[/]")

    if plan.segmentation is not None:
        print_segmentation(console, plan.segmentation, title="Detected parts")

    if plan.instructions:
        print_instructions(console, plan.instructions, files=plan.files, title="Cut plan")
    print_messages(console, plan.validation)

    if plan.requires_review:
        console.print("\n[bold yellow]⏳ Manual review required:[/]")
        for reason in plan.review_reasons:
            console.print(f"  - {escape(reason)}")
    else:
        console.print(
            f"\n[green]✅ Ready to split ({len(plan.files)} files, "
            f"confidence {plan.quality.final_confidence})[/]"
        )
