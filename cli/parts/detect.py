import sys

from rich.console import Console
from rich.markup import escape

from infra.config import get_split_settings
from pipeline.part_split.boundary_detector import detect_part_boundaries
from pipeline.part_split.text_extractor import extract_pdf_page_headers
from cli.helpers import read_pdf_bytes
from cli.parts.display import print_segmentation


def cmd_detect(args):
    """Detect part boundaries from a PDF's text layer."""
    pdf_bytes = read_pdf_bytes(args.pdf)
    settings = get_split_settings()

    extraction = extract_pdf_page_headers(pdf_bytes, max_pages=args.max_pages, settings=settings)
    if extraction.total_pages == 0:
        print(f"❌ Could not read PDF: {args.pdf}")
        sys.exit(1)

    segmentation = detect_part_boundaries(
        extraction.page_headers,
        extraction.total_pages,
        from_text_layer=True,
    )

    if args.json:
        print(segmentation.model_dump_json(indent=2))
        return

    console = Console()
    coverage = round(extraction.text_layer_coverage * 100)
    console.print(
        f"\n📄 {escape(args.pdf)}: {extraction.total_pages} pages, "
        f"{coverage}% with text (text layer: {'yes' if extraction.has_text_layer else 'no'})"
    )
    if not extraction.has_text_layer:
        print("⚠️  Little or no embedded text; labels below are unreliable (scanned PDF?)")

    print_segmentation(console, segmentation, title="Detected parts")

    if args.pages:
        for label in segmentation.page_labels:
            raw = f"  [dim]{escape(label.raw_header[:60])}[/]" if label.raw_header else ""
            console.print(f"  p{label.page_index + 1:>4}  {label.confidence:>3}  {escape(label.label)}{raw}")
