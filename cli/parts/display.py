from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pipeline.part_split.label_patterns import CONFIDENCE_HIGH_THRESHOLD
from pipeline.part_split.schemas import (
    CutFile,
    CuttingInstruction,
    SegmentationResult,
    ValidationResult,
)


def _confidence_style(confidence: int) -> str:
    if confidence >= CONFIDENCE_HIGH_THRESHOLD:
        return "green"
    if confidence > 0:
        return "yellow"
    return "red"


def print_segmentation(console: Console, segmentation: SegmentationResult, title: str):
    table = Table(title=f"{title} ({len(segmentation.segments)} segments)")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Label", style="cyan")
    table.add_column("Pages", justify="right")
    table.add_column("Count", justify="right")
    table.add_column("Min conf", justify="right")

    for index, segment in enumerate(segmentation.segments, 1):
        confidences = [
            p.confidence for p in segmentation.per_page_confidence
            if segment.page_start <= p.page_index <= segment.page_end
        ]
        min_conf = min(confidences) if confidences else 0
        table.add_row(
            str(index),
            escape(segment.label),
            f"{segment.page_start + 1}-{segment.page_end + 1}",
            str(segment.page_count),
            f"[{_confidence_style(min_conf)}]{min_conf}[/]",
        )

    console.print(table)
    style = _confidence_style(segmentation.segmentation_confidence)
    source = "text layer" if segmentation.from_text_layer else "page headers"
    console.print(
        f"Segmentation confidence: [{style}]{segmentation.segmentation_confidence}%[/] (from {source})"
    )


def print_instructions(
    console: Console,
    instructions: Sequence[CuttingInstruction],
    files: Optional[Sequence[CutFile]] = None,
    title: str = "Cutting instructions",
):
    table = Table(title=f"{title} ({len(instructions)})")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Part", style="cyan")
    table.add_column("Instrument")
    table.add_column("Section")
    table.add_column("Key")
    table.add_column("Pages", justify="right")
    if files:
        table.add_column("File", style="dim")

    filenames = [f.filename for f in files] if files else []
    for index, instruction in enumerate(instructions):
        row = [
            str(instruction.part_number),
            escape(instruction.part_name),
            escape(instruction.instrument),
            instruction.section,
            instruction.transposition,
            f"{instruction.page_start + 1}-{instruction.page_end + 1}",
        ]
        if files:
            row.append(escape(filenames[index]) if index < len(filenames) else "")
        table.add_row(*row)

    console.print(table)


def print_messages(console: Console, validation: ValidationResult):
    for error in validation.errors:
        console.print(f"[red]❌ {escape(error)}[/]")
    for warning in validation.warnings:
        console.print(f"[yellow]⚠️  {escape(warning)}[/]")
