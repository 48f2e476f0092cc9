"""
Part split: find where each instrument part starts and ends in a multi-part
sheet-music PDF, and validate the cutting instructions handed to the splitter.

Usage:
    from pipeline.part_split import extract_pdf_page_headers, plan_cuts

    extraction = extract_pdf_page_headers(pdf_bytes)
    plan = plan_cuts(extraction, llm_instructions=raw_instructions)
"""

from .schemas import (
    PageHeader,
    PdfTextExtractionResult,
    HeaderLabel,
    PageLabel,
    PartSegment,
    SegmentBoundary,
    PageConfidence,
    CuttingInstruction,
    SegmentationResult,
    NormalizedInstruction,
    Gap,
    Overlap,
    ValidationOptions,
    ValidationResult,
    QualityGateResult,
    CutFile,
    CutPlan,
)
from .text_extractor import extract_pdf_page_headers, headers_from_strings
from .header_labels import normalise_label_from_header
from .boundary_detector import detect_part_boundaries
from .cutting_instructions import (
    GAP_PART_NUMBER_BASE,
    to_zero_indexed,
    to_one_indexed,
    validate_and_normalize_instructions,
    detect_overlaps,
    detect_gaps,
    split_overlapping_ranges,
    build_gap_instructions,
    generate_unique_filename,
    sanitize_cutting_instructions_for_split,
)
from .quality_gates import evaluate_quality_gates, is_forbidden_label
from .planner import plan_cuts


__all__ = [
    "PageHeader",
    "PdfTextExtractionResult",
    "HeaderLabel",
    "PageLabel",
    "PartSegment",
    "SegmentBoundary",
    "PageConfidence",
    "CuttingInstruction",
    "SegmentationResult",
    "NormalizedInstruction",
    "Gap",
    "Overlap",
    "ValidationOptions",
    "ValidationResult",
    "QualityGateResult",
    "CutFile",
    "CutPlan",
    "extract_pdf_page_headers",
    "headers_from_strings",
    "normalise_label_from_header",
    "detect_part_boundaries",
    "GAP_PART_NUMBER_BASE",
    "to_zero_indexed",
    "to_one_indexed",
    "validate_and_normalize_instructions",
    "detect_overlaps",
    "detect_gaps",
    "split_overlapping_ranges",
    "build_gap_instructions",
    "generate_unique_filename",
    "sanitize_cutting_instructions_for_split",
    "evaluate_quality_gates",
    "is_forbidden_label",
    "plan_cuts",
]
