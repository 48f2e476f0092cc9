"""
Quality gates for automatic ingestion.

If any gate fails, the upload must stay in manual review; the reasons are
shown to the operator verbatim.
"""

from typing import Optional, Sequence

from .cutting_instructions import GAP_PART_NUMBER_BASE
from .label_patterns import CONFIDENCE_HIGH_THRESHOLD, FORBIDDEN_LABELS
from .schemas import CuttingInstruction, QualityGateResult


SCORE_SECTIONS = frozenset({
    'Score', 'score', 'FULL_SCORE', 'CONDUCTOR_SCORE', 'CONDENSED_SCORE',
})

# Multi-part documents longer than this must produce at least two parts
MULTI_PART_MIN_PAGES = 10


def is_forbidden_label(value: Optional[str]) -> bool:
    """True when a label is blank or an LLM sentinel like "null" / "N/A"."""
    stripped = (value or "").strip()
    return not stripped or stripped.lower() in FORBIDDEN_LABELS


def is_gap_filler(instruction: CuttingInstruction) -> bool:
    return instruction.part_number >= GAP_PART_NUMBER_BASE


def evaluate_quality_gates(
    instructions: Sequence[CuttingInstruction],
    total_pages: int,
    max_pages_per_part: int = 12,
    segmentation_confidence: Optional[int] = None,
    segmentation_confidence_threshold: int = CONFIDENCE_HIGH_THRESHOLD,
    is_multi_part: bool = True,
    extraction_confidence: Optional[int] = None,
) -> QualityGateResult:
    """
    Evaluate all gates for one upload.

    final_confidence is min(extraction, segmentation) when both are known,
    otherwise whichever one is known (0 when neither is).
    """
    reasons = []
    parts = [i for i in instructions if not is_gap_filler(i)]
    fillers = [i for i in instructions if is_gap_filler(i)]

    forbidden = next(
        (p for p in parts if is_forbidden_label(p.instrument) or is_forbidden_label(p.part_name)),
        None,
    )
    if forbidden is not None:
        reasons.append(
            f'Part with null/unknown label: instrument="{forbidden.instrument}" '
            f'partName="{forbidden.part_name}"'
        )

    oversized = next(
        (p for p in parts
         if p.section not in SCORE_SECTIONS and (p.page_end - p.page_start + 1) > max_pages_per_part),
        None,
    )
    if oversized is not None:
        page_count = oversized.page_end - oversized.page_start + 1
        reasons.append(
            f'Non-score part "{oversized.part_name}" has {page_count} pages (max {max_pages_per_part})'
        )

    if is_multi_part and total_pages > MULTI_PART_MIN_PAGES and len(parts) < 2:
        reasons.append(
            f"Multi-part document with {total_pages} pages but only {len(parts)} part(s)"
        )

    if segmentation_confidence is not None and segmentation_confidence < segmentation_confidence_threshold:
        reasons.append(
            f"segmentationConfidence {segmentation_confidence} < threshold {segmentation_confidence_threshold}"
        )

    if fillers:
        unassigned = sum(f.page_end - f.page_start + 1 for f in fillers)
        reasons.append(f"{unassigned} page(s) not assigned to any part")

    known = [c for c in (extraction_confidence, segmentation_confidence) if c is not None]
    final_confidence = min(known) if known else 0

    return QualityGateResult(
        failed=bool(reasons),
        reasons=reasons,
        final_confidence=final_confidence,
    )
