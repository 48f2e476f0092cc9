"""
Cut planning

Chooses how an upload gets its cutting instructions and converges every
path on the validator:

1. Text layer  - coverage >= threshold and the detector finds a usable
                 segmentation (more than one segment, or confidence >= 60)
2. Vision      - per-page header strings from an upstream OCR step
3. LLM         - raw, untrusted, 1-indexed instructions from a classifier
4. None        - nothing usable; the upload goes to manual review

Uncovered pages become "Unlabelled Pages" parts, every instruction gets a
unique file name, and quality gates decide whether review is required.
"""

import logging
from typing import Any, List, Optional, Sequence

from infra.config.schemas import SplitSettings
from infra.pipeline.logger import PipelineLogger
from .boundary_detector import detect_part_boundaries
from .cutting_instructions import (
    build_gap_instructions,
    generate_unique_filename,
    sanitize_cutting_instructions_for_split,
    validate_and_normalize_instructions,
)
from .quality_gates import evaluate_quality_gates
from .schemas import (
    CutFile,
    CutPlan,
    CuttingInstruction,
    PageHeader,
    PdfTextExtractionResult,
    SegmentationResult,
    ValidationOptions,
    ValidationResult,
)

logger = logging.getLogger(__name__)

# Below this a single-segment text-layer result is not trusted
DETERMINISTIC_MIN_CONFIDENCE = 60


def _usable(segmentation: SegmentationResult) -> bool:
    return (
        len(segmentation.segments) > 1
        or segmentation.segmentation_confidence >= DETERMINISTIC_MIN_CONFIDENCE
    )


def _validate_segmentation(segmentation: SegmentationResult, total_pages: int) -> ValidationResult:
    raw = [i.model_dump() for i in segmentation.cutting_instructions]
    return validate_and_normalize_instructions(raw, total_pages, ValidationOptions(detect_gaps=True))


def assign_filenames(instructions: Sequence[CuttingInstruction]) -> List[CutFile]:
    return [
        CutFile(
            filename=generate_unique_filename(i.part_name, i.page_start, i.page_end, index),
            instruction=i,
        )
        for index, i in enumerate(instructions)
    ]


def plan_cuts(
    extraction: PdfTextExtractionResult,
    llm_instructions: Optional[Sequence[Any]] = None,
    vision_headers: Optional[Sequence[PageHeader]] = None,
    settings: Optional[SplitSettings] = None,
    pipeline_logger: Optional[PipelineLogger] = None,
) -> CutPlan:
    """
    Build the cutting plan for one uploaded PDF.

    Args:
        extraction: Text-layer extraction result (total_pages comes from here)
        llm_instructions: Raw 1-indexed instructions from an LLM classifier
        vision_headers: Per-page headers recognised from page images
        settings: Thresholds (default: SplitSettings())
        pipeline_logger: Optional per-upload JSONL logger

    Returns:
        CutPlan with validated instructions, file names and review status
    """
    settings = settings or SplitSettings()
    total_pages = extraction.total_pages
    segmentation = None
    validation = None
    source = "none"

    if extraction.page_headers and extraction.text_layer_coverage >= settings.text_layer_threshold:
        candidate = detect_part_boundaries(extraction.page_headers, total_pages, from_text_layer=True)
        if _usable(candidate):
            segmentation = candidate
            source = "text_layer"
        else:
            logger.info(
                f"Text-layer segmentation not trusted ({len(candidate.segments)} segment, "
                f"confidence {candidate.segmentation_confidence})"
            )

    if segmentation is None and vision_headers:
        segmentation = detect_part_boundaries(vision_headers, total_pages, from_text_layer=False)
        source = "vision"

    if segmentation is not None:
        validation = _validate_segmentation(segmentation, total_pages)
    elif llm_instructions is not None:
        source = "llm"
        validation = validate_and_normalize_instructions(
            llm_instructions,
            total_pages,
            ValidationOptions(
                one_indexed=True,
                auto_fix_overlaps=settings.auto_fix_overlaps,
                detect_gaps=True,
            ),
        )
    else:
        validation = ValidationResult(
            errors=["No usable text layer, page headers or classifier instructions"],
            is_valid=False,
        )

    instructions = list(validation.instructions)

    if settings.fill_gaps and total_pages > 0 and not validation.errors:
        gap_instructions = build_gap_instructions(instructions, total_pages)
        if gap_instructions:
            instructions.extend(gap_instructions)
            validation.warnings.append(
                f"{len(gap_instructions)} uncovered page range(s) were added as 'Unlabelled' parts"
            )

    instructions = sanitize_cutting_instructions_for_split(instructions)
    files = assign_filenames(instructions) if validation.is_valid else []

    quality = evaluate_quality_gates(
        instructions,
        total_pages,
        max_pages_per_part=settings.max_pages_per_part,
        segmentation_confidence=segmentation.segmentation_confidence if segmentation else None,
        segmentation_confidence_threshold=settings.segmentation_confidence_threshold,
    )

    review_reasons = list(validation.errors) + quality.reasons
    requires_review = not validation.is_valid or quality.failed

    summary = (
        f"Cut plan ({source}): {len(instructions)} instructions over {total_pages} pages, "
        f"{len(validation.errors)} errors, {len(validation.warnings)} warnings, "
        f"review required: {requires_review}"
    )
    logger.info(summary)
    if pipeline_logger is not None:
        pipeline_logger.info(summary, source=source)
        for cut_file in files:
            i = cut_file.instruction
            pipeline_logger.cut(i.part_name, i.page_start + 1, i.page_end + 1, filename=cut_file.filename)
        for reason in review_reasons:
            pipeline_logger.review(reason)

    return CutPlan(
        source=source,
        total_pages=total_pages,
        instructions=instructions,
        files=files,
        validation=validation,
        segmentation=segmentation,
        quality=quality,
        requires_review=requires_review,
        review_reasons=review_reasons,
    )
