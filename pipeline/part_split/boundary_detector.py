"""
Part Boundary Detection

Deterministically segments a multi-part PDF into per-instrument parts from
page header labels.

Passes (order matters, each returns a new list):
1. label_pages            - header text -> canonical label
2. fill_forward           - unlabelled pages inherit the previous label
3. smooth_blips           - single-page label flips are treated as noise
4. fill_backward          - leading unlabelled pages inherit the first label
5. add_unanalyzed_pages   - pages without headers become "Unknown Part"
6. segment_pages          - consecutive equal labels -> PartSegment
7. build_segment_instructions - 0-indexed CuttingInstructions for the splitter
8. compute_segmentation_confidence
"""

import logging
import math
from typing import List, Sequence

from .header_labels import normalise_label_from_header
from .instrument_naming import normalize_instrument_label
from .label_patterns import (
    CONFIDENCE_BACKWARD_FILLED,
    CONFIDENCE_FORWARD_FILLED,
    CONFIDENCE_HIGH_THRESHOLD,
    CONFIDENCE_SMOOTHED_MAX,
    CONFIDENCE_UNANALYZED,
    UNKNOWN_PART_LABEL,
)
from .schemas import (
    CuttingInstruction,
    PageConfidence,
    PageHeader,
    PageLabel,
    PartSegment,
    SegmentBoundary,
    SegmentationResult,
)

logger = logging.getLogger(__name__)


def label_pages(page_headers: Sequence[PageHeader]) -> List[PageLabel]:
    labels = []
    for header in page_headers:
        result = normalise_label_from_header(header.header_text or header.full_text)
        labels.append(PageLabel(
            page_index=header.page_index,
            label=result.label if result else "",
            raw_header=header.header_text,
            confidence=result.confidence if result else 0,
        ))
    return labels


def fill_forward(labels: Sequence[PageLabel]) -> List[PageLabel]:
    """Copy the last seen label into unlabelled pages that follow it."""
    filled = []
    last_label = ""
    for page in labels:
        if page.label:
            last_label = page.label
            filled.append(page)
        elif last_label:
            filled.append(page.model_copy(update={
                "label": last_label,
                "confidence": CONFIDENCE_FORWARD_FILLED,
            }))
        else:
            filled.append(page)
    return filled


def smooth_blips(labels: Sequence[PageLabel]) -> List[PageLabel]:
    """
    Replace single-page label changes flanked by the same label on both sides.

    A blip is usually an OCR artifact or a title page spilling over. The left
    neighbour is the already-smoothed page, so A B A B A collapses to all A.
    Runs of two or more differing pages are left alone.
    """
    if len(labels) <= 2:
        return list(labels)

    smoothed = [labels[0]]
    for i in range(1, len(labels) - 1):
        prev = smoothed[i - 1]
        curr = labels[i]
        nxt = labels[i + 1]

        if prev.label == nxt.label and curr.label != prev.label:
            smoothed.append(curr.model_copy(update={
                "label": prev.label,
                "confidence": min(curr.confidence, CONFIDENCE_SMOOTHED_MAX),
            }))
        else:
            smoothed.append(curr)
    smoothed.append(labels[-1])
    return smoothed


def fill_backward(labels: Sequence[PageLabel]) -> List[PageLabel]:
    """Give pages before the first labelled page that page's label."""
    first_labelled = next((p for p in labels if p.label), None)
    if first_labelled is None:
        return list(labels)

    filled = []
    leading = True
    for page in labels:
        if leading and not page.label:
            filled.append(page.model_copy(update={
                "label": first_labelled.label,
                "confidence": CONFIDENCE_BACKWARD_FILLED,
            }))
        else:
            leading = False
            filled.append(page)
    return filled


def add_unanalyzed_pages(
    labels: Sequence[PageLabel],
    header_count: int,
    total_pages: int,
) -> List[PageLabel]:
    """
    Add "Unknown Part" labels for pages that never had a header extracted.

    Labels are deliberately not propagated into these pages: nothing is
    known about them.
    """
    if total_pages <= header_count:
        return list(labels)

    covered = {p.page_index for p in labels}
    result = list(labels)
    for page_index in range(total_pages):
        if page_index not in covered:
            result.append(PageLabel(
                page_index=page_index,
                label=UNKNOWN_PART_LABEL,
                raw_header="",
                confidence=CONFIDENCE_UNANALYZED,
            ))

    return sorted(result, key=lambda p: p.page_index)


def segment_pages(labels: Sequence[PageLabel]) -> List[PartSegment]:
    """Group consecutive pages with the same label into segments."""
    segments: List[PartSegment] = []
    if not labels:
        return segments

    seg_start = 0
    current_label = labels[0].label or UNKNOWN_PART_LABEL

    for i in range(1, len(labels) + 1):
        next_label = (labels[i].label or UNKNOWN_PART_LABEL) if i < len(labels) else None
        if next_label != current_label:
            segments.append(PartSegment(
                label=current_label,
                page_start=labels[seg_start].page_index,
                page_end=labels[i - 1].page_index,
                page_count=i - seg_start,
            ))
            seg_start = i
            current_label = next_label

    return segments


def build_segment_instructions(segments: Sequence[PartSegment]) -> List[CuttingInstruction]:
    instructions = []
    for idx, segment in enumerate(segments):
        normalized = normalize_instrument_label(segment.label)
        instructions.append(CuttingInstruction(
            part_name=segment.label,
            instrument=segment.label,
            section=normalized.section,
            transposition=normalized.transposition,
            part_number=idx + 1,
            page_range=(segment.page_start, segment.page_end),
        ))
    return instructions


def compute_segmentation_confidence(labels: Sequence[PageLabel]) -> int:
    """Share of pages labelled with high confidence, 0-100.

    Propagated and smoothed pages count in the denominator only.
    """
    if not labels:
        return 0
    confident = sum(1 for p in labels if p.confidence >= CONFIDENCE_HIGH_THRESHOLD)
    # Halves round up
    return math.floor(100 * confident / len(labels) + 0.5)


def detect_part_boundaries(
    page_headers: Sequence[PageHeader],
    total_pages: int,
    from_text_layer: bool,
) -> SegmentationResult:
    """
    Segment pages into parts from page header labels.

    Headers come either from the PDF text layer or from vision header OCR;
    from_text_layer is carried through to the result unchanged.
    """
    if not page_headers:
        return SegmentationResult(from_text_layer=from_text_layer)

    page_labels = label_pages(page_headers)
    page_labels = fill_forward(page_labels)
    page_labels = smooth_blips(page_labels)
    page_labels = fill_backward(page_labels)
    page_labels = add_unanalyzed_pages(page_labels, len(page_headers), total_pages)

    segments = segment_pages(page_labels)
    cutting_instructions = build_segment_instructions(segments)
    segmentation_confidence = compute_segmentation_confidence(page_labels)

    logger.info(
        f"Part boundary detection complete: {len(segments)} segments over {total_pages} pages, "
        f"confidence {segmentation_confidence}, from_text_layer={from_text_layer}"
    )

    return SegmentationResult(
        page_labels=page_labels,
        segments=segments,
        cutting_instructions=cutting_instructions,
        segmentation_confidence=segmentation_confidence,
        from_text_layer=from_text_layer,
        segment_boundaries=[
            SegmentBoundary(label=s.label, start=s.page_start, end=s.page_end)
            for s in segments
        ],
        per_page_confidence=[
            PageConfidence(page_index=p.page_index, confidence=p.confidence, label=p.label)
            for p in page_labels
        ],
    )
