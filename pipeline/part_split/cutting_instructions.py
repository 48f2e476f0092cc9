"""
Cutting Instruction Validation

Validates and normalises cutting instructions before they reach the PDF
splitter. Instructions come from the boundary detector, from a human, or
from an LLM classifier whose output is untrusted and usually 1-indexed.

Data-quality problems never raise. Every problem is reported as a string in
ValidationResult.errors (blocks automatic ingestion) or
ValidationResult.warnings (shown to the operator, does not block).

Steps:
1. Shape checks (array, element, part name, integer page numbers)
2. Optional 1-indexed -> 0-indexed conversion
3. Clamp to [0, total_pages - 1]
4. Reject start > end
5. Overlap detection (error, warning, or auto-fix)
6. Optional gap detection
"""

import logging
import math
import re
from dataclasses import replace
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError

from .schemas import (
    CuttingInstruction,
    Gap,
    NormalizedInstruction,
    Overlap,
    ValidationOptions,
    ValidationResult,
)

logger = logging.getLogger(__name__)


GAP_PART_NUMBER_BASE = 9900

UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9 &_-]")


def to_zero_indexed(page_range: Tuple[int, int]) -> Tuple[int, int]:
    return (max(0, page_range[0] - 1), max(0, page_range[1] - 1))


def to_one_indexed(page_range: Tuple[int, int]) -> Tuple[int, int]:
    return (page_range[0] + 1, page_range[1] + 1)


def _as_int(value: Any) -> Optional[int]:
    """Integer value of a JSON number, or None if it is not a whole number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    return None


def _field(raw: Mapping[str, Any], *names: str) -> Any:
    for name in names:
        if name in raw:
            return raw[name]
    return None


def _has_field(raw: Mapping[str, Any], *names: str) -> bool:
    return any(name in raw for name in names)


def _extract_metadata(raw: Mapping[str, Any]) -> dict:
    instrument = raw.get("instrument")
    section = raw.get("section")
    transposition = raw.get("transposition")
    part_number = _as_int(_field(raw, "partNumber", "part_number"))

    return {
        "instrument": instrument if isinstance(instrument, str) and instrument.strip() else "Unknown",
        "section": section if isinstance(section, str) else "Other",
        "transposition": transposition if isinstance(transposition, str) else "C",
        "part_number": part_number,
    }


def _normalize_element(index: int, raw: Any, errors: List[str]) -> Optional[NormalizedInstruction]:
    """Shape-check one raw instruction; append an error and return None on failure."""
    if not isinstance(raw, Mapping):
        errors.append(f"Instruction {index}: Must be an object")
        return None

    part_name = _field(raw, "partName", "part_name")
    if not isinstance(part_name, str):
        errors.append(f"Instruction {index}: Missing or invalid partName")
        return None

    part_name = part_name.strip()
    if not part_name:
        errors.append(f"Instruction {index}: partName cannot be empty")
        return None

    page_range = _field(raw, "pageRange", "page_range")

    if isinstance(page_range, (list, tuple)) and len(page_range) >= 2:
        page_start = _as_int(page_range[0])
        if page_start is None:
            errors.append(f"Instruction {index} ({part_name}): pageRange[0] must be a finite integer")
            return None
        page_end = _as_int(page_range[1])
        if page_end is None:
            errors.append(f"Instruction {index} ({part_name}): pageRange[1] must be a finite integer")
            return None
    elif _has_field(raw, "pageStart", "page_start") and _has_field(raw, "pageEnd", "page_end"):
        page_start = _as_int(_field(raw, "pageStart", "page_start"))
        if page_start is None:
            errors.append(f"Instruction {index} ({part_name}): pageStart must be an integer")
            return None
        page_end = _as_int(_field(raw, "pageEnd", "page_end"))
        if page_end is None:
            errors.append(f"Instruction {index} ({part_name}): pageEnd must be an integer")
            return None
    else:
        errors.append(f"Instruction {index} ({part_name}): Missing pageRange or pageStart/pageEnd")
        return None

    return NormalizedInstruction(
        part_name=part_name,
        page_start=page_start,
        page_end=page_end,
        original_index=index,
        metadata=_extract_metadata(raw),
    )


def convert_one_to_zero_indexed(instructions: Sequence[NormalizedInstruction]) -> List[NormalizedInstruction]:
    converted = []
    for instruction in instructions:
        page_start, page_end = to_zero_indexed((instruction.page_start, instruction.page_end))
        converted.append(replace(instruction, page_start=page_start, page_end=page_end))
    return converted


def clamp_ranges(instructions: Sequence[NormalizedInstruction], total_pages: int) -> List[NormalizedInstruction]:
    """Clamp both ends independently into [0, total_pages - 1]."""
    last_page = total_pages - 1
    return [
        replace(
            i,
            page_start=max(0, min(i.page_start, last_page)),
            page_end=max(0, min(i.page_end, last_page)),
        )
        for i in instructions
    ]


def detect_overlaps(instructions: Sequence[NormalizedInstruction]) -> List[Overlap]:
    """
    Find every pair of instructions whose inclusive ranges intersect.

    Ranges that share an endpoint overlap; adjacent ranges
    (end + 1 == next start) do not.
    """
    overlaps = []
    for i in range(len(instructions)):
        for j in range(i + 1, len(instructions)):
            a = instructions[i]
            b = instructions[j]

            overlap_start = max(a.page_start, b.page_start)
            overlap_end = min(a.page_end, b.page_end)

            if overlap_start <= overlap_end:
                overlaps.append(Overlap(
                    part1=a.part_name,
                    part2=b.part_name,
                    overlap=(overlap_start, overlap_end),
                ))
    return overlaps


def _uncovered_runs(covered: Sequence[bool]) -> List[Tuple[int, int]]:
    runs = []
    run_start = None
    for page, is_covered in enumerate(covered):
        if not is_covered:
            if run_start is None:
                run_start = page
        elif run_start is not None:
            runs.append((run_start, page - 1))
            run_start = None
    if run_start is not None:
        runs.append((run_start, len(covered) - 1))
    return runs


def _coverage(ranges: Sequence[Tuple[int, int]], total_pages: int) -> List[bool]:
    covered = [False] * max(total_pages, 0)
    for start, end in ranges:
        for page in range(max(start, 0), min(end, total_pages - 1) + 1):
            covered[page] = True
    return covered


def detect_gaps(instructions: Sequence[NormalizedInstruction], total_pages: int) -> List[Gap]:
    """Maximal runs of pages in [0, total_pages) not covered by any instruction."""
    covered = _coverage([(i.page_start, i.page_end) for i in instructions], total_pages)
    return [Gap(start=start, end=end) for start, end in _uncovered_runs(covered)]


def split_overlapping_ranges(instructions: Sequence[NormalizedInstruction]) -> List[NormalizedInstruction]:
    """
    Resolve overlaps by truncating the earlier part at the start of the next.

    Instructions are sorted by (page_start, input position) and only
    neighbours in that order are compared, so this is a greedy left-to-right
    pass. A part that would be left with no pages is dropped.

    Example: A pages 0-5, B pages 3-7 -> A pages 0-2, B pages 3-7
    """
    if len(instructions) <= 1:
        return list(instructions)

    ordered = sorted(enumerate(instructions), key=lambda pair: (pair[1].page_start, pair[0]))
    ordered = [instruction for _, instruction in ordered]

    result = []
    for i, current in enumerate(ordered):
        nxt = ordered[i + 1] if i + 1 < len(ordered) else None

        if nxt is not None and current.page_end >= nxt.page_start:
            adjusted_end = nxt.page_start - 1
            if adjusted_end >= current.page_start:
                result.append(replace(current, page_end=adjusted_end))
            else:
                logger.debug(f"Dropping '{current.part_name}': no pages left after overlap split")
        else:
            result.append(current)

    return result


def _overlap_message(overlap: Overlap) -> str:
    return (
        f'Overlap detected between "{overlap.part1}" and "{overlap.part2}" '
        f"on pages {overlap.overlap[0]}-{overlap.overlap[1]}"
    )


def validate_and_normalize_instructions(
    raw_instructions: Any,
    total_pages: int,
    options: Optional[ValidationOptions] = None,
) -> ValidationResult:
    """
    Validate and normalise raw cutting instructions.

    Args:
        raw_instructions: Untrusted list of instruction objects
        total_pages: Page count of the source PDF
        options: Indexing and overlap/gap handling

    Returns:
        ValidationResult with 0-indexed instructions, warnings and errors
    """
    options = options or ValidationOptions()
    warnings: List[str] = []
    errors: List[str] = []

    if not isinstance(raw_instructions, (list, tuple)):
        errors.append("Instructions must be an array")
        return ValidationResult(warnings=warnings, errors=errors, is_valid=False)

    if len(raw_instructions) == 0:
        warnings.append("No cutting instructions provided")
        return ValidationResult(warnings=warnings, errors=errors, is_valid=True)

    if not isinstance(total_pages, int) or isinstance(total_pages, bool) or total_pages <= 0:
        errors.append(f"Invalid totalPages: {total_pages}. Must be greater than 0")
        return ValidationResult(warnings=warnings, errors=errors, is_valid=False)

    normalized = []
    for index, raw in enumerate(raw_instructions):
        instruction = _normalize_element(index, raw, errors)
        if instruction is not None:
            normalized.append(instruction)

    if not normalized and errors:
        return ValidationResult(warnings=warnings, errors=errors, is_valid=False)

    if options.one_indexed:
        normalized = convert_one_to_zero_indexed(normalized)
        logger.info(f"Converted {len(normalized)} instructions from 1-indexed to 0-indexed")

    normalized = clamp_ranges(normalized, total_pages)

    processed = []
    for instruction in normalized:
        if instruction.page_start > instruction.page_end:
            errors.append(
                f'Part "{instruction.part_name}": pageStart ({instruction.page_start}) '
                f"cannot be greater than pageEnd ({instruction.page_end})"
            )
        else:
            processed.append(instruction)

    overlaps = detect_overlaps(processed)
    if overlaps:
        tolerate = options.allow_overlaps or options.auto_fix_overlaps
        target = warnings if tolerate else errors
        for overlap in overlaps:
            target.append(_overlap_message(overlap))

        if options.auto_fix_overlaps:
            processed = split_overlapping_ranges(processed)
            warnings.append("Auto-fixed overlapping ranges")

    gaps = None
    if options.detect_gaps:
        gaps = detect_gaps(processed, total_pages)
        for gap in gaps:
            warnings.append(f"Gap detected: pages {gap.start}-{gap.end} are not covered by any part")

    is_valid = not errors and len(processed) > 0

    logger.info(
        f"Cutting instructions validated: {len(processed)} instructions, "
        f"{len(errors)} errors, {len(warnings)} warnings, {len(overlaps)} overlaps, "
        f"{len(gaps) if gaps is not None else 0} gaps, valid={is_valid}"
    )

    instructions = []
    for idx, item in enumerate(processed):
        metadata = item.metadata
        part_number = metadata.get("part_number")
        instructions.append(CuttingInstruction(
            part_name=item.part_name,
            instrument=metadata.get("instrument", "Unknown"),
            section=metadata.get("section", "Other"),
            transposition=metadata.get("transposition", "C"),
            part_number=part_number if part_number is not None else idx + 1,
            page_range=(item.page_start, item.page_end),
        ))

    return ValidationResult(
        instructions=instructions,
        warnings=warnings,
        errors=errors,
        is_valid=is_valid,
        gaps=gaps,
        overlaps=overlaps or None,
    )


def build_gap_instructions(
    instructions: Sequence[CuttingInstruction],
    total_pages: int,
) -> List[CuttingInstruction]:
    """
    Synthesise instructions for page runs no instruction covers.

    Expects 0-indexed instructions (validator output). Filler names use
    1-based pages for display ("Unlabelled Pages 1-2") and part numbers
    from 9900 so they sort after real parts.
    """
    covered = _coverage([i.page_range for i in instructions], total_pages)
    return [
        CuttingInstruction(
            part_name=f"Unlabelled Pages {start + 1}-{end + 1}",
            instrument="Unknown",
            section="Other",
            transposition="C",
            part_number=GAP_PART_NUMBER_BASE + run_index,
            page_range=(start, end),
        )
        for run_index, (start, end) in enumerate(_uncovered_runs(covered))
    ]


def generate_unique_filename(part_name: str, page_start: int, page_end: int, index: int) -> str:
    """
    Build "{name}__p{start}-{end}_{index}.pdf" from a part name.

    Anything outside letters, digits, space, '&', '_' and '-' is removed,
    which also drops path separators, control characters and non-ASCII.
    Uniqueness comes from the caller's index, not from the name.
    """
    sanitized = UNSAFE_FILENAME_CHARS.sub("", part_name).strip()
    return f"{sanitized}__p{page_start}-{page_end}_{index}.pdf"


def sanitize_cutting_instructions_for_split(instructions: Sequence[Any]) -> List[CuttingInstruction]:
    """Drop instructions without a usable page range before they reach the splitter."""
    valid = []
    removed = []

    for instruction in instructions:
        if isinstance(instruction, CuttingInstruction):
            valid.append(instruction)
            continue
        try:
            valid.append(CuttingInstruction.model_validate(instruction))
        except ValidationError:
            name = instruction.get("part_name") if isinstance(instruction, Mapping) else None
            removed.append(name or "unnamed")

    if removed:
        logger.warning(
            f"Removed {len(removed)} cutting instructions with invalid page ranges before split: "
            f"{', '.join(removed)} ({len(valid)} remaining)"
        )

    return valid
