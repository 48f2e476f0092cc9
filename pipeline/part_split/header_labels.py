"""
Header label normalisation.

Turns the raw text found at the top of a page into a canonical part label:

1. Ordered pattern table (PART_PATTERNS) - confidence 80
2. Generic instrument normaliser (chair-aware)  - confidence 65
3. Unrecognised text is kept verbatim            - confidence 65

Unknown instruments are never discarded; only blank, too-short and sentinel
strings ("null", "N/A", ...) produce no label at all.
"""

from typing import Optional

from .instrument_naming import normalize_instrument_label
from .label_patterns import (
    CONFIDENCE_FALLBACK,
    CONFIDENCE_PATTERN_MATCH,
    FORBIDDEN_LABELS,
    MIN_HEADER_LENGTH,
    match_part_pattern,
)
from .schemas import HeaderLabel


def normalise_label_from_header(header_text: Optional[str]) -> Optional[HeaderLabel]:
    """Normalise one header string, or return None when it carries no label."""
    text = (header_text or "").strip()
    if len(text) < MIN_HEADER_LENGTH:
        return None

    if text.lower() in FORBIDDEN_LABELS:
        return None

    template = match_part_pattern(text)
    if template is not None:
        return HeaderLabel(label=template, confidence=CONFIDENCE_PATTERN_MATCH)

    normalized = normalize_instrument_label(text)
    if normalized.recognized:
        return HeaderLabel(label=normalized.instrument, confidence=CONFIDENCE_FALLBACK)

    return HeaderLabel(label=text, confidence=CONFIDENCE_FALLBACK)
