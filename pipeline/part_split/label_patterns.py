"""
Header label patterns and confidence tiers.

PART_PATTERNS is an ordered table: the first pattern that matches a header
wins, so specific patterns (chair numbers, "bass trombone", "bass drum") must
stay above the generic ones they would otherwise lose to.

Confidence tiers record how a page got its label. Downstream thresholds
(segmentation confidence, review routing) depend on these exact values.
"""

import re
from typing import NamedTuple, Optional, Pattern, Tuple


CONFIDENCE_PATTERN_MATCH = 80
CONFIDENCE_FALLBACK = 65
CONFIDENCE_SMOOTHED_MAX = 60
CONFIDENCE_FORWARD_FILLED = 40
CONFIDENCE_BACKWARD_FILLED = 30
CONFIDENCE_UNANALYZED = 0

# Pages at or above this count as confidently labelled
CONFIDENCE_HIGH_THRESHOLD = 70

UNKNOWN_PART_LABEL = "Unknown Part"

MIN_HEADER_LENGTH = 3

FORBIDDEN_LABELS = frozenset({"null", "none", "n/a", "na", "unknown", "undefined"})


class LabelPattern(NamedTuple):
    pattern: Pattern[str]
    template: str


def _p(regex: str, template: str) -> LabelPattern:
    return LabelPattern(re.compile(regex, re.IGNORECASE), template)


_FIRST = r"\b(1st|first|1)\b"
_SECOND = r"\b(2nd|second|2)\b"
_THIRD = r"\b(3rd|third|3)\b"
_FOURTH = r"\b(4th|fourth|4)\b"


PART_PATTERNS: Tuple[LabelPattern, ...] = (
    # Clarinets
    # Ahead of the generic bass pattern so "Bass Clarinet" is reachable
    _p(r"\bbass\s+(clarinet|cl\.?)\b", "Bass Clarinet"),
    _p(_FIRST + r".{0,20}(clarinet|cl\.?)\b", "1st Bb Clarinet"),
    _p(_SECOND + r".{0,20}(clarinet|cl\.?)\b", "2nd Bb Clarinet"),
    _p(_THIRD + r".{0,20}(clarinet|cl\.?)\b", "3rd Bb Clarinet"),
    _p(r"\b(solo|solo\s+bb?)\b.{0,10}(clarinet|cl\.?)\b", "Solo Bb Clarinet"),
    _p(r"\beb?\s+(clarinet|cl\.?)\b", "Eb Clarinet"),
    _p(r"\bclarinet\b", "Bb Clarinet"),
    # Flutes and double reeds
    _p(r"\bpicco?lo\b", "Piccolo"),
    _p(_FIRST + r".{0,20}flute\b", "1st Flute"),
    _p(_SECOND + r".{0,20}flute\b", "2nd Flute"),
    _p(r"\bflute\b", "Flute"),
    _p(r"\boboe\b", "Oboe"),
    _p(r"\bbassoon\b", "Bassoon"),
    # Saxophones
    _p(_FIRST + r".{0,20}(alto|a\.?\s*sax)", "1st Eb Alto Saxophone"),
    _p(_SECOND + r".{0,20}(alto|a\.?\s*sax)", "2nd Eb Alto Saxophone"),
    _p(r"\balto\s+sax", "Eb Alto Saxophone"),
    _p(r"\btenor\s+sax", "Bb Tenor Saxophone"),
    _p(r"\bbari(tone)?\s+sax", "Eb Baritone Saxophone"),
    _p(r"\bsax(ophone)?\b", "Saxophone"),
    # Brass
    _p(_FIRST + r".{0,20}trumpet", "1st Bb Trumpet"),
    _p(_SECOND + r".{0,20}trumpet", "2nd Bb Trumpet"),
    _p(_THIRD + r".{0,20}trumpet", "3rd Bb Trumpet"),
    _p(r"\btrumpet\b", "Bb Trumpet"),
    _p(r"\bcornet\b", "Bb Cornet"),
    _p(_FIRST + r".{0,20}(f\s*)?horn", "1st F Horn"),
    _p(_SECOND + r".{0,20}(f\s*)?horn", "2nd F Horn"),
    _p(_THIRD + r".{0,20}(f\s*)?horn", "3rd F Horn"),
    _p(_FOURTH + r".{0,20}(f\s*)?horn", "4th F Horn"),
    _p(r"\b(french\s+)?horn\b", "F Horn"),
    _p(_FIRST + r".{0,20}trombone", "1st Trombone"),
    _p(_SECOND + r".{0,20}trombone", "2nd Trombone"),
    _p(_THIRD + r".{0,20}trombone", "3rd Trombone"),
    _p(r"\bbass\s+trombone", "Bass Trombone"),
    _p(r"\btrombone\b", "Trombone"),
    _p(r"\beuphonium\b", "Euphonium"),
    _p(r"\btuba\b", "Tuba"),
    _p(r"\bbaritone\b", "Baritone"),
    # Strings and percussion
    # Ahead of the generic bass pattern so "Bass Drum" is reachable
    _p(r"\bbass\s+drum\b", "Bass Drum"),
    _p(r"\bbass\b", "String Bass"),
    _p(r"\btimpani\b", "Timpani"),
    # Ahead of the generic percussion pattern so "Mallet Percussion" is reachable
    _p(r"\bmallet", "Mallet Percussion"),
    _p(r"\bpercussion\b", "Percussion"),
    _p(r"\bsnare\b", "Snare Drum"),
    _p(r"\bmarimba\b", "Marimba"),
    # No trailing word boundary, so "Xylophone" matches too
    _p(r"\bxyloph", "Xylophone"),
    _p(r"\bvibraphone\b", "Vibraphone"),
    # Keyboard and scores
    _p(r"\bpiano\b", "Piano"),
    _p(r"\bharp\b", "Harp"),
    _p(r"\bconductor\b", "Conductor Score"),
    _p(r"\bfull\s+score\b", "Full Score"),
    _p(r"\bcondensed\s+score\b", "Condensed Score"),
)


def match_part_pattern(text: str) -> Optional[str]:
    """Return the canonical label of the first matching pattern, or None."""
    for entry in PART_PATTERNS:
        if entry.pattern.search(text):
            return entry.template
    return None
