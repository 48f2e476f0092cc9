"""
Instrument name normalisation.

Maps free-form instrument labels (LLM output, OCR'd headers, human input)
to a canonical instrument name with chair, transposition and section:

    normalize_instrument_label("Clarinet 1")
        -> instrument="1st Bb Clarinet", chair="1st", transposition="Bb"
    normalize_instrument_label("Violin II")
        -> instrument="2nd Violin", chair="2nd", section="Strings"
"""

import re
from typing import Literal, NamedTuple, Optional, Pattern, Tuple

from pydantic import BaseModel


Chair = Literal["1st", "2nd", "3rd", "4th", "Aux", "Solo"]
Transposition = Literal["C", "Bb", "Eb", "F", "G", "D", "A"]
Section = Literal["Woodwinds", "Brass", "Percussion", "Strings", "Keyboard", "Vocals", "Score", "Other"]
PartType = Literal["FULL_SCORE", "CONDUCTOR_SCORE", "CONDENSED_SCORE", "PART"]


class NormalisedInstrument(BaseModel):
    instrument: str
    chair: Optional[Chair] = None
    transposition: Transposition = "C"
    section: Section = "Other"
    part_type: PartType = "PART"
    # False when no known instrument matched and `instrument` is the cleaned input
    recognized: bool = False


# ==============================================================================
# Chairs
# ==============================================================================

CHAIR_PATTERNS: Tuple[Tuple[Pattern[str], Chair], ...] = (
    (re.compile(r"\b(1st|first|i\b|1)\b", re.IGNORECASE), "1st"),
    (re.compile(r"\b(2nd|second|ii\b|2)\b", re.IGNORECASE), "2nd"),
    (re.compile(r"\b(3rd|third|iii\b|3)\b", re.IGNORECASE), "3rd"),
    (re.compile(r"\b(4th|fourth|iv\b|4)\b", re.IGNORECASE), "4th"),
    (re.compile(r"\b(aux|auxiliary)\b", re.IGNORECASE), "Aux"),
    (re.compile(r"\b(solo)\b", re.IGNORECASE), "Solo"),
)

# "Clarinet in Bb II" / "Bb Clarinet 2" / "Clarinet 2 in Bb" -> "2nd Bb Clarinet"
CHAIR_PHRASE_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"\bclarinet\s+in\s+bb\s*(i{1,3}|iv|1|2|3|4)\b", re.IGNORECASE),
    re.compile(r"\bbb\s+clarinet\s*(i{1,3}|iv|1|2|3|4)\b", re.IGNORECASE),
    re.compile(r"\bclarinet\s*(i{1,3}|iv|1|2|3|4)\s+in\s+bb\b", re.IGNORECASE),
)

_CHAIR_TOKENS = {
    "i": "1st", "1": "1st",
    "ii": "2nd", "2": "2nd",
    "iii": "3rd", "3": "3rd",
    "iv": "4th", "4": "4th",
}


def _chair_from_token(token: str) -> str:
    return _CHAIR_TOKENS.get(token.lower(), token)


def normalize_chair_phrases(raw: str) -> str:
    normalized = re.sub(r"\s+", " ", raw.strip())
    for pattern in CHAIR_PHRASE_PATTERNS:
        normalized = pattern.sub(lambda m: f"{_chair_from_token(m.group(1))} Bb Clarinet", normalized)
    return normalized


def infer_chair(raw: str) -> Optional[Chair]:
    for pattern, chair in CHAIR_PATTERNS:
        if pattern.search(raw):
            return chair
    return None


def infer_part_type(raw: str) -> PartType:
    lower = raw.lower()
    if re.search(r"\bconductor\b", lower):
        return "CONDUCTOR_SCORE"
    if re.search(r"\bcondensed\s+score\b", lower):
        return "CONDENSED_SCORE"
    if re.search(r"\b(full\s+score|score)\b", lower):
        return "FULL_SCORE"
    return "PART"


# ==============================================================================
# Instruments
# ==============================================================================

class InstrumentMapping(NamedTuple):
    pattern: Pattern[str]
    base: str
    transposition: Transposition
    section: Section


def _m(regex: str, base: str, transposition: Transposition, section: Section) -> InstrumentMapping:
    return InstrumentMapping(re.compile(regex, re.IGNORECASE), base, transposition, section)


INSTRUMENT_MAPPINGS: Tuple[InstrumentMapping, ...] = (
    # Woodwinds
    _m(r"piccolo", "Piccolo", "C", "Woodwinds"),
    _m(r"\beb[\s.-]?clarinet\b", "Eb Clarinet", "Eb", "Woodwinds"),
    _m(r"\bbass[\s.-]?clarinet\b", "Bass Clarinet", "Bb", "Woodwinds"),
    _m(r"\bclarinet\b", "Bb Clarinet", "Bb", "Woodwinds"),
    _m(r"\bflute\b", "Flute", "C", "Woodwinds"),
    _m(r"\boboe\b", "Oboe", "C", "Woodwinds"),
    _m(r"\benglish[\s.-]?horn\b", "English Horn", "F", "Woodwinds"),
    _m(r"\bcontra[\s.-]?bassoon\b", "Contrabassoon", "C", "Woodwinds"),
    _m(r"\bbassoon\b", "Bassoon", "C", "Woodwinds"),
    _m(r"\bsoprano[\s.-]?sax", "Soprano Saxophone", "Bb", "Woodwinds"),
    _m(r"\balto[\s.-]?sax", "Alto Saxophone", "Eb", "Woodwinds"),
    _m(r"\btenor[\s.-]?sax", "Tenor Saxophone", "Bb", "Woodwinds"),
    _m(r"\bbari(tone)?[\s.-]?sax", "Baritone Saxophone", "Eb", "Woodwinds"),
    _m(r"\bsax(ophone)?\b", "Saxophone", "C", "Woodwinds"),
    # Brass
    _m(r"\bflugelhorn\b", "Flugelhorn", "Bb", "Brass"),
    _m(r"\btrumpet\b", "Trumpet", "Bb", "Brass"),
    _m(r"\bcornet\b", "Cornet", "Bb", "Brass"),
    _m(r"\bbass[\s.-]?trombone\b", "Bass Trombone", "C", "Brass"),
    _m(r"\btrombone\b", "Trombone", "C", "Brass"),
    _m(r"\beuphonium\b", "Euphonium", "C", "Brass"),
    _m(r"\bhorn\b", "Horn", "F", "Brass"),
    _m(r"\btuba\b", "Tuba", "C", "Brass"),
    _m(r"\bbaritone\b", "Baritone", "C", "Brass"),
    # Percussion
    _m(r"\btimpani\b", "Timpani", "C", "Percussion"),
    _m(r"\bsnare[\s.-]?drum\b", "Snare Drum", "C", "Percussion"),
    _m(r"\bbass[\s.-]?drum\b", "Bass Drum", "C", "Percussion"),
    _m(r"\bmarimba\b", "Marimba", "C", "Percussion"),
    _m(r"\bxylophone\b", "Xylophone", "C", "Percussion"),
    _m(r"\bvibraphone\b", "Vibraphone", "C", "Percussion"),
    _m(r"\bmallet\b", "Mallet Percussion", "C", "Percussion"),
    _m(r"\bpercussion\b", "Percussion", "C", "Percussion"),
    # Strings
    _m(r"\bviolin\b", "Violin", "C", "Strings"),
    _m(r"\bviola\b", "Viola", "C", "Strings"),
    _m(r"\bcello\b", "Cello", "C", "Strings"),
    _m(r"\b(string[\s.-]?bass|double[\s.-]?bass|contrabass)\b", "String Bass", "C", "Strings"),
    _m(r"\bharp\b", "Harp", "C", "Strings"),
    # Keyboard
    _m(r"\bpiano\b", "Piano", "C", "Keyboard"),
    _m(r"\borgan\b", "Organ", "C", "Keyboard"),
    # Scores
    _m(r"\bconductor\b", "Conductor Score", "C", "Score"),
    _m(r"\bfull[\s.-]?score\b", "Full Score", "C", "Score"),
    _m(r"\bcondensed[\s.-]?score\b", "Condensed Score", "C", "Score"),
)


def normalize_instrument_label(raw: str) -> NormalisedInstrument:
    """
    Normalise a raw instrument label into a canonical instrument.

    When a chair designation is present it is folded into the instrument
    name ("Violin II" -> "2nd Violin"). Labels that match no known
    instrument come back with recognized=False and the cleaned input as
    the instrument name ("Unknown" for blank input).
    """
    normalized_raw = normalize_chair_phrases(raw)
    chair = infer_chair(normalized_raw)
    part_type = infer_part_type(normalized_raw)

    for mapping in INSTRUMENT_MAPPINGS:
        if mapping.pattern.search(normalized_raw):
            instrument = f"{chair} {mapping.base}" if chair else mapping.base
            return NormalisedInstrument(
                instrument=instrument,
                chair=chair,
                transposition=mapping.transposition,
                section=mapping.section,
                part_type=part_type,
                recognized=True,
            )

    return NormalisedInstrument(
        instrument=normalized_raw or "Unknown",
        chair=chair,
        part_type=part_type,
    )
