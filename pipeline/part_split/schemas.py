"""
Part Split Schemas

Per-page header text, per-page labels, contiguous part segments and the
cutting instructions handed to the PDF splitter.

Indexing conventions:
- Every page index and page range in these models is 0-indexed and inclusive.
- Raw LLM instruction arrays are usually 1-indexed; they are converted by the
  validator before they ever become a CuttingInstruction.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, field_validator


# ==============================================================================
# Text extraction
# ==============================================================================

class PageHeader(BaseModel):
    """Header and body text pulled from one page of a digital PDF."""
    page_index: int = Field(..., ge=0, description="0-based page index")
    header_text: str = Field("", description="Text from the top ~20% of the page")
    full_text: str = Field("", description="Full page text (truncated)")
    has_text: bool = Field(False, description="Whether the page carries meaningful text")

    model_config = {"frozen": True}


class PdfTextExtractionResult(BaseModel):
    """Per-page headers for a whole document plus text-layer coverage."""
    page_headers: List[PageHeader] = Field(default_factory=list)
    total_pages: int = Field(0, ge=0)
    has_text_layer: bool = Field(False, description="Coverage reached the text-layer threshold")
    text_layer_coverage: float = Field(0.0, ge=0.0, le=1.0, description="Fraction of pages with text")


# ==============================================================================
# Boundary detection
# ==============================================================================

class HeaderLabel(BaseModel):
    """Canonical instrument label for one header string."""
    label: str
    confidence: int = Field(..., ge=0, le=100)

    model_config = {"frozen": True}


class PageLabel(BaseModel):
    page_index: int = Field(..., ge=0)
    label: str = Field("", description="Normalised instrument/part label (may be empty)")
    raw_header: str = Field("", description="Header text before normalisation")
    confidence: int = Field(0, ge=0, le=100)


class PartSegment(BaseModel):
    label: str
    page_start: int = Field(..., ge=0, description="0-indexed start page")
    page_end: int = Field(..., ge=0, description="0-indexed end page (inclusive)")
    page_count: int = Field(..., ge=1)


class SegmentBoundary(BaseModel):
    label: str
    start: int
    end: int


class PageConfidence(BaseModel):
    page_index: int
    confidence: int
    label: str


# ==============================================================================
# Cutting instructions
# ==============================================================================

class CuttingInstruction(BaseModel):
    """
    One part to cut out of the source PDF.

    page_range is 0-indexed and inclusive. Gap fillers synthesised for
    unclaimed pages use part numbers from 9900 upwards.
    """
    part_name: str = Field(..., min_length=1)
    instrument: str = Field("Unknown")
    section: str = Field("Other")
    transposition: str = Field("C")
    part_number: int = Field(..., description="1-based sequence number (9900+ for gap fillers)")
    page_range: Tuple[int, int] = Field(..., description="0-indexed inclusive [start, end]")

    @field_validator('page_range')
    @classmethod
    def validate_page_range(cls, v: Tuple[int, int]) -> Tuple[int, int]:
        start, end = v
        if start > end:
            raise ValueError(f"page_range start ({start}) cannot be greater than end ({end})")
        return v

    @property
    def page_start(self) -> int:
        return self.page_range[0]

    @property
    def page_end(self) -> int:
        return self.page_range[1]


class SegmentationResult(BaseModel):
    page_labels: List[PageLabel] = Field(default_factory=list)
    segments: List[PartSegment] = Field(default_factory=list)
    cutting_instructions: List[CuttingInstruction] = Field(default_factory=list)
    segmentation_confidence: int = Field(0, ge=0, le=100)
    from_text_layer: bool = Field(..., description="Headers came from the PDF text layer (vs vision OCR)")
    segment_boundaries: List[SegmentBoundary] = Field(default_factory=list)
    per_page_confidence: List[PageConfidence] = Field(default_factory=list)


@dataclass(frozen=True)
class NormalizedInstruction:
    """Validator-internal instruction: a name and a plain start/end pair."""
    part_name: str
    page_start: int
    page_end: int
    original_index: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)


class Gap(BaseModel):
    start: int
    end: int


class Overlap(BaseModel):
    part1: str
    part2: str
    overlap: Tuple[int, int]


class ValidationOptions(BaseModel):
    one_indexed: bool = Field(False, description="Input is 1-indexed, convert to 0-indexed")
    allow_overlaps: bool = False
    auto_fix_overlaps: bool = False
    detect_gaps: bool = False


class ValidationResult(BaseModel):
    instructions: List[CuttingInstruction] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    is_valid: bool = False
    gaps: Optional[List[Gap]] = None
    overlaps: Optional[List[Overlap]] = None


# ==============================================================================
# Planning
# ==============================================================================

class QualityGateResult(BaseModel):
    failed: bool = Field(..., description="One or more gates failed; auto-ingest must be blocked")
    reasons: List[str] = Field(default_factory=list)
    final_confidence: int = Field(0, ge=0, le=100)


class CutFile(BaseModel):
    filename: str
    instruction: CuttingInstruction


class CutPlan(BaseModel):
    """Everything the splitter and the review screen need for one upload."""
    source: Literal["text_layer", "vision", "llm", "none"]
    total_pages: int = Field(..., ge=0)
    instructions: List[CuttingInstruction] = Field(default_factory=list)
    files: List[CutFile] = Field(default_factory=list)
    validation: ValidationResult
    segmentation: Optional[SegmentationResult] = None
    quality: QualityGateResult
    requires_review: bool
    review_reasons: List[str] = Field(default_factory=list)
