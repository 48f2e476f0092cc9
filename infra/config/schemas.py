"""
Configuration schemas for scoresplit.

Defines the structure of the config file stored at
{storage_root}/config.yaml (storage root from SCORESPLIT_ROOT).
"""

from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator


class SplitSettings(BaseModel):
    """Thresholds and switches for header extraction, segmentation and planning."""
    text_layer_threshold: float = Field(
        default=0.60, ge=0.0, le=1.0,
        description="Minimum fraction of pages with text for the deterministic path"
    )
    header_height_fraction: float = Field(
        default=0.20, gt=0.0, le=1.0,
        description="Fraction of page height treated as the header region"
    )
    header_margin_points: float = Field(
        default=50.0, ge=0.0,
        description="Extra points below the header region still counted as header"
    )
    min_text_chars: int = Field(
        default=10, ge=0,
        description="Minimum characters for a page to count as having text"
    )
    max_full_text_chars: int = Field(
        default=500, ge=0,
        description="Maximum characters of full page text to keep"
    )
    max_pages: Optional[int] = Field(
        default=None, ge=1,
        description="Only extract headers from the first N pages (None = all)"
    )
    segmentation_confidence_threshold: int = Field(
        default=70, ge=0, le=100,
        description="Segmentation confidence below this routes to review"
    )
    max_pages_per_part: int = Field(
        default=12, ge=1,
        description="Non-score parts longer than this route to review"
    )
    auto_fix_overlaps: bool = Field(
        default=True,
        description="Truncate overlapping LLM ranges instead of rejecting them"
    )
    fill_gaps: bool = Field(
        default=True,
        description="Add 'Unlabelled Pages' instructions for uncovered pages"
    )


class SplitterConfig(BaseModel):
    """
    Top-level configuration.

    Stored at: {storage_root}/config.yaml
    """
    split: SplitSettings = Field(
        default_factory=SplitSettings,
        description="Segmentation and validation settings"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Level for per-upload JSONL logs"
    )
    log_dir: Optional[str] = Field(
        default=None,
        description="Directory for logs (default: {storage_root}/logs)"
    )

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @classmethod
    def with_defaults(cls) -> "SplitterConfig":
        return cls()
