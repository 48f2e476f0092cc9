"""
Tests for pipeline/part_split/quality_gates.py
"""

import pytest

from pipeline.part_split.quality_gates import evaluate_quality_gates, is_forbidden_label
from pipeline.part_split.schemas import CuttingInstruction


def part(name, start, end, part_number=1, instrument=None, section="Woodwinds"):
    return CuttingInstruction(
        part_name=name,
        instrument=instrument or name,
        section=section,
        part_number=part_number,
        page_range=(start, end),
    )


class TestForbiddenLabel:

    @pytest.mark.parametrize("value", [None, "", "  ", "null", "N/A", "Unknown", " undefined "])
    def test_forbidden(self, value):
        assert is_forbidden_label(value) is True

    @pytest.mark.parametrize("value", ["Flute", "Unknown Part", "Unlabelled Pages 1-2"])
    def test_allowed(self, value):
        assert is_forbidden_label(value) is False


class TestEvaluateQualityGates:

    def test_clean_document_passes(self):
        result = evaluate_quality_gates(
            [part("Flute", 0, 3, 1), part("Oboe", 4, 7, 2)],
            total_pages=8,
            segmentation_confidence=90,
        )
        assert result.failed is False
        assert result.reasons == []
        assert result.final_confidence == 90

    def test_forbidden_label_fails(self):
        result = evaluate_quality_gates(
            [part("Flute", 0, 3, 1), part("null", 4, 7, 2, instrument="null")],
            total_pages=8,
        )
        assert result.failed is True
        assert result.reasons == ['Part with null/unknown label: instrument="null" partName="null"']

    def test_oversized_part_fails(self):
        result = evaluate_quality_gates(
            [part("Flute", 0, 12, 1), part("Oboe", 13, 14, 2)],
            total_pages=15,
        )
        assert result.reasons == ['Non-score part "Flute" has 13 pages (max 12)']

    def test_scores_may_be_long(self):
        result = evaluate_quality_gates(
            [part("Full Score", 0, 29, 1, section="Score"), part("Flute", 30, 31, 2)],
            total_pages=32,
        )
        assert result.failed is False

    def test_max_pages_per_part_configurable(self):
        result = evaluate_quality_gates(
            [part("Flute", 0, 12, 1), part("Oboe", 13, 14, 2)],
            total_pages=15,
            max_pages_per_part=20,
        )
        assert result.failed is False

    def test_long_document_needs_two_parts(self):
        result = evaluate_quality_gates([part("Flute", 0, 10, 1)], total_pages=11, max_pages_per_part=20)
        assert result.reasons == ["Multi-part document with 11 pages but only 1 part(s)"]

    def test_single_part_document_allowed(self):
        result = evaluate_quality_gates(
            [part("Flute", 0, 10, 1)], total_pages=11, max_pages_per_part=20, is_multi_part=False
        )
        assert result.failed is False

    def test_low_segmentation_confidence_fails(self):
        result = evaluate_quality_gates(
            [part("Flute", 0, 1, 1), part("Oboe", 2, 3, 2)],
            total_pages=4,
            segmentation_confidence=50,
        )
        assert result.reasons == ["segmentationConfidence 50 < threshold 70"]
        assert result.final_confidence == 50

    def test_gap_fillers_reported_not_forbidden(self):
        filler = CuttingInstruction(
            part_name="Unlabelled Pages 1-2", instrument="Unknown", part_number=9900, page_range=(0, 1)
        )
        result = evaluate_quality_gates(
            [part("Flute", 2, 4, 1), part("Oboe", 5, 7, 2), filler],
            total_pages=8,
        )
        assert result.reasons == ["2 page(s) not assigned to any part"]

    def test_final_confidence_is_minimum(self):
        result = evaluate_quality_gates(
            [part("Flute", 0, 1, 1), part("Oboe", 2, 3, 2)],
            total_pages=4,
            segmentation_confidence=90,
            extraction_confidence=75,
        )
        assert result.final_confidence == 75

    def test_final_confidence_unknown(self):
        result = evaluate_quality_gates([part("Flute", 0, 1, 1), part("Oboe", 2, 3, 2)], total_pages=4)
        assert result.final_confidence == 0
