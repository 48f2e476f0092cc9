"""
Tests for pipeline/part_split/boundary_detector.py

Key behaviors to verify:
1. Each pass in isolation (forward fill, blip smoothing, backward fill)
2. Pages past the supplied headers become "Unknown Part" at confidence 0
3. Segments partition [0, total_pages) contiguously and in order
4. Cutting instructions mirror segments with 1-based part numbers
5. Segmentation confidence counts only confident pages in the numerator
"""

import pytest

from pipeline.part_split.boundary_detector import (
    add_unanalyzed_pages,
    compute_segmentation_confidence,
    detect_part_boundaries,
    fill_backward,
    fill_forward,
    segment_pages,
    smooth_blips,
)
from pipeline.part_split.label_patterns import (
    CONFIDENCE_BACKWARD_FILLED,
    CONFIDENCE_FORWARD_FILLED,
    CONFIDENCE_PATTERN_MATCH,
    CONFIDENCE_SMOOTHED_MAX,
    CONFIDENCE_UNANALYZED,
    UNKNOWN_PART_LABEL,
)
from pipeline.part_split.schemas import PageHeader, PageLabel
from pipeline.part_split.text_extractor import headers_from_strings


def labels(*names, confidence=80):
    return [
        PageLabel(page_index=i, label=name, raw_header=name, confidence=confidence if name else 0)
        for i, name in enumerate(names)
    ]


def assert_partition(segments, total_pages):
    """Segments cover [0, total_pages) exactly once, in order."""
    expected_start = 0
    for segment in segments:
        assert segment.page_start == expected_start
        assert segment.page_end >= segment.page_start
        assert segment.page_count == segment.page_end - segment.page_start + 1
        expected_start = segment.page_end + 1
    assert expected_start == total_pages


class TestFillForward:

    def test_copies_last_label(self):
        result = fill_forward(labels("Flute", "", "", "Oboe", ""))
        assert [p.label for p in result] == ["Flute", "Flute", "Flute", "Oboe", "Oboe"]
        assert [p.confidence for p in result] == [80, 40, 40, 80, 40]

    def test_leading_blanks_left_alone(self):
        result = fill_forward(labels("", "", "Tuba"))
        assert [p.label for p in result] == ["", "", "Tuba"]

    def test_returns_new_list(self):
        original = labels("Flute", "")
        fill_forward(original)
        assert original[1].label == ""


class TestSmoothBlips:

    def test_single_page_blip_replaced(self):
        result = smooth_blips(labels("Flute", "Oboe", "Flute"))
        assert [p.label for p in result] == ["Flute", "Flute", "Flute"]
        assert result[1].confidence == CONFIDENCE_SMOOTHED_MAX

    def test_smoothed_confidence_never_raised(self):
        source = labels("Flute", "Oboe", "Flute")
        source[1] = source[1].model_copy(update={"confidence": CONFIDENCE_FORWARD_FILLED})
        result = smooth_blips(source)
        assert result[1].confidence == CONFIDENCE_FORWARD_FILLED

    def test_two_page_run_kept(self):
        result = smooth_blips(labels("Flute", "Oboe", "Oboe", "Flute"))
        assert [p.label for p in result] == ["Flute", "Oboe", "Oboe", "Flute"]

    def test_alternating_collapses_left_to_right(self):
        result = smooth_blips(labels("A", "B", "A", "B", "A"))
        assert [p.label for p in result] == ["A", "A", "A", "A", "A"]

    def test_ends_never_smoothed(self):
        result = smooth_blips(labels("Oboe", "Flute", "Flute", "Oboe"))
        assert result[0].label == "Oboe"
        assert result[-1].label == "Oboe"

    @pytest.mark.parametrize("names", [(), ("Flute",), ("Flute", "Oboe")])
    def test_short_sequences_unchanged(self, names):
        assert [p.label for p in smooth_blips(labels(*names))] == list(names)


class TestFillBackward:

    def test_leading_pages_take_first_label(self):
        result = fill_backward(labels("", "", "Tuba", ""))
        assert [p.label for p in result] == ["Tuba", "Tuba", "Tuba", ""]
        assert [p.confidence for p in result[:2]] == [CONFIDENCE_BACKWARD_FILLED] * 2

    def test_all_blank_unchanged(self):
        result = fill_backward(labels("", ""))
        assert [p.label for p in result] == ["", ""]


class TestAddUnanalyzedPages:

    def test_pages_past_headers_are_unknown(self):
        result = add_unanalyzed_pages(labels("Flute", "Flute"), header_count=2, total_pages=4)
        assert [p.page_index for p in result] == [0, 1, 2, 3]
        assert [p.label for p in result] == ["Flute", "Flute", UNKNOWN_PART_LABEL, UNKNOWN_PART_LABEL]
        assert result[3].confidence == CONFIDENCE_UNANALYZED

    def test_no_extra_pages(self):
        original = labels("Flute", "Oboe")
        assert add_unanalyzed_pages(original, header_count=2, total_pages=2) == original


class TestSegmentPages:

    def test_runs_become_segments(self):
        segments = segment_pages(labels("Flute", "Flute", "Oboe", "Tuba", "Tuba"))
        assert [(s.label, s.page_start, s.page_end) for s in segments] == [
            ("Flute", 0, 1), ("Oboe", 2, 2), ("Tuba", 3, 4),
        ]
        assert_partition(segments, 5)

    def test_empty_labels_are_unknown_part(self):
        segments = segment_pages(labels("", "Flute"))
        assert segments[0].label == UNKNOWN_PART_LABEL

    def test_empty(self):
        assert segment_pages([]) == []


class TestSegmentationConfidence:

    def test_share_of_confident_pages(self):
        source = labels("Flute", "Flute", "Flute", "Flute")
        source[1] = source[1].model_copy(update={"confidence": CONFIDENCE_FORWARD_FILLED})
        assert compute_segmentation_confidence(source) == 75

    @pytest.mark.parametrize("confident,expected", [(1, 13), (3, 38), (5, 63), (7, 88)])
    def test_halves_round_up(self, confident, expected):
        """Eighths land on .5 exactly; they round up, never to even."""
        source = labels(*["Flute"] * 8)
        for i in range(confident, 8):
            source[i] = source[i].model_copy(update={"confidence": CONFIDENCE_FORWARD_FILLED})
        assert compute_segmentation_confidence(source) == expected

    def test_fallback_tier_is_not_confident(self):
        assert compute_segmentation_confidence(labels("Cello", confidence=65)) == 0

    def test_empty_is_zero(self):
        assert compute_segmentation_confidence([]) == 0


class TestDetectPartBoundaries:

    def test_blip_scenario(self):
        """Flute / Oboe / Flute is one Flute part."""
        result = detect_part_boundaries(headers_from_strings(["Flute", "Oboe", "Flute"]), 3, True)

        assert [p.label for p in result.page_labels] == ["Flute", "Flute", "Flute"]
        assert len(result.segments) == 1
        assert result.segments[0].page_start == 0
        assert result.segments[0].page_end == 2
        assert result.cutting_instructions[0].page_range == (0, 2)

    def test_band_set(self):
        headers = headers_from_strings([
            "1st Clarinet", "", "2nd Clarinet", "", "", "Tuba",
        ])
        result = detect_part_boundaries(headers, 6, from_text_layer=True)

        assert [(s.label, s.page_start, s.page_end) for s in result.segments] == [
            ("1st Bb Clarinet", 0, 1),
            ("2nd Bb Clarinet", 2, 4),
            ("Tuba", 5, 5),
        ]
        assert result.segmentation_confidence == 50
        assert result.from_text_layer is True

        instructions = result.cutting_instructions
        assert [i.part_number for i in instructions] == [1, 2, 3]
        assert instructions[0].section == "Woodwinds"
        assert instructions[0].transposition == "Bb"
        assert instructions[2].section == "Brass"

    def test_title_page_back_filled(self):
        result = detect_part_boundaries(headers_from_strings(["", "Oboe", "Oboe"]), 3, False)
        assert result.page_labels[0].label == "Oboe"
        assert result.page_labels[0].confidence == CONFIDENCE_BACKWARD_FILLED
        assert result.from_text_layer is False

    def test_full_text_used_when_header_blank(self):
        headers = [
            PageHeader(page_index=0, header_text="", full_text="Piccolo  march tempo", has_text=True),
            PageHeader(page_index=1, header_text="Piccolo", full_text="Piccolo", has_text=True),
        ]
        result = detect_part_boundaries(headers, 2, True)
        assert result.page_labels[0].label == "Piccolo"
        assert result.page_labels[0].confidence == CONFIDENCE_PATTERN_MATCH

    def test_unanalyzed_tail(self):
        result = detect_part_boundaries(headers_from_strings(["Tuba", "Tuba"]), 5, True)

        assert [(s.label, s.page_start, s.page_end) for s in result.segments] == [
            ("Tuba", 0, 1),
            (UNKNOWN_PART_LABEL, 2, 4),
        ]
        assert result.segmentation_confidence == 40
        assert_partition(result.segments, 5)

    def test_all_unrecognisable_pages(self):
        result = detect_part_boundaries(headers_from_strings(["", "", ""]), 3, True)
        assert [s.label for s in result.segments] == [UNKNOWN_PART_LABEL]
        assert result.segmentation_confidence == 0

    def test_empty_headers(self):
        result = detect_part_boundaries([], 10, from_text_layer=True)

        assert result.page_labels == []
        assert result.segments == []
        assert result.cutting_instructions == []
        assert result.segmentation_confidence == 0

    def test_per_page_confidence_and_boundaries(self):
        result = detect_part_boundaries(headers_from_strings(["Flute", "", "Oboe"]), 3, True)

        assert [(p.page_index, p.confidence) for p in result.per_page_confidence] == [
            (0, 80), (1, 40), (2, 80),
        ]
        assert [(b.label, b.start, b.end) for b in result.segment_boundaries] == [
            ("Flute", 0, 1), ("Oboe", 2, 2),
        ]

    @pytest.mark.parametrize("header_texts,total_pages", [
        (["Flute", "Oboe", "Flute", "", "Tuba", "Tuba"], 6),
        (["", "", "Horn"], 3),
        (["1st Trumpet"], 4),
        (["Timpani", "Snare", "Timpani", "Snare"], 4),
    ])
    def test_segments_partition_document(self, header_texts, total_pages):
        result = detect_part_boundaries(headers_from_strings(header_texts), total_pages, True)
        assert_partition(result.segments, total_pages)
        assert len(result.page_labels) == total_pages
        assert len(result.cutting_instructions) == len(result.segments)
