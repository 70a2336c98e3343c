"""Tests for roofline segment and pixel map models."""

from __future__ import annotations

from pydantic import ValidationError
import pytest

from rooflight.core.roofline.models import (
    PixelMap,
    RooflineSegment,
    SegmentType,
    UnknownSegmentError,
)


def _make_segment(
    segment_id: str, start: int, end: int, segment_type: SegmentType = SegmentType.RUN, **kwargs
) -> RooflineSegment:
    return RooflineSegment(
        id=segment_id, type=segment_type, start_pixel=start, end_pixel=end, **kwargs
    )


class TestRooflineSegment:
    """Test segment validation and derived values."""

    def test_pixel_count_is_inclusive(self) -> None:
        assert _make_segment("a", 10, 15).pixel_count == 6

    def test_end_before_start_rejected(self) -> None:
        with pytest.raises(ValidationError, match="end_pixel"):
            _make_segment("a", 5, 4)

    def test_anchor_outside_span_rejected(self) -> None:
        with pytest.raises(ValidationError, match="anchor offsets"):
            _make_segment("a", 0, 4, anchor_offsets=[5])

    def test_global_anchor_pixels(self) -> None:
        segment = _make_segment("a", 10, 15, anchor_offsets=[0, 3])
        assert segment.global_anchor_pixels == [10, 13]

    def test_is_anchor_pixel_uses_led_count(self) -> None:
        segment = _make_segment("a", 10, 15, anchor_offsets=[2], anchor_led_count=2)
        assert segment.is_anchor_pixel(12)
        assert segment.is_anchor_pixel(13)
        assert not segment.is_anchor_pixel(14)

    @pytest.mark.parametrize(
        ("segment_type", "expected"),
        [
            (SegmentType.RUN, [0, 8]),
            (SegmentType.COLUMN, [0, 8]),
            (SegmentType.PEAK, [4]),
            (SegmentType.CORNER, [4]),
            (SegmentType.CONNECTOR, []),
        ],
    )
    def test_default_anchors(self, segment_type: SegmentType, expected: list[int]) -> None:
        """Ten pixels with two-LED anchors."""
        assert _make_segment("a", 0, 9, segment_type).default_anchors == expected

    def test_intersects(self) -> None:
        segment = _make_segment("a", 10, 15)
        assert segment.intersects(15, 20)
        assert segment.intersects(0, 10)
        assert not segment.intersects(16, 20)

    def test_accepts_camel_case(self) -> None:
        segment = RooflineSegment.model_validate(
            {"id": "a", "startPixel": 0, "endPixel": 3, "anchorLedCount": 1}
        )
        assert segment.anchor_led_count == 1


class TestPixelMap:
    """Test pixel map layout validation and lookups."""

    def test_segments_sorted_by_start(self) -> None:
        pixel_map = PixelMap(
            total_pixel_count=10,
            segments=[_make_segment("b", 5, 9), _make_segment("a", 0, 4)],
        )
        assert [s.id for s in pixel_map.segments] == ["a", "b"]

    def test_gap_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Gap"):
            PixelMap(
                total_pixel_count=10,
                segments=[_make_segment("a", 0, 3), _make_segment("b", 5, 9)],
            )

    def test_overlap_rejected(self) -> None:
        with pytest.raises(ValidationError, match="overlapping"):
            PixelMap(
                total_pixel_count=10,
                segments=[_make_segment("a", 0, 5), _make_segment("b", 5, 9)],
            )

    def test_total_mismatch_rejected(self) -> None:
        with pytest.raises(ValidationError, match="cover 10 pixels"):
            PixelMap(total_pixel_count=12, segments=[_make_segment("a", 0, 9)])

    def test_duplicate_ids_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Duplicate"):
            PixelMap(
                total_pixel_count=10,
                segments=[_make_segment("a", 0, 4), _make_segment("a", 5, 9)],
            )

    def test_get_segment_unknown_raises_key_error(self, small_roofline: PixelMap) -> None:
        with pytest.raises(KeyError):
            small_roofline.get_segment("garage")
        with pytest.raises(UnknownSegmentError) as exc_info:
            small_roofline.get_segment("garage")
        assert exc_info.value.available == ["front_eave", "front_peak", "back_corner"]

    def test_lookups(self, small_roofline: PixelMap) -> None:
        assert [s.id for s in small_roofline.segments_of_type(SegmentType.PEAK)] == ["front_peak"]
        assert [s.id for s in small_roofline.segments_on_level(2)] == ["back_corner"]
        assert small_roofline.all_levels == [1, 2]
        assert small_roofline.all_global_anchor_pixels == [0, 8, 12, 18]
