"""Tests for zone selector resolution."""

from __future__ import annotations

from rooflight.core.composition.zone_resolver import ZoneResolver
from rooflight.core.design.models.intent import PixelRange, ZoneSelector
from rooflight.core.design.vocabulary import ArchitecturalRole, ZoneType
from rooflight.core.roofline.models import PixelMap, RooflineSegment, SegmentType


def _ranges(*pairs: tuple[int, int]) -> list[PixelRange]:
    return [PixelRange(start=s, end=e) for s, e in pairs]


class TestZoneResolver:
    """Test each selector variant against the 21-pixel roofline."""

    def test_every_zone_type_has_handler(self, small_roofline: PixelMap) -> None:
        resolver = ZoneResolver(small_roofline)
        assert set(resolver._handlers) == set(ZoneType)

    def test_all(self, small_roofline: PixelMap) -> None:
        assert ZoneResolver(small_roofline).resolve(ZoneSelector.all()) == _ranges((0, 20))

    def test_segments_in_map_order(self, small_roofline: PixelMap) -> None:
        """Selector order does not matter; output follows the map."""
        selector = ZoneSelector.segments(["back_corner", "front_eave"])
        assert ZoneResolver(small_roofline).resolve(selector) == _ranges((0, 9), (16, 20))

    def test_segments_none_means_every_segment(self, small_roofline: PixelMap) -> None:
        selector = ZoneSelector(type=ZoneType.SEGMENTS)
        assert ZoneResolver(small_roofline).resolve(selector) == _ranges((0, 9), (10, 15), (16, 20))

    def test_missing_segment_ids(self, small_roofline: PixelMap) -> None:
        resolver = ZoneResolver(small_roofline)
        selector = ZoneSelector.segments(["front_peak", "garage"])
        assert resolver.resolve(selector) == _ranges((10, 15))
        assert resolver.missing_segment_ids(selector) == ["garage"]

    def test_architectural_peak(self) -> None:
        """Peak role picks exactly the peak segment, whatever the input order."""
        pixel_map = PixelMap(
            total_pixel_count=21,
            segments=[
                RooflineSegment(id="p", type=SegmentType.PEAK, start_pixel=10, end_pixel=15),
                RooflineSegment(id="r", type=SegmentType.RUN, start_pixel=0, end_pixel=9),
                RooflineSegment(id="c", type=SegmentType.CORNER, start_pixel=16, end_pixel=20),
            ],
        )
        selector = ZoneSelector.architectural([ArchitecturalRole.PEAK])
        assert ZoneResolver(pixel_map).resolve(selector) == _ranges((10, 15))

    def test_unmapped_role_resolves_empty(self, small_roofline: PixelMap) -> None:
        selector = ZoneSelector.architectural([ArchitecturalRole.VALLEY])
        assert ZoneResolver(small_roofline).resolve(selector) == []

    def test_location_matches_names_case_insensitively(self, small_roofline: PixelMap) -> None:
        resolver = ZoneResolver(small_roofline)
        assert resolver.resolve(ZoneSelector.at_location("FRONT")) == _ranges((0, 9), (10, 15))
        assert resolver.resolve(ZoneSelector.at_location("right")) == _ranges((16, 20))

    def test_location_matches_synonyms(self) -> None:
        """Segment names using another word for the side still match."""
        pixel_map = PixelMap(
            total_pixel_count=30,
            segments=[
                RooflineSegment(id="s", name="Street Gable", start_pixel=0, end_pixel=9),
                RooflineSegment(id="r", name="Rear Eave", start_pixel=10, end_pixel=19),
                RooflineSegment(id="w", name="West Corner", start_pixel=20, end_pixel=24),
                RooflineSegment(id="e", name="East Corner", start_pixel=25, end_pixel=29),
            ],
        )
        resolver = ZoneResolver(pixel_map)
        assert resolver.resolve(ZoneSelector.at_location("front")) == _ranges((0, 9))
        assert resolver.resolve(ZoneSelector.at_location("back")) == _ranges((10, 19))
        assert resolver.resolve(ZoneSelector.at_location("left")) == _ranges((20, 24))
        assert resolver.resolve(ZoneSelector.at_location("right")) == _ranges((25, 29))

    def test_level(self, small_roofline: PixelMap) -> None:
        resolver = ZoneResolver(small_roofline)
        assert resolver.resolve(ZoneSelector.on_level(2)) == _ranges((16, 20))
        assert resolver.resolve(ZoneSelector.on_level(3)) == []

    def test_custom_passes_through(self, small_roofline: PixelMap) -> None:
        ranges = _ranges((2, 4), (30, 35))
        assert ZoneResolver(small_roofline).resolve(ZoneSelector.custom(ranges)) == ranges

    def test_pixel_count_and_matching_segments(self, small_roofline: PixelMap) -> None:
        resolver = ZoneResolver(small_roofline)
        selector = ZoneSelector.custom(_ranges((8, 11)))
        assert resolver.pixel_count(selector) == 4
        assert [s.id for s in resolver.matching_segments(selector)] == ["front_eave", "front_peak"]
