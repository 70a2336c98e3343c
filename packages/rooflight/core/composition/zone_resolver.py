"""Zone resolver: maps zone selectors to concrete pixel ranges.

Segment-backed selectors return one range per matching segment, in map
order, so downstream rendering keeps per-segment anchor context. An empty
result is a valid answer ("this layer covers nothing"), not an error.
"""

from __future__ import annotations

import logging

from rooflight.core.design.models.intent import PixelRange, ZoneSelector
from rooflight.core.design.vocabulary import ZoneType, location_terms, role_matches
from rooflight.core.roofline.models import PixelMap, RooflineSegment

logger = logging.getLogger(__name__)


class ZoneResolver:
    """Resolves zone selectors against a pixel map.

    Args:
        pixel_map: Roofline layout to resolve against.

    Example:
        >>> resolver = ZoneResolver(pixel_map)
        >>> resolver.resolve(ZoneSelector.architectural([ArchitecturalRole.PEAK]))
        [PixelRange(start=10, end=15)]
    """

    def __init__(self, pixel_map: PixelMap) -> None:
        self._pixel_map = pixel_map
        self._handlers = {
            ZoneType.ALL: self._resolve_all,
            ZoneType.SEGMENTS: self._resolve_segments,
            ZoneType.ARCHITECTURAL: self._resolve_architectural,
            ZoneType.LOCATION: self._resolve_location,
            ZoneType.LEVEL: self._resolve_level,
            ZoneType.CUSTOM: self._resolve_custom,
        }

    @property
    def pixel_map(self) -> PixelMap:
        return self._pixel_map

    def resolve(self, selector: ZoneSelector) -> list[PixelRange]:
        """Resolve a selector to pixel ranges.

        Args:
            selector: Zone selector from a design layer.

        Returns:
            Pixel ranges, possibly empty.
        """
        ranges = self._handlers[selector.type](selector)
        logger.debug(f"Zone '{selector.description}' resolved to {len(ranges)} range(s)")
        return ranges

    def pixel_count(self, selector: ZoneSelector) -> int:
        """Total pixels covered by the resolved ranges."""
        return sum(r.length for r in self.resolve(selector))

    def matching_segments(self, selector: ZoneSelector) -> list[RooflineSegment]:
        """Segments intersecting any resolved range, in map order."""
        ranges = self.resolve(selector)
        return [
            segment
            for segment in self._pixel_map.segments
            if any(segment.intersects(r.start, r.end) for r in ranges)
        ]

    def missing_segment_ids(self, selector: ZoneSelector) -> list[str]:
        """Segment ids named by a SEGMENTS selector that the map lacks."""
        if selector.type != ZoneType.SEGMENTS or selector.segment_ids is None:
            return []
        return [sid for sid in selector.segment_ids if not self._pixel_map.has_segment(sid)]

    @staticmethod
    def _segment_range(segment: RooflineSegment) -> PixelRange:
        return PixelRange(start=segment.start_pixel, end=segment.end_pixel)

    def _ranges_for(self, segments: list[RooflineSegment]) -> list[PixelRange]:
        return [self._segment_range(s) for s in segments]

    def _resolve_all(self, selector: ZoneSelector) -> list[PixelRange]:
        return [PixelRange(start=0, end=self._pixel_map.total_pixel_count - 1)]

    def _resolve_segments(self, selector: ZoneSelector) -> list[PixelRange]:
        if selector.segment_ids is None:
            return self._ranges_for(self._pixel_map.segments)
        wanted = set(selector.segment_ids)
        return self._ranges_for([s for s in self._pixel_map.segments if s.id in wanted])

    def _resolve_architectural(self, selector: ZoneSelector) -> list[PixelRange]:
        roles = selector.roles or []
        return self._ranges_for(
            [
                s
                for s in self._pixel_map.segments
                if any(role_matches(role, s.type) for role in roles)
            ]
        )

    def _resolve_location(self, selector: ZoneSelector) -> list[PixelRange]:
        terms = location_terms(selector.location or "")
        return self._ranges_for(
            [s for s in self._pixel_map.segments if any(t in s.name.lower() for t in terms)]
        )

    def _resolve_level(self, selector: ZoneSelector) -> list[PixelRange]:
        if selector.level is None:
            return []
        return self._ranges_for(self._pixel_map.segments_on_level(selector.level))

    def _resolve_custom(self, selector: ZoneSelector) -> list[PixelRange]:
        return list(selector.pixel_ranges or [])


__all__ = ["ZoneResolver"]
