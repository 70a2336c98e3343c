"""Roofline pixel map models.

A PixelMap is the physical LED layout along a roofline: an ordered list of
segments, each a contiguous inclusive pixel range with a structural type and
optional anchor points. Produced by an external mapping editor and read-only
to the composition pipeline.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class SegmentType(str, Enum):
    """Structural type of a roofline segment.

    Attributes:
        RUN: Horizontal or diagonal run; default anchors at both ends.
        CORNER: Corner or direction change; anchor at the corner point.
        PEAK: Roof apex; anchor at the peak.
        COLUMN: Vertical column or pillar; anchors at top and bottom.
        CONNECTOR: Transition between sections; no default anchors.
    """

    RUN = "run"
    CORNER = "corner"
    PEAK = "peak"
    COLUMN = "column"
    CONNECTOR = "connector"


class UnknownSegmentError(KeyError):
    """Raised when a segment id is not present in the pixel map."""

    def __init__(self, segment_id: str, available: list[str]) -> None:
        self.segment_id = segment_id
        self.available = available
        super().__init__(f"Unknown segment '{segment_id}'. Available: {', '.join(available)}")


class RooflineSegment(BaseModel):
    """One contiguous run of pixels on the roofline.

    Attributes:
        id: Stable segment identifier.
        name: Human label, matched by location selectors ("Front Left Eave").
        type: Structural type.
        start_pixel: First pixel (inclusive, global index).
        end_pixel: Last pixel (inclusive, global index).
        anchor_offsets: Anchor positions, local to the segment (0-based).
        anchor_led_count: Pixels lit per anchor.
        level: Story number (1 = ground floor), if known.
    """

    model_config = ConfigDict(
        extra="forbid", frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    id: str = Field(min_length=1)
    name: str = ""
    type: SegmentType = SegmentType.RUN
    start_pixel: int = Field(ge=0)
    end_pixel: int = Field(ge=0)
    anchor_offsets: list[int] = Field(default_factory=list)
    anchor_led_count: int = Field(default=2, ge=1)
    level: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _check_bounds(self) -> RooflineSegment:
        if self.end_pixel < self.start_pixel:
            raise ValueError(
                f"Segment '{self.id}': end_pixel {self.end_pixel} < start_pixel {self.start_pixel}"
            )
        span = self.end_pixel - self.start_pixel
        bad = [offset for offset in self.anchor_offsets if offset < 0 or offset > span]
        if bad:
            raise ValueError(f"Segment '{self.id}': anchor offsets {bad} outside [0, {span}]")
        return self

    @property
    def pixel_count(self) -> int:
        return self.end_pixel - self.start_pixel + 1

    @property
    def global_anchor_pixels(self) -> list[int]:
        """Anchor offsets converted to global pixel indices."""
        return [self.start_pixel + offset for offset in self.anchor_offsets]

    @property
    def default_anchors(self) -> list[int]:
        """Suggested local anchor offsets for this segment's type."""
        last = max(self.pixel_count - self.anchor_led_count, 0)
        if self.type in (SegmentType.RUN, SegmentType.COLUMN):
            return sorted({0, last})
        if self.type in (SegmentType.CORNER, SegmentType.PEAK):
            return [last // 2]
        return []

    def contains(self, pixel: int) -> bool:
        return self.start_pixel <= pixel <= self.end_pixel

    def intersects(self, start: int, end: int) -> bool:
        """True if this segment shares at least one pixel with [start, end]."""
        return self.start_pixel <= end and self.end_pixel >= start

    def is_anchor_pixel(self, pixel: int) -> bool:
        """True if a global pixel falls inside one of this segment's anchor zones."""
        return any(
            anchor <= pixel < anchor + self.anchor_led_count
            for anchor in self.global_anchor_pixels
        )


class PixelMap(BaseModel):
    """Roofline configuration: segments plus total pixel count.

    Segments are stored sorted by start pixel. They must not overlap and must
    jointly cover ``[0, total_pixel_count)``.
    """

    model_config = ConfigDict(
        extra="forbid", frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    total_pixel_count: int = Field(gt=0)
    segments: list[RooflineSegment] = Field(min_length=1)

    @field_validator("segments")
    @classmethod
    def _sort_segments(cls, v: list[RooflineSegment]) -> list[RooflineSegment]:
        return sorted(v, key=lambda s: s.start_pixel)

    @model_validator(mode="after")
    def _check_layout(self) -> PixelMap:
        ids = [s.id for s in self.segments]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate segment ids: {duplicates}")

        expected = 0
        for segment in self.segments:
            if segment.start_pixel < expected:
                raise ValueError(
                    f"Segment '{segment.id}' starts at {segment.start_pixel}, "
                    f"overlapping the previous segment (ends at {expected - 1})"
                )
            if segment.start_pixel > expected:
                raise ValueError(
                    f"Gap in pixel map: pixels {expected}-{segment.start_pixel - 1} "
                    "belong to no segment"
                )
            expected = segment.end_pixel + 1

        if expected != self.total_pixel_count:
            raise ValueError(
                f"Segments cover {expected} pixels but total_pixel_count is "
                f"{self.total_pixel_count}"
            )
        return self

    def get_segment(self, segment_id: str) -> RooflineSegment:
        """Look up a segment by id.

        Raises:
            UnknownSegmentError: If no segment has this id
        """
        for segment in self.segments:
            if segment.id == segment_id:
                return segment
        raise UnknownSegmentError(segment_id, [s.id for s in self.segments])

    def has_segment(self, segment_id: str) -> bool:
        return any(s.id == segment_id for s in self.segments)

    def segments_of_type(self, segment_type: SegmentType) -> list[RooflineSegment]:
        return [s for s in self.segments if s.type == segment_type]

    def segments_on_level(self, level: int) -> list[RooflineSegment]:
        return [s for s in self.segments if s.level == level]

    @property
    def all_levels(self) -> list[int]:
        """Distinct story levels present, ascending."""
        return sorted({s.level for s in self.segments if s.level is not None})

    @property
    def all_global_anchor_pixels(self) -> list[int]:
        """Every anchor start pixel across the map, ascending."""
        return sorted(p for s in self.segments for p in s.global_anchor_pixels)


__all__ = [
    "PixelMap",
    "RooflineSegment",
    "SegmentType",
    "UnknownSegmentError",
]
