"""Roofline pixel map."""

from rooflight.core.roofline.models import (
    PixelMap,
    RooflineSegment,
    SegmentType,
    UnknownSegmentError,
)

__all__ = [
    "PixelMap",
    "RooflineSegment",
    "SegmentType",
    "UnknownSegmentError",
]
