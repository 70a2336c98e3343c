"""Constraint and ambiguity vocabulary."""

from enum import Enum


class ConstraintType(str, Enum):
    """What a design constraint checks.

    Attributes:
        SPACING_MATH: Spacing parameters fit the resolved pixel count.
        SYMMETRY: Symmetric placement requirement.
        COLOR_CONTRAST: Overlapping layers remain distinguishable.
        ZONE_OVERLAP: Equal-priority layers do not fight over pixels.
        PIXEL_COUNT: Zone references and pixel bounds exist on the map.
        ZONE_EXISTS: Zone resolves to at least one pixel.
    """

    SPACING_MATH = "spacing_math"
    SYMMETRY = "symmetry"
    COLOR_CONTRAST = "color_contrast"
    ZONE_OVERLAP = "zone_overlap"
    PIXEL_COUNT = "pixel_count"
    ZONE_EXISTS = "zone_exists"


class AmbiguityType(str, Enum):
    """Why an intent needs user input before it can be composed."""

    ZONE_AMBIGUITY = "zone_ambiguity"
    COLOR_AMBIGUITY = "color_ambiguity"
    SPACING_IMPOSSIBLE = "spacing_impossible"
    DIRECTION_AMBIGUITY = "direction_ambiguity"
    CONFLICT_RESOLUTION = "conflict_resolution"
    EFFECT_AMBIGUITY = "effect_ambiguity"


__all__ = [
    "AmbiguityType",
    "ConstraintType",
]
