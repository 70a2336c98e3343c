"""Fill vocabulary - how pixels inside a zone are lit."""

from enum import Enum


class SpacingType(str, Enum):
    """Spacing rule variants.

    Attributes:
        PATTERN: Repeating on/off cycle with a start phase.
        EQUALLY_SPACED: N single pixels spread across the range, endpoints included.
        EVERY_NTH: One pixel every fixed interval from the range start.
        ANCHORS_ONLY: Only segment anchor zones inside the range.
        CONTINUOUS: The whole range.
    """

    PATTERN = "pattern"
    EQUALLY_SPACED = "equally_spaced"
    EVERY_NTH = "every_nth"
    ANCHORS_ONLY = "anchors_only"
    CONTINUOUS = "continuous"


class PatternType(str, Enum):
    """Pattern rule variants (used when no spacing rule is set).

    Attributes:
        SOLID: One color across the range.
        ALTERNATING: Primary and secondary by pixel parity.
        GRADIENT: Linear interpolation between sorted color stops.
        WAVE: Flat primary fill; animation comes from motion settings.
        TWINKLE: Flat primary fill; animation comes from motion settings.
    """

    SOLID = "solid"
    ALTERNATING = "alternating"
    GRADIENT = "gradient"
    WAVE = "wave"
    TWINKLE = "twinkle"


__all__ = [
    "PatternType",
    "SpacingType",
]
