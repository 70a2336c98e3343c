"""Design vocabulary - controlled enums for layers, zones and clarification.

Single source of truth for the enums used across composition, validation
and clarification.
"""

from rooflight.core.design.vocabulary.fill import PatternType, SpacingType
from rooflight.core.design.vocabulary.issues import AmbiguityType, ConstraintType
from rooflight.core.design.vocabulary.motion import (
    EFFECT_IDS,
    SPEED_PRESETS,
    MotionDirection,
    MotionType,
    resolve_effect_id,
)
from rooflight.core.design.vocabulary.zones import (
    LOCATION_KEYWORDS,
    ROLE_SEGMENT_TYPES,
    ArchitecturalRole,
    ZoneType,
    location_terms,
    role_matches,
)

__all__ = [
    "EFFECT_IDS",
    "LOCATION_KEYWORDS",
    "ROLE_SEGMENT_TYPES",
    "SPEED_PRESETS",
    "AmbiguityType",
    "ArchitecturalRole",
    "ConstraintType",
    "MotionDirection",
    "MotionType",
    "PatternType",
    "SpacingType",
    "ZoneType",
    "location_terms",
    "resolve_effect_id",
    "role_matches",
]
