"""Design intent and composition output models."""

from rooflight.core.design.models.intent import (
    AlternativeSuggestion,
    AmbiguityFlag,
    ClarificationChoice,
    ColorAssignment,
    DesignConstraint,
    DesignIntent,
    DesignLayer,
    GlobalSettings,
    GradientStop,
    MotionSettings,
    PatternRule,
    PixelRange,
    SpacingRule,
    ZoneSelector,
)
from rooflight.core.design.models.pattern import (
    ComposedPattern,
    CompositionResult,
    LedColorGroup,
    PatternStats,
)

__all__ = [
    "AlternativeSuggestion",
    "AmbiguityFlag",
    "ClarificationChoice",
    "ColorAssignment",
    "ComposedPattern",
    "CompositionResult",
    "DesignConstraint",
    "DesignIntent",
    "DesignLayer",
    "GlobalSettings",
    "GradientStop",
    "LedColorGroup",
    "MotionSettings",
    "PatternRule",
    "PatternStats",
    "PixelRange",
    "SpacingRule",
    "ZoneSelector",
]
