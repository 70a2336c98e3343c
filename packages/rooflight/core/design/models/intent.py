"""Design intent models.

A DesignIntent is the structured description of a lighting design: ordered
layers (zone + colors + fill rule + optional motion), global settings, and
the constraints and ambiguities attached by validation. Upstream NLU produces
it; validation and clarification refine it by returning new copies.

Tagged choices (zone selector, spacing rule, pattern rule) are one model with
a ``type`` discriminator plus the fields that variant needs.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from rooflight.core.design.vocabulary import (
    AmbiguityType,
    ArchitecturalRole,
    ConstraintType,
    MotionDirection,
    MotionType,
    PatternType,
    SpacingType,
    ZoneType,
)
from rooflight.core.utils.color import RGBW

_MODEL_CONFIG = ConfigDict(
    extra="forbid", frozen=True, alias_generator=to_camel, populate_by_name=True
)


class PixelRange(BaseModel):
    """Inclusive global pixel range ``[start, end]``."""

    model_config = _MODEL_CONFIG

    start: int = Field(ge=0)
    end: int = Field(ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> PixelRange:
        if self.end < self.start:
            raise ValueError(f"PixelRange end {self.end} < start {self.start}")
        return self

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def intersects(self, other: PixelRange) -> bool:
        return self.start <= other.end and self.end >= other.start


class ZoneSelector(BaseModel):
    """Which part of the roofline a layer targets.

    Attributes:
        type: Active variant.
        segment_ids: SEGMENTS - ids to include (None = every segment).
        roles: ARCHITECTURAL - roles to match against segment types.
        location: LOCATION - side keyword (front/back/left/right or free text).
        level: LEVEL - story number.
        pixel_ranges: CUSTOM - explicit ranges, passed through unchanged.
    """

    model_config = _MODEL_CONFIG

    type: ZoneType = ZoneType.ALL
    segment_ids: list[str] | None = None
    roles: list[ArchitecturalRole] | None = None
    location: str | None = None
    level: int | None = None
    pixel_ranges: list[PixelRange] | None = None

    @model_validator(mode="after")
    def _check_variant(self) -> ZoneSelector:
        if self.type == ZoneType.ARCHITECTURAL and not self.roles:
            raise ValueError("architectural zone requires at least one role")
        if self.type == ZoneType.LOCATION and not (self.location and self.location.strip()):
            raise ValueError("location zone requires a location keyword")
        if self.type == ZoneType.LEVEL and self.level is None:
            raise ValueError("level zone requires a level")
        if self.type == ZoneType.CUSTOM and self.pixel_ranges is None:
            raise ValueError("custom zone requires pixel_ranges")
        return self

    @classmethod
    def all(cls) -> ZoneSelector:
        return cls(type=ZoneType.ALL)

    @classmethod
    def segments(cls, segment_ids: list[str]) -> ZoneSelector:
        return cls(type=ZoneType.SEGMENTS, segment_ids=list(segment_ids))

    @classmethod
    def architectural(cls, roles: list[ArchitecturalRole]) -> ZoneSelector:
        return cls(type=ZoneType.ARCHITECTURAL, roles=list(roles))

    @classmethod
    def at_location(cls, location: str) -> ZoneSelector:
        return cls(type=ZoneType.LOCATION, location=location)

    @classmethod
    def on_level(cls, level: int) -> ZoneSelector:
        return cls(type=ZoneType.LEVEL, level=level)

    @classmethod
    def custom(cls, ranges: list[PixelRange]) -> ZoneSelector:
        return cls(type=ZoneType.CUSTOM, pixel_ranges=list(ranges))

    @property
    def description(self) -> str:
        """Short human phrase for this zone ("peaks and corners", "front side")."""
        return _ZONE_DESCRIPTIONS[self.type](self)


_ZONE_DESCRIPTIONS = {
    ZoneType.ALL: lambda z: "everywhere",
    ZoneType.SEGMENTS: lambda z: ", ".join(z.segment_ids) if z.segment_ids else "specific segments",
    ZoneType.ARCHITECTURAL: lambda z: " and ".join(r.display_name for r in z.roles or []),
    ZoneType.LOCATION: lambda z: f"{z.location} side",
    ZoneType.LEVEL: lambda z: "first floor" if z.level == 1 else f"floor {z.level}",
    ZoneType.CUSTOM: lambda z: "custom selection",
}


class SpacingRule(BaseModel):
    """Which pixels inside a zone are lit.

    Attributes:
        type: Active variant.
        on_count: PATTERN - lit block size; EQUALLY_SPACED - number of lit pixels.
        off_count: PATTERN - dark block size.
        start_with_on: PATTERN - phase of the first block.
        interval: EVERY_NTH - stride (defaults to on_count + off_count).
    """

    model_config = _MODEL_CONFIG

    type: SpacingType
    on_count: int = Field(default=1, ge=0)
    off_count: int = Field(default=0, ge=0)
    start_with_on: bool = True
    interval: int | None = None

    @classmethod
    def pattern(cls, on_count: int, off_count: int, start_with_on: bool = True) -> SpacingRule:
        return cls(
            type=SpacingType.PATTERN,
            on_count=on_count,
            off_count=off_count,
            start_with_on=start_with_on,
        )

    @classmethod
    def every_other(cls) -> SpacingRule:
        return cls.pattern(1, 1)

    @classmethod
    def one_on_two_off(cls) -> SpacingRule:
        return cls.pattern(1, 2)

    @classmethod
    def two_on_one_off(cls) -> SpacingRule:
        return cls.pattern(2, 1)

    @classmethod
    def equally_spaced(cls, count: int) -> SpacingRule:
        return cls(type=SpacingType.EQUALLY_SPACED, on_count=count)

    @classmethod
    def every_nth(cls, interval: int) -> SpacingRule:
        return cls(
            type=SpacingType.EVERY_NTH, on_count=1, off_count=max(interval - 1, 0), interval=interval
        )

    @classmethod
    def anchors_only(cls) -> SpacingRule:
        return cls(type=SpacingType.ANCHORS_ONLY)

    @classmethod
    def continuous(cls) -> SpacingRule:
        return cls(type=SpacingType.CONTINUOUS)

    @property
    def effective_interval(self) -> int:
        return self.interval if self.interval is not None else self.on_count + self.off_count

    @property
    def description(self) -> str:
        if self.type == SpacingType.PATTERN:
            if self.on_count == 1 and self.off_count == 1:
                return "every other"
            return f"{self.on_count} on, {self.off_count} off"
        if self.type == SpacingType.EQUALLY_SPACED:
            return f"{self.on_count} equally spaced"
        if self.type == SpacingType.EVERY_NTH:
            return f"every {self.effective_interval} pixels"
        if self.type == SpacingType.ANCHORS_ONLY:
            return "anchors only"
        return "continuous"


class ColorAssignment(BaseModel):
    """Colors for a layer plus the optional spacing rule.

    The "on" color for spacing rules is the accent color when set, else the
    primary. The fill color, when set, paints the dark blocks of a pattern.
    """

    model_config = _MODEL_CONFIG

    primary_color: RGBW
    secondary_color: RGBW | None = None
    accent_color: RGBW | None = None
    fill_color: RGBW | None = None
    spacing_rule: SpacingRule | None = None

    @property
    def on_color(self) -> tuple[int, int, int, int]:
        return self.accent_color if self.accent_color is not None else self.primary_color


class GradientStop(BaseModel):
    model_config = _MODEL_CONFIG

    position: float = Field(ge=0.0, le=1.0)
    color: RGBW


class PatternRule(BaseModel):
    """Per-pixel color rule used when no spacing rule is set."""

    model_config = _MODEL_CONFIG

    type: PatternType = PatternType.SOLID
    gradient_stops: list[GradientStop] = Field(default_factory=list)

    @classmethod
    def solid(cls) -> PatternRule:
        return cls(type=PatternType.SOLID)

    @classmethod
    def alternating(cls) -> PatternRule:
        return cls(type=PatternType.ALTERNATING)

    @classmethod
    def gradient(cls, stops: list[GradientStop]) -> PatternRule:
        return cls(type=PatternType.GRADIENT, gradient_stops=list(stops))


class MotionSettings(BaseModel):
    """Animation parameters mapped onto a WLED effect.

    Attributes:
        motion_type: Kind of animation.
        direction: Direction of travel.
        speed: WLED ``sx`` (0-255).
        intensity: WLED ``ix`` (0-255).
        reverse: WLED ``rev``.
        effect_id: WLED ``fx``; None or 0 means no device effect.
    """

    model_config = _MODEL_CONFIG

    motion_type: MotionType
    direction: MotionDirection = MotionDirection.LEFT_TO_RIGHT
    speed: int = Field(default=128, ge=0, le=255)
    intensity: int = Field(default=128, ge=0, le=255)
    reverse: bool = False
    effect_id: int | None = Field(default=None, ge=0)

    @classmethod
    def chase_left_to_right(cls, speed: int = 128) -> MotionSettings:
        return cls(motion_type=MotionType.CHASE, speed=speed, effect_id=28)

    @classmethod
    def chase_right_to_left(cls, speed: int = 128) -> MotionSettings:
        return cls(
            motion_type=MotionType.CHASE,
            direction=MotionDirection.RIGHT_TO_LEFT,
            speed=speed,
            reverse=True,
            effect_id=28,
        )

    @classmethod
    def wave(cls, direction: MotionDirection, speed: int = 128) -> MotionSettings:
        return cls(
            motion_type=MotionType.WAVE,
            direction=direction,
            speed=speed,
            intensity=180,
            reverse=direction == MotionDirection.RIGHT_TO_LEFT,
            effect_id=67,
        )

    @property
    def has_effect(self) -> bool:
        return bool(self.effect_id)


class DesignLayer(BaseModel):
    """One independent visual rule; higher priority wins on shared pixels."""

    model_config = _MODEL_CONFIG

    id: str = Field(min_length=1)
    name: str = ""
    target_zone: ZoneSelector = Field(default_factory=ZoneSelector.all)
    colors: ColorAssignment
    pattern: PatternRule = Field(default_factory=PatternRule.solid)
    motion: MotionSettings | None = None
    priority: int = 0
    enabled: bool = True

    @property
    def label(self) -> str:
        return self.name or self.id


class GlobalSettings(BaseModel):
    model_config = _MODEL_CONFIG

    brightness: int = Field(default=200, ge=0, le=255)
    smooth_transition: bool = True
    transition_duration_ms: int = Field(default=500, ge=0)

    @property
    def wire_transition(self) -> int:
        """WLED ``transition`` value, in tenths of a second."""
        return self.transition_duration_ms // 100 if self.smooth_transition else 0


class AlternativeSuggestion(BaseModel):
    """A concrete replacement offered for an unsatisfiable parameter.

    ``value`` carries the replacement itself (usually a SpacingRule);
    lower ``deviation_score`` means closer to what was asked for.
    """

    model_config = _MODEL_CONFIG

    id: str
    label: str
    description: str = ""
    value: Any = None
    deviation_score: float = Field(default=0.0, ge=0.0)


class DesignConstraint(BaseModel):
    """Result of one validation check.

    Advisory constraints never block composition; they surface as warnings.
    """

    model_config = _MODEL_CONFIG

    type: ConstraintType
    is_satisfied: bool
    failure_reason: str | None = None
    alternatives: list[AlternativeSuggestion] = Field(default_factory=list)
    layer_id: str | None = None
    advisory: bool = False

    @property
    def blocks_composition(self) -> bool:
        return not self.is_satisfied and not self.advisory


class ClarificationChoice(BaseModel):
    model_config = _MODEL_CONFIG

    id: str
    label: str
    description: str | None = None
    is_recommended: bool = False
    value: Any = None


class AmbiguityFlag(BaseModel):
    """Something the intent leaves open that a user must decide."""

    model_config = _MODEL_CONFIG

    type: AmbiguityType
    description: str
    choices: list[ClarificationChoice] = Field(default_factory=list)
    affected_layer_id: str | None = None
    source_clause: str | None = None
    # Raised by the constraint validator; recomputed every round.
    from_validation: bool = False

    @property
    def key(self) -> tuple[AmbiguityType, str | None]:
        """Identity used to match and de-duplicate flags."""
        return (self.type, self.affected_layer_id)


class DesignIntent(BaseModel):
    """Structured lighting design, refined until it is ready to compose."""

    model_config = _MODEL_CONFIG

    original_prompt: str = ""
    layers: list[DesignLayer] = Field(default_factory=list)
    global_settings: GlobalSettings = Field(default_factory=GlobalSettings)
    constraints: list[DesignConstraint] = Field(default_factory=list)
    ambiguities: list[AmbiguityFlag] = Field(default_factory=list)
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_layer_ids(self) -> DesignIntent:
        ids = [layer.id for layer in self.layers]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate layer ids: {duplicates}")
        return self

    @property
    def needs_clarification(self) -> bool:
        return bool(self.ambiguities)

    @property
    def all_constraints_satisfied(self) -> bool:
        return not any(c.blocks_composition for c in self.constraints)

    @property
    def is_ready(self) -> bool:
        return not self.needs_clarification and self.all_constraints_satisfied

    @property
    def enabled_layers(self) -> list[DesignLayer]:
        return [layer for layer in self.layers if layer.enabled]

    def get_layer(self, layer_id: str) -> DesignLayer | None:
        for layer in self.layers:
            if layer.id == layer_id:
                return layer
        return None

    def replace_layer(self, layer: DesignLayer) -> DesignIntent:
        """Return a copy with the same-id layer swapped for ``layer``."""
        layers = [layer if existing.id == layer.id else existing for existing in self.layers]
        return self.model_copy(update={"layers": layers})


__all__ = [
    "AlternativeSuggestion",
    "AmbiguityFlag",
    "ClarificationChoice",
    "ColorAssignment",
    "DesignConstraint",
    "DesignIntent",
    "DesignLayer",
    "GlobalSettings",
    "GradientStop",
    "MotionSettings",
    "PatternRule",
    "PixelRange",
    "SpacingRule",
    "ZoneSelector",
]
