"""Composition output models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from rooflight.core.design.vocabulary import MotionDirection
from rooflight.core.utils.color import RGBW


class LedColorGroup(BaseModel):
    """Inclusive run of pixels sharing one color.

    Attributes:
        start_led: First pixel (inclusive).
        end_led: Last pixel (inclusive).
        color: RGBW color.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    start_led: int = Field(ge=0)
    end_led: int = Field(ge=0)
    color: RGBW

    @model_validator(mode="after")
    def _check_order(self) -> LedColorGroup:
        if self.end_led < self.start_led:
            raise ValueError(f"LedColorGroup end_led {self.end_led} < start_led {self.start_led}")
        return self

    @property
    def length(self) -> int:
        return self.end_led - self.start_led + 1

    def contains(self, pixel: int) -> bool:
        return self.start_led <= pixel <= self.end_led


class PatternStats(BaseModel):
    """Summary numbers for a composed pattern."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    group_count: int
    unique_colors: int
    lit_pixels: int
    coverage_percent: float
    has_spacing: bool
    uses_anchors: bool
    has_motion: bool


class ComposedPattern(BaseModel):
    """Final output of composition, ready for device transport.

    Attributes:
        name: Short generated title.
        description: One clause per layer.
        color_groups: Canonical groups: sorted, non-overlapping, maximal.
        effect_id: WLED effect id of the primary motion (0 = static).
        speed: Primary motion speed.
        intensity: Primary motion intensity.
        brightness: Global brightness.
        has_motion: Any enabled layer declares motion.
        motion_direction: Direction of the primary motion.
        reverse: Primary motion reverse flag.
        wled_payload: Wire payload (indexed ``i`` form or effect ``col``/``fx`` form).
        used_colors: Distinct colors in first-seen order.
        total_pixels: Strip length targeted.
        warnings: Non-fatal composition warnings.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    description: str
    color_groups: list[LedColorGroup]
    effect_id: int = 0
    speed: int = 128
    intensity: int = 128
    brightness: int = 200
    has_motion: bool = False
    motion_direction: MotionDirection | None = None
    reverse: bool = False
    wled_payload: dict[str, Any]
    used_colors: list[RGBW] = Field(default_factory=list)
    total_pixels: int
    warnings: list[str] = Field(default_factory=list)
    has_spacing: bool = False
    uses_anchors: bool = False

    @property
    def lit_pixels(self) -> int:
        return sum(group.length for group in self.color_groups)

    @property
    def summary(self) -> str:
        parts = [f"{len(self.color_groups)} groups", f"{len(self.used_colors)} colors"]
        if self.has_motion:
            parts.append(f"effect {self.effect_id}")
        return f"{self.name} ({', '.join(parts)})"

    def stats(self) -> PatternStats:
        coverage = 100.0 * self.lit_pixels / self.total_pixels if self.total_pixels else 0.0
        return PatternStats(
            group_count=len(self.color_groups),
            unique_colors=len(self.used_colors),
            lit_pixels=self.lit_pixels,
            coverage_percent=round(coverage, 1),
            has_spacing=self.has_spacing,
            uses_anchors=self.uses_anchors,
            has_motion=self.has_motion,
        )


class CompositionResult(BaseModel):
    """Success (pattern + warnings) or failure (message + suggestions)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    pattern: ComposedPattern | None = None
    error_message: str | None = None
    suggestions: list[str] = Field(default_factory=list)
    recommend_manual: bool = False
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def success(cls, pattern: ComposedPattern, warnings: list[str] | None = None) -> CompositionResult:
        return cls(pattern=pattern, warnings=list(warnings or []))

    @classmethod
    def failure(
        cls,
        message: str,
        suggestions: list[str] | None = None,
        recommend_manual: bool = False,
    ) -> CompositionResult:
        return cls(
            error_message=message,
            suggestions=list(suggestions or []),
            recommend_manual=recommend_manual,
        )

    @property
    def is_success(self) -> bool:
        return self.pattern is not None


__all__ = [
    "ComposedPattern",
    "CompositionResult",
    "LedColorGroup",
    "PatternStats",
]
