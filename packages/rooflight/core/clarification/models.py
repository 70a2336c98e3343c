"""Clarification question models."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from rooflight.core.design.vocabulary import AmbiguityType
from rooflight.core.utils.color import RGBW


class ClarificationType(str, Enum):
    """Kinds of clarification question, in presentation order.

    Attributes:
        ZONE: Which part of the roofline.
        COLOR: Which shade of a named color.
        SPACING: Which spacing alternative.
        DIRECTION: Which direction of travel.
        EFFECT: Which animation effect.
        CONFLICT: Which layer wins an overlap.
        BRIGHTNESS: How bright.
        SPEED: How fast.
        CONFIRMATION: Yes/no confirmation.
        MANUAL: Fall back to manual controls.
    """

    ZONE = "zone"
    COLOR = "color"
    SPACING = "spacing"
    DIRECTION = "direction"
    EFFECT = "effect"
    CONFLICT = "conflict"
    BRIGHTNESS = "brightness"
    SPEED = "speed"
    CONFIRMATION = "confirmation"
    MANUAL = "manual"

    @property
    def display_name(self) -> str:
        return CLARIFICATION_DISPLAY_NAMES[self]

    @property
    def priority(self) -> int:
        """Sort key; lower is asked first."""
        return list(ClarificationType).index(self)


CLARIFICATION_DISPLAY_NAMES: dict[ClarificationType, str] = {
    ClarificationType.ZONE: "Which area?",
    ClarificationType.COLOR: "Which shade?",
    ClarificationType.SPACING: "Spacing options",
    ClarificationType.DIRECTION: "Which direction?",
    ClarificationType.EFFECT: "Which effect?",
    ClarificationType.CONFLICT: "Resolve conflict",
    ClarificationType.BRIGHTNESS: "How bright?",
    ClarificationType.SPEED: "How fast?",
    ClarificationType.CONFIRMATION: "Confirm",
    ClarificationType.MANUAL: "Manual controls",
}

AMBIGUITY_QUESTION_TYPES: dict[AmbiguityType, ClarificationType] = {
    AmbiguityType.ZONE_AMBIGUITY: ClarificationType.ZONE,
    AmbiguityType.COLOR_AMBIGUITY: ClarificationType.COLOR,
    AmbiguityType.SPACING_IMPOSSIBLE: ClarificationType.SPACING,
    AmbiguityType.DIRECTION_AMBIGUITY: ClarificationType.DIRECTION,
    AmbiguityType.CONFLICT_RESOLUTION: ClarificationType.CONFLICT,
    AmbiguityType.EFFECT_AMBIGUITY: ClarificationType.EFFECT,
}


class ClarificationOption(BaseModel):
    """One answer to a clarification question.

    ``value`` is what gets folded into the layer when chosen (a ZoneSelector,
    SpacingRule, color, direction...).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    label: str
    description: str | None = None
    is_recommended: bool = False
    value: Any = None
    color_swatches: list[RGBW] = Field(default_factory=list)
    preview_payload: dict[str, Any] | None = None


class ClarificationQuestion(BaseModel):
    """A multiple-choice question generated from one ambiguity."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str
    type: ClarificationType
    question_text: str
    options: list[ClarificationOption] = Field(min_length=1)
    ambiguity_type: AmbiguityType | None = None
    source_text: str | None = None
    affected_layer_id: str | None = None

    @property
    def recommended_option(self) -> ClarificationOption | None:
        return next((o for o in self.options if o.is_recommended), None)

    def get_option(self, option_id: str) -> ClarificationOption | None:
        return next((o for o in self.options if o.id == option_id), None)


class ClarificationError(Exception):
    """Raised when answers reference unknown questions or options."""

    def __init__(
        self,
        *,
        reason: str,
        question_id: str | None = None,
        option_id: str | None = None,
    ) -> None:
        self.reason = reason
        self.question_id = question_id
        self.option_id = option_id

        parts = [reason]
        if question_id:
            parts.append(f"question={question_id}")
        if option_id:
            parts.append(f"option={option_id}")
        super().__init__(" | ".join(parts))


__all__ = [
    "AMBIGUITY_QUESTION_TYPES",
    "CLARIFICATION_DISPLAY_NAMES",
    "ClarificationError",
    "ClarificationOption",
    "ClarificationQuestion",
    "ClarificationType",
]
