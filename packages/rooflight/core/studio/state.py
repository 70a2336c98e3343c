"""Studio state carried between orchestrator calls."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from rooflight.core.clarification.models import ClarificationQuestion
from rooflight.core.design.models.intent import DesignIntent
from rooflight.core.design.models.pattern import ComposedPattern


class StudioStatus(str, Enum):
    """Where a design session stands."""

    IDLE = "idle"
    PROCESSING = "processing"
    NEEDS_CLARIFICATION = "needs_clarification"
    READY = "ready"
    ERROR = "error"
    MANUAL_REQUESTED = "manual_requested"


def _clarification_message(state: StudioState) -> str:
    count = len(state.questions)
    if count <= 1:
        return "I have a quick question"
    return f"I have {count} quick questions"


_STATUS_MESSAGES = {
    StudioStatus.IDLE: lambda s: "Ready for your design",
    StudioStatus.PROCESSING: lambda s: "Understanding your request...",
    StudioStatus.NEEDS_CLARIFICATION: _clarification_message,
    StudioStatus.READY: lambda s: "Your design is ready!",
    StudioStatus.ERROR: lambda s: s.error_message or "Something went wrong",
    StudioStatus.MANUAL_REQUESTED: lambda s: f"Opening manual controls for {s.manual_aspect or 'settings'}",
}


class StudioState(BaseModel):
    """Immutable snapshot of a design session.

    Attributes:
        status: Current state.
        intent: Latest refined intent.
        questions: Open clarification questions (NEEDS_CLARIFICATION).
        pattern: Composed pattern (READY).
        error_message: Why the session failed (ERROR).
        suggestions: Follow-up hints for the user.
        recommend_manual: Whether manual controls are the better route.
        manual_aspect: What the user wants to set by hand (MANUAL_REQUESTED).
        warnings: Non-blocking issues found along the way.
        round: Clarification rounds answered so far.
        accepted: Answered issue keys mapped to the layer they were accepted on.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    status: StudioStatus = StudioStatus.IDLE
    intent: DesignIntent | None = None
    questions: list[ClarificationQuestion] = Field(default_factory=list)
    pattern: ComposedPattern | None = None
    error_message: str | None = None
    suggestions: list[str] = Field(default_factory=list)
    recommend_manual: bool = False
    manual_aspect: str | None = None
    warnings: list[str] = Field(default_factory=list)
    round: int = Field(default=0, ge=0)
    accepted: dict[str, str] = Field(default_factory=dict)

    @property
    def status_message(self) -> str:
        return _STATUS_MESSAGES[self.status](self)

    @property
    def wled_payload(self) -> dict[str, Any] | None:
        return self.pattern.wled_payload if self.pattern is not None else None

    def to_output(self) -> dict[str, Any]:
        """Compact JSON-ready view for presentation layers."""
        output: dict[str, Any] = {
            "status": self.status.value,
            "message": self.status_message,
            "round": self.round,
        }
        if self.status == StudioStatus.READY and self.pattern is not None:
            output["pattern"] = {
                "name": self.pattern.name,
                "description": self.pattern.description,
                "summary": self.pattern.summary,
            }
            output["wled_payload"] = self.pattern.wled_payload
        if self.questions:
            output["questions"] = [
                {
                    "id": q.id,
                    "type": q.type.value,
                    "question": q.question_text,
                    "options": [
                        {
                            "id": o.id,
                            "label": o.label,
                            "description": o.description,
                            "recommended": o.is_recommended,
                        }
                        for o in q.options
                    ],
                }
                for q in self.questions
            ]
        if self.error_message:
            output["error"] = self.error_message
        if self.suggestions:
            output["suggestions"] = list(self.suggestions)
        if self.recommend_manual:
            output["recommend_manual"] = True
        if self.warnings:
            output["warnings"] = list(self.warnings)
        return output


__all__ = ["StudioState", "StudioStatus"]
