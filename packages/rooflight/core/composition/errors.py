"""Composition errors."""

from __future__ import annotations


class CompositionError(Exception):
    """Raised when an intent cannot be turned into a pattern.

    Carries the same information as a failed CompositionResult so callers
    that prefer exceptions lose nothing.

    Attributes:
        reason: Human-readable failure message.
        recommend_manual: Steer the user to manual controls instead of retrying.
        suggestions: Things the user can try.
    """

    def __init__(
        self,
        *,
        reason: str,
        recommend_manual: bool = False,
        suggestions: list[str] | None = None,
    ) -> None:
        self.reason = reason
        self.recommend_manual = recommend_manual
        self.suggestions = list(suggestions or [])
        parts = [f"Composition failed: {reason}"]
        if recommend_manual:
            parts.append("manual controls recommended")
        if self.suggestions:
            parts.append(f"suggestions={'; '.join(self.suggestions)}")
        super().__init__(" | ".join(parts))


__all__ = ["CompositionError"]
