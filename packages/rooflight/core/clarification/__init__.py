"""Clarification questions: build them from ambiguities, fold answers back in."""

from rooflight.core.clarification.manager import (
    MANUAL_OPTION_ID,
    ClarificationManager,
    preview_payload,
)
from rooflight.core.clarification.models import (
    ClarificationError,
    ClarificationOption,
    ClarificationQuestion,
    ClarificationType,
)

__all__ = [
    "MANUAL_OPTION_ID",
    "ClarificationError",
    "ClarificationManager",
    "ClarificationOption",
    "ClarificationQuestion",
    "ClarificationType",
    "preview_payload",
]
