"""Design studio session: validate, clarify, compose."""

from rooflight.core.studio.orchestrator import DesignStudioOrchestrator
from rooflight.core.studio.state import StudioState, StudioStatus

__all__ = ["DesignStudioOrchestrator", "StudioState", "StudioStatus"]
