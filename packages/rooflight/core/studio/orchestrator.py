"""Design studio orchestrator.

Drives one design session: validate, ask, refine, compose. The orchestrator
holds no session data; every call takes the previous StudioState and returns
the next one.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from rooflight.core.clarification.manager import MANUAL_OPTION_ID, ClarificationManager
from rooflight.core.clarification.models import ClarificationQuestion
from rooflight.core.composition.composer import PatternComposer
from rooflight.core.config.models import AppConfig
from rooflight.core.design.models.intent import DesignIntent
from rooflight.core.design.models.pattern import CompositionResult
from rooflight.core.design.vocabulary import AmbiguityType, ConstraintType
from rooflight.core.roofline.models import PixelMap
from rooflight.core.studio.state import StudioState, StudioStatus
from rooflight.core.validation.constraint_validator import ConstraintValidator, ValidationResult

logger = logging.getLogger(__name__)


_ANSWERED_CONSTRAINTS = {
    AmbiguityType.ZONE_AMBIGUITY: ConstraintType.ZONE_EXISTS,
    AmbiguityType.SPACING_IMPOSSIBLE: ConstraintType.SPACING_MATH,
    AmbiguityType.CONFLICT_RESOLUTION: ConstraintType.ZONE_OVERLAP,
}


def _issue_key(ambiguity_type: str, layer_id: str | None) -> str:
    return f"{ambiguity_type}:{layer_id or ''}"


class DesignStudioOrchestrator:
    """State machine from design intent to composed pattern.

    States: idle -> processing -> needs_clarification | ready | error;
    needs_clarification -> (answers) -> processing | manual_requested.

    Args:
        config: Application config (defaults if None).

    Example:
        >>> studio = DesignStudioOrchestrator()
        >>> state = studio.process(intent, pixel_map)
        >>> if state.status == StudioStatus.NEEDS_CLARIFICATION:
        ...     state = studio.apply_clarifications(state, {"zone_0": "peaks"}, pixel_map)
    """

    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config or AppConfig()
        self._manager = ClarificationManager(self._config.clarification)

    @property
    def manager(self) -> ClarificationManager:
        return self._manager

    def start(self) -> StudioState:
        return StudioState(status=StudioStatus.IDLE)

    def process(self, intent: DesignIntent, pixel_map: PixelMap) -> StudioState:
        """Validate a fresh intent and either ask questions or compose.

        Args:
            intent: Intent from upstream understanding.
            pixel_map: Roofline layout.

        Returns:
            NEEDS_CLARIFICATION, READY or ERROR state.
        """
        logger.info(f"Processing design with {len(intent.layers)} layer(s)")
        return self._advance(intent, pixel_map, round_number=0, accepted={})

    def apply_clarifications(
        self,
        state: StudioState,
        choices: Mapping[str, str],
        pixel_map: PixelMap,
    ) -> StudioState:
        """Apply answers to the open questions and continue.

        Args:
            state: NEEDS_CLARIFICATION state returned earlier.
            choices: ``question_id -> option_id``.
            pixel_map: Roofline layout.

        Returns:
            Next state. Choosing "manual" anywhere yields MANUAL_REQUESTED.

        Raises:
            ClarificationError: If a choice names an unknown question or option
            ValueError: If ``state`` has no intent to refine
        """
        if state.intent is None:
            raise ValueError(f"Cannot apply clarifications in state '{state.status.value}'")

        if self._manager.wants_manual(choices):
            aspect = self._manager.manual_aspect(state.questions, choices)
            logger.info(f"Manual controls requested for {aspect}")
            return state.model_copy(
                update={
                    "status": StudioStatus.MANUAL_REQUESTED,
                    "manual_aspect": aspect,
                    "recommend_manual": True,
                }
            )

        round_number = state.round + 1
        if round_number > self._config.clarification.max_clarification_rounds:
            return self._error(
                state.intent,
                "Too many clarification rounds",
                round_number=round_number,
                suggestions=["Try the manual controls"],
            )

        refined = self._manager.apply_clarifications(state.intent, state.questions, choices)
        accepted = dict(state.accepted)
        accepted.update(self._accepted_keys(refined, state.questions, choices))

        next_state = self._advance(refined, pixel_map, round_number=round_number, accepted=accepted)
        if next_state.status == StudioStatus.NEEDS_CLARIFICATION and not self._made_progress(
            state, next_state
        ):
            return self._error(
                refined,
                "Answers did not resolve the open questions",
                round_number=round_number,
                suggestions=["Try the manual controls"],
            )
        return next_state

    def quick_compose(self, intent: DesignIntent, pixel_map: PixelMap) -> CompositionResult:
        """Compose without asking, taking the recommended answer to every question."""
        state = self.process(intent, pixel_map)
        while state.status == StudioStatus.NEEDS_CLARIFICATION:
            choices = {}
            for question in state.questions:
                option = question.recommended_option or next(
                    (o for o in question.options if o.id != MANUAL_OPTION_ID), question.options[0]
                )
                choices[question.id] = option.id
            state = self.apply_clarifications(state, choices, pixel_map)

        if state.status == StudioStatus.READY and state.pattern is not None:
            return CompositionResult.success(state.pattern, warnings=state.warnings)
        return CompositionResult.failure(
            state.error_message or "Could not compose design without clarification",
            suggestions=state.suggestions,
            recommend_manual=True,
        )

    def validate_only(self, intent: DesignIntent, pixel_map: PixelMap) -> ValidationResult:
        """Run validation without composing."""
        return ConstraintValidator(pixel_map, self._config.composition).validate(intent)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _advance(
        self,
        intent: DesignIntent,
        pixel_map: PixelMap,
        round_number: int,
        accepted: dict[str, str],
    ) -> StudioState:
        validation = self.validate_only(intent, pixel_map)
        validation = self._honor_accepted(intent, validation, accepted)
        refined = validation.attach_to(intent)

        if refined.ambiguities:
            questions = self._manager.build_questions(refined.ambiguities, refined, pixel_map)
            logger.info(f"Design needs clarification: {len(questions)} question(s)")
            return StudioState(
                status=StudioStatus.NEEDS_CLARIFICATION,
                intent=refined,
                questions=questions,
                warnings=validation.warnings,
                round=round_number,
                accepted=accepted,
            )

        fatal = validation.fatal
        if fatal:
            reasons = [c.failure_reason or c.type.value for c in fatal]
            return self._error(
                refined,
                "; ".join(reasons),
                round_number=round_number,
                suggestions=["Adjust the design or use the manual controls"],
            )

        composer = PatternComposer(pixel_map, self._config.composition)
        result = composer.compose(refined)
        if result.pattern is None:
            return self._error(
                refined,
                result.error_message or "Failed to compose pattern",
                round_number=round_number,
                suggestions=result.suggestions,
            )

        return StudioState(
            status=StudioStatus.READY,
            intent=refined,
            pattern=result.pattern,
            warnings=result.warnings,
            round=round_number,
            accepted=accepted,
        )

    @staticmethod
    def _error(
        intent: DesignIntent | None,
        message: str,
        round_number: int,
        suggestions: list[str] | None = None,
    ) -> StudioState:
        logger.warning(f"Design session failed: {message}")
        return StudioState(
            status=StudioStatus.ERROR,
            intent=intent,
            error_message=message,
            suggestions=list(suggestions or []),
            recommend_manual=True,
            round=round_number,
        )

    @staticmethod
    def _accepted_keys(
        intent: DesignIntent,
        questions: list[ClarificationQuestion],
        choices: Mapping[str, str],
    ) -> dict[str, str]:
        """Answered issues mapped to a snapshot of the layer they were answered on."""
        accepted = {}
        by_id = {q.id: q for q in questions}
        for question_id in choices:
            question = by_id[question_id]
            if question.ambiguity_type is None or question.affected_layer_id is None:
                continue
            layer = intent.get_layer(question.affected_layer_id)
            if layer is not None:
                key = _issue_key(question.ambiguity_type.value, layer.id)
                accepted[key] = layer.model_dump_json()
        return accepted

    @staticmethod
    def _honor_accepted(
        intent: DesignIntent, validation: ValidationResult, accepted: dict[str, str]
    ) -> ValidationResult:
        """Drop issues the user already answered for an unchanged layer.

        Their constraints stay on the intent as advisory so they surface as
        warnings instead of questions.
        """
        if not accepted:
            return validation

        def still_accepted(ambiguity_type: str, layer_id: str | None) -> bool:
            layer = intent.get_layer(layer_id) if layer_id else None
            snapshot = accepted.get(_issue_key(ambiguity_type, layer_id))
            return layer is not None and snapshot == layer.model_dump_json()

        flags = [
            f
            for f in validation.additional_ambiguities
            if not still_accepted(f.type.value, f.affected_layer_id)
        ]
        dropped = {
            (_ANSWERED_CONSTRAINTS.get(f.type), f.affected_layer_id)
            for f in validation.additional_ambiguities
            if f not in flags
        }
        constraints = [
            c.model_copy(update={"advisory": True})
            if c.blocks_composition and (c.type, c.layer_id) in dropped
            else c
            for c in validation.constraints
        ]
        return ValidationResult(constraints=constraints, additional_ambiguities=flags)

    @staticmethod
    def _made_progress(previous: StudioState, current: StudioState) -> bool:
        def keys(state: StudioState) -> set[tuple[str, str | None]]:
            return {(q.type.value, q.affected_layer_id) for q in state.questions}

        layers_changed = (
            previous.intent is not None
            and current.intent is not None
            and [layer.model_dump_json() for layer in previous.intent.layers]
            != [layer.model_dump_json() for layer in current.intent.layers]
        )
        return layers_changed or keys(current) != keys(previous)


__all__ = ["DesignStudioOrchestrator"]
