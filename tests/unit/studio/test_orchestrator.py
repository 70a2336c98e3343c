"""Tests for the design studio orchestrator."""

from __future__ import annotations

import pytest

from rooflight.core.config.models import AppConfig, ClarificationConfig, CompositionConfig
from rooflight.core.design.models.intent import (
    AmbiguityFlag,
    ColorAssignment,
    DesignIntent,
    DesignLayer,
    PixelRange,
    SpacingRule,
    ZoneSelector,
)
from rooflight.core.design.vocabulary import AmbiguityType, ArchitecturalRole
from rooflight.core.roofline.models import PixelMap
from rooflight.core.studio import DesignStudioOrchestrator, StudioState, StudioStatus

RED = (255, 0, 0, 0)
BLUE = (0, 0, 255, 0)


def _valley_intent() -> DesignIntent:
    """A layer on a role this roofline does not have."""
    return DesignIntent(
        layers=[
            DesignLayer(
                id="a",
                target_zone=ZoneSelector.architectural([ArchitecturalRole.VALLEY]),
                colors=ColorAssignment(primary_color=RED),
            )
        ]
    )


def _uneven_pattern_intent() -> DesignIntent:
    """2 on / 3 off over 38 pixels leaves a remainder."""
    return DesignIntent(
        layers=[
            DesignLayer(
                id="a",
                target_zone=ZoneSelector.custom([PixelRange(start=0, end=37)]),
                colors=ColorAssignment(primary_color=RED, spacing_rule=SpacingRule.pattern(2, 3)),
            )
        ]
    )


def _conflict_intent() -> DesignIntent:
    return DesignIntent(
        layers=[
            DesignLayer(id="a", colors=ColorAssignment(primary_color=RED)),
            DesignLayer(id="b", colors=ColorAssignment(primary_color=BLUE)),
        ]
    )


def _spans(state: StudioState) -> list[tuple[int, int]]:
    return [(g.start_led, g.end_led) for g in state.pattern.color_groups]


class TestProcess:
    """Test the first pass over a fresh intent."""

    def test_start_is_idle(self) -> None:
        state = DesignStudioOrchestrator().start()
        assert state.status == StudioStatus.IDLE
        assert state.status_message == "Ready for your design"

    def test_clean_intent_is_ready(self, strip_40: PixelMap, every_nth_intent: DesignIntent) -> None:
        state = DesignStudioOrchestrator().process(every_nth_intent, strip_40)

        assert state.status == StudioStatus.READY
        assert state.status_message == "Your design is ready!"
        assert state.round == 0
        assert state.wled_payload["seg"][0]["i"][:4] == [0, 0, 255, 0]

    def test_empty_zone_asks(self, small_roofline: PixelMap) -> None:
        state = DesignStudioOrchestrator().process(_valley_intent(), small_roofline)

        assert state.status == StudioStatus.NEEDS_CLARIFICATION
        assert state.status_message == "I have a quick question"
        [question] = state.questions
        assert question.id == "zone_0"
        assert [o.id for o in question.options] == ["peaks", "corners", "runs", "all"]

    def test_zone_wholly_off_strip_asks(self, strip_40: PixelMap) -> None:
        intent = DesignIntent(
            layers=[
                DesignLayer(
                    id="a",
                    target_zone=ZoneSelector.custom([PixelRange(start=50, end=60)]),
                    colors=ColorAssignment(primary_color=RED),
                )
            ]
        )
        state = DesignStudioOrchestrator().process(intent, strip_40)

        assert state.status == StudioStatus.NEEDS_CLARIFICATION
        assert [q.id for q in state.questions] == ["zone_0"]

    def test_fatal_constraint_is_error(self, small_roofline: PixelMap, chase_intent: DesignIntent) -> None:
        config = AppConfig(composition=CompositionConfig(max_pixels=10))
        state = DesignStudioOrchestrator(config).process(chase_intent, small_roofline)

        assert state.status == StudioStatus.ERROR
        assert state.error_message == "Roofline has 21 pixels; the limit is 10"
        assert state.status_message == state.error_message
        assert state.recommend_manual

    def test_advisory_issues_reach_ready_state(
        self, small_roofline: PixelMap, chase_intent: DesignIntent
    ) -> None:
        state = DesignStudioOrchestrator().process(chase_intent, small_roofline)
        assert state.status == StudioStatus.READY
        assert state.warnings == ["Colors in layers 1 and 2 may be hard to distinguish"]


class TestApplyClarifications:
    """Test answer rounds."""

    def test_zone_answer_composes(self, small_roofline: PixelMap) -> None:
        studio = DesignStudioOrchestrator()
        asked = studio.process(_valley_intent(), small_roofline)

        state = studio.apply_clarifications(asked, {"zone_0": "peaks"}, small_roofline)

        assert state.status == StudioStatus.READY
        assert state.round == 1
        assert _spans(state) == [(10, 15)]

    def test_answer_that_removes_overlap_drops_conflict(self, small_roofline: PixelMap) -> None:
        """Moving a layer off the shared pixels settles the conflict question too."""
        intent = DesignIntent(
            layers=[
                DesignLayer(
                    id="a",
                    target_zone=ZoneSelector.architectural([ArchitecturalRole.RUN]),
                    colors=ColorAssignment(primary_color=RED),
                ),
                DesignLayer(id="b", colors=ColorAssignment(primary_color=BLUE)),
            ],
            ambiguities=[
                AmbiguityFlag(
                    type=AmbiguityType.ZONE_AMBIGUITY,
                    description="Which part of the roof?",
                    affected_layer_id="b",
                )
            ],
        )
        studio = DesignStudioOrchestrator()
        asked = studio.process(intent, small_roofline)
        assert [q.id for q in asked.questions] == ["zone_0", "conflict_1"]

        state = studio.apply_clarifications(asked, {"zone_0": "peaks"}, small_roofline)

        assert state.status == StudioStatus.READY
        assert state.questions == []
        assert [(g.start_led, g.end_led, g.color) for g in state.pattern.color_groups] == [
            (0, 9, RED),
            (10, 15, BLUE),
        ]

    def test_accepting_original_spacing_terminates(self, strip_40: PixelMap) -> None:
        """Keeping the uneven pattern turns the issue into a warning."""
        studio = DesignStudioOrchestrator()
        asked = studio.process(_uneven_pattern_intent(), strip_40)
        assert [o.id for o in asked.questions[0].options] == ["original", "stretch", "compress", "manual"]

        state = studio.apply_clarifications(asked, {"spacing_0": "original"}, strip_40)

        assert state.status == StudioStatus.READY
        assert state.warnings == ["38 pixels with 2 on, 3 off leaves 3 extra"]
        assert state.accepted

    def test_manual_answer(self, strip_40: PixelMap) -> None:
        studio = DesignStudioOrchestrator()
        asked = studio.process(_uneven_pattern_intent(), strip_40)

        state = studio.apply_clarifications(asked, {"spacing_0": "manual"}, strip_40)

        assert state.status == StudioStatus.MANUAL_REQUESTED
        assert state.manual_aspect == "Spacing options"
        assert state.status_message == "Opening manual controls for Spacing options"
        assert state.recommend_manual

    def test_no_answers_is_no_progress(self, small_roofline: PixelMap) -> None:
        studio = DesignStudioOrchestrator()
        asked = studio.process(_valley_intent(), small_roofline)

        state = studio.apply_clarifications(asked, {}, small_roofline)

        assert state.status == StudioStatus.ERROR
        assert state.error_message == "Answers did not resolve the open questions"

    def test_round_limit(self, small_roofline: PixelMap) -> None:
        config = AppConfig(clarification=ClarificationConfig(max_clarification_rounds=1))
        studio = DesignStudioOrchestrator(config)
        asked = studio.process(_valley_intent(), small_roofline).model_copy(update={"round": 1})

        state = studio.apply_clarifications(asked, {"zone_0": "peaks"}, small_roofline)

        assert state.status == StudioStatus.ERROR
        assert state.error_message == "Too many clarification rounds"
        assert state.suggestions == ["Try the manual controls"]

    def test_requires_intent(self, small_roofline: PixelMap) -> None:
        studio = DesignStudioOrchestrator()
        with pytest.raises(ValueError, match="idle"):
            studio.apply_clarifications(studio.start(), {}, small_roofline)


class TestQuickCompose:
    """Test composing with recommended answers."""

    def test_takes_recommended_conflict_answer(self, small_roofline: PixelMap) -> None:
        result = DesignStudioOrchestrator().quick_compose(_conflict_intent(), small_roofline)

        assert result.is_success
        assert [(g.start_led, g.end_led, g.color) for g in result.pattern.color_groups] == [(0, 20, BLUE)]
        assert result.warnings == ["Colors in layers 1 and 2 may be hard to distinguish"]

    def test_falls_back_to_first_option(self, small_roofline: PixelMap) -> None:
        result = DesignStudioOrchestrator().quick_compose(_valley_intent(), small_roofline)
        assert [(g.start_led, g.end_led) for g in result.pattern.color_groups] == [(10, 15)]

    def test_failure(self, small_roofline: PixelMap, chase_intent: DesignIntent) -> None:
        config = AppConfig(composition=CompositionConfig(max_pixels=10))
        result = DesignStudioOrchestrator(config).quick_compose(chase_intent, small_roofline)
        assert not result.is_success
        assert result.recommend_manual


class TestValidateOnly:
    """Test validation without composing."""

    def test_reports_without_composing(self, small_roofline: PixelMap) -> None:
        result = DesignStudioOrchestrator().validate_only(_valley_intent(), small_roofline)

        assert not result.all_satisfied
        assert [a.type.value for a in result.additional_ambiguities] == ["zone_ambiguity"]

    def test_clean_intent(self, strip_40: PixelMap, every_nth_intent: DesignIntent) -> None:
        result = DesignStudioOrchestrator().validate_only(every_nth_intent, strip_40)
        assert result.all_satisfied
        assert result.fatal == []


class TestStudioStateOutput:
    """Test the presentation view."""

    def test_ready_output(self, small_roofline: PixelMap, chase_intent: DesignIntent) -> None:
        output = DesignStudioOrchestrator().process(chase_intent, small_roofline).to_output()

        assert output["status"] == "ready"
        assert output["pattern"]["name"] == "Red chase"
        assert output["wled_payload"]["seg"][0]["fx"] == 28
        assert "questions" not in output

    def test_question_output(self, small_roofline: PixelMap) -> None:
        output = DesignStudioOrchestrator().process(_conflict_intent(), small_roofline).to_output()

        assert output["status"] == "needs_clarification"
        [question] = output["questions"]
        assert question["type"] == "conflict"
        assert question["options"][0] == {
            "id": "second_on_top",
            "label": '"b" on top',
            "description": "Later layer wins where they overlap",
            "recommended": True,
        }
        assert "wled_payload" not in output

    def test_message_without_questions(self) -> None:
        state = StudioState(status=StudioStatus.NEEDS_CLARIFICATION)
        assert state.status_message == "I have a quick question"
