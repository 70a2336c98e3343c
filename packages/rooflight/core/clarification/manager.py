"""Clarification manager.

Turns ambiguity flags into multiple-choice questions and folds the chosen
answers back into the design intent. Every operation returns new objects;
inputs are never mutated.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from rooflight.core.clarification.color_variations import find_color_word, shade_variations
from rooflight.core.clarification.models import (
    AMBIGUITY_QUESTION_TYPES,
    ClarificationError,
    ClarificationOption,
    ClarificationQuestion,
    ClarificationType,
)
from rooflight.core.config.models import ClarificationConfig
from rooflight.core.design.models.intent import (
    AmbiguityFlag,
    ClarificationChoice,
    DesignIntent,
    DesignLayer,
    MotionSettings,
    SpacingRule,
    ZoneSelector,
)
from rooflight.core.design.vocabulary import (
    EFFECT_IDS,
    SPEED_PRESETS,
    ArchitecturalRole,
    MotionDirection,
    MotionType,
)
from rooflight.core.roofline.models import PixelMap, SegmentType
from rooflight.core.utils.color import rgb, to_rgbw
from rooflight.core.utils.math import clamp

logger = logging.getLogger(__name__)

MANUAL_OPTION_ID = "manual"
PREVIEW_BRIGHTNESS = 200
PREVIEW_GREY = (128, 128, 128, 0)

_QUESTION_TEXT_DEFAULTS = {
    ClarificationType.SPACING: "The spacing doesn't quite work - which option looks best?",
    ClarificationType.CONFLICT: "These settings overlap - which should take priority?",
    ClarificationType.EFFECT: "Which effect did you have in mind?",
}

_DEFAULT_EFFECTS: list[tuple[MotionType, str, str]] = [
    (MotionType.CHASE, "Chase", "Lights chase along the roofline"),
    (MotionType.WAVE, "Wave", "Smooth wave of color"),
    (MotionType.TWINKLE, "Twinkle", "Random sparkle"),
    (MotionType.PULSE, "Pulse", "Gentle breathing"),
]

_DEFAULT_DIRECTIONS: list[MotionDirection] = [
    MotionDirection.LEFT_TO_RIGHT,
    MotionDirection.RIGHT_TO_LEFT,
    MotionDirection.INWARD,
    MotionDirection.OUTWARD,
]


def preview_payload(
    color: tuple[int, ...] | None, total_pixels: int, effect_id: int = 0
) -> dict[str, Any]:
    """Small solid-color WLED payload for previewing an option on the roof."""
    return {
        "on": True,
        "bri": PREVIEW_BRIGHTNESS,
        "seg": [
            {
                "id": 0,
                "start": 0,
                "stop": total_pixels,
                "col": [rgb(color if color is not None else PREVIEW_GREY)],
                "fx": effect_id,
            }
        ],
    }


def _option_from_choice(choice: ClarificationChoice) -> ClarificationOption:
    return ClarificationOption(
        id=choice.id,
        label=choice.label,
        description=choice.description,
        is_recommended=choice.is_recommended,
        value=choice.value,
    )


def _swatch(value: Any) -> tuple[int, int, int, int] | None:
    if value is None:
        return None
    try:
        return to_rgbw(value)
    except ValueError:
        logger.debug(f"Color choice value {value!r} has no swatch")
        return None


def _parse_zone_option(option_id: str) -> ZoneSelector | None:
    if option_id == "all":
        return ZoneSelector.all()
    if option_id.startswith("segment_"):
        return ZoneSelector.segments([option_id[len("segment_") :]])
    roles = {
        "peaks": [ArchitecturalRole.PEAK],
        "corners": [ArchitecturalRole.CORNER],
        "peaks_and_corners": [ArchitecturalRole.PEAK, ArchitecturalRole.CORNER],
        "runs": [ArchitecturalRole.RUN],
    }.get(option_id)
    return ZoneSelector.architectural(roles) if roles else None


def _parse_spacing_option(option_id: str) -> SpacingRule | None:
    prefix, _, number = option_id.rpartition("_")
    if not number.isdigit():
        return None
    if prefix == "count":
        return SpacingRule.equally_spaced(int(number))
    if prefix == "interval":
        return SpacingRule.every_nth(int(number))
    return None


class ClarificationManager:
    """Builds clarification questions and applies the answers.

    Args:
        config: Option and round limits (defaults if None).

    Example:
        >>> manager = ClarificationManager()
        >>> questions = manager.build_questions(intent.ambiguities, intent, pixel_map)
        >>> refined = manager.apply_clarifications(intent, questions, {"zone_0": "peaks"})
    """

    def __init__(self, config: ClarificationConfig | None = None) -> None:
        self._config = config or ClarificationConfig()
        self._builders = {
            ClarificationType.ZONE: self._zone_question,
            ClarificationType.COLOR: self._color_question,
            ClarificationType.SPACING: self._spacing_question,
            ClarificationType.DIRECTION: self._direction_question,
            ClarificationType.EFFECT: self._effect_question,
            ClarificationType.CONFLICT: self._conflict_question,
        }
        self._appliers = {
            ClarificationType.ZONE: self._apply_zone,
            ClarificationType.COLOR: self._apply_color,
            ClarificationType.SPACING: self._apply_spacing,
            ClarificationType.DIRECTION: self._apply_direction,
            ClarificationType.EFFECT: self._apply_effect,
            ClarificationType.CONFLICT: self._apply_conflict,
            ClarificationType.BRIGHTNESS: self._apply_nothing,
            ClarificationType.SPEED: self._apply_speed,
            ClarificationType.CONFIRMATION: self._apply_nothing,
            ClarificationType.MANUAL: self._apply_nothing,
        }

    # ------------------------------------------------------------------
    # Question building
    # ------------------------------------------------------------------

    def build_questions(
        self,
        ambiguities: list[AmbiguityFlag],
        intent: DesignIntent,
        pixel_map: PixelMap,
    ) -> list[ClarificationQuestion]:
        """One question per ambiguity, ordered by question kind.

        Args:
            ambiguities: Flags to ask about.
            intent: Intent the flags belong to (for layer context).
            pixel_map: Roofline layout (for zone options and previews).

        Returns:
            Questions sorted zone, color, spacing, direction, effect, conflict.
        """
        questions = []
        for index, flag in enumerate(ambiguities):
            question_type = AMBIGUITY_QUESTION_TYPES[flag.type]
            question_id = f"{question_type.value}_{index}"
            options, text = self._builders[question_type](flag, intent, pixel_map)
            questions.append(
                ClarificationQuestion(
                    id=question_id,
                    type=question_type,
                    question_text=text,
                    options=options,
                    ambiguity_type=flag.type,
                    source_text=flag.source_clause,
                    affected_layer_id=flag.affected_layer_id,
                )
            )

        questions.sort(key=lambda q: q.type.priority)
        logger.debug(f"Built {len(questions)} clarification question(s)")
        return questions

    def _cap(self, options: list[ClarificationOption], keep_last: bool = False) -> list[ClarificationOption]:
        limit = self._config.max_options
        if len(options) <= limit:
            return options
        if keep_last:
            return options[: limit - 1] + options[-1:]
        return options[:limit]

    def _zone_question(
        self, flag: AmbiguityFlag, intent: DesignIntent, pixel_map: PixelMap
    ) -> tuple[list[ClarificationOption], str]:
        options = [_option_from_choice(c) for c in flag.choices if c.id != "all"]
        known = {o.id for o in options}

        peaks = pixel_map.segments_of_type(SegmentType.PEAK)
        corners = pixel_map.segments_of_type(SegmentType.CORNER)
        runs = pixel_map.segments_of_type(SegmentType.RUN)
        structural = []
        if peaks:
            structural.append(
                ClarificationOption(
                    id="peaks",
                    label=f"Peaks ({len(peaks)})",
                    description="All peak/gable segments",
                    value=ZoneSelector.architectural([ArchitecturalRole.PEAK]),
                )
            )
        if corners:
            structural.append(
                ClarificationOption(
                    id="corners",
                    label=f"Corners ({len(corners)})",
                    description="All corner segments",
                    value=ZoneSelector.architectural([ArchitecturalRole.CORNER]),
                )
            )
        if peaks and corners:
            structural.append(
                ClarificationOption(
                    id="peaks_and_corners",
                    label="Peaks and corners",
                    description="Architectural highlights",
                    is_recommended=not any(o.is_recommended for o in options),
                    value=ZoneSelector.architectural(
                        [ArchitecturalRole.PEAK, ArchitecturalRole.CORNER]
                    ),
                )
            )
        if runs:
            structural.append(
                ClarificationOption(
                    id="runs",
                    label=f"Runs ({len(runs)})",
                    description="Horizontal run segments",
                    value=ZoneSelector.architectural([ArchitecturalRole.RUN]),
                )
            )

        for option in structural:
            if len(options) >= self._config.max_options - 1:
                break
            if option.id not in known:
                options.append(option)
                known.add(option.id)

        options.append(
            ClarificationOption(
                id="all",
                label="Entire roofline",
                description="Apply to all segments",
                value=ZoneSelector.all(),
            )
        )

        if flag.source_clause:
            text = f'You mentioned "{flag.source_clause}" - which areas exactly?'
        else:
            text = "Which areas should this apply to?"
        return self._cap(options, keep_last=True), text

    def _color_question(
        self, flag: AmbiguityFlag, intent: DesignIntent, pixel_map: PixelMap
    ) -> tuple[list[ClarificationOption], str]:
        word = find_color_word(flag.source_clause) or find_color_word(flag.description)
        total = pixel_map.total_pixel_count

        if flag.choices:
            options = []
            for choice in flag.choices:
                swatch = _swatch(choice.value)
                options.append(
                    ClarificationOption(
                        id=choice.id,
                        label=choice.label,
                        description=choice.description,
                        is_recommended=choice.is_recommended,
                        value=swatch,
                        color_swatches=[swatch] if swatch is not None else [],
                        preview_payload=preview_payload(swatch, total),
                    )
                )
        else:
            options = [
                ClarificationOption(
                    id=option_id,
                    label=label,
                    is_recommended=index == 0,
                    value=color,
                    color_swatches=[color],
                    preview_payload=preview_payload(color, total),
                )
                for index, (option_id, label, color) in enumerate(shade_variations(word))
            ]

        text = f"Which shade of {word} did you have in mind?" if word else "Which color did you have in mind?"
        return self._cap(options), text

    def _spacing_question(
        self, flag: AmbiguityFlag, intent: DesignIntent, pixel_map: PixelMap
    ) -> tuple[list[ClarificationOption], str]:
        options = [_option_from_choice(c) for c in flag.choices]
        options = options[: self._config.max_options - 1]
        options.append(
            ClarificationOption(
                id=MANUAL_OPTION_ID,
                label="Set manually",
                description="Open spacing controls",
            )
        )
        return options, _QUESTION_TEXT_DEFAULTS[ClarificationType.SPACING]

    def _direction_question(
        self, flag: AmbiguityFlag, intent: DesignIntent, pixel_map: PixelMap
    ) -> tuple[list[ClarificationOption], str]:
        if flag.choices:
            options = [_option_from_choice(c) for c in flag.choices]
        else:
            options = [
                ClarificationOption(
                    id=direction.value,
                    label=direction.display_name.capitalize(),
                    is_recommended=direction == MotionDirection.LEFT_TO_RIGHT,
                    value=direction,
                )
                for direction in _DEFAULT_DIRECTIONS
            ]

        layer = intent.get_layer(flag.affected_layer_id) if flag.affected_layer_id else None
        effect = layer.motion.motion_type.value if layer and layer.motion else "animation"
        return self._cap(options), f"Which direction should the {effect} go?"

    def _effect_question(
        self, flag: AmbiguityFlag, intent: DesignIntent, pixel_map: PixelMap
    ) -> tuple[list[ClarificationOption], str]:
        options = [_option_from_choice(c) for c in flag.choices]
        if len(options) < 2:
            known = {o.id for o in options}
            for motion_type, label, description in _DEFAULT_EFFECTS:
                if motion_type.value in known:
                    continue
                options.append(
                    ClarificationOption(
                        id=motion_type.value,
                        label=label,
                        description=description,
                        is_recommended=motion_type == MotionType.CHASE and not known,
                        value=motion_type,
                    )
                )
        return self._cap(options), _QUESTION_TEXT_DEFAULTS[ClarificationType.EFFECT]

    def _conflict_question(
        self, flag: AmbiguityFlag, intent: DesignIntent, pixel_map: PixelMap
    ) -> tuple[list[ClarificationOption], str]:
        options = [_option_from_choice(c) for c in flag.choices]
        options = options[: self._config.max_options - 1]
        options.append(
            ClarificationOption(
                id="merge",
                label="Blend both",
                description="Layer the designs together",
                value=1,
            )
        )
        return options, _QUESTION_TEXT_DEFAULTS[ClarificationType.CONFLICT]

    # ------------------------------------------------------------------
    # Applying answers
    # ------------------------------------------------------------------

    def apply_clarifications(
        self,
        intent: DesignIntent,
        questions: list[ClarificationQuestion],
        choices: Mapping[str, str],
    ) -> DesignIntent:
        """Fold chosen options into the intent.

        Args:
            intent: Intent the questions were built from.
            questions: Questions that were asked.
            choices: ``question_id -> option_id``.

        Returns:
            New intent with layers updated, resolved ambiguities removed and
            confidence raised.

        Raises:
            ClarificationError: If a choice names an unknown question or option
        """
        by_id = {q.id: q for q in questions}
        resolved_keys = set()
        refined = intent

        for question_id, option_id in choices.items():
            question = by_id.get(question_id)
            if question is None:
                raise ClarificationError(reason="Unknown question", question_id=question_id)
            option = question.get_option(option_id)
            if option is None:
                raise ClarificationError(
                    reason="Unknown option", question_id=question_id, option_id=option_id
                )

            layer = refined.get_layer(question.affected_layer_id) if question.affected_layer_id else None
            if layer is not None:
                updated = self._appliers[question.type](layer, option)
                if updated is not layer:
                    refined = refined.replace_layer(updated)
            if question.ambiguity_type is not None:
                resolved_keys.add((question.ambiguity_type, question.affected_layer_id))

        remaining = [a for a in refined.ambiguities if a.key not in resolved_keys]
        resolved_count = len(refined.ambiguities) - len(remaining)
        confidence = min(1.0, refined.confidence + self._config.confidence_step * resolved_count)
        logger.debug(f"Applied {len(choices)} answer(s); {len(remaining)} ambiguity(ies) remain")
        return refined.model_copy(update={"ambiguities": remaining, "confidence": confidence})

    @staticmethod
    def wants_manual(choices: Mapping[str, str]) -> bool:
        """True when any answer asks for manual controls."""
        return any(option_id == MANUAL_OPTION_ID for option_id in choices.values())

    @staticmethod
    def manual_aspect(questions: list[ClarificationQuestion], choices: Mapping[str, str]) -> str:
        """Display name of the question answered with "manual"."""
        by_id = {q.id: q for q in questions}
        for question_id, option_id in choices.items():
            if option_id == MANUAL_OPTION_ID and question_id in by_id:
                return by_id[question_id].type.display_name
        return "settings"

    @staticmethod
    def _apply_zone(layer: DesignLayer, option: ClarificationOption) -> DesignLayer:
        value = option.value
        if isinstance(value, Mapping):
            value = ZoneSelector.model_validate(value)
        if not isinstance(value, ZoneSelector):
            value = _parse_zone_option(option.id)
        if value is None:
            return layer
        return layer.model_copy(update={"target_zone": value})

    @staticmethod
    def _apply_color(layer: DesignLayer, option: ClarificationOption) -> DesignLayer:
        if option.value is None:
            return layer
        colors = layer.colors.model_copy(update={"primary_color": to_rgbw(option.value)})
        return layer.model_copy(update={"colors": colors})

    @staticmethod
    def _apply_spacing(layer: DesignLayer, option: ClarificationOption) -> DesignLayer:
        value = option.value
        if isinstance(value, Mapping):
            value = SpacingRule.model_validate(value)
        if not isinstance(value, SpacingRule):
            value = _parse_spacing_option(option.id)
        if value is None:
            return layer
        colors = layer.colors.model_copy(update={"spacing_rule": value})
        return layer.model_copy(update={"colors": colors})

    @staticmethod
    def _apply_direction(layer: DesignLayer, option: ClarificationOption) -> DesignLayer:
        try:
            direction = MotionDirection(option.value if option.value is not None else option.id)
        except ValueError:
            logger.warning(f"Ignoring unknown direction option '{option.id}'")
            return layer
        motion = layer.motion or MotionSettings(
            motion_type=MotionType.CHASE, effect_id=EFFECT_IDS[MotionType.CHASE]
        )
        motion = motion.model_copy(
            update={"direction": direction, "reverse": direction == MotionDirection.RIGHT_TO_LEFT}
        )
        return layer.model_copy(update={"motion": motion})

    @staticmethod
    def _apply_effect(layer: DesignLayer, option: ClarificationOption) -> DesignLayer:
        try:
            motion_type = MotionType(option.value if option.value is not None else option.id)
        except ValueError:
            logger.warning(f"Ignoring unknown effect option '{option.id}'")
            return layer
        if layer.motion is None:
            motion = MotionSettings(motion_type=motion_type, effect_id=EFFECT_IDS[motion_type])
        else:
            motion = layer.motion.model_copy(
                update={"motion_type": motion_type, "effect_id": EFFECT_IDS[motion_type]}
            )
        return layer.model_copy(update={"motion": motion})

    @staticmethod
    def _apply_conflict(layer: DesignLayer, option: ClarificationOption) -> DesignLayer:
        delta = option.value if isinstance(option.value, int) else 0
        if delta == 0:
            return layer
        return layer.model_copy(update={"priority": layer.priority + delta})

    @staticmethod
    def _apply_speed(layer: DesignLayer, option: ClarificationOption) -> DesignLayer:
        speed = option.value if isinstance(option.value, int) else SPEED_PRESETS.get(option.id)
        if speed is None or layer.motion is None:
            return layer
        motion = layer.motion.model_copy(update={"speed": int(clamp(speed, 0, 255))})
        return layer.model_copy(update={"motion": motion})

    @staticmethod
    def _apply_nothing(layer: DesignLayer, option: ClarificationOption) -> DesignLayer:
        return layer


__all__ = ["MANUAL_OPTION_ID", "ClarificationManager", "preview_payload"]
