"""Pattern composer: render -> composite -> encode for a whole intent."""

from __future__ import annotations

import logging

from rooflight.core.composition.compositor import Compositor
from rooflight.core.composition.errors import CompositionError
from rooflight.core.composition.layer_renderer import LayerRenderer
from rooflight.core.composition.naming import pattern_description, pattern_name
from rooflight.core.composition.payload_encoder import PayloadEncoder
from rooflight.core.composition.zone_resolver import ZoneResolver
from rooflight.core.config.models import CompositionConfig
from rooflight.core.design.models.intent import DesignIntent, DesignLayer, MotionSettings
from rooflight.core.design.models.pattern import ComposedPattern, CompositionResult, LedColorGroup
from rooflight.core.design.vocabulary import SpacingType
from rooflight.core.roofline.models import PixelMap
from rooflight.core.utils.logging import log_performance

logger = logging.getLogger(__name__)


def primary_motion(layers: list[DesignLayer]) -> MotionSettings | None:
    """Motion honored in the payload.

    The first enabled layer whose motion carries a device effect wins; when
    none does, the first enabled layer declaring any motion.
    """
    enabled = [layer for layer in layers if layer.enabled and layer.motion is not None]
    for layer in enabled:
        if layer.motion is not None and layer.motion.has_effect:
            return layer.motion
    return enabled[0].motion if enabled else None


def distinct_colors(groups: list[LedColorGroup]) -> list[tuple[int, int, int, int]]:
    """Distinct group colors in first-seen order."""
    seen: list[tuple[int, int, int, int]] = []
    for group in groups:
        if group.color not in seen:
            seen.append(group.color)
    return seen


class PatternComposer:
    """Composes a design intent into a WLED-ready pattern.

    Steps: resolve each enabled layer's zone, render its fill rules, merge
    layers by priority, then encode the payload. Unresolved ambiguities, an
    empty layer list, or no layer producing pixels yield a failed result;
    a single empty layer only adds a warning.

    Args:
        pixel_map: Roofline layout.
        config: Composition tunables (defaults if None).
    """

    def __init__(self, pixel_map: PixelMap, config: CompositionConfig | None = None) -> None:
        self._pixel_map = pixel_map
        self._config = config or CompositionConfig()
        self._resolver = ZoneResolver(pixel_map)
        self._renderer = LayerRenderer(pixel_map)
        self._encoder = PayloadEncoder(self._config.max_effect_colors)

    @log_performance
    def compose(self, intent: DesignIntent) -> CompositionResult:
        """Compose an intent.

        Args:
            intent: Intent with no outstanding ambiguities.

        Returns:
            CompositionResult with the pattern, or a failure message.
        """
        if intent.needs_clarification:
            return CompositionResult.failure(
                "Design intent has unresolved ambiguities",
                suggestions=["Resolve clarification questions first"],
                recommend_manual=True,
            )

        if not intent.layers:
            return CompositionResult.failure(
                "No design layers specified",
                suggestions=["Add at least one layer to your design"],
            )

        total = self._pixel_map.total_pixel_count
        if total > self._config.max_pixels:
            return CompositionResult.failure(
                f"Roofline has {total} pixels; the limit is {self._config.max_pixels}",
                recommend_manual=True,
            )

        try:
            return self._compose(intent)
        except Exception as e:
            logger.exception("Unexpected error while composing pattern")
            return CompositionResult.failure(
                f"Error composing pattern: {e}",
                recommend_manual=True,
            )

    def compose_or_raise(self, intent: DesignIntent) -> ComposedPattern:
        """Compose an intent, raising instead of returning a failure.

        Raises:
            CompositionError: If composition fails
        """
        result = self.compose(intent)
        if result.pattern is None:
            raise CompositionError(
                reason=result.error_message or "Failed to compose pattern",
                recommend_manual=result.recommend_manual,
                suggestions=result.suggestions,
            )
        return result.pattern

    def _compose(self, intent: DesignIntent) -> CompositionResult:
        warnings: list[str] = []
        groups_by_priority: dict[int, list[LedColorGroup]] = {}

        for layer in intent.enabled_layers:
            ranges = self._resolver.resolve(layer.target_zone)
            groups = self._renderer.render_layer(layer, ranges)
            if not groups:
                logger.warning(f"Layer '{layer.label}' produced no LED assignments")
                warnings.append(f'Layer "{layer.label}" produced no LED assignments')
                continue
            groups_by_priority.setdefault(layer.priority, []).extend(groups)

        if not groups_by_priority:
            return CompositionResult.failure(
                "No layers produced LED assignments",
                suggestions=["Check that zones match your roofline configuration"],
            )

        warnings.extend(
            c.failure_reason
            for c in intent.constraints
            if c.advisory and not c.is_satisfied and c.failure_reason
        )

        total = self._pixel_map.total_pixel_count
        final_groups = Compositor(total).composite(groups_by_priority)
        if not final_groups:
            return CompositionResult.failure(
                "No layers produced LED assignments",
                suggestions=["Check that zones match your roofline configuration"],
            )
        motion = primary_motion(intent.layers)
        payload = self._encoder.encode(final_groups, motion, intent.global_settings, total)

        enabled = intent.enabled_layers
        spacing_types = {
            layer.colors.spacing_rule.type for layer in enabled if layer.colors.spacing_rule
        }
        pattern = ComposedPattern(
            name=pattern_name(intent),
            description=pattern_description(intent),
            color_groups=final_groups,
            effect_id=(motion.effect_id or 0) if motion else 0,
            speed=motion.speed if motion else self._config.default_speed,
            intensity=motion.intensity if motion else self._config.default_intensity,
            brightness=intent.global_settings.brightness,
            has_motion=any(layer.motion is not None for layer in enabled),
            motion_direction=motion.direction if motion else None,
            reverse=motion.reverse if motion else False,
            wled_payload=payload,
            used_colors=distinct_colors(final_groups),
            total_pixels=total,
            warnings=warnings,
            has_spacing=bool(spacing_types - {SpacingType.CONTINUOUS}),
            uses_anchors=SpacingType.ANCHORS_ONLY in spacing_types,
        )
        logger.info(f"Composed pattern: {pattern.summary}")
        return CompositionResult.success(pattern, warnings=warnings)


__all__ = ["PatternComposer", "distinct_colors", "primary_motion"]
