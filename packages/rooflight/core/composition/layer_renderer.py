"""Layer renderer: turns one layer's fill rules into LED color groups.

A spacing rule, when present, takes precedence over the pattern rule.
Output groups for a single range are in pixel order; overlap between
ranges or layers is settled later by the compositor.
"""

from __future__ import annotations

import logging

from rooflight.core.design.models.intent import (
    ColorAssignment,
    DesignLayer,
    GradientStop,
    PatternRule,
    PixelRange,
    SpacingRule,
)
from rooflight.core.design.models.pattern import LedColorGroup
from rooflight.core.design.vocabulary import PatternType, SpacingType
from rooflight.core.roofline.models import PixelMap
from rooflight.core.utils.color import BLACK, lerp_color
from rooflight.core.utils.math import round_half_up

logger = logging.getLogger(__name__)

Color = tuple[int, int, int, int]


def equally_spaced_indices(start: int, end: int, count: int) -> list[int]:
    """Pixel indices for ``count`` equally spaced lights on ``[start, end]``.

    One light sits at the midpoint; two or more always include both
    endpoints. Positions round half away from zero. When ``count`` exceeds
    the range length, colliding positions collapse so the result stays
    strictly increasing.
    """
    length = end - start + 1
    if count <= 0 or length <= 0:
        return []
    if count == 1:
        return [start + length // 2]

    step = (length - 1) / (count - 1)
    indices: list[int] = []
    for i in range(count):
        index = start + round_half_up(step * i)
        if index <= end and (not indices or index > indices[-1]):
            indices.append(index)
    return indices


def merge_adjacent(groups: list[LedColorGroup]) -> list[LedColorGroup]:
    """Merge touching groups of identical color (input sorted by start)."""
    merged: list[LedColorGroup] = []
    for group in groups:
        if merged and merged[-1].end_led + 1 == group.start_led and merged[-1].color == group.color:
            merged[-1] = LedColorGroup(
                start_led=merged[-1].start_led, end_led=group.end_led, color=group.color
            )
        else:
            merged.append(group)
    return merged


class LayerRenderer:
    """Renders design layers into unmerged LED color groups.

    Args:
        pixel_map: Roofline layout; supplies anchors for anchors-only spacing.
    """

    def __init__(self, pixel_map: PixelMap) -> None:
        self._pixel_map = pixel_map
        self._spacing_handlers = {
            SpacingType.PATTERN: self._spacing_pattern,
            SpacingType.EQUALLY_SPACED: self._spacing_equally_spaced,
            SpacingType.EVERY_NTH: self._spacing_every_nth,
            SpacingType.ANCHORS_ONLY: self._spacing_anchors_only,
            SpacingType.CONTINUOUS: self._spacing_continuous,
        }
        self._pattern_handlers = {
            PatternType.SOLID: self._pattern_solid,
            PatternType.ALTERNATING: self._pattern_alternating,
            PatternType.GRADIENT: self._pattern_gradient,
            PatternType.WAVE: self._pattern_solid,
            PatternType.TWINKLE: self._pattern_solid,
        }

    def render_layer(self, layer: DesignLayer, ranges: list[PixelRange]) -> list[LedColorGroup]:
        """Render a layer over its resolved ranges.

        Args:
            layer: Layer to render.
            ranges: Output of the zone resolver for ``layer.target_zone``.

        Returns:
            Groups for every range, in range order. Empty if ``ranges`` is.
        """
        groups: list[LedColorGroup] = []
        for pixel_range in ranges:
            groups.extend(self.render_range(pixel_range, layer.colors, layer.pattern))
        logger.debug(f"Layer '{layer.label}' rendered {len(groups)} group(s)")
        return groups

    def render_range(
        self, pixel_range: PixelRange, colors: ColorAssignment, pattern: PatternRule
    ) -> list[LedColorGroup]:
        """Render one range with a layer's colors and rules."""
        if colors.spacing_rule is not None:
            rule = colors.spacing_rule
            return self._spacing_handlers[rule.type](pixel_range, colors, rule)
        return self._pattern_handlers[pattern.type](pixel_range, colors, pattern)

    # ------------------------------------------------------------------
    # Spacing rules
    # ------------------------------------------------------------------

    def _spacing_pattern(
        self, pixel_range: PixelRange, colors: ColorAssignment, rule: SpacingRule
    ) -> list[LedColorGroup]:
        if rule.on_count + rule.off_count <= 0:
            return []

        groups: list[LedColorGroup] = []
        on_color, off_color = colors.on_color, colors.fill_color
        position = pixel_range.start
        is_on = rule.start_with_on
        while position <= pixel_range.end:
            count = rule.on_count if is_on else rule.off_count
            if count > 0:
                block_end = min(position + count - 1, pixel_range.end)
                color = on_color if is_on else off_color
                if color is not None:
                    groups.append(
                        LedColorGroup(start_led=position, end_led=block_end, color=color)
                    )
                position += count
            is_on = not is_on
        return groups

    def _spacing_equally_spaced(
        self, pixel_range: PixelRange, colors: ColorAssignment, rule: SpacingRule
    ) -> list[LedColorGroup]:
        return [
            LedColorGroup(start_led=i, end_led=i, color=colors.on_color)
            for i in equally_spaced_indices(pixel_range.start, pixel_range.end, rule.on_count)
        ]

    def _spacing_every_nth(
        self, pixel_range: PixelRange, colors: ColorAssignment, rule: SpacingRule
    ) -> list[LedColorGroup]:
        interval = rule.effective_interval
        if interval <= 0:
            return []
        return [
            LedColorGroup(start_led=i, end_led=i, color=colors.on_color)
            for i in range(pixel_range.start, pixel_range.end + 1, interval)
        ]

    def _spacing_anchors_only(
        self, pixel_range: PixelRange, colors: ColorAssignment, rule: SpacingRule
    ) -> list[LedColorGroup]:
        groups: list[LedColorGroup] = []
        for segment in self._pixel_map.segments:
            if not segment.intersects(pixel_range.start, pixel_range.end):
                continue
            for anchor in segment.global_anchor_pixels:
                if pixel_range.start <= anchor <= pixel_range.end:
                    anchor_end = min(anchor + segment.anchor_led_count - 1, pixel_range.end)
                    groups.append(
                        LedColorGroup(start_led=anchor, end_led=anchor_end, color=colors.on_color)
                    )
        return groups

    def _spacing_continuous(
        self, pixel_range: PixelRange, colors: ColorAssignment, rule: SpacingRule
    ) -> list[LedColorGroup]:
        return [
            LedColorGroup(
                start_led=pixel_range.start, end_led=pixel_range.end, color=colors.on_color
            )
        ]

    # ------------------------------------------------------------------
    # Pattern rules
    # ------------------------------------------------------------------

    def _pattern_solid(
        self, pixel_range: PixelRange, colors: ColorAssignment, pattern: PatternRule
    ) -> list[LedColorGroup]:
        return [
            LedColorGroup(
                start_led=pixel_range.start, end_led=pixel_range.end, color=colors.primary_color
            )
        ]

    def _pattern_alternating(
        self, pixel_range: PixelRange, colors: ColorAssignment, pattern: PatternRule
    ) -> list[LedColorGroup]:
        odd_color = colors.secondary_color if colors.secondary_color is not None else BLACK
        return [
            LedColorGroup(
                start_led=i,
                end_led=i,
                color=colors.primary_color if (i - pixel_range.start) % 2 == 0 else odd_color,
            )
            for i in range(pixel_range.start, pixel_range.end + 1)
        ]

    def _pattern_gradient(
        self, pixel_range: PixelRange, colors: ColorAssignment, pattern: PatternRule
    ) -> list[LedColorGroup]:
        if len(pattern.gradient_stops) < 2:
            return self._pattern_solid(pixel_range, colors, pattern)

        stops = sorted(pattern.gradient_stops, key=lambda s: s.position)
        length = pixel_range.length
        groups = [
            LedColorGroup(
                start_led=i,
                end_led=i,
                color=_gradient_color(stops, (i - pixel_range.start) / length),
            )
            for i in range(pixel_range.start, pixel_range.end + 1)
        ]
        return merge_adjacent(groups)


def _gradient_color(stops: list[GradientStop], position: float) -> Color:
    lower, upper = stops[0], stops[-1]
    for a, b in zip(stops, stops[1:]):
        if a.position <= position <= b.position:
            lower, upper = a, b
            break

    if upper.position == lower.position:
        t = 0.0
    else:
        t = (position - lower.position) / (upper.position - lower.position)
    return lerp_color(lower.color, upper.color, t)


__all__ = [
    "LayerRenderer",
    "equally_spaced_indices",
    "merge_adjacent",
]
