"""Tests for layer rendering (spacing and pattern rules)."""

from __future__ import annotations

import pytest

from rooflight.core.composition.layer_renderer import (
    LayerRenderer,
    equally_spaced_indices,
    merge_adjacent,
)
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

RED = (255, 0, 0, 0)
BLUE = (0, 0, 255, 0)
BLACK = (0, 0, 0, 0)


def _make_layer(
    spacing_rule: SpacingRule | None = None,
    pattern: PatternRule | None = None,
    **color_kwargs,
) -> DesignLayer:
    colors = ColorAssignment(primary_color=RED, spacing_rule=spacing_rule, **color_kwargs)
    return DesignLayer(id="layer", colors=colors, pattern=pattern or PatternRule.solid())


def _spans(groups: list[LedColorGroup]) -> list[tuple[int, int]]:
    return [(g.start_led, g.end_led) for g in groups]


def _render(pixel_map: PixelMap, layer: DesignLayer, start: int, end: int) -> list[LedColorGroup]:
    return LayerRenderer(pixel_map).render_layer(layer, [PixelRange(start=start, end=end)])


class TestEquallySpacedIndices:
    """Test equally spaced placement."""

    def test_includes_both_endpoints(self) -> None:
        assert equally_spaced_indices(0, 9, 4) == [0, 3, 6, 9]

    def test_rounds_half_up(self) -> None:
        """Step 4.5 places the middle light at 5, not 4."""
        assert equally_spaced_indices(0, 9, 3) == [0, 5, 9]

    def test_single_light_at_midpoint(self) -> None:
        assert equally_spaced_indices(10, 15, 1) == [13]

    def test_zero_count_is_empty(self) -> None:
        assert equally_spaced_indices(0, 9, 0) == []

    @pytest.mark.parametrize("count", [2, 5, 7, 10, 15, 40])
    def test_strictly_increasing_within_range(self, count: int) -> None:
        """Counts beyond the range length collapse instead of repeating."""
        indices = equally_spaced_indices(0, 9, count)
        assert indices[0] == 0
        assert indices[-1] == 9
        assert all(a < b for a, b in zip(indices, indices[1:]))
        assert len(indices) <= 10


class TestSpacingRules:
    """Test spacing rule rendering."""

    def test_every_renderer_handler_is_present(self, strip_40: PixelMap) -> None:
        renderer = LayerRenderer(strip_40)
        assert set(renderer._spacing_handlers) == set(SpacingType)
        assert set(renderer._pattern_handlers) == set(PatternType)

    def test_every_nth_four_on_forty_pixels(self, strip_40: PixelMap) -> None:
        groups = _render(strip_40, _make_layer(SpacingRule.every_nth(4)), 0, 39)
        assert [g.start_led for g in groups] == list(range(0, 40, 4))
        assert all(g.length == 1 and g.color == RED for g in groups)

    def test_every_nth_zero_renders_nothing(self, strip_40: PixelMap) -> None:
        assert _render(strip_40, _make_layer(SpacingRule.every_nth(0)), 0, 39) == []

    def test_pattern_without_fill_leaves_gaps(self, strip_40: PixelMap) -> None:
        groups = _render(strip_40, _make_layer(SpacingRule.two_on_one_off()), 0, 6)
        assert _spans(groups) == [(0, 1), (3, 4), (6, 6)]

    def test_pattern_with_fill_paints_off_blocks(self, strip_40: PixelMap) -> None:
        groups = _render(strip_40, _make_layer(SpacingRule.two_on_one_off(), fill_color=BLUE), 0, 6)
        assert _spans(groups) == [(0, 1), (2, 2), (3, 4), (5, 5), (6, 6)]
        assert groups[1].color == BLUE

    def test_pattern_starting_off(self, strip_40: PixelMap) -> None:
        rule = SpacingRule.pattern(1, 1, start_with_on=False)
        assert _spans(_render(strip_40, _make_layer(rule), 0, 3)) == [(1, 1), (3, 3)]

    def test_pattern_zero_cycle_renders_nothing(self, strip_40: PixelMap) -> None:
        assert _render(strip_40, _make_layer(SpacingRule.pattern(0, 0)), 0, 9) == []

    def test_pattern_uses_accent_as_on_color(self, strip_40: PixelMap) -> None:
        groups = _render(strip_40, _make_layer(SpacingRule.every_other(), accent_color=BLUE), 0, 3)
        assert {g.color for g in groups} == {BLUE}

    def test_equally_spaced_endpoints(self, strip_40: PixelMap) -> None:
        groups = _render(strip_40, _make_layer(SpacingRule.equally_spaced(5)), 0, 39)
        assert groups[0].start_led == 0
        assert groups[-1].start_led == 39

    def test_anchors_only_lights_every_anchor(self, small_roofline: PixelMap) -> None:
        groups = _render(small_roofline, _make_layer(SpacingRule.anchors_only()), 0, 20)
        assert _spans(groups) == [(0, 1), (8, 9), (12, 13), (18, 18)]

    def test_anchors_only_respects_range(self, small_roofline: PixelMap) -> None:
        groups = _render(small_roofline, _make_layer(SpacingRule.anchors_only()), 10, 15)
        assert _spans(groups) == [(12, 13)]

    def test_continuous(self, strip_40: PixelMap) -> None:
        groups = _render(strip_40, _make_layer(SpacingRule.continuous()), 5, 9)
        assert _spans(groups) == [(5, 9)]

    def test_spacing_rule_takes_precedence_over_pattern(self, strip_40: PixelMap) -> None:
        layer = _make_layer(SpacingRule.every_nth(2), pattern=PatternRule.alternating())
        assert _spans(_render(strip_40, layer, 0, 3)) == [(0, 0), (2, 2)]


class TestPatternRules:
    """Test pattern rendering when no spacing rule is set."""

    def test_solid(self, strip_40: PixelMap) -> None:
        groups = _render(strip_40, _make_layer(), 0, 39)
        assert _spans(groups) == [(0, 39)]

    def test_alternating_is_range_relative(self, strip_40: PixelMap) -> None:
        groups = _render(strip_40, _make_layer(pattern=PatternRule.alternating()), 11, 14)
        assert [g.color for g in groups] == [RED, BLACK, RED, BLACK]

    def test_alternating_uses_secondary(self, strip_40: PixelMap) -> None:
        layer = _make_layer(pattern=PatternRule.alternating(), secondary_color=BLUE)
        groups = _render(strip_40, layer, 0, 1)
        assert [g.color for g in groups] == [RED, BLUE]

    def test_gradient_starts_at_first_stop(self, strip_40: PixelMap) -> None:
        stops = [
            GradientStop(position=1.0, color=BLUE),
            GradientStop(position=0.0, color=RED),
        ]
        groups = _render(strip_40, _make_layer(pattern=PatternRule.gradient(stops)), 0, 3)
        assert groups[0].color == RED
        assert len(groups) == 4
        assert [g.color[2] for g in groups] == sorted(g.color[2] for g in groups)

    def test_gradient_with_one_stop_is_solid(self, strip_40: PixelMap) -> None:
        stops = [GradientStop(position=0.0, color=BLUE)]
        groups = _render(strip_40, _make_layer(pattern=PatternRule.gradient(stops)), 0, 3)
        assert _spans(groups) == [(0, 3)]
        assert groups[0].color == RED

    def test_empty_ranges_render_nothing(self, strip_40: PixelMap) -> None:
        assert LayerRenderer(strip_40).render_layer(_make_layer(), []) == []


class TestMergeAdjacent:
    """Test run merging."""

    def test_merges_touching_same_color(self) -> None:
        groups = [
            LedColorGroup(start_led=0, end_led=1, color=RED),
            LedColorGroup(start_led=2, end_led=3, color=RED),
            LedColorGroup(start_led=4, end_led=4, color=BLUE),
        ]
        assert _spans(merge_adjacent(groups)) == [(0, 3), (4, 4)]

    def test_keeps_gaps(self) -> None:
        groups = [
            LedColorGroup(start_led=0, end_led=1, color=RED),
            LedColorGroup(start_led=3, end_led=3, color=RED),
        ]
        assert _spans(merge_adjacent(groups)) == [(0, 1), (3, 3)]
