"""Shared pytest fixtures for rooflight tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from rooflight.core.config.loader import clear_app_config_cache
from rooflight.core.design.models.intent import (
    ColorAssignment,
    DesignIntent,
    DesignLayer,
    MotionSettings,
    SpacingRule,
    ZoneSelector,
)
from rooflight.core.roofline.models import PixelMap, RooflineSegment, SegmentType

RED = (255, 0, 0, 0)
GREEN = (0, 255, 0, 0)
BLUE = (0, 0, 255, 0)
WHITE = (255, 255, 255, 0)

# ============================================================================
# Path Fixtures
# ============================================================================


@pytest.fixture
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def _reset_app_config_cache():
    """Keep the cached default app config from leaking between tests."""
    clear_app_config_cache()
    yield
    clear_app_config_cache()


# ============================================================================
# Pixel Map Fixtures
# ============================================================================


@pytest.fixture
def small_roofline() -> PixelMap:
    """21-pixel roofline: run 0-9, peak 10-15, corner 16-20."""
    return PixelMap(
        total_pixel_count=21,
        segments=[
            RooflineSegment(
                id="front_eave",
                name="Front Left Eave",
                type=SegmentType.RUN,
                start_pixel=0,
                end_pixel=9,
                anchor_offsets=[0, 8],
                level=1,
            ),
            RooflineSegment(
                id="front_peak",
                name="Front Peak",
                type=SegmentType.PEAK,
                start_pixel=10,
                end_pixel=15,
                anchor_offsets=[2],
                level=1,
            ),
            RooflineSegment(
                id="back_corner",
                name="Back Right Corner",
                type=SegmentType.CORNER,
                start_pixel=16,
                end_pixel=20,
                anchor_offsets=[2],
                anchor_led_count=1,
                level=2,
            ),
        ],
    )


@pytest.fixture
def strip_40() -> PixelMap:
    """Single 40-pixel run with no anchors."""
    return PixelMap(
        total_pixel_count=40,
        segments=[
            RooflineSegment(id="run", name="Front Run", start_pixel=0, end_pixel=39),
        ],
    )


# ============================================================================
# Design Fixtures
# ============================================================================


@pytest.fixture
def every_nth_intent() -> DesignIntent:
    """Green on every 4th pixel of the whole roof."""
    return DesignIntent(
        original_prompt="green every 4th light",
        layers=[
            DesignLayer(
                id="base",
                colors=ColorAssignment(
                    primary_color=GREEN, spacing_rule=SpacingRule.every_nth(4)
                ),
            )
        ],
    )


@pytest.fixture
def chase_intent() -> DesignIntent:
    """Red base with a white chase on the peak."""
    return DesignIntent(
        original_prompt="red roof with a white chase on the peak",
        layers=[
            DesignLayer(id="base", colors=ColorAssignment(primary_color=RED)),
            DesignLayer(
                id="peak",
                target_zone=ZoneSelector.segments(["front_peak"]),
                colors=ColorAssignment(primary_color=WHITE),
                motion=MotionSettings.chase_left_to_right(speed=150),
                priority=1,
            ),
        ],
    )


@pytest.fixture
def pixel_map_document() -> dict:
    """Editor-style camelCase pixel map document."""
    return {
        "totalPixelCount": 21,
        "segments": [
            {"id": "front_eave", "name": "Front Left Eave", "type": "run", "startPixel": 0, "endPixel": 9},
            {"id": "front_peak", "type": "peak", "startPixel": 10, "endPixel": 15, "anchorOffsets": [2]},
            {"id": "back_corner", "type": "corner", "startPixel": 16, "endPixel": 20},
        ],
    }
