"""WLED JSON payload encoding.

Two mutually exclusive segment shapes:

* static - ``i``: flat ``[index, r, g, b, ...]`` for every lit pixel, giving
  exact per-pixel color.
* effect - ``col``/``fx``/``sx``/``ix``/``rev``: up to three representative
  colors driving a device-side effect.

The effect shape is used only when the primary motion has a non-zero effect
id; consumers branch on which key is present.
"""

from __future__ import annotations

import logging
from typing import Any

from rooflight.core.design.models.intent import GlobalSettings, MotionSettings
from rooflight.core.design.models.pattern import LedColorGroup
from rooflight.core.utils.color import WHITE, rgb

logger = logging.getLogger(__name__)


class PayloadEncoder:
    """Encodes canonical color groups into a WLED state payload.

    Args:
        max_effect_colors: Colors carried by the effect form (WLED supports 3).
    """

    def __init__(self, max_effect_colors: int = 3) -> None:
        self._max_effect_colors = max_effect_colors

    def encode(
        self,
        groups: list[LedColorGroup],
        motion: MotionSettings | None,
        settings: GlobalSettings,
        total_pixels: int,
    ) -> dict[str, Any]:
        """Build the payload.

        Args:
            groups: Canonical groups from the compositor.
            motion: Primary motion settings, if any.
            settings: Global brightness and transition.
            total_pixels: Strip length (segment ``stop``, exclusive).

        Returns:
            WLED JSON state object. ``{"on": False}`` when nothing is lit.
        """
        if not groups:
            return {"on": False}

        if motion is not None and motion.has_effect:
            segment = self._effect_segment(groups, motion, total_pixels)
        else:
            segment = self._static_segment(groups, total_pixels)

        return {
            "on": True,
            "bri": settings.brightness,
            "transition": settings.wire_transition,
            "seg": [segment],
        }

    def representative_colors(self, groups: list[LedColorGroup]) -> list[list[int]]:
        """Distinct RGBW colors in first-seen order, capped for the effect form."""
        colors: list[list[int]] = []
        for group in groups:
            color = list(group.color)
            if color not in colors:
                colors.append(color)
                if len(colors) >= self._max_effect_colors:
                    break
        return colors or [list(WHITE)]

    def _effect_segment(
        self, groups: list[LedColorGroup], motion: MotionSettings, total_pixels: int
    ) -> dict[str, Any]:
        logger.debug(f"Encoding effect payload fx={motion.effect_id}")
        return {
            "id": 0,
            "start": 0,
            "stop": total_pixels,
            "col": self.representative_colors(groups),
            "fx": motion.effect_id or 0,
            "sx": motion.speed,
            "ix": motion.intensity,
            "rev": motion.reverse,
        }

    def _static_segment(self, groups: list[LedColorGroup], total_pixels: int) -> dict[str, Any]:
        indexed: list[int] = []
        for group in groups:
            r, g, b = rgb(group.color)
            for led in range(group.start_led, group.end_led + 1):
                indexed.extend((led, r, g, b))
        logger.debug(f"Encoding static payload with {len(indexed) // 4} pixel(s)")
        return {"id": 0, "start": 0, "stop": total_pixels, "i": indexed}


__all__ = ["PayloadEncoder"]
