"""Shared utilities for Rooflight."""

from rooflight.core.utils.color import RGBW, color_name, contrast, lerp_color, rgb, to_rgbw
from rooflight.core.utils.json import read_json, write_json
from rooflight.core.utils.math import clamp, lerp, round_half_up

__all__ = [
    "RGBW",
    "clamp",
    "color_name",
    "contrast",
    "lerp",
    "lerp_color",
    "read_json",
    "rgb",
    "round_half_up",
    "to_rgbw",
    "write_json",
]
