"""Color helpers for RGBW pixel values.

Colors travel through the pipeline as 4-tuples ``(r, g, b, w)`` with each
channel in 0-255. Plain RGB input (3 channels or ``#RRGGBB``) is accepted
and gets a white channel of 0.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from rooflight.core.utils.math import clamp, lerp, round_half_up

Channel = Annotated[int, Field(ge=0, le=255)]


def to_rgbw(value: Any) -> tuple[int, int, int, int]:
    """Coerce a color-like value into an RGBW tuple.

    Accepts ``[r, g, b]``, ``[r, g, b, w]`` (lists or tuples) and hex strings
    ``#RRGGBB`` / ``#RRGGBBWW``.

    Raises:
        ValueError: If the value cannot be read as a color
    """
    if isinstance(value, str):
        text = value.strip().lstrip("#")
        if len(text) not in (6, 8):
            raise ValueError(f"Hex color must have 6 or 8 digits, got {value!r}")
        try:
            channels = [int(text[i : i + 2], 16) for i in range(0, len(text), 2)]
        except ValueError as e:
            raise ValueError(f"Invalid hex color {value!r}") from e
        value = channels

    if isinstance(value, (list, tuple)):
        if len(value) == 3:
            return (int(value[0]), int(value[1]), int(value[2]), 0)
        if len(value) == 4:
            return (int(value[0]), int(value[1]), int(value[2]), int(value[3]))
        raise ValueError(f"Color must have 3 or 4 channels, got {len(value)}")

    raise ValueError(f"Unsupported color value: {value!r}")


RGBW = Annotated[
    tuple[Channel, Channel, Channel, Channel],
    BeforeValidator(to_rgbw),
]

BLACK: tuple[int, int, int, int] = (0, 0, 0, 0)
WHITE: tuple[int, int, int, int] = (255, 255, 255, 0)


def rgb(color: tuple[int, ...]) -> list[int]:
    """Drop the white channel: ``(r, g, b, w) -> [r, g, b]``."""
    return [int(c) for c in color[:3]]


def lerp_color(
    a: tuple[int, int, int, int], b: tuple[int, int, int, int], t: float
) -> tuple[int, int, int, int]:
    """Per-channel linear interpolation, rounded to the nearest integer."""
    t = clamp(t, 0.0, 1.0)
    r, g, bl, w = (int(clamp(round_half_up(lerp(x, y, t)), 0, 255)) for x, y in zip(a, b))
    return (r, g, bl, w)


def _linearize(value: float) -> float:
    return value / 12.92 if value <= 0.03928 else ((value + 0.055) / 1.055) ** 2.4


def relative_luminance(color: tuple[int, ...]) -> float:
    """WCAG relative luminance of the RGB part of a color."""
    r, g, b = (_linearize(c / 255) for c in color[:3])
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast(a: tuple[int, ...], b: tuple[int, ...]) -> float:
    """WCAG contrast ratio normalized to 0-1 (ratio / 21)."""
    lum_a = relative_luminance(a)
    lum_b = relative_luminance(b)
    lighter, darker = max(lum_a, lum_b), min(lum_a, lum_b)
    return (lighter + 0.05) / (darker + 0.05) / 21.0


def is_close(a: tuple[int, ...], b: tuple[int, ...], threshold: int = 30) -> bool:
    """True when every RGB channel differs by less than ``threshold``."""
    return all(abs(x - y) < threshold for x, y in zip(a[:3], b[:3]))


# Checked in order; first close match names the color.
NAMED_COLORS: list[tuple[str, tuple[int, int, int]]] = [
    ("Red", (255, 0, 0)),
    ("Green", (0, 255, 0)),
    ("Blue", (0, 0, 255)),
    ("Yellow", (255, 255, 0)),
    ("Orange", (255, 152, 0)),
    ("Purple", (156, 39, 176)),
    ("Pink", (233, 30, 99)),
    ("Cyan", (0, 255, 255)),
    ("White", (255, 255, 255)),
    ("Black", (0, 0, 0)),
    ("Forest Green", (34, 139, 34)),
    ("Gold", (255, 215, 0)),
    ("Coral", (255, 107, 107)),
]


def color_name(color: tuple[int, ...]) -> str:
    """Human-readable name for a color, falling back to ``#RRGGBB``."""
    for name, reference in NAMED_COLORS:
        if is_close(color, reference):
            return name
    r, g, b = rgb(color)
    return f"#{r:02X}{g:02X}{b:02X}"


__all__ = [
    "BLACK",
    "Channel",
    "NAMED_COLORS",
    "RGBW",
    "WHITE",
    "color_name",
    "contrast",
    "is_close",
    "lerp_color",
    "relative_luminance",
    "rgb",
    "to_rgbw",
]
