"""Shade variations offered when a prompt names a color loosely."""

from __future__ import annotations

from rooflight.core.utils.color import to_rgbw

# (option id, label, hex); first entry is the recommended shade
COLOR_VARIATIONS: dict[str, list[tuple[str, str, str]]] = {
    "green": [
        ("forest", "Forest green", "#228B22"),
        ("lime", "Lime", "#32CD32"),
        ("emerald", "Emerald", "#50C878"),
        ("mint", "Mint", "#98FB98"),
    ],
    "blue": [
        ("royal", "Royal blue", "#4169E1"),
        ("sky", "Sky blue", "#87CEEB"),
        ("navy", "Navy", "#000080"),
        ("cyan", "Cyan", "#00FFFF"),
    ],
    "red": [
        ("crimson", "Crimson", "#DC143C"),
        ("scarlet", "Scarlet", "#FF2400"),
        ("cherry", "Cherry", "#DE3163"),
        ("brick", "Brick red", "#CB4154"),
    ],
    "white": [
        ("pure", "Pure white", "#FFFFFF"),
        ("warm", "Warm white", "#FFF5E0"),
        ("cool", "Cool white", "#F0FFFF"),
        ("soft", "Soft white", "#FAF0E6"),
    ],
    "purple": [
        ("royal_purple", "Royal purple", "#7851A9"),
        ("lavender", "Lavender", "#E6E6FA"),
        ("plum", "Plum", "#8E4585"),
        ("violet", "Violet", "#EE82EE"),
    ],
    "orange": [
        ("tangerine", "Tangerine", "#FF9966"),
        ("amber", "Amber", "#FFBF00"),
        ("burnt", "Burnt orange", "#CC5500"),
        ("coral", "Coral", "#FF7F50"),
    ],
    "yellow": [
        ("golden", "Golden", "#FFD700"),
        ("lemon", "Lemon", "#FFF44F"),
        ("butter", "Butter", "#FFEF9F"),
        ("canary", "Canary", "#FFEF00"),
    ],
    "pink": [
        ("hot_pink", "Hot pink", "#FF69B4"),
        ("blush", "Blush", "#DE5D83"),
        ("magenta", "Magenta", "#FF00FF"),
        ("salmon", "Salmon", "#FA8072"),
    ],
}
COLOR_VARIATIONS["violet"] = COLOR_VARIATIONS["purple"]

FALLBACK_VARIATIONS: list[tuple[str, str, str]] = [
    ("standard", "Standard", "#808080"),
    ("light", "Light", "#C0C0C0"),
    ("dark", "Dark", "#404040"),
    ("vivid", "Vivid", "#A0A0A0"),
]


def find_color_word(text: str | None) -> str | None:
    """First known color word in ``text`` (case-insensitive)."""
    if not text:
        return None
    words = text.lower().replace(",", " ").replace("-", " ").split()
    for word in words:
        if word in COLOR_VARIATIONS:
            return word
    return None


def shade_variations(color_word: str | None) -> list[tuple[str, str, tuple[int, int, int, int]]]:
    """Shades for a color word as ``(id, label, rgbw)``; greys when unknown."""
    entries = COLOR_VARIATIONS.get(color_word or "", FALLBACK_VARIATIONS)
    return [(option_id, label, to_rgbw(hex_value)) for option_id, label, hex_value in entries]


__all__ = [
    "COLOR_VARIATIONS",
    "FALLBACK_VARIATIONS",
    "find_color_word",
    "shade_variations",
]
