"""Generated names and descriptions for composed patterns."""

from __future__ import annotations

from rooflight.core.design.models.intent import DesignIntent
from rooflight.core.design.vocabulary import ZoneType
from rooflight.core.utils.color import color_name


def pattern_name(intent: DesignIntent) -> str:
    """Short title from the first layer: color, zone (unless everywhere), motion.

    Example:
        >>> pattern_name(intent)
        'Red peaks and corners chase'
    """
    if not intent.layers:
        return "Custom Pattern"

    first = intent.layers[0]
    parts = [color_name(first.colors.primary_color)]
    if first.target_zone.type != ZoneType.ALL:
        parts.append(first.target_zone.description)

    motion = next((layer.motion for layer in intent.layers if layer.motion), None)
    if motion is not None:
        parts.append(motion.motion_type.value)

    name = " ".join(parts)
    return name[:1].upper() + name[1:]


def pattern_description(intent: DesignIntent) -> str:
    """One clause per layer, joined with semicolons."""
    if not intent.layers:
        return "Custom pattern"

    clauses = []
    for layer in intent.layers:
        clause = f"{color_name(layer.colors.primary_color)} on {layer.target_zone.description}"
        if layer.colors.spacing_rule is not None:
            clause += f" ({layer.colors.spacing_rule.description})"
        if layer.motion is not None:
            clause += f" with {layer.motion.motion_type.value} {layer.motion.direction.display_name}"
        clauses.append(clause)
    return "; ".join(clauses)


__all__ = ["pattern_description", "pattern_name"]
