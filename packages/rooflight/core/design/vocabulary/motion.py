"""Motion vocabulary and WLED effect ids."""

from enum import Enum


class MotionType(str, Enum):
    """Kind of animation a layer asks for."""

    NONE = "none"
    CHASE = "chase"
    WAVE = "wave"
    FLOW = "flow"
    PULSE = "pulse"
    TWINKLE = "twinkle"
    SCAN = "scan"


class MotionDirection(str, Enum):
    """Direction of travel for an animation."""

    LEFT_TO_RIGHT = "left_to_right"
    RIGHT_TO_LEFT = "right_to_left"
    INWARD = "inward"
    OUTWARD = "outward"
    UPWARD = "upward"
    DOWNWARD = "downward"
    CLOCKWISE = "clockwise"
    COUNTER_CLOCKWISE = "counter_clockwise"

    @property
    def display_name(self) -> str:
        if self is MotionDirection.COUNTER_CLOCKWISE:
            return "counter-clockwise"
        return self.value.replace("_", " ")


# WLED effect ids (fx) for each motion type
EFFECT_IDS: dict[MotionType, int] = {
    MotionType.NONE: 0,
    MotionType.CHASE: 28,
    MotionType.WAVE: 67,
    MotionType.FLOW: 68,
    MotionType.PULSE: 2,
    MotionType.TWINKLE: 80,
    MotionType.SCAN: 10,
}

# Named speed presets (WLED sx)
SPEED_PRESETS: dict[str, int] = {
    "slow": 64,
    "medium": 128,
    "fast": 192,
    "very_fast": 240,
}


def resolve_effect_id(motion_type: MotionType) -> int:
    """WLED effect id for a motion type."""
    return EFFECT_IDS[motion_type]


__all__ = [
    "EFFECT_IDS",
    "SPEED_PRESETS",
    "MotionDirection",
    "MotionType",
    "resolve_effect_id",
]
