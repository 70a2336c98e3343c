"""Zone vocabulary - how a layer names the part of the roofline it targets."""

from enum import Enum

from rooflight.core.roofline.models import SegmentType


class ZoneType(str, Enum):
    """Zone selector variants.

    Attributes:
        ALL: Whole strip.
        SEGMENTS: Explicit segment ids.
        ARCHITECTURAL: Segments whose structural type matches a role.
        LOCATION: Side of the building, matched against segment names.
        LEVEL: Story number.
        CUSTOM: Explicit pixel ranges.
    """

    ALL = "all"
    SEGMENTS = "segments"
    ARCHITECTURAL = "architectural"
    LOCATION = "location"
    LEVEL = "level"
    CUSTOM = "custom"


class ArchitecturalRole(str, Enum):
    """Architectural vocabulary a designer may use for a zone.

    Only some roles correspond to a segment type the pixel map records;
    the rest (valley, ridge, soffit...) resolve to nothing.
    """

    PEAK = "peak"
    CORNER = "corner"
    RUN = "run"
    EAVE = "eave"
    VALLEY = "valley"
    RIDGE = "ridge"
    FASCIA = "fascia"
    SOFFIT = "soffit"
    GUTTER = "gutter"
    COLUMN = "column"
    ARCHWAY = "archway"
    CONNECTOR = "connector"

    @property
    def display_name(self) -> str:
        return ROLE_DISPLAY_NAMES[self]


ROLE_DISPLAY_NAMES: dict[ArchitecturalRole, str] = {
    ArchitecturalRole.PEAK: "peaks",
    ArchitecturalRole.CORNER: "corners",
    ArchitecturalRole.RUN: "runs",
    ArchitecturalRole.EAVE: "eaves",
    ArchitecturalRole.VALLEY: "valleys",
    ArchitecturalRole.RIDGE: "ridges",
    ArchitecturalRole.FASCIA: "fascia",
    ArchitecturalRole.SOFFIT: "soffits",
    ArchitecturalRole.GUTTER: "gutters",
    ArchitecturalRole.COLUMN: "columns",
    ArchitecturalRole.ARCHWAY: "archways",
    ArchitecturalRole.CONNECTOR: "connectors",
}

ROLE_SEGMENT_TYPES: dict[ArchitecturalRole, frozenset[SegmentType]] = {
    ArchitecturalRole.PEAK: frozenset({SegmentType.PEAK}),
    ArchitecturalRole.CORNER: frozenset({SegmentType.CORNER}),
    ArchitecturalRole.RUN: frozenset({SegmentType.RUN}),
    ArchitecturalRole.EAVE: frozenset({SegmentType.RUN}),
    ArchitecturalRole.FASCIA: frozenset({SegmentType.RUN}),
    ArchitecturalRole.COLUMN: frozenset({SegmentType.COLUMN}),
    ArchitecturalRole.CONNECTOR: frozenset({SegmentType.CONNECTOR}),
    ArchitecturalRole.VALLEY: frozenset(),
    ArchitecturalRole.RIDGE: frozenset(),
    ArchitecturalRole.SOFFIT: frozenset(),
    ArchitecturalRole.GUTTER: frozenset(),
    ArchitecturalRole.ARCHWAY: frozenset(),
}

# Location keyword -> substrings searched for in segment names
LOCATION_KEYWORDS: dict[str, tuple[str, ...]] = {
    "front": ("front", "street", "main"),
    "back": ("back", "rear", "yard"),
    "left": ("left", "west"),
    "right": ("right", "east"),
}


def role_matches(role: ArchitecturalRole, segment_type: SegmentType) -> bool:
    """True if a segment of ``segment_type`` plays ``role``."""
    return segment_type in ROLE_SEGMENT_TYPES[role]


def location_terms(location: str) -> tuple[str, ...]:
    """Name fragments that identify ``location``; unknown keywords match themselves."""
    key = location.strip().lower()
    return LOCATION_KEYWORDS.get(key, (key,))


__all__ = [
    "LOCATION_KEYWORDS",
    "ROLE_DISPLAY_NAMES",
    "ROLE_SEGMENT_TYPES",
    "ArchitecturalRole",
    "ZoneType",
    "location_terms",
    "role_matches",
]
