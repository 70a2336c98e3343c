"""Design composition pipeline: zones -> groups -> canonical groups -> payload."""

from rooflight.core.composition.composer import PatternComposer, primary_motion
from rooflight.core.composition.compositor import Compositor
from rooflight.core.composition.errors import CompositionError
from rooflight.core.composition.layer_renderer import LayerRenderer, equally_spaced_indices
from rooflight.core.composition.payload_encoder import PayloadEncoder
from rooflight.core.composition.zone_resolver import ZoneResolver

__all__ = [
    "CompositionError",
    "Compositor",
    "LayerRenderer",
    "PatternComposer",
    "PayloadEncoder",
    "ZoneResolver",
    "equally_spaced_indices",
    "primary_motion",
]
