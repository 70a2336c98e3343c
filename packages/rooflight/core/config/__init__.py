"""Configuration models and loaders."""

from rooflight.core.config.loader import (
    configure_logging,
    detect_format,
    load_app_config,
    load_config,
    load_design_intent,
    load_pixel_map,
)
from rooflight.core.config.models import (
    AppConfig,
    ClarificationConfig,
    CompositionConfig,
    LoggingConfig,
)

__all__ = [
    "AppConfig",
    "ClarificationConfig",
    "CompositionConfig",
    "LoggingConfig",
    "configure_logging",
    "detect_format",
    "load_app_config",
    "load_config",
    "load_design_intent",
    "load_pixel_map",
]
