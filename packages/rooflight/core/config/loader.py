"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from rooflight.core.config.models import AppConfig
from rooflight.core.design.models.intent import DesignIntent
from rooflight.core.roofline.models import PixelMap
from rooflight.core.utils.json import read_json
from rooflight.core.utils.logging import configure_logging as _configure_logging

logger = logging.getLogger(__name__)

_DEFAULT_APP_CONFIG_PATH = AppConfig.default_path()
_app_config_cache: AppConfig | None = None

_ENV_LOG_LEVEL = "ROOFLIGHT_LOG_LEVEL"


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("roofline.json")
        'json'
        >>> detect_format("intent.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()

    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return a raw configuration dictionary.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)

    if fmt == "json":
        try:
            return read_json(path)
        except ValueError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    try:
        with path.open("r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    # safe_load returns None for empty files
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ValueError(f"Expected a mapping in {path}, got {type(content).__name__}")
    return content


def _apply_env_overrides(config: AppConfig) -> AppConfig:
    level = os.getenv(_ENV_LOG_LEVEL)
    if level:
        logging_config = config.logging.model_copy(update={"level": level.upper()})
        config = config.model_copy(update={"logging": logging_config})
    return config


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration.

    A missing file yields all defaults. ``ROOFLIGHT_LOG_LEVEL`` overrides the
    configured log level. Results for the default path are cached.

    Args:
        path: Path to app config file (.json, .yaml, or .yml)

    Returns:
        Validated AppConfig instance

    Raises:
        ValidationError: If config is invalid
    """
    global _app_config_cache

    if path is None:
        path = _DEFAULT_APP_CONFIG_PATH

    if _app_config_cache is not None and Path(path) == _DEFAULT_APP_CONFIG_PATH:
        return _app_config_cache

    if Path(path).exists():
        config = AppConfig.model_validate(load_config(path))
    else:
        logger.debug(f"No app config at {path}, using defaults")
        config = AppConfig()

    config = _apply_env_overrides(config)

    if Path(path) == _DEFAULT_APP_CONFIG_PATH:
        _app_config_cache = config

    return config


def clear_app_config_cache() -> None:
    """Forget the cached default app config."""
    global _app_config_cache
    _app_config_cache = None


def configure_logging(config: AppConfig | None = None) -> None:
    """Configure Python logging from app config.

    Args:
        config: AppConfig instance (loads default if None)
    """
    if config is None:
        config = load_app_config()

    _configure_logging(
        level=config.logging.level,
        format_string=config.logging.format,
        filename=config.logging.filename,
        structured=config.logging.structured,
    )


def load_pixel_map(path: str | Path) -> PixelMap:
    """Load and validate a roofline pixel map.

    Accepts both the camelCase editor export (``totalPixelCount``,
    ``startPixel``...) and snake_case field names.

    Raises:
        ValidationError: If the map is malformed
        FileNotFoundError: If the file does not exist
    """
    pixel_map = PixelMap.model_validate(load_config(path))
    logger.debug(
        f"Loaded pixel map {path}: {pixel_map.total_pixel_count} pixels, "
        f"{len(pixel_map.segments)} segments"
    )
    return pixel_map


def load_design_intent(path: str | Path) -> DesignIntent:
    """Load and validate a design intent document.

    Raises:
        ValidationError: If the intent is malformed
        FileNotFoundError: If the file does not exist
    """
    intent = DesignIntent.model_validate(load_config(path))
    logger.debug(f"Loaded design intent {path}: {len(intent.layers)} layers")
    return intent


__all__ = [
    "clear_app_config_cache",
    "configure_logging",
    "detect_format",
    "load_app_config",
    "load_config",
    "load_design_intent",
    "load_pixel_map",
]
