"""Configuration models for Rooflight."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = Field(default=False, description="Emit JSON lines instead of text")
    filename: str | None = Field(default=None, description="Log file path (None = stdout)")


class CompositionConfig(BaseModel):
    """Tunables for rendering, compositing and payload encoding."""

    max_effect_colors: int = Field(
        default=3, ge=1, le=3, description="Colors carried by an effect payload segment"
    )
    max_pixels: int = Field(
        default=4096, gt=0, description="Largest strip the pixel buffer will accept"
    )
    contrast_threshold: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Normalized contrast below which overlapping layers get a warning",
    )
    default_speed: int = Field(default=128, ge=0, le=255, description="Effect speed when unset")
    default_intensity: int = Field(
        default=128, ge=0, le=255, description="Effect intensity when unset"
    )


class ClarificationConfig(BaseModel):
    """Clarification dialog limits."""

    max_options: int = Field(default=4, ge=2, description="Options shown per question")
    max_clarification_rounds: int = Field(
        default=5, ge=1, description="Rounds before giving up and recommending manual controls"
    )
    confidence_step: float = Field(
        default=0.1, ge=0.0, le=1.0, description="Confidence gained per resolved ambiguity"
    )


class AppConfig(BaseModel):
    """Application-level configuration."""

    model_config = ConfigDict(extra="ignore")

    logging: LoggingConfig = LoggingConfig()
    composition: CompositionConfig = CompositionConfig()
    clarification: ClarificationConfig = ClarificationConfig()

    @classmethod
    def default_path(cls) -> Path:
        """Default path for application config."""
        return Path("rooflight.yaml")


__all__ = [
    "AppConfig",
    "ClarificationConfig",
    "CompositionConfig",
    "LoggingConfig",
]
