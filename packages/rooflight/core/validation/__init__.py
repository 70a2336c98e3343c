"""Pre-composition validation."""

from rooflight.core.validation.constraint_validator import ConstraintValidator, ValidationResult

__all__ = ["ConstraintValidator", "ValidationResult"]
