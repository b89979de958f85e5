"""
Quality gate for generated geometry.

Checks a model's geometry handle before it is written to disk.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class ValidationStatus(Enum):
    """Validation result status."""
    VALID = "valid"
    INVALID = "invalid"


@dataclass
class ValidationResult:
    """Result of shape validation."""
    status: ValidationStatus
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def valid(cls, warnings: List[str] = None) -> 'ValidationResult':
        return cls(ValidationStatus.VALID, True, [], list(warnings or []))

    @classmethod
    def invalid(cls, errors: List[str]) -> 'ValidationResult':
        return cls(ValidationStatus.INVALID, False, errors, [])


def validate_shape(shape) -> ValidationResult:
    """
    Validate shape geometry.

    Checks:
    - Shape is not null
    - B-Rep validity (build123d shapes)
    - Volume is positive
    """
    if shape is None:
        return ValidationResult.invalid(["Shape is null"])

    errors = []
    warnings = []

    if hasattr(shape, 'is_valid'):
        try:
            if not shape.is_valid():
                errors.append("Shape B-Rep is invalid")
        except Exception as e:
            warnings.append(f"Could not perform B-Rep check: {e}")

    volume = getattr(shape, 'volume', None)
    if volume is None:
        warnings.append("Shape has no volume")
    elif volume <= 0:
        errors.append(f"Shape volume must be positive, got {volume}")

    if errors:
        return ValidationResult.invalid(errors)
    return ValidationResult.valid(warnings)
