"""Validation utilities for Cotejo Pairing.

This module provides reusable validation functions with consistent error handling.
"""

import math
from typing import Optional, Union

Number = Union[int, float]


class ValidationResult:
    """Result of a validation operation.

    Attributes:
        is_valid: Whether the validation passed
        error_message: Human-readable error message if invalid
        sanitized_value: Cleaned/normalized value if valid
    """

    def __init__(
        self,
        is_valid: bool,
        error_message: Optional[str] = None,
        sanitized_value: Optional[Union[str, Number]] = None,
    ):
        self.is_valid = is_valid
        self.error_message = error_message
        self.sanitized_value = sanitized_value

    def __bool__(self) -> bool:
        """Allow using result in boolean context: if result: ..."""
        return self.is_valid

    def __repr__(self) -> str:
        if self.is_valid:
            return f"ValidationResult(VALID, {self.sanitized_value!r})"
        return f"ValidationResult(INVALID, {self.error_message!r})"


# ========== Name Validation ==========


def validate_name(name: Optional[str], required: bool = True) -> ValidationResult:
    """Validate a display name (competitor, team or owner).

    Args:
        name: Name to validate
        required: Whether an empty name is invalid

    Returns:
        ValidationResult with the stripped name
    """
    if name is None or not str(name).strip():
        if required:
            return ValidationResult(is_valid=False, error_message="Name is required")
        return ValidationResult(is_valid=True, sanitized_value="")

    name = " ".join(str(name).split())
    if len(name) > 100:
        return ValidationResult(
            is_valid=False,
            error_message=f"Name too long ({len(name)} characters, max 100)",
        )
    return ValidationResult(is_valid=True, sanitized_value=name)


# ========== Weight Validation ==========


def validate_weight(weight: Optional[Number]) -> ValidationResult:
    """Validate a competitor weight in its own unit.

    The weight must be a finite number greater than zero.

    Example:
        >>> validate_weight(2750).sanitized_value
        2750.0
    """
    if weight is None:
        return ValidationResult(is_valid=False, error_message="Weight is required")

    try:
        value = float(weight)
    except (TypeError, ValueError):
        return ValidationResult(
            is_valid=False, error_message=f"Weight must be a number: {weight!r}"
        )

    if not math.isfinite(value) or value <= 0:
        return ValidationResult(
            is_valid=False, error_message=f"Weight must be positive: {weight!r}"
        )
    return ValidationResult(is_valid=True, sanitized_value=value)


# ========== Age Validation ==========


def validate_age_months(age_months: Optional[Number]) -> ValidationResult:
    """Validate an optional age in months.

    ``None`` is valid (age unknown). Ages must be whole, non-negative months.
    """
    if age_months is None:
        return ValidationResult(is_valid=True, sanitized_value=None)

    try:
        value = float(age_months)
    except (TypeError, ValueError):
        return ValidationResult(
            is_valid=False, error_message=f"Age must be a number: {age_months!r}"
        )

    if not value.is_integer() or value < 0:
        return ValidationResult(
            is_valid=False,
            error_message=f"Age must be a whole number of months: {age_months!r}",
        )
    return ValidationResult(is_valid=True, sanitized_value=int(value))


# ========== Tolerance Validation ==========


def validate_tolerance(
    tolerance: Optional[Number], required: bool = True
) -> ValidationResult:
    """Validate a non-negative tolerance (weight in grams or age in months)."""
    if tolerance is None:
        if required:
            return ValidationResult(
                is_valid=False, error_message="Tolerance is required"
            )
        return ValidationResult(is_valid=True, sanitized_value=None)

    try:
        value = float(tolerance)
    except (TypeError, ValueError):
        return ValidationResult(
            is_valid=False, error_message=f"Tolerance must be a number: {tolerance!r}"
        )

    if math.isnan(value) or value < 0:
        return ValidationResult(
            is_valid=False,
            error_message=f"Tolerance must be non-negative: {tolerance!r}",
        )
    return ValidationResult(is_valid=True, sanitized_value=value)



# ========== Points Validation ==========


def validate_points(points: Optional[Number]) -> ValidationResult:
    """Validate standings points awarded for a result (finite, non-negative)."""
    try:
        value = float(points)
    except (TypeError, ValueError):
        return ValidationResult(
            is_valid=False, error_message=f"Points must be a number: {points!r}"
        )

    if not math.isfinite(value) or value < 0:
        return ValidationResult(
            is_valid=False, error_message=f"Points must be non-negative: {points!r}"
        )
    return ValidationResult(is_valid=True, sanitized_value=value)
