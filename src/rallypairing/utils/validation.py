"""Validation utilities for Rally Pairing.

This module provides reusable validation functions with consistent error handling.
"""

# Rally Pairing
# Copyright (C) 2025  Rally Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import math
from typing import Any, Optional

from rallypairing.constants import MAX_RATING, MIN_RATING
from rallypairing.exceptions import RatingValidationException


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
        sanitized_value: Any = None,
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


# ========== Rating Validation ==========


def validate_rating(
    rating: Any, min_rating: float = MIN_RATING, max_rating: float = MAX_RATING
) -> ValidationResult:
    """Validate a skill rating.

    Ratings coming out of an Elo update are usually rounded but need not be,
    so any finite number inside the range is accepted.

    Args:
        rating: Rating value to validate
        min_rating: Minimum allowed rating
        max_rating: Maximum allowed rating

    Returns:
        ValidationResult with the rating as a float
    """
    if rating is None or isinstance(rating, bool):
        return ValidationResult(
            is_valid=False,
            error_message=f"Rating must be a number: {rating!r}",
        )

    try:
        rating_value = float(rating)
    except (ValueError, TypeError):
        return ValidationResult(
            is_valid=False,
            error_message=f"Rating must be a number: {rating!r}",
        )

    if not math.isfinite(rating_value):
        return ValidationResult(
            is_valid=False,
            error_message=f"Rating must be finite: {rating!r}",
        )

    if rating_value < min_rating or rating_value > max_rating:
        return ValidationResult(
            is_valid=False,
            error_message=f"Rating must be between {min_rating} and {max_rating}: {rating_value}",
        )

    return ValidationResult(is_valid=True, sanitized_value=rating_value)


def validate_rating_strict(
    rating: Any, min_rating: float = MIN_RATING, max_rating: float = MAX_RATING
) -> float:
    """Validate rating and return it as a float or raise exception.

    Raises:
        RatingValidationException: If rating is invalid
    """
    result = validate_rating(rating, min_rating, max_rating)
    if not result.is_valid:
        raise RatingValidationException(result.error_message)
    return result.sanitized_value


# ========== Identifier / Name Validation ==========


def validate_participant_id(participant_id: Any) -> ValidationResult:
    """Validate a participant identifier.

    Identifiers are opaque; numbers are accepted and normalised to strings so
    that pair keys compare consistently.
    """
    if participant_id is None or isinstance(participant_id, bool):
        return ValidationResult(
            is_valid=False,
            error_message="Participant id is required",
        )

    value = str(participant_id).strip()
    if not value:
        return ValidationResult(
            is_valid=False,
            error_message="Participant id cannot be empty",
        )
    return ValidationResult(is_valid=True, sanitized_value=value)


def validate_name(name: Optional[str], required: bool = True) -> ValidationResult:
    """Validate a display name.

    Args:
        name: Name to validate
        required: Whether name is required

    Returns:
        ValidationResult with validation status
    """
    if not name or not str(name).strip():
        if required:
            return ValidationResult(
                is_valid=False,
                error_message="Name is required",
            )
        return ValidationResult(is_valid=True, sanitized_value=None)

    return ValidationResult(is_valid=True, sanitized_value=str(name).strip())


# ========== Generic Validation ==========


def validate_positive_integer(
    value: Any, field_name: str = "Value"
) -> ValidationResult:
    """Validate that a value is a positive integer.

    Args:
        value: Value to validate
        field_name: Name of the field for error messages

    Returns:
        ValidationResult with the value as an int
    """
    if value is None:
        return ValidationResult(
            is_valid=False,
            error_message=f"{field_name} is required",
        )

    # bool is an int subclass and 2.5 would silently truncate
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        return ValidationResult(
            is_valid=False,
            error_message=f"{field_name} must be a whole number",
        )

    try:
        int_value = int(value)
    except (ValueError, TypeError):
        return ValidationResult(
            is_valid=False,
            error_message=f"{field_name} must be a number",
        )

    if int_value <= 0:
        return ValidationResult(
            is_valid=False,
            error_message=f"{field_name} must be positive",
        )
    return ValidationResult(is_valid=True, sanitized_value=int_value)
