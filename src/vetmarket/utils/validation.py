"""
Validation and data processing utilities for marketplace requests.

This module provides common validation patterns, string sanitization and the
helpers used to parse free-form query parameters.
"""

import re
import unicodedata
from typing import Any, Dict, Generic, List, Optional, TypeVar

# Type variable for generic validation functions
T = TypeVar("T")


class ValidationError(Exception):
    """Custom validation error with structured error information."""

    def __init__(
        self, message: str, field: Optional[str] = None, code: Optional[str] = None
    ):
        self.message = message
        self.field = field
        self.code = code
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the error to a dictionary format."""
        return {"message": self.message, "field": self.field, "code": self.code}


class ValidationResult(Generic[T]):
    """Result of a validation operation."""

    def __init__(
        self, value: Optional[T] = None, errors: Optional[List[ValidationError]] = None
    ):
        self.value = value
        self.errors = errors or []
        self.is_valid = len(self.errors) == 0

    def add_error(self, error: ValidationError) -> None:
        """Add an error to the result."""
        self.errors.append(error)
        self.is_valid = False


EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

# US ZIP or ZIP+4
ZIP_CODE_PATTERN = re.compile(r"^\d{5}(-\d{4})?$")


def sanitize_string(value: str, max_length: Optional[int] = None) -> str:
    """
    Sanitize a string by normalizing unicode and trimming whitespace.

    Args:
        value: The string to sanitize
        max_length: Maximum allowed length

    Returns:
        Sanitized string
    """
    normalized = unicodedata.normalize("NFKC", value)

    # Strip whitespace and collapse multiple spaces
    sanitized = re.sub(r"\s+", " ", normalized.strip())

    if max_length and len(sanitized) > max_length:
        sanitized = sanitized[:max_length].rstrip()

    return sanitized


def validate_email(email: str) -> ValidationResult[str]:
    """
    Validate and normalise an email address.

    Args:
        email: The email to validate

    Returns:
        ValidationResult with the lower-cased email or errors
    """
    result = ValidationResult[str]()

    if not email:
        result.add_error(ValidationError("Email is required", "email", "required"))
        return result

    sanitized_email = sanitize_string(email).lower()

    if not EMAIL_PATTERN.match(sanitized_email):
        result.add_error(
            ValidationError("Invalid email format", "email", "invalid_format")
        )
        return result

    if len(sanitized_email) > 254:
        result.add_error(ValidationError("Email is too long", "email", "too_long"))
        return result

    result.value = sanitized_email
    return result


def validate_zip_code(zip_code: str) -> ValidationResult[str]:
    """
    Validate a US ZIP code used for service-area lookups.

    Args:
        zip_code: ZIP or ZIP+4 string

    Returns:
        ValidationResult with the trimmed ZIP code or errors
    """
    result = ValidationResult[str]()
    value = sanitize_string(zip_code or "")

    if not ZIP_CODE_PATTERN.match(value):
        result.add_error(
            ValidationError("Invalid ZIP code", "location", "invalid_format")
        )
        return result

    result.value = value
    return result


def parse_csv_list(value: Optional[str]) -> List[str]:
    """
    Split a comma-separated query parameter into trimmed, non-empty items.

    >>> parse_csv_list("Small Animal, Equine,,")
    ['Small Animal', 'Equine']
    """
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]
