"""
Core exceptions for the vetmarket package.

This module defines the exception hierarchy used throughout the marketplace
backend. Every exception carries the HTTP status it maps to, so the API layer
can translate any raised error into the standard ``{success, message, error}``
envelope without per-route handling.
"""

import logging
import time
import traceback
from typing import Any, Dict, List, Optional


class VetMarketException(Exception):
    """
    Base exception class for all vetmarket exceptions.

    Provides a consistent interface for error handling across the package.
    """

    http_status: int = 500

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary format.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "http_status": self.http_status,
            "timestamp": time.time(),
        }

    def get_debug_info(self) -> Dict[str, Any]:
        """
        Get detailed debug information for the exception.

        Returns:
            Dictionary with debug information including traceback
        """
        debug_info = self.to_dict()
        formatted = traceback.format_exc()
        debug_info.update(
            {
                "traceback": (
                    formatted if formatted.strip() != "NoneType: None" else None
                ),
                "module": self.__class__.__module__,
                "class_name": self.__class__.__name__,
            }
        )
        return debug_info

    def log_error(
        self, logger: Optional[logging.Logger] = None, level: int = logging.ERROR
    ) -> None:
        """
        Log the exception with appropriate level and context.

        Args:
            logger: Logger instance to use (creates default if None)
            level: Logging level to use
        """
        if logger is None:
            logger = logging.getLogger(__name__)

        log_data = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }

        logger.log(
            level,
            f"Exception occurred: {self.message}",
            extra={"exception_data": log_data},
        )

    def __str__(self) -> str:
        """String representation of the exception."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class ValidationException(VetMarketException):
    """Base exception for request and data validation errors."""

    http_status = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        value: Optional[Any] = None,
        validation_errors: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize validation exception.

        Args:
            message: Error message
            field: Field that failed validation
            value: Value that failed validation
            validation_errors: Detailed validation errors
        """
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        if validation_errors:
            details["validation_errors"] = validation_errors

        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=details,
        )


class BusinessRuleException(ValidationException):
    """Exception raised when a business rule rejects an otherwise valid request."""

    def __init__(
        self,
        message: str = "Business rule validation failed",
        rule_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize business rule exception.

        Args:
            message: Error message
            rule_name: Name of the business rule that failed
            context: Additional context about the failure
        """
        super().__init__(message=message)
        self.error_code = "BUSINESS_RULE_ERROR"
        if rule_name:
            self.details["rule_name"] = rule_name
        if context:
            self.details["context"] = context


class UnsupportedFormatException(ValidationException):
    """Exception raised when a document is requested in an unknown format."""

    def __init__(self, requested_format: str):
        """
        Initialize unsupported format exception.

        Args:
            requested_format: The format string the caller asked for
        """
        super().__init__(
            message=f"Unsupported template rendering format: {requested_format}",
            field="format",
            value=requested_format,
        )
        self.error_code = "UNSUPPORTED_FORMAT"


class AuthenticationException(VetMarketException):
    """Exception raised when a request cannot be tied to a valid account."""

    http_status = 401

    def __init__(
        self,
        message: str = "Not authorized",
        error_code: str = "NOT_AUTHENTICATED",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code, details)


class TokenExpiredException(AuthenticationException):
    """Exception raised when a bearer token is past its expiry."""

    def __init__(self, message: str = "Not authorized, token expired"):
        super().__init__(message, error_code="TOKEN_EXPIRED")


class SessionTimeoutException(AuthenticationException):
    """Exception raised when the account has been idle beyond its timeout."""

    def __init__(
        self,
        message: str = "Session expired due to inactivity",
        timeout_minutes: Optional[int] = None,
    ):
        details = {}
        if timeout_minutes is not None:
            details["timeout_minutes"] = timeout_minutes
        super().__init__(message, error_code="SESSION_TIMEOUT", details=details)


class AuthorizationException(VetMarketException):
    """Exception raised when the caller may not act on a resource or route."""

    http_status = 403

    def __init__(
        self,
        message: str = "Not authorized to access this resource",
        required_roles: Optional[List[str]] = None,
    ):
        """
        Initialize authorization exception.

        Args:
            message: Error message
            required_roles: Roles that would have been allowed
        """
        details = {}
        if required_roles:
            details["required_roles"] = required_roles
        super().__init__(message, error_code="FORBIDDEN", details=details)


class NotFoundException(VetMarketException):
    """Exception raised when a looked-up resource does not exist."""

    http_status = 404

    def __init__(
        self,
        message: str = "Resource not found",
        resource: Optional[str] = None,
        resource_id: Optional[Any] = None,
    ):
        """
        Initialize not found exception.

        Args:
            message: Error message
            resource: Name of the resource type that was looked up
            resource_id: Identifier used for the lookup
        """
        details = {}
        if resource:
            details["resource"] = resource
        if resource_id is not None:
            details["resource_id"] = str(resource_id)
        super().__init__(message, error_code="NOT_FOUND", details=details)


class RenderingException(VetMarketException):
    """Exception raised when a document cannot be produced."""

    def __init__(
        self,
        message: str = "Document rendering failed",
        template_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        details = {}
        if template_name:
            details["template_name"] = template_name
        if original_error is not None:
            details["original_error"] = str(original_error)
        super().__init__(message, error_code="RENDERING_ERROR", details=details)
        self.original_error = original_error


class ConfigurationException(VetMarketException):
    """Base exception for configuration-related errors."""

    def __init__(
        self,
        message: str = "Configuration error",
        config_key: Optional[str] = None,
        config_value: Optional[str] = None,
    ):
        """
        Initialize configuration exception.

        Args:
            message: Error message
            config_key: Configuration key that caused the error
            config_value: Configuration value (will be sanitized)
        """
        details = {}
        if config_key:
            details["config_key"] = config_key
        if config_value:
            details["config_value"] = self._sanitize_config_value(
                config_key, config_value
            )

        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=details,
        )

    @staticmethod
    def _sanitize_config_value(key: Optional[str], value: str) -> str:
        """Sanitize configuration values to avoid exposing secrets."""
        if not key:
            return "[REDACTED]"

        sensitive_keys = ["password", "secret", "key", "token", "credential"]
        if any(sensitive in key.lower() for sensitive in sensitive_keys):
            return "[REDACTED]"

        return value


# Utility functions for exception handling and error formatting


def format_validation_errors(errors: List[Dict[str, Any]]) -> Dict[str, List[str]]:
    """
    Format Pydantic validation errors into a user-friendly structure.

    Args:
        errors: List of Pydantic validation errors

    Returns:
        Dictionary mapping field names to lists of error messages
    """
    formatted_errors: Dict[str, List[str]] = {}

    for error in errors:
        # FastAPI prefixes request locations ("body", "query"); drop them
        location = [
            str(loc)
            for loc in error.get("loc", [])
            if loc not in ("body", "query", "path")
        ]
        field_path = ".".join(location) or "root"

        message = error.get("msg", "Validation error")
        error_type = error.get("type", "unknown")

        if error_type == "value_error":
            formatted_message = message
        elif error_type == "missing":
            formatted_message = "This field is required"
        else:
            formatted_message = f"{message} (type: {error_type})"

        formatted_errors.setdefault(field_path, []).append(formatted_message)

    return formatted_errors


def create_error_response(
    exception: VetMarketException,
    include_debug: bool = False,
) -> Dict[str, Any]:
    """
    Create a standardized error envelope from an exception.

    Args:
        exception: The exception to format
        include_debug: Whether to include debug information

    Returns:
        Envelope of the form ``{"success": False, "message": ..., "error": {...}}``
    """
    response: Dict[str, Any] = {
        "success": False,
        "message": exception.message,
        "error": {
            "type": exception.__class__.__name__,
            "code": exception.error_code,
        },
    }

    if exception.details:
        response["error"]["details"] = exception.details

    if include_debug:
        debug_info = exception.get_debug_info()
        response["debug"] = {
            "timestamp": debug_info["timestamp"],
            "module": debug_info["module"],
            "class_name": debug_info["class_name"],
        }

    return response


def log_exception_context(
    exception: Exception,
    context: Dict[str, Any],
    logger: Optional[logging.Logger] = None,
    level: int = logging.ERROR,
) -> None:
    """
    Log an exception with additional context information.

    Args:
        exception: The exception to log
        context: Additional context information
        logger: Logger instance to use
        level: Logging level
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    if isinstance(exception, VetMarketException):
        log_data = exception.to_dict()
        log_data["context"] = context
        logger.log(
            level,
            f"Exception with context: {exception.message}",
            extra={"exception_data": log_data},
        )
    else:
        logger.log(
            level,
            f"Unhandled exception: {exception}",
            extra={
                "exception_type": exception.__class__.__name__,
                "exception_message": str(exception),
                "context": context,
            },
            exc_info=exception,
        )
