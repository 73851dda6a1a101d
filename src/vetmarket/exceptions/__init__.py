"""
Custom exceptions for the vetmarket package.

This module defines the exception hierarchy and the helpers that turn
exceptions into API error envelopes.
"""

from .core_exceptions import (
    AuthenticationException,
    AuthorizationException,
    BusinessRuleException,
    ConfigurationException,
    NotFoundException,
    RenderingException,
    SessionTimeoutException,
    TokenExpiredException,
    UnsupportedFormatException,
    ValidationException,
    VetMarketException,
    create_error_response,
    format_validation_errors,
    log_exception_context,
)

__all__ = [
    # Exception classes
    "VetMarketException",
    "ValidationException",
    "BusinessRuleException",
    "UnsupportedFormatException",
    "AuthenticationException",
    "TokenExpiredException",
    "SessionTimeoutException",
    "AuthorizationException",
    "NotFoundException",
    "RenderingException",
    "ConfigurationException",
    # Utility functions
    "format_validation_errors",
    "create_error_response",
    "log_exception_context",
]
