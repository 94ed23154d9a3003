"""
Amara API Error Classes

This module defines the exception hierarchy for Amara API interactions,
providing structured error handling for configuration, argument, transport,
and protocol failures. Every exception carries a human-readable message, an
optional numeric code, and an optional context mapping for diagnostics.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .validation import ValidationErrorKind


class AmaraError(Exception):
    """Base exception for all Amara API client errors."""

    def __init__(
        self, message: str, code: int | None = None, context: dict[str, Any] | None = None
    ) -> None:
        self.message = message
        self.code = code
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.code is not None:
            return f"{self.message} (Code: {self.code})"
        return self.message


class ConfigurationError(AmaraError, ValueError):
    """Raised for malformed configuration or an inconsistent account change."""

    def __init__(
        self,
        message: str,
        kind: ValidationErrorKind | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, None, context)
        self.kind = kind


class ArgumentError(AmaraError, TypeError):
    """Raised when a parameter has the wrong type or shape."""


class TransportError(AmaraError):
    """Raised when no response could be obtained within the retry budget."""

    def __init__(
        self,
        message: str,
        method: str,
        url: str,
        attempts: int,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, 503, context)
        self.method = method
        self.url = url
        self.attempts = attempts


class ProtocolViolationError(AmaraError):
    """Raised when a paginated response has a malformed ``objects`` or ``meta``."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, 502, context)


class UnresolvableResourceError(AmaraError):
    """Raised when no request URL can be built for a resource descriptor."""


class RecordLimitExceededError(AmaraError):
    """Raised when a list traversal would fetch more records than allowed."""

    def __init__(
        self,
        message: str,
        total_count: int,
        total_limit: int,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, None, context)
        self.total_count = total_count
        self.total_limit = total_limit


__all__ = [
    "AmaraError",
    "ArgumentError",
    "ConfigurationError",
    "ProtocolViolationError",
    "RecordLimitExceededError",
    "TransportError",
    "UnresolvableResourceError",
]
