"""
Deposit Errors
==============

Exceptions raised by the encoders. All of them subclass ``ValueError`` so
callers that only care about "bad metadata" can catch a single type.
"""

from typing import Any


class DepositError(Exception):
    """Base exception for deposit encoding errors."""
    pass


class MissingFieldError(DepositError, ValueError):
    """A required metadata field is absent."""

    def __init__(self, field: str, context: str = ""):
        self.field = field
        self.context = context
        message = f"Missing required field: {field}"
        if context:
            message = f"{message} ({context})"
        super().__init__(message)


class InvalidValueError(DepositError, ValueError):
    """A metadata value has the wrong shape or cannot be resolved."""
    pass


class ConflictingValueError(DepositError, ValueError):
    """Two records being merged declare different values for the same field."""

    def __init__(self, field: str, first: Any, second: Any):
        self.field = field
        self.first = first
        self.second = second
        super().__init__(
            f'Conflicting values for {field}: "{first}" and "{second}"'
        )
