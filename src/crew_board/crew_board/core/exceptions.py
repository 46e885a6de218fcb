from __future__ import annotations

from typing import Optional

from .enums import ClockInBlockReason


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class InvalidTransitionError(DomainError):
    """Raised when a request is moved out of a state that does not allow it."""


class PersistenceError(DomainError):
    """Raised when the table store rejected a write; applied steps were rolled back."""


class ExternalServiceError(DomainError):
    """Raised when a remote spreadsheet endpoint fails or answers garbage."""


class ClockInBlockedError(ValidationError):
    """Direct clock-in refused; the crew member has to file a CLOCK_IN request."""

    def __init__(self, reason: ClockInBlockReason, message: Optional[str] = None):
        self.reason = reason
        super().__init__(message or f"Direct clock-in not allowed ({reason.value}), please send a request")


class LateConfirmationRequired(ValidationError):
    """Clock-in is late but inside the tolerance; caller must confirm first."""
