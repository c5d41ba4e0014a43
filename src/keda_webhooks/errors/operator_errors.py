"""
Webhook error hierarchy with categorization.

This module defines the error types used throughout the admission webhook,
providing clear categorization and integration with kopf's admission errors.
"""

import kopf


class OperatorError(Exception):
    """
    Base error class for all webhook-related exceptions.

    Provides categorization and user guidance for resolution.
    """

    def __init__(
        self,
        message: str,
        category: str,
        user_action: str | None = None,
        cause: Exception | None = None,
    ):
        """
        Initialize webhook error.

        Args:
            message: Human-readable error description
            category: Error category (validation, context)
            user_action: What user should do to resolve the issue
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.category = category
        self.user_action = user_action
        self.cause = cause

    def __str__(self) -> str:
        """Enhanced string representation with user guidance."""
        base_msg = super().__str__()
        if self.user_action:
            return f"{base_msg}\nAction required: {self.user_action}"
        return base_msg


class ValidationError(OperatorError):
    """Error in resource specification validation."""

    def __init__(
        self, message: str, field: str | None = None, user_action: str | None = None
    ):
        if field:
            message = f"Validation error in field '{field}': {message}"
        super().__init__(
            message=message, category="validation", user_action=user_action
        )


class TriggerValidationError(ValidationError):
    """Raised by a trigger validator when the trigger list is invalid."""

    def __init__(self, message: str, trigger_index: int | None = None):
        super().__init__(message)
        self.trigger_index = trigger_index


class ScaledJobAdmissionDenied(ValidationError):
    """
    Raised by the dispatcher when a ScaledJob must be rejected.

    The message is exactly the reason reported by trigger validation so the
    requester sees the validator's text unchanged.
    """

    def __init__(self, reason: str, operation: str, name: str | None = None):
        super().__init__(reason)
        self.reason = reason
        self.operation = operation
        self.name = name

    def as_admission_error(self) -> kopf.AdmissionError:
        """Convert to the kopf exception that rejects the admission request."""
        return kopf.AdmissionError(self.reason, code=400)


class AdmissionContextError(OperatorError):
    """
    The admission invocation is malformed.

    Raised when the admission context lacks required fields or the submitted
    object cannot be decoded. This is a contract violation by the caller and
    is never converted into a decision.
    """

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(
            message=message,
            category="context",
            user_action="Check the admission webhook configuration and request payload",
            cause=cause,
        )
