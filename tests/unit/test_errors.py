"""Unit tests for the webhook error hierarchy."""

import kopf

from keda_webhooks.errors import (
    AdmissionContextError,
    OperatorError,
    ScaledJobAdmissionDenied,
    TriggerValidationError,
    ValidationError,
)


class TestErrorHierarchy:
    """Tests for error categorization and messages."""

    def test_trigger_error_is_validation_error(self):
        error = TriggerValidationError("bad trigger", trigger_index=2)

        assert isinstance(error, ValidationError)
        assert error.category == "validation"
        assert error.trigger_index == 2
        assert str(error) == "bad trigger"

    def test_field_prefix(self):
        error = ValidationError("must be positive", field="spec.pollingInterval")

        assert str(error) == (
            "Validation error in field 'spec.pollingInterval': must be positive"
        )

    def test_context_error_carries_user_action(self):
        cause = KeyError("dryRun")
        error = AdmissionContextError("missing dry-run flag", cause=cause)

        assert isinstance(error, OperatorError)
        assert error.category == "context"
        assert error.cause is cause
        assert str(error).startswith("missing dry-run flag\nAction required: ")

    def test_denied_converts_to_admission_error(self):
        denied = ScaledJobAdmissionDenied("duplicate trigger", "create", name="job")

        admission_error = denied.as_admission_error()

        assert isinstance(admission_error, kopf.AdmissionError)
        assert str(admission_error) == "duplicate trigger"
        assert admission_error.code == 400
        assert denied.reason == "duplicate trigger"
