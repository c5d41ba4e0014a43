"""
Unit tests for the ScaledJob admission decision engine.

These tests exercise the create, update and delete decisions with a trigger
validator stub, so the decision logic is tested without any scaler rules.
"""

from keda_webhooks.models.admission import AdmissionDecision
from keda_webhooks.models.scaledjob import ObjectMeta, ScaledJob, ScaledJobSpec
from keda_webhooks.validation.scaledjob import (
    is_removing_finalizer,
    specs_equal,
    validate_create,
    validate_delete,
    validate_update,
)
from tests.fixtures.scaledjob_resources import (
    KEDA_FINALIZER,
    RABBITMQ_TRIGGER,
    make_scaledjob,
)


def _scaled_job(**kwargs) -> ScaledJob:
    return ScaledJob.model_validate(make_scaledjob(**kwargs))


class TestCreate:
    """Create requests always go through trigger validation."""

    def test_valid_triggers_allowed(self, trigger_validator, scaled_job):
        decision = validate_create(scaled_job, False, trigger_validator)

        assert decision == AdmissionDecision.allow()
        assert decision.warnings == ()
        assert trigger_validator.calls == [(scaled_job, "create", False)]

    def test_invalid_triggers_denied_with_validator_reason(
        self, failing_trigger_validator, scaled_job
    ):
        decision = validate_create(scaled_job, False, failing_trigger_validator)

        assert decision.allowed is False
        assert decision.reason == failing_trigger_validator.error
        assert decision.warnings == ()

    def test_dry_run_passed_through(self, trigger_validator, scaled_job):
        decision = validate_create(scaled_job, True, trigger_validator)

        assert decision.allowed is True
        assert trigger_validator.calls == [(scaled_job, "create", True)]

    def test_dry_run_does_not_change_outcome(self, failing_trigger_validator):
        scaled_job = _scaled_job()

        wet = validate_create(scaled_job, False, failing_trigger_validator)
        dry = validate_create(scaled_job, True, failing_trigger_validator)

        assert wet == dry
        assert [call[2] for call in failing_trigger_validator.calls] == [False, True]


class TestUpdate:
    """Update requests, including the finalizer-removal exemption."""

    def test_finalizer_removal_skips_validation(self, trigger_validator):
        old = _scaled_job(finalizers=[KEDA_FINALIZER])
        new = _scaled_job(finalizers=[])

        decision = validate_update(old, new, False, trigger_validator)

        assert decision.allowed is True
        assert trigger_validator.calls == []

    def test_finalizer_removal_skips_failing_validation(
        self, failing_trigger_validator
    ):
        """Cleanup is admitted even when the triggers would be rejected."""
        old = _scaled_job(finalizers=[KEDA_FINALIZER])
        new = _scaled_job(finalizers=[])

        decision = validate_update(old, new, False, failing_trigger_validator)

        assert decision.allowed is True
        assert failing_trigger_validator.calls == []

    def test_two_finalizers_removed_is_validated(self, trigger_validator):
        old = _scaled_job(finalizers=["a", "b"])
        new = _scaled_job(finalizers=[])

        validate_update(old, new, False, trigger_validator)

        assert len(trigger_validator.calls) == 1
        assert trigger_validator.calls[0][1] == "update"

    def test_spec_change_with_finalizer_removal_is_validated(
        self, failing_trigger_validator
    ):
        changed_trigger = dict(
            RABBITMQ_TRIGGER,
            metadata={**RABBITMQ_TRIGGER["metadata"], "value": "50"},
        )
        old = _scaled_job(finalizers=[KEDA_FINALIZER])
        new = _scaled_job(finalizers=[], triggers=[changed_trigger])

        decision = validate_update(old, new, False, failing_trigger_validator)

        assert decision.allowed is False
        assert decision.reason == failing_trigger_validator.error
        assert failing_trigger_validator.calls[0][1] == "update"

    def test_scalar_spec_change_is_validated(self, trigger_validator):
        old = _scaled_job(finalizers=[KEDA_FINALIZER])
        new = _scaled_job(finalizers=[], pollingInterval=60)

        validate_update(old, new, False, trigger_validator)

        assert len(trigger_validator.calls) == 1

    def test_finalizer_kept_is_validated(self, trigger_validator):
        old = _scaled_job(finalizers=[KEDA_FINALIZER])
        new = _scaled_job(finalizers=[KEDA_FINALIZER])

        validate_update(old, new, False, trigger_validator)

        assert len(trigger_validator.calls) == 1

    def test_missing_previous_is_validated(self, trigger_validator):
        new = _scaled_job(finalizers=[])

        decision = validate_update(None, new, True, trigger_validator)

        assert decision.allowed is True
        assert trigger_validator.calls == [(new, "update", True)]

    def test_update_denied_with_validator_reason(self, failing_trigger_validator):
        old = _scaled_job()
        new = _scaled_job(maxReplicaCount=100)

        decision = validate_update(old, new, False, failing_trigger_validator)

        assert decision == AdmissionDecision.deny(failing_trigger_validator.error)

    def test_repeated_calls_give_identical_decisions(self, failing_trigger_validator):
        old = _scaled_job()
        new = _scaled_job(maxReplicaCount=100)

        first = validate_update(old, new, True, failing_trigger_validator)
        second = validate_update(old, new, True, failing_trigger_validator)

        assert first == second
        assert first.warnings == second.warnings


class TestDelete:
    """Deletes are never blocked."""

    def test_delete_always_allowed(self, scaled_job):
        for dry_run in (False, True):
            decision = validate_delete(scaled_job, dry_run)
            assert decision.allowed is True
            assert decision.warnings == ()

    def test_delete_without_object_allowed(self):
        assert validate_delete(None, False).allowed is True


class TestFinalizerRemovalCheck:
    """Tests for is_removing_finalizer and specs_equal."""

    def test_exact_rule(self):
        spec = ScaledJobSpec.model_validate(make_scaledjob()["spec"])

        assert is_removing_finalizer(
            ObjectMeta(finalizers=[]), ObjectMeta(finalizers=["x"]), spec, spec
        )
        assert not is_removing_finalizer(
            ObjectMeta(finalizers=["x"]), ObjectMeta(finalizers=["x"]), spec, spec
        )
        assert not is_removing_finalizer(
            ObjectMeta(finalizers=[]), ObjectMeta(finalizers=[]), spec, spec
        )
        assert not is_removing_finalizer(
            ObjectMeta(finalizers=["x"]), ObjectMeta(finalizers=["x", "y"]), spec, spec
        )

    def test_key_order_does_not_matter(self):
        raw = make_scaledjob()["spec"]
        reordered = dict(reversed(list(raw.items())))

        assert specs_equal(
            ScaledJobSpec.model_validate(raw), ScaledJobSpec.model_validate(reordered)
        )

    def test_unknown_fields_are_compared(self):
        raw = make_scaledjob()["spec"]
        old_spec = ScaledJobSpec.model_validate(raw)
        new_spec = ScaledJobSpec.model_validate({**raw, "futureField": {"enabled": True}})

        assert not specs_equal(new_spec, old_spec)

    def test_trigger_order_matters(self):
        raw = make_scaledjob()["spec"]
        swapped = {**raw, "triggers": list(reversed(raw["triggers"]))}

        assert not specs_equal(
            ScaledJobSpec.model_validate(swapped), ScaledJobSpec.model_validate(raw)
        )

    def test_unserializable_spec_is_never_equal(self):
        raw = make_scaledjob()["spec"]
        marker = object()
        spec = ScaledJobSpec.model_validate({**raw, "opaque": marker})

        assert not specs_equal(spec, spec)

    def test_unserializable_spec_does_not_grant_exemption(self, trigger_validator):
        body = make_scaledjob(finalizers=[KEDA_FINALIZER])
        body["spec"]["opaque"] = object()
        old = ScaledJob.model_validate(body)
        new = old.model_copy(update={"metadata": ObjectMeta(finalizers=[])})

        validate_update(old, new, False, trigger_validator)

        assert len(trigger_validator.calls) == 1
