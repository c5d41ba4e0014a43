"""
Admission decisions for ScaledJob resources.

The functions in this module are pure: they take the decoded resources and the
dry-run flag and return an AdmissionDecision. They hold no state between
calls and the dry-run flag never changes which branch is taken; it is only
passed through to the trigger validator.

Update requests that only drop the last finalizer, without touching the
spec, skip trigger validation. The KEDA controller removes its finalizer as
the last step of cleanup and must not be blocked by triggers that are already
failing for unrelated reasons.
"""

import logging

from keda_webhooks.constants import OPERATION_CREATE, OPERATION_UPDATE
from keda_webhooks.errors import TriggerValidationError
from keda_webhooks.models.admission import AdmissionDecision
from keda_webhooks.models.scaledjob import ObjectMeta, ScaledJob, ScaledJobSpec
from keda_webhooks.validation.triggers import TriggerValidator

logger = logging.getLogger(__name__)


def specs_equal(
    spec: ScaledJobSpec,
    old_spec: ScaledJobSpec,
    log: logging.Logger = logger,
) -> bool:
    """
    Compare two specifications field by field.

    Both sides are reduced to canonical JSON. If either side cannot be
    serialized the specifications are reported as different.

    Args:
        spec: Specification of the incoming object
        old_spec: Specification of the stored object
        log: Logger receiving serialization failures

    Returns:
        True if both specifications serialize identically
    """
    try:
        return spec.canonical_json() == old_spec.canonical_json()
    except (TypeError, ValueError) as e:
        log.debug(f"Could not serialize ScaledJob spec for comparison: {e}")
        return False


def is_removing_finalizer(
    meta: ObjectMeta,
    old_meta: ObjectMeta,
    spec: ScaledJobSpec,
    old_spec: ScaledJobSpec,
    log: logging.Logger = logger,
) -> bool:
    """Whether an update only removes the single remaining finalizer."""
    return (
        len(meta.finalizers) == 0
        and len(old_meta.finalizers) == 1
        and specs_equal(spec, old_spec, log)
    )


def _verify_triggers(
    scaled_job: ScaledJob,
    operation: str,
    dry_run: bool,
    trigger_validator: TriggerValidator,
) -> AdmissionDecision:
    try:
        trigger_validator.validate(scaled_job, operation, dry_run)
    except TriggerValidationError as e:
        return AdmissionDecision.deny(str(e))
    return AdmissionDecision.allow()


def validate_create(
    scaled_job: ScaledJob, dry_run: bool, trigger_validator: TriggerValidator
) -> AdmissionDecision:
    """
    Decide a create request.

    Args:
        scaled_job: The ScaledJob being created
        dry_run: Whether the request is a dry run
        trigger_validator: Validator for the trigger list

    Returns:
        Allow when the triggers are valid, otherwise Deny with the
        validator's message
    """
    return _verify_triggers(scaled_job, OPERATION_CREATE, dry_run, trigger_validator)


def validate_update(
    old_scaled_job: ScaledJob | None,
    scaled_job: ScaledJob,
    dry_run: bool,
    trigger_validator: TriggerValidator,
    log: logging.Logger = logger,
) -> AdmissionDecision:
    """
    Decide an update request.

    Args:
        old_scaled_job: The stored ScaledJob, or None if it is unavailable
        scaled_job: The ScaledJob as it would be stored after the update
        dry_run: Whether the request is a dry run
        trigger_validator: Validator for the trigger list
        log: Logger receiving the exemption notice

    Returns:
        Allow without validation for finalizer removal, otherwise the
        outcome of trigger validation
    """
    if old_scaled_job is not None and is_removing_finalizer(
        scaled_job.metadata,
        old_scaled_job.metadata,
        scaled_job.spec,
        old_scaled_job.spec,
        log,
    ):
        log.debug(
            "finalizer removal, skipping validation",
            extra={
                "resource_name": scaled_job.name,
                "namespace": scaled_job.namespace,
                "operation": OPERATION_UPDATE,
            },
        )
        return AdmissionDecision.allow()

    return _verify_triggers(scaled_job, OPERATION_UPDATE, dry_run, trigger_validator)


def validate_delete(scaled_job: ScaledJob | None, dry_run: bool) -> AdmissionDecision:
    """Deletion is never blocked."""
    return AdmissionDecision.allow()
