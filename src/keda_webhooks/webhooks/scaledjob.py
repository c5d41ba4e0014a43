"""
Validating admission webhook for ScaledJob resources.

This webhook validates ScaledJob configurations before they are accepted by
Kubernetes, enforcing:
- Valid trigger configuration on create and update
- No validation when the controller only removes its finalizer
- Unconditional admission of deletes
"""

import logging
import time
from collections.abc import Mapping
from typing import Any

import kopf

from keda_webhooks.constants import (
    KEDA_GROUP,
    KEDA_VERSION,
    OPERATION_CREATE,
    OPERATION_UPDATE,
    RESOURCE_TYPE_SCALEDJOB,
    SCALEDJOB_PLURAL,
    VALIDATION_RESULT_ALLOWED,
    VALIDATION_RESULT_DENIED,
)
from keda_webhooks.errors import AdmissionContextError, ScaledJobAdmissionDenied
from keda_webhooks.models.admission import (
    AdmissionDecision,
    AdmissionOperation,
    AdmissionRequest,
    admission_request_from_context,
    decode_scaled_job,
)
from keda_webhooks.models.scaledjob import ScaledJob
from keda_webhooks.observability.logging import (
    generate_correlation_id,
    set_correlation_id,
)
from keda_webhooks.observability.metrics import MetricsCollector, metrics_collector
from keda_webhooks.validation import scaledjob as decisions
from keda_webhooks.validation.triggers import ScaleTriggersValidator, TriggerValidator

logger = logging.getLogger(__name__)


class ScaledJobCustomValidator:
    """
    Dispatches ScaledJob admission requests to the decision engine.

    Each method extracts the dry-run flag from the admission context, decodes
    the submitted objects and returns the decision's warnings. A denied
    request raises ScaledJobAdmissionDenied carrying the validator's reason.
    """

    def __init__(
        self,
        trigger_validator: TriggerValidator | None = None,
        logger: logging.Logger | None = None,
        collector: MetricsCollector | None = None,
    ):
        """
        Initialize the dispatcher.

        Args:
            trigger_validator: Validator for trigger lists (default: shared rules)
            logger: Logger for snapshots and decisions (default: module logger)
            collector: Metrics collector for decisions (default: global collector)
        """
        self.collector = collector or metrics_collector
        self.logger = logger or logging.getLogger(__name__)
        self.trigger_validator = trigger_validator or ScaleTriggersValidator(
            self.collector, self.logger
        )

    def validate_create(self, context: Mapping[str, Any], obj: Any) -> list[str]:
        """
        Validate a ScaledJob creation.

        Args:
            context: Admission context carrying the dry-run flag
            obj: The ScaledJob being created

        Returns:
            Warnings to surface to the requester

        Raises:
            AdmissionContextError: If the context or object is malformed
            ScaledJobAdmissionDenied: If trigger validation fails
        """
        request = self._begin(context)
        scaled_job = decode_scaled_job(obj)
        self._log_snapshot(scaled_job, request, OPERATION_CREATE, logging.INFO)

        started = time.perf_counter()
        decision = decisions.validate_create(
            scaled_job, request.dry_run, self.trigger_validator
        )
        return self._resolve(decision, scaled_job, OPERATION_CREATE, started)

    def validate_update(
        self, context: Mapping[str, Any], old_obj: Any, new_obj: Any
    ) -> list[str]:
        """
        Validate a ScaledJob update.

        Args:
            context: Admission context carrying the dry-run flag
            old_obj: The stored ScaledJob (may be missing)
            new_obj: The ScaledJob after the update

        Returns:
            Warnings to surface to the requester

        Raises:
            AdmissionContextError: If the context or new object is malformed
            ScaledJobAdmissionDenied: If trigger validation fails
        """
        request = self._begin(context)
        scaled_job = decode_scaled_job(new_obj)
        old_scaled_job = self._decode_previous(old_obj)
        self._log_snapshot(scaled_job, request, OPERATION_UPDATE, logging.DEBUG)

        started = time.perf_counter()
        decision = decisions.validate_update(
            old_scaled_job,
            scaled_job,
            request.dry_run,
            self.trigger_validator,
            log=self.logger,
        )
        return self._resolve(decision, scaled_job, OPERATION_UPDATE, started)

    def validate_delete(self, context: Mapping[str, Any], obj: Any) -> list[str]:
        """Deletion is always admitted; nothing is inspected."""
        return list(decisions.validate_delete(None, dry_run=False).warnings)

    def _begin(self, context: Mapping[str, Any]) -> AdmissionRequest:
        request = admission_request_from_context(context)
        set_correlation_id(request.uid or generate_correlation_id())
        return request

    def _decode_previous(self, old_obj: Any) -> ScaledJob | None:
        if old_obj is None:
            return None
        try:
            return decode_scaled_job(old_obj)
        except AdmissionContextError as e:
            self.logger.debug(f"Previous ScaledJob could not be decoded: {e}")
            return None

    def _log_snapshot(
        self,
        scaled_job: ScaledJob,
        request: AdmissionRequest,
        operation: str,
        level: int,
    ) -> None:
        name = scaled_job.name or request.name
        extra = {
            "resource_type": RESOURCE_TYPE_SCALEDJOB,
            "resource_name": name,
            "namespace": scaled_job.namespace or request.namespace,
            "operation": operation,
            "dry_run": request.dry_run,
        }
        try:
            extra["snapshot"] = scaled_job.model_dump_json(by_alias=True, indent=2)
        except (TypeError, ValueError) as e:
            self.logger.log(
                level,
                f"validating scaledjob {operation} for {name} "
                f"(snapshot unavailable: {e})",
                extra=extra,
            )
            return

        self.logger.log(
            level, f"validating scaledjob {operation} for {name}", extra=extra
        )

    def _resolve(
        self,
        decision: AdmissionDecision,
        scaled_job: ScaledJob,
        operation: str,
        started: float,
    ) -> list[str]:
        duration = time.perf_counter() - started
        if decision.allowed:
            self.collector.record_validation(
                operation, VALIDATION_RESULT_ALLOWED, duration
            )
            return list(decision.warnings)

        self.collector.record_validation(operation, VALIDATION_RESULT_DENIED, duration)
        reason = decision.reason or "ScaledJob rejected"
        self.logger.warning(
            f"ScaledJob {scaled_job.name} rejected: {reason}",
            extra={
                "resource_type": RESOURCE_TYPE_SCALEDJOB,
                "resource_name": scaled_job.name,
                "namespace": scaled_job.namespace,
                "operation": operation,
                "reason": reason,
            },
        )
        raise ScaledJobAdmissionDenied(reason, operation, name=scaled_job.name)


scaledjob_validator = ScaledJobCustomValidator()


@kopf.on.validate(KEDA_GROUP, KEDA_VERSION, SCALEDJOB_PLURAL, id="validate-scaledjob")
async def validate_scaledjob(
    body: Mapping[str, Any],
    operation: str,
    dryrun: bool,
    warnings: list[str],
    name: str | None = None,
    namespace: str | None = None,
    old: Mapping[str, Any] | None = None,
    **kwargs,
) -> dict:
    """
    Validate ScaledJob resource before admission.

    Args:
        body: The submitted resource (the stored one for deletes)
        operation: CREATE, UPDATE or DELETE
        dryrun: Whether this is a dry-run request
        warnings: Kopf's list of warnings returned to the requester
        name: Resource name
        namespace: Resource namespace
        old: The stored resource on updates, when available

    Returns:
        Empty dict; Kopf admits the request. Operations other than CREATE,
        UPDATE and DELETE are admitted without inspection.

    Raises:
        kopf.AdmissionError: If validation fails
    """
    context = {
        "dryrun": dryrun,
        "operation": operation,
        "name": name,
        "namespace": namespace,
    }

    try:
        if operation == AdmissionOperation.DELETE:
            result = scaledjob_validator.validate_delete(context, body)
        elif operation == AdmissionOperation.UPDATE:
            result = scaledjob_validator.validate_update(context, old, body)
        elif operation == AdmissionOperation.CREATE:
            result = scaledjob_validator.validate_create(context, body)
        else:
            logger.debug(f"Ignoring ScaledJob admission for operation {operation}")
            return {}
    except ScaledJobAdmissionDenied as e:
        raise e.as_admission_error() from e

    warnings.extend(result)
    return {}
