"""
Trigger validation for ScaledJob resources.

Scaler-specific rules belong to the scalers themselves. This module only
defines the contract the decision engine calls and a default validator that
enforces the rules shared by every scaler type.
"""

import logging
from typing import Protocol, runtime_checkable

from keda_webhooks.constants import (
    CACHED_METRICS_UNSUPPORTED_TRIGGERS,
    ERROR_CACHED_METRICS_UNSUPPORTED,
    ERROR_DUPLICATE_TRIGGER_NAME,
    ERROR_EMPTY_TRIGGER_TYPE,
    VALIDATION_ERROR_INCORRECT_TRIGGERS,
)
from keda_webhooks.errors import TriggerValidationError
from keda_webhooks.models.scaledjob import ScaledJob, ScaleTrigger
from keda_webhooks.observability.metrics import MetricsCollector, metrics_collector

@runtime_checkable
class TriggerValidator(Protocol):
    """
    Checks the trigger list of a ScaledJob.

    Implementations raise TriggerValidationError when the triggers are
    invalid; the error message becomes the rejection reason. The dry-run flag
    lets implementations suppress side effects of their own.
    """

    def validate(self, scaled_job: ScaledJob, operation: str, dry_run: bool) -> None:
        ...


def check_triggers(triggers: list[ScaleTrigger]) -> None:
    """
    Enforce the scaler-independent trigger rules.

    Args:
        triggers: Ordered trigger list from the ScaledJob spec

    Raises:
        TriggerValidationError: On the first trigger breaking a rule
    """
    seen_names: set[str] = set()
    for index, trigger in enumerate(triggers):
        if not trigger.type.strip():
            raise TriggerValidationError(ERROR_EMPTY_TRIGGER_TYPE, trigger_index=index)

        if (
            trigger.use_cached_metrics
            and trigger.type in CACHED_METRICS_UNSUPPORTED_TRIGGERS
        ):
            raise TriggerValidationError(
                ERROR_CACHED_METRICS_UNSUPPORTED.format(trigger.type),
                trigger_index=index,
            )

        if trigger.name:
            if trigger.name in seen_names:
                raise TriggerValidationError(
                    ERROR_DUPLICATE_TRIGGER_NAME.format(trigger.name),
                    trigger_index=index,
                )
            seen_names.add(trigger.name)


class ScaleTriggersValidator:
    """Default trigger validator recording failures as metrics."""

    def __init__(
        self,
        collector: MetricsCollector | None = None,
        logger: logging.Logger | None = None,
    ):
        self.collector = collector or metrics_collector
        self.logger = logger or logging.getLogger(__name__)

    def validate(self, scaled_job: ScaledJob, operation: str, dry_run: bool) -> None:
        try:
            check_triggers(scaled_job.spec.triggers)
        except TriggerValidationError as e:
            self.logger.debug(
                f"Trigger validation failed for ScaledJob {scaled_job.name}: {e}",
                extra={
                    "resource_name": scaled_job.name,
                    "namespace": scaled_job.namespace,
                    "operation": operation,
                    "dry_run": dry_run,
                },
            )
            self.collector.record_validation_error(
                scaled_job.namespace, operation, VALIDATION_ERROR_INCORRECT_TRIGGERS
            )
            raise
