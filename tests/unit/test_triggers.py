"""
Unit tests for the default trigger validator.

Only the rules shared by every scaler are covered; scaler-specific metadata
is never inspected.
"""

import logging
from unittest.mock import MagicMock

import pytest

from keda_webhooks.errors import TriggerValidationError
from keda_webhooks.models.scaledjob import ScaledJob, ScaleTrigger
from keda_webhooks.validation.triggers import (
    ScaleTriggersValidator,
    TriggerValidator,
    check_triggers,
)
from tests.fixtures.scaledjob_resources import make_scaledjob


class TestCheckTriggers:
    """Tests for check_triggers."""

    def test_empty_trigger_list_is_valid(self):
        check_triggers([])

    def test_unnamed_triggers_may_repeat(self):
        triggers = [
            ScaleTrigger(type="rabbitmq", metadata={"queueName": "a"}),
            ScaleTrigger(type="rabbitmq", metadata={"queueName": "b"}),
        ]
        check_triggers(triggers)

    def test_duplicate_names_rejected(self):
        triggers = [
            ScaleTrigger(type="rabbitmq", name="queue"),
            ScaleTrigger(type="kafka", name="queue"),
        ]

        with pytest.raises(TriggerValidationError) as exc_info:
            check_triggers(triggers)

        assert str(exc_info.value) == (
            'triggerName "queue" is defined multiple times in the '
            "ScaledObject/ScaledJob, but it must be unique"
        )
        assert exc_info.value.trigger_index == 1

    @pytest.mark.parametrize("trigger_type", ["cpu", "memory", "cron"])
    def test_cached_metrics_rejected_for_unsupported_scalers(self, trigger_type):
        triggers = [ScaleTrigger(type=trigger_type, use_cached_metrics=True)]

        with pytest.raises(TriggerValidationError) as exc_info:
            check_triggers(triggers)

        assert str(exc_info.value) == (
            f'property "useCachedMetrics" is not supported for "{trigger_type}" scaler'
        )

    def test_cached_metrics_allowed_for_external_scalers(self):
        check_triggers([ScaleTrigger(type="prometheus", useCachedMetrics=True)])

    @pytest.mark.parametrize("trigger_type", ["", "   "])
    def test_blank_type_rejected(self, trigger_type):
        triggers = [ScaleTrigger(type="rabbitmq"), ScaleTrigger(type=trigger_type)]

        with pytest.raises(TriggerValidationError) as exc_info:
            check_triggers(triggers)

        assert str(exc_info.value) == "trigger type must not be empty"
        assert exc_info.value.trigger_index == 1


class TestScaleTriggersValidator:
    """Tests for ScaleTriggersValidator."""

    def test_satisfies_protocol(self):
        assert isinstance(ScaleTriggersValidator(MagicMock()), TriggerValidator)

    def test_valid_scaled_job_records_nothing(self):
        collector = MagicMock()
        validator = ScaleTriggersValidator(collector)

        validator.validate(ScaledJob.model_validate(make_scaledjob()), "create", False)

        collector.record_validation_error.assert_not_called()

    def test_failure_records_metric_and_reraises(self):
        collector = MagicMock()
        validator = ScaleTriggersValidator(collector)
        body = make_scaledjob(triggers=[{"type": "cron", "useCachedMetrics": True}])

        with pytest.raises(TriggerValidationError):
            validator.validate(ScaledJob.model_validate(body), "update", True)

        collector.record_validation_error.assert_called_once_with(
            "workers", "update", "incorrect-triggers"
        )

    def test_failure_is_logged_to_injected_logger(self):
        logger = MagicMock(spec=logging.Logger)
        validator = ScaleTriggersValidator(MagicMock(), logger)
        body = make_scaledjob(triggers=[{"type": ""}])

        with pytest.raises(TriggerValidationError):
            validator.validate(ScaledJob.model_validate(body), "create", False)

        logger.debug.assert_called_once()
        assert logger.debug.call_args.kwargs["extra"]["operation"] == "create"
