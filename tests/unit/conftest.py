"""Shared pytest fixtures for ScaledJob admission tests."""

from unittest.mock import MagicMock

import pytest

from keda_webhooks.models.scaledjob import ScaledJob
from tests.fixtures.scaledjob_resources import make_scaledjob
from tests.fixtures.trigger_validators import RecordingTriggerValidator


@pytest.fixture
def trigger_validator():
    """Validator stub that accepts everything."""
    return RecordingTriggerValidator()


@pytest.fixture
def failing_trigger_validator():
    """Validator stub that rejects everything."""
    return RecordingTriggerValidator(error='trigger "orders-queue" is misconfigured')


@pytest.fixture
def collector():
    """Metrics collector mock so tests never touch global counters."""
    return MagicMock()


@pytest.fixture
def scaled_job():
    """A decoded ScaledJob carrying the KEDA finalizer."""
    return ScaledJob.model_validate(make_scaledjob())
