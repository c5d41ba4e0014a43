"""
Admission request and decision models.

This module defines the values that flow between the admission server, the
dispatcher and the decision engine:
- The admission operations the webhook handles
- The request fields extracted from the admission context
- The decision returned for every request
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any

import pydantic
from pydantic import BaseModel, Field

from keda_webhooks.constants import ERROR_MISSING_DRY_RUN, ERROR_UNDECODABLE_OBJECT
from keda_webhooks.errors import AdmissionContextError
from keda_webhooks.models.scaledjob import ScaledJob


class AdmissionOperation(str, Enum):
    """Admission phases handled by the webhook."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class AdmissionRequest(BaseModel):
    """Fields of the admission context the dispatcher relies on."""

    model_config = {"populate_by_name": True, "frozen": True}

    dry_run: bool = Field(
        ...,
        alias="dryRun",
        strict=True,
        description="Evaluate without persisting side effects",
    )
    name: str | None = Field(None, description="Name of the resource")
    namespace: str | None = Field(None, description="Namespace of the resource")
    uid: str | None = Field(None, description="Admission request UID")


class AdmissionDecision(BaseModel):
    """Outcome of evaluating one admission request."""

    model_config = {"frozen": True}

    allowed: bool = Field(..., description="Whether the request is admitted")
    reason: str | None = Field(None, description="Rejection reason when denied")
    warnings: tuple[str, ...] = Field(
        default_factory=tuple, description="Non-blocking advisories"
    )

    @classmethod
    def allow(cls, warnings: tuple[str, ...] | list[str] = ()) -> "AdmissionDecision":
        return cls(allowed=True, warnings=tuple(warnings))

    @classmethod
    def deny(cls, reason: str) -> "AdmissionDecision":
        return cls(allowed=False, reason=reason)


def _to_plain(value: Any) -> Any:
    """Recursively convert mapping views (e.g. kopf bodies) into plain dicts."""
    if isinstance(value, Mapping):
        return {key: _to_plain(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [_to_plain(item) for item in value]
    return value


def admission_request_from_context(context: Mapping[str, Any]) -> AdmissionRequest:
    """
    Extract the admission request fields from an admission context.

    Accepts either kopf handler keyword arguments (``dryrun``) or the
    ``request`` section of a raw AdmissionReview (``dryRun``), optionally
    still wrapped in the review itself.

    Args:
        context: Admission context mapping

    Returns:
        Parsed admission request

    Raises:
        AdmissionContextError: If the context is not a mapping or does not
            carry a boolean dry-run flag
    """
    if not isinstance(context, Mapping):
        raise AdmissionContextError(
            f"admission context must be a mapping, got {type(context).__name__}"
        )

    payload = context.get("request", context)
    if not isinstance(payload, Mapping):
        raise AdmissionContextError("admission context 'request' must be a mapping")

    dry_run = payload.get("dryRun", payload.get("dryrun"))
    if dry_run is None:
        raise AdmissionContextError(ERROR_MISSING_DRY_RUN)

    data = {
        "dryRun": dry_run,
        "name": payload.get("name"),
        "namespace": payload.get("namespace"),
        "uid": payload.get("uid"),
    }
    try:
        return AdmissionRequest.model_validate(data)
    except pydantic.ValidationError as e:
        raise AdmissionContextError(f"Invalid admission context: {e}", cause=e) from e


def decode_scaled_job(obj: Any) -> ScaledJob:
    """
    Decode an opaque admission object into a ScaledJob.

    Args:
        obj: A ScaledJob instance or a mapping holding the raw resource

    Returns:
        The decoded ScaledJob

    Raises:
        AdmissionContextError: If the object cannot be decoded
    """
    if isinstance(obj, ScaledJob):
        return obj
    if not isinstance(obj, Mapping):
        raise AdmissionContextError(
            f"{ERROR_UNDECODABLE_OBJECT}: got {type(obj).__name__}"
        )
    try:
        return ScaledJob.model_validate(_to_plain(obj))
    except pydantic.ValidationError as e:
        raise AdmissionContextError(f"{ERROR_UNDECODABLE_OBJECT}: {e}", cause=e) from e
