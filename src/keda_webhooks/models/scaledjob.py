"""
Pydantic models for ScaledJob resources.

This module defines type-safe data models for the ScaledJob custom resource
as it arrives in admission requests. Only the fields the webhook reasons about
are typed; everything else is preserved as extra data so that comparing two
specifications stays sensitive to every field.
"""

import json
from typing import Any

from pydantic import BaseModel, Field

from keda_webhooks.constants import SCALEDJOB_API_VERSION, SCALEDJOB_KIND


class AuthenticationRef(BaseModel):
    """Reference to a TriggerAuthentication or ClusterTriggerAuthentication."""

    model_config = {"populate_by_name": True, "extra": "allow"}

    name: str = Field(..., description="Name of the authentication resource")
    kind: str | None = Field(
        None, description="TriggerAuthentication or ClusterTriggerAuthentication"
    )


class ScaleTrigger(BaseModel):
    """
    A single scaling trigger.

    Scaler-specific settings live in ``metadata`` and are opaque to the
    webhook.
    """

    model_config = {"populate_by_name": True, "extra": "allow"}

    type: str = Field(..., description="Scaler type (e.g. kafka, cron, cpu)")
    name: str | None = Field(None, description="Optional unique trigger name")
    metadata: dict[str, str] = Field(
        default_factory=dict, description="Scaler-specific configuration"
    )
    authentication_ref: AuthenticationRef | None = Field(
        None, alias="authenticationRef", description="Trigger authentication"
    )
    use_cached_metrics: bool = Field(
        False,
        alias="useCachedMetrics",
        description="Serve metric values from the polling cache",
    )
    metric_type: str | None = Field(
        None, alias="metricType", description="AverageValue, Value or Utilization"
    )


class ScaledJobSpec(BaseModel):
    """Specification of a ScaledJob."""

    model_config = {"populate_by_name": True, "extra": "allow"}

    job_target_ref: dict[str, Any] | None = Field(
        None, alias="jobTargetRef", description="Job template to create per scale"
    )
    polling_interval: int | None = Field(
        None, alias="pollingInterval", description="Seconds between trigger polls"
    )
    successful_jobs_history_limit: int | None = Field(
        None,
        alias="successfulJobsHistoryLimit",
        description="Number of finished jobs to keep",
    )
    failed_jobs_history_limit: int | None = Field(
        None,
        alias="failedJobsHistoryLimit",
        description="Number of failed jobs to keep",
    )
    env_source_container_name: str | None = Field(
        None,
        alias="envSourceContainerName",
        description="Container whose environment feeds trigger metadata",
    )
    min_replica_count: int | None = Field(
        None, alias="minReplicaCount", description="Minimum number of jobs"
    )
    max_replica_count: int | None = Field(
        None, alias="maxReplicaCount", description="Maximum number of jobs"
    )
    rollout: dict[str, Any] | None = Field(
        None, description="Rollout behaviour for running jobs"
    )
    rollout_strategy: str | None = Field(
        None, alias="rolloutStrategy", description="Deprecated rollout strategy"
    )
    scaling_strategy: dict[str, Any] | None = Field(
        None, alias="scalingStrategy", description="Scaling strategy settings"
    )
    triggers: list[ScaleTrigger] = Field(
        default_factory=list, description="Ordered list of scaling triggers"
    )

    def canonical_json(self) -> str:
        """
        Serialize the specification to a canonical JSON string.

        Keys are sorted so that two specifications with the same content
        always produce the same string regardless of the order the fields
        arrived in.

        Returns:
            Canonical JSON representation of the specification
        """
        return json.dumps(
            self.model_dump(mode="json", by_alias=True), sort_keys=True
        )


class ObjectMeta(BaseModel):
    """Kubernetes object metadata, reduced to what admission needs."""

    model_config = {"populate_by_name": True, "extra": "allow"}

    name: str | None = Field(None, description="Resource name")
    namespace: str | None = Field(None, description="Resource namespace")
    finalizers: list[str] = Field(
        default_factory=list, description="Finalizers blocking deletion"
    )
    labels: dict[str, str] = Field(default_factory=dict, description="Labels")
    annotations: dict[str, str] = Field(
        default_factory=dict, description="Annotations"
    )
    generation: int | None = Field(None, description="Spec generation")
    resource_version: str | None = Field(
        None, alias="resourceVersion", description="Resource version"
    )
    uid: str | None = Field(None, description="Unique identifier")


class ScaledJob(BaseModel):
    """
    Complete ScaledJob custom resource model.

    This represents the full Kubernetes custom resource including
    metadata, spec, and status sections.
    """

    model_config = {"populate_by_name": True, "extra": "allow"}

    api_version: str = Field(SCALEDJOB_API_VERSION, alias="apiVersion")
    kind: str = Field(SCALEDJOB_KIND)
    metadata: ObjectMeta = Field(
        default_factory=ObjectMeta, description="Kubernetes metadata"
    )
    spec: ScaledJobSpec = Field(..., description="ScaledJob specification")
    status: dict[str, Any] | None = Field(
        None, description="ScaledJob status (managed by the KEDA operator)"
    )

    @property
    def name(self) -> str | None:
        return self.metadata.name

    @property
    def namespace(self) -> str | None:
        return self.metadata.namespace
