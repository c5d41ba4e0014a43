"""
Constants used throughout the ScaledJob admission webhook.

This module defines all constant values used by the webhook including:
- Custom resource coordinates for handler registration
- Operation tags passed to trigger validation
- Metric label values
"""

# Custom resource coordinates
KEDA_GROUP = "keda.sh"
KEDA_VERSION = "v1alpha1"
SCALEDJOB_PLURAL = "scaledjobs"
SCALEDJOB_KIND = "ScaledJob"
SCALEDJOB_API_VERSION = f"{KEDA_GROUP}/{KEDA_VERSION}"
RESOURCE_TYPE_SCALEDJOB = "scaledjob"

# Operation tags understood by trigger validators
OPERATION_CREATE = "create"
OPERATION_UPDATE = "update"

# Triggers for which metric caching is meaningless
CACHED_METRICS_UNSUPPORTED_TRIGGERS = frozenset({"cpu", "memory", "cron"})

# Validation results recorded as metric labels
VALIDATION_RESULT_ALLOWED = "allowed"
VALIDATION_RESULT_DENIED = "denied"

# Reason label for trigger validation errors
VALIDATION_ERROR_INCORRECT_TRIGGERS = "incorrect-triggers"

# Default locations for webhook serving certificates
DEFAULT_WEBHOOK_CERT_DIR = "/tmp/k8s-webhook-server/serving-certs"
DEFAULT_WEBHOOK_CERT_FILE = "tls.crt"
DEFAULT_WEBHOOK_KEY_FILE = "tls.key"

# Error message templates
ERROR_CACHED_METRICS_UNSUPPORTED = (
    'property "useCachedMetrics" is not supported for "{}" scaler'
)
ERROR_DUPLICATE_TRIGGER_NAME = (
    'triggerName "{}" is defined multiple times in the ScaledObject/ScaledJob, '
    "but it must be unique"
)
ERROR_MISSING_DRY_RUN = "admission request does not carry a dryRun flag"
ERROR_UNDECODABLE_OBJECT = "admission object is not a valid ScaledJob"
ERROR_EMPTY_TRIGGER_TYPE = "trigger type must not be empty"
