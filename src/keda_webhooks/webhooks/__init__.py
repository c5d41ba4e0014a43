"""
Admission webhooks for KEDA ScaledJob resources.

This module provides the validating admission webhook for ScaledJob custom
resources. The webhook validates resources before they are accepted by
Kubernetes, providing immediate feedback and preventing invalid trigger
configurations from being stored.

Webhooks are served by Kopf's built-in HTTPS server.
"""
