"""
KEDA Webhooks - Admission validation for KEDA ScaledJob resources.

This package provides a validating admission webhook served by Kopf with:
- Trigger configuration validation on create and update
- Finalizer-removal exemption so controller cleanup is never blocked
- Structured logging and Prometheus metrics for every decision
"""

__version__ = "0.1.0"
