"""
Observability utilities for the ScaledJob admission webhook.

This module provides metrics and structured logging capabilities for
production monitoring and troubleshooting.
"""

from .logging import setup_structured_logging
from .metrics import MetricsCollector, MetricsServer, get_metrics_registry

__all__ = [
    "MetricsCollector",
    "MetricsServer",
    "get_metrics_registry",
    "setup_structured_logging",
]
