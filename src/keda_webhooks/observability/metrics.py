"""
Prometheus metrics for the ScaledJob admission webhook.

This module provides metrics collection for admission decisions and trigger
validation failures, plus a small HTTP server exposing them.
"""

import logging
from typing import Any

# aiohttp is provided transitively by Kopf (required for its webhook server).
from aiohttp.web import (
    Application,
    AppRunner,
    Request,
    Response,
    TCPSite,
)
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

logger = logging.getLogger(__name__)

# Global metrics registry
_metrics_registry: CollectorRegistry | None = None

# Metrics definitions
VALIDATION_TOTAL = Counter(
    "keda_webhook_scaled_job_validation_total",
    "Total number of ScaledJob admission decisions",
    ["action", "result"],
    registry=None,  # Will be set during initialization
)

VALIDATION_ERRORS = Counter(
    "keda_webhook_scaled_job_validation_errors_total",
    "Total number of ScaledJob validation errors",
    ["namespace", "action", "reason"],
    registry=None,
)

VALIDATION_DURATION = Histogram(
    "keda_webhook_scaled_job_validation_duration_seconds",
    "Time spent deciding ScaledJob admission requests",
    ["action"],
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5],
    registry=None,
)


def get_metrics_registry() -> CollectorRegistry:
    """Get or create the global metrics registry."""
    global _metrics_registry

    if _metrics_registry is None:
        _metrics_registry = CollectorRegistry()

        for metric in [VALIDATION_TOTAL, VALIDATION_ERRORS, VALIDATION_DURATION]:
            _metrics_registry.register(metric)

    return _metrics_registry


class MetricsCollector:
    """Collects and manages metrics for the admission webhook."""

    def __init__(self):
        """Initialize metrics collector."""
        self.registry = get_metrics_registry()

    def record_validation(self, action: str, result: str, duration: float) -> None:
        """
        Record an admission decision.

        Args:
            action: Operation tag (create, update, delete)
            result: allowed or denied
            duration: Time spent deciding, in seconds
        """
        VALIDATION_TOTAL.labels(action=action, result=result).inc()
        VALIDATION_DURATION.labels(action=action).observe(duration)

    def record_validation_error(
        self, namespace: str | None, action: str, reason: str
    ) -> None:
        """
        Record a validation error.

        Args:
            namespace: Namespace of the rejected resource
            action: Operation tag (create, update)
            reason: Short machine readable reason
        """
        VALIDATION_ERRORS.labels(
            namespace=namespace or "", action=action, reason=reason
        ).inc()


class MetricsServer:
    """HTTP server for exposing Prometheus metrics."""

    def __init__(self, port: int = 8080, host: str = "0.0.0.0"):
        """
        Initialize metrics server.

        Args:
            port: Port to serve metrics on
            host: Host interface to bind to
        """
        self.port = port
        self.host = host
        self.app = Application()
        self.runner: AppRunner | None = None
        self.site: TCPSite | None = None
        self._setup_routes()

    def _setup_routes(self) -> None:
        """Set up HTTP routes for the metrics server."""
        self.app.router.add_get("/metrics", self._metrics_handler)
        self.app.router.add_get("/healthz", self._healthz_handler)

    async def _metrics_handler(self, request: Request) -> Response:
        """Handle /metrics endpoint for Prometheus scraping."""
        try:
            registry = get_metrics_registry()
            metrics_data = generate_latest(registry)
            return Response(body=metrics_data, content_type=CONTENT_TYPE_LATEST)
        except Exception as e:
            logger.error(f"Failed to generate metrics: {e}")
            return Response(
                text=f"Error generating metrics: {type(e).__name__}. Check logs for details.",
                status=500,
            )

    async def _healthz_handler(self, request: Request) -> Response:
        """Handle /healthz endpoint for Kubernetes compatibility."""
        return Response(text="ok")

    async def start(self) -> None:
        """Start the metrics server."""
        try:
            self.runner = AppRunner(self.app)
            await self.runner.setup()

            self.site = TCPSite(self.runner, self.host, self.port)
            await self.site.start()

            logger.info(f"Metrics available at http://{self.host}:{self.port}/metrics")
        except Exception as e:
            logger.error(f"Failed to start metrics server: {e}")
            raise

    async def stop(self) -> None:
        """Stop the metrics server."""
        try:
            if self.site:
                await self.site.stop()
                self.site = None

            if self.runner:
                await self.runner.cleanup()
                self.runner = None

            logger.info("Metrics server stopped")
        except Exception as e:
            logger.error(f"Error stopping metrics server: {e}")

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.stop()


# Global metrics collector instance
metrics_collector = MetricsCollector()
