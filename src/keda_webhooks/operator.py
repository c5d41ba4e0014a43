#!/usr/bin/env python3
"""
KEDA Webhooks - Main entry point for the Kopf-based admission webhook.

Serves the validating admission webhook for ScaledJob resources through
Kopf's admission server, with Prometheus metrics on a separate port.

Usage:
    python -m keda_webhooks.operator
    # Or via the console script:
    keda-webhooks

Environment Variables:
    WATCH_NAMESPACES: Comma-separated list of namespaces to watch
    LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
    WEBHOOK_PORT: Port of the admission webhook server
    WEBHOOK_CERT_DIR: Directory holding tls.crt and tls.key
"""

import logging
import sys

import kopf

from keda_webhooks.constants import DEFAULT_WEBHOOK_CERT_FILE, DEFAULT_WEBHOOK_KEY_FILE
from keda_webhooks.observability.logging import setup_structured_logging
from keda_webhooks.observability.metrics import MetricsServer
from keda_webhooks.settings import settings as operator_settings

# Kopf refuses to start with admission handlers registered but no admission
# server configured, so the webhook module is only imported when enabled.
if operator_settings.enable_webhooks:
    from keda_webhooks.webhooks import scaledjob as scaledjob_webhook  # noqa: F401

# Global reference to metrics server for cleanup
_global_metrics_server: MetricsServer | None = None


def configure_logging() -> None:
    """Configure structured logging based on operator_settings."""
    setup_structured_logging(
        log_level=operator_settings.log_level.upper(),
        enable_json_formatting=operator_settings.json_logs,
        correlation_id_enabled=operator_settings.correlation_ids,
        webhook_log_level=operator_settings.webhook_log_level,
    )


def build_operator_settings() -> kopf.OperatorSettings:
    """
    Build Kopf settings with the admission webhook server.

    Webhook configurations are managed outside the process (Helm or
    cert-manager), so Kopf's auto-management stays disabled.

    Returns:
        Kopf operator settings
    """
    settings_obj = kopf.OperatorSettings()
    settings_obj.admission.managed = None

    if operator_settings.enable_webhooks:
        cert_dir = operator_settings.webhook_cert_dir
        settings_obj.admission.server = kopf.WebhookServer(
            port=operator_settings.webhook_port,
            host=operator_settings.webhook_host,
            certfile=f"{cert_dir}/{DEFAULT_WEBHOOK_CERT_FILE}",
            pkeyfile=f"{cert_dir}/{DEFAULT_WEBHOOK_KEY_FILE}",
        )
        logging.info(
            f"Admission webhooks ENABLED on port {operator_settings.webhook_port} "
            f"using certificates from {cert_dir}"
        )
    else:
        settings_obj.admission.server = None
        logging.info("Admission webhooks DISABLED")

    return settings_obj


@kopf.on.startup()
async def startup_handler(settings: kopf.OperatorSettings, **_) -> None:
    """Start the metrics server once Kopf is up."""
    global _global_metrics_server

    logging.info("Starting KEDA admission webhooks...")
    settings.watching.reconnect_backoff = 1.0

    try:
        metrics_server = MetricsServer(
            port=operator_settings.metrics_port, host=operator_settings.metrics_host
        )
        await metrics_server.start()
        _global_metrics_server = metrics_server
    except Exception as e:
        logging.error(f"Failed to start metrics server: {e}")
        # Admission must keep working without metrics
        logging.warning("Continuing without metrics server")


@kopf.on.cleanup()
async def cleanup_handler(**_) -> None:
    """Stop the metrics server on shutdown."""
    global _global_metrics_server

    if _global_metrics_server is not None:
        await _global_metrics_server.stop()
        _global_metrics_server = None
    logging.info("KEDA admission webhooks stopped")


def main() -> None:
    """
    Main entry point.

    This function:
    1. Configures logging
    2. Configures the admission webhook server (must be before kopf.run())
    3. Runs Kopf for the configured namespaces
    """
    configure_logging()
    settings_obj = build_operator_settings()
    watched_namespaces = operator_settings.watched_namespaces

    try:
        if watched_namespaces:
            kopf.run(namespaces=watched_namespaces, settings=settings_obj)
        else:
            kopf.run(clusterwide=True, settings=settings_obj)
    except KeyboardInterrupt:
        logging.info("Received shutdown signal")
        sys.exit(0)
    except Exception as e:
        logging.error(f"Webhook server failed with error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
