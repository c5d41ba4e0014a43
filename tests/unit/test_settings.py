"""Unit tests for environment-driven settings."""

from keda_webhooks.settings import Settings


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch):
        for var in ("WEBHOOK_PORT", "WATCH_NAMESPACES", "ENABLE_WEBHOOKS"):
            monkeypatch.delenv(var, raising=False)

        settings = Settings(_env_file=None)

        assert settings.webhook_port == 9443
        assert settings.enable_webhooks is True
        assert settings.watched_namespaces is None

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("WEBHOOK_PORT", "10250")
        monkeypatch.setenv("JSON_LOGS", "false")
        monkeypatch.setenv("WEBHOOK_CERT_DIR", "/etc/webhook/certs")

        settings = Settings(_env_file=None)

        assert settings.webhook_port == 10250
        assert settings.json_logs is False
        assert settings.webhook_cert_dir == "/etc/webhook/certs"

    def test_watched_namespaces_parsing(self, monkeypatch):
        monkeypatch.setenv("WATCH_NAMESPACES", "workers, batch ,,")

        settings = Settings(_env_file=None)

        assert settings.watched_namespaces == ["workers", "batch"]
