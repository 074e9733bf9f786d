"""Test settings and optional tracing setup."""

from unittest.mock import MagicMock, patch

from app.algorithms.state import DashboardState
from app.utils import observability
from app.utils.config import Settings


class TestSettings:
    """Test environment-driven configuration."""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.static_dir == "dist"
        assert settings.anonymous_worker_name == "Anonymous Worker"
        assert settings.unknown_worker_id == "Unknown"
        assert settings.otel_enabled is False

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("PORT", "3001")
        monkeypatch.setenv("ANONYMOUS_WORKER_NAME", "Nameless")

        settings = Settings(_env_file=None)

        assert settings.port == 3001
        assert settings.anonymous_worker_name == "Nameless"

    def test_cors_origins_from_comma_list(self, monkeypatch):
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.example, https://b.example")

        settings = Settings(_env_file=None)

        assert settings.cors_allow_origins == ["https://a.example", "https://b.example"]

    def test_cors_origins_from_json_list(self, monkeypatch):
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", '["https://a.example"]')

        assert Settings(_env_file=None).cors_allow_origins == ["https://a.example"]

    def test_custom_defaults_reach_the_store(self, settings):
        custom = DashboardState(settings.model_copy(update={"unknown_worker_id": "n/a"}))
        assert custom.store.add_comment("Alice", "hi").worker_id == "n/a"


class TestTracing:
    """Test OpenTelemetry wiring."""

    def test_disabled_does_nothing(self):
        with patch.object(observability, "FastAPIInstrumentor") as instrumentor:
            assert observability.setup_tracing(MagicMock(), Settings(_env_file=None)) is False
            instrumentor.instrument_app.assert_not_called()

    def test_enabled_instruments_once(self, monkeypatch):
        monkeypatch.setattr(observability, "_TRACING_INITIALIZED", False)
        settings = Settings(_env_file=None, otel_enabled=True)

        with patch.object(observability, "FastAPIInstrumentor") as instrumentor, patch.object(
            observability, "OTLPSpanExporter"
        ), patch.object(observability, "BatchSpanProcessor"), patch.object(observability, "trace"):
            app = MagicMock()
            assert observability.setup_tracing(app, settings) is True
            assert observability.setup_tracing(app, settings) is True

            instrumentor.instrument_app.assert_called_once()
