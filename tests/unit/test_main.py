"""
Unit tests for backend/main.py
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from unittest.mock import patch

from api.deps import get_settings
from backend.main import create_app, _init_sentry, _configure_cors, _log_feature_flags
from backend.settings import Settings


@pytest.mark.unit
class TestCreateApp:
    """Test the create_app() factory function."""

    def test_create_app_returns_fastapi_instance(self):
        settings = Settings(environment="test", _env_file=None)
        app = create_app(settings=settings)
        assert isinstance(app, FastAPI)

    def test_create_app_uses_default_settings_when_none_provided(self):
        with patch("backend.main.get_settings") as mock_get_settings:
            mock_get_settings.return_value = Settings(environment="test", _env_file=None)

            app = create_app(settings=None)

            mock_get_settings.assert_called_once()
            assert isinstance(app, FastAPI)

    def test_create_app_configures_app_metadata(self):
        app = create_app(settings=Settings(environment="test", _env_file=None))
        assert app.title == "FitTrack Cascade API"
        assert app.version == "1.0.0"

    def test_routes_registered(self):
        app = create_app(settings=Settings(environment="test", _env_file=None))
        route_paths = {getattr(route, "path", None) for route in app.routes} - {None}

        assert "/health" in route_paths
        assert "/programs/{program_id}/weeks/{week_id}/duplicate" in route_paths
        assert "/programs/{program_id}/cascade-counts" in route_paths
        assert "/programs/{program_id}/reorder" in route_paths


@pytest.mark.unit
class TestHealthEndpoint:
    def test_health(self):
        settings = Settings(environment="test", document_store_backend="supabase", _env_file=None)
        app = create_app(settings=settings)
        app.dependency_overrides[get_settings] = lambda: settings

        response = TestClient(app).get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "store": "supabase"}


@pytest.mark.unit
class TestInitSentry:
    """Test Sentry initialization."""

    def test_init_sentry_skipped_when_no_dsn(self):
        settings = Settings(sentry_dsn=None, _env_file=None)

        with patch("backend.main.sentry_sdk.init") as mock_init:
            _init_sentry(settings)
            mock_init.assert_not_called()

    def test_init_sentry_called_when_dsn_provided(self):
        settings = Settings(
            sentry_dsn="https://test@sentry.io/123",
            environment="test",
            _env_file=None
        )

        with patch("backend.main.sentry_sdk.init") as mock_init:
            _init_sentry(settings)
            mock_init.assert_called_once_with(
                dsn="https://test@sentry.io/123",
                environment="test",
                traces_sample_rate=0.1,
                profiles_sample_rate=0.1,
            )


@pytest.mark.unit
class TestConfigureCors:
    """Test CORS configuration."""

    def test_configure_cors_adds_middleware(self):
        app = FastAPI()
        initial_middleware_count = len(app.user_middleware)

        _configure_cors(app, Settings(_env_file=None))

        assert len(app.user_middleware) == initial_middleware_count + 1

    def test_extra_origins_allowed(self):
        app = FastAPI()
        _configure_cors(
            app, Settings(cors_allowed_origins="https://fittrack.example", _env_file=None)
        )
        [middleware] = app.user_middleware
        assert "https://fittrack.example" in middleware.kwargs["allow_origins"]


@pytest.mark.unit
class TestLogFeatureFlags:
    """Test feature flag logging."""

    def test_logs_backend(self, caplog):
        settings = Settings(document_store_backend="firestore", _env_file=None)

        with caplog.at_level("INFO"):
            _log_feature_flags(settings)

        assert "Document store: firestore" in caplog.text

    def test_logs_owner_flags(self, caplog):
        settings = Settings(
            require_owner_field=True, verify_owner_on_delete=True, _env_file=None
        )

        with caplog.at_level("INFO"):
            _log_feature_flags(settings)

        assert "REQUIRE_OWNER_FIELD is active" in caplog.text
        assert "VERIFY_OWNER_ON_DELETE is active" in caplog.text
