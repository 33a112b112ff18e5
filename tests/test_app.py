"""
Tests for application wiring: root, health, error envelope and settings.
"""
import pytest
from pydantic import ValidationError

from app import main
from app.core.config import DEFAULT_JWT_SECRET, EnvironmentMode, Settings


class TestRootAndHealth:

    async def test_root(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json()["health"] == "/api/health"

    async def test_health(self, client, listener):
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "operational"
        assert data["database"] == "healthy"
        assert data["assistant"] == "mock: healthy"
        assert data["realtime_subscribers"] == 1


class TestErrorEnvelope:

    async def test_unknown_route(self, client):
        response = await client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Not Found"}

    async def test_malformed_json_is_bad_request(self, client):
        response = await client.post(
            "/api/auth/login",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["success"] is False

    async def test_non_integer_path_id(self, client):
        response = await client.get("/api/menus/abc")
        assert response.status_code == 400


class TestSettings:

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.env_mode == EnvironmentMode.DEVELOPMENT
        assert settings.api_port == 3000
        assert settings.student_discount_rate == 0.20
        assert settings.guest_name == "Guest"

    def test_env_mode_is_case_insensitive(self):
        assert Settings(_env_file=None, env_mode="PRODUCTION").is_production

    def test_invalid_env_mode(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, env_mode="qa")

    def test_discount_rate_bounds(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, student_discount_rate=1.5)

    def test_cors_origins_list(self):
        settings = Settings(_env_file=None, cors_origin="http://a.test, http://b.test,")
        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_production_config_reports_missing_secrets(self):
        settings = Settings(_env_file=None, env_mode="production", jwt_secret=DEFAULT_JWT_SECRET)
        assert settings.validate_production_config() == ["JWT_SECRET", "GEMINI_API_KEY"]

    def test_development_needs_nothing(self):
        assert Settings(_env_file=None).validate_production_config() == []

    @pytest.mark.parametrize(
        "mode, real",
        [("development", False), ("staging", True), ("production", True)],
    )
    def test_real_services_outside_development(self, mode, real):
        settings = Settings(_env_file=None, env_mode=mode)
        assert settings.use_real_services is real
        assert settings.is_staging is (mode == "staging")


class TestRunner:

    def test_run_serves_configured_address(self, monkeypatch):
        calls = []
        settings = Settings(_env_file=None, api_host="127.0.0.1", api_port=8123, env_mode="staging")
        monkeypatch.setattr(main, "get_settings", lambda: settings)
        monkeypatch.setattr(main.uvicorn, "run", lambda target, **kwargs: calls.append((target, kwargs)))

        main.run()

        assert calls == [("app.main:app", {"host": "127.0.0.1", "port": 8123, "reload": False})]
