"""
Unit tests for the HTTP surface.

Dependencies are overridden with a fake generation client and explicit
settings, so requests exercise routing, auth, and error mapping without
any external service.
"""

import json

import pytest
from fastapi.testclient import TestClient

from practice_analyzer.api.dependencies import get_generation_client
from practice_analyzer.config.settings import Settings, get_settings
from practice_analyzer.core.analysis.errors import (
    GENERIC_FAILURE_MESSAGE,
    INVALID_INPUT_MESSAGE,
)
from practice_analyzer.core.analysis.schema import SWIM_ANALYSIS_SCHEMA
from practice_analyzer.infrastructure.anthropic.client import AnthropicStructuredClient
from practice_analyzer.infrastructure.gemini.client import GeminiStructuredClient
from practice_analyzer.main import INTERNAL_ERROR_MESSAGE, app


API_KEY = "test-key"
HEADERS = {"X-API-Key": API_KEY}
ANALYZE_URL = "/api/v1/practice/analyze"
SINGLE_PRACTICE_LOG = "Monday: 400 warm up, 10x100 free on 1:30, 200 cool down"


def make_settings(**overrides) -> Settings:
    values = {
        "api_keys": API_KEY,
        "anthropic_api_key": "sk-test",
        "max_practice_log_chars": 1000,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def http(settings, fake_client):
    """TestClient with settings and generation client overridden."""
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_generation_client] = lambda: fake_client
    yield TestClient(app)
    app.dependency_overrides.clear()


def use_client(client) -> None:
    app.dependency_overrides[get_generation_client] = lambda: client


# ---------------------------------------------------------------------------
# Analysis Endpoint Tests
# ---------------------------------------------------------------------------

class TestAnalyzeEndpoint:

    def test_returns_camel_case_analysis(self, http, full_payload):
        response = http.post(ANALYZE_URL, json={"practiceLog": SINGLE_PRACTICE_LOG}, headers=HEADERS)

        assert response.status_code == 200
        body = response.json()
        assert body["requestId"]
        assert body["analysis"] == full_payload

    def test_absent_optional_sections_are_omitted(self, http, client_factory, minimal_payload):
        use_client(client_factory(payload=json.dumps(minimal_payload)))

        response = http.post(ANALYZE_URL, json={"practiceLog": SINGLE_PRACTICE_LOG}, headers=HEADERS)

        assert response.status_code == 200
        analysis = response.json()["analysis"]
        assert analysis == minimal_payload
        assert "competitionAdvice" not in analysis

    def test_passes_competition_context_through(self, http, fake_client):
        http.post(
            ANALYZE_URL,
            json={
                "practiceLog": SINGLE_PRACTICE_LOG,
                "isCompetitionWeek": True,
                "competitionEvents": "50 Free, 200 IM",
                "weaknesses": "slow turns",
            },
            headers=HEADERS,
        )

        call = fake_client.calls[0]
        assert "50 Free, 200 IM" in call["system_instruction"]
        assert "slow turns" in call["user_prompt"]

    def test_blank_log_returns_prompt_message_without_calling_service(self, http, fake_client):
        response = http.post(ANALYZE_URL, json={"practiceLog": "   "}, headers=HEADERS)

        assert response.status_code == 422
        assert response.json()["error"] == INVALID_INPUT_MESSAGE
        assert fake_client.calls == []

    def test_over_long_log_is_rejected(self, http, fake_client):
        response = http.post(ANALYZE_URL, json={"practiceLog": "x" * 1001}, headers=HEADERS)

        assert response.status_code == 422
        assert "too long" in response.json()["error"]
        assert fake_client.calls == []

    def test_service_failure_returns_generic_message(self, http, failing_client):
        use_client(failing_client)

        response = http.post(ANALYZE_URL, json={"practiceLog": SINGLE_PRACTICE_LOG}, headers=HEADERS)

        assert response.status_code == 502
        assert response.json()["error"] == GENERIC_FAILURE_MESSAGE

    def test_malformed_response_returns_same_generic_message(self, http, client_factory):
        use_client(client_factory(payload="definitely not json"))

        response = http.post(ANALYZE_URL, json={"practiceLog": SINGLE_PRACTICE_LOG}, headers=HEADERS)

        assert response.status_code == 502
        assert response.json()["error"] == GENERIC_FAILURE_MESSAGE

    def test_each_request_gets_its_own_id(self, http):
        first = http.post(ANALYZE_URL, json={"practiceLog": SINGLE_PRACTICE_LOG}, headers=HEADERS)
        second = http.post(ANALYZE_URL, json={"practiceLog": SINGLE_PRACTICE_LOG}, headers=HEADERS)

        assert first.json()["requestId"] != second.json()["requestId"]

    def test_missing_api_key_is_forbidden(self, http, fake_client):
        response = http.post(ANALYZE_URL, json={"practiceLog": SINGLE_PRACTICE_LOG})

        assert response.status_code == 403
        assert fake_client.calls == []

    def test_wrong_api_key_is_forbidden(self, http):
        response = http.post(
            ANALYZE_URL,
            json={"practiceLog": SINGLE_PRACTICE_LOG},
            headers={"X-API-Key": "nope"},
        )
        assert response.status_code == 403


class TestGenerationClientDependency:

    def test_builds_configured_anthropic_client(self):
        settings = make_settings(anthropic_max_tokens=2048, request_timeout_seconds=15.0)

        client = get_generation_client(settings)

        assert isinstance(client, AnthropicStructuredClient)
        assert client.model == settings.anthropic_model
        assert client._config.max_tokens == 2048
        assert client._config.timeout_seconds == 15.0

    def test_builds_configured_gemini_client(self):
        settings = make_settings(
            generation_provider="gemini",
            gemini_api_key="gm-test",
            gemini_max_output_tokens=1024,
            request_timeout_seconds=15.0,
        )

        client = get_generation_client(settings)

        assert isinstance(client, GeminiStructuredClient)
        assert client.model == settings.gemini_model
        assert client._config.max_output_tokens == 1024
        assert client._config.timeout_seconds == 15.0

    def test_missing_credentials_returns_503(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        app.dependency_overrides[get_settings] = lambda: make_settings(anthropic_api_key="")
        try:
            response = TestClient(app).post(
                ANALYZE_URL, json={"practiceLog": SINGLE_PRACTICE_LOG}, headers=HEADERS
            )
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 503


# ---------------------------------------------------------------------------
# Schema and Health Endpoint Tests
# ---------------------------------------------------------------------------

class TestSchemaEndpoint:

    def test_returns_declared_schema(self, http):
        response = http.get("/api/v1/practice/schema")

        assert response.status_code == 200
        assert response.json() == SWIM_ANALYSIS_SCHEMA


class TestHealthEndpoints:

    def test_liveness(self, http):
        response = http.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["details"]["generation_provider"] == "anthropic"

    def test_ready_when_configured(self, http):
        response = http.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    def test_not_ready_without_provider_key(self):
        app.dependency_overrides[get_settings] = lambda: make_settings(
            generation_provider="gemini", gemini_api_key=""
        )
        try:
            response = TestClient(app).get("/health/ready")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "not_ready"
        assert len(body["checks"]) == 1
        check = body["checks"][0]
        assert check["name"] == "configuration"
        assert check["status"] == "error"
        assert "GEMINI_API_KEY" in check["error"]


class TestOpenApiDocument:

    def test_analyze_documents_error_responses(self, http):
        responses = http.get("/openapi.json").json()["paths"][ANALYZE_URL]["post"]["responses"]

        for code in ("422", "502"):
            schema_ref = responses[code]["content"]["application/json"]["schema"]["$ref"]
            assert schema_ref.endswith("/AnalysisErrorResponse")


class TestApplication:

    def test_root_points_at_analyze_endpoint(self, http):
        response = http.get("/")

        assert response.status_code == 200
        assert response.json()["analyze"] == ANALYZE_URL

    def test_unexpected_error_returns_generic_500(self, settings):
        def broken_client():
            raise RuntimeError("boom")

        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_generation_client] = broken_client
        try:
            response = TestClient(app, raise_server_exceptions=False).post(
                ANALYZE_URL, json={"practiceLog": SINGLE_PRACTICE_LOG}, headers=HEADERS
            )
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {"error": INTERNAL_ERROR_MESSAGE}
        assert "boom" not in response.text
