"""
Unit tests for the API key admission gate and middleware.
"""

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from service_gateway.app.domain.api_key_middleware import (
    AdmissionGate,
    ApiKeyMiddleware,
    matches_path_prefix,
)
from shared.errors import DenialReason
from shared.metrics import MetricsCollector
from shared.test_helpers import test_environment


def make_request(path: str, headers=None, query: str = "") -> Request:
    """Build a bare Starlette request without a running app."""
    scope = {
        "type": "http",
        "method": "GET",
        "scheme": "http",
        "server": ("testserver", 80),
        "root_path": "",
        "path": path,
        "query_string": query.encode(),
        "headers": [(name.lower().encode(), value.encode()) for name, value in (headers or {}).items()],
    }
    return Request(scope)


class TestMatchesPathPrefix:
    """Test cases for segment-aware prefix matching."""

    @pytest.mark.parametrize(
        "path, prefix, expected",
        [
            ("/api/status", "/api/status", True),
            ("/api/status/health", "/api/status", True),
            ("/API/Status/Health", "/api/status", True),
            ("/api/statusfoo", "/api/status", False),
            ("/api/games", "/api/status", False),
            ("/docs/oauth2-redirect", "/docs", True),
            ("/favicon.ico", "/favicon.ico", True),
        ],
    )
    def test_matches(self, path, prefix, expected):
        assert matches_path_prefix(path, prefix) is expected


class TestAdmissionGate:
    """Test cases for AdmissionGate.evaluate."""

    @pytest.fixture
    def gate(self):
        """Gate with checking enabled and one accepted key."""
        return AdmissionGate(require_api_key=True, valid_api_keys={"abc"})

    @pytest.mark.parametrize(
        "path",
        ["/status/health", "/api/status", "/api/status/health", "/docs", "/openapi.json", "/metrics"],
    )
    def test_exempt_paths_always_allowed(self, gate, path):
        """Exempt paths pass even with a wrong key."""
        decision = gate.evaluate(make_request(path, headers={"X-API-Key": "wrong"}))
        assert decision.allowed
        assert decision.exempt

    @pytest.mark.parametrize("headers", [{}, {"X-API-Key": "wrong"}, {"X-API-Key": "abc"}])
    def test_disabled_gate_allows_everything(self, headers):
        gate = AdmissionGate(require_api_key=False, valid_api_keys={"abc"})
        decision = gate.evaluate(make_request("/api/games", headers=headers))
        assert decision.allowed
        assert decision.api_key is None

    def test_missing_credential_denied(self, gate):
        decision = gate.evaluate(make_request("/api/games"))
        assert not decision.allowed
        assert decision.reason is DenialReason.MISSING_CREDENTIAL

    def test_invalid_credential_denied(self, gate):
        decision = gate.evaluate(make_request("/api/games", headers={"X-API-Key": "wrong"}))
        assert not decision.allowed
        assert decision.reason is DenialReason.INVALID_CREDENTIAL

    def test_valid_header_allowed(self, gate):
        decision = gate.evaluate(make_request("/api/games", headers={"X-API-Key": "abc"}))
        assert decision.allowed
        assert decision.api_key == "abc"

    def test_query_parameter_fallback(self, gate):
        decision = gate.evaluate(make_request("/api/games", query="api_key=abc"))
        assert decision.allowed
        assert decision.api_key == "abc"

    def test_header_takes_precedence_over_query(self, gate):
        decision = gate.evaluate(make_request("/api/games", headers={"X-API-Key": "wrong"}, query="api_key=abc"))
        assert not decision.allowed
        assert decision.reason is DenialReason.INVALID_CREDENTIAL

    def test_empty_header_falls_back_to_query(self, gate):
        decision = gate.evaluate(make_request("/api/games", headers={"X-API-Key": ""}, query="api_key=abc"))
        assert decision.allowed

    def test_empty_values_count_as_missing(self, gate):
        decision = gate.evaluate(make_request("/api/games", headers={"X-API-Key": ""}, query="api_key="))
        assert decision.reason is DenialReason.MISSING_CREDENTIAL

    def test_comparison_is_exact(self, gate):
        for candidate in ("ABC", "abc ", " abc"):
            decision = gate.evaluate(make_request("/api/games", headers={"X-API-Key": candidate}))
            assert not decision.allowed

    def test_custom_extraction_names(self):
        gate = AdmissionGate(
            require_api_key=True,
            valid_api_keys={"abc"},
            header_name="X-Client-Key",
            query_parameter_name="client_key",
        )
        assert gate.evaluate(make_request("/api/games", headers={"X-Client-Key": "abc"})).allowed
        assert gate.evaluate(make_request("/api/games", query="client_key=abc")).allowed
        assert not gate.evaluate(make_request("/api/games", headers={"X-API-Key": "abc"})).allowed

    def test_from_config(self):
        config = test_environment.get_mock_config(
            require_api_key=True,
            valid_api_keys="abc, def",
            api_key_header_name="X-Key",
        )
        gate = AdmissionGate.from_config(config)
        assert gate.require_api_key is True
        assert gate.valid_api_keys == frozenset({"abc", "def"})
        assert gate.header_name == "X-Key"
        assert gate.query_parameter_name == "api_key"


class TestApiKeyMiddleware:
    """Test cases for ApiKeyMiddleware on a minimal app."""

    @pytest.fixture
    def metrics(self):
        return MetricsCollector("gateway")

    @pytest.fixture
    def client(self, metrics):
        """App with a single gated route echoing the accepted key."""
        app = FastAPI()
        gate = AdmissionGate(require_api_key=True, valid_api_keys={"abc"})
        app.add_middleware(ApiKeyMiddleware, gate=gate, metrics=metrics)

        @app.get("/api/games")
        async def games(request: Request):
            return {"api_key": getattr(request.state, "api_key", None)}

        @app.get("/api/status/health")
        async def health():
            return {"status": "Healthy"}

        return TestClient(app)

    def test_missing_key_returns_401(self, client, metrics):
        response = client.get("/api/games")
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized", "message": "API key is required"}
        assert metrics.sample_value(
            "admission_decisions_total", {"decision": "denied", "reason": "missing_credential"}
        ) == 1.0

    def test_invalid_key_returns_401(self, client):
        response = client.get("/api/games", headers={"X-API-Key": "wrong"})
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized", "message": "Invalid API key"}

    def test_valid_key_reaches_route_with_request_state(self, client, metrics):
        response = client.get("/api/games", headers={"X-API-Key": "abc"})
        assert response.status_code == 200
        assert response.json() == {"api_key": "abc"}
        assert metrics.sample_value(
            "admission_decisions_total", {"decision": "allowed", "reason": "valid_key"}
        ) == 1.0

    def test_query_key_reaches_route(self, client):
        response = client.get("/api/games", params={"api_key": "abc"})
        assert response.status_code == 200

    def test_exempt_route_ignores_bad_key(self, client):
        response = client.get("/api/status/health", headers={"X-API-Key": "wrong"})
        assert response.status_code == 200
        assert response.json() == {"status": "Healthy"}
