"""Tests for the Buildkite API client."""

import httpx
import pytest

from buildkite_exporter.config.models import ExporterConfig
from buildkite_exporter.services.buildkite_client import (
    Agent,
    Build,
    BuildkiteAPIError,
    BuildkiteClient,
)


def make_client(handler, **overrides):
    """Client wired to an in-memory transport."""
    config = ExporterConfig(token="secret", org_name="acme", **overrides)
    return BuildkiteClient(config, transport=httpx.MockTransport(handler))


class TestBuildkiteClient:
    """Test suite for BuildkiteClient."""

    def test_list_builds(self):
        """Test builds are requested for the organization and parsed."""
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            return httpx.Response(200, json=[
                {"id": "1", "number": 10, "state": "passed", "message": "ignored"},
                {"id": "2", "number": 11, "state": "failed"},
            ])

        with make_client(handler) as client:
            builds = client.list_builds("acme")

        assert seen["url"] == "https://api.buildkite.com/v2/organizations/acme/builds"
        assert seen["auth"] == "Bearer secret"
        assert [b.state for b in builds] == ["passed", "failed"]
        assert all(isinstance(b, Build) for b in builds)

    def test_list_agents(self):
        """Test agents are requested for the organization and kept opaque."""
        def handler(request):
            assert request.url.path == "/v2/organizations/acme/agents"
            return httpx.Response(200, json=[
                {"id": "a", "name": "agent-1", "connection_state": "connected"},
                {"id": "b", "name": "agent-2"},
                {"id": "c"},
            ])

        with make_client(handler) as client:
            agents = client.list_agents("acme")

        assert len(agents) == 3
        assert isinstance(agents[0], Agent)
        assert agents[0].model_extra["connection_state"] == "connected"

    def test_custom_api_url(self):
        """Test a configured API URL is used as base."""
        def handler(request):
            assert str(request.url) == "http://localhost:8080/api/organizations/acme/builds"
            return httpx.Response(200, json=[])

        with make_client(handler, api_url="http://localhost:8080/api") as client:
            assert client.list_builds("acme") == []

    def test_http_error_status(self):
        """Test non-2xx responses raise BuildkiteAPIError with status code."""
        def handler(request):
            return httpx.Response(401, json={"message": "Authentication required"})

        with make_client(handler) as client:
            with pytest.raises(BuildkiteAPIError) as exc_info:
                client.list_builds("acme")

        assert exc_info.value.status_code == 401
        assert "401" in str(exc_info.value)

    def test_timeout(self):
        """Test timeouts surface as BuildkiteAPIError."""
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with make_client(handler) as client:
            with pytest.raises(BuildkiteAPIError, match="timeout"):
                client.list_agents("acme")

    def test_connection_error(self):
        """Test transport errors surface as BuildkiteAPIError."""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with make_client(handler) as client:
            with pytest.raises(BuildkiteAPIError) as exc_info:
                client.list_builds("acme")

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_invalid_json(self):
        """Test a non-JSON body is reported as an API error."""
        def handler(request):
            return httpx.Response(200, content=b"<html>oops</html>")

        with make_client(handler) as client:
            with pytest.raises(BuildkiteAPIError, match="Invalid JSON"):
                client.list_builds("acme")

    def test_non_list_payload(self):
        """Test an unexpected JSON object is rejected."""
        def handler(request):
            return httpx.Response(200, json={"builds": []})

        with make_client(handler) as client:
            with pytest.raises(BuildkiteAPIError, match="JSON array"):
                client.list_builds("acme")

    def test_malformed_build(self):
        """Test build entries that fail validation are reported as API errors."""
        def handler(request):
            return httpx.Response(200, json=[{"number": "not-a-number"}])

        with make_client(handler) as client:
            with pytest.raises(BuildkiteAPIError, match="Malformed builds"):
                client.list_builds("acme")

    def test_timeout_configured(self):
        """Test the per-request timeout comes from configuration."""
        client = make_client(lambda request: httpx.Response(200, json=[]), timeout_seconds=1.5)

        assert client._http.timeout.read == 1.5
        client.close()
