"""Tests for the HTTP server endpoints."""

import json
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from cc_slack import __version__
from cc_slack.hooks.ingestor import HookIngestor
from cc_slack.integrations.slack import SlackAPIError
from cc_slack.servers.http import HTTPServer
from cc_slack.sessions.registry import SessionRegistry
from tests.conftest import FakeGateway, assistant_record, text_block, user_record

pytestmark = pytest.mark.unit


@pytest.fixture
def ingestor(fake_gateway: FakeGateway, registry: SessionRegistry) -> HookIngestor:
    return HookIngestor(fake_gateway, "C123", registry, transcript_delay=0)


@pytest.fixture
def http_server(ingestor: HookIngestor, registry: SessionRegistry) -> HTTPServer:
    """Create an HTTP server instance for testing."""
    return HTTPServer(ingestor=ingestor, registry=registry, port=8765)


@pytest.fixture
def client(http_server: HTTPServer) -> TestClient:
    """Create a test client for the HTTP server."""
    return TestClient(http_server.app)


class TestHookEndpoint:
    def test_stop_event_posts_and_returns_empty_200(
        self, client, fake_gateway, registry, write_transcript
    ) -> None:
        transcript = write_transcript(user_record("hello"), assistant_record(text_block("hi there")))

        response = client.post(
            "/hook",
            json={"hook_event_name": "Stop", "session_id": "s1", "transcript_path": transcript},
        )

        assert response.status_code == 200
        assert response.content == b""
        assert fake_gateway.last["text"] == '[Stop]\nPrompt: "hello"\nResponse: hi there'
        assert registry.get("s1") == "111.222"

    def test_second_event_threads(self, client, fake_gateway) -> None:
        client.post("/hook", json={"hook_event_name": "Stop", "session_id": "s1"})
        client.post("/hook", json={"hook_event_name": "TaskCompleted", "session_id": "s1"})

        assert fake_gateway.calls[0]["thread_ts"] == ""
        assert fake_gateway.calls[1]["thread_ts"] == "111.222"

    def test_unknown_fields_accepted(self, client, fake_gateway) -> None:
        response = client.post(
            "/hook", json={"hook_event_name": "Notification", "cwd": "/work", "message": "idle"}
        )

        assert response.status_code == 200
        assert fake_gateway.last["text"].startswith("[Notification]")

    @pytest.mark.parametrize(
        "body",
        [b"not json", b"", b"[1, 2]", b'"Stop"', b'{"session_id": {"x": 1}}'],
    )
    def test_invalid_body_returns_400(self, client, fake_gateway, body: bytes) -> None:
        response = client.post(
            "/hook", content=body, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert "invalid JSON" in response.text
        assert fake_gateway.calls == []

    @pytest.mark.parametrize("method", ["get", "put", "delete"])
    def test_other_methods_not_allowed(self, client, method: str) -> None:
        response = getattr(client, method)("/hook")

        assert response.status_code == 405

    def test_slack_failure_returns_500(self, ingestor, client, registry) -> None:
        ingestor.gateway = FakeGateway(error=SlackAPIError("slack API error: invalid_auth"))

        response = client.post("/hook", json={"hook_event_name": "Stop", "session_id": "s1"})

        assert response.status_code == 500
        assert "slack post failed" in response.text
        assert len(registry) == 0

    def test_unexpected_error_returns_plain_500(self, http_server) -> None:
        http_server.ingestor.handle = AsyncMock(side_effect=RuntimeError("boom"))
        client = TestClient(http_server.app, raise_server_exceptions=False)

        response = client.post("/hook", content=json.dumps({"hook_event_name": "Stop"}))

        assert response.status_code == 500
        assert response.text == "internal error"


class TestHealthEndpoint:
    def test_health(self, client, registry) -> None:
        registry.set("s1", "1.0")

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "ok",
            "version": __version__,
            "sessions": 1,
            "bot_enabled": False,
        }

    def test_health_reports_bot(self, ingestor, registry) -> None:
        server = HTTPServer(ingestor=ingestor, registry=registry, bot_enabled=True)

        assert TestClient(server.app).get("/health").json()["bot_enabled"] is True


class TestLifespan:
    def test_running_flag(self, http_server) -> None:
        assert not http_server.running
        with TestClient(http_server.app):
            assert http_server.running
        assert not http_server.running
