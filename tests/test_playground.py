"""Tests for the API playground client using httpx.MockTransport."""

import json

import httpx
import pytest

from playground import (
    HISTORY_LIMIT,
    PRESET_APIS,
    PlaygroundClient,
    PlaygroundRequest,
)


class Recorder:
    """MockTransport handler that records requests and echoes a canned reply."""

    def __init__(self, status=200, json_body=None, text=None):
        self.requests: list[httpx.Request] = []
        self.status = status
        self.json_body = json_body
        self.text = text

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status, text=self.text)
        return httpx.Response(self.status, json=self.json_body or {"ok": True})


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def client(recorder):
    with PlaygroundClient(transport=httpx.MockTransport(recorder)) as client:
        yield client


class TestSend:
    """Tests for PlaygroundClient.send."""

    def test_json_response_is_decoded(self, client):
        response = client.send(PlaygroundRequest(url="https://api.example.com/users"))
        assert response.status == 200
        assert response.status_text == "OK"
        assert response.data == {"ok": True}
        assert response.headers["content-type"] == "application/json"
        assert response.is_network_error is False

    def test_text_response_is_returned_as_text(self):
        handler = Recorder(status=404, text="not here")
        with PlaygroundClient(transport=httpx.MockTransport(handler)) as client:
            response = client.send(PlaygroundRequest(url="https://api.example.com/missing"))
        assert response.status == 404
        assert response.status_text == "Not Found"
        assert response.data == "not here"

    def test_body_sent_for_post(self, client, recorder):
        body = json.dumps({"name": "Ada"})
        client.send(PlaygroundRequest(method="POST", url="https://api.example.com/users", body=body))

        sent = recorder.requests[0]
        assert sent.method == "POST"
        assert json.loads(sent.content) == {"name": "Ada"}
        assert sent.headers["content-type"] == "application/json"

    @pytest.mark.parametrize("method", ["GET", "DELETE"])
    def test_body_dropped_for_methods_without_body(self, client, recorder, method):
        client.send(PlaygroundRequest(method=method, url="https://api.example.com/users/1", body="{}"))
        assert recorder.requests[0].content == b""

    def test_custom_headers_are_forwarded(self, client, recorder):
        client.send(
            PlaygroundRequest(
                url="https://api.example.com/me",
                headers={"Authorization": "Bearer token", "": "ignored"},
            )
        )
        assert recorder.requests[0].headers["authorization"] == "Bearer token"

    def test_network_error_becomes_status_zero(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        with PlaygroundClient(transport=httpx.MockTransport(refuse)) as client:
            response = client.send(PlaygroundRequest(url="https://down.example.com"))

            assert response.status == 0
            assert response.status_text == "Network Error"
            assert response.data == {"error": "connection refused"}
            assert response.is_network_error is True
            assert client.history == []


class TestHistory:
    """Tests for request history."""

    def test_newest_first(self, client):
        client.send(PlaygroundRequest(url="https://api.example.com/first"))
        client.send(PlaygroundRequest(url="https://api.example.com/second"))

        urls = [item.request.url for item in client.history]
        assert urls == ["https://api.example.com/second", "https://api.example.com/first"]

    def test_history_is_capped(self, client):
        for n in range(HISTORY_LIMIT + 5):
            client.send(PlaygroundRequest(url=f"https://api.example.com/items/{n}"))

        assert len(client.history) == HISTORY_LIMIT
        assert client.history[0].request.url.endswith(f"/items/{HISTORY_LIMIT + 4}")
        assert client.history[-1].request.url.endswith("/items/5")


class TestPresets:
    """Tests for preset requests."""

    def test_presets_are_get_requests(self):
        assert len(PRESET_APIS) == 4
        assert all(preset.method == "GET" for preset in PRESET_APIS)

    def test_send_preset(self, client, recorder):
        preset = PRESET_APIS[0]
        client.send_preset(preset)
        assert str(recorder.requests[0].url) == preset.url
        assert client.history[0].request.url == preset.url
