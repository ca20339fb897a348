from __future__ import annotations

import io
from email.message import Message
from urllib.error import HTTPError, URLError

import pytest

from weather_brightsky.adapters.weather import HttpRequest, UrllibTransport, WeatherAdapterError
from weather_brightsky.adapters.weather import transport as transport_module


class FakeUrlResponse:
    def __init__(self, body: bytes, status: int = 200) -> None:
        self._body = body
        self.status = status
        self.headers = Message()
        self.headers["Content-Type"] = "application/json"

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> FakeUrlResponse:
        return self

    def __exit__(self, *exc_info) -> None:
        return None


def test_send_returns_body_and_status(monkeypatch):
    captured = {}

    def fake_urlopen(request, timeout):
        captured["request"] = request
        captured["timeout"] = timeout
        return FakeUrlResponse(b'{"weather": {}}')

    monkeypatch.setattr(transport_module, "urlopen", fake_urlopen)
    transport = UrllibTransport(timeout_seconds=3, user_agent="tests/1.0")

    response = transport.send(HttpRequest(method="GET", url="https://api.brightsky.dev/current_weather"))

    assert response.ok
    assert response.status == 200
    assert response.body == b'{"weather": {}}'
    assert response.headers["Content-Type"] == "application/json"
    assert captured["timeout"] == 3
    assert captured["request"].get_header("User-agent") == "tests/1.0"
    assert captured["request"].get_method() == "GET"


def test_http_error_status_is_returned(monkeypatch):
    def fake_urlopen(request, timeout):
        raise HTTPError(request.full_url, 404, "Not Found", Message(), io.BytesIO(b'{"detail": "nope"}'))

    monkeypatch.setattr(transport_module, "urlopen", fake_urlopen)

    response = UrllibTransport().send(HttpRequest(method="GET", url="https://api.brightsky.dev/weather"))

    assert not response.ok
    assert response.status == 404
    assert response.body == b'{"detail": "nope"}'


def test_network_failure_raises_adapter_error(monkeypatch):
    def fake_urlopen(request, timeout):
        raise URLError("connection refused")

    monkeypatch.setattr(transport_module, "urlopen", fake_urlopen)

    with pytest.raises(WeatherAdapterError):
        UrllibTransport().send(HttpRequest(method="GET", url="https://api.brightsky.dev/weather"))
