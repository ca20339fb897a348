from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

from weather_brightsky.adapters.weather import BrightskyWeatherAdapter, HttpRequest, HttpResponse

RESOURCES = Path(__file__).parent / "resources"
FIXED_NOW = datetime(2023, 8, 7, 11, 0, tzinfo=timezone.utc)


def load_resource(name: str) -> dict[str, Any]:
    return json.loads((RESOURCES / name).read_text(encoding="utf-8"))


class FakeTransport:
    def __init__(self, *, status: int = 200, body: bytes = b"{}") -> None:
        self.status = status
        self.body = body
        self.requests: list[HttpRequest] = []

    @classmethod
    def from_resource(cls, name: str) -> FakeTransport:
        return cls(body=(RESOURCES / name).read_bytes())

    def send(self, request: HttpRequest) -> HttpResponse:
        self.requests.append(request)
        return HttpResponse(status=self.status, body=self.body)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def adapter(fixed_clock) -> BrightskyWeatherAdapter:
    return BrightskyWeatherAdapter(transport=FakeTransport(), clock=fixed_clock)
