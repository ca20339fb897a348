from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Protocol

from ...domain.models import Source, Weather, WeatherCollection, WeatherQuery

QueryMode = Literal["current", "forecast", "historical", "historical-timeline"]

MODE_CURRENT: QueryMode = "current"
MODE_FORECAST: QueryMode = "forecast"
MODE_HISTORICAL: QueryMode = "historical"
MODE_HISTORICAL_TIMELINE: QueryMode = "historical-timeline"

QUERY_MODES: tuple[QueryMode, ...] = (
    MODE_CURRENT,
    MODE_FORECAST,
    MODE_HISTORICAL,
    MODE_HISTORICAL_TIMELINE,
)


class WeatherAdapterError(RuntimeError):
    """Raised when a weather provider request cannot be completed."""


class ServerError(WeatherAdapterError):
    """Raised when a provider answers with an error status or an unexpected payload."""


@dataclass(slots=True)
class HttpRequest:
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class HttpResponse:
    status: int
    body: bytes
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class HttpTransport(Protocol):
    def send(self, request: HttpRequest) -> HttpResponse:
        """Perform the request and return the raw response, whatever its status."""


class WeatherAdapter(Protocol):
    def get_sources(self) -> tuple[Source, ...]:
        """Return the attribution sources attached to every record."""

    def build_request_url(self, mode: QueryMode, query: WeatherQuery) -> str:
        """Return the provider URL for the query mode."""

    def parse_response(
        self, mode: QueryMode, query: WeatherQuery, raw: object
    ) -> Weather | WeatherCollection:
        """Map a decoded provider payload onto the shared weather model."""
