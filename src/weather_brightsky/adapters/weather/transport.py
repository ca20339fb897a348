from __future__ import annotations

from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from .base import HttpRequest, HttpResponse, WeatherAdapterError

DEFAULT_TIMEOUT_SECONDS = 10
DEFAULT_USER_AGENT = "weather-brightsky/0.1"


class UrllibTransport:
    def __init__(
        self,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._user_agent = user_agent

    def send(self, request: HttpRequest) -> HttpResponse:
        headers = {"User-Agent": self._user_agent, "Accept": "application/json"}
        headers.update(request.headers)
        http_request = Request(request.url, headers=headers, method=request.method)
        try:
            with urlopen(http_request, timeout=self._timeout_seconds) as response:
                return HttpResponse(
                    status=response.status,
                    body=response.read(),
                    headers=dict(response.headers.items()),
                )
        except HTTPError as exc:
            # Error statuses still carry a body worth handing back to the adapter.
            return HttpResponse(
                status=exc.code,
                body=exc.read(),
                headers=dict(exc.headers.items()) if exc.headers is not None else {},
            )
        except (URLError, TimeoutError, OSError) as exc:
            raise WeatherAdapterError(f"Unable to reach weather provider: {request.url}") from exc
