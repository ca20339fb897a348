from .base import (
    QUERY_MODES,
    HttpRequest,
    HttpResponse,
    HttpTransport,
    QueryMode,
    ServerError,
    WeatherAdapter,
    WeatherAdapterError,
)
from .brightsky import BrightskyWeatherAdapter
from .transport import UrllibTransport

__all__ = [
    "BrightskyWeatherAdapter",
    "HttpRequest",
    "HttpResponse",
    "HttpTransport",
    "QUERY_MODES",
    "QueryMode",
    "ServerError",
    "UrllibTransport",
    "WeatherAdapter",
    "WeatherAdapterError",
]
