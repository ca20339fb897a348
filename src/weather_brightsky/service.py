from __future__ import annotations

import logging
from datetime import datetime

from .adapters.weather import (
    BrightskyWeatherAdapter,
    HttpTransport,
    QueryMode,
    UrllibTransport,
    WeatherAdapterError,
)
from .domain.models import Weather, WeatherCollection, WeatherQuery
from .settings import AppSettings

LOGGER = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


def build_weather_adapter(
    settings: AppSettings,
    *,
    transport: HttpTransport | None = None,
) -> BrightskyWeatherAdapter:
    weather = settings.yaml.weather
    if weather.provider != "brightsky":
        raise ValueError(f"Unsupported weather provider: {weather.provider}")
    if transport is None:
        transport = UrllibTransport(
            timeout_seconds=weather.timeout_seconds,
            user_agent=weather.user_agent,
        )
    return BrightskyWeatherAdapter(transport=transport, base_url=weather.base_url)


def fetch_weather(
    settings: AppSettings,
    mode: QueryMode,
    lat: float,
    lon: float,
    *,
    date_time: datetime | None = None,
    transport: HttpTransport | None = None,
) -> Weather | WeatherCollection:
    query = WeatherQuery.create(lat, lon, date_time=date_time, units=settings.yaml.weather.units)
    adapter = build_weather_adapter(settings, transport=transport)
    try:
        result = adapter.fetch(mode, query)
    except WeatherAdapterError:
        LOGGER.exception("Bright Sky %s weather fetch failed for %s,%s", mode, lat, lon)
        raise

    count = len(result) if isinstance(result, WeatherCollection) else 1
    LOGGER.info("Bright Sky %s weather fetched %d record(s) for %s,%s", mode, count, lat, lon)
    return result
