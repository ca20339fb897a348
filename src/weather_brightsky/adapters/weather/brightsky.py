from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, cast
from urllib.parse import urlencode

from ...domain.models import (
    CURRENT,
    FORECAST,
    HISTORICAL,
    Source,
    UnitSystem,
    Weather,
    WeatherCollection,
    WeatherQuery,
    WeatherType,
)
from ...units import (
    convert_precipitation,
    convert_pressure,
    convert_speed,
    convert_temperature,
)
from .base import (
    MODE_CURRENT,
    MODE_FORECAST,
    MODE_HISTORICAL,
    MODE_HISTORICAL_TIMELINE,
    HttpRequest,
    HttpTransport,
    QueryMode,
    ServerError,
)
from .transport import UrllibTransport

LOGGER = logging.getLogger(__name__)

BRIGHTSKY_BASE_URL = "https://api.brightsky.dev"
# Bright Sky's own unit flag stays fixed; conversion happens after the response arrives.
BRIGHTSKY_UNITS = "dwd"
HISTORICAL_WINDOW = timedelta(hours=2)

WIND_SPEED_KEYS = ("wind_speed", "wind_speed_10")
WIND_DIRECTION_KEYS = ("wind_direction", "wind_direction_10")
PRECIPITATION_KEYS = ("precipitation", "precipitation_10")

ICON_WEATHER_CODES = {
    "clear-day": 0,
    "clear-night": 0,
    "partly-cloudy-day": 2,
    "partly-cloudy-night": 2,
    "cloudy": 3,
    "fog": 45,
    "rain": 63,
    "snow": 73,
    "thunderstorm": 95,
}

ICON_NAMES = {
    "clear-day": "day-sunny",
    "clear-night": "night-clear",
    "partly-cloudy-day": "day-cloudy",
    "partly-cloudy-night": "night-cloudy",
    "cloudy": "cloudy",
    "rain": "rain",
    "fog": "fog",
    "snow": "snow",
    "thunderstorm": "thunderstorm",
    "sleet": "sleet",
    "hail": "hail",
    "wind": "strong-wind",
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _format_date(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat(timespec="seconds")


def _format_coordinate(value: float) -> str:
    text = repr(float(value))
    if text.endswith(".0"):
        return text[:-2]
    return text


def _parse_timestamp(value: Any) -> datetime:
    if not isinstance(value, str) or not value.strip():
        raise ServerError("Bright Sky record timestamp was missing or not a string")
    text = value.strip()
    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ServerError(f"Bright Sky record timestamp was invalid: {value!r}") from exc
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _coerce_optional_float(value: Any, *, field_name: str) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ServerError(f"Invalid numeric value for {field_name}") from exc


def _first_present(record: Mapping[str, Any], keys: tuple[str, ...]) -> tuple[str, Any]:
    for key in keys:
        if record.get(key) is not None:
            return key, record[key]
    return keys[0], None


def map_weather_code(icon: Any) -> int | None:
    if not isinstance(icon, str):
        return None
    return ICON_WEATHER_CODES.get(icon)


def map_icon(icon: Any) -> str | None:
    if not isinstance(icon, str):
        return None
    return ICON_NAMES.get(icon)


class BrightskyWeatherAdapter:
    """Weather adapter for the Bright Sky API (DWD open data).

    ``build_request_url`` and ``parse_response`` are pure with respect to the
    network; the ``get_*`` helpers run a full round trip through ``transport``.
    """

    def __init__(
        self,
        *,
        transport: HttpTransport | None = None,
        base_url: str = BRIGHTSKY_BASE_URL,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._transport = transport or UrllibTransport()
        self._base_url = base_url.rstrip("/")
        self._clock = clock
        self._sources: tuple[Source, ...] | None = None

    def get_sources(self) -> tuple[Source, ...]:
        if self._sources is None:
            self._sources = (
                Source(id="brightsky", name="Bright Sky", url="https://brightsky.dev/"),
                Source(id="dwd", name="Deutscher Wetterdienst", url="https://www.dwd.de/"),
            )
        return self._sources

    def build_request_url(self, mode: QueryMode, query: WeatherQuery) -> str:
        if mode == MODE_CURRENT:
            return self._url("current_weather", self._base_params(query))
        if mode in (MODE_FORECAST, MODE_HISTORICAL_TIMELINE):
            params = self._base_params(query)
            params["date"] = _format_date(self._query_date(query))
            return self._url("weather", params)
        if mode == MODE_HISTORICAL:
            params = self._base_params(query)
            date = self._query_date(query)
            if date.tzinfo is None:
                date = date.replace(tzinfo=timezone.utc)
            # Add the window in UTC so DST changes do not stretch or shrink it.
            last_date = (date.astimezone(timezone.utc) + HISTORICAL_WINDOW).astimezone(date.tzinfo)
            params["date"] = _format_date(date)
            params["last_date"] = _format_date(last_date)
            return self._url("weather", params)
        raise ValueError(f"Unsupported query mode: {mode}")

    def _query_date(self, query: WeatherQuery) -> datetime:
        return query.date_time if query.date_time is not None else self._clock()

    @staticmethod
    def _base_params(query: WeatherQuery) -> dict[str, str]:
        return {
            "lat": _format_coordinate(query.latitude),
            "lon": _format_coordinate(query.longitude),
            "units": BRIGHTSKY_UNITS,
        }

    def _url(self, path: str, params: dict[str, str]) -> str:
        return f"{self._base_url}/{path}?{urlencode(params)}"

    def parse_response(
        self, mode: QueryMode, query: WeatherQuery, raw: Any
    ) -> Weather | WeatherCollection:
        if not isinstance(raw, Mapping) or "weather" not in raw:
            raise ServerError("Bright Sky response did not include a 'weather' field")

        weather_data = raw["weather"]
        if mode == MODE_CURRENT:
            if not isinstance(weather_data, Mapping):
                raise ServerError("Bright Sky current weather payload was not an object")
            return self._map_record(query, weather_data, weather_type=CURRENT)

        if not isinstance(weather_data, list):
            raise ServerError("Bright Sky weather payload was not a list")

        collection = WeatherCollection()
        for record in weather_data:
            if not isinstance(record, Mapping):
                raise ServerError("Bright Sky weather record was not an object")
            collection.add(self._map_record(query, record))
        return collection

    def _classify(self, utc_date_time: datetime) -> WeatherType:
        if utc_date_time > self._clock():
            return FORECAST
        return HISTORICAL

    def _map_record(
        self,
        query: WeatherQuery,
        record: Mapping[str, Any],
        *,
        weather_type: WeatherType | None = None,
    ) -> Weather:
        utc_date_time = _parse_timestamp(record.get("timestamp"))
        units: UnitSystem = query.units

        wind_speed_key, wind_speed = _first_present(record, WIND_SPEED_KEYS)
        wind_direction_key, wind_direction = _first_present(record, WIND_DIRECTION_KEYS)
        precipitation_key, precipitation = _first_present(record, PRECIPITATION_KEYS)
        icon = record.get("icon")

        return Weather(
            latitude=query.latitude,
            longitude=query.longitude,
            utc_date_time=utc_date_time,
            type=weather_type or self._classify(utc_date_time),
            temperature=convert_temperature(
                _coerce_optional_float(record.get("temperature"), field_name="temperature"),
                units,
            ),
            dew_point=convert_temperature(
                _coerce_optional_float(record.get("dew_point"), field_name="dew_point"),
                units,
            ),
            humidity=_coerce_optional_float(
                record.get("relative_humidity"), field_name="relative_humidity"
            ),
            pressure=convert_pressure(
                _coerce_optional_float(record.get("pressure_msl"), field_name="pressure_msl"),
                units,
            ),
            wind_speed=convert_speed(
                _coerce_optional_float(wind_speed, field_name=wind_speed_key),
                units,
            ),
            wind_direction=_coerce_optional_float(wind_direction, field_name=wind_direction_key),
            precipitation=convert_precipitation(
                _coerce_optional_float(precipitation, field_name=precipitation_key),
                units,
            ),
            cloud_cover=_coerce_optional_float(record.get("cloud_cover"), field_name="cloud_cover"),
            weather_code=map_weather_code(icon),
            icon=map_icon(icon),
            sources=self.get_sources(),
        )

    def fetch(self, mode: QueryMode, query: WeatherQuery) -> Weather | WeatherCollection:
        url = self.build_request_url(mode, query)
        LOGGER.debug("Requesting Bright Sky %s weather: %s", mode, url)
        response = self._transport.send(HttpRequest(method="GET", url=url))
        if not response.ok:
            LOGGER.warning("Bright Sky returned HTTP %s for %s", response.status, url)
            raise ServerError(f"Bright Sky returned HTTP {response.status}")

        try:
            payload = json.loads(response.body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            LOGGER.warning("Bright Sky returned an undecodable body for %s", url)
            raise ServerError("Bright Sky response was not valid JSON") from exc

        return self.parse_response(mode, query, payload)

    def get_current_weather(self, query: WeatherQuery) -> Weather:
        return cast(Weather, self.fetch(MODE_CURRENT, query))

    def get_forecast(self, query: WeatherQuery) -> WeatherCollection:
        return self._fetch_collection(MODE_FORECAST, query)

    def get_historical(self, query: WeatherQuery) -> WeatherCollection:
        return self._fetch_collection(MODE_HISTORICAL, query)

    def get_historical_time_line(self, query: WeatherQuery) -> WeatherCollection:
        return self._fetch_collection(MODE_HISTORICAL_TIMELINE, query)

    def _fetch_collection(self, mode: QueryMode, query: WeatherQuery) -> WeatherCollection:
        return cast(WeatherCollection, self.fetch(mode, query))
