from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterator, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

WeatherType = Literal["current", "forecast", "historical"]
UnitSystem = Literal["metric", "imperial"]

CURRENT: WeatherType = "current"
FORECAST: WeatherType = "forecast"
HISTORICAL: WeatherType = "historical"

METRIC: UnitSystem = "metric"
IMPERIAL: UnitSystem = "imperial"


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Source(BaseModel):
    """Attribution for the organisation that produced a weather record."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    url: str

    @field_validator("id", "name", "url")
    @classmethod
    def validate_non_empty_text(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("source fields must not be empty")
        return text


class WeatherQuery(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    date_time: datetime | None = None
    units: UnitSystem = METRIC

    @classmethod
    def create(
        cls,
        latitude: float,
        longitude: float,
        date_time: datetime | None = None,
        units: UnitSystem = METRIC,
    ) -> WeatherQuery:
        return cls(latitude=latitude, longitude=longitude, date_time=date_time, units=units)


class Weather(BaseModel):
    model_config = ConfigDict(extra="ignore")

    latitude: float
    longitude: float
    utc_date_time: datetime
    type: WeatherType
    temperature: float | None = None
    dew_point: float | None = None
    humidity: float | None = None
    pressure: float | None = None
    wind_speed: float | None = None
    wind_direction: float | None = None
    precipitation: float | None = None
    cloud_cover: float | None = None
    weather_code: int | None = None
    icon: str | None = None
    sources: list[Source] = Field(default_factory=list)

    @field_validator("utc_date_time")
    @classmethod
    def validate_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


@dataclass(slots=True)
class WeatherCollection:
    items: list[Weather] = field(default_factory=list)

    def add(self, weather: Weather) -> WeatherCollection:
        self.items.append(weather)
        return self

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Weather]:
        return iter(self.items)

    def __getitem__(self, index: int) -> Weather:
        return self.items[index]
