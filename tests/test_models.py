from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from weather_brightsky.domain.models import Source, Weather, WeatherCollection, WeatherQuery
from weather_brightsky.units import (
    convert_precipitation,
    convert_pressure,
    convert_speed,
    convert_temperature,
)


def make_weather(hour: int) -> Weather:
    return Weather(
        latitude=1.0,
        longitude=2.0,
        utc_date_time=datetime(2023, 8, 7, hour, tzinfo=timezone.utc),
        type="historical",
    )


def test_query_defaults_to_metric():
    query = WeatherQuery.create(47.873, 8.004)

    assert query.units == "metric"
    assert query.date_time is None


@pytest.mark.parametrize(("lat", "lon"), [(91.0, 0.0), (-91.0, 0.0), (0.0, 181.0), (0.0, -181.0)])
def test_query_rejects_out_of_range_coordinates(lat, lon):
    with pytest.raises(ValidationError):
        WeatherQuery.create(lat, lon)


def test_weather_requires_type_and_timestamp():
    with pytest.raises(ValidationError):
        Weather(latitude=1.0, longitude=2.0)


def test_weather_normalizes_timestamp_to_utc():
    weather = Weather(
        latitude=1.0,
        longitude=2.0,
        utc_date_time=datetime(2023, 8, 7, 14, tzinfo=timezone(timedelta(hours=2))),
        type="forecast",
    )

    assert weather.utc_date_time == datetime(2023, 8, 7, 12, tzinfo=timezone.utc)
    assert weather.utc_date_time.utcoffset() == timedelta(0)


def test_source_is_frozen():
    source = Source(id="dwd", name="Deutscher Wetterdienst", url="https://www.dwd.de/")

    with pytest.raises(ValidationError):
        source.name = "Other"


def test_collection_keeps_insertion_order():
    collection = WeatherCollection()
    collection.add(make_weather(3)).add(make_weather(1))
    collection.add(make_weather(2))

    assert len(collection) == 3
    assert [weather.utc_date_time.hour for weather in collection] == [3, 1, 2]
    assert collection[0].utc_date_time.hour == 3


def test_metric_values_are_untouched():
    assert convert_temperature(21.37, "metric") == 21.37
    assert convert_pressure(1013.25, "metric") == 1013.25
    assert convert_speed(12.3456, "metric") == 12.3456
    assert convert_precipitation(0.123, "metric") == 0.123


def test_imperial_conversions():
    assert convert_temperature(0.0, "imperial") == 32.0
    assert convert_temperature(100.0, "imperial") == 212.0
    assert convert_temperature(-40.0, "imperial") == -40.0
    assert convert_pressure(1013.25, "imperial") == 29.92
    assert convert_speed(16.09344, "imperial") == 10.0
    assert convert_precipitation(25.4, "imperial") == 1.0


def test_none_passes_through_conversion():
    assert convert_temperature(None, "imperial") is None
    assert convert_pressure(None, "imperial") is None
    assert convert_speed(None, "imperial") is None
    assert convert_precipitation(None, "imperial") is None
