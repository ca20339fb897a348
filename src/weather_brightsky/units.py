"""Convert metric measurements into the unit system a caller asked for.

Bright Sky reports everything in DWD units (Celsius, hPa, km/h, mm). Metric
callers get those values untouched; imperial callers get Fahrenheit, inches of
mercury, miles per hour and inches, rounded to two decimals.
"""

from __future__ import annotations

from .domain.models import IMPERIAL, UnitSystem

HPA_TO_INHG = 0.0295299830714
KM_PER_MILE = 1.609344
MM_PER_INCH = 25.4


def _round(value: float) -> float:
    return round(value, 2)


def convert_temperature(value: float | None, units: UnitSystem) -> float | None:
    if value is None or units != IMPERIAL:
        return value
    return _round(value * 9 / 5 + 32)


def convert_pressure(value: float | None, units: UnitSystem) -> float | None:
    if value is None or units != IMPERIAL:
        return value
    return _round(value * HPA_TO_INHG)


def convert_speed(value: float | None, units: UnitSystem) -> float | None:
    if value is None or units != IMPERIAL:
        return value
    return _round(value / KM_PER_MILE)


def convert_precipitation(value: float | None, units: UnitSystem) -> float | None:
    if value is None or units != IMPERIAL:
        return value
    return _round(value / MM_PER_INCH)
