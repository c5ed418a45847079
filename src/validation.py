"""
Input validation for SmackTrack.

Gates coordinates, distances, weather readings and timestamps before
they reach the geodesy/calibration/wind core, which assumes valid input.
Every check returns a ValidationResult listing all problems found;
nothing here raises.
"""

import math
import time
from dataclasses import dataclass, field
from typing import Optional

from src.models.club import Club
from src.utils.constants import (
    MAX_DISTANCE_YARDS,
    MIN_DISTANCE_YARDS,
    MIN_TEMP_CELSIUS,
    MAX_TEMP_CELSIUS,
    MAX_WIND_MPH,
    MIN_TIMESTAMP_MS,
    MAX_FUTURE_SKEW_MS,
)


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)


def _result(errors: list[str]) -> ValidationResult:
    return ValidationResult(is_valid=not errors, errors=errors)


def validate_coordinate(coord) -> ValidationResult:
    """Check that lat/lon are finite and inside [-90, 90] / [-180, 180]."""
    errors = []
    if not math.isfinite(coord.lat):
        errors.append("Latitude must be a finite number")
    elif not -90.0 <= coord.lat <= 90.0:
        errors.append(f"Latitude must be between -90 and 90, got {coord.lat}")

    if not math.isfinite(coord.lon):
        errors.append("Longitude must be a finite number")
    elif not -180.0 <= coord.lon <= 180.0:
        errors.append(f"Longitude must be between -180 and 180, got {coord.lon}")
    return _result(errors)


def validate_distance(distance_yards: float) -> ValidationResult:
    """Check that a shot distance is finite and within 0-500 yards."""
    errors = []
    if not math.isfinite(distance_yards):
        errors.append("Distance must be a finite number")
    elif not MIN_DISTANCE_YARDS <= distance_yards <= MAX_DISTANCE_YARDS:
        errors.append(
            f"Distance must be between {MIN_DISTANCE_YARDS} and "
            f"{MAX_DISTANCE_YARDS} yards, got {distance_yards}"
        )
    return _result(errors)


def validate_distance_for_club(distance_yards: float,
                               club: Club) -> ValidationResult:
    """Soft plausibility check against the club's typical carry range.

    Clubs without a tabulated range always pass.
    """
    limits = club.distance_range
    if limits is None:
        return _result([])
    low, high = limits
    if low <= distance_yards <= high:
        return _result([])
    return _result([
        f"Distance {distance_yards} yards is outside plausible range for "
        f"{club.display_name}: {low}-{high} yards"
    ])


def validate_weather(
    temperature_celsius: Optional[float],
    wind_speed_mph: Optional[float],
    wind_direction_degrees: Optional[int],
    weather_code: Optional[int],
) -> ValidationResult:
    """Check a weather reading.

    Fields are all-or-nothing: a reading with every field absent is valid
    (weather unavailable), a partial reading is not.
    """
    fields = (temperature_celsius, wind_speed_mph,
              wind_direction_degrees, weather_code)
    present = sum(1 for f in fields if f is not None)
    if present == 0:
        return _result([])

    errors = []
    if present != len(fields):
        errors.append(
            f"Weather fields must be all present or all absent, "
            f"got {present} of {len(fields)}"
        )

    if temperature_celsius is not None and not (
            MIN_TEMP_CELSIUS <= temperature_celsius <= MAX_TEMP_CELSIUS):
        errors.append(
            f"Temperature {temperature_celsius}°C is outside Earth extremes "
            f"({MIN_TEMP_CELSIUS} to {MAX_TEMP_CELSIUS})"
        )
    if wind_speed_mph is not None and not 0.0 <= wind_speed_mph <= MAX_WIND_MPH:
        errors.append(
            f"Wind speed {wind_speed_mph} mph is outside valid range "
            f"(0 to {MAX_WIND_MPH})"
        )
    if wind_direction_degrees is not None and not 0 <= wind_direction_degrees <= 359:
        errors.append(
            f"Wind direction {wind_direction_degrees}° is outside valid "
            f"range (0 to 359)"
        )
    return _result(errors)


def validate_timestamp(timestamp_ms: int,
                       now_ms: Optional[int] = None) -> ValidationResult:
    """Check that a timestamp is plausible epoch milliseconds.

    Args:
        timestamp_ms: Value to check.
        now_ms: Current time override (defaults to the wall clock).
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)

    errors = []
    if timestamp_ms <= 0:
        errors.append(f"Timestamp must be positive, got {timestamp_ms}")
    elif timestamp_ms < 1_000_000_000_000:
        errors.append(
            f"Timestamp {timestamp_ms} appears to be in seconds, not milliseconds"
        )
    elif timestamp_ms < MIN_TIMESTAMP_MS:
        errors.append(f"Timestamp {timestamp_ms} is before minimum (Jan 1 2023)")
    elif timestamp_ms > now_ms + MAX_FUTURE_SKEW_MS:
        errors.append(f"Timestamp {timestamp_ms} is in the future")
    return _result(errors)
