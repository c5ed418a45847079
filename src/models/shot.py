"""
Shot record for SmackTrack.

ShotResult holds only the scalar inputs that are persisted: measured
distance, shot bearing, and the weather at the time of the shot. The
wind/temperature analysis is never stored; it is recomputed from these
scalars whenever it is needed (e.g. toggling wind-adjusted display or
changing the trajectory setting).
"""

import time
from dataclasses import dataclass, field
from typing import Optional

from src.models.club import Club, DistanceUnit, TemperatureUnit, Trajectory, WindUnit
from src.utils.constants import KMH_TO_MPH, METERS_PER_YARD
from src.wind import WindEffect, analyze


@dataclass
class ShotResult:
    """A completed, measured shot.

    Attributes:
        club: Club used.
        distance_yards: Measured distance, rounded to whole yards.
        distance_meters: Measured distance, rounded to whole meters.
        weather_description: WMO label ("Unknown" if weather unavailable).
        temperature_f: Air temperature, rounded °F.
        temperature_c: Air temperature, rounded °C.
        wind_speed_kmh: Wind speed at the time of the shot.
        wind_direction_compass: 8-point compass label of the wind source.
        wind_direction_degrees: Direction the wind blew FROM.
        shot_bearing_degrees: Bearing from start to end position.
        timestamp_ms: When the shot was recorded (epoch ms).
        id: Database primary key (set after persistence).
    """
    club: Club
    distance_yards: int
    distance_meters: int
    weather_description: str = "Unknown"
    temperature_f: int = 32
    temperature_c: int = 0
    wind_speed_kmh: float = 0.0
    wind_direction_compass: str = "N"
    wind_direction_degrees: int = 0
    shot_bearing_degrees: float = 0.0
    timestamp_ms: int = field(default_factory=lambda: int(time.time() * 1000))
    id: Optional[int] = None

    def weather_effect(self, trajectory: Trajectory = Trajectory.MID) -> WindEffect:
        """Recompute the wind/temperature analysis for this shot."""
        return analyze(
            wind_speed_kmh=self.wind_speed_kmh,
            wind_from_degrees=self.wind_direction_degrees,
            shot_bearing_degrees=self.shot_bearing_degrees,
            distance_yards=self.distance_yards,
            trajectory_multiplier=trajectory.multiplier,
            temperature_f=self.temperature_f,
        )

    def has_weather_effect(self) -> bool:
        """False when conditions are calm and at the 70°F baseline."""
        return self.wind_speed_kmh > 0 or self.temperature_f != 70

    def primary_distance(self, unit: DistanceUnit) -> int:
        if unit == DistanceUnit.YARDS:
            return self.distance_yards
        return self.distance_meters

    def adjusted_distance(self, unit: DistanceUnit,
                          trajectory: Trajectory = Trajectory.MID) -> int:
        """Distance with the weather effect removed (calm, 70°F equivalent).

        Never negative.
        """
        effect = self.weather_effect(trajectory)
        adjusted_yards = max(0, effect.adjusted_distance_yards(self.distance_yards))
        if unit == DistanceUnit.YARDS:
            return adjusted_yards
        return int(adjusted_yards * METERS_PER_YARD)

    def distance_for(self, unit: DistanceUnit, weather_adjusted: bool = False,
                     trajectory: Trajectory = Trajectory.MID) -> int:
        if weather_adjusted:
            return self.adjusted_distance(unit, trajectory)
        return self.primary_distance(unit)

    def format_wind_speed(self, unit: WindUnit) -> str:
        if unit == WindUnit.KMH:
            return f"{int(self.wind_speed_kmh)} km/h"
        return f"{int(self.wind_speed_kmh * KMH_TO_MPH)} mph"

    def format_temperature(self, unit: TemperatureUnit) -> str:
        if unit == TemperatureUnit.FAHRENHEIT:
            return f"{self.temperature_f}°F"
        return f"{self.temperature_c}°C"
