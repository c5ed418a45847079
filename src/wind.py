"""
Wind and temperature effect model for SmackTrack.

Empirical carry corrections calibrated against TrackMan launch monitor
data (see src.utils.constants). This is not a ball-flight simulation:
spin, compression and elevation are ignored.

Key findings behind the model:
  - Aerodynamic drag is proportional to v², so wind effects scale non-linearly
  - Headwind hurts ~1.5-2x more than tailwind helps (asymmetry)
  - Higher ball flights spend more time in the air → more wind exposure
  - Crosswind primarily affects lateral displacement, minimal carry effect

Angle convention (relative wind angle):
    0 = pure tailwind, ±180 = pure headwind,
    positive = wind pushing the ball right, negative = left.

All functions are pure. Degenerate input (zero distance or no wind) and
NaN angles yield zero effect rather than an error.
"""

import math
from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from enum import Enum

from src.utils.constants import (
    KMH_TO_MPH,
    TAILWIND_EXPONENT,
    TAILWIND_COEFFICIENT,
    HEADWIND_EXPONENT,
    HEADWIND_COEFFICIENT,
    REFERENCE_CARRY_YARDS,
    LATERAL_FEET_PER_MPH_PER_100YD,
    FEET_PER_YARD,
    BASELINE_TEMP_F,
    TEMP_EFFECT_DIVISOR,
    SEVERITY_BREAKPOINTS_DEG,
    WIND_SECTOR_DEG,
    WIND_LABELS_16,
    WIND_STRENGTH_BREAKPOINTS_KMH,
    WIND_STRENGTH_LABELS,
)


class WindColorCategory(Enum):
    """Seven ordered severity buckets, strongest helping to strongest hurting."""
    STRONG_HELPING = 0
    HELPING = 1
    SLIGHT_HELPING = 2
    CROSSWIND = 3
    SLIGHT_HURTING = 4
    HURTING = 5
    STRONG_HURTING = 6


# Index i covers |angle| in (SEVERITY_BREAKPOINTS_DEG[i-1], SEVERITY_BREAKPOINTS_DEG[i]]
_SEVERITY_TABLE = tuple(WindColorCategory)


@dataclass(frozen=True)
class WindEffect:
    """Complete weather analysis for one shot.

    Attributes:
        relative_angle_deg: Wind travel vs. shot direction, (-180, 180].
        headwind_component_mph: Along-shot wind (positive = headwind).
        crosswind_component_mph: Cross-shot wind (positive = pushing right).
        carry_effect_yards: Carry gained (+) or lost (-) to wind.
        temperature_effect_yards: Carry gained (+) or lost (-) to temperature.
        total_weather_effect_yards: Wind plus temperature effect.
        lateral_displacement_yards: Sideways push (positive = right).
        label: 16-point golfer-facing direction label.
        color_category: Severity bucket.
    """
    relative_angle_deg: float
    headwind_component_mph: float
    crosswind_component_mph: float
    carry_effect_yards: int
    temperature_effect_yards: int
    total_weather_effect_yards: int
    lateral_displacement_yards: float
    label: str
    color_category: WindColorCategory

    def adjusted_distance_yards(self, distance_yards: int) -> int:
        """Distance the shot would have carried in calm, 70°F air."""
        return distance_yards - self.total_weather_effect_yards


def relative_wind_angle(wind_from_degrees: float,
                        shot_bearing_degrees: float) -> float:
    """Angle between the wind's direction of travel and the shot's.

    Meteorological convention: wind direction = where wind comes FROM,
    so the wind travels toward wind_from + 180.

    Args:
        wind_from_degrees: Meteorological wind direction.
        shot_bearing_degrees: Direction the ball was hit TOWARD.

    Returns:
        Relative angle in (-180, 180]. 0 = tailwind, 180 = headwind.
    """
    wind_goes_to = (wind_from_degrees + 180) % 360
    diff = (wind_goes_to - shot_bearing_degrees) % 360
    if diff > 180:
        diff -= 360
    return float(diff)


def decompose_wind(wind_speed_mph: float,
                   relative_angle_deg: float) -> tuple[float, float]:
    """Split wind into along-shot and cross-shot components.

    Returns:
        (along, cross): along positive = tailwind, negative = headwind;
        cross positive = pushing right, negative = pushing left.
    """
    rad = math.radians(relative_angle_deg)
    along = wind_speed_mph * math.cos(rad)
    cross = wind_speed_mph * math.sin(rad)
    return along, cross


def estimate_wind_effect_yards(
    wind_speed_kmh: float,
    relative_angle_deg: float,
    distance_yards: float,
    trajectory_multiplier: float = 1.0,
) -> int:
    """Estimate carry gained or lost to wind.

    Model:
        Tailwind: +along^1.1 × 0.4 × trajectory × (distance / 150)
        Headwind: -|along|^1.3 × 0.8 × trajectory × (distance / 150)

    Headwind raises airspeed and drag grows quadratically; tailwind lowers
    airspeed but also lift, so the ball falls out of the sky sooner.

    Args:
        wind_speed_kmh: Wind speed in km/h.
        relative_angle_deg: Relative wind angle (0 = tailwind).
        distance_yards: Actual shot distance in yards.
        trajectory_multiplier: LOW=0.75, MID=1.0, HIGH=1.3.

    Returns:
        Whole yards gained (+) or lost (-), truncated toward zero.
    """
    if distance_yards <= 0 or wind_speed_kmh <= 0 or math.isnan(relative_angle_deg):
        return 0

    wind_mph = wind_speed_kmh * KMH_TO_MPH
    along, _ = decompose_wind(wind_mph, relative_angle_deg)
    distance_scale = distance_yards / REFERENCE_CARRY_YARDS

    if along > 0:
        effect = (along ** TAILWIND_EXPONENT * TAILWIND_COEFFICIENT
                  * trajectory_multiplier * distance_scale)
    else:
        effect = -(abs(along) ** HEADWIND_EXPONENT * HEADWIND_COEFFICIENT
                   * trajectory_multiplier * distance_scale)

    return int(effect)


def estimate_lateral_displacement_yards(
    wind_speed_kmh: float,
    relative_angle_deg: float,
    distance_yards: float,
    trajectory_multiplier: float = 1.0,
) -> float:
    """Estimate sideways push from crosswind.

    Caddie rule of thumb: 1 foot lateral per 1 mph crosswind per 100
    yards of carry.

    Returns:
        Lateral displacement in yards (positive = right, negative = left).
    """
    if distance_yards <= 0 or wind_speed_kmh <= 0 or math.isnan(relative_angle_deg):
        return 0.0

    wind_mph = wind_speed_kmh * KMH_TO_MPH
    _, cross = decompose_wind(wind_mph, relative_angle_deg)

    displacement_feet = (cross * LATERAL_FEET_PER_MPH_PER_100YD
                         * (distance_yards / 100.0) * trajectory_multiplier)
    return displacement_feet / FEET_PER_YARD


def estimate_temperature_effect_yards(distance_yards: float,
                                      temperature_f: float) -> int:
    """Estimate carry gained or lost to air temperature.

    Linear around a 70°F baseline. Hot air is less dense (less drag,
    more carry); cold air is denser.

    Returns:
        Whole yards gained (+) or lost (-), truncated toward zero.
    """
    if distance_yards <= 0:
        return 0
    return int(distance_yards * (temperature_f - BASELINE_TEMP_F)
               / TEMP_EFFECT_DIVISOR)


def wind_label_16(relative_angle_deg: float) -> str:
    """16-point wind label relative to the shot direction.

    Each sector is 22.5° wide and centered on a multiple of 22.5°.
    "Helping" = tailwind side, "Hurting" = headwind side.
    A NaN angle (no usable shot bearing) is labelled as sector 0.
    """
    if math.isnan(relative_angle_deg):
        return WIND_LABELS_16[0]
    norm = relative_angle_deg % 360
    sector = int((norm + WIND_SECTOR_DEG / 2) / WIND_SECTOR_DEG) % 16
    return WIND_LABELS_16[sector]


def wind_color_category(relative_angle_deg: float) -> WindColorCategory:
    """Severity bucket for |relative angle|.

    Boundary values fall into the lower-magnitude bucket, e.g. exactly
    22.5° is STRONG_HELPING.
    """
    index = bisect_left(SEVERITY_BREAKPOINTS_DEG, abs(relative_angle_deg))
    return _SEVERITY_TABLE[index]


def wind_strength_label(wind_speed_kmh: float) -> str:
    """Plain-language wind strength for display."""
    index = bisect_right(WIND_STRENGTH_BREAKPOINTS_KMH, wind_speed_kmh)
    return WIND_STRENGTH_LABELS[index]


def analyze(
    wind_speed_kmh: float,
    wind_from_degrees: float,
    shot_bearing_degrees: float,
    distance_yards: float,
    trajectory_multiplier: float = 1.0,
    temperature_f: float = BASELINE_TEMP_F,
) -> WindEffect:
    """Compute the complete weather analysis for a shot (wind + temperature).

    Args:
        wind_speed_kmh: Wind speed in km/h.
        wind_from_degrees: Meteorological wind direction (FROM).
        shot_bearing_degrees: Shot bearing from start to end position.
        distance_yards: Measured shot distance in yards.
        trajectory_multiplier: LOW=0.75, MID=1.0, HIGH=1.3.
        temperature_f: Air temperature in Fahrenheit.

    Returns:
        WindEffect bundle.
    """
    rel_angle = relative_wind_angle(wind_from_degrees, shot_bearing_degrees)
    wind_mph = max(wind_speed_kmh, 0.0) * KMH_TO_MPH
    along, cross = decompose_wind(wind_mph, rel_angle)

    carry = estimate_wind_effect_yards(
        wind_speed_kmh, rel_angle, distance_yards, trajectory_multiplier
    )
    temp = estimate_temperature_effect_yards(distance_yards, temperature_f)
    lateral = estimate_lateral_displacement_yards(
        wind_speed_kmh, rel_angle, distance_yards, trajectory_multiplier
    )

    return WindEffect(
        relative_angle_deg=rel_angle,
        headwind_component_mph=-along,
        crosswind_component_mph=cross,
        carry_effect_yards=carry,
        temperature_effect_yards=temp,
        total_weather_effect_yards=carry + temp,
        lateral_displacement_yards=lateral,
        label=wind_label_16(rel_angle),
        color_category=wind_color_category(rel_angle),
    )
