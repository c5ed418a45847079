"""
Great-circle geodesy for SmackTrack.

Computes shot distances from GPS start/end coordinates and the initial
bearing (azimuth) of each shot for wind-relative calculations.

Spherical Earth of radius 6,371 km; no ellipsoidal correction. At golf
distances the spherical error is well under the GPS noise floor.

Inputs are assumed valid (see src.validation). Out-of-range or NaN
coordinates are not rejected here: NaN propagates through the math.
"""

import math

from src.utils.constants import EARTH_RADIUS_METERS, METERS_PER_YARD


def haversine_meters(start, end) -> float:
    """Great-circle distance between two coordinates (Haversine formula).

    Args:
        start: Object with ``lat``/``lon`` in degrees.
        end: Object with ``lat``/``lon`` in degrees.

    Returns:
        Distance in meters.
    """
    d_lat = math.radians(end.lat - start.lat)
    d_lon = math.radians(end.lon - start.lon)
    lat1 = math.radians(start.lat)
    lat2 = math.radians(end.lat)

    a = (math.sin(d_lat / 2) ** 2
         + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2)
    # Rounding can push near-antipodal pairs just past 1; NaN passes through
    if a > 1.0:
        a = 1.0
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_METERS * c


def bearing_degrees(start, end) -> float:
    """Initial bearing (forward azimuth) from start to end.

    When start == end the bearing is undefined; atan2(0, 0) yields 0.0,
    so identical points report due north.

    Returns:
        Bearing in degrees [0, 360). North = 0, East = 90,
        South = 180, West = 270.
    """
    lat1 = math.radians(start.lat)
    lat2 = math.radians(end.lat)
    d_lon = math.radians(end.lon - start.lon)

    x = math.sin(d_lon) * math.cos(lat2)
    y = (math.cos(lat1) * math.sin(lat2)
         - math.sin(lat1) * math.cos(lat2) * math.cos(d_lon))

    bearing = math.degrees(math.atan2(x, y))
    result = bearing % 360.0
    # Tiny negative bearings round up to exactly 360.0
    return 0.0 if result == 360.0 else result


def meters_to_yards(meters: float) -> float:
    """Convert meters to yards."""
    return meters / METERS_PER_YARD


def yards_to_meters(yards: float) -> float:
    """Convert yards to meters."""
    return yards * METERS_PER_YARD
