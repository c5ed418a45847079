"""
Position data models for SmackTrack.

Coordinate: A latitude/longitude pair in degrees (WGS-84, spherical math).
PositionSample: A single raw fix from the location service.
CalibratedPosition: Best-estimate coordinate produced by calibration.
"""

import time
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in degrees.

    Valid coordinates have lat in [-90, 90] and lon in [-180, 180].
    Range checks live in src.validation; geodesy assumes valid input.
    """
    lat: float
    lon: float


@dataclass(frozen=True)
class PositionSample:
    """A single GPS reading with reported accuracy.

    Attributes:
        lat: Latitude in degrees.
        lon: Longitude in degrees.
        accuracy_m: Reported horizontal accuracy radius (meters,
                    smaller = more precise).
        timestamp_ms: Capture time in epoch milliseconds.
    """
    lat: float
    lon: float
    accuracy_m: float
    timestamp_ms: int = field(default_factory=lambda: int(time.time() * 1000))

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.lat, self.lon)


@dataclass(frozen=True)
class CalibratedPosition:
    """Result of GPS calibration.

    Attributes:
        coordinate: Best-estimate position.
        estimated_accuracy_m: Residual spread of the inliers (meters).
        sample_count: Number of samples that survived outlier rejection.
    """
    coordinate: Coordinate
    estimated_accuracy_m: float
    sample_count: int
