"""
Location sampling for SmackTrack.

MockLocationProvider simulates a device positioning service: a stream
of GPS fixes at a fixed cadence (~500 ms), each tagged with a reported
accuracy radius, scattered around a movable "true" position. Presets
model different sky-view conditions.

SampleWindow collects fixes over a bounded wall-clock window and only
hands out the batch once the window has closed, so calibration never
sees a collection still in progress.

Usage:
    provider = MockLocationProvider(origin=Coordinate(33.749, -84.388))
    provider.location_updated.connect(tracker.on_location)
    provider.start()
"""

import logging
import math
import random
import time
from typing import Optional

from PyQt6.QtCore import QThread, pyqtSignal

from src.models.coordinate import Coordinate, PositionSample
from src.utils.constants import CALIBRATION_INTERVAL_MS, EARTH_RADIUS_METERS

logger = logging.getLogger(__name__)


# Noise presets: horizontal error std-dev (m), reported accuracy
# (mean, std-dev) in meters, and probability of a multipath spike
PRESETS = {
    "open_sky": {
        "description": "Fairway with a clear view of the sky",
        "error_m": 1.5,
        "accuracy": (4.0, 1.0),
        "spike_rate": 0.02,
    },
    "tree_cover": {
        "description": "Tree-lined hole with partial sky blockage",
        "error_m": 4.0,
        "accuracy": (9.0, 3.0),
        "spike_rate": 0.08,
    },
    "urban_canyon": {
        "description": "Range between buildings with heavy multipath",
        "error_m": 8.0,
        "accuracy": (16.0, 6.0),
        "spike_rate": 0.15,
    },
}

SPIKE_DISTANCE_M = (150.0, 600.0)   # Multipath jump range
COLD_START_ERROR_FACTOR = 6.0       # First fix after start is far noisier


def offset_coordinate(origin: Coordinate, north_m: float,
                      east_m: float) -> Coordinate:
    """Shift a coordinate by small north/east offsets in meters."""
    d_lat = math.degrees(north_m / EARTH_RADIUS_METERS)
    d_lon = math.degrees(
        east_m / (EARTH_RADIUS_METERS * math.cos(math.radians(origin.lat)))
    )
    return Coordinate(origin.lat + d_lat, origin.lon + d_lon)


class MockLocationProvider(QThread):
    """Simulates GPS fixes for development and testing without a device.

    Signals:
        location_updated(PositionSample): Emitted for every simulated fix.
        provider_started(): Emitted when the sampling loop starts.
        provider_stopped(): Emitted when the sampling loop exits.
    """

    location_updated = pyqtSignal(object)  # PositionSample
    provider_started = pyqtSignal()
    provider_stopped = pyqtSignal()

    def __init__(
        self,
        origin: Coordinate,
        preset: str = "open_sky",
        interval_ms: int = CALIBRATION_INTERVAL_MS,
        seed: Optional[int] = None,
        parent=None,
    ):
        """
        Args:
            origin: Initial true position.
            preset: Noise preset name (see PRESETS).
            interval_ms: Milliseconds between fixes.
            seed: Random seed for reproducible fix streams.
        """
        super().__init__(parent)
        self._running = False
        self._position = origin
        self._preset_name = preset
        self._preset = PRESETS.get(preset, PRESETS["open_sky"])
        self._interval_ms = interval_ms
        self._rng = random.Random(seed)
        self._fix_count = 0

    @property
    def position(self) -> Coordinate:
        """Current true position."""
        return self._position

    def move_to(self, position: Coordinate):
        """Move the true position (e.g. the golfer walked to the ball)."""
        self._position = position

    def walk(self, distance_m: float, bearing_deg: float):
        """Move the true position along a bearing."""
        rad = math.radians(bearing_deg)
        self._position = offset_coordinate(
            self._position,
            north_m=distance_m * math.cos(rad),
            east_m=distance_m * math.sin(rad),
        )

    def set_preset(self, preset: str):
        """Change the noise preset."""
        if preset in PRESETS:
            self._preset_name = preset
            self._preset = PRESETS[preset]
            logger.info(f"Mock GPS preset changed to: {preset}")

    def run(self):
        """Main thread loop: emit fixes at the configured interval."""
        self._running = True
        self._fix_count = 0
        logger.info(
            f"Mock location provider started "
            f"(preset={self._preset_name}, interval={self._interval_ms}ms)"
        )
        self.provider_started.emit()

        while self._running:
            self._generate_fix()
            # Sleep in small increments so we can stop quickly
            elapsed = 0
            while elapsed < self._interval_ms and self._running:
                time.sleep(0.05)
                elapsed += 50

        self.provider_stopped.emit()
        logger.info("Mock location provider stopped")

    def _generate_fix(self, timestamp_ms: Optional[int] = None) -> PositionSample:
        """Generate and emit a single simulated fix."""
        p = self._preset
        error_m = p["error_m"]
        if self._fix_count == 0:
            error_m *= COLD_START_ERROR_FACTOR

        north = self._rng.gauss(0, error_m)
        east = self._rng.gauss(0, error_m)
        if self._rng.random() < p["spike_rate"]:
            jump = self._rng.uniform(*SPIKE_DISTANCE_M)
            angle = self._rng.uniform(0, 2 * math.pi)
            north += jump * math.cos(angle)
            east += jump * math.sin(angle)

        acc_mean, acc_std = p["accuracy"]
        accuracy = max(1.0, self._rng.gauss(acc_mean, acc_std))

        coord = offset_coordinate(self._position, north, east)
        self._fix_count += 1
        sample = PositionSample(
            lat=coord.lat,
            lon=coord.lon,
            accuracy_m=round(accuracy, 1),
            timestamp_ms=timestamp_ms if timestamp_ms is not None
            else int(time.time() * 1000),
        )
        logger.debug(
            f"Mock fix #{self._fix_count}: ({sample.lat:.6f}, {sample.lon:.6f}) "
            f"±{sample.accuracy_m}m"
        )
        self.location_updated.emit(sample)
        return sample

    def trigger_fix(self, timestamp_ms: Optional[int] = None) -> PositionSample:
        """Manually emit a single fix (for testing / stepping)."""
        return self._generate_fix(timestamp_ms)

    def stop(self):
        """Signal the thread to stop."""
        self._running = False

    def is_running(self) -> bool:
        return self._running


class SampleWindow:
    """Bounded collection window for one calibration.

    The window opens at ``start_ms`` and accepts samples whose timestamp
    falls before ``start_ms + duration_ms``. It closes when a sample
    arrives at or after the end time, when it holds ``max_samples``
    samples, or when close() is called.

    Args:
        start_ms: Opening time (epoch ms).
        duration_ms: Window length.
        max_samples: Upper bound on collected samples.
    """

    def __init__(self, start_ms: int, duration_ms: int,
                 max_samples: Optional[int] = None):
        self.start_ms = start_ms
        self.end_ms = start_ms + duration_ms
        self.max_samples = max_samples
        self._samples: list[PositionSample] = []
        self._closed = False

    @property
    def is_complete(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._samples)

    def offer(self, sample: PositionSample) -> bool:
        """Add a sample if the window is still open.

        Returns:
            True if the sample was collected.
        """
        if self._closed or sample.timestamp_ms < self.start_ms:
            return False
        if sample.timestamp_ms >= self.end_ms:
            self._closed = True
            return False

        self._samples.append(sample)
        if self.max_samples is not None and len(self._samples) >= self.max_samples:
            self._closed = True
        return True

    def close(self):
        self._closed = True

    def batch(self) -> tuple[PositionSample, ...]:
        """The collected samples, in arrival order.

        Raises:
            RuntimeError: If the window is still open.
        """
        if not self._closed:
            raise RuntimeError("Sample window is still collecting")
        return tuple(self._samples)
