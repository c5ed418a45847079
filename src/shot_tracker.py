"""
Shot measurement workflow for SmackTrack.

Phases:
  CLUB_SELECT → CALIBRATING_START → WALKING → CALIBRATING_END → RESULT

  1. mark_start(): collect fixes for ~3.5 s, calibrate the tee position
  2. While walking, report live distance from the tee on every fix
  3. mark_end(): collect fixes for ~2 s and, concurrently, fetch the
     weather on a background thread
  4. Once both finish, distance + bearing + weather become a ShotResult

If calibration returns no result, the latest raw fix stands in for the
calibrated coordinate. If the weather lookup fails, the shot is recorded
with unknown weather (calm, code -1).
"""

import logging
import time
from enum import Enum
from typing import Optional, Sequence

from PyQt6.QtCore import QObject, QThread, pyqtSignal

from src.calibration import CalibrationStrategy, calibrate
from src.geodesy import bearing_degrees, haversine_meters, meters_to_yards
from src.location_provider import SampleWindow
from src.models.club import Club
from src.models.coordinate import Coordinate, PositionSample
from src.models.shot import ShotResult
from src.utils.constants import CALIBRATION_DURATION_MS, END_CALIBRATION_DURATION_MS
from src.validation import validate_distance_for_club
from src.weather import (
    WeatherCache,
    WeatherData,
    WeatherService,
    celsius_to_fahrenheit,
    degrees_to_compass,
    wmo_code_to_label,
)

logger = logging.getLogger(__name__)

# Recorded when the weather lookup fails
UNKNOWN_WEATHER = WeatherData(
    temperature_celsius=0.0,
    weather_code=-1,
    wind_speed_kmh=0.0,
    wind_direction_degrees=0,
)


class ShotPhase(str, Enum):
    CLUB_SELECT = "club_select"
    CALIBRATING_START = "calibrating_start"
    WALKING = "walking"
    CALIBRATING_END = "calibrating_end"
    RESULT = "result"


def _now_ms() -> int:
    return int(time.time() * 1000)


def resolve_position(
    samples: Sequence[PositionSample],
    strategy: CalibrationStrategy = CalibrationStrategy.WEIGHTED,
    fallback: Optional[PositionSample] = None,
) -> Optional[Coordinate]:
    """Calibrated coordinate for a finished batch, or the latest raw fix.

    Args:
        samples: Completed collection window.
        strategy: Calibration strategy to run.
        fallback: Fix to use when the batch is empty; defaults to the
                  last sample of the batch.

    Returns:
        Coordinate, or None if there is nothing to fall back on.
    """
    calibrated = calibrate(samples, strategy)
    if calibrated is not None:
        return calibrated.coordinate

    latest = samples[-1] if samples else fallback
    if latest is None:
        logger.error("No GPS fix available for position")
        return None

    logger.warning(
        f"Calibration failed on {len(samples)} samples; "
        f"using latest raw fix ±{latest.accuracy_m}m"
    )
    return latest.coordinate


def build_shot_result(
    club: Club,
    start: Coordinate,
    end: Coordinate,
    weather: Optional[WeatherData] = None,
    timestamp_ms: Optional[int] = None,
) -> ShotResult:
    """Assemble a ShotResult from calibrated endpoints and weather."""
    weather = weather or UNKNOWN_WEATHER
    distance_m = haversine_meters(start, end)
    distance_yd = meters_to_yards(distance_m)

    return ShotResult(
        club=club,
        distance_yards=round(distance_yd),
        distance_meters=round(distance_m),
        weather_description=wmo_code_to_label(weather.weather_code),
        temperature_f=round(celsius_to_fahrenheit(weather.temperature_celsius)),
        temperature_c=round(weather.temperature_celsius),
        wind_speed_kmh=weather.wind_speed_kmh,
        wind_direction_compass=degrees_to_compass(weather.wind_direction_degrees),
        wind_direction_degrees=weather.wind_direction_degrees,
        shot_bearing_degrees=bearing_degrees(start, end),
        timestamp_ms=timestamp_ms if timestamp_ms is not None else _now_ms(),
    )


class WeatherFetcher(QThread):
    """Runs one weather lookup off the calling thread.

    Signals:
        weather_ready(int, WeatherData | None): Request id and result,
            emitted when the lookup ends.
    """

    weather_ready = pyqtSignal(int, object)

    def __init__(self, service: WeatherService, lat: float, lon: float,
                 request_id: int = 0, parent=None):
        super().__init__(parent)
        self._service = service
        self._lat = lat
        self._lon = lon
        self.request_id = request_id

    def run(self):
        data = self._service.fetch_weather(self._lat, self._lon)
        self.weather_ready.emit(self.request_id, data)


class ShotTracker(QObject):
    """Drives one shot at a time from fixes to a ShotResult.

    Connect a location provider's ``location_updated`` to on_location().

    Signals:
        phase_changed(str): New ShotPhase value.
        start_calibrated(Coordinate): Tee position fixed.
        live_distance(float): Yards from the tee while walking.
        shot_completed(ShotResult): Shot measured and recorded.
        calibration_failed(str): No usable position; shot abandoned.
    """

    phase_changed = pyqtSignal(str)
    start_calibrated = pyqtSignal(object)
    live_distance = pyqtSignal(float)
    shot_completed = pyqtSignal(object)
    calibration_failed = pyqtSignal(str)

    def __init__(
        self,
        weather_service: Optional[WeatherService] = None,
        weather_cache: Optional[WeatherCache] = None,
        database=None,
        strategy: CalibrationStrategy = CalibrationStrategy.WEIGHTED,
        start_duration_ms: int = CALIBRATION_DURATION_MS,
        end_duration_ms: int = END_CALIBRATION_DURATION_MS,
        parent=None,
    ):
        """
        Args:
            weather_service: Weather lookup; None records unknown weather.
            weather_cache: Cache consulted before each lookup.
            database: Optional src.database.db.Database for persistence.
            strategy: Calibration strategy for both endpoints.
            start_duration_ms: Tee calibration window.
            end_duration_ms: Ball calibration window.
        """
        super().__init__(parent)
        self._weather_service = weather_service
        self._weather_cache = weather_cache or WeatherCache()
        self._db = database
        self._strategy = strategy
        self._start_duration_ms = start_duration_ms
        self._end_duration_ms = end_duration_ms

        self._phase = ShotPhase.CLUB_SELECT
        self._club: Club = Club.DRIVER
        self._latest: Optional[PositionSample] = None
        self._window: Optional[SampleWindow] = None
        self._start: Optional[Coordinate] = None
        self._end: Optional[Coordinate] = None
        self._weather: Optional[WeatherData] = None
        self._weather_done = False
        self._fetcher: Optional[WeatherFetcher] = None
        # Abandoned lookups, kept referenced until their thread finishes
        self._retired_fetchers: list[WeatherFetcher] = []
        self._weather_request = 0
        self._result: Optional[ShotResult] = None
        self._history: list[ShotResult] = []

    # =========================================================================
    # State
    # =========================================================================

    @property
    def phase(self) -> ShotPhase:
        return self._phase

    @property
    def club(self) -> Club:
        return self._club

    @property
    def start_coordinate(self) -> Optional[Coordinate]:
        return self._start

    @property
    def result(self) -> Optional[ShotResult]:
        return self._result

    @property
    def history(self) -> list[ShotResult]:
        return list(self._history)

    def _set_phase(self, phase: ShotPhase):
        self._phase = phase
        logger.info(f"Shot phase: {phase.value}")
        self.phase_changed.emit(phase.value)

    # =========================================================================
    # Workflow
    # =========================================================================

    def select_club(self, club: Club):
        self._club = club

    def mark_start(self, now_ms: Optional[int] = None):
        """Begin calibrating the tee position."""
        now_ms = now_ms if now_ms is not None else _now_ms()
        self._start = None
        self._end = None
        self._result = None
        self._window = SampleWindow(now_ms, self._start_duration_ms)
        self._set_phase(ShotPhase.CALIBRATING_START)

    def mark_end(self, now_ms: Optional[int] = None):
        """Begin calibrating the ball position and fetching weather."""
        if self._phase != ShotPhase.WALKING or self._start is None:
            logger.warning(f"mark_end ignored in phase {self._phase.value}")
            return

        now_ms = now_ms if now_ms is not None else _now_ms()
        self._end = None
        self._weather = None
        self._weather_done = False
        self._window = SampleWindow(now_ms, self._end_duration_ms)
        self._set_phase(ShotPhase.CALIBRATING_END)
        self._start_weather_lookup()

    def finish_window(self):
        """Close the current collection window early and calibrate."""
        if self._window is not None:
            self._window.close()
            self._on_window_complete()

    def on_location(self, sample: PositionSample):
        """Slot for location provider fixes."""
        self._latest = sample

        if self._phase in (ShotPhase.CALIBRATING_START,
                           ShotPhase.CALIBRATING_END):
            if self._window is None:
                return
            self._window.offer(sample)
            if self._window.is_complete:
                self._on_window_complete()

        elif self._phase == ShotPhase.WALKING and self._start is not None:
            yards = meters_to_yards(haversine_meters(self._start, sample))
            self.live_distance.emit(yards)

    def next_shot(self):
        """Discard in-flight state and return to club selection."""
        self._retire_fetcher()
        self._window = None
        self._start = None
        self._end = None
        self._result = None
        self._set_phase(ShotPhase.CLUB_SELECT)

    def reset(self):
        self.next_shot()

    def shutdown(self, timeout_ms: int = 3000):
        """Wait for in-flight and abandoned weather lookups to finish."""
        self._retire_fetcher()
        for fetcher in list(self._retired_fetchers):
            fetcher.wait(timeout_ms)
        self._retired_fetchers.clear()

    # =========================================================================
    # Internals
    # =========================================================================

    def _on_window_complete(self):
        batch = self._window.batch()
        self._window = None
        coord = resolve_position(batch, self._strategy, fallback=self._latest)

        if coord is None:
            self.calibration_failed.emit("No GPS fix available")
            self.next_shot()
            return

        if self._phase == ShotPhase.CALIBRATING_START:
            self._start = coord
            self.start_calibrated.emit(coord)
            self._set_phase(ShotPhase.WALKING)
        elif self._phase == ShotPhase.CALIBRATING_END:
            self._end = coord
            self._maybe_complete()

    def _start_weather_lookup(self):
        cached = self._weather_cache.get()
        if cached is not None:
            logger.debug("Using cached weather")
            self._weather = cached
            self._weather_done = True
            return

        snap = self._latest
        if (self._weather_service is None or snap is None
                or (snap.lat == 0.0 and snap.lon == 0.0)):
            self._weather_done = True
            return

        self._retire_fetcher()
        self._weather_request += 1
        self._fetcher = WeatherFetcher(self._weather_service, snap.lat, snap.lon,
                                       request_id=self._weather_request)
        self._fetcher.weather_ready.connect(self._on_weather_ready)
        self._fetcher.start()

    def _retire_fetcher(self):
        """Detach the current lookup so a late result cannot reach a new shot."""
        fetcher = self._fetcher
        if fetcher is None:
            return
        self._fetcher = None
        self._weather_request += 1
        if fetcher.isFinished():
            return
        self._retired_fetchers.append(fetcher)
        fetcher.finished.connect(lambda: self._release_fetcher(fetcher))

    def _release_fetcher(self, fetcher: WeatherFetcher):
        if fetcher in self._retired_fetchers:
            self._retired_fetchers.remove(fetcher)

    def _on_weather_ready(self, request_id: int, data: Optional[WeatherData]):
        if request_id != self._weather_request:
            logger.debug(f"Ignoring stale weather result #{request_id}")
            return
        if data is not None:
            self._weather_cache.put(data)
        self._weather = data
        self._weather_done = True
        self._maybe_complete()

    def _maybe_complete(self):
        if (self._phase != ShotPhase.CALIBRATING_END or self._end is None
                or not self._weather_done):
            return

        result = build_shot_result(self._club, self._start, self._end,
                                   self._weather)
        plausible = validate_distance_for_club(result.distance_yards, result.club)
        if not plausible.is_valid:
            logger.warning(plausible.errors[0])
        self._result = result
        self._history.append(result)
        if self._db is not None:
            self._db.save_shot(result)

        logger.info(
            f"Shot recorded: {result.club.display_name} "
            f"{result.distance_yards}yd ({result.distance_meters}m), "
            f"bearing={result.shot_bearing_degrees:.0f}°, "
            f"wind={result.wind_speed_kmh:.0f}km/h from "
            f"{result.wind_direction_compass}"
        )
        self._set_phase(ShotPhase.RESULT)
        self.shot_completed.emit(result)
