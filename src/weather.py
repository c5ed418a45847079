"""
Current weather lookup for SmackTrack (Open-Meteo API).

Weather is a nice-to-have and must never block shot tracking: every
network or parse failure is logged and reported as None. The request
uses separate connect/read timeouts so a dead network fails fast.

Also provides the small lookups the shot record needs: WMO weather
code labels, 8-point compass names, and Celsius → Fahrenheit.
"""

import logging
import time
from bisect import bisect_right
from dataclasses import dataclass
from typing import Callable, Optional

import requests

from src.utils.constants import (
    WEATHER_BASE_URL,
    WEATHER_CURRENT_FIELDS,
    WEATHER_CONNECT_TIMEOUT_S,
    WEATHER_READ_TIMEOUT_S,
    WEATHER_CACHE_DURATION_MS,
    WMO_CODE_LABELS,
    COMPASS_BREAKPOINTS_DEG,
    COMPASS_LABELS,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeatherData:
    """Current conditions at a coordinate.

    Attributes:
        temperature_celsius: Air temperature at 2 m.
        weather_code: WMO weather interpretation code.
        wind_speed_kmh: Wind speed at 10 m.
        wind_direction_degrees: Direction the wind blows FROM (0 = N).
    """
    temperature_celsius: float
    weather_code: int
    wind_speed_kmh: float
    wind_direction_degrees: int


class WeatherService:
    """Fetches current conditions from Open-Meteo.

    Attributes:
        session: HTTP session (reused across fetches).
        timeout: (connect, read) timeout in seconds.
    """

    def __init__(self, session: Optional[requests.Session] = None,
                 base_url: str = WEATHER_BASE_URL,
                 connect_timeout: float = WEATHER_CONNECT_TIMEOUT_S,
                 read_timeout: float = WEATHER_READ_TIMEOUT_S):
        self.session = session or requests.Session()
        self.base_url = base_url
        self.timeout = (connect_timeout, read_timeout)

    def fetch_weather(self, lat: float, lon: float) -> Optional[WeatherData]:
        """Fetch current weather for the given coordinates.

        Returns:
            Parsed WeatherData, or None if the request fails or the
            response is malformed.
        """
        params = {
            "latitude": lat,
            "longitude": lon,
            "current": WEATHER_CURRENT_FIELDS,
        }
        try:
            response = self.session.get(
                self.base_url, params=params, timeout=self.timeout
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logger.warning(f"Weather request failed: {e}")
            return None

        try:
            payload = response.json()
        except ValueError as e:
            logger.warning(f"Weather response is not JSON: {e}")
            return None
        return parse_weather(payload)


def parse_weather(payload) -> Optional[WeatherData]:
    """Parse a decoded Open-Meteo response.

    Returns:
        WeatherData, or None if the JSON structure is unexpected.
    """
    try:
        current = payload["current"]
        return WeatherData(
            temperature_celsius=float(current["temperature_2m"]),
            weather_code=int(current["weather_code"]),
            wind_speed_kmh=float(current["wind_speed_10m"]),
            wind_direction_degrees=int(current["wind_direction_10m"]),
        )
    except (ValueError, KeyError, TypeError) as e:
        logger.warning(f"Malformed weather response: {e}")
        return None


class WeatherCache:
    """Single-entry in-memory weather cache with 1-hour expiry.

    Prevents repeated API calls when several shots are taken in quick
    succession.

    Args:
        clock: Returns the current time in epoch milliseconds.
        ttl_ms: Entry lifetime in milliseconds.
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None,
                 ttl_ms: int = WEATHER_CACHE_DURATION_MS):
        self._clock = clock or (lambda: int(time.time() * 1000))
        self._ttl_ms = ttl_ms
        self._data: Optional[WeatherData] = None
        self._timestamp = 0

    def get(self) -> Optional[WeatherData]:
        """Cached data if still fresh, else None."""
        if self._data is None:
            return None
        age = self._clock() - self._timestamp
        return self._data if age < self._ttl_ms else None

    def put(self, data: WeatherData):
        self._data = data
        self._timestamp = self._clock()

    def clear(self):
        self._data = None
        self._timestamp = 0


def wmo_code_to_label(code: int) -> str:
    """Human-readable label for a WMO weather code ("Unknown" if unmapped)."""
    return WMO_CODE_LABELS.get(code, "Unknown")


def degrees_to_compass(degrees: int) -> str:
    """8-point compass label (N, NE, E, ...) for a wind direction.

    Raises:
        ValueError: If degrees is outside 0-360.
    """
    if not 0 <= degrees <= 360:
        raise ValueError(f"Degrees must be 0-360, got {degrees}")
    return COMPASS_LABELS[bisect_right(COMPASS_BREAKPOINTS_DEG, degrees % 360)]


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 9.0 / 5.0 + 32.0
