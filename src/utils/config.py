"""
Application configuration management for SmackTrack.

Handles display units, trajectory preference, and GPS calibration timing.
Settings are persisted to ~/.smacktrack/config.json.
"""

import json
from pathlib import Path
from typing import Optional

from src.utils.constants import (
    CALIBRATION_DURATION_MS,
    END_CALIBRATION_DURATION_MS,
    CALIBRATION_INTERVAL_MS,
)


class Config:
    """Manages application settings with JSON file persistence."""

    _APP_DIR = Path.home() / ".smacktrack"
    _CONFIG_FILE = _APP_DIR / "config.json"
    _DB_PATH = _APP_DIR / "smacktrack.db"

    _defaults = {
        "distance_unit": "yards",       # "yards", "meters"
        "wind_unit": "mph",             # "mph", "kmh"
        "temperature_unit": "F",        # "F", "C"
        "trajectory": "MID",            # "LOW", "MID", "HIGH"
        "calibration_strategy": "weighted",  # "weighted", "legacy"
        "calibration_duration_ms": CALIBRATION_DURATION_MS,
        "end_calibration_duration_ms": END_CALIBRATION_DURATION_MS,
        "calibration_interval_ms": CALIBRATION_INTERVAL_MS,
        "fetch_weather": True,
        "mock_preset": "open_sky",
        "enabled_clubs": [],            # empty = all clubs
    }

    _instance: Optional["Config"] = None
    _settings: dict

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._settings = {}
            cls._instance._load()
        return cls._instance

    def _load(self):
        """Load settings from disk, merging with defaults."""
        self._APP_DIR.mkdir(parents=True, exist_ok=True)

        if self._CONFIG_FILE.exists():
            try:
                with open(self._CONFIG_FILE) as f:
                    saved = json.load(f)
                # Merge: defaults first, then saved values override
                self._settings = {**self._defaults, **saved}
            except (json.JSONDecodeError, IOError):
                self._settings = dict(self._defaults)
        else:
            self._settings = dict(self._defaults)

    def save(self):
        """Persist current settings to disk."""
        self._APP_DIR.mkdir(parents=True, exist_ok=True)
        with open(self._CONFIG_FILE, "w") as f:
            json.dump(self._settings, f, indent=2)

    def get(self, key: str, default=None):
        """Get a setting value."""
        return self._settings.get(key, default)

    def set(self, key: str, value):
        """Set a setting value and save."""
        self._settings[key] = value
        self.save()

    @classmethod
    def get_trajectory(cls):
        """Get the saved trajectory, falling back to MID if unrecognised."""
        from src.models.club import Trajectory

        name = cls().get("trajectory", "MID")
        try:
            return Trajectory[name]
        except KeyError:
            return Trajectory.MID

    @classmethod
    def get_units(cls):
        """Get the (distance, wind, temperature) display units.

        Unrecognised values fall back to yards, mph and °F.
        """
        from src.models.club import DistanceUnit, TemperatureUnit, WindUnit

        config = cls()
        units = []
        for key, unit_cls, fallback in (
            ("distance_unit", DistanceUnit, DistanceUnit.YARDS),
            ("wind_unit", WindUnit, WindUnit.MPH),
            ("temperature_unit", TemperatureUnit, TemperatureUnit.FAHRENHEIT),
        ):
            try:
                units.append(unit_cls(config.get(key)))
            except ValueError:
                units.append(fallback)
        return tuple(units)

    @classmethod
    def get_enabled_clubs(cls) -> set:
        """Get the clubs in the bag; an empty list means every club."""
        from src.models.club import Club

        clubs = set()
        for name in cls().get("enabled_clubs") or []:
            try:
                clubs.add(Club.from_name(str(name)))
            except ValueError:
                continue
        return clubs or set(Club)

    @classmethod
    def get_db_path(cls) -> Path:
        """Get the SQLite database file path."""
        instance = cls()
        instance._APP_DIR.mkdir(parents=True, exist_ok=True)
        return instance._DB_PATH
