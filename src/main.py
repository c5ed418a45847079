"""
SmackTrack shot distance tracker: entry point.

Supports two modes:
  - Simulate (default): measure one shot from a simulated GPS stream,
    including live weather and the wind/temperature breakdown
  - History: print per-club distance stats from saved shots

Usage:
    python -m src.main                              # Simulate a 7 Iron, ~150 yd
    python -m src.main --club Driver --distance 240 --bearing 45
    python -m src.main --preset urban_canyon --strategy legacy
    python -m src.main --no-weather
    python -m src.main --history --adjusted --trajectory HIGH
"""

import argparse
import logging
import signal
import sys

from PyQt6.QtCore import QCoreApplication, QTimer

from src.calibration import CalibrationStrategy
from src.geodesy import yards_to_meters
from src.location_provider import PRESETS, MockLocationProvider
from src.models.achievement import check_achievements
from src.models.club import Club, DistanceUnit, TemperatureUnit, Trajectory, WindUnit
from src.models.coordinate import Coordinate
from src.models.session import Session
from src.utils.config import Config
from src.validation import validate_coordinate, validate_distance
from src.wind import wind_strength_label

WALK_STEPS = 10
WALK_STEP_MS = 200
SETTLE_MS = 1000
DEFAULT_UNITS = (DistanceUnit.YARDS, WindUnit.MPH, TemperatureUnit.FAHRENHEIT)


def setup_logging(verbose: bool = False):
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def print_shot(shot, trajectory: Trajectory, units=DEFAULT_UNITS):
    """Print a shot result with its weather breakdown.

    units is (DistanceUnit, WindUnit, TemperatureUnit); the wind and
    temperature effects are always reported in yards.
    """
    distance_unit, wind_unit, temperature_unit = units
    suffix = "yd" if distance_unit == DistanceUnit.YARDS else "m"
    effect = shot.weather_effect(trajectory)
    print(f"\n{'='*60}")
    print(f"  {shot.club.display_name}")
    print(f"{'='*60}")
    print(f"  Distance:      {shot.distance_for(distance_unit)} {suffix}")
    print(f"  Bearing:       {shot.shot_bearing_degrees:.0f}°")
    print(f"  Weather:       {shot.weather_description}, "
          f"{shot.format_temperature(temperature_unit)}")
    print(f"  Wind:          {shot.format_wind_speed(wind_unit)} from "
          f"{shot.wind_direction_compass} "
          f"({wind_strength_label(shot.wind_speed_kmh)})")
    if shot.has_weather_effect():
        print(f"  Relative:      {effect.label} ({effect.relative_angle_deg:+.0f}°)")
        print(f"  Wind effect:   {effect.carry_effect_yards:+d} yd carry, "
              f"{effect.lateral_displacement_yards:+.1f} yd lateral")
        print(f"  Temp effect:   {effect.temperature_effect_yards:+d} yd")
        print(f"  Adjusted:      {shot.adjusted_distance(distance_unit, trajectory)} "
              f"{suffix} (calm, 70°F)")
    print(f"{'='*60}")


def announce_achievements(database, shot, enabled_clubs) -> list:
    """Check the saved shot for newly unlocked achievements and record them."""
    unlocked = database.get_unlocked_achievements()
    earned = check_achievements(database.get_shots(), shot, unlocked, enabled_clubs)
    if earned:
        database.save_achievements([a.storage_key for a in earned], shot.timestamp_ms)
    for achievement in earned:
        print(f"  🏆 {achievement.category.display_name} "
              f"{achievement.tier.name.title()}: {achievement.tier_def.description}")
    return earned



def run_simulation(args, config: Config):
    """Measure one simulated shot through the full workflow."""
    from src.shot_tracker import ShotTracker
    from src.weather import WeatherService

    app = QCoreApplication(sys.argv)

    database = None
    if not args.no_save:
        from src.database.db import Database
        database = Database()

    provider = MockLocationProvider(
        origin=Coordinate(args.lat, args.lon),
        preset=args.preset,
        interval_ms=config.get("calibration_interval_ms"),
        seed=args.seed,
    )
    tracker = ShotTracker(
        weather_service=None if args.no_weather else WeatherService(),
        database=database,
        strategy=CalibrationStrategy(args.strategy),
        start_duration_ms=config.get("calibration_duration_ms"),
        end_duration_ms=config.get("end_calibration_duration_ms"),
    )
    tracker.select_club(Club.from_name(args.club))
    trajectory = Trajectory[args.trajectory]
    units = config.get_units()

    provider.location_updated.connect(tracker.on_location)

    step_m = yards_to_meters(args.distance) / WALK_STEPS
    walk_timer = QTimer()
    steps_taken = [0]

    def walk_step():
        provider.walk(step_m, args.bearing)
        steps_taken[0] += 1
        if steps_taken[0] >= WALK_STEPS:
            walk_timer.stop()
            print("  At the ball, calibrating end position...")
            QTimer.singleShot(SETTLE_MS, tracker.mark_end)

    walk_timer.timeout.connect(walk_step)

    def on_start(coord):
        print(f"  Tee: ({coord.lat:.6f}, {coord.lon:.6f}), walking...")
        walk_timer.start(WALK_STEP_MS)

    def on_live(yards):
        logging.debug(f"Live distance: {yards:.0f} yd")

    def on_complete(shot):
        print_shot(shot, trajectory, units)
        if database:
            announce_achievements(database, shot, config.get_enabled_clubs())
            history = Session(shots=database.get_shots(club=shot.club))
            pct = history.percentile_among_club(shot)
            if pct is not None:
                print(f"  Better than {pct:.0f}% of your "
                      f"{shot.club.display_name} shots")
        shutdown()

    def on_failed(msg):
        print(f"\n❌ Calibration failed: {msg}")
        shutdown(1)

    def shutdown(code: int = 0):
        provider.stop()
        provider.wait(3000)
        tracker.shutdown()
        if database:
            database.close()
        app.exit(code)

    tracker.start_calibrated.connect(on_start)
    tracker.live_distance.connect(on_live)
    tracker.shot_completed.connect(on_complete)
    tracker.calibration_failed.connect(on_failed)

    signal.signal(signal.SIGINT, lambda sig, frame: shutdown(130))

    provider.start()
    print(f"\n📍 Calibrating tee position ({args.preset})...")
    tracker.mark_start()

    # Keep the event loop responsive to SIGINT
    timer = QTimer()
    timer.timeout.connect(lambda: None)
    timer.start(100)

    sys.exit(app.exec())


def run_history(args, config: Config):
    """Print per-club stats from the shot database."""
    from src.database.db import Database

    db = Database()
    session = Session(shots=db.get_shots(), trajectory=Trajectory[args.trajectory])
    db.close()

    if not session.shots:
        print("No shots recorded yet.")
        return

    distance_unit = config.get_units()[0]
    label = "weather-adjusted" if args.adjusted else "raw"
    print(f"\n{session.num_shots} shots ({label}, {distance_unit.value})")
    print(f"{'Club':<10}{'Shots':>6}{'Avg':>8}{'Min':>6}{'Max':>6}{'Std':>7}")
    for stats in session.get_stats(distance_unit, args.adjusted):
        print(f"{stats['club']:<10}{stats['num_shots']:>6}"
              f"{stats['avg_distance']:>8}{stats['min_distance']:>6}"
              f"{stats['max_distance']:>6}{stats.get('std_distance', '-'):>7}")


def main():
    config = Config()

    parser = argparse.ArgumentParser(
        description="SmackTrack golf shot distance tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--history", action="store_true",
        help="Print per-club stats from saved shots",
    )
    parser.add_argument(
        "--adjusted", action="store_true",
        help="Remove wind/temperature effect from history stats",
    )
    parser.add_argument(
        "--trajectory", type=str.upper, default=config.get_trajectory().name,
        choices=[t.name for t in Trajectory],
        help="Ball flight height, scales wind exposure (default: from config)",
    )

    # Simulation options
    parser.add_argument(
        "--club", type=str, default="7 Iron",
        help="Club for the simulated shot (default: 7 Iron)",
    )
    parser.add_argument(
        "--distance", type=float, default=150.0,
        help="Simulated walk distance in yards (default: 150)",
    )
    parser.add_argument(
        "--bearing", type=float, default=0.0,
        help="Simulated shot bearing in degrees (default: 0 = north)",
    )
    parser.add_argument("--lat", type=float, default=33.749)
    parser.add_argument("--lon", type=float, default=-84.388)
    parser.add_argument(
        "--preset", type=str, default=config.get("mock_preset", "open_sky"),
        choices=list(PRESETS),
        help="GPS noise preset (default: from config)",
    )
    parser.add_argument(
        "--strategy", type=str,
        default=config.get("calibration_strategy", "weighted"),
        choices=[s.value for s in CalibrationStrategy],
        help="Calibration strategy (default: weighted)",
    )
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--no-weather", action="store_true",
        default=not config.get("fetch_weather", True),
        help="Skip the weather lookup",
    )
    parser.add_argument(
        "--no-save", action="store_true",
        help="Do not persist the simulated shot",
    )

    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()
    setup_logging(args.verbose)

    origin_check = validate_coordinate(Coordinate(args.lat, args.lon))
    if not origin_check.is_valid:
        parser.error("; ".join(origin_check.errors))
    distance_check = validate_distance(args.distance)
    if not distance_check.is_valid:
        parser.error("; ".join(distance_check.errors))

    if args.history:
        run_history(args, config)
    else:
        run_simulation(args, config)


if __name__ == "__main__":
    main()
