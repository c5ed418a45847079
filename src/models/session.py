"""
Session model for SmackTrack.

A session is the shot history the golfer has built up, with per-club
aggregate statistics. Stats can be reported raw or weather-adjusted
(wind/temperature effect removed), recomputed from each shot's stored
weather scalars.
"""

from dataclasses import dataclass, field
from statistics import mean, stdev
from typing import Optional

from src.models.club import Club, DistanceUnit, Trajectory
from src.models.shot import ShotResult

# Prior shots needed before a percentile is meaningful
MIN_SHOTS_FOR_PERCENTILE = 5


@dataclass
class Session:
    """A collection of shots.

    Attributes:
        shots: Shots in chronological order.
        trajectory: Trajectory setting used for weather-adjusted stats.
    """
    shots: list[ShotResult] = field(default_factory=list)
    trajectory: Trajectory = Trajectory.MID

    def add_shot(self, shot: ShotResult):
        """Add a shot to this session."""
        self.shots.append(shot)

    @property
    def num_shots(self) -> int:
        return len(self.shots)

    def shots_for_club(self, club: Club) -> list[ShotResult]:
        return [s for s in self.shots if s.club == club]

    def clubs_used(self) -> list[Club]:
        """Clubs with at least one shot, in bag order."""
        return sorted({s.club for s in self.shots}, key=lambda c: c.sort_order)

    def get_club_stats(self, club: Club,
                       unit: DistanceUnit = DistanceUnit.YARDS,
                       weather_adjusted: bool = False) -> dict:
        """Compute aggregate distance statistics for one club."""
        shots = self.shots_for_club(club)
        if not shots:
            return {}

        distances = [
            s.distance_for(unit, weather_adjusted, self.trajectory)
            for s in shots
        ]
        stats = {
            "club": club.display_name,
            "num_shots": len(shots),
            "avg_distance": round(mean(distances), 1),
            "min_distance": min(distances),
            "max_distance": max(distances),
        }
        if len(distances) > 1:
            stats["std_distance"] = round(stdev(distances), 1)
        return stats

    def get_stats(self, unit: DistanceUnit = DistanceUnit.YARDS,
                  weather_adjusted: bool = False) -> list[dict]:
        """Per-club stats for every club used, in bag order."""
        return [
            self.get_club_stats(club, unit, weather_adjusted)
            for club in self.clubs_used()
        ]

    def percentile_among_club(self, shot: ShotResult,
                              unit: DistanceUnit = DistanceUnit.YARDS
                              ) -> Optional[float]:
        """Percentile (0-100) of this shot among prior shots with the same club.

        Returns None if fewer than 5 other shots exist for the club.
        """
        prior = [
            s for s in self.shots
            if s.club == shot.club and s.timestamp_ms != shot.timestamp_ms
        ]
        if len(prior) < MIN_SHOTS_FOR_PERCENTILE:
            return None
        this_distance = shot.primary_distance(unit)
        beaten = sum(1 for s in prior if this_distance >= s.primary_distance(unit))
        return beaten / len(prior) * 100
