"""
Tiered achievements for SmackTrack.

Twelve categories, each with five tiers (Bronze → Diamond). A category's
tiers share one measured quantity; a tier unlocks when that quantity
reaches its threshold. check_achievements() is pure: it looks at the
whole shot history plus the shot just recorded, and returns every tier
that is now earned but not yet unlocked. Lower tiers are backfilled, so
a first-ever 260-yard drive unlocks Bomber Bronze, Silver and Gold at
once.

Unlocked tiers are persisted by storage key ("BOMBER_GOLD").
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional

from src.models.club import Club, ClubCategory
from src.models.shot import ShotResult
from src.utils.constants import (
    DAWN_PATROL_BEFORE_HOUR,
    NIGHT_OWL_FROM_HOUR,
    SESSION_GAP_MS,
)


class AchievementTier(Enum):
    BRONZE = 1
    SILVER = 2
    GOLD = 3
    PLATINUM = 4
    DIAMOND = 5


@dataclass(frozen=True)
class TierDef:
    """One tier's unlock rule.

    Attributes:
        threshold: Value the category's quantity must reach. -1 marks
            the "every enabled club" tier of Full Bag.
        description: Human-readable unlock condition.
        secondary_threshold: Extra limit (Sniper: max spread in yards).
    """
    threshold: int
    description: str
    secondary_threshold: int = 0


def _counted(noun: str, thresholds: tuple[int, ...]) -> list[TierDef]:
    return [TierDef(t, noun.format(n=t)) for t in thresholds]


class AchievementCategory(Enum):
    """All achievement categories; each value is (display_name, tiers)."""
    SHOT_COUNT = ("Shot Count", _counted("Track {n} shots", (1, 25, 100, 250, 500)))
    BOMBER = ("Bomber", _counted("Driver over {n} yards", (200, 225, 250, 275, 300)))
    FULL_BAG = ("Full Bag", [
        TierDef(3, "Use 3 different clubs"),
        TierDef(5, "Use 5 different clubs"),
        TierDef(8, "Use 8 different clubs"),
        TierDef(12, "Use 12 different clubs"),
        TierDef(-1, "Use every enabled club"),
    ])
    PB_MACHINE = ("PB Machine", _counted("Beat your PB {n} times", (1, 3, 10, 25, 50)))
    WIND_WARRIOR = ("Wind Warrior", _counted("Shot in {n}+ km/h wind", (15, 20, 30, 40, 50)))
    SNIPER = ("Sniper", [
        TierDef(3, "3 same-club shots within 15 yds", secondary_threshold=15),
        TierDef(5, "5 same-club shots within 15 yds", secondary_threshold=15),
        TierDef(5, "5 same-club shots within 10 yds", secondary_threshold=10),
        TierDef(7, "7 same-club shots within 10 yds", secondary_threshold=10),
        TierDef(10, "10 same-club shots within 10 yds", secondary_threshold=10),
    ])
    HOT_STREAK = ("Hot Streak", _counted("{n} consecutive above club avg", (2, 3, 5, 7, 10)))
    WEATHERPROOF = ("Weatherproof", _counted("Shots in {n} weather conditions", (2, 3, 4, 5, 6)))
    IRON_MAN = ("Iron Man", _counted("{n} shots with irons", (10, 25, 50, 100, 200)))
    DAWN_PATROL = ("Dawn Patrol", _counted("{n} shots before 7 AM", (1, 5, 10, 25, 50)))
    NIGHT_OWL = ("Night Owl", _counted("{n} shots after 8 PM", (1, 5, 10, 25, 50)))
    DEDICATED = ("Dedicated", _counted("{n} practice sessions", (3, 10, 25, 50, 100)))

    def __init__(self, display_name: str, tiers: list[TierDef]):
        self.display_name = display_name
        self.tiers = tiers


TOTAL_ACHIEVEMENTS = sum(len(c.tiers) for c in AchievementCategory)


@dataclass(frozen=True)
class UnlockedAchievement:
    category: AchievementCategory
    tier: AchievementTier

    @property
    def storage_key(self) -> str:
        return f"{self.category.name}_{self.tier.name}"

    @property
    def tier_def(self) -> TierDef:
        return self.category.tiers[self.tier.value - 1]

    @classmethod
    def from_storage_key(cls, key: str) -> Optional["UnlockedAchievement"]:
        """Parse "SHOT_COUNT_DIAMOND"; the tier is always the last part."""
        category_name, sep, tier_name = key.rpartition("_")
        if not sep:
            return None
        try:
            return cls(AchievementCategory[category_name], AchievementTier[tier_name])
        except KeyError:
            return None


# =============================================================================
# Measured quantities
# =============================================================================

def _local_hour(shot: ShotResult) -> int:
    return datetime.fromtimestamp(shot.timestamp_ms / 1000).hour


def _pb_breaks(shots: list[ShotResult]) -> int:
    """Times any club's longest shot was beaten (the first shot sets the PB)."""
    best: dict[Club, int] = {}
    breaks = 0
    for shot in shots:
        current = best.get(shot.club, 0)
        if shot.distance_yards > current:
            if current > 0:
                breaks += 1
            best[shot.club] = shot.distance_yards
    return breaks


def _hot_streak(shots: list[ShotResult]) -> int:
    """Consecutive most-recent shots above their club's average.

    Each shot is compared with the mean of the other shots with the
    same club; a shot with no other same-club shots ends the streak.
    """
    totals: dict[Club, list[int]] = defaultdict(lambda: [0, 0])
    for shot in shots:
        totals[shot.club][0] += shot.distance_yards
        totals[shot.club][1] += 1

    streak = 0
    for shot in reversed(shots):
        total, count = totals[shot.club]
        if count < 2:
            break
        others_avg = (total - shot.distance_yards) / (count - 1)
        if shot.distance_yards <= others_avg:
            break
        streak += 1
    return streak


def _session_count(shots: list[ShotResult]) -> int:
    """Practice sessions, split wherever consecutive shots are over 30 min apart."""
    if not shots:
        return 0
    sessions = 1
    for prev, shot in zip(shots, shots[1:]):
        if shot.timestamp_ms - prev.timestamp_ms > SESSION_GAP_MS:
            sessions += 1
    return sessions


def _sniper_tier_met(shots: list[ShotResult], club: Club, tier: TierDef) -> bool:
    club_shots = [s for s in shots if s.club == club][-tier.threshold:]
    if len(club_shots) < tier.threshold:
        return False
    yards = [s.distance_yards for s in club_shots]
    return max(yards) - min(yards) <= tier.secondary_threshold


# =============================================================================
# Checker
# =============================================================================

def check_achievements(all_shots: Iterable[ShotResult], new_shot: ShotResult,
                       already_unlocked: Iterable[str],
                       enabled_clubs: Iterable[Club]) -> list[UnlockedAchievement]:
    """Return the tiers newly unlocked by new_shot.

    Args:
        all_shots: Full history, which must already include new_shot.
        new_shot: The shot just recorded.
        already_unlocked: Storage keys of tiers unlocked earlier.
        enabled_clubs: Clubs in the player's bag. Full Bag Diamond needs
            every one of them used; an empty bag never earns it.

    Returns:
        Newly unlocked achievements in category then tier order.
    """
    shots = sorted(all_shots, key=lambda s: s.timestamp_ms)
    unlocked = set(already_unlocked)
    bag = set(enabled_clubs)
    clubs_used = {s.club for s in shots}

    values = {
        AchievementCategory.SHOT_COUNT: len(shots),
        AchievementCategory.BOMBER:
            new_shot.distance_yards if new_shot.club == Club.DRIVER else 0,
        AchievementCategory.FULL_BAG: len(clubs_used),
        AchievementCategory.PB_MACHINE: _pb_breaks(shots),
        AchievementCategory.WIND_WARRIOR: new_shot.wind_speed_kmh,
        AchievementCategory.HOT_STREAK: _hot_streak(shots),
        AchievementCategory.WEATHERPROOF: len({
            s.weather_description for s in shots
            if s.weather_description.strip() and s.weather_description != "Unknown"
        }),
        AchievementCategory.IRON_MAN:
            sum(1 for s in shots if s.club.category == ClubCategory.IRON),
        AchievementCategory.DAWN_PATROL:
            sum(1 for s in shots if _local_hour(s) < DAWN_PATROL_BEFORE_HOUR),
        AchievementCategory.NIGHT_OWL:
            sum(1 for s in shots if _local_hour(s) >= NIGHT_OWL_FROM_HOUR),
        AchievementCategory.DEDICATED: _session_count(shots),
    }

    earned = []
    for category in AchievementCategory:
        for tier, tier_def in zip(AchievementTier, category.tiers):
            if category == AchievementCategory.SNIPER:
                met = _sniper_tier_met(shots, new_shot.club, tier_def)
            elif tier_def.threshold < 0:
                met = bool(bag) and bag <= clubs_used
            else:
                met = values[category] >= tier_def.threshold
            if not met:
                continue
            achievement = UnlockedAchievement(category, tier)
            if achievement.storage_key not in unlocked:
                earned.append(achievement)
    return earned
