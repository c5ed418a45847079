"""
Club and user-setting enumerations for SmackTrack.

Provides the 18 trackable clubs, the trajectory setting that scales
wind exposure, and the display unit choices.
"""

from enum import Enum

from src.utils.constants import CLUB_DISTANCE_RANGES


class ClubCategory(str, Enum):
    """Club grouping used for display order and chip colouring."""
    WOOD = "Wood"
    HYBRID = "Hybrid"
    IRON = "Iron"
    WEDGE = "Wedge"


class Club(Enum):
    """All golf clubs available for shot tracking.

    Each member carries (display_name, category, sort_order), with
    sort_order running from 1 (Driver) to 18 (LW).
    """
    DRIVER = ("Driver", ClubCategory.WOOD, 1)
    THREE_WOOD = ("3 Wood", ClubCategory.WOOD, 2)
    FIVE_WOOD = ("5 Wood", ClubCategory.WOOD, 3)
    SEVEN_WOOD = ("7 Wood", ClubCategory.WOOD, 4)
    NINE_WOOD = ("9 Wood", ClubCategory.WOOD, 5)
    HYBRID_3 = ("3 Hybrid", ClubCategory.HYBRID, 6)
    HYBRID_4 = ("4 Hybrid", ClubCategory.HYBRID, 7)
    THREE_IRON = ("3 Iron", ClubCategory.IRON, 8)
    FOUR_IRON = ("4 Iron", ClubCategory.IRON, 9)
    FIVE_IRON = ("5 Iron", ClubCategory.IRON, 10)
    SIX_IRON = ("6 Iron", ClubCategory.IRON, 11)
    SEVEN_IRON = ("7 Iron", ClubCategory.IRON, 12)
    EIGHT_IRON = ("8 Iron", ClubCategory.IRON, 13)
    NINE_IRON = ("9 Iron", ClubCategory.IRON, 14)
    PITCHING_WEDGE = ("PW", ClubCategory.WEDGE, 15)
    GAP_WEDGE = ("GW", ClubCategory.WEDGE, 16)
    SAND_WEDGE = ("SW", ClubCategory.WEDGE, 17)
    LOB_WEDGE = ("LW", ClubCategory.WEDGE, 18)

    def __init__(self, display_name: str, category: ClubCategory,
                 sort_order: int):
        self.display_name = display_name
        self.category = category
        self.sort_order = sort_order

    @property
    def distance_range(self) -> tuple[float, float] | None:
        """Plausible carry range in yards, or None if not tabulated."""
        return CLUB_DISTANCE_RANGES.get(self.display_name)

    @classmethod
    def from_name(cls, name: str) -> "Club":
        """Look up a club by member name or display name."""
        try:
            return cls[name]
        except KeyError:
            pass
        for club in cls:
            if club.display_name.lower() == name.lower():
                return club
        raise ValueError(f"Unknown club: {name!r}")


class Trajectory(Enum):
    """Ball-flight height setting; the multiplier scales wind exposure."""
    LOW = ("Low", 0.75)
    MID = ("Mid", 1.0)
    HIGH = ("High", 1.3)

    def __init__(self, label: str, multiplier: float):
        self.label = label
        self.multiplier = multiplier


class DistanceUnit(str, Enum):
    YARDS = "yards"
    METERS = "meters"


class WindUnit(str, Enum):
    KMH = "kmh"
    MPH = "mph"


class TemperatureUnit(str, Enum):
    FAHRENHEIT = "F"
    CELSIUS = "C"
