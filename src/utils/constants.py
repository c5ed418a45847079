"""
Geodesy, calibration, wind-model and weather constants for SmackTrack.

Wind model coefficients are calibrated against TrackMan launch monitor data:
    166yd 7-iron, 10mph HW → -17yds | 10mph TW → +13yds
    175yd 6-iron, 20mph HW → -39yds | 20mph TW → +23yds
    300yd Driver, 20mph HW → -41yds | 20mph TW → +33yds
    300yd Driver, 30mph HW → -75yds | 30mph TW → +44yds
"""

# =============================================================================
# Geodesy
# =============================================================================

EARTH_RADIUS_METERS = 6_371_000.0   # Mean radius, spherical Earth
METERS_PER_YARD = 0.9144            # Exact by definition

# =============================================================================
# GPS Calibration
# =============================================================================

MIN_CALIBRATION_SAMPLES = 3     # Fewer inliers than this → no result
ACCURACY_GATE_MIN_M = 0.1       # Exclusive lower bound on reported accuracy
ACCURACY_GATE_MAX_M = 20.0      # Inclusive upper bound on reported accuracy
OUTLIER_MAD_FACTOR = 2.5        # Weighted path: reject beyond median × 2.5
LEGACY_MAD_FACTOR = 2.0         # Legacy path: reject beyond median × 2.0
TIGHT_CLUSTER_M = 0.01          # Median spread below this → accept all

# Sample collection cadence (location service)
CALIBRATION_DURATION_MS = 3500      # Start position: GPS may be cold
END_CALIBRATION_DURATION_MS = 2000  # End position: GPS streamed during walk
CALIBRATION_INTERVAL_MS = 500

# =============================================================================
# Wind / Temperature Model
# =============================================================================

KMH_TO_MPH = 0.621371

# Carry effect: sign(a) × |a|^exp × coeff × trajectory × (distance / 150)
TAILWIND_EXPONENT = 1.1
TAILWIND_COEFFICIENT = 0.4
HEADWIND_EXPONENT = 1.3
HEADWIND_COEFFICIENT = 0.8
REFERENCE_CARRY_YARDS = 150.0

# Lateral: 1 foot per mph of crosswind per 100 yards of carry
LATERAL_FEET_PER_MPH_PER_100YD = 1.0
FEET_PER_YARD = 3.0

# Temperature: ~2 yards per 10°F per 200 yards of carry
BASELINE_TEMP_F = 70
TEMP_EFFECT_DIVISOR = 1000.0

# Severity buckets keyed on |relative angle|, upper bound inclusive
SEVERITY_BREAKPOINTS_DEG = (22.5, 56.25, 78.75, 101.25, 123.75, 157.5)

# 16 sectors, 22.5° wide, centered on multiples of 22.5° (0 = tailwind)
WIND_SECTOR_DEG = 22.5
WIND_LABELS_16 = (
    "Tailwind",
    "Helping, slight R",
    "Helping R",
    "Cross R, helping",
    "Crosswind R",
    "Cross R, hurting",
    "Hurting R",
    "Headwind, slight R",
    "Headwind",
    "Headwind, slight L",
    "Hurting L",
    "Cross L, hurting",
    "Crosswind L",
    "Cross L, helping",
    "Helping L",
    "Helping, slight L",
)

# Wind strength labels (km/h, exclusive upper bounds)
WIND_STRENGTH_BREAKPOINTS_KMH = (6, 13, 20, 36, 50, 71)
WIND_STRENGTH_LABELS = (
    "None",
    "Very Light",
    "Light",
    "Medium",
    "Strong",
    "Very Strong",
    "Why are you even out here?!",
)

# =============================================================================
# Weather Service (Open-Meteo)
# =============================================================================

WEATHER_BASE_URL = "https://api.open-meteo.com/v1/forecast"
WEATHER_CURRENT_FIELDS = "temperature_2m,weather_code,wind_speed_10m,wind_direction_10m"
WEATHER_CONNECT_TIMEOUT_S = 5.0
WEATHER_READ_TIMEOUT_S = 10.0
WEATHER_CACHE_DURATION_MS = 60 * 60 * 1000   # 1 hour

WMO_CODE_LABELS = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Foggy",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snowfall",
    73: "Moderate snowfall",
    75: "Heavy snowfall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}

# 8-point compass, exclusive upper bounds in whole degrees
COMPASS_BREAKPOINTS_DEG = (23, 68, 113, 158, 203, 248, 293, 338)
COMPASS_LABELS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW", "N")

# =============================================================================
# Validation Limits
# =============================================================================

MAX_DISTANCE_YARDS = 500.0
MIN_DISTANCE_YARDS = 0.0
MIN_TEMP_CELSIUS = -89.2       # Earth record low
MAX_TEMP_CELSIUS = 56.7        # Earth record high
MAX_WIND_MPH = 253.0           # Highest recorded gust
MIN_TIMESTAMP_MS = 1_672_531_200_000   # 2023-01-01 UTC
MAX_FUTURE_SKEW_MS = 60_000

# Plausible carry ranges (yards) per club display name
CLUB_DISTANCE_RANGES = {
    "Driver":   (100.0, 400.0),
    "3 Wood":   (80.0, 280.0),
    "5 Wood":   (70.0, 250.0),
    "7 Wood":   (60.0, 230.0),
    "3 Hybrid": (60.0, 240.0),
    "4 Hybrid": (55.0, 230.0),
    "3 Iron":   (60.0, 230.0),
    "4 Iron":   (55.0, 220.0),
    "5 Iron":   (50.0, 210.0),
    "6 Iron":   (45.0, 200.0),
    "7 Iron":   (40.0, 190.0),
    "8 Iron":   (35.0, 180.0),
    "9 Iron":   (30.0, 170.0),
    "PW":       (20.0, 160.0),
    "GW":       (15.0, 150.0),
    "SW":       (10.0, 130.0),
    "LW":       (5.0, 120.0),
}

# =============================================================================
# Achievements
# =============================================================================

DAWN_PATROL_BEFORE_HOUR = 7         # local hour, exclusive
NIGHT_OWL_FROM_HOUR = 20            # local hour, inclusive
SESSION_GAP_MS = 30 * 60 * 1000     # a longer pause starts a new practice session
