"""
GPS position calibration for SmackTrack.

Turns a short burst of noisy, accuracy-tagged GPS fixes into a single
trustworthy coordinate. Two strategies are available:

  WEIGHTED (primary):
    1. Skip the first sample (GPS cold-start jitter)
    2. Reject samples with reported accuracy outside (0.1 m, 20 m]
    3. Inverse-variance weighted centroid (weight = 1 / accuracy²)
    4. Reject samples farther than 2.5 × median distance from the centroid
    5. Recompute the weighted centroid from inliers only
    6. Estimate accuracy as the weighted RMS inlier distance

  LEGACY:
    Per-axis median seed, reject beyond 2.0 × median distance,
    unweighted mean of inliers. Kept because its numeric output differs
    from WEIGHTED and existing callers depend on it.

Neither strategy raises for in-domain input: insufficient data is
reported as None and the caller picks a fallback (e.g. the last raw fix).
"""

import logging
import math
from enum import Enum
from typing import Optional, Sequence

import numpy as np

from src.geodesy import haversine_meters
from src.models.coordinate import CalibratedPosition, Coordinate, PositionSample
from src.utils.constants import (
    MIN_CALIBRATION_SAMPLES,
    ACCURACY_GATE_MIN_M,
    ACCURACY_GATE_MAX_M,
    OUTLIER_MAD_FACTOR,
    LEGACY_MAD_FACTOR,
    TIGHT_CLUSTER_M,
)

logger = logging.getLogger(__name__)


class CalibrationStrategy(str, Enum):
    """Robust centroid estimators selectable by callers."""
    WEIGHTED = "weighted"
    LEGACY = "legacy"


def calibrate(
    samples: Sequence[PositionSample],
    strategy: CalibrationStrategy = CalibrationStrategy.WEIGHTED,
) -> Optional[CalibratedPosition]:
    """Calibrate a completed batch of samples with the chosen strategy.

    Args:
        samples: Raw GPS readings in capture order. Must be a finished
                 collection window, not one still being filled.
        strategy: Which estimator to run.

    Returns:
        CalibratedPosition, or None if too few samples survive filtering.
    """
    if strategy is CalibrationStrategy.WEIGHTED:
        return calibrate_weighted(samples)
    if strategy is CalibrationStrategy.LEGACY:
        return _calibrate_legacy_position(samples)
    raise ValueError(f"Unknown calibration strategy: {strategy!r}")


# =============================================================================
# Weighted strategy
# =============================================================================

def calibrate_weighted(
    samples: Sequence[PositionSample],
) -> Optional[CalibratedPosition]:
    """Accuracy-weighted calibration with gating and MAD outlier rejection.

    Args:
        samples: Raw GPS readings including accuracy. Should contain 4+
                 samples collected over ~2.5s at 500ms intervals.

    Returns:
        Calibrated position with accuracy estimate, or None if
        insufficient valid samples.
    """
    if len(samples) < 2:
        return None

    # Cold-start jitter: the first fix after a request is the least reliable
    without_first = list(samples[1:])

    gated = [
        s for s in without_first
        if ACCURACY_GATE_MIN_M < s.accuracy_m <= ACCURACY_GATE_MAX_M
    ]
    if len(gated) < MIN_CALIBRATION_SAMPLES:
        logger.debug(
            f"Calibration failed: {len(gated)} of {len(without_first)} "
            f"samples passed the accuracy gate"
        )
        return None

    centroid = _weighted_centroid(gated)

    distances = np.array([haversine_meters(s, centroid) for s in gated])
    median_distance = float(np.median(distances))

    if median_distance < TIGHT_CLUSTER_M:
        # All points nearly identical; accept everything
        threshold = math.inf
    else:
        threshold = median_distance * OUTLIER_MAD_FACTOR

    inliers = [s for s, d in zip(gated, distances) if d <= threshold]
    if len(inliers) < MIN_CALIBRATION_SAMPLES:
        logger.debug(
            f"Calibration failed: {len(inliers)} inliers "
            f"(threshold={threshold:.2f}m)"
        )
        return None

    final = _weighted_centroid(inliers)

    weights = _inverse_variance_weights(inliers)
    total_weight = float(weights.sum())
    if total_weight > 0:
        inlier_distances = np.array(
            [haversine_meters(s, final) for s in inliers]
        )
        estimated_accuracy = math.sqrt(
            float(np.sum(weights * inlier_distances ** 2)) / total_weight
        )
    else:
        estimated_accuracy = min(s.accuracy_m for s in inliers)

    logger.debug(
        f"Calibrated ({final.lat:.6f}, {final.lon:.6f}) "
        f"±{estimated_accuracy:.1f}m from {len(inliers)}/{len(samples)} samples"
    )

    return CalibratedPosition(
        coordinate=final,
        estimated_accuracy_m=estimated_accuracy,
        sample_count=len(inliers),
    )


def _inverse_variance_weights(samples: Sequence[PositionSample]) -> np.ndarray:
    """Weight for each sample = 1 / accuracy²."""
    accuracies = np.array([s.accuracy_m for s in samples], dtype=float)
    return 1.0 / accuracies ** 2


def _weighted_centroid(samples: Sequence[PositionSample]) -> Coordinate:
    """Inverse-variance weighted mean of sample latitudes and longitudes."""
    weights = _inverse_variance_weights(samples)
    lats = np.array([s.lat for s in samples], dtype=float)
    lons = np.array([s.lon for s in samples], dtype=float)
    return Coordinate(
        float(np.average(lats, weights=weights)),
        float(np.average(lons, weights=weights)),
    )


# =============================================================================
# Legacy strategy
# =============================================================================

def calibrate_legacy(coordinates: Sequence[Coordinate]) -> Optional[Coordinate]:
    """Median + MAD outlier rejection without accuracy weighting.

    Three mutually distant points with no clear outlier may come back as
    either None or a centroid; callers must tolerate both.

    Args:
        coordinates: Raw positions (anything with ``lat``/``lon``).

    Returns:
        Mean of the inliers, or None if fewer than 3 remain.
    """
    inliers = _legacy_inliers(coordinates)
    if inliers is None:
        return None
    return _mean_coordinate(inliers)


def _legacy_inliers(coordinates: Sequence) -> Optional[list]:
    if len(coordinates) < MIN_CALIBRATION_SAMPLES:
        return None

    median_coord = Coordinate(
        float(np.median([c.lat for c in coordinates])),
        float(np.median([c.lon for c in coordinates])),
    )

    distances = [haversine_meters(c, median_coord) for c in coordinates]
    median_distance = float(np.median(distances))

    if median_distance == 0.0:
        threshold = math.inf
    else:
        threshold = median_distance * LEGACY_MAD_FACTOR

    inliers = [c for c, d in zip(coordinates, distances) if d <= threshold]
    if len(inliers) < MIN_CALIBRATION_SAMPLES:
        return None
    return inliers


def _mean_coordinate(points: Sequence) -> Coordinate:
    return Coordinate(
        float(np.mean([p.lat for p in points])),
        float(np.mean([p.lon for p in points])),
    )


def _calibrate_legacy_position(
    samples: Sequence[PositionSample],
) -> Optional[CalibratedPosition]:
    """Legacy estimator wrapped in a CalibratedPosition.

    Accuracy here is the unweighted RMS distance of the inliers from
    their mean; reported per-sample accuracy is ignored.
    """
    inliers = _legacy_inliers(samples)
    if inliers is None:
        return None

    final = _mean_coordinate(inliers)
    distances = np.array([haversine_meters(p, final) for p in inliers])
    return CalibratedPosition(
        coordinate=final,
        estimated_accuracy_m=float(np.sqrt(np.mean(distances ** 2))),
        sample_count=len(inliers),
    )
