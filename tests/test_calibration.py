"""
Tests for GPS position calibration.

Validates:
  - Weighted path: cold-start drop, accuracy gate, spike rejection,
    inverse-variance weighting, residual accuracy estimate
  - Legacy path: boundary behaviour of median + MAD rejection
  - Strategy dispatch keeps the two estimators distinct
"""

import pytest

from src.calibration import (
    CalibrationStrategy,
    calibrate,
    calibrate_legacy,
    calibrate_weighted,
)
from src.geodesy import haversine_meters
from src.models.coordinate import CalibratedPosition, Coordinate, PositionSample

CENTER = Coordinate(33.749, -84.388)


def sample(lat, lon, acc=5.0, t=0):
    return PositionSample(lat=lat, lon=lon, accuracy_m=acc, timestamp_ms=t)


def cluster_with_spike():
    """Cold-start fix, 4 tight fixes, then one ~28 km multipath spike."""
    return [
        sample(33.7490, -84.3880),
        sample(33.7490, -84.3880),
        sample(33.7491, -84.3881),
        sample(33.7489, -84.3879),
        sample(33.7490, -84.3880),
        sample(34.0000, -84.0000),
    ]


class TestWeightedInsufficientData:
    """Calibration returns None rather than raising."""

    def test_empty(self):
        assert calibrate_weighted([]) is None

    def test_single_sample(self):
        assert calibrate_weighted([sample(33.749, -84.388)]) is None

    def test_three_samples_leaves_two_after_drop(self):
        samples = [sample(33.749, -84.388)] * 3
        assert calibrate_weighted(samples) is None

    def test_four_samples_is_enough(self):
        samples = [sample(33.749, -84.388)] * 4
        result = calibrate_weighted(samples)
        assert result is not None
        assert result.sample_count == 3

    def test_gate_leaves_too_few(self):
        samples = [
            sample(33.749, -84.388),
            sample(33.749, -84.388, acc=5),
            sample(33.749, -84.388, acc=25),
            sample(33.749, -84.388, acc=50),
            sample(33.749, -84.388, acc=4),
        ]
        assert calibrate_weighted(samples) is None


class TestAccuracyGate:
    """Accuracy radius must lie in (0.1 m, 20 m]."""

    def test_upper_bound_inclusive(self):
        samples = [sample(33.749, -84.388, acc=20.0)] * 4
        result = calibrate_weighted(samples)
        assert result is not None
        assert result.sample_count == 3

    def test_just_over_upper_bound_rejected(self):
        samples = [sample(33.749, -84.388, acc=20.01)] * 4
        assert calibrate_weighted(samples) is None

    def test_lower_bound_exclusive(self):
        samples = [
            sample(33.749, -84.388),
            sample(33.749, -84.388, acc=0.1),
            sample(33.749, -84.388, acc=5),
            sample(33.749, -84.388, acc=5),
        ]
        assert calibrate_weighted(samples) is None

    def test_zero_accuracy_rejected(self):
        samples = [sample(33.749, -84.388, acc=0.0)] * 5
        assert calibrate_weighted(samples) is None

    def test_first_sample_dropped_even_if_best(self):
        """The cold-start fix never contributes, however precise."""
        samples = [
            sample(33.7600, -84.3880, acc=1),
            sample(33.7490, -84.3880, acc=5),
            sample(33.7490, -84.3880, acc=5),
            sample(33.7490, -84.3880, acc=5),
        ]
        result = calibrate_weighted(samples)
        assert result.coordinate.lat == pytest.approx(33.749, abs=1e-9)


class TestWeightedCalibration:

    def test_spike_rejected(self):
        result = calibrate_weighted(cluster_with_spike())
        assert result is not None
        assert result.sample_count == 4
        assert result.coordinate.lat == pytest.approx(33.749, abs=1e-4)
        assert result.coordinate.lon == pytest.approx(-84.388, abs=1e-4)

    def test_identical_samples(self):
        samples = [sample(33.749, -84.388, acc=5)] * 6
        result = calibrate_weighted(samples)
        assert result.coordinate.lat == pytest.approx(33.749, abs=1e-12)
        assert result.coordinate.lon == pytest.approx(-84.388, abs=1e-12)
        assert result.estimated_accuracy_m == pytest.approx(0.0, abs=1e-6)
        assert result.sample_count == 5

    def test_reference_scenario(self):
        samples = [
            sample(33.749, -84.388, acc=5),
            sample(33.7491, -84.3881, acc=4),
            sample(33.7489, -84.3879, acc=6),
            sample(33.7490, -84.3880, acc=5),
        ]
        result = calibrate_weighted(samples)
        assert result is not None
        assert result.sample_count == 3
        assert abs(result.coordinate.lat - 33.749) < 0.0005
        assert abs(result.coordinate.lon - (-84.388)) < 0.0005

    def test_precise_sample_pulls_centroid(self):
        """A 1 m fix outweighs two 10 m fixes."""
        samples = [
            sample(33.7490, -84.3880),
            sample(33.7490, -84.3880, acc=1),
            sample(33.7492, -84.3880, acc=10),
            sample(33.7492, -84.3880, acc=10),
        ]
        result = calibrate_weighted(samples)
        unweighted_lat = (33.7490 + 33.7492 + 33.7492) / 3
        lat = result.coordinate.lat
        assert abs(lat - 33.7490) < abs(lat - unweighted_lat)
        assert lat == pytest.approx(33.7490 + 0.0002 * 0.02 / 1.02, abs=1e-9)

    def test_residual_accuracy_reflects_spread(self):
        tight = [sample(33.749 + i * 1e-6, -84.388) for i in range(6)]
        loose = [sample(33.749 + i * 3e-5, -84.388) for i in range(6)]
        tight_result = calibrate_weighted(tight)
        loose_result = calibrate_weighted(loose)
        assert tight_result.estimated_accuracy_m < loose_result.estimated_accuracy_m
        assert loose_result.estimated_accuracy_m > 0

    def test_residual_accuracy_is_weighted_rms(self):
        samples = [
            sample(33.7490, -84.3880),
            sample(33.7490, -84.3880, acc=2),
            sample(33.7491, -84.3880, acc=4),
            sample(33.7489, -84.3880, acc=4),
        ]
        result = calibrate_weighted(samples)
        weights = [1 / 4, 1 / 16, 1 / 16]
        inliers = samples[1:]
        expected = (
            sum(w * haversine_meters(s, result.coordinate) ** 2
                for w, s in zip(weights, inliers)) / sum(weights)
        ) ** 0.5
        assert result.estimated_accuracy_m == pytest.approx(expected)

    def test_returns_calibrated_position(self):
        result = calibrate_weighted(cluster_with_spike())
        assert isinstance(result, CalibratedPosition)
        assert isinstance(result.coordinate, Coordinate)

    def test_widely_scattered_never_raises(self):
        samples = [
            sample(0.0, 0.0),
            sample(0.0, 0.0),
            sample(45.0, 90.0),
            sample(-45.0, -90.0),
        ]
        result = calibrate_weighted(samples)
        if result is not None:
            assert -90 <= result.coordinate.lat <= 90
            assert -180 <= result.coordinate.lon <= 180


class TestLegacyCalibration:
    """Boundary behaviour of the unweighted median + MAD estimator."""

    def test_min_samples_returns_coordinate(self):
        coords = [
            Coordinate(33.749, -84.388),
            Coordinate(33.7491, -84.3881),
            Coordinate(33.7489, -84.3879),
        ]
        result = calibrate_legacy(coords)
        assert result is not None
        assert result.lat == pytest.approx(33.749, abs=0.001)
        assert result.lon == pytest.approx(-84.388, abs=0.001)

    @pytest.mark.parametrize("count", [0, 1, 2])
    def test_below_min_samples(self, count):
        assert calibrate_legacy([CENTER] * count) is None

    def test_cluster_plus_one_spike(self):
        coords = [
            Coordinate(33.7490, -84.3880),
            Coordinate(33.7491, -84.3881),
            Coordinate(33.7489, -84.3879),
            Coordinate(33.7490, -84.3880),
            Coordinate(34.0000, -84.0000),
        ]
        result = calibrate_legacy(coords)
        assert result.lat == pytest.approx(33.749, abs=0.001)
        assert result.lon == pytest.approx(-84.388, abs=0.001)

    def test_cluster_plus_two_spikes(self):
        coords = [
            Coordinate(33.7490, -84.3880),
            Coordinate(33.7491, -84.3881),
            Coordinate(33.7489, -84.3879),
            Coordinate(34.0000, -84.0000),
            Coordinate(33.0000, -85.0000),
        ]
        result = calibrate_legacy(coords)
        assert result is not None
        assert result.lat == pytest.approx(33.749, abs=0.001)

    def test_identical(self):
        result = calibrate_legacy([CENTER] * 5)
        assert result.lat == pytest.approx(CENTER.lat, abs=1e-4)
        assert result.lon == pytest.approx(CENTER.lon, abs=1e-4)

    def test_near_pole(self):
        coords = [
            Coordinate(89.9999, 0.0),
            Coordinate(89.9999, 0.00001),
            Coordinate(89.9999, -0.00001),
        ]
        result = calibrate_legacy(coords)
        assert result is not None
        assert result.lat > 89.99

    def test_crossing_prime_meridian(self):
        coords = [
            Coordinate(51.5, -0.001),
            Coordinate(51.5, 0.001),
            Coordinate(51.5, 0.0),
        ]
        result = calibrate_legacy(coords)
        assert result is not None
        assert result.lon == pytest.approx(0.0, abs=0.01)

    def test_ten_sample_sweep(self):
        coords = [
            Coordinate(CENTER.lat + (i - 5) * 1e-5, CENTER.lon + (i - 5) * 1e-5)
            for i in range(10)
        ]
        result = calibrate_legacy(coords)
        assert result.lat == pytest.approx(CENTER.lat, abs=0.001)
        assert result.lon == pytest.approx(CENTER.lon, abs=0.001)

    def test_widely_scattered_may_return_none(self):
        coords = [
            Coordinate(0.0, 0.0),
            Coordinate(45.0, 90.0),
            Coordinate(-45.0, -90.0),
        ]
        result = calibrate_legacy(coords)
        if result is not None:
            assert -90 <= result.lat <= 90
            assert -180 <= result.lon <= 180

    def test_southern_hemisphere(self):
        coords = [
            Coordinate(-33.868, 151.207),
            Coordinate(-33.867, 151.208),
            Coordinate(-33.869, 151.206),
        ]
        result = calibrate_legacy(coords)
        assert result is not None
        assert result.lat == pytest.approx(-33.868, abs=0.002)


class TestStrategyDispatch:

    def test_default_is_weighted(self):
        samples = cluster_with_spike()
        assert calibrate(samples) == calibrate_weighted(samples)

    def test_legacy_keeps_first_sample(self):
        """Three fixes: legacy calibrates, weighted drops one and fails."""
        samples = [sample(33.749, -84.388)] * 3
        assert calibrate(samples, CalibrationStrategy.WEIGHTED) is None
        result = calibrate(samples, CalibrationStrategy.LEGACY)
        assert result is not None
        assert result.sample_count == 3
        assert result.estimated_accuracy_m == pytest.approx(0.0, abs=1e-6)

    def test_legacy_ignores_reported_accuracy(self):
        samples = [
            sample(33.7490, -84.3880, acc=1),
            sample(33.7492, -84.3880, acc=10),
            sample(33.7492, -84.3880, acc=10),
        ]
        result = calibrate(samples, CalibrationStrategy.LEGACY)
        assert result.coordinate.lat == pytest.approx(
            (33.7490 + 33.7492 * 2) / 3, abs=1e-9
        )

    def test_legacy_matches_coordinate_entry_point(self):
        samples = cluster_with_spike()
        wrapped = calibrate(samples, CalibrationStrategy.LEGACY)
        plain = calibrate_legacy([s.coordinate for s in samples])
        assert wrapped.coordinate == plain

    def test_strategy_from_string(self):
        assert CalibrationStrategy("legacy") is CalibrationStrategy.LEGACY
