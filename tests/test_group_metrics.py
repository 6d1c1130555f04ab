"""Tests for the group metrics calculator."""

import math

import pytest

from target_capture.coordinates import InchShot
from target_capture.group_metrics import (
    GroupMetrics, compute_group_metrics, extreme_spread, farthest_pair,
    format_group_metrics, format_measurement, group_center, inches_to_moa,
    mean_radius, moa_to_inches
)


@pytest.fixture
def two_shot_group():
    return [InchShot(0.5, 0.5, 1), InchShot(-0.5, -0.5, 2)]


def test_two_shot_group(two_shot_group):
    assert group_center(two_shot_group) == pytest.approx((0.0, 0.0))
    assert extreme_spread(two_shot_group) == pytest.approx(math.sqrt(2))
    assert mean_radius(two_shot_group, (0.0, 0.0)) == pytest.approx(math.sqrt(2) / 2)


def test_group_size_moa_at_25_yards():
    assert inches_to_moa(1.4142, 25) == pytest.approx(141.42 / 26.175, abs=1e-3)


def test_compute_group_metrics(two_shot_group):
    metrics = compute_group_metrics(two_shot_group, 25)

    assert metrics.shot_count == 2
    assert metrics.group_center_x == pytest.approx(0)
    assert metrics.group_center_y == pytest.approx(0)
    assert metrics.extreme_spread == pytest.approx(1.41421356)
    assert metrics.mean_radius == pytest.approx(0.70710678)
    assert metrics.group_size_moa == pytest.approx(math.sqrt(2) * 100 / (25 * 1.047))


def test_empty_group_defaults():
    assert group_center([]) == (0.0, 0.0)
    assert extreme_spread([]) == 0
    assert mean_radius([], (0.0, 0.0)) == 0

    metrics = compute_group_metrics([], 25)
    assert metrics == GroupMetrics(0, 0.0, 0.0, 0.0, 0.0, 0.0)


def test_single_shot_has_no_spread():
    shots = [InchShot(1.25, -0.75, 1)]
    metrics = compute_group_metrics(shots, 25)

    assert metrics.extreme_spread == 0
    assert metrics.mean_radius == 0
    assert metrics.group_size_moa == 0
    assert (metrics.group_center_x, metrics.group_center_y) == pytest.approx((1.25, -0.75))


def test_extreme_spread_is_farthest_pair_not_enclosing_circle():
    # Equilateral triangle with side 1: the minimum enclosing circle has
    # diameter 2/sqrt(3), the farthest pair is exactly 1
    shots = [
        InchShot(0.0, 0.0, 1),
        InchShot(1.0, 0.0, 2),
        InchShot(0.5, math.sqrt(3) / 2, 3),
    ]
    assert extreme_spread(shots) == pytest.approx(1.0)


def test_extreme_spread_checks_every_pair():
    shots = [
        InchShot(0, 0, 1),
        InchShot(0.2, 0.1, 2),
        InchShot(3, 4, 3),
        InchShot(0.1, 0.3, 4),
    ]
    assert extreme_spread(shots) == pytest.approx(5.0)
    pair = farthest_pair(shots)
    assert {shot.sequence_number for shot in pair} == {1, 3}


def test_farthest_pair_needs_two_shots():
    assert farthest_pair([InchShot(0, 0, 1)]) == []


@pytest.mark.parametrize("distance", [0, -5])
def test_moa_conversions_guard_distance(distance):
    assert inches_to_moa(2.0, distance) == 0
    assert moa_to_inches(2.0, distance) == 0


def test_one_moa_at_100_yards():
    assert moa_to_inches(1, 100) == pytest.approx(1.047)
    assert inches_to_moa(1.047, 100) == pytest.approx(1.0)


def test_metrics_without_distance_have_zero_moa(two_shot_group):
    metrics = compute_group_metrics(two_shot_group, 0)
    assert metrics.extreme_spread > 0
    assert metrics.group_size_moa == 0


def test_metrics_to_dict(two_shot_group):
    data = compute_group_metrics(two_shot_group, 25).to_dict()
    assert set(data) == {
        'shot_count', 'group_center_x', 'group_center_y',
        'extreme_spread', 'mean_radius', 'group_size_moa',
    }
    assert isinstance(data['extreme_spread'], float)


def test_format_measurement():
    assert format_measurement(1.41421) == '1.41'
    assert format_measurement(1.41421, 3, '"') == '1.414"'


def test_format_group_metrics():
    metrics = GroupMetrics(3, 0.5, -0.25, 1.4142, 0.7071, 5.398)
    formatted = format_group_metrics(metrics)

    assert formatted['extreme_spread'] == '1.41"'
    assert formatted['mean_radius'] == '0.71"'
    assert formatted['group_size_moa'] == '5.40 MOA'
    assert formatted['group_center'] == '+0.50", -0.25"'
