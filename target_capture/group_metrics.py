import numpy as np
from dataclasses import dataclass, asdict
from typing import Dict, List, Sequence, Tuple

from target_capture.coordinates import InchShot

# 1 MOA subtends 1.047 inches at 100 yards
MOA_INCHES_AT_100_YARDS = 1.047


@dataclass(frozen=True)
class GroupMetrics:
    """
    Spatial statistics of a shot group, in inches relative to the POA.

    Attributes:
        shot_count: Number of shots in the group
        group_center_x: Centroid X (positive = right of POA)
        group_center_y: Centroid Y (positive = above POA)
        extreme_spread: Largest distance between any two shots
        mean_radius: Average distance of the shots from the centroid
        group_size_moa: Extreme spread as an angle at the target distance
    """
    shot_count: int
    group_center_x: float
    group_center_y: float
    extreme_spread: float
    mean_radius: float
    group_size_moa: float

    def to_dict(self) -> Dict:
        return asdict(self)


def _as_points(shots: Sequence[InchShot]) -> np.ndarray:
    """Stack shot coordinates into an (n, 2) array."""
    if not shots:
        return np.zeros((0, 2))
    return np.array([[shot.x_inches, shot.y_inches] for shot in shots], dtype=float)


def group_center(shots: Sequence[InchShot]) -> Tuple[float, float]:
    """
    Calculate the centroid (group center) of all shots.

    Args:
        shots: Shots in inch coordinates

    Returns:
        Center (x, y) in inches, (0, 0) for an empty group
    """
    if not shots:
        return 0.0, 0.0

    center = _as_points(shots).mean(axis=0)
    return float(center[0]), float(center[1])


def extreme_spread(shots: Sequence[InchShot]) -> float:
    """
    Calculate the extreme spread: the largest distance between any two shots.

    Every unordered pair is compared. This is the conventional marksmanship
    measurement and is not the same as a minimum enclosing circle diameter.

    Args:
        shots: Shots in inch coordinates

    Returns:
        Extreme spread in inches, 0 for fewer than two shots
    """
    if len(shots) < 2:
        return 0.0

    points = _as_points(shots)

    # Pairwise differences for all (i, j); the matrix is symmetric so the
    # maximum covers every unordered pair
    diff = points[:, np.newaxis, :] - points[np.newaxis, :, :]
    distances = np.hypot(diff[..., 0], diff[..., 1])
    return float(distances.max())


def mean_radius(shots: Sequence[InchShot], center: Tuple[float, float]) -> float:
    """
    Calculate the mean radius: average distance of the shots from the center.

    Args:
        shots: Shots in inch coordinates
        center: Group center (x, y) in inches

    Returns:
        Mean radius in inches, 0 for an empty group
    """
    if not shots:
        return 0.0

    points = _as_points(shots)
    distances = np.hypot(points[:, 0] - center[0], points[:, 1] - center[1])
    return float(distances.mean())


def inches_to_moa(inches: float, distance_yards: float) -> float:
    """
    Convert a linear size at the target to minutes of angle.

    Returns 0 for a non-positive distance instead of dividing by zero.
    """
    if distance_yards <= 0:
        return 0.0

    # MOA = inches * 100 / (distance_yards * 1.047)
    return (inches * 100) / (distance_yards * MOA_INCHES_AT_100_YARDS)


def moa_to_inches(moa: float, distance_yards: float) -> float:
    """Convert minutes of angle to inches at the target (0 for a non-positive distance)."""
    if distance_yards <= 0:
        return 0.0

    return (moa * distance_yards * MOA_INCHES_AT_100_YARDS) / 100


def compute_group_metrics(shots: Sequence[InchShot], distance_yards: float) -> GroupMetrics:
    """
    Calculate all group metrics for a shot group.

    Args:
        shots: Shots in inch coordinates
        distance_yards: Distance to the target in yards

    Returns:
        Complete, immutable group metrics
    """
    center = group_center(shots)
    spread = extreme_spread(shots)

    return GroupMetrics(
        shot_count=len(shots),
        group_center_x=center[0],
        group_center_y=center[1],
        extreme_spread=spread,
        mean_radius=mean_radius(shots, center),
        group_size_moa=inches_to_moa(spread, distance_yards),
    )


def format_measurement(value: float, decimals: int = 2, unit: str = '') -> str:
    """Format a measurement for display, e.g. 1.41 -> '1.41"'."""
    formatted = f"{value:.{decimals}f}"
    return f"{formatted}{unit}" if unit else formatted


def format_group_metrics(metrics: GroupMetrics) -> Dict[str, str]:
    """
    Format group metrics for display.

    Args:
        metrics: Group metrics

    Returns:
        Dictionary of display strings keyed by metric name
    """
    def signed(value: float) -> str:
        return f"{'+' if value >= 0 else ''}{value:.2f}\""

    return {
        'extreme_spread': format_measurement(metrics.extreme_spread, 2, '"'),
        'mean_radius': format_measurement(metrics.mean_radius, 2, '"'),
        'group_size_moa': format_measurement(metrics.group_size_moa, 2, ' MOA'),
        'group_center': f"{signed(metrics.group_center_x)}, {signed(metrics.group_center_y)}",
    }


def farthest_pair(shots: Sequence[InchShot]) -> List[InchShot]:
    """
    Return the two shots that define the extreme spread.

    Args:
        shots: Shots in inch coordinates

    Returns:
        The farthest-apart pair (earliest pair wins a tie), or an empty list
        for fewer than two shots
    """
    if len(shots) < 2:
        return []

    points = _as_points(shots)
    diff = points[:, np.newaxis, :] - points[np.newaxis, :, :]
    distances = np.hypot(diff[..., 0], diff[..., 1])
    i, j = np.unravel_index(np.argmax(distances), distances.shape)
    return [shots[int(i)], shots[int(j)]]
