from typing import Optional, Sequence

import numpy as np
from matplotlib.axes import Axes
from matplotlib.patches import Circle

from target_capture.coordinates import InchShot
from target_capture.group_metrics import GroupMetrics, farthest_pair

SHOT_COLOR = '#D32F2F'
CENTER_COLOR = '#1976D2'
POA_COLOR = '#2E7D32'


def draw_shot_group(ax: Axes, shots: Sequence[InchShot], metrics: Optional[GroupMetrics] = None,
                    title: Optional[str] = None):
    """
    Plot a shot group on POA-centred inch axes.

    Draws the POA cross at the origin, each shot labelled with its sequence
    number and, when metrics are given, the group center, the mean radius
    circle and the extreme spread line.

    Args:
        ax: Matplotlib axes to draw on (cleared first)
        shots: Shots in inch coordinates
        metrics: Group metrics for the same shots
        title: Optional axes title
    """
    ax.clear()

    # Point of aim
    ax.axhline(0, color=POA_COLOR, linewidth=0.8, alpha=0.6)
    ax.axvline(0, color=POA_COLOR, linewidth=0.8, alpha=0.6)
    ax.plot([0], [0], marker='+', markersize=14, color=POA_COLOR, label='POA')

    extent = 1.0
    if shots:
        xs = np.array([shot.x_inches for shot in shots])
        ys = np.array([shot.y_inches for shot in shots])
        ax.scatter(xs, ys, s=60, color=SHOT_COLOR, zorder=3, label='Shots')

        for shot in shots:
            ax.annotate(str(shot.sequence_number), (shot.x_inches, shot.y_inches),
                        textcoords='offset points', xytext=(5, 5), fontsize=8)

        extent = max(extent, float(np.abs(xs).max()), float(np.abs(ys).max()))

    if metrics is not None and metrics.shot_count > 0:
        center = (metrics.group_center_x, metrics.group_center_y)
        ax.plot([center[0]], [center[1]], marker='x', markersize=10,
                color=CENTER_COLOR, label='Group center')

        if metrics.mean_radius > 0:
            ax.add_patch(Circle(center, metrics.mean_radius, fill=False,
                                linestyle='--', color=CENTER_COLOR, label='Mean radius'))

        pair = farthest_pair(shots)
        if pair:
            ax.plot([pair[0].x_inches, pair[1].x_inches], [pair[0].y_inches, pair[1].y_inches],
                    color=SHOT_COLOR, linewidth=1, alpha=0.7, label='Extreme spread')

        extent = max(extent, abs(center[0]) + metrics.mean_radius, abs(center[1]) + metrics.mean_radius)

    # Keep the POA in the middle with a margin around the group
    limit = extent * 1.2
    ax.set_xlim(-limit, limit)
    ax.set_ylim(-limit, limit)
    ax.set_aspect('equal')
    ax.set_xlabel('Windage (in)')
    ax.set_ylabel('Elevation (in)')
    ax.grid(True, alpha=0.3)

    if title:
        ax.set_title(title)
    if shots:
        ax.legend(loc='upper right', fontsize=7)
