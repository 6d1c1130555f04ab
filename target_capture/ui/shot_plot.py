from PyQt6.QtWidgets import QWidget, QVBoxLayout, QGridLayout, QLabel, QGroupBox

from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure
from typing import Optional, Sequence

from target_capture.coordinates import InchShot
from target_capture.group_metrics import GroupMetrics, format_group_metrics
from target_capture.plotting import draw_shot_group


class ShotPlotCanvas(FigureCanvas):
    """Matplotlib canvas showing a shot group relative to the point of aim."""

    def __init__(self, width: float = 4, height: float = 4, dpi: int = 100):
        figure = Figure(figsize=(width, height), dpi=dpi)
        super().__init__(figure)
        self.axes = self.figure.add_subplot(111)
        self.update_group([], None)

    def update_group(self, shots: Sequence[InchShot], metrics: Optional[GroupMetrics],
                     title: Optional[str] = None):
        draw_shot_group(self.axes, shots, metrics, title)
        self.figure.tight_layout()
        self.draw_idle()


class MetricsPanel(QWidget):
    """
    Shot plot plus the formatted group statistics.
    """

    def __init__(self):
        super().__init__()

        layout = QVBoxLayout()

        self.plot = ShotPlotCanvas()
        layout.addWidget(self.plot, stretch=1)

        metrics_group = QGroupBox("Group")
        grid = QGridLayout()

        self.value_labels = {}
        rows = [
            ('shot_count', "Shots:"),
            ('extreme_spread', "Extreme Spread:"),
            ('mean_radius', "Mean Radius:"),
            ('group_size_moa', "Group Size:"),
            ('group_center', "Center from POA:"),
        ]
        for row, (key, caption) in enumerate(rows):
            grid.addWidget(QLabel(caption), row, 0)
            value_label = QLabel("-")
            value_label.setStyleSheet("font-weight: bold;")
            grid.addWidget(value_label, row, 1)
            self.value_labels[key] = value_label

        metrics_group.setLayout(grid)
        layout.addWidget(metrics_group)

        self.setLayout(layout)

    def show_group(self, shots: Sequence[InchShot], metrics: Optional[GroupMetrics],
                   title: Optional[str] = None):
        """Display a group; metrics of None clears the statistics."""
        self.plot.update_group(shots, metrics, title)

        if metrics is None:
            for label in self.value_labels.values():
                label.setText("-")
            return

        formatted = format_group_metrics(metrics)
        self.value_labels['shot_count'].setText(str(metrics.shot_count))
        for key in ('extreme_spread', 'mean_radius', 'group_size_moa', 'group_center'):
            self.value_labels[key].setText(formatted[key])
