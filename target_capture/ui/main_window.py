from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QLabel, QSplitter,
    QListWidget, QListWidgetItem, QToolBar, QStatusBar, QFileDialog
)
from PyQt6.QtCore import Qt, QSize
from PyQt6.QtGui import QAction

import logging
from typing import List, Optional

from target_capture.capture_session import CaptureMode
from target_capture.capture_target import CapturedTarget
from target_capture.config import CaptureSettings, load_settings
from target_capture.group_metrics import format_group_metrics
from .capture_widget import CaptureWidget
from .shot_plot import MetricsPanel

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Main application window for capturing shot groups from target photos."""

    def __init__(self, capture_settings: Optional[CaptureSettings] = None):
        """
        Initialize the main window and UI components.

        Args:
            capture_settings: Workflow defaults, loaded from QSettings if omitted
        """
        super().__init__()

        self.capture_settings = capture_settings or load_settings()

        # Finished targets waiting for the storage layer to pick them up
        self.captured_targets: List[CapturedTarget] = []

        self.setWindowTitle("Shot Group Capture")
        self.setMinimumSize(1024, 768)

        self._create_toolbar()

        splitter = QSplitter(Qt.Orientation.Horizontal)

        self.capture_widget = CaptureWidget(self.capture_settings)
        self.capture_widget.session_changed.connect(self._update_live_metrics)
        self.capture_widget.target_captured.connect(self._handle_target_captured)
        splitter.addWidget(self.capture_widget)

        side_panel = QWidget()
        side_layout = QVBoxLayout()

        self.metrics_panel = MetricsPanel()
        side_layout.addWidget(self.metrics_panel, stretch=2)

        side_layout.addWidget(QLabel("Captured Targets:"))
        self.targets_list = QListWidget()
        self.targets_list.currentRowChanged.connect(self._show_captured_target)
        side_layout.addWidget(self.targets_list, stretch=1)

        side_panel.setLayout(side_layout)
        splitter.addWidget(side_panel)
        splitter.setSizes([700, 324])

        self.setCentralWidget(splitter)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.status_bar.showMessage("Open a target photo to begin")

    def _create_toolbar(self):
        toolbar = QToolBar()
        toolbar.setIconSize(QSize(24, 24))
        self.addToolBar(toolbar)

        open_action = QAction("Open Photo", self)
        open_action.triggered.connect(self._open_photo)
        toolbar.addAction(open_action)

    def _open_photo(self):
        path, _ = QFileDialog.getOpenFileName(
            self, "Open Target Photo", "", "Images (*.png *.jpg *.jpeg *.bmp)"
        )
        if not path:
            return

        if self.capture_widget.load_image_file(path):
            self.status_bar.showMessage(f"Loaded {path}")
        else:
            self.status_bar.showMessage(f"Could not open {path}")

    def _update_live_metrics(self):
        """Show the group being marked while the capture is in progress."""
        session = self.capture_widget.session
        if session.mode is CaptureMode.IDLE:
            # Keep showing the last saved target
            return
        self.metrics_panel.show_group(session.inch_shots(), session.group_metrics(), "Current group")

    def _handle_target_captured(self, target: CapturedTarget):
        self.captured_targets.append(target)

        formatted = format_group_metrics(target.metrics)
        item = QListWidgetItem(
            f"{target.target_type} @ {target.distance_yards:g} yd - "
            f"{target.metrics.shot_count} shots, {formatted['group_size_moa']}"
        )
        self.targets_list.addItem(item)
        self.targets_list.setCurrentItem(item)

        self.status_bar.showMessage(
            f"Target saved: ES {formatted['extreme_spread']}, MR {formatted['mean_radius']}"
        )
        logger.info("Captured target %s (%d total)", target.temp_id, len(self.captured_targets))

    def _show_captured_target(self, row: int):
        if not 0 <= row < len(self.captured_targets):
            return
        target = self.captured_targets[row]
        self.metrics_panel.show_group(list(target.shots), target.metrics,
                                      f"{target.target_type} @ {target.distance_yards:g} yd")

