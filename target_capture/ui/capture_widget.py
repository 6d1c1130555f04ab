from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
    QGroupBox, QGridLayout, QComboBox, QSlider, QDoubleSpinBox,
    QMessageBox, QSizePolicy
)
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QImage, QPixmap, QPainter, QPen, QColor, QFont

import logging
from typing import Optional, Tuple

from target_capture.calibration import default_rendered_dimension, is_reasonable_scale
from target_capture.capture_session import CaptureMode, CaptureSession
from target_capture.config import CaptureSettings
from target_capture.coordinates import inch_to_pixel
from target_capture.presets import (
    COMMON_DISTANCES, get_available_presets, get_calibration_suggestion, get_target_preset
)

logger = logging.getLogger(__name__)

MODE_INSTRUCTIONS = {
    CaptureMode.IDLE: "Load a photo of your target to begin",
    CaptureMode.CALIBRATING: "Calibrate: pick a preset or click two points of known distance",
    CaptureMode.SETTING_POA: "Click your point of aim",
    CaptureMode.MARKING_SHOTS: "Click each bullet hole, then press Done",
    CaptureMode.REVIEW: "Review the group and press Save Target",
}


def widget_to_image(pos_x: float, pos_y: float, widget_width: int, widget_height: int,
                    image_width: int, image_height: int) -> Optional[Tuple[float, float]]:
    """
    Map a click on a widget showing an aspect-fit, centred image to image pixels.

    Args:
        pos_x: Click X in widget coordinates
        pos_y: Click Y in widget coordinates
        widget_width: Widget width
        widget_height: Widget height
        image_width: Image width in pixels
        image_height: Image height in pixels

    Returns:
        (x, y) in image pixels, or None when the click is outside the image
    """
    if image_width <= 0 or image_height <= 0 or widget_width <= 0 or widget_height <= 0:
        return None

    zoom = min(widget_width / image_width, widget_height / image_height)
    offset_x = (widget_width - image_width * zoom) / 2
    offset_y = (widget_height - image_height * zoom) / 2

    x = (pos_x - offset_x) / zoom
    y = (pos_y - offset_y) / zoom
    if not (0 <= x <= image_width and 0 <= y <= image_height):
        return None
    return x, y


class TargetImageView(QLabel):
    """Shows the target photo with calibration, POA and shot markers."""

    image_clicked = pyqtSignal(float, float)

    def __init__(self, marker_radius: int = 8):
        super().__init__()
        self.setMinimumSize(640, 480)
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setText("Target photo will appear here")
        self.setStyleSheet("border: 1px solid #ccc;")

        self.marker_radius = marker_radius
        self.image: Optional[QImage] = None
        self.session: Optional[CaptureSession] = None

        # Preset template outline shown while calibrating, in image pixels
        self.template_size = 0.0
        self.template_name = ''

    def set_image(self, image: Optional[QImage]):
        self.image = image
        self.refresh()

    def set_session(self, session: CaptureSession):
        self.session = session

    def set_template(self, size: float, name: str = ''):
        self.template_size = size
        self.template_name = name

    def display_zoom(self) -> float:
        """Ratio of on-screen pixels to image pixels."""
        if self.image is None or self.image.isNull():
            return 1.0
        rect = self.contentsRect()
        if rect.width() <= 0 or rect.height() <= 0:
            return 1.0
        return min(rect.width() / self.image.width(), rect.height() / self.image.height())

    def refresh(self):
        """Redraw the photo with the current session's markers."""
        if self.image is None or self.image.isNull():
            self.clear()
            self.setText("Target photo will appear here")
            return

        pixmap = QPixmap.fromImage(self.image)
        if self.session is not None:
            self._draw_markers(pixmap)

        self.setPixmap(pixmap.scaled(self.contentsRect().size(), Qt.AspectRatioMode.KeepAspectRatio,
                                     Qt.TransformationMode.SmoothTransformation))

    def _draw_markers(self, pixmap: QPixmap):
        session = self.session

        # Markers are drawn before scaling, so size them for the screen
        scale = 1.0 / self.display_zoom()
        r = max(1, round(self.marker_radius * scale))
        line_width = max(1, round(3 * scale))

        painter = QPainter(pixmap)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        if session.mode is CaptureMode.CALIBRATING:
            # Preset template centred on the photo
            if self.template_size > 0:
                size = round(self.template_size)
                left = round((pixmap.width() - size) / 2)
                top = round((pixmap.height() - size) / 2)
                pen = QPen(QColor("#00ACC1"), line_width)
                pen.setStyle(Qt.PenStyle.DashLine)
                painter.setPen(pen)
                painter.drawRect(left, top, size, size)
                if self.template_name:
                    font = QFont("Arial", max(10, r + 4))
                    painter.setFont(font)
                    painter.drawText(left, top - line_width * 2, self.template_name)

            # Custom calibration reference line
            painter.setPen(QPen(QColor("#FFB300"), line_width))
            points = [p for p in (session.custom_point1, session.custom_point2) if p is not None]
            for x, y in points:
                painter.drawEllipse(int(x - r), int(y - r), 2 * r, 2 * r)
            if len(points) == 2:
                painter.drawLine(int(points[0][0]), int(points[0][1]),
                                 int(points[1][0]), int(points[1][1]))

        # Point of aim crosshair
        if session.poa_pixel is not None:
            x, y = session.poa_pixel
            painter.setPen(QPen(QColor("#2E7D32"), line_width))
            painter.drawLine(int(x - 2 * r), int(y), int(x + 2 * r), int(y))
            painter.drawLine(int(x), int(y - 2 * r), int(x), int(y + 2 * r))

        # Shots with their sequence numbers
        font = QFont("Arial", max(10, r + 4))
        font.setBold(True)
        painter.setFont(font)
        painter.setPen(QPen(QColor("#D32F2F"), line_width))
        for shot in session.shots:
            painter.drawEllipse(int(shot.x - r), int(shot.y - r), 2 * r, 2 * r)
            painter.drawText(int(shot.x + r + 2), int(shot.y - r), str(shot.sequence_number))

        # Group center
        metrics = session.group_metrics()
        if metrics is not None and session.poa_pixel is not None:
            cx, cy = inch_to_pixel(metrics.group_center_x, metrics.group_center_y,
                                   session.poa_pixel[0], session.poa_pixel[1],
                                   session.calibration_scale)
            painter.setPen(QPen(QColor("#1976D2"), max(1, round(2 * scale))))
            painter.drawLine(int(cx - r), int(cy - r), int(cx + r), int(cy + r))
            painter.drawLine(int(cx - r), int(cy + r), int(cx + r), int(cy - r))

        painter.end()

    def mousePressEvent(self, event):
        if self.image is None or event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return

        # The pixmap is centred inside the border
        position = event.position()
        rect = self.contentsRect()
        mapped = widget_to_image(position.x() - rect.x(), position.y() - rect.y(),
                                 rect.width(), rect.height(),
                                 self.image.width(), self.image.height())
        if mapped is not None:
            self.image_clicked.emit(mapped[0], mapped[1])

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.refresh()


class CaptureWidget(QWidget):
    """
    Widget driving a target capture from photo to finished group.
    """

    # Emitted with the CapturedTarget when the user saves the target
    target_captured = pyqtSignal(object)
    # Emitted whenever the session changes so summaries can refresh
    session_changed = pyqtSignal()

    def __init__(self, capture_settings: Optional[CaptureSettings] = None):
        """
        Initialize the capture widget.

        Args:
            capture_settings: Workflow defaults, CaptureSettings() if omitted
        """
        super().__init__()

        self.capture_settings = capture_settings or CaptureSettings()
        self.session = CaptureSession(
            default_distance_yards=self.capture_settings.default_distance_yards,
            on_captured=self.target_captured.emit,
        )

        # Which custom reference point the next click sets (1 or 2)
        self.next_custom_point = 1

        self.init_ui()
        self.update_ui()

    def init_ui(self):
        """Initialize the user interface elements."""
        main_layout = QVBoxLayout()

        # Toolbar
        toolbar = QHBoxLayout()

        self.back_button = QPushButton("Back")
        self.back_button.clicked.connect(self.go_back)
        toolbar.addWidget(self.back_button)

        self.mode_label = QLabel()
        self.mode_label.setStyleSheet("""
            background-color: #E3F2FD;
            padding: 5px 10px;
            border-radius: 4px;
            color: #1565C0;
            font-weight: bold;
        """)
        toolbar.addWidget(self.mode_label)
        toolbar.addStretch()

        self.undo_button = QPushButton("Undo")
        self.undo_button.clicked.connect(self.undo_shot)
        toolbar.addWidget(self.undo_button)

        self.reset_button = QPushButton("Reset Shots")
        self.reset_button.clicked.connect(self.reset_shots)
        toolbar.addWidget(self.reset_button)

        self.done_button = QPushButton("Done")
        self.done_button.clicked.connect(self.confirm)
        toolbar.addWidget(self.done_button)

        self.cancel_button = QPushButton("Cancel")
        self.cancel_button.clicked.connect(self.cancel)
        toolbar.addWidget(self.cancel_button)

        main_layout.addLayout(toolbar)

        # Photo
        self.image_view = TargetImageView(self.capture_settings.marker_radius)
        self.image_view.set_session(self.session)
        self.image_view.image_clicked.connect(self.handle_image_click)
        main_layout.addWidget(self.image_view, stretch=1)

        # Calibration panel
        self.calibration_group = QGroupBox("Calibration")
        calibration_grid = QGridLayout()

        calibration_grid.addWidget(QLabel("Target Type:"), 0, 0)
        self.preset_selector = QComboBox()
        for preset in get_available_presets():
            self.preset_selector.addItem(preset.name, preset.id)
        default_index = self.preset_selector.findData(self.capture_settings.default_preset_id)
        self.preset_selector.setCurrentIndex(default_index if default_index >= 0 else 0)
        calibration_grid.addWidget(self.preset_selector, 0, 1)

        self.scale_label = QLabel()
        calibration_grid.addWidget(self.scale_label, 1, 0)
        self.scale_slider = QSlider(Qt.Orientation.Horizontal)
        self.scale_slider.setMinimum(10)
        self.scale_slider.setMaximum(300)
        self.scale_slider.setValue(100)
        calibration_grid.addWidget(self.scale_slider, 1, 1)

        self.apply_preset_button = QPushButton("Use Preset")
        self.apply_preset_button.clicked.connect(self.apply_preset_calibration)
        calibration_grid.addWidget(self.apply_preset_button, 1, 2)

        calibration_grid.addWidget(QLabel("Reference Length (in):"), 2, 0)
        self.ref_inches_spinner = QDoubleSpinBox()
        self.ref_inches_spinner.setDecimals(3)
        self.ref_inches_spinner.setMinimum(0.0)
        self.ref_inches_spinner.setMaximum(100.0)
        self.ref_inches_spinner.setValue(1.0)
        calibration_grid.addWidget(self.ref_inches_spinner, 2, 1)

        self.apply_custom_button = QPushButton("Use Reference Line")
        self.apply_custom_button.clicked.connect(self.apply_custom_calibration)
        calibration_grid.addWidget(self.apply_custom_button, 2, 2)

        self.suggestion_label = QLabel()
        self.suggestion_label.setStyleSheet("color: #455A64;")
        calibration_grid.addWidget(self.suggestion_label, 3, 0, 1, 3)

        self.calibration_group.setLayout(calibration_grid)

        # Distance panel
        distance_group = QGroupBox("Distance")
        distance_layout = QHBoxLayout()
        self.distance_selector = QComboBox()
        self.distance_selector.setEditable(True)
        for yards in COMMON_DISTANCES:
            self.distance_selector.addItem(f"{yards} yd", float(yards))
        distance_layout.addWidget(self.distance_selector)
        distance_group.setLayout(distance_layout)

        bottom_layout = QHBoxLayout()
        bottom_layout.addWidget(self.calibration_group, stretch=3)
        bottom_layout.addWidget(distance_group, stretch=1)
        main_layout.addLayout(bottom_layout)

        self.status_label = QLabel()
        main_layout.addWidget(self.status_label)

        self.setLayout(main_layout)

        # Connect after the widgets exist so initial values do not fire handlers
        self.preset_selector.currentIndexChanged.connect(self._template_changed)
        self.scale_slider.valueChanged.connect(self._template_changed)
        self.distance_selector.currentIndexChanged.connect(self.update_distance)
        self.distance_selector.lineEdit().editingFinished.connect(self.update_distance)

    # ------------------------------------------------------------------
    # Image loading
    # ------------------------------------------------------------------

    def load_image(self, image: QImage) -> bool:
        """
        Start a capture on a decoded photo.

        Args:
            image: The decoded target photo

        Returns:
            True if the capture started
        """
        if image is None or image.isNull():
            logger.warning("Cannot start capture: image is empty")
            return False

        if not self.session.select_image(image.width(), image.height()):
            return False

        self.next_custom_point = 1
        self.image_view.set_image(image)
        self._select_distance(self.session.distance_yards)
        self._session_updated()
        return True

    def load_image_file(self, path: str) -> bool:
        """Load a photo from disk and start a capture on it."""
        image = QImage(path)
        if image.isNull():
            logger.error("Could not read target image: %s", path)
            return False
        return self.load_image(image)

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def handle_image_click(self, x: float, y: float):
        """Route a click on the photo to the current workflow stage."""
        mode = self.session.mode

        if mode is CaptureMode.CALIBRATING:
            self.session.set_custom_point(self.next_custom_point, x, y)
            self.next_custom_point = 2 if self.next_custom_point == 1 else 1
        elif mode is CaptureMode.SETTING_POA:
            self.session.set_poa(x, y)
        elif mode is CaptureMode.MARKING_SHOTS:
            self.session.add_shot(x, y)
        else:
            return

        self._session_updated()

    def apply_preset_calibration(self):
        preset = get_target_preset(self.preset_selector.currentData())
        if preset is None:
            return

        rendered = self._rendered_preset_size()
        if self.session.apply_preset_calibration(preset, rendered):
            self._warn_if_unreasonable_scale()
        else:
            self.status_label.setText("Calibration failed: the preset size must be positive")
        self._session_updated()

    def apply_custom_calibration(self):
        self.session.set_custom_ref_inches(self.ref_inches_spinner.value())
        if self.session.apply_custom_calibration():
            self._warn_if_unreasonable_scale()
        else:
            QMessageBox.warning(
                self, "Calibration",
                "Click two distinct points on the photo and enter their real distance in inches."
            )
        self._session_updated()

    def update_distance(self):
        # Items read "25 yd"; typed values may omit the unit
        text = self.distance_selector.currentText().replace('yd', '').strip()
        try:
            yards = float(text)
        except ValueError:
            self.status_label.setText(f"'{text}' is not a distance in yards")
            return
        self.session.set_distance_yards(yards)
        self._session_updated()

    def undo_shot(self):
        self.session.undo_last_shot()
        self._session_updated()

    def reset_shots(self):
        self.session.clear_shots()
        self._session_updated()

    def go_back(self):
        mode = self.session.back()
        if mode is CaptureMode.IDLE:
            self.image_view.set_image(None)
        if mode is CaptureMode.CALIBRATING:
            self.next_custom_point = 1
        self._session_updated()

    def confirm(self):
        """Done in marking mode goes to review; in review it saves the target."""
        if self.session.mode is CaptureMode.MARKING_SHOTS:
            self.session.confirm_shots()
        elif self.session.mode is CaptureMode.REVIEW:
            target = self.session.complete()
            if target is not None:
                self.image_view.set_image(None)
                self.status_label.setText(f"Saved target with {target.metrics.shot_count} shots")
        self._session_updated()

    def cancel(self):
        self.session.cancel()
        self.image_view.set_image(None)
        self._session_updated()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _rendered_preset_size(self) -> float:
        return default_rendered_dimension(
            self.session.image_width, self.session.image_height,
            self.scale_slider.value(), self.capture_settings.preset_fill_ratio
        )

    def _warn_if_unreasonable_scale(self):
        scale = self.session.calibration_scale
        if not is_reasonable_scale(scale, self.capture_settings.min_reasonable_scale,
                                   self.capture_settings.max_reasonable_scale):
            self.status_label.setText(
                f"Warning: {scale:.1f} px/in is unusual for a target photo, check your calibration"
            )
        else:
            self.status_label.setText(f"Calibrated at {scale:.1f} px/in")

    def _select_distance(self, yards: float):
        index = self.distance_selector.findData(float(yards))
        if index >= 0:
            self.distance_selector.setCurrentIndex(index)
        else:
            self.distance_selector.setEditText(f"{yards:g} yd")

    def _template_changed(self):
        self.update_ui()
        self.image_view.refresh()

    def _session_updated(self):
        self.update_ui()
        self.image_view.refresh()
        self.session_changed.emit()

    def update_ui(self):
        """Enable the controls that apply to the current stage."""
        mode = self.session.mode
        has_shots = len(self.session.shots) > 0

        self.mode_label.setText(MODE_INSTRUCTIONS[mode])
        self.calibration_group.setEnabled(mode is CaptureMode.CALIBRATING)
        self.back_button.setEnabled(mode is not CaptureMode.IDLE)
        self.cancel_button.setEnabled(mode is not CaptureMode.IDLE)
        self.undo_button.setEnabled(mode is CaptureMode.MARKING_SHOTS and has_shots)
        self.reset_button.setEnabled(mode is CaptureMode.MARKING_SHOTS and has_shots)
        self.done_button.setEnabled(
            (mode is CaptureMode.MARKING_SHOTS and has_shots) or mode is CaptureMode.REVIEW
        )
        self.done_button.setText("Save Target" if mode is CaptureMode.REVIEW else "Done")

        self.scale_label.setText(f"Scale: {self.scale_slider.value()}%")
        preset_id = self.preset_selector.currentData()
        self.suggestion_label.setText(get_calibration_suggestion(preset_id or ''))

        preset = get_target_preset(preset_id or '')
        if mode is CaptureMode.CALIBRATING and preset is not None:
            self.image_view.set_template(self._rendered_preset_size(), preset.name)
        else:
            self.image_view.set_template(0.0)
