import logging
from enum import Enum
from typing import Callable, List, Optional, Tuple

from target_capture.calibration import (
    Calibration, CustomCalibration, InvalidCalibrationInput, PresetCalibration,
    pixel_distance, scale_from_custom, scale_from_preset
)
from target_capture.capture_target import CapturedTarget, assemble
from target_capture.coordinates import InchShot, PixelShot, convert_shots
from target_capture.group_metrics import GroupMetrics, compute_group_metrics
from target_capture.presets import TargetPreset

logger = logging.getLogger(__name__)

DEFAULT_DISTANCE_YARDS = 25.0
DEFAULT_CUSTOM_REF_INCHES = 1.0


class CaptureMode(Enum):
    """Stages of the capture workflow, in order."""
    IDLE = 'idle'
    CALIBRATING = 'calibrating'
    SETTING_POA = 'setting-poa'
    MARKING_SHOTS = 'marking-shots'
    REVIEW = 'review'


class CaptureSession:
    """
    Working state of a single target capture.

    Drives the workflow select image -> calibrate -> set POA -> mark shots ->
    review. Every operation checks that its stage has been reached; calls made
    out of order are logged and ignored (returning False or None) so the
    session is never left in an inconsistent state.
    """

    def __init__(self, default_distance_yards: float = DEFAULT_DISTANCE_YARDS,
                 on_captured: Optional[Callable[[CapturedTarget], None]] = None):
        """
        Initialize an empty capture session.

        Args:
            default_distance_yards: Distance assigned when a new image is selected
            on_captured: Receives the finished target when the capture completes
        """
        self.default_distance_yards = default_distance_yards
        self.on_captured = on_captured
        self._reset_state()

    def _reset_state(self):
        """Discard all accumulated capture data."""
        self.mode = CaptureMode.IDLE

        # Image dimensions; the image itself belongs to the UI
        self.image_width = 0
        self.image_height = 0

        self.distance_yards = self.default_distance_yards

        # Calibration
        self.calibration: Optional[Calibration] = None
        self.custom_point1: Optional[Tuple[float, float]] = None
        self.custom_point2: Optional[Tuple[float, float]] = None
        self.custom_ref_inches = DEFAULT_CUSTOM_REF_INCHES

        # Point of aim and shots in pixel coordinates
        self.poa_pixel: Optional[Tuple[float, float]] = None
        self._shots: List[PixelShot] = []

        # Links to other records, not validated here
        self.firearm_id: Optional[str] = None
        self.ammo_id: Optional[str] = None
        self.notes = ''

    def _require_mode(self, mode: CaptureMode, operation: str) -> bool:
        if self.mode is not mode:
            logger.debug("Ignoring %s while in mode '%s'", operation, self.mode.value)
            return False
        return True

    @property
    def shots(self) -> Tuple[PixelShot, ...]:
        """Marked shots in tap order, numbered 1..N."""
        return tuple(self._shots)

    @property
    def calibration_scale(self) -> float:
        """Pixels per inch, or 0 when not calibrated."""
        return self.calibration.scale if self.calibration is not None else 0.0

    # ------------------------------------------------------------------
    # Image and session settings
    # ------------------------------------------------------------------

    def select_image(self, width: int, height: int) -> bool:
        """
        Start a capture for a newly selected image.

        Any unconfirmed capture in progress is discarded.

        Args:
            width: Decoded image width in pixels
            height: Decoded image height in pixels

        Returns:
            True if the session moved to calibration
        """
        if width <= 0 or height <= 0:
            logger.warning("Ignoring image with invalid dimensions %sx%s", width, height)
            return False

        if self.mode is not CaptureMode.IDLE:
            logger.info("Discarding unconfirmed capture in mode '%s'", self.mode.value)
            self._reset_state()

        self.image_width = width
        self.image_height = height
        self.distance_yards = self.default_distance_yards
        self.mode = CaptureMode.CALIBRATING
        logger.info("Image selected (%dx%d), calibrating", width, height)
        return True

    def clear_image(self):
        """Drop the image and everything captured on it."""
        self._reset_state()

    def set_distance_yards(self, distance_yards: float):
        self.distance_yards = distance_yards

    def set_firearm_id(self, firearm_id: Optional[str]):
        self.firearm_id = firearm_id

    def set_ammo_id(self, ammo_id: Optional[str]):
        self.ammo_id = ammo_id

    def set_notes(self, notes: str):
        self.notes = notes or ''

    # ------------------------------------------------------------------
    # Calibration
    # ------------------------------------------------------------------

    def apply_preset_calibration(self, preset: TargetPreset, rendered_pixel_dimension: float) -> bool:
        """
        Calibrate from a preset template aligned over the image.

        Args:
            preset: The preset the user aligned
            rendered_pixel_dimension: Confirmed on-screen size of the preset

        Returns:
            True if calibrated; on failure the session stays in calibration
        """
        if not self._require_mode(CaptureMode.CALIBRATING, "preset calibration"):
            return False

        try:
            scale = scale_from_preset(preset, rendered_pixel_dimension)
        except InvalidCalibrationInput as e:
            logger.error("Failed to set calibration preset: %s", e)
            return False

        self.calibration = PresetCalibration(preset_id=preset.id, scale=scale)
        self.mode = CaptureMode.SETTING_POA
        logger.info("Calibrated from preset '%s': %.3f px/in", preset.id, scale)
        return True

    def set_custom_point(self, point_number: int, x: float, y: float) -> bool:
        """
        Set one end of the custom reference line.

        Args:
            point_number: 1 or 2
            x: Pixel X coordinate
            y: Pixel Y coordinate

        Returns:
            True if the point was stored
        """
        if not self._require_mode(CaptureMode.CALIBRATING, "custom calibration point"):
            return False

        if point_number == 1:
            self.custom_point1 = (x, y)
        elif point_number == 2:
            self.custom_point2 = (x, y)
        else:
            logger.warning("Invalid custom calibration point number %s", point_number)
            return False
        return True

    def set_custom_ref_inches(self, inches: float) -> bool:
        if not self._require_mode(CaptureMode.CALIBRATING, "custom reference length"):
            return False
        self.custom_ref_inches = inches
        return True

    def apply_custom_calibration(self) -> bool:
        """
        Calibrate from the two reference points and the stated real length.

        Returns:
            True if calibrated; False if a point is missing, the length is not
            positive or the points coincide
        """
        if not self._require_mode(CaptureMode.CALIBRATING, "custom calibration"):
            return False

        if self.custom_point1 is None or self.custom_point2 is None or self.custom_ref_inches <= 0:
            logger.warning("Custom calibration needs two points and a positive reference length")
            return False

        measured = pixel_distance(self.custom_point1[0], self.custom_point1[1],
                                  self.custom_point2[0], self.custom_point2[1])
        try:
            scale = scale_from_custom(measured, self.custom_ref_inches)
        except InvalidCalibrationInput as e:
            logger.error("Failed to apply custom calibration: %s", e)
            return False

        self.calibration = CustomCalibration(
            point1=self.custom_point1,
            point2=self.custom_point2,
            ref_inches=self.custom_ref_inches,
            scale=scale,
        )
        self.mode = CaptureMode.SETTING_POA
        logger.info("Calibrated from %.1f px reference over %.3f in: %.3f px/in",
                    measured, self.custom_ref_inches, scale)
        return True

    # ------------------------------------------------------------------
    # Point of aim and shots
    # ------------------------------------------------------------------

    def set_poa(self, x: float, y: float) -> bool:
        """Set (or replace) the point of aim and move on to marking shots."""
        if not self._require_mode(CaptureMode.SETTING_POA, "set POA"):
            return False

        self.poa_pixel = (x, y)
        self.mode = CaptureMode.MARKING_SHOTS
        return True

    def add_shot(self, x: float, y: float) -> bool:
        """Append a shot numbered after the existing ones."""
        if not self._require_mode(CaptureMode.MARKING_SHOTS, "add shot"):
            return False

        self._shots.append(PixelShot(x, y, len(self._shots) + 1))
        return True

    def remove_shot(self, index: int) -> bool:
        """
        Remove the shot at a list index and renumber the rest 1..N.

        Args:
            index: 0-based position in the shot list

        Returns:
            True if a shot was removed
        """
        if not self._require_mode(CaptureMode.MARKING_SHOTS, "remove shot"):
            return False
        if not 0 <= index < len(self._shots):
            logger.debug("Ignoring removal of missing shot index %s", index)
            return False

        del self._shots[index]
        self._renumber_shots()
        return True

    def move_shot(self, index: int, x: float, y: float) -> bool:
        """Move an existing shot marker, keeping its sequence number."""
        if not self._require_mode(CaptureMode.MARKING_SHOTS, "move shot"):
            return False
        if not 0 <= index < len(self._shots):
            return False

        self._shots[index] = PixelShot(x, y, self._shots[index].sequence_number)
        return True

    def undo_last_shot(self) -> bool:
        """Remove the most recently marked shot, if any."""
        if not self._require_mode(CaptureMode.MARKING_SHOTS, "undo shot"):
            return False
        if not self._shots:
            return False

        self._shots.pop()
        return True

    def clear_shots(self) -> int:
        """
        Remove every marked shot, keeping calibration and POA.

        Returns:
            Number of shots removed
        """
        if not self._require_mode(CaptureMode.MARKING_SHOTS, "clear shots"):
            return 0

        removed = len(self._shots)
        self._shots = []
        return removed

    def _renumber_shots(self):
        self._shots = [
            PixelShot(shot.x, shot.y, i + 1) for i, shot in enumerate(self._shots)
        ]

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def back(self) -> CaptureMode:
        """
        Step back one stage.

        Marking shots with shots placed returns to POA setting (the shots are
        kept and a new POA replaces the old one). POA setting returns to
        calibration and drops the current scale. Going back from calibration,
        from review, or from marking shots with nothing marked, discards
        the capture.

        Returns:
            The mode after stepping back
        """
        if self.mode is CaptureMode.REVIEW:
            logger.info("Back from review, discarding capture")
            self._reset_state()
        elif self.mode is CaptureMode.MARKING_SHOTS:
            if self._shots:
                self.mode = CaptureMode.SETTING_POA
            else:
                logger.info("Back with no shots marked, discarding capture")
                self._reset_state()
        elif self.mode is CaptureMode.SETTING_POA:
            self.calibration = None
            self.mode = CaptureMode.CALIBRATING
        elif self.mode is CaptureMode.CALIBRATING:
            logger.info("Back from calibration, discarding capture")
            self._reset_state()

        return self.mode

    def confirm_shots(self) -> bool:
        """Freeze the marked shots for review (needs at least one shot)."""
        if not self._require_mode(CaptureMode.MARKING_SHOTS, "confirm shots"):
            return False
        if not self._shots:
            logger.debug("Ignoring confirm with no shots marked")
            return False

        self.mode = CaptureMode.REVIEW
        return True

    def complete(self) -> Optional[CapturedTarget]:
        """
        Finish the reviewed capture.

        Assembles the target, hands it to `on_captured` and then clears the
        session. If the hand-off raises, the session is left untouched.

        Returns:
            The captured target, or None if the session is not in review
        """
        if not self._require_mode(CaptureMode.REVIEW, "complete"):
            return None

        target = assemble(self)
        if target is None:
            return None

        if self.on_captured is not None:
            self.on_captured(target)

        self._reset_state()
        return target

    def cancel(self):
        """Abandon the capture; nothing is kept or handed off."""
        if self.mode is not CaptureMode.IDLE:
            logger.info("Capture cancelled in mode '%s'", self.mode.value)
        self._reset_state()

    # ------------------------------------------------------------------
    # Derived results
    # ------------------------------------------------------------------

    def inch_shots(self) -> List[InchShot]:
        """Shots converted to inches from the POA, empty until calibrated with a POA."""
        if self.poa_pixel is None or self.calibration_scale <= 0 or not self._shots:
            return []

        return convert_shots(self._shots, self.poa_pixel[0], self.poa_pixel[1], self.calibration_scale)

    def group_metrics(self) -> Optional[GroupMetrics]:
        """Current group metrics, recomputed from the shots every call."""
        inch_shots = self.inch_shots()
        if not inch_shots:
            return None

        return compute_group_metrics(inch_shots, self.distance_yards)
