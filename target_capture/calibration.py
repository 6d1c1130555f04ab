import logging
import math
from dataclasses import dataclass
from typing import Tuple, Union

from target_capture.presets import TargetPreset

logger = logging.getLogger(__name__)

# Advisory bounds for a plausible target photo (pixels per inch)
MIN_REASONABLE_SCALE = 5.0
MAX_REASONABLE_SCALE = 500.0

# Preset template fills this fraction of the shorter image side at 100% scale
DEFAULT_PRESET_FILL_RATIO = 0.6


class InvalidCalibrationInput(ValueError):
    """Raised when a calibration reference or measurement is not strictly positive."""


@dataclass(frozen=True)
class PresetCalibration:
    """Calibration taken from a catalog preset aligned over the photo."""
    preset_id: str
    scale: float

    @property
    def calibration_type(self) -> str:
        return 'preset'


@dataclass(frozen=True)
class CustomCalibration:
    """
    Calibration taken from a user-drawn reference line.

    Attributes:
        point1: First end of the reference line (pixels)
        point2: Second end of the reference line (pixels)
        ref_inches: Real-world length of the reference line
        scale: Resulting pixels per inch
    """
    point1: Tuple[float, float]
    point2: Tuple[float, float]
    ref_inches: float
    scale: float

    @property
    def calibration_type(self) -> str:
        return 'custom'


Calibration = Union[PresetCalibration, CustomCalibration]


def _is_positive(value: float) -> bool:
    # NaN and infinity never make a usable scale
    return math.isfinite(value) and value > 0


def scale_from_preset(preset: TargetPreset, rendered_pixel_dimension: float) -> float:
    """
    Calculate pixels-per-inch from a preset template aligned over the photo.

    The UI renders the preset's reference feature at some on-screen size; once
    the user confirms the alignment that pixel size corresponds to the preset's
    known real-world dimension.

    Args:
        preset: The target preset used for calibration
        rendered_pixel_dimension: Pixel size of the preset as rendered

    Returns:
        Pixels per inch

    Raises:
        InvalidCalibrationInput: If either dimension is not a positive finite number
    """
    if not _is_positive(preset.known_dimension_inches):
        raise InvalidCalibrationInput(
            f"Preset '{preset.id}' must have a positive known dimension "
            f"(got {preset.known_dimension_inches})"
        )
    if not _is_positive(rendered_pixel_dimension):
        raise InvalidCalibrationInput(
            f"Rendered dimension must be positive (got {rendered_pixel_dimension})"
        )

    return rendered_pixel_dimension / preset.known_dimension_inches


def scale_from_custom(measured_pixels: float, known_inches: float) -> float:
    """
    Calculate pixels-per-inch from a reference line of known length.

    Args:
        measured_pixels: Pixel length of the line the user drew
        known_inches: Real-world length of that line

    Returns:
        Pixels per inch

    Raises:
        InvalidCalibrationInput: If either measurement is not a positive finite number
    """
    if not _is_positive(known_inches):
        raise InvalidCalibrationInput(f"Known distance must be positive (got {known_inches})")
    if not _is_positive(measured_pixels):
        raise InvalidCalibrationInput(f"Measured distance must be positive (got {measured_pixels})")

    return measured_pixels / known_inches


def pixel_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Euclidean distance between two pixel positions."""
    dx = x2 - x1
    dy = y2 - y1
    return math.sqrt(dx * dx + dy * dy)


def is_reasonable_scale(pixels_per_inch: float,
                        min_scale: float = MIN_REASONABLE_SCALE,
                        max_scale: float = MAX_REASONABLE_SCALE) -> bool:
    """
    Check whether a scale is plausible for a photographed target.

    This is advisory only: the UI uses it to warn the user, calibration is
    never rejected because of it.

    Args:
        pixels_per_inch: The scale to check
        min_scale: Lowest plausible scale (a very large image of a normal target)
        max_scale: Highest plausible scale (a tiny image of a normal target)

    Returns:
        True if the scale lies within [min_scale, max_scale]
    """
    return min_scale <= pixels_per_inch <= max_scale


def inches_to_pixels(inches: float, pixels_per_inch: float) -> float:
    """Size of a real-world dimension on the photo, given the scale."""
    return inches * pixels_per_inch


def default_rendered_dimension(image_width: float, image_height: float,
                               scale_percent: float = 100.0,
                               fill_ratio: float = DEFAULT_PRESET_FILL_RATIO) -> float:
    """
    Suggested on-screen size of a preset template for an image.

    At 100% the template fills `fill_ratio` of the shorter image side; the
    user adjusts `scale_percent` until the template lines up with the photo.

    Args:
        image_width: Image width in pixels
        image_height: Image height in pixels
        scale_percent: User adjustment, 100 meaning the default size
        fill_ratio: Fraction of the shorter side covered at 100%

    Returns:
        Rendered template size in pixels (0 for an empty image)
    """
    base_size = min(image_width, image_height) * fill_ratio
    if base_size <= 0:
        return 0.0
    return base_size * scale_percent / 100.0
