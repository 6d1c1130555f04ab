import math
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from target_capture.calibration import InvalidCalibrationInput


@dataclass(frozen=True)
class PixelShot:
    """
    A bullet hole tapped on the photo.

    Attributes:
        x: Pixel column
        y: Pixel row (grows downward)
        sequence_number: 1-based tap order
    """
    x: float
    y: float
    sequence_number: int


@dataclass(frozen=True)
class InchShot:
    """
    A bullet hole relative to the point of aim.

    Attributes:
        x_inches: Positive means right of the POA
        y_inches: Positive means above the POA
        sequence_number: Carried over from the source PixelShot
    """
    x_inches: float
    y_inches: float
    sequence_number: int


def _check_scale(pixels_per_inch: float):
    if not (math.isfinite(pixels_per_inch) and pixels_per_inch > 0):
        raise InvalidCalibrationInput(f"Pixels per inch must be a positive number (got {pixels_per_inch})")


def pixel_to_inch(pixel_x: float, pixel_y: float,
                  poa_pixel_x: float, poa_pixel_y: float,
                  pixels_per_inch: float) -> Tuple[float, float]:
    """
    Convert a pixel position to inches relative to the point of aim.

    Args:
        pixel_x: X coordinate in pixels
        pixel_y: Y coordinate in pixels
        poa_pixel_x: Point of aim X coordinate in pixels
        poa_pixel_y: Point of aim Y coordinate in pixels
        pixels_per_inch: Calibration scale

    Returns:
        Tuple of (x_inches, y_inches)

    Raises:
        InvalidCalibrationInput: If pixels_per_inch is not positive
    """
    _check_scale(pixels_per_inch)

    x_inches = (pixel_x - poa_pixel_x) / pixels_per_inch
    # Screen Y increases downward, ballistic Y increases upward
    y_inches = (poa_pixel_y - pixel_y) / pixels_per_inch
    return x_inches, y_inches


def inch_to_pixel(x_inches: float, y_inches: float,
                  poa_pixel_x: float, poa_pixel_y: float,
                  pixels_per_inch: float) -> Tuple[float, float]:
    """Inverse of pixel_to_inch, used to draw inch-space markers over the photo."""
    _check_scale(pixels_per_inch)

    return (poa_pixel_x + x_inches * pixels_per_inch,
            poa_pixel_y - y_inches * pixels_per_inch)


def convert_shots(pixel_shots: Iterable[PixelShot],
                  poa_pixel_x: float, poa_pixel_y: float,
                  pixels_per_inch: float) -> List[InchShot]:
    """
    Convert every pixel shot to inch coordinates.

    Order and sequence numbers are preserved.
    """
    _check_scale(pixels_per_inch)

    inch_shots = []
    for shot in pixel_shots:
        x_inches, y_inches = pixel_to_inch(shot.x, shot.y, poa_pixel_x, poa_pixel_y, pixels_per_inch)
        inch_shots.append(InchShot(x_inches, y_inches, shot.sequence_number))
    return inch_shots
