import logging
from dataclasses import dataclass
from typing import Optional

from PyQt6.QtCore import QSettings

from target_capture.calibration import (
    DEFAULT_PRESET_FILL_RATIO, MAX_REASONABLE_SCALE, MIN_REASONABLE_SCALE
)
from target_capture.presets import get_target_preset

logger = logging.getLogger(__name__)

ORGANIZATION_NAME = "ShotGroupCapture"
APPLICATION_NAME = "App"


@dataclass
class CaptureSettings:
    """
    User-adjustable defaults for the capture workflow.

    Attributes:
        default_distance_yards: Distance assumed when a new image is selected
        default_preset_id: Preset pre-selected in the calibration panel
        preset_fill_ratio: Fraction of the shorter image side a preset covers at 100%
        min_reasonable_scale: Lower bound of the scale sanity warning
        max_reasonable_scale: Upper bound of the scale sanity warning
        marker_radius: Radius of the shot/POA markers drawn on the photo (px)
    """
    default_distance_yards: float = 25.0
    default_preset_id: str = 'b8-repair'
    preset_fill_ratio: float = DEFAULT_PRESET_FILL_RATIO
    min_reasonable_scale: float = MIN_REASONABLE_SCALE
    max_reasonable_scale: float = MAX_REASONABLE_SCALE
    marker_radius: int = 8


def _settings_store(settings: Optional[QSettings]) -> QSettings:
    if settings is None:
        return QSettings(ORGANIZATION_NAME, APPLICATION_NAME)
    return settings


def _read(store: QSettings, key: str, default, value_type):
    """Read one typed value, falling back to the default if it cannot be converted."""
    try:
        return store.value(key, default, value_type)
    except (TypeError, ValueError):
        logger.warning("Ignoring unreadable setting %s=%r", key, store.value(key))
        return default


def load_settings(settings: Optional[QSettings] = None) -> CaptureSettings:
    """
    Load capture settings from QSettings.

    Stored values that would break the workflow are replaced by the defaults.

    Args:
        settings: Settings store, defaults to the application's QSettings

    Returns:
        Capture settings
    """
    store = _settings_store(settings)
    defaults = CaptureSettings()

    loaded = CaptureSettings(
        default_distance_yards=_read(store, "capture/default_distance_yards",
            defaults.default_distance_yards, float),
        default_preset_id=_read(store, "capture/default_preset_id",
            defaults.default_preset_id, str),
        preset_fill_ratio=_read(store, "capture/preset_fill_ratio",
            defaults.preset_fill_ratio, float),
        min_reasonable_scale=_read(store, "capture/min_reasonable_scale",
            defaults.min_reasonable_scale, float),
        max_reasonable_scale=_read(store, "capture/max_reasonable_scale",
            defaults.max_reasonable_scale, float),
        marker_radius=_read(store, "capture/marker_radius",
            defaults.marker_radius, int),
    )

    if not loaded.default_distance_yards > 0:
        logger.warning("Ignoring non-positive default distance %s", loaded.default_distance_yards)
        loaded.default_distance_yards = defaults.default_distance_yards

    if get_target_preset(loaded.default_preset_id) is None:
        logger.warning("Ignoring unknown default preset '%s'", loaded.default_preset_id)
        loaded.default_preset_id = defaults.default_preset_id

    if not 0 < loaded.preset_fill_ratio <= 1:
        logger.warning("Ignoring preset fill ratio %s outside (0, 1]", loaded.preset_fill_ratio)
        loaded.preset_fill_ratio = defaults.preset_fill_ratio

    if not 0 < loaded.min_reasonable_scale < loaded.max_reasonable_scale:
        logger.warning("Ignoring invalid scale bounds %s-%s",
                       loaded.min_reasonable_scale, loaded.max_reasonable_scale)
        loaded.min_reasonable_scale = defaults.min_reasonable_scale
        loaded.max_reasonable_scale = defaults.max_reasonable_scale

    if loaded.marker_radius <= 0:
        logger.warning("Ignoring non-positive marker radius %s", loaded.marker_radius)
        loaded.marker_radius = defaults.marker_radius

    return loaded


def save_settings(capture_settings: CaptureSettings, settings: Optional[QSettings] = None):
    """Save capture settings to QSettings."""
    store = _settings_store(settings)

    store.setValue("capture/default_distance_yards", capture_settings.default_distance_yards)
    store.setValue("capture/default_preset_id", capture_settings.default_preset_id)
    store.setValue("capture/preset_fill_ratio", capture_settings.preset_fill_ratio)
    store.setValue("capture/min_reasonable_scale", capture_settings.min_reasonable_scale)
    store.setValue("capture/max_reasonable_scale", capture_settings.max_reasonable_scale)
    store.setValue("capture/marker_radius", capture_settings.marker_radius)
    store.sync()
