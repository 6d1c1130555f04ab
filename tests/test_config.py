"""Tests for loading and saving capture settings with QSettings."""

import pytest

QtCore = pytest.importorskip("PyQt6.QtCore")

from target_capture.config import CaptureSettings, load_settings, save_settings


@pytest.fixture
def ini_settings(tmp_path):
    return QtCore.QSettings(str(tmp_path / "capture.ini"), QtCore.QSettings.Format.IniFormat)


def test_defaults_when_nothing_stored(ini_settings):
    assert load_settings(ini_settings) == CaptureSettings()


def test_save_and_load(ini_settings):
    custom = CaptureSettings(
        default_distance_yards=50.0,
        default_preset_id='paper-plate',
        preset_fill_ratio=0.8,
        min_reasonable_scale=10.0,
        max_reasonable_scale=300.0,
        marker_radius=12,
    )
    save_settings(custom, ini_settings)

    assert load_settings(ini_settings) == custom


@pytest.mark.parametrize("key, value, field, default", [
    ("capture/default_distance_yards", -10.0, 'default_distance_yards', 25.0),
    ("capture/default_preset_id", 'no-such-preset', 'default_preset_id', 'b8-repair'),
    ("capture/preset_fill_ratio", 1.5, 'preset_fill_ratio', 0.6),
    ("capture/marker_radius", 0, 'marker_radius', 8),
    ("capture/default_distance_yards", 'far', 'default_distance_yards', 25.0),
    ("capture/preset_fill_ratio", 'most', 'preset_fill_ratio', 0.6),
    ("capture/marker_radius", 'big', 'marker_radius', 8),
])
def test_invalid_values_fall_back_to_defaults(ini_settings, key, value, field, default):
    ini_settings.setValue(key, value)
    ini_settings.sync()

    assert getattr(load_settings(ini_settings), field) == default


def test_inverted_scale_bounds_fall_back(ini_settings):
    ini_settings.setValue("capture/min_reasonable_scale", 400.0)
    ini_settings.setValue("capture/max_reasonable_scale", 100.0)

    loaded = load_settings(ini_settings)
    assert (loaded.min_reasonable_scale, loaded.max_reasonable_scale) == (5.0, 500.0)
