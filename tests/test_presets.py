"""Tests for the target preset catalog."""

from target_capture.presets import (
    COMMON_DISTANCES, TARGET_PRESETS, get_available_presets,
    get_calibration_suggestion, get_target_preset
)


def test_catalog_ids_are_unique():
    ids = [preset.id for preset in TARGET_PRESETS]
    assert len(ids) == len(set(ids))


def test_every_preset_has_positive_dimension():
    assert all(preset.known_dimension_inches > 0 for preset in TARGET_PRESETS)


def test_lookup_by_id():
    preset = get_target_preset('b8-repair')
    assert preset is not None
    assert preset.known_dimension_inches == 5.5
    assert preset.name == 'NRA B-8 Repair Center'


def test_unknown_id_returns_none():
    assert get_target_preset('no-such-target') is None


def test_available_presets_is_a_copy():
    presets = get_available_presets()
    presets.clear()
    assert len(get_available_presets()) == len(TARGET_PRESETS)


def test_calibration_suggestions():
    assert '5.5' in get_calibration_suggestion('b8-repair')
    assert '18' in get_calibration_suggestion('uspsa-metric')
    assert get_calibration_suggestion('paper-plate') == 'Measure any known dimension on your target'


def test_common_distances_sorted():
    assert list(COMMON_DISTANCES) == sorted(COMMON_DISTANCES)
    assert 25 in COMMON_DISTANCES
