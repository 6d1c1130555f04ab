"""Tests for packaging a capture session into a CapturedTarget."""

import dataclasses
import json
import math

import pytest

from target_capture.capture_session import CaptureMode, CaptureSession
from target_capture.capture_target import CapturedTarget, assemble


@pytest.fixture
def custom_session():
    """Custom-calibrated session (50 px/in) with two shots."""
    capture = CaptureSession()
    capture.select_image(800, 600)
    capture.set_custom_point(1, 100, 100)
    capture.set_custom_point(2, 200, 100)
    capture.set_custom_ref_inches(2.0)
    capture.apply_custom_calibration()
    capture.set_poa(300, 300)
    capture.add_shot(350, 300)
    capture.add_shot(300, 250)
    return capture


def test_no_target_without_calibration():
    capture = CaptureSession()
    capture.select_image(800, 600)
    assert assemble(capture) is None


def test_no_target_without_shots(marking_session):
    # Calibrated with a POA but nothing marked
    assert marking_session.calibration_scale > 0
    assert marking_session.poa_pixel is not None
    assert assemble(marking_session) is None


def test_preset_target(marking_session):
    marking_session.add_shot(430, 370)
    marking_session.add_shot(370, 430)
    marking_session.set_ammo_id('ammo-9')

    target = assemble(marking_session)

    assert target.target_type == 'b8-repair'
    assert target.calibration_type == 'preset'
    assert target.custom_ref_inches is None
    assert target.distance_yards == 25
    assert target.ammo_id == 'ammo-9'
    assert target.firearm_id is None
    assert target.notes is None
    assert [shot.sequence_number for shot in target.shots] == [1, 2]
    assert (target.shots[0].x_inches, target.shots[0].y_inches) == pytest.approx((0.5, 0.5))
    assert target.metrics.extreme_spread == pytest.approx(math.sqrt(2))
    assert target.metrics.group_size_moa == pytest.approx(141.42 / 26.175, abs=1e-3)


def test_custom_target(custom_session):
    custom_session.set_notes("windy")
    target = assemble(custom_session)

    assert target.target_type == 'custom'
    assert target.calibration_type == 'custom'
    assert target.custom_ref_inches == 2.0
    assert target.notes == 'windy'
    assert (target.shots[0].x_inches, target.shots[0].y_inches) == pytest.approx((1.0, 0.0))
    assert (target.shots[1].x_inches, target.shots[1].y_inches) == pytest.approx((0.0, 1.0))
    assert target.metrics.extreme_spread == pytest.approx(math.sqrt(2))


def test_assemble_does_not_change_session(custom_session):
    mode = custom_session.mode
    shots = custom_session.shots

    assemble(custom_session)

    assert custom_session.mode is mode
    assert custom_session.shots == shots


def test_each_target_gets_new_id(custom_session):
    first = assemble(custom_session)
    second = assemble(custom_session)
    assert first.temp_id != second.temp_id


def test_target_is_immutable(custom_session):
    target = assemble(custom_session)
    with pytest.raises(dataclasses.FrozenInstanceError):
        target.distance_yards = 100


def test_to_dict_is_json_serialisable(custom_session):
    target = assemble(custom_session)
    data = json.loads(json.dumps(target.to_dict()))

    assert data['temp_id'] == target.temp_id
    assert data['calibration_type'] == 'custom'
    assert data['shots'][0] == {'x_inches': 1.0, 'y_inches': 0.0, 'sequence_number': 1}
    assert data['metrics']['shot_count'] == 2


def test_completed_review_matches_assembly(custom_session):
    expected = assemble(custom_session)
    custom_session.confirm_shots()

    target = custom_session.complete()

    assert isinstance(target, CapturedTarget)
    assert target.shots == expected.shots
    assert target.metrics == expected.metrics
    assert custom_session.mode is CaptureMode.IDLE
