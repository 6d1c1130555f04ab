"""Shared fixtures for the target capture tests."""

import os

# Qt and matplotlib must not need a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import matplotlib
matplotlib.use("Agg")

import pytest

from target_capture.capture_session import CaptureSession
from target_capture.presets import get_target_preset


@pytest.fixture
def b8_preset():
    return get_target_preset('b8-repair')


@pytest.fixture
def session():
    """A fresh session with a 800x600 image selected."""
    capture = CaptureSession()
    capture.select_image(800, 600)
    return capture


@pytest.fixture
def marking_session(session, b8_preset):
    """Session calibrated at 60 px/in with the POA at (400, 400)."""
    assert session.apply_preset_calibration(b8_preset, 330)
    assert session.set_poa(400, 400)
    return session
