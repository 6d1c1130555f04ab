import logging
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from target_capture.calibration import PresetCalibration
from target_capture.coordinates import InchShot, convert_shots
from target_capture.group_metrics import GroupMetrics, compute_group_metrics

if TYPE_CHECKING:
    from target_capture.capture_session import CaptureSession

logger = logging.getLogger(__name__)

CUSTOM_TARGET_TYPE = 'custom'


def generate_id() -> str:
    """Generate a transient identifier for a captured target."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class CapturedTarget:
    """
    Finished capture, ready to hand to the storage layer.

    The photo itself is never part of the result. `temp_id` only identifies
    the target until storage assigns a permanent key.
    """
    target_type: str
    distance_yards: float
    calibration_type: str
    custom_ref_inches: Optional[float]
    shots: Tuple[InchShot, ...]
    metrics: GroupMetrics
    firearm_id: Optional[str] = None
    ammo_id: Optional[str] = None
    notes: Optional[str] = None
    temp_id: str = field(default_factory=generate_id)

    def to_dict(self) -> Dict:
        """
        Convert to a JSON-serialisable dictionary.

        Returns:
            Dictionary with shots as a list of dicts and metrics as a dict
        """
        return {
            'temp_id': self.temp_id,
            'target_type': self.target_type,
            'distance_yards': self.distance_yards,
            'calibration_type': self.calibration_type,
            'custom_ref_inches': self.custom_ref_inches,
            'shots': [
                {
                    'x_inches': shot.x_inches,
                    'y_inches': shot.y_inches,
                    'sequence_number': shot.sequence_number,
                }
                for shot in self.shots
            ],
            'metrics': self.metrics.to_dict(),
            'firearm_id': self.firearm_id,
            'ammo_id': self.ammo_id,
            'notes': self.notes,
        }


def assemble(session: 'CaptureSession') -> Optional[CapturedTarget]:
    """
    Package a capture session into a CapturedTarget.

    The session is read, never modified; clearing it after a successful
    hand-off is the caller's job.

    Args:
        session: The capture session to package

    Returns:
        The captured target, or None unless the session has a positive
        calibration scale, a point of aim and at least one shot
    """
    calibration = session.calibration
    if calibration is None or calibration.scale <= 0:
        logger.debug("Cannot assemble target: session is not calibrated")
        return None
    if session.poa_pixel is None:
        logger.debug("Cannot assemble target: point of aim not set")
        return None
    if not session.shots:
        logger.debug("Cannot assemble target: no shots marked")
        return None

    poa_x, poa_y = session.poa_pixel
    inch_shots = convert_shots(session.shots, poa_x, poa_y, calibration.scale)
    metrics = compute_group_metrics(inch_shots, session.distance_yards)

    if isinstance(calibration, PresetCalibration):
        target_type = calibration.preset_id
        custom_ref_inches = None
    else:
        target_type = CUSTOM_TARGET_TYPE
        custom_ref_inches = calibration.ref_inches

    target = CapturedTarget(
        target_type=target_type,
        distance_yards=session.distance_yards,
        calibration_type=calibration.calibration_type,
        custom_ref_inches=custom_ref_inches,
        shots=tuple(inch_shots),
        metrics=metrics,
        firearm_id=session.firearm_id,
        ammo_id=session.ammo_id,
        notes=session.notes or None,
    )

    logger.info("Assembled target %s: %d shots, ES %.3f in (%.2f MOA)",
                target.temp_id, metrics.shot_count, metrics.extreme_spread, metrics.group_size_moa)
    return target
