from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class TargetPreset:
    """
    A catalog target with a documented real-world dimension.

    Attributes:
        id: Stable preset identifier (stored as the target type)
        name: Display name
        known_dimension_inches: Reference size used for calibration
        description: Short description shown next to the preset
    """
    id: str
    name: str
    known_dimension_inches: float
    description: str


TARGET_PRESETS: List[TargetPreset] = [
    TargetPreset('b8-repair', 'NRA B-8 Repair Center', 5.5,    # Outer black diameter
                 '25-yard pistol bullseye (5.5" black)'),
    TargetPreset('uspsa-metric', 'USPSA Metric', 18.0,         # Full target height
                 'USPSA/IPSC metric target'),
    TargetPreset('idpa-silhouette', 'IDPA Silhouette', 8.0,    # Down Zero circle
                 'IDPA/Defensive silhouette'),
    TargetPreset('index-card', '3x5 Index Card', 5.0,
                 'Standard 3x5" index card'),
    TargetPreset('paper-plate', '9" Paper Plate', 9.0,
                 '9-inch white paper plate'),
    TargetPreset('moa-grid', 'MOA Grid', 1.0,
                 'Precision 1/4" and 1" grid'),
    TargetPreset('dot-torture', 'Dot Torture', 2.0,
                 '10 numbered 2" circles'),
    TargetPreset('multi-bull', '5-Bullseye Precision', 3.0,    # Outer ring
                 'Sheet with 5 precision bullseyes'),
    TargetPreset('neutral-grid', 'Neutral Grid', 1.0,
                 '1-inch grid for any target'),
]

# Common shooting distances (yards)
COMMON_DISTANCES = (3, 5, 7, 10, 15, 25, 50, 100)


def get_available_presets() -> List[TargetPreset]:
    """Return the preset catalog in display order."""
    return list(TARGET_PRESETS)


def get_target_preset(preset_id: str) -> Optional[TargetPreset]:
    """
    Look up a preset by its identifier.

    Args:
        preset_id: Preset ID such as 'b8-repair'

    Returns:
        The matching preset, or None if the ID is unknown
    """
    for preset in TARGET_PRESETS:
        if preset.id == preset_id:
            return preset
    return None


def get_calibration_suggestion(target_type: str) -> str:
    """Tell the user which feature of the target to measure for custom calibration."""
    if target_type == 'b8-repair':
        return 'Measure the outer edge of the black (5.5 inches)'
    if target_type == 'uspsa-metric':
        return 'Measure the height of the A-zone (6 inches) or full target height (18 inches)'
    if target_type == 'neutral-grid':
        return 'Measure any known reference on your target'
    return 'Measure any known dimension on your target'
