"""WFS driving functions and wave field simulation."""

from wfs_toolbox.core.driving import (
    DrivingSignals,
    driving_function_imp_wfs_25d,
    driving_parameters,
)
from wfs_toolbox.core.field import FieldSnapshot, wave_field_imp, xy_grid
from wfs_toolbox.core.simulation import WaveField, wave_field_imp_wfs_25d

__all__ = [
    # Driving functions
    "DrivingSignals",
    "driving_parameters",
    "driving_function_imp_wfs_25d",
    # Sound field
    "FieldSnapshot",
    "xy_grid",
    "wave_field_imp",
    "WaveField",
    "wave_field_imp_wfs_25d",
]
