"""carrysim package — calibrate batted ball trajectories to observed carry distance."""

from .calibration import CalibrationResult, CalibrationSettings, Calibrator, calibrate
from .events import HitLoader, HitRecord
from .physics import (
    AeroParameters,
    LaunchConditions,
    ParameterBounds,
    PhysicalConstants,
    TrajectoryPath,
    TrajectoryPoint,
    simulate,
)

__all__ = [
    "AeroParameters",
    "CalibrationResult",
    "CalibrationSettings",
    "Calibrator",
    "HitLoader",
    "HitRecord",
    "LaunchConditions",
    "ParameterBounds",
    "PhysicalConstants",
    "TrajectoryPath",
    "TrajectoryPoint",
    "calibrate",
    "simulate",
]
