"""Fit latent aerodynamic parameters so simulated carry matches the observed distance."""
from __future__ import annotations

from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, fields
import json
import logging
from pathlib import Path
from typing import Iterable

from .events import HitRecord
from .paths import DEFAULT_CALIBRATION_PATH
from .physics import (
    DEFAULT_BOUNDS,
    DEFAULT_TIME_STEP,
    AeroParameters,
    ParameterBounds,
    TrajectoryPath,
    simulate,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CalibrationSettings:
    tolerance_ft: float = 1.0
    max_iterations: int = 50
    initial_cl: float = 0.2
    initial_cd: float = 0.5
    initial_release_height: float = 1.0
    cl_gain: float = 0.001
    cd_gain: float = 0.0005
    release_height_gain: float = 0.0005
    spin_gain: float = 0.5
    time_step: float = DEFAULT_TIME_STEP
    bounds: ParameterBounds = DEFAULT_BOUNDS

    def __post_init__(self) -> None:
        if self.max_iterations < 1:
            msg = f"max_iterations must be at least 1, got {self.max_iterations}"
            raise ValueError(msg)
        if self.time_step <= 0:
            msg = f"time_step must be positive, got {self.time_step}"
            raise ValueError(msg)

    @classmethod
    def from_file(cls, path: Path = DEFAULT_CALIBRATION_PATH) -> "CalibrationSettings":
        data = json.loads(Path(path).read_text())
        known = {item.name for item in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            msg = f"Unknown calibration settings in {path}: {', '.join(unknown)}"
            raise ValueError(msg)
        kwargs = {name: value for name, value in data.items() if name != "bounds"}
        if "max_iterations" in kwargs:
            kwargs["max_iterations"] = int(kwargs["max_iterations"])
        bounds = data.get("bounds")
        if bounds is not None:
            kwargs["bounds"] = _bounds_from_json(bounds, path)
        return cls(**kwargs)


@dataclass(slots=True)
class CalibrationResult:
    hit: HitRecord
    path: TrajectoryPath
    parameters: AeroParameters
    iterations: int
    distance_error_ft: float

    @property
    def simulated_distance_ft(self) -> float:
        return self.path.landing_distance_ft


class Calibrator:
    """Proportional-feedback search over Cl, Cd, release height and spin.

    Every iteration simulates the hit, compares the landing distance with the
    observed carry and nudges each parameter by a fixed gain times the
    difference before clamping it back into its range. The search stops when
    the difference is within tolerance or the iteration budget runs out; in
    the latter case the last path and the already-updated parameters are
    returned unchanged.
    """

    def __init__(self, settings: CalibrationSettings | None = None):
        self.settings = settings or CalibrationSettings()

    def calibrate(self, hit: HitRecord) -> CalibrationResult:
        settings = self.settings
        target = hit.observed_distance_ft
        aero = AeroParameters(
            cl=settings.initial_cl,
            cd=settings.initial_cd,
            release_height=settings.initial_release_height,
            spin_rpm=hit.launch.spin_rpm,
        )

        path = TrajectoryPath(points=())
        diff = target
        iterations = 0
        for _ in range(settings.max_iterations):
            path = simulate(hit.launch, aero, settings.time_step)
            iterations += 1
            diff = target - path.landing_distance_ft
            logger.debug(
                "hit %s iteration %d: diff=%.3f ft cl=%.4f cd=%.4f h=%.4f spin=%.1f",
                hit.hit_id,
                iterations,
                diff,
                aero.cl,
                aero.cd,
                aero.release_height,
                aero.spin_rpm,
            )
            if abs(diff) < settings.tolerance_ft:
                break

            aero.cl += settings.cl_gain * diff
            aero.cd -= settings.cd_gain * diff
            aero.release_height += settings.release_height_gain * diff
            aero.spin_rpm += settings.spin_gain * diff
            aero.clamp(settings.bounds)
        else:
            logger.info(
                "hit %s did not converge after %d iterations (residual %.2f ft)",
                hit.hit_id,
                iterations,
                diff,
            )

        return CalibrationResult(
            hit=hit,
            path=path,
            parameters=aero,
            iterations=iterations,
            distance_error_ft=-diff,
        )

    def calibrate_many(self, hits: Iterable[HitRecord], *, workers: int = 1) -> list[CalibrationResult]:
        """Calibrate hits in input order, optionally across worker processes."""
        hits = list(hits)
        if workers <= 1 or len(hits) <= 1:
            return [self.calibrate(hit) for hit in hits]
        chunksize = max(1, len(hits) // (workers * 4))
        with ProcessPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(self.calibrate, hits, chunksize=chunksize))


def calibrate(hit: HitRecord, settings: CalibrationSettings | None = None) -> CalibrationResult:
    return Calibrator(settings).calibrate(hit)


def _bounds_from_json(data: dict, path: Path) -> ParameterBounds:
    known = {item.name for item in fields(ParameterBounds)}
    unknown = sorted(set(data) - known)
    if unknown:
        msg = f"Unknown parameter bounds in {path}: {', '.join(unknown)}"
        raise ValueError(msg)
    intervals = {}
    for name, value in data.items():
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            msg = f"Bound {name} in {path} must be a [low, high] pair, got {value!r}"
            raise ValueError(msg)
        intervals[name] = (float(value[0]), float(value[1]))
    return ParameterBounds(**intervals)
