"""Command line interface implemented with argparse."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from .calibration import CalibrationSettings, Calibrator
from .events import CoordinateTransform, HitLoader
from .output import ResultWriter
from .paths import DEFAULT_CALIBRATION_PATH, DEFAULT_COORDINATE_PATH
from .physics import DEFAULT_TIME_STEP, AeroParameters, LaunchConditions, simulate


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Calibrate Statcast batted ball trajectories to observed carry")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every calibration iteration")
    subparsers = parser.add_subparsers(dest="command")

    cal = subparsers.add_parser("calibrate", help="Calibrate every hit in a CSV against its observed distance")
    cal.add_argument("hits", type=Path, help="CSV with Statcast batted ball records")
    cal.add_argument("--out", type=Path, default=Path("out"), help="Directory for calibration artefacts")
    cal.add_argument(
        "--settings",
        type=Path,
        default=DEFAULT_CALIBRATION_PATH,
        help="Calibration settings JSON",
    )
    cal.add_argument(
        "--coordinates",
        type=Path,
        default=DEFAULT_COORDINATE_PATH,
        help="Hit coordinate transform JSON (used when the CSV has no spray_angle)",
    )
    cal.add_argument("--workers", type=int, default=1, help="Worker processes for calibration")

    sim = subparsers.add_parser("simulate", help="Integrate a single trajectory with fixed parameters")
    sim.add_argument("--exit-velocity", type=float, required=True, help="Exit velocity in mph")
    sim.add_argument("--launch-angle", type=float, required=True, help="Launch angle in degrees")
    sim.add_argument("--spray-angle", type=float, default=0.0, help="Spray angle in degrees, positive toward RF")
    sim.add_argument("--cl", type=float, default=0.2, help="Lift coefficient")
    sim.add_argument("--cd", type=float, default=0.5, help="Drag coefficient")
    sim.add_argument("--release-height", type=float, default=1.0, help="Release height in metres")
    sim.add_argument("--time-step", type=float, default=DEFAULT_TIME_STEP, help="Integration step in seconds")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.command == "calibrate":
        return _run_calibrate(args)
    if args.command == "simulate":
        return _run_simulate(args)
    parser.print_help()
    return 0


def _run_calibrate(args: argparse.Namespace) -> int:
    loader = HitLoader(transform=CoordinateTransform.from_file(args.coordinates))
    hits = loader.load(args.hits)
    if not hits:
        raise SystemExit("No usable hits were found in the CSV")
    settings = CalibrationSettings.from_file(args.settings)
    print(f"Loaded {len(hits)} hits from {args.hits}")
    calibrator = Calibrator(settings)
    results = calibrator.calibrate_many(hits, workers=args.workers)
    within = sum(1 for result in results if abs(result.distance_error_ft) < settings.tolerance_ft)
    print(f"Calibrated {within}/{len(results)} hits within {settings.tolerance_ft:g} ft")
    writer = ResultWriter(args.out)
    bundle = writer.write(results)
    print(f"Results written to {bundle.results_path}")
    print(f"Summary written to {bundle.summary_path}")
    print(f"Trajectories stored in {bundle.trajectories_dir}")
    return 0


def _run_simulate(args: argparse.Namespace) -> int:
    if args.time_step <= 0:
        raise SystemExit(f"--time-step must be positive, got {args.time_step}")
    launch = LaunchConditions(
        exit_velocity_mph=args.exit_velocity,
        launch_angle_deg=args.launch_angle,
        spray_angle_deg=args.spray_angle,
    )
    aero = AeroParameters(cl=args.cl, cd=args.cd, release_height=args.release_height, spin_rpm=0.0)
    path = simulate(launch, aero, args.time_step)
    landing = path.landing_point
    print(f"Landing distance: {path.landing_distance_ft:.1f} ft ({path.landing_distance_m:.2f} m)")
    print(f"Landing point: x={landing.x:.2f} m y={landing.y:.2f} m")
    print(f"Apex: {path.apex:.2f} m")
    print(f"Flight time: {path.flight_time:.2f} s over {len(path)} points")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
