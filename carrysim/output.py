"""Persist calibration artefacts."""
from __future__ import annotations

import csv
import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from .calibration import CalibrationResult

_SUMMARY_COLUMNS = [
    "hit_id",
    "player_name",
    "game_date",
    "events",
    "launch_speed",
    "launch_angle",
    "spray_angle",
    "spin_seed",
    "hit_distance",
    "sim_distance",
    "distance_error",
    "iterations",
    "cl",
    "cd",
    "release_height",
    "spin_rpm",
    "apex",
    "flight_time",
]


@dataclass(slots=True)
class OutputBundle:
    results_path: Path
    summary_path: Path
    trajectories_dir: Path


class ResultWriter:
    def __init__(self, out_dir: Path):
        self.out_dir = Path(out_dir)
        self.results_path = self.out_dir / "results.json"
        self.summary_path = self.out_dir / "summary.csv"
        self.trajectories_dir = self.out_dir / "trajectories"

    def write(self, results: Iterable[CalibrationResult]) -> OutputBundle:
        self.out_dir.mkdir(parents=True, exist_ok=True)
        self.trajectories_dir.mkdir(parents=True, exist_ok=True)
        results = list(results)
        payload = {"count": len(results), "hits": []}
        taken: set[str] = set()
        with self.summary_path.open("w", newline="", encoding="utf-8") as csvfile:
            writer = csv.writer(csvfile)
            writer.writerow(_SUMMARY_COLUMNS)
            for index, result in enumerate(results):
                hit = result.hit
                launch = hit.launch
                params = result.parameters
                name = _safe_name(hit.hit_id or str(index + 1))
                while name in taken:
                    name = f"{name}-{index + 1}"
                taken.add(name)
                traj_rel = Path("trajectories") / f"{name}.json"
                payload["hits"].append(
                    {
                        "hit_id": hit.hit_id,
                        "player_name": hit.player_name,
                        "game_date": hit.game_date,
                        "events": hit.events,
                        "observed_distance_ft": hit.observed_distance_ft,
                        "simulated_distance_ft": result.simulated_distance_ft,
                        "distance_error_ft": result.distance_error_ft,
                        "iterations": result.iterations,
                        "parameters": params.as_dict(),
                        "trajectory": str(traj_rel),
                    }
                )
                (self.out_dir / traj_rel).write_text(json.dumps(result.path.to_json(), ensure_ascii=False, indent=2))
                writer.writerow(
                    [
                        hit.hit_id,
                        hit.player_name,
                        hit.game_date,
                        hit.events,
                        round(launch.exit_velocity_mph, 4),
                        round(launch.launch_angle_deg, 4),
                        round(launch.spray_angle_deg, 4),
                        round(launch.spin_rpm, 1),
                        round(hit.observed_distance_ft, 4),
                        round(result.simulated_distance_ft, 4),
                        round(result.distance_error_ft, 4),
                        result.iterations,
                        round(params.cl, 6),
                        round(params.cd, 6),
                        round(params.release_height, 6),
                        round(params.spin_rpm, 3),
                        round(result.path.apex, 4),
                        round(result.path.flight_time, 4),
                    ]
                )
        self.results_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2))
        return OutputBundle(
            results_path=self.results_path,
            summary_path=self.summary_path,
            trajectories_dir=self.trajectories_dir,
        )


def _safe_name(hit_id: str) -> str:
    return re.sub(r"[^A-Za-z0-9_.-]+", "_", hit_id.strip()) or "hit"
