from __future__ import annotations

import csv
import io
import json
from contextlib import redirect_stdout
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import pytest

from carrysim import cli

SAMPLE_CSV = Path(__file__).resolve().parents[1] / "data" / "samples" / "hits.csv"


def run_cli(args: list[str]):
    buffer = io.StringIO()
    with redirect_stdout(buffer):
        exit_code = cli.main(args)
    return exit_code, buffer.getvalue()


def test_no_command_prints_help():
    exit_code, output = run_cli([])
    assert exit_code == 0
    assert "calibrate" in output


@pytest.mark.parametrize("workers", ["1", "2"])
def test_calibrate_sample(tmp_path: Path, workers: str) -> None:
    out_dir = tmp_path / "judge"
    exit_code, output = run_cli(["calibrate", str(SAMPLE_CSV), "--out", str(out_dir), "--workers", workers])
    assert exit_code == 0
    assert "Loaded 16 hits" in output

    results_path = out_dir / "results.json"
    summary_path = out_dir / "summary.csv"
    traj_dir = out_dir / "trajectories"
    assert results_path.exists()
    assert summary_path.exists()
    assert traj_dir.is_dir()

    payload = json.loads(results_path.read_text())
    assert payload["count"] == len(payload["hits"]) == 16
    first = payload["hits"][0]
    assert first["hit_id"] == "judge-01"
    assert set(first["parameters"]) == {"cl", "cd", "release_height", "spin_rpm"}
    points = json.loads((out_dir / first["trajectory"]).read_text())
    assert (points[0]["x"], points[0]["y"]) == (0.0, 0.0)
    assert points[-1]["z"] == 0.0

    with summary_path.open("r", encoding="utf-8", newline="") as handle:
        rows = list(csv.DictReader(handle))
    assert len(rows) == 16
    for row in rows:
        iterations = int(row["iterations"])
        assert 1 <= iterations <= 50
        if iterations < 50:
            assert abs(float(row["distance_error"])) < 1.0


def test_calibrate_rejects_empty_csv(tmp_path: Path) -> None:
    empty = tmp_path / "empty.csv"
    empty.write_text("launch_speed,launch_angle,spray_angle,hit_distance_sc\n")
    with pytest.raises(SystemExit):
        run_cli(["calibrate", str(empty), "--out", str(tmp_path / "out")])


def test_simulate_prints_landing_summary() -> None:
    exit_code, output = run_cli(
        ["simulate", "--exit-velocity", "103.4", "--launch-angle", "32", "--spray-angle", "34.78"]
    )
    assert exit_code == 0
    assert "Landing distance:" in output
    assert "Flight time:" in output


@pytest.mark.parametrize("time_step", ["0", "-0.01"])
def test_simulate_rejects_non_positive_time_step(time_step: str) -> None:
    with pytest.raises(SystemExit, match="time-step"):
        run_cli(["simulate", "--exit-velocity", "100", "--launch-angle", "30", "--time-step", time_step])
