from __future__ import annotations

import json
from pathlib import Path

from carrysim.calibration import calibrate
from carrysim.events import HitRecord
from carrysim.output import ResultWriter
from carrysim.physics import LaunchConditions

LAUNCH = LaunchConditions(exit_velocity_mph=100.0, launch_angle_deg=28.0, spray_angle_deg=5.0, spin_rpm=2200.0)


def test_colliding_hit_ids_get_distinct_trajectory_files(tmp_path: Path):
    hits = [
        HitRecord(launch=LAUNCH, observed_distance_ft=350.0, hit_id="a/b"),
        HitRecord(launch=LAUNCH, observed_distance_ft=380.0, hit_id="a b"),
        HitRecord(launch=LAUNCH, observed_distance_ft=400.0, hit_id="a/b"),
    ]
    results = [calibrate(hit) for hit in hits]
    bundle = ResultWriter(tmp_path / "out").write(results)

    payload = json.loads(bundle.results_path.read_text())
    files = [entry["trajectory"] for entry in payload["hits"]]
    assert len(set(files)) == 3
    assert files[0] == str(Path("trajectories") / "a_b.json")
    assert len(list(bundle.trajectories_dir.iterdir())) == 3
    for entry, result in zip(payload["hits"], results):
        points = json.loads((tmp_path / "out" / entry["trajectory"]).read_text())
        assert len(points) == len(result.path)
