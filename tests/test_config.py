import json
from pathlib import Path

from carrysim.calibration import CalibrationSettings
from carrysim.events import CoordinateTransform

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"


def test_shipped_calibration_matches_defaults():
    assert CalibrationSettings.from_file(CONFIG_DIR / "calibration.json") == CalibrationSettings()


def test_shipped_coordinates_match_statcast_home_plate():
    with (CONFIG_DIR / "coordinates.json").open() as f:
        data = json.load(f)
    assert data["hc_transform"]["x_offset"] == 125.42
    transform = CoordinateTransform.from_file(CONFIG_DIR / "coordinates.json")
    assert transform.spray_angle(125.42, 0.0) == 0.0
