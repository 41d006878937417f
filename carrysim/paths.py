"""Helper paths for accessing repository assets."""
from __future__ import annotations

from pathlib import Path


PACKAGE_ROOT = Path(__file__).resolve().parent
REPO_ROOT = PACKAGE_ROOT.parent
DATA_DIR = REPO_ROOT / "data"
CONFIG_DIR = REPO_ROOT / "config"

DEFAULT_CALIBRATION_PATH = CONFIG_DIR / "calibration.json"
DEFAULT_COORDINATE_PATH = CONFIG_DIR / "coordinates.json"
SAMPLE_HITS_PATH = DATA_DIR / "samples" / "hits.csv"
