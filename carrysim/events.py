"""CSV ingestion of Statcast batted ball records."""
from __future__ import annotations

from dataclasses import dataclass
import csv
import json
import logging
import math
from pathlib import Path
from typing import Any

from .paths import DEFAULT_COORDINATE_PATH
from .physics import LaunchConditions

logger = logging.getLogger(__name__)

_SPEED_COLUMNS = ("launch_speed", "ev_mph", "exit_velocity")
_ANGLE_COLUMNS = ("launch_angle", "la_angle", "la_deg")
_DISTANCE_COLUMNS = ("hit_distance_sc", "hit_distance", "distance_ft")
_SPRAY_COLUMNS = ("spray_angle",)
_HIT_COORD_COLUMNS = (("hc_x", "hit_coord_x"), ("hc_y", "hit_coord_y"))
_SPIN_COLUMNS = ("release_spin_rate", "spin_rate_deprecated", "spin_rate")

DEFAULT_SPIN_RPM = 2000.0


@dataclass(slots=True)
class HitRecord:
    launch: LaunchConditions
    observed_distance_ft: float
    hit_id: str = ""
    player_name: str = ""
    game_date: str = ""
    events: str = ""


@dataclass(slots=True)
class CoordinateTransform:
    x_offset: float
    y_offset: float
    angle_scale: float
    angle_offset_deg: float

    @classmethod
    def from_file(cls, path: Path = DEFAULT_COORDINATE_PATH) -> "CoordinateTransform":
        data = json.loads(Path(path).read_text())
        cfg = data.get("hc_transform", {})
        return cls(
            x_offset=float(cfg.get("x_offset", 125.42)),
            y_offset=float(cfg.get("y_offset", 198.27)),
            angle_scale=float(cfg.get("angle_scale", 1.0)),
            angle_offset_deg=float(cfg.get("angle_offset_deg", 0.0)),
        )

    def spray_angle(self, hc_x: float, hc_y: float) -> float:
        base = math.degrees(math.atan2(hc_x - self.x_offset, self.y_offset - hc_y))
        return base * self.angle_scale + self.angle_offset_deg


class HitLoader:
    """Turn a Statcast CSV export into :class:`HitRecord` values.

    Rows without exit velocity, launch angle, observed distance or a usable
    spray direction are skipped. The spin seed falls back to
    ``DEFAULT_SPIN_RPM`` when the export carries no spin column value.
    """

    def __init__(self, *, transform: CoordinateTransform | None = None):
        self.transform = transform or CoordinateTransform.from_file()

    def load(self, csv_path: Path) -> list[HitRecord]:
        hits: list[HitRecord] = []
        skipped = 0
        with Path(csv_path).open("r", encoding="utf-8-sig", newline="") as handle:
            reader = csv.DictReader(handle)
            headers = reader.fieldnames or []
            speed_col = self._find_column(headers, _SPEED_COLUMNS)
            angle_col = self._find_column(headers, _ANGLE_COLUMNS)
            distance_col = self._find_column(headers, _DISTANCE_COLUMNS)
            spray_col = self._find_optional_column(headers, _SPRAY_COLUMNS)
            hc_x_col = self._find_optional_column(headers, _HIT_COORD_COLUMNS[0])
            hc_y_col = self._find_optional_column(headers, _HIT_COORD_COLUMNS[1])
            if spray_col is None and (hc_x_col is None or hc_y_col is None):
                msg = "CSV needs a spray_angle column or hc_x/hc_y hit coordinates"
                raise KeyError(msg)
            spin_cols = self._find_all_columns(headers, _SPIN_COLUMNS)
            id_cols = self._find_all_columns(headers, ("play_id", "sv_id"))
            game_pk_cols = self._find_all_columns(headers, ("game_pk",))
            player_cols = self._find_all_columns(headers, ("player_name", "batter_name"))
            date_cols = self._find_all_columns(headers, ("game_date",))
            event_cols = self._find_all_columns(headers, ("events", "event"))
            for idx, row in enumerate(reader):
                if not self._has_values(row, (speed_col, angle_col, distance_col)):
                    skipped += 1
                    continue
                spray = self._spray_angle(row, spray_col, hc_x_col, hc_y_col)
                if spray is None:
                    skipped += 1
                    continue
                spin = self._optional_float(row, spin_cols)
                launch = LaunchConditions(
                    exit_velocity_mph=float(row[speed_col]),
                    launch_angle_deg=float(row[angle_col]),
                    spray_angle_deg=spray,
                    spin_rpm=DEFAULT_SPIN_RPM if spin is None else spin,
                )
                game_pk = self._text(row, game_pk_cols) or "hit"
                hits.append(
                    HitRecord(
                        launch=launch,
                        observed_distance_ft=float(row[distance_col]),
                        hit_id=self._text(row, id_cols) or f"{game_pk}-{idx+1}",
                        player_name=self._text(row, player_cols),
                        game_date=self._text(row, date_cols),
                        events=self._text(row, event_cols),
                    )
                )
        if skipped:
            logger.info("Skipped %d incomplete rows in %s", skipped, csv_path)
        logger.info("Loaded %d hits from %s", len(hits), csv_path)
        return hits

    def _spray_angle(
        self,
        row: dict[str, Any],
        spray_col: str | None,
        hc_x_col: str | None,
        hc_y_col: str | None,
    ) -> float | None:
        if spray_col is not None and self._has_values(row, (spray_col,)):
            return float(row[spray_col])
        if hc_x_col is not None and hc_y_col is not None and self._has_values(row, (hc_x_col, hc_y_col)):
            return self.transform.spray_angle(float(row[hc_x_col]), float(row[hc_y_col]))
        return None

    @classmethod
    def _find_column(cls, headers: list[str], choices: tuple[str, ...]) -> str:
        column = cls._find_optional_column(headers, choices)
        if column is None:
            msg = f"None of the columns {choices} were found in the CSV"
            raise KeyError(msg)
        return column

    @staticmethod
    def _find_optional_column(headers: list[str], choices: tuple[str, ...]) -> str | None:
        for name in choices:
            for header in headers:
                if header and header.strip().lower() == name.lower():
                    return header
        return None

    @classmethod
    def _find_all_columns(cls, headers: list[str], choices: tuple[str, ...]) -> tuple[str, ...]:
        found = (cls._find_optional_column(headers, (name,)) for name in choices)
        return tuple(column for column in found if column is not None)

    @staticmethod
    def _text(row: dict[str, Any], columns: tuple[str, ...]) -> str:
        for column in columns:
            value = row.get(column)
            if value is not None and str(value).strip() != "":
                return str(value).strip()
        return ""

    @staticmethod
    def _has_values(row: dict[str, Any], columns: tuple[str, ...]) -> bool:
        for column in columns:
            value = row.get(column)
            if value is None or str(value).strip() == "":
                return False
        return True

    @staticmethod
    def _optional_float(row: dict[str, Any], choices: tuple[str, ...]) -> float | None:
        for name in choices:
            value = row.get(name)
            if value is not None and str(value).strip() != "":
                try:
                    return float(value)
                except ValueError:
                    continue
        return None
