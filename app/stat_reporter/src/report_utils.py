from __future__ import annotations

import csv
import json
from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path

from pydantic import ValidationError

from ..schemas.schemas import StatsFile
from .core import StatsFileError

STATS_SUFFIX = ".json"


def ensure_directory(path: Path) -> Path:
    """Create a directory (and parents) if it does not exist yet."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def list_stats_files(stats_dir: Path) -> list[Path]:
    """Return the per-player stats files in file-name order."""
    return sorted(p for p in stats_dir.iterdir() if p.is_file() and p.suffix == STATS_SUFFIX)


def identifier_from_path(path: Path) -> str:
    """A stats file is named after the player's UUID."""
    return path.name.split(STATS_SUFFIX)[0]


def load_stats_file(path: Path) -> StatsFile:
    """Load and validate a per-player stats JSON file."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise StatsFileError(f"Could not read stats file {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise StatsFileError(f"Expected a JSON object in {path}")

    try:
        return StatsFile.model_validate(raw)
    except ValidationError as exc:
        raise StatsFileError(f"Invalid stats file {path}: {exc}") from exc


def write_csv_rows(path: Path, rows: Iterable[Sequence[object]]) -> Path:
    """Write rows as comma-delimited text with '\\n' line endings."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle, lineterminator="\n")
        writer.writerows(rows)
    return path


def average_of(total: int, count: int) -> Decimal:
    """total / count rounded to two decimals.

    Rounds the binary float quotient half-up, so 1/8 gives 0.13 while 1.005
    (stored just below 1.005) gives 1.00.
    """
    if count <= 0:
        raise ValueError("Cannot average over zero values")
    return Decimal(total / count).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def format_extremum(value: int, owner: str) -> str:
    return f"{value} ({owner})"
