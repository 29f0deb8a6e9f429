from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..schemas.store import CategoryRegistry, PlayerRecord
from .config import NAMESPACE_PREFIX, ReportConfig
from .core import InvalidStatValueError
from .identity import IdentityResolver
from .report_utils import identifier_from_path, load_stats_file, write_csv_rows

PLAYER_REPORT_HEADER = ("Stat Name", "Value")

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    registry: CategoryRegistry = field(default_factory=CategoryRegistry)
    records: list[PlayerRecord] = field(default_factory=list)


def strip_namespace(key: str, prefix: str = NAMESPACE_PREFIX) -> str:
    """Drop the namespace prefix from a category or stat key."""
    return key.removeprefix(prefix) if prefix else key


def parse_stat_value(value: Any) -> int:
    """Parse a raw stat value as a base-10 integer, failing on anything else."""
    if isinstance(value, bool):
        raise InvalidStatValueError(f"Expected an integer stat value, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip(), 10)
        except ValueError as exc:
            raise InvalidStatValueError(f"Expected an integer stat value, got {value!r}") from exc
    raise InvalidStatValueError(f"Expected an integer stat value, got {value!r}")


def extract_player_record(
    identifier: str,
    display_name: str,
    raw_stats: Mapping[str, Mapping[str, Any]],
    registry: CategoryRegistry,
    *,
    prefix: str = NAMESPACE_PREFIX,
) -> PlayerRecord:
    """Normalize one player's nested stats and register every key seen."""
    categories: dict[str, dict[str, int]] = {}
    for raw_category, raw_values in raw_stats.items():
        category = strip_namespace(raw_category, prefix)
        registry.register_category(category)

        stat_data: dict[str, int] = {}
        for raw_stat, raw_value in raw_values.items():
            stat_name = strip_namespace(raw_stat, prefix)
            try:
                stat_data[stat_name] = parse_stat_value(raw_value)
            except InvalidStatValueError as exc:
                raise InvalidStatValueError(f"{display_name}: {category}/{stat_name}: {exc}") from exc
            registry.register(category, stat_name)

        categories[category] = stat_data

    return PlayerRecord(identifier=identifier, display_name=display_name, categories=categories)


def sort_stats_descending(stats: Mapping[str, int]) -> list[tuple[str, int]]:
    """Highest value first; equal values keep their source order."""
    return sorted(stats.items(), key=lambda item: -item[1])


def write_player_reports(record: PlayerRecord, players_dir: Path) -> list[Path]:
    """Write one `<category>.csv` per category into the player's directory."""
    player_dir = players_dir / record.display_name
    written: list[Path] = []
    for category, stats in record.categories.items():
        rows = [PLAYER_REPORT_HEADER, *sort_stats_descending(stats)]
        written.append(write_csv_rows(player_dir / f"{category}.csv", rows))
    return written


def extract_players(
    stats_files: Iterable[Path],
    resolver: IdentityResolver,
    config: ReportConfig,
) -> ExtractionResult:
    """Resolve, filter and extract every stats file, writing per-player reports as we go."""
    result = ExtractionResult()
    seen_names: set[str] = set()

    for path in stats_files:
        identifier = identifier_from_path(path)
        display_name = resolver(identifier)

        if config.is_ignored(display_name):
            logger.info("ignoring %s", display_name)
            continue

        if display_name in seen_names:
            logger.warning("Display name %s resolved more than once; reports will be overwritten", display_name)
        seen_names.add(display_name)

        stats_file = load_stats_file(path)
        record = extract_player_record(
            identifier,
            display_name,
            stats_file.stats,
            result.registry,
            prefix=config.namespace_prefix,
        )
        write_player_reports(record, config.players_dir)
        logger.debug("Wrote %d category reports for %s", len(record.categories), display_name)
        result.records.append(record)

    return result
