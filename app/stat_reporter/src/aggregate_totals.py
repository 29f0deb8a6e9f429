"""Combine every player's stats into one totals report per category."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from ..schemas.store import (
    NOT_APPLICABLE,
    TIE_MARKER,
    AggregateRow,
    CategoryRegistry,
    CategoryTable,
    PlayerRecord,
    PlayerSummary,
    sorted_by_name,
)
from .report_utils import average_of, format_extremum, write_csv_rows

SUMMARY_LABELS = ("pTotal", "pAvg", "pMin", "pMax")

logger = logging.getLogger(__name__)


def _extremum_owner(owners: Sequence[str], values: Sequence[int], target: int) -> str:
    """Name of the single owner of `target`, or the tie marker when it is shared."""
    matches = [owner for owner, value in zip(owners, values) if value == target]
    return matches[0] if len(matches) == 1 else TIE_MARKER


def build_aggregate_row(category: str, stat_name: str, records: Sequence[PlayerRecord]) -> AggregateRow:
    """Cross-player view of one statistic; `records` must already be in output order."""
    if not records:
        raise ValueError("Cannot aggregate a statistic over zero players")

    names = [record.display_name for record in records]
    values = [record.stat_value(category, stat_name) for record in records]
    total = sum(values)
    min_value = min(values)
    max_value = max(values)

    return AggregateRow(
        stat_name=stat_name,
        values=values,
        total=total,
        average=average_of(total, len(records)),
        min_value=min_value,
        min_owner=_extremum_owner(names, values, min_value),
        max_value=max_value,
        max_owner=_extremum_owner(names, values, max_value),
    )


def build_player_summary(record: PlayerRecord, category: str) -> PlayerSummary:
    """Summarize a player's own stats within a category."""
    stats = record.categories.get(category)
    if not stats:
        return PlayerSummary(display_name=record.display_name)

    stat_names = list(stats)
    values = list(stats.values())
    total = sum(values)
    min_value = min(values)
    max_value = max(values)

    return PlayerSummary(
        display_name=record.display_name,
        total=total,
        average=average_of(total, len(values)),
        min_value=min_value,
        min_stat=_extremum_owner(stat_names, values, min_value),
        max_value=max_value,
        max_stat=_extremum_owner(stat_names, values, max_value),
    )


def build_category_table(
    category: str,
    stat_names: Sequence[str],
    records: Sequence[PlayerRecord],
) -> CategoryTable:
    """Build the totals table for a category over all included players."""
    ordered = sorted_by_name(records)
    return CategoryTable(
        category=category,
        player_names=[record.display_name for record in ordered],
        rows=[build_aggregate_row(category, stat_name, ordered) for stat_name in sorted(stat_names)],
        summaries=[build_player_summary(record, category) for record in ordered],
    )


def _summary_cells(summary: PlayerSummary) -> tuple[str, str, str, str]:
    if not summary.applicable:
        return (NOT_APPLICABLE,) * 4
    return (
        str(summary.total),
        str(summary.average),
        format_extremum(summary.min_value, summary.min_stat),
        format_extremum(summary.max_value, summary.max_stat),
    )


def table_to_rows(table: CategoryTable) -> list[list[str]]:
    """Lay a category table out as CSV rows: header, stat rows, blank, player summaries."""
    header = table.header
    rows: list[list[str]] = [header]

    for row in table.rows:
        rows.append(
            [
                row.stat_name,
                *(str(value) for value in row.values),
                str(row.total),
                str(row.average),
                format_extremum(row.min_value, row.min_owner),
                format_extremum(row.max_value, row.max_owner),
            ]
        )

    rows.append([""] * len(header))

    summary_rows = [[label] for label in SUMMARY_LABELS]
    for summary in table.summaries:
        for summary_row, cell in zip(summary_rows, _summary_cells(summary)):
            summary_row.append(cell)
    rows.extend(summary_rows)
    return rows


def write_totals(
    registry: CategoryRegistry,
    records: Sequence[PlayerRecord],
    totals_dir: Path,
) -> list[Path]:
    """Write `<category>.csv` into `totals_dir` for every registered category."""
    written: list[Path] = []
    for category, stat_names in registry.iter_categories():
        table = build_category_table(category, stat_names, records)
        written.append(write_csv_rows(totals_dir / f"{category}.csv", table_to_rows(table)))
        logger.debug("Wrote totals for %s (%d stats)", category, len(table.rows))
    return written
