"""Build per-player and per-category CSV reports from Minecraft stats files.

Usage:
    stat-reporter [--base-dir DIR] [--ignore NAME ...]

Environment variables:
    STATS_REPORT_DIR     base directory holding stats/, players/ and totals/
    STATS_LOOKUP_DELAY   seconds to wait after each successful name lookup
    MOJANG_SESSION_URL   profile lookup URL template with an {identifier} field
    LOG_LEVEL            logging level (default INFO, --log-level wins)
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, replace
from pathlib import Path

from .aggregate_totals import write_totals
from .config import ReportConfig
from .core import IdentityResolutionError, NoPlayerStatsError, configure_logging
from .extract_player_stats import extract_players
from .identity import IdentityResolver, build_mojang_resolver
from .report_utils import ensure_directory, list_stats_files

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportSummary:
    player_names: list[str]
    player_reports: int
    totals_reports: list[Path]


def ensure_directories(config: ReportConfig) -> None:
    for directory in (config.stats_dir, config.players_dir, config.totals_dir):
        ensure_directory(directory)


def run_report(config: ReportConfig, resolver: IdentityResolver | None = None) -> ReportSummary:
    """Run the whole pipeline: resolve names, write player reports, then totals."""
    if resolver is None:
        resolver = build_mojang_resolver(
            session_url=config.session_url,
            timeout=config.request_timeout,
            delay_seconds=config.lookup_delay_seconds,
        )

    logger.info("ensuring directories...")
    ensure_directories(config)

    logger.info("getting player data...")
    result = extract_players(list_stats_files(config.stats_dir), resolver, config)

    if not result.records:
        raise NoPlayerStatsError(f"No stats found in {config.stats_dir}")

    logger.info("saving totals...")
    totals = write_totals(result.registry, result.records, config.totals_dir)

    logger.info("done!")
    return ReportSummary(
        player_names=[record.display_name for record in result.records],
        player_reports=sum(len(record.categories) for record in result.records),
        totals_reports=totals,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build CSV stat reports from Minecraft player stats files.")
    parser.add_argument("--base-dir", type=Path, default=None, help="Directory holding stats/, players/ and totals/.")
    parser.add_argument("--stats-dir", type=Path, default=None, help="Override the input stats directory.")
    parser.add_argument("--players-dir", type=Path, default=None, help="Override the per-player output directory.")
    parser.add_argument("--totals-dir", type=Path, default=None, help="Override the totals output directory.")
    parser.add_argument(
        "--ignore",
        action="append",
        default=None,
        metavar="NAME",
        help="Display name to skip. Repeat to skip several; replaces the built-in list.",
    )
    parser.add_argument("--delay", type=float, default=None, help="Seconds to wait after each name lookup.")
    parser.add_argument("--log-level", default=None, help="Logging level (overrides LOG_LEVEL).")
    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> ReportConfig:
    config = ReportConfig.from_env(args.base_dir)

    overrides: dict[str, object] = {}
    if args.stats_dir is not None:
        overrides["stats_dir"] = args.stats_dir
    if args.players_dir is not None:
        overrides["players_dir"] = args.players_dir
    if args.totals_dir is not None:
        overrides["totals_dir"] = args.totals_dir
    if args.ignore is not None:
        overrides["ignore_names"] = frozenset(args.ignore)
    if args.delay is not None:
        overrides["lookup_delay_seconds"] = args.delay

    return replace(config, **overrides) if overrides else config


def main(argv: list[str] | None = None) -> None:
    """Command-line entry point. Stops early, with a log message, when nothing can be aggregated."""
    args = parse_args(argv)
    configure_logging(args.log_level)
    config = config_from_args(args)

    try:
        run_report(config)
    except IdentityResolutionError as exc:
        logger.error("error - failed to get player name from mojang: %s", exc)
    except NoPlayerStatsError:
        logger.error("error - no stats found! Please add to stat directory %s", config.stats_dir)


if __name__ == "__main__":  # pragma: no cover
    main()
