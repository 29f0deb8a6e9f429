from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path

MOJANG_SESSION_URL = "https://sessionserver.mojang.com/session/minecraft/profile/{identifier}"
NAMESPACE_PREFIX = "minecraft:"
DEFAULT_LOOKUP_DELAY_SECONDS = 0.5
DEFAULT_TIMEOUT_SECONDS = 30

DEFAULT_IGNORE_NAMES: frozenset[str] = frozenset(
    {
        "Ar2vian",
        "ImJayzus",
        "Immortal_Puff",
        "JustinCam",
        "WhoIsJoe27",
        "Alex",
        "Steve",
    }
)


@dataclass(frozen=True)
class ReportConfig:
    """Where to read stats from, where to write reports, and who to skip."""

    stats_dir: Path
    players_dir: Path
    totals_dir: Path
    ignore_names: frozenset[str] = field(default=DEFAULT_IGNORE_NAMES)
    namespace_prefix: str = NAMESPACE_PREFIX
    lookup_delay_seconds: float = DEFAULT_LOOKUP_DELAY_SECONDS
    session_url: str = MOJANG_SESSION_URL
    request_timeout: float = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def for_base_dir(cls, base_dir: Path, **overrides) -> ReportConfig:
        """Lay out stats/, players/ and totals/ under a single directory."""
        base_dir = Path(base_dir)
        config = cls(
            stats_dir=base_dir / "stats",
            players_dir=base_dir / "players",
            totals_dir=base_dir / "totals",
        )
        return replace(config, **overrides) if overrides else config

    @classmethod
    def from_env(cls, base_dir: Path | None = None) -> ReportConfig:
        """Build a config from STATS_REPORT_DIR, STATS_LOOKUP_DELAY and MOJANG_SESSION_URL."""
        if base_dir is None:
            base_dir = Path(os.environ.get("STATS_REPORT_DIR") or Path.cwd())

        overrides: dict[str, object] = {}
        delay = os.environ.get("STATS_LOOKUP_DELAY")
        if delay:
            overrides["lookup_delay_seconds"] = float(delay)
        session_url = os.environ.get("MOJANG_SESSION_URL")
        if session_url:
            overrides["session_url"] = session_url

        return cls.for_base_dir(base_dir, **overrides)

    def is_ignored(self, display_name: str) -> bool:
        return display_name in self.ignore_names
