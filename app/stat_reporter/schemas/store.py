from dataclasses import dataclass, field
from decimal import Decimal
from collections.abc import Iterator, Mapping, Sequence

TIE_MARKER = "tie"
NOT_APPLICABLE = "N/A"

StatData = Mapping[str, int]


@dataclass(frozen=True)
class PlayerRecord:
    identifier: str
    display_name: str
    categories: Mapping[str, StatData] = field(default_factory=dict)

    def stat_value(self, category: str, stat_name: str) -> int:
        """Effective value of a statistic, 0 when the player never recorded it."""
        return self.categories.get(category, {}).get(stat_name, 0)


class CategoryRegistry:
    """Union of every (category, stat) pair seen during a run. Only ever grows."""

    def __init__(self) -> None:
        self._categories: dict[str, set[str]] = {}

    def __contains__(self, category: object) -> bool:
        return category in self._categories

    def __len__(self) -> int:
        return len(self._categories)

    def register_category(self, category: str) -> None:
        self._categories.setdefault(category, set())

    def register(self, category: str, stat_name: str) -> None:
        self._categories.setdefault(category, set()).add(stat_name)

    def categories(self) -> list[str]:
        """Categories in first-seen order."""
        return list(self._categories)

    def stat_names(self, category: str) -> list[str]:
        """Stat names of a category, sorted lexicographically."""
        return sorted(self._categories.get(category, ()))

    def iter_categories(self) -> Iterator[tuple[str, list[str]]]:
        for category in self._categories:
            yield category, self.stat_names(category)


@dataclass(frozen=True)
class AggregateRow:
    stat_name: str
    values: list[int]
    total: int
    average: Decimal
    min_value: int
    min_owner: str
    max_value: int
    max_owner: str


@dataclass(frozen=True)
class PlayerSummary:
    display_name: str
    total: int | None = None
    average: Decimal | None = None
    min_value: int | None = None
    min_stat: str | None = None
    max_value: int | None = None
    max_stat: str | None = None

    @property
    def applicable(self) -> bool:
        return self.total is not None


@dataclass(frozen=True)
class CategoryTable:
    category: str
    player_names: list[str]
    rows: list[AggregateRow]
    summaries: list[PlayerSummary]

    @property
    def header(self) -> list[str]:
        return [self.category, *self.player_names, "total", "avg", "min", "max"]

    def get_row(self, stat_name: str) -> AggregateRow | None:
        """Get a row by stat name, or None if not found."""
        for row in self.rows:
            if row.stat_name == stat_name:
                return row
        return None

    def summary_for(self, display_name: str) -> PlayerSummary | None:
        for summary in self.summaries:
            if summary.display_name == display_name:
                return summary
        return None


def sorted_by_name(records: Sequence[PlayerRecord]) -> list[PlayerRecord]:
    """Order players by display name; equal names keep input order."""
    return sorted(records, key=lambda record: record.display_name)
