from dataclasses import dataclass
from typing import Mapping, NamedTuple, Optional

from expense_rollup.aggregation import aggregate, selection_total
from expense_rollup.domain import CategoryAggregate, GroupAggregate, ResolvedRange, TimeRange
from expense_rollup.filters import by_date_range
from expense_rollup.functional import percent_difference
from expense_rollup.lazy import iter_transactions
from expense_rollup.logging_setup import get_logger
from expense_rollup.rollup import rollup
from expense_rollup.store import TransactionStore
from expense_rollup.time_ranges import TimeRangeCatalog, default_catalog, years_covered

logger = get_logger(__name__)


@dataclass(frozen=True)
class ComparisonPeriod:
    time_range: TimeRange
    resolved: ResolvedRange
    years: tuple[str, ...]
    category_aggregates: Mapping[str, CategoryAggregate]
    group_aggregates: Mapping[str, GroupAggregate]
    total: float


class ComparisonRow(NamedTuple):
    name: str
    first: float
    second: float
    percent: str


@dataclass(frozen=True)
class ComparisonResult:
    first: ComparisonPeriod
    second: ComparisonPeriod

    @property
    def total_percent(self) -> str:
        return percent_difference(self.first.total, self.second.total)

    def rows(self, hide_zero: bool = False) -> list[ComparisonRow]:
        """Per-category average annual figures of both periods."""
        return self._rows(self.first.category_aggregates, self.second.category_aggregates, hide_zero)

    def group_rows(self, hide_zero: bool = False) -> list[ComparisonRow]:
        return self._rows(self.first.group_aggregates, self.second.group_aggregates, hide_zero)

    @staticmethod
    def _rows(first: Mapping, second: Mapping, hide_zero: bool) -> list[ComparisonRow]:
        rows = []
        for name in dict.fromkeys([*first, *second]):
            a = first[name].average.annual if name in first else 0.0
            b = second[name].average.annual if name in second else 0.0
            if hide_zero and not (a > 0 or b > 0):
                continue
            rows.append(ComparisonRow(name, a, b, percent_difference(a, b)))
        return rows


class ComparisonEngine:
    """Aggregates two time ranges over the whole category and group universe.

    Sidebar category/group selection plays no part here; only the two ranges
    vary. Each period only sees transactions dated within its resolved range.
    """

    def __init__(self, store: TransactionStore, catalog: Optional[TimeRangeCatalog] = None):
        self.store = store
        self.catalog = catalog if catalog is not None else default_catalog()

    def period(self, range_id: str) -> ComparisonPeriod:
        time_range = self.catalog.get(range_id)
        earliest, latest = self.store.bounds
        resolved = time_range.resolve(earliest, latest)
        years = years_covered(resolved.start, resolved.end)

        in_range = tuple(iter_transactions(self.store.transactions, by_date_range(resolved.start, resolved.end)))
        categories = aggregate(in_range, self.store.categories, years)
        groups = rollup(categories, self.store.groups, years, self.store.category_group)
        total = selection_total(in_range, self.store.categories)

        logger.debug("Comparison period %s: %d transactions, total %.2f", range_id, len(in_range), total)
        return ComparisonPeriod(
            time_range=time_range,
            resolved=resolved,
            years=years,
            category_aggregates=categories,
            group_aggregates=groups,
            total=total,
        )

    def compare(self, first_range: str, second_range: str) -> ComparisonResult:
        return ComparisonResult(self.period(first_range), self.period(second_range))
