from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Union

from expense_rollup.config import MONTHS_PER_YEAR, WEEKS_PER_YEAR


@dataclass(frozen=True)
class Transaction:
    date: Optional[date]     # None when the source date could not be read
    payee: str
    category: str
    amount: Optional[float]  # None when the source amount could not be parsed
    tag: str = ""
    group: str = ""          # empty: category stays ungrouped
    raw_amount: str = ""

    @property
    def year(self) -> Optional[str]:
        if self.date is None:
            return None
        return str(self.date.year)


@dataclass(frozen=True)
class PeriodMetric:
    annual: float = 0.0
    monthly: float = 0.0
    weekly: float = 0.0

    @classmethod
    def from_annual(cls, annual: float) -> "PeriodMetric":
        return cls(annual, annual / MONTHS_PER_YEAR, annual / WEEKS_PER_YEAR)

    def __add__(self, other: "PeriodMetric") -> "PeriodMetric":
        return PeriodMetric(
            self.annual + other.annual,
            self.monthly + other.monthly,
            self.weekly + other.weekly,
        )


ZERO = PeriodMetric()


# Aggregates are shared through the memo cache; their per-year maps are read-only views.
def _freeze_years(agg) -> None:
    object.__setattr__(agg, "years", MappingProxyType(dict(agg.years)))


@dataclass(frozen=True)
class CategoryAggregate:
    years: Mapping[str, PeriodMetric]
    average: PeriodMetric = ZERO

    def __post_init__(self):
        _freeze_years(self)

    def __getitem__(self, year: str) -> PeriodMetric:
        return self.years[year]

    @property
    def total(self) -> float:
        return sum(m.annual for m in self.years.values())


@dataclass(frozen=True)
class GroupAggregate:
    years: Mapping[str, PeriodMetric]
    average: PeriodMetric = ZERO
    categories: tuple[str, ...] = ()

    def __post_init__(self):
        _freeze_years(self)

    def __getitem__(self, year: str) -> PeriodMetric:
        return self.years[year]


@dataclass(frozen=True)
class ResolvedRange:
    start: date
    end: date

    def contains(self, d: Optional[date]) -> bool:
        return d is not None and self.start <= d <= self.end


@dataclass(frozen=True)
class TimeRange:
    id: str
    label: str
    resolver: Callable[[date, date], ResolvedRange] = field(compare=False, repr=False)
    kind: str = "rolling"  # rolling | calendar | fixed

    def resolve(self, earliest: date, latest: date) -> ResolvedRange:
        return self.resolver(earliest, latest)


# Year selection is either driven by a time range or an explicit set of years.
@dataclass(frozen=True)
class ByTimeRange:
    range_id: str


@dataclass(frozen=True)
class ExplicitYears:
    years: frozenset[str] = frozenset()


YearSelection = Union[ByTimeRange, ExplicitYears]
