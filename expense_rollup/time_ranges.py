"""
Named time ranges: rolling windows ending at the batch's latest date, whole
calendar years before it, and fixed historical periods.
"""
from __future__ import annotations

import calendar
from datetime import date, timedelta
from pathlib import Path
from typing import Iterable, Iterator, Optional

import yaml

from expense_rollup import config
from expense_rollup.domain import ResolvedRange, TimeRange
from expense_rollup.errors import RangeConfigError, UnknownRangeError
from expense_rollup.functional import Maybe, Nothing, Some
from expense_rollup.logging_setup import get_logger

logger = get_logger(__name__)

# (id, label, start, end)
FIXED_RANGES: tuple[tuple[str, str, date, date], ...] = (
    ("since-las-vegas", "Since Las Vegas Only Home", date(2021, 1, 1), date(2025, 3, 31)),
    ("since-both-medicare", "Since Both Medicare", date(2022, 10, 1), date(2025, 3, 31)),
    ("since-retired", "Since Retired", date(2010, 8, 14), date(2025, 3, 31)),
    ("since-ret-till-both-non-medicare", "Since Ret Till Both Non Medicare", date(2010, 8, 14), date(2021, 8, 31)),
    ("all-haverhill", "All Haverhill Only Home", date(1997, 1, 1), date(2011, 10, 12)),
    ("till-retired", "Till Retired", date(1997, 1, 1), date(2010, 8, 13)),
    ("till-2-homes", "Till 2 homes", date(2011, 10, 13), date(2020, 12, 31)),
    ("covid-period", "COVID inflationary period", date(2020, 3, 1), date(2023, 2, 28)),
)


def shift_months(d: date, months: int) -> date:
    """Move ``d`` by whole calendar months.

    A day that does not exist in the target month spills into the next one,
    so 2024-02-29 shifted by -12 months is 2023-03-01.
    """
    index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    if d.day <= last_day:
        return date(year, month, d.day)
    return date(year, month, 1) + timedelta(days=d.day - 1)


def years_covered(start: date, end: date) -> tuple[str, ...]:
    return tuple(str(y) for y in range(start.year, end.year + 1))


def years_between(start: date, end: date) -> float:
    return round(abs((end - start).days) / config.DAYS_PER_YEAR, 2)


def last_months(months: int):
    def _resolve(earliest: date, latest: date) -> ResolvedRange:
        return ResolvedRange(shift_months(latest, -months), latest)

    return _resolve


def year_to_date(earliest: date, latest: date) -> ResolvedRange:
    return ResolvedRange(date(latest.year, 1, 1), latest)


def last_years(years: int):
    def _resolve(earliest: date, latest: date) -> ResolvedRange:
        end_year = latest.year - 1
        return ResolvedRange(date(end_year - years + 1, 1, 1), date(end_year, 12, 31))

    return _resolve


def fixed(start: date, end: date):
    def _resolve(earliest: date, latest: date) -> ResolvedRange:
        return ResolvedRange(start, end)

    return _resolve


def builtin_ranges() -> tuple[TimeRange, ...]:
    ranges = [
        TimeRange(f"last-{n}-months", f"Last {n} Months", last_months(n))
        for n in config.ROLLING_MONTH_SPANS
    ]
    ranges.append(TimeRange("ytd", "YTD", year_to_date))
    for n in config.CALENDAR_YEAR_SPANS:
        if n == 1:
            ranges.append(TimeRange("last-year", "Last Year", last_years(1), kind="calendar"))
        else:
            ranges.append(TimeRange(f"last-{n}-years", f"Last {n} Years", last_years(n), kind="calendar"))
    ranges.extend(
        TimeRange(range_id, label, fixed(start, end), kind="fixed")
        for range_id, label, start, end in FIXED_RANGES
    )
    return tuple(ranges)


def _as_date(value, range_id: str, key: str) -> date:
    # yaml.safe_load already turns ISO dates into date objects
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError as e:
        raise RangeConfigError(f"Range {range_id!r}: invalid {key} date {value!r}") from e


def load_fixed_ranges(path: Path) -> tuple[TimeRange, ...]:
    """Load extra fixed ranges from a YAML file.

    Expected layout::

        ranges:
          - id: since-move
            label: Since The Move
            start: 2019-06-01
            end: 2024-12-31
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Time range config not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    ranges = []
    for entry in data.get("ranges") or []:
        missing = [k for k in ("id", "label", "start", "end") if k not in entry]
        if missing:
            raise RangeConfigError(f"Range entry {entry!r} is missing {', '.join(missing)}")
        range_id = str(entry["id"])
        start = _as_date(entry["start"], range_id, "start")
        end = _as_date(entry["end"], range_id, "end")
        if start > end:
            raise RangeConfigError(f"Range {range_id!r}: start {start} is after end {end}")
        ranges.append(TimeRange(range_id, str(entry["label"]), fixed(start, end), kind="fixed"))
    logger.debug("Loaded %d fixed ranges from %s", len(ranges), path)
    return tuple(ranges)


class TimeRangeCatalog:
    """Ordered registry of named time ranges.

    Order is display order only; resolution never depends on it.
    """

    def __init__(self, ranges: Iterable[TimeRange]):
        self._ranges: dict[str, TimeRange] = {}
        for r in ranges:
            if r.id in self._ranges:
                raise RangeConfigError(f"Duplicate time range id: {r.id!r}")
            self._ranges[r.id] = r

    def __iter__(self) -> Iterator[TimeRange]:
        return iter(self._ranges.values())

    def __len__(self) -> int:
        return len(self._ranges)

    def __contains__(self, range_id: object) -> bool:
        return range_id in self._ranges

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(self._ranges)

    def find(self, range_id: Optional[str]) -> Maybe[TimeRange]:
        if range_id in self._ranges:
            return Some(self._ranges[range_id])
        return Nothing()

    def get(self, range_id: str) -> TimeRange:
        if range_id not in self._ranges:
            raise UnknownRangeError(range_id)
        return self._ranges[range_id]

    def resolve(self, range_id: str, earliest: date, latest: date) -> ResolvedRange:
        resolved = self.get(range_id).resolve(earliest, latest)
        logger.debug("Resolved %s against %s..%s to %s..%s", range_id, earliest, latest, resolved.start, resolved.end)
        return resolved

    def years_for(self, range_id: str, earliest: date, latest: date) -> tuple[str, ...]:
        resolved = self.resolve(range_id, earliest, latest)
        return years_covered(resolved.start, resolved.end)

    def extended(self, ranges: Iterable[TimeRange]) -> "TimeRangeCatalog":
        return TimeRangeCatalog((*self, *ranges))


def default_catalog() -> TimeRangeCatalog:
    catalog = TimeRangeCatalog(builtin_ranges())
    path = config.ranges_file()
    if path is not None:
        catalog = catalog.extended(load_fixed_ranges(path))
    return catalog
