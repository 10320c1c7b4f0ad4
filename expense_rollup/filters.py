from datetime import date
from typing import Callable, Iterable

from expense_rollup.domain import Transaction

Predicate = Callable[[Transaction], bool]


def by_categories(categories: Iterable[str]) -> Predicate:
    wanted = frozenset(categories)

    def _filter(t: Transaction) -> bool:
        return t.category in wanted

    return _filter


def by_years(years: Iterable[str]) -> Predicate:
    wanted = frozenset(years)

    def _filter(t: Transaction) -> bool:
        return t.year is not None and t.year in wanted

    return _filter


def by_date_range(start: date, end: date) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.date is not None and start <= t.date <= end

    return _filter


def has_amount(t: Transaction) -> bool:
    return t.amount is not None


def all_of(*preds: Predicate) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return all(p(t) for p in preds)

    return _filter
