from typing import Iterable, Mapping, Optional

from expense_rollup.domain import ZERO, CategoryAggregate, PeriodMetric, Transaction
from expense_rollup.filters import all_of, by_categories, by_years
from expense_rollup.lazy import iter_amounts
from expense_rollup.logging_setup import get_logger

logger = get_logger(__name__)


def _unique(values: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(values))


def aggregate(
    transactions: Iterable[Transaction],
    categories: Iterable[str],
    years: Iterable[str],
) -> dict[str, CategoryAggregate]:
    """Fold transactions into per-category, per-year totals.

    Every requested (category, year) pair is present in the result, at zero
    when nothing matched. No years means no result at all. The average is the
    mean annual total over the requested years.
    """
    cats = _unique(categories)
    yrs = _unique(years)
    if not cats or not yrs:
        return {}

    annual: dict[str, dict[str, float]] = {c: {y: 0.0 for y in yrs} for c in cats}

    matched = 0
    for t, amount in iter_amounts(transactions, all_of(by_years(yrs), by_categories(cats))):
        annual[t.category][t.year] += amount
        matched += 1
    logger.debug("Aggregated %d transactions into %d categories x %d years", matched, len(cats), len(yrs))

    result = {}
    for category in cats:
        per_year = annual[category]
        mean = sum(per_year.values()) / len(yrs)
        result[category] = CategoryAggregate(
            years={y: PeriodMetric.from_annual(per_year[y]) for y in yrs},
            average=PeriodMetric.from_annual(mean),
        )
    return result


def selection_total(
    transactions: Iterable[Transaction],
    categories: Iterable[str] = (),
    years: Iterable[str] = (),
) -> float:
    """Sum of amounts for the selection; an empty axis does not filter."""
    cats = frozenset(categories)
    yrs = frozenset(years)
    preds = []
    if cats:
        preds.append(by_categories(cats))
    if yrs:
        preds.append(by_years(yrs))
    return sum(amount for _, amount in iter_amounts(transactions, all_of(*preds)))


def column_totals(
    aggregates: Mapping[str, CategoryAggregate],
    years: Iterable[str],
    categories: Optional[Iterable[str]] = None,
) -> CategoryAggregate:
    yrs = _unique(years)
    names = list(aggregates) if categories is None else _unique(categories)
    totals = {y: ZERO for y in yrs}
    average = ZERO
    for name in names:
        agg = aggregates.get(name)
        if agg is None:
            continue
        for y in yrs:
            totals[y] = totals[y] + agg.years.get(y, ZERO)
        average = average + agg.average
    return CategoryAggregate(years=totals, average=average)


def hide_zero_categories(
    aggregates: Mapping[str, CategoryAggregate], years: Iterable[str]
) -> dict[str, CategoryAggregate]:
    yrs = _unique(years)
    return {
        name: agg
        for name, agg in aggregates.items()
        if any(agg.years.get(y, ZERO).annual > 0 for y in yrs) or agg.average.annual > 0
    }
