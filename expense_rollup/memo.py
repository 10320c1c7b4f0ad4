from functools import lru_cache

from expense_rollup.aggregation import aggregate
from expense_rollup.domain import CategoryAggregate, Transaction
from expense_rollup.logging_setup import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=64)
def _aggregate(
    transactions: tuple[Transaction, ...],
    categories: tuple[str, ...],
    years: tuple[str, ...],
) -> tuple[tuple[str, CategoryAggregate], ...]:
    return tuple(aggregate(transactions, categories, years).items())


def cached_aggregate(
    transactions: tuple[Transaction, ...],
    categories: tuple[str, ...],
    years: tuple[str, ...],
) -> dict[str, CategoryAggregate]:
    """``aggregate`` memoized on its (immutable) inputs; returns a fresh dict."""
    hits = _aggregate.cache_info().hits
    result = dict(_aggregate(tuple(transactions), tuple(categories), tuple(years)))
    if _aggregate.cache_info().hits > hits:
        logger.debug("Aggregate cache hit for %d categories x %d years", len(categories), len(years))
    return result


def clear_cache() -> None:
    _aggregate.cache_clear()
