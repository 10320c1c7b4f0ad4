from datetime import date

import pytest

from expense_rollup.aggregation import aggregate
from expense_rollup.domain import Transaction
from expense_rollup.memo import _aggregate, cached_aggregate, clear_cache


def make_sample():
    return (
        Transaction(date(2024, 1, 1), "Market", "Groceries", 120.0),
        Transaction(date(2024, 2, 1), "Bistro", "Dining", 52.0),
        Transaction(date(2025, 1, 1), "Market", "Groceries", 60.0),
    )


def test_cached_matches_plain_aggregate():
    clear_cache()
    trans = make_sample()
    assert cached_aggregate(trans, ("Groceries", "Dining"), ("2024", "2025")) == aggregate(
        trans, ["Groceries", "Dining"], ["2024", "2025"]
    )


def test_repeat_call_hits_cache():
    clear_cache()
    trans = make_sample()
    cached_aggregate(trans, ("Groceries",), ("2024",))
    cached_aggregate(list(trans), ["Groceries"], ["2024"])
    info = _aggregate.cache_info()
    assert info.hits == 1
    assert info.misses == 1


def test_each_call_returns_a_fresh_dict():
    clear_cache()
    trans = make_sample()
    first = cached_aggregate(trans, ("Groceries",), ("2024",))
    first.pop("Groceries")
    second = cached_aggregate(trans, ("Groceries",), ("2024",))
    assert "Groceries" in second


def test_clear_cache():
    cached_aggregate(make_sample(), ("Dining",), ("2024",))
    clear_cache()
    assert _aggregate.cache_info().currsize == 0


def test_cached_years_cannot_be_mutated_by_callers():
    clear_cache()
    trans = make_sample()
    first = cached_aggregate(trans, ("Groceries",), ("2024", "2025"))
    with pytest.raises(TypeError):
        first["Groceries"].years["2024"] = None

    second = cached_aggregate(trans, ("Groceries",), ("2024", "2025"))
    assert _aggregate.cache_info().hits == 1
    assert second["Groceries"]["2024"].annual == pytest.approx(120.0)
    assert set(second["Groceries"].years) == {"2024", "2025"}
