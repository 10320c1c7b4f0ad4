from datetime import date

import pytest

from expense_rollup.aggregation import aggregate
from expense_rollup.domain import CategoryAggregate, PeriodMetric, Transaction
from expense_rollup.rollup import rollup
from expense_rollup.store import build_store

YEARS = ["2023", "2024"]


def make_tx(d, category, amount, group=""):
    return Transaction(date=d, payee="", category=category, amount=amount, group=group)


def make_store():
    return build_store([
        make_tx(date(2023, 3, 1), "Utilities", 1200.0, "Household"),
        make_tx(date(2024, 3, 1), "Utilities", 1300.0, "Household"),
        make_tx(date(2024, 5, 1), "Groceries", 2600.0, "Household"),
        make_tx(date(2023, 9, 9), "Dining", 520.0, "Fun"),
        make_tx(date(2024, 9, 9), "Gifts", 300.0),
    ])


def test_group_sums_member_categories():
    store = make_store()
    cats = aggregate(store.transactions, store.categories, YEARS)
    groups = rollup(cats, store.groups, YEARS, store.category_group)

    household = groups["Household"]
    assert household["2023"].annual == pytest.approx(1200.0)
    assert household["2024"].annual == pytest.approx(3900.0)
    assert household["2024"].monthly == pytest.approx(3900.0 / 12)
    assert household.average.annual == pytest.approx((1200.0 + 3900.0) / 2)


def test_group_average_equals_sum_of_member_averages():
    store = make_store()
    cats = aggregate(store.transactions, store.categories, YEARS)
    groups = rollup(cats, store.groups, YEARS, store.category_group)
    for name, group in groups.items():
        expected = sum(cats[c].average.annual for c in group.categories)
        assert group.average.annual == pytest.approx(expected)
        assert group.average.weekly == pytest.approx(sum(cats[c].average.weekly for c in group.categories))


def test_categories_follow_aggregate_order():
    store = make_store()
    cats = aggregate(store.transactions, ["Utilities", "Groceries"], YEARS)
    groups = rollup(cats, store.groups, YEARS, store.category_group)
    assert groups["Household"].categories == ("Utilities", "Groceries")

    cats = aggregate(store.transactions, ["Groceries", "Utilities"], YEARS)
    groups = rollup(cats, store.groups, YEARS, store.category_group)
    assert groups["Household"].categories == ("Groceries", "Utilities")


def test_unmapped_category_stays_out_of_groups():
    store = make_store()
    cats = aggregate(store.transactions, store.categories, YEARS)
    groups = rollup(cats, store.groups, YEARS, store.category_group)

    assert cats["Gifts"]["2024"].annual == pytest.approx(300.0)
    assert all("Gifts" not in g.categories for g in groups.values())
    grouped_total = sum(g["2024"].annual for g in groups.values())
    assert grouped_total == pytest.approx(3900.0)


def test_groups_are_seeded_even_without_members():
    store = make_store()
    cats = aggregate(store.transactions, ["Utilities"], YEARS)
    groups = rollup(cats, ["Fun", "Household", "Empty"], YEARS, store.category_group)
    assert groups["Fun"].categories == ()
    assert groups["Fun"]["2023"].annual == 0.0
    assert groups["Empty"].average.annual == 0.0
    assert set(groups["Empty"].years) == set(YEARS)


def test_group_outside_requested_groups_is_skipped():
    store = make_store()
    cats = aggregate(store.transactions, store.categories, YEARS)
    groups = rollup(cats, ["Fun"], YEARS, store.category_group)
    assert list(groups) == ["Fun"]
    assert groups["Fun"]["2023"].annual == pytest.approx(520.0)


def test_empty_category_aggregates():
    groups = rollup({}, ["Fun"], [], {})
    assert groups["Fun"].years == {}
    assert groups["Fun"].average.annual == 0.0


def test_group_years_are_read_only():
    store = make_store()
    source = {"2023": PeriodMetric.from_annual(10.0)}
    groups = rollup({"Dining": CategoryAggregate(years=source)}, ["Fun"], ["2023"], store.category_group)
    source["2023"] = PeriodMetric.from_annual(99.0)
    with pytest.raises(TypeError):
        groups["Fun"].years["2023"] = PeriodMetric()
    assert groups["Fun"]["2023"].annual == pytest.approx(10.0)
