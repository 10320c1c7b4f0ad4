"""
pandas at the package edges: DataFrames from a spreadsheet reader come in,
aggregate tables for a presentation layer go out.

Typical host wiring::

    service = DashboardService()
    service.load(transactions_from_frame(pd.read_excel(path)))
    table = category_frame(service.category_view(), service.selection.selected_years)
"""
from typing import Iterable, Mapping

import pandas as pd

from expense_rollup.config import RECORD_FIELDS
from expense_rollup.domain import ZERO, CategoryAggregate, GroupAggregate, Transaction
from expense_rollup.transforms import normalize_records


def transactions_from_frame(df: pd.DataFrame) -> tuple[Transaction, ...]:
    """Normalize a DataFrame with Date/Payee/Category/Amount/Tag/Group columns.

    Missing columns read as empty; NaN cells become empty strings (text) or
    unparsable values (Date, Amount).
    """
    df = df.copy()
    df.columns = [str(c).strip() for c in df.columns]
    for col in RECORD_FIELDS:
        if col not in df.columns:
            df[col] = None
    return normalize_records(df[list(RECORD_FIELDS)].to_dict(orient="records"))


def _metric_columns(prefix: str, metric) -> dict:
    return {
        f"{prefix}_annual": metric.annual,
        f"{prefix}_monthly": metric.monthly,
        f"{prefix}_weekly": metric.weekly,
    }


def _columns(years: list[str]) -> list[str]:
    names = []
    for prefix in [*years, "average"]:
        names.extend(_metric_columns(prefix, ZERO))
    return names


def category_frame(aggregates: Mapping[str, CategoryAggregate], years: Iterable[str]) -> pd.DataFrame:
    yrs = list(years)
    rows = []
    for name, agg in aggregates.items():
        row = {"category": name}
        for y in yrs:
            row.update(_metric_columns(y, agg.years[y]))
        row.update(_metric_columns("average", agg.average))
        rows.append(row)
    columns = ["category"] + _columns(yrs)
    return pd.DataFrame(rows, columns=columns)


def group_frame(aggregates: Mapping[str, GroupAggregate], years: Iterable[str]) -> pd.DataFrame:
    yrs = list(years)
    rows = []
    for name, agg in aggregates.items():
        row = {"group": name, "categories": ", ".join(agg.categories)}
        for y in yrs:
            row.update(_metric_columns(y, agg.years[y]))
        row.update(_metric_columns("average", agg.average))
        rows.append(row)
    columns = ["group", "categories"] + _columns(yrs)
    return pd.DataFrame(rows, columns=columns)


def comparison_frame(result, hide_zero: bool = False) -> pd.DataFrame:
    """Average annual figures per category for both periods.

    The period labels are kept in ``df.attrs["periods"]``.
    """
    df = pd.DataFrame(
        [
            {"category": r.name, "first_annual": r.first, "second_annual": r.second, "percent": r.percent}
            for r in result.rows(hide_zero=hide_zero)
        ],
        columns=["category", "first_annual", "second_annual", "percent"],
    )
    df.attrs["periods"] = (result.first.time_range.label, result.second.time_range.label)
    return df
