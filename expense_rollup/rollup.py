from typing import Iterable, Mapping

from expense_rollup.domain import ZERO, CategoryAggregate, GroupAggregate, PeriodMetric
from expense_rollup.logging_setup import get_logger

logger = get_logger(__name__)


def rollup(
    category_aggregates: Mapping[str, CategoryAggregate],
    groups: Iterable[str],
    years: Iterable[str],
    membership: Mapping[str, str],
) -> dict[str, GroupAggregate]:
    """Sum category aggregates into their owning groups.

    ``membership`` maps category -> group. Categories are visited in the
    order of ``category_aggregates``; one without a known group, or whose group
    is not among ``groups``, stays out of every group total. Each metric field
    is summed as is, so a group's monthly figure is the sum of its members'
    monthly figures.
    """
    yrs = list(dict.fromkeys(years))
    per_year: dict[str, dict[str, PeriodMetric]] = {}
    average: dict[str, PeriodMetric] = {}
    members: dict[str, list[str]] = {}
    for g in groups:
        per_year[g] = {y: ZERO for y in yrs}
        average[g] = ZERO
        members[g] = []

    ungrouped = 0
    for category, agg in category_aggregates.items():
        group = membership.get(category)
        if group is None or group not in per_year:
            ungrouped += 1
            continue
        members[group].append(category)
        for y in yrs:
            per_year[group][y] = per_year[group][y] + agg.years.get(y, ZERO)
        average[group] = average[group] + agg.average

    if ungrouped:
        logger.debug("%d categories have no group in this rollup", ungrouped)

    return {
        g: GroupAggregate(years=per_year[g], average=average[g], categories=tuple(members[g]))
        for g in per_year
    }
