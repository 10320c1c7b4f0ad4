from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Mapping, Optional

from expense_rollup.domain import Transaction
from expense_rollup.errors import EmptyBatchError
from expense_rollup.logging_setup import get_logger
from expense_rollup.transforms import normalize_records

logger = get_logger(__name__)


@dataclass(frozen=True)
class TransactionStore:
    """One loaded batch plus everything derived from it once at load time.

    ``category_group`` maps each category to the first group it was seen
    under; ``group_categories`` lists each group's members in first-seen order.
    """
    transactions: tuple[Transaction, ...] = ()
    earliest: Optional[date] = None
    latest: Optional[date] = None
    categories: tuple[str, ...] = ()
    years: tuple[str, ...] = ()
    groups: tuple[str, ...] = ()
    category_group: Mapping[str, str] = field(default_factory=dict)
    group_categories: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.transactions)

    @property
    def is_empty(self) -> bool:
        return not self.transactions

    @property
    def bounds(self) -> tuple[date, date]:
        if self.earliest is None or self.latest is None:
            raise EmptyBatchError()
        return self.earliest, self.latest

    def members(self, group: str) -> tuple[str, ...]:
        return self.group_categories.get(group, ())

    def group_of(self, category: str) -> Optional[str]:
        return self.category_group.get(category)


def membership(transactions: Iterable[Transaction]) -> dict[str, str]:
    category_group: dict[str, str] = {}
    for t in transactions:
        if not t.group or not t.category:
            continue
        owner = category_group.setdefault(t.category, t.group)
        if owner != t.group:
            logger.warning(
                "Category %r appears under group %r but already belongs to %r; keeping %r",
                t.category, t.group, owner, owner,
            )
    return category_group


def build_store(transactions: Iterable[Transaction]) -> TransactionStore:
    trans = tuple(transactions)
    if not trans:
        return TransactionStore()

    dates = [t.date for t in trans if t.date is not None]
    category_group = membership(trans)

    group_categories: dict[str, list[str]] = {}
    for category, group in category_group.items():
        group_categories.setdefault(group, []).append(category)

    store = TransactionStore(
        transactions=trans,
        earliest=min(dates) if dates else None,
        latest=max(dates) if dates else None,
        categories=tuple(sorted({t.category for t in trans})),
        years=tuple(sorted({t.year for t in trans if t.year is not None}, key=int)),
        groups=tuple(sorted({t.group for t in trans if t.group and t.category})),
        category_group=category_group,
        group_categories={g: tuple(cats) for g, cats in group_categories.items()},
    )
    logger.debug(
        "Built store: %d transactions, %s..%s, %d categories, %d years, %d groups",
        len(trans), store.earliest, store.latest,
        len(store.categories), len(store.years), len(store.groups),
    )
    return store


def load_records(records: Iterable[Mapping[str, Any]]) -> TransactionStore:
    return build_store(normalize_records(records))
