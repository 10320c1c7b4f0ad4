from typing import Callable, Iterable, Iterator

from expense_rollup.domain import Transaction
from expense_rollup.filters import has_amount


def iter_transactions(
    trans: Iterable[Transaction], pred: Callable[[Transaction], bool]
) -> Iterator[Transaction]:
    for t in trans:
        if pred(t):
            yield t


def iter_amounts(
    trans: Iterable[Transaction], pred: Callable[[Transaction], bool]
) -> Iterator[tuple[Transaction, float]]:
    # unparsable amounts are skipped, which is the same as adding zero
    for t in iter_transactions(trans, pred):
        if has_amount(t):
            yield t, t.amount
