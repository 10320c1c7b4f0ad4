import math
import numbers
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Iterable

import pandas as pd

from expense_rollup.config import DATE_FORMAT, SERIAL_DATE_EPOCH
from expense_rollup.domain import Transaction
from expense_rollup.functional import Either, Left, Maybe, Nothing, Right, Some, parse_amount
from expense_rollup.logging_setup import get_logger

logger = get_logger(__name__)


def serial_to_date(serial: float) -> date:
    # serial 1 is the epoch itself
    return (pd.Timestamp(SERIAL_DATE_EPOCH) + pd.to_timedelta(serial - 1, unit="D")).date()


def parse_date(value: Any) -> Maybe[date]:
    if value is None or isinstance(value, bool):
        return Nothing()
    if isinstance(value, datetime):
        if pd.isna(value):
            return Nothing()
        return Some(value.date())
    if isinstance(value, date):
        return Some(value)
    if isinstance(value, numbers.Real):
        if not math.isfinite(value):
            return Nothing()
        try:
            return Some(serial_to_date(value))
        except (OverflowError, ValueError, NotImplementedError) as e:
            # outside the Timestamp range; OutOfBounds* are ValueErrors
            logger.debug("Serial date %r out of range: %s", value, e)
            return Nothing()
    parsed = pd.to_datetime(str(value).strip(), format=DATE_FORMAT, errors="coerce")
    if pd.isna(parsed):
        return Nothing()
    return Some(parsed.date())


def _text(value: Any) -> str:
    if value is None:
        return ""
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return ""
    return str(value).strip()


def validate_record(record: Any) -> Either[dict, Transaction]:
    if not isinstance(record, Mapping):
        return Left({
            "error": "not_a_record",
            "message": f"Expected a mapping of column name to value, got {type(record).__name__}",
            "field": None,
        })

    raw_amount = record.get("Amount")
    return Right(Transaction(
        date=parse_date(record.get("Date")).get_or_else(None),
        payee=_text(record.get("Payee")),
        category=_text(record.get("Category")),
        amount=parse_amount(raw_amount).get_or_else(None),
        tag=_text(record.get("Tag")),
        group=_text(record.get("Group")),
        raw_amount=_text(raw_amount),
    ))


def normalize_record(record: Mapping[str, Any]) -> Transaction:
    result = validate_record(record)
    if result.is_left():
        raise TypeError(result.get_error()["message"])
    return result.get_or_else(None)


def normalize_records(records: Iterable[Any]) -> tuple[Transaction, ...]:
    transactions = []
    rejected = 0
    for record in records:
        result = validate_record(record)
        if result.is_left():
            rejected += 1
            logger.warning("Skipping row: %s", result.get_error()["message"])
            continue
        transactions.append(result.get_or_else(None))

    bad_dates = sum(1 for t in transactions if t.date is None)
    bad_amounts = sum(1 for t in transactions if t.amount is None)
    if bad_dates:
        logger.warning("%d of %d rows have an unreadable Date", bad_dates, len(transactions))
    if bad_amounts:
        logger.warning("%d of %d rows have an unparsable Amount and count as 0", bad_amounts, len(transactions))
    logger.debug("Normalized %d records (%d skipped)", len(transactions), rejected)
    return tuple(transactions)
