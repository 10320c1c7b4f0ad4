"""
expense_rollup.config
Central configuration/constants.
"""
from __future__ import annotations

import os
from datetime import date
from pathlib import Path
from typing import Optional

# fixed divisors, not calendar-accurate
MONTHS_PER_YEAR = 12
WEEKS_PER_YEAR = 52
DAYS_PER_YEAR = 365.25

DEFAULT_TIME_RANGE = "last-12-months"

# spreadsheet serial dates count days from this epoch, serial 1 == epoch
SERIAL_DATE_EPOCH = date(1900, 1, 1)
DATE_FORMAT = "%m/%d/%Y"

ROLLING_MONTH_SPANS = (12, 24, 36, 48, 60)
CALENDAR_YEAR_SPANS = (1, 2, 3, 4, 5)

NOT_APPLICABLE = "N/A"

# record keys produced by the spreadsheet export
RECORD_FIELDS = ("Date", "Payee", "Category", "Amount", "Tag", "Group")

RANGES_FILE_ENV = "EXPENSE_ROLLUP_RANGES"
LOG_LEVEL_ENV = "EXPENSE_ROLLUP_LOG_LEVEL"


def ranges_file() -> Optional[Path]:
    value = os.getenv(RANGES_FILE_ENV)
    if not value:
        return None
    return Path(value)
