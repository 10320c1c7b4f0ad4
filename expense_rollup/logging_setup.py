"""Package logging: modules call ``get_logger(__name__)``; a host application
calls ``configure_logging()`` once to send ``expense_rollup.*`` records to a stream.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

from expense_rollup.config import LOG_LEVEL_ENV

PACKAGE_LOGGER = "expense_rollup"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_CONFIGURED = False


def _level_from_name(name: str) -> int | None:
    name = name.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = getattr(logging, name, None)
    return numeric if isinstance(numeric, int) else None


def _parse_level(level: int | str | None) -> int:
    """Explicit level first, then ``EXPENSE_ROLLUP_LOG_LEVEL``, then INFO."""
    if isinstance(level, int):
        return level
    candidates = [level] if isinstance(level, str) else []
    candidates.append(os.getenv(LOG_LEVEL_ENV) or "")
    for candidate in candidates:
        parsed = _level_from_name(candidate) if candidate else None
        if parsed is not None:
            return parsed
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    # first call wins
    global _CONFIGURED
    if _CONFIGURED:
        return

    resolved = _parse_level(level)
    pkg = logging.getLogger(PACKAGE_LOGGER)
    pkg.handlers[:] = [h for h in pkg.handlers if not isinstance(h, logging.NullHandler)]

    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    pkg.addHandler(handler)
    pkg.setLevel(resolved)
    pkg.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    pkg = logging.getLogger(PACKAGE_LOGGER)
    if not _CONFIGURED and not pkg.handlers:
        pkg.addHandler(logging.NullHandler())
    return logging.getLogger(name)
