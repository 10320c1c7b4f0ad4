"""Optional values and validation results for reading untrusted spreadsheet cells."""
import numbers
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, TypeVar

from expense_rollup.config import NOT_APPLICABLE

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):
    """A value that may be missing: ``Some(value)`` or ``Nothing()``."""

    @abstractmethod
    def is_some(self) -> bool:
        pass

    def is_none(self) -> bool:
        return not self.is_some()

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value)) if self.is_some() else Nothing()

    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return f(self._value) if self.is_some() else Nothing()

    def get_or_else(self, default: T) -> T:
        return self._value if self.is_some() else default


class Some(Maybe[T]):
    __slots__ = ('_value',)

    def __init__(self, value: T):
        self._value = value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):
    __slots__ = ()

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):
    """``Right(value)`` on success, ``Left(error)`` on a rejected input."""

    @abstractmethod
    def is_right(self) -> bool:
        pass

    def is_left(self) -> bool:
        return not self.is_right()

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self._value)) if self.is_right() else self

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value) if self.is_right() else self

    def get_or_else(self, default: T) -> T:
        return self._value if self.is_right() else default

    def get_error(self) -> E:
        if self.is_right():
            raise ValueError("Right carries no error")
        return self._error


class Right(Either[E, T]):
    __slots__ = ('_value',)

    def __init__(self, value: T):
        self._value = value

    def is_right(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):
    __slots__ = ('_error',)

    def __init__(self, error: E):
        self._error = error

    def is_right(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def parse_amount(value: Any) -> Maybe[float]:
    """Parse a currency-formatted amount such as ``"$1,234.50"``.

    Numbers pass through; strings lose ``$``, ``,`` and surrounding whitespace.
    Anything that still is not a number gives ``Nothing()``.
    """
    if isinstance(value, bool) or value is None:
        return Nothing()
    if isinstance(value, numbers.Real):
        if value != value:  # NaN from a spreadsheet blank
            return Nothing()
        return Some(float(value))
    s = str(value).replace("$", "").replace(",", "").strip()
    if not s:
        return Nothing()
    try:
        amount = float(s)
    except ValueError:
        return Nothing()
    if amount != amount or amount in (float("inf"), float("-inf")):
        return Nothing()
    return Some(amount)


def percent_change(baseline: float, value: float) -> Maybe[float]:
    if baseline == 0:
        return Nothing()
    return Some((value - baseline) / abs(baseline) * 100)


def percent_difference(baseline: float, value: float) -> str:
    """Signed percent change from ``baseline`` to ``value``, e.g. ``"+12.5%"``.

    A zero baseline has no meaningful change and renders as ``"N/A"``.
    """
    return percent_change(baseline, value).map(
        lambda diff: f"{'+' if diff >= 0 else ''}{diff:.1f}%"
    ).get_or_else(NOT_APPLICABLE)
