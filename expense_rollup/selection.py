"""Sidebar selection state.

Two override rules hold at all times:

* year selection is either driven by a time range or an explicit set of
  years (``YearSelection``); picking a range replaces manual years and
  toggling a year drops the range;
* selected categories are recomputed from the selected groups on every group
  change, discarding any manual category edits.
"""
from dataclasses import dataclass
from typing import Iterable, Optional

from expense_rollup.config import DEFAULT_TIME_RANGE
from expense_rollup.domain import ByTimeRange, ExplicitYears, YearSelection
from expense_rollup.events import BATCH_LOADED, SELECTION_CHANGED, EventBus, event_bus
from expense_rollup.logging_setup import get_logger
from expense_rollup.store import TransactionStore
from expense_rollup.time_ranges import TimeRangeCatalog, default_catalog

logger = get_logger(__name__)


@dataclass(frozen=True)
class SelectionState:
    categories: tuple[str, ...] = ()
    years: tuple[str, ...] = ()
    groups: tuple[str, ...] = ()
    time_range: Optional[str] = None


class SelectionResolver:

    def __init__(self, catalog: Optional[TimeRangeCatalog] = None, bus: Optional[EventBus] = None):
        self.catalog = catalog if catalog is not None else default_catalog()
        self.bus = bus if bus is not None else event_bus
        self._store = TransactionStore()
        self._year_selection: YearSelection = ExplicitYears()
        self._groups: frozenset[str] = frozenset()
        self._categories: tuple[str, ...] = ()

    # -- derived views -----------------------------------------------------

    @property
    def store(self) -> TransactionStore:
        return self._store

    @property
    def year_selection(self) -> YearSelection:
        return self._year_selection

    @property
    def time_range(self) -> Optional[str]:
        if isinstance(self._year_selection, ByTimeRange):
            return self._year_selection.range_id
        return None

    @property
    def selected_years(self) -> tuple[str, ...]:
        selection = self._year_selection
        if isinstance(selection, ByTimeRange):
            if self._store.earliest is None:
                return ()
            earliest, latest = self._store.bounds
            return self.catalog.years_for(selection.range_id, earliest, latest)
        return tuple(sorted(selection.years, key=int))

    @property
    def selected_groups(self) -> tuple[str, ...]:
        known = [g for g in self._store.groups if g in self._groups]
        extra = sorted(self._groups.difference(self._store.groups))
        return tuple(known + extra)

    @property
    def selected_categories(self) -> tuple[str, ...]:
        return self._categories

    def snapshot(self) -> SelectionState:
        return SelectionState(
            categories=self.selected_categories,
            years=self.selected_years,
            groups=self.selected_groups,
            time_range=self.time_range,
        )

    # -- batch lifecycle ---------------------------------------------------

    def load(self, store: TransactionStore) -> SelectionState:
        self._store = store
        self._year_selection = ExplicitYears()
        self._groups = frozenset()
        self._categories = ()
        if not store.is_empty and store.earliest is not None:
            if DEFAULT_TIME_RANGE in self.catalog:
                self._year_selection = ByTimeRange(DEFAULT_TIME_RANGE)
            self._groups = frozenset(store.groups)
            self._categories = self._categories_from_groups()
            logger.info(
                "Selection reset: range=%s, %d groups, %d categories",
                self.time_range, len(self._groups), len(self._categories),
            )
        state = self.snapshot()
        self.bus.publish(BATCH_LOADED, {"state": state})
        return state

    # -- time range / years ------------------------------------------------

    def select_time_range(self, range_id: str) -> SelectionState:
        self.catalog.get(range_id)
        if self.time_range == range_id:
            self._year_selection = ExplicitYears()
        else:
            self._year_selection = ByTimeRange(range_id)
        return self._changed("time_range")

    def clear_time_range(self) -> SelectionState:
        self._year_selection = ExplicitYears()
        return self._changed("time_range")

    def toggle_year(self, year: str) -> SelectionState:
        years = set(self.selected_years)
        years.symmetric_difference_update({str(year)})
        self._year_selection = ExplicitYears(frozenset(years))
        return self._changed("years")

    def set_years(self, years: Iterable[str]) -> SelectionState:
        self._year_selection = ExplicitYears(frozenset(str(y) for y in years))
        return self._changed("years")

    def select_all_years(self) -> SelectionState:
        return self.set_years(self._store.years)

    def clear_years(self) -> SelectionState:
        return self.set_years(())

    # -- groups / categories -----------------------------------------------

    def toggle_group(self, group: str) -> SelectionState:
        self._groups = self._groups.symmetric_difference({group})
        self._categories = self._categories_from_groups()
        return self._changed("groups")

    def select_all_groups(self) -> SelectionState:
        self._groups = frozenset(self._store.groups)
        self._categories = self._categories_from_groups()
        return self._changed("groups")

    def clear_groups(self) -> SelectionState:
        self._groups = frozenset()
        self._categories = ()
        return self._changed("groups")

    # Manual category edits last only until the next group change.
    def toggle_category(self, category: str) -> SelectionState:
        if category in self._categories:
            self._categories = tuple(c for c in self._categories if c != category)
        else:
            self._categories = self._categories + (category,)
        return self._changed("categories")

    def select_all_categories(self) -> SelectionState:
        self._categories = tuple(self._store.categories)
        return self._changed("categories")

    def clear_categories(self) -> SelectionState:
        self._categories = ()
        return self._changed("categories")

    def _categories_from_groups(self) -> tuple[str, ...]:
        cats = (c for g in self.selected_groups for c in self._store.members(g))
        return tuple(dict.fromkeys(cats))

    def _changed(self, field: str) -> SelectionState:
        state = self.snapshot()
        self.bus.publish(SELECTION_CHANGED, {"field": field, "state": state})
        return state
