from typing import Any, Dict, Iterable, Optional, Union

from expense_rollup.aggregation import column_totals, hide_zero_categories, selection_total
from expense_rollup.comparison import ComparisonEngine, ComparisonResult
from expense_rollup.domain import CategoryAggregate, GroupAggregate, ResolvedRange, TimeRange, Transaction
from expense_rollup.events import BATCH_LOADED, SELECTION_CHANGED, Event, EventBus, summarize_selection
from expense_rollup.logging_setup import get_logger
from expense_rollup.memo import cached_aggregate
from expense_rollup.rollup import rollup
from expense_rollup.selection import SelectionResolver
from expense_rollup.store import TransactionStore, build_store
from expense_rollup.time_ranges import TimeRangeCatalog, default_catalog, years_between

logger = get_logger(__name__)


class DashboardService:
    """Facade over one loaded batch, its selection and the aggregate views.

    Views are pure functions of (batch, selection). They are cached until the
    selection resolver announces a change on the bus, then recomputed on the
    next read.
    """

    def __init__(
        self,
        store: Optional[TransactionStore] = None,
        catalog: Optional[TimeRangeCatalog] = None,
        bus: Optional[EventBus] = None,
    ):
        self.catalog = catalog if catalog is not None else default_catalog()
        self.bus = bus if bus is not None else EventBus()
        self.selection = SelectionResolver(self.catalog, self.bus)
        self._views: Dict[str, Any] = {}
        self.bus.subscribe(BATCH_LOADED, self._invalidate)
        self.bus.subscribe(SELECTION_CHANGED, self._invalidate)
        if store is not None:
            self.load(store)

    def _invalidate(self, event: Event, payload: dict) -> dict:
        dropped = len(self._views)
        self._views = {}
        if dropped:
            logger.debug("Dropped %d cached views after %s", dropped, summarize_selection(event, payload))
        return {"invalidated": dropped}

    @property
    def store(self) -> TransactionStore:
        return self.selection.store

    def load(self, batch: Union[TransactionStore, Iterable[Transaction]]) -> TransactionStore:
        store = batch if isinstance(batch, TransactionStore) else build_store(batch)
        self.selection.load(store)
        logger.info("Loaded batch of %d transactions (%s to %s)", len(store), store.earliest, store.latest)
        return store

    def category_view(self, hide_zero: bool = False) -> Dict[str, CategoryAggregate]:
        if "categories" not in self._views:
            self._views["categories"] = cached_aggregate(
                self.store.transactions,
                self.selection.selected_categories,
                self.selection.selected_years,
            )
        view = self._views["categories"]
        if hide_zero:
            return hide_zero_categories(view, self.selection.selected_years)
        return dict(view)

    def group_view(self) -> Dict[str, GroupAggregate]:
        if "groups" not in self._views:
            self._views["groups"] = rollup(
                self.category_view(),
                self.store.groups,
                self.selection.selected_years,
                self.store.category_group,
            )
        return dict(self._views["groups"])

    def totals(self, hide_zero: bool = False) -> CategoryAggregate:
        """The total row across the categories currently on screen."""
        return column_totals(self.category_view(hide_zero), self.selection.selected_years)

    def total(self) -> float:
        return selection_total(
            self.store.transactions,
            self.selection.selected_categories,
            self.selection.selected_years,
        )

    def range_summary(self) -> Optional[tuple[TimeRange, ResolvedRange, float]]:
        range_id = self.selection.time_range
        if range_id is None or self.store.earliest is None:
            return None
        earliest, latest = self.store.bounds
        time_range = self.catalog.get(range_id)
        resolved = time_range.resolve(earliest, latest)
        return time_range, resolved, years_between(resolved.start, resolved.end)

    def compare(self, first_range: str, second_range: str) -> ComparisonResult:
        return ComparisonEngine(self.store, self.catalog).compare(first_range, second_range)
