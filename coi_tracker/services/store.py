# COMPONENT: COI STORE
# REQUIREMENTS SATISFIED: record mutations, view state, selection and write-through persistence
"""
coi_tracker/services/store.py

Defines the COI store: the single owner of the raw record collection and
of every piece of view state derived from it.

The store keeps the records, the derived (filtered and sorted) view, the
selection, the filter/date-range/sort configuration, the dark-mode
preference and the pagination state consistent with each other. Every
command updates the raw state and recomputes the derived view before it
returns, so callers never observe one without the other.

Key responsibilities:
    - Create, update and delete records, assigning ids and timestamps
    - Recompute the derived view after every relevant change (a full
      recomputation; collections are expected to stay in the hundreds)
    - Reset the current page whenever filters, date range or page size change
    - Keep the selection in step with deletions
    - Write records and the dark-mode preference through to the snapshot
      slot after every change to either

Update and delete of an unknown id are silent no-ops.

The store is an ordinary object: build it with `create_store` at startup
and hand the same instance to whichever layer needs it.
"""
from __future__ import annotations

import threading
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from ..config import Settings
from ..schemas.coi import (
    COI,
    COICreate,
    COIUpdate,
    DateRangeFilter,
    FilterOptions,
    FilterUpdate,
    Page,
    SortConfig,
)
from ..utils.dates import utc_now_iso
from ..utils.logging import get_logger
from ..utils.pagination import paginate
from .persistence import SnapshotPersistence
from .query import compute_view
from .seed import seed_cois
from .selection import SelectionTracker
from .storage import get_slot

logger = get_logger("store")

DEFAULT_ROWS_PER_PAGE = 10


class COIStore:
    def __init__(
        self,
        persistence: Optional[SnapshotPersistence] = None,
        rows_per_page: int = DEFAULT_ROWS_PER_PAGE,
        clock: Callable[[], str] = utc_now_iso,
        today: Callable[[], date] = date.today,
    ):
        self._persistence = persistence
        self._clock = clock
        self._today = today
        # Commands arrive from HTTP worker threads and the debounce timer
        self._lock = threading.RLock()

        self._filters = FilterOptions()
        self._date_range = DateRangeFilter()
        self._sort = SortConfig()
        self._selection = SelectionTracker()
        self._rows_per_page = rows_per_page
        self._current_page = 1

        snapshot = persistence.load() if persistence is not None else None
        if snapshot is not None:
            self._cois: List[COI] = list(snapshot.cois)
            self._dark_mode = snapshot.is_dark_mode
        else:
            logger.info("Starting from the sample dataset")
            self._cois = seed_cois()
            self._dark_mode = False

        self._filtered: List[COI] = []
        self._recompute()

    # -----------------------------
    # Read-only state
    # -----------------------------
    @property
    def cois(self) -> List[COI]:
        return list(self._cois)

    @property
    def filtered_cois(self) -> List[COI]:
        return list(self._filtered)

    @property
    def selected_rows(self) -> List[int]:
        return self._selection.ids()

    @property
    def filters(self) -> FilterOptions:
        return self._filters

    @property
    def date_range_filter(self) -> DateRangeFilter:
        return self._date_range

    @property
    def sort_config(self) -> SortConfig:
        return self._sort

    @property
    def is_dark_mode(self) -> bool:
        return self._dark_mode

    @property
    def rows_per_page(self) -> int:
        return self._rows_per_page

    @property
    def current_page(self) -> int:
        return self._current_page

    def get(self, id_: int) -> Optional[COI]:
        for coi in self._cois:
            if coi.id == id_:
                return coi
        return None

    def today(self) -> date:
        return self._today()

    def page(self) -> Page:
        """The current page of the derived view, with totals."""
        with self._lock:
            return paginate(self._filtered, self._rows_per_page, self._current_page)

    def current_page_items(self) -> List[COI]:
        return self.page().items

    # -----------------------------
    # Internal helpers
    # -----------------------------
    def _recompute(self) -> None:
        self._filtered = compute_view(
            self._cois, self._filters, self._date_range, self._sort, today=self._today()
        )

    def _persist(self) -> None:
        if self._persistence is not None:
            self._persistence.save(self._cois, self._dark_mode)

    def _next_id(self) -> int:
        return max([0] + [c.id for c in self._cois]) + 1

    # -----------------------------
    # Record mutations
    # -----------------------------
    def create(self, payload: Union[COICreate, Dict[str, Any]]) -> COI:
        if not isinstance(payload, COICreate):
            payload = COICreate.model_validate(payload)

        with self._lock:
            coi = COI(
                **payload.model_dump(),
                id=self._next_id(),
                created_at=self._clock(),
            )
            self._cois = self._cois + [coi]
            self._recompute()
            self._persist()

        logger.info("Created COI id=%s property=%s", coi.id, coi.property)
        return coi

    def update(self, id_: int, updates: Union[COIUpdate, Dict[str, Any]]) -> Optional[COI]:
        # id and createdAt are not part of COIUpdate, so they can never be merged
        if not isinstance(updates, COIUpdate):
            updates = COIUpdate.model_validate(updates)
        changes = {k: v for k, v in updates.model_dump(exclude_unset=True).items() if v is not None}

        with self._lock:
            updated = None
            cois = []
            for coi in self._cois:
                if coi.id == id_:
                    coi = coi.model_copy(update=changes)
                    updated = coi
                cois.append(coi)

            if updated is None:
                logger.debug("Update ignored, unknown COI id=%s", id_)
                return None

            self._cois = cois
            self._recompute()
            self._persist()

        logger.info("Updated COI id=%s fields=%s", id_, sorted(changes))
        return updated

    def delete(self, id_: int) -> bool:
        return self.delete_many([id_]) > 0

    def delete_many(self, ids: Iterable[int]) -> int:
        """Delete every listed id in one step. Returns how many records were removed."""
        doomed = set(ids)
        with self._lock:
            before = len(self._cois)
            self._cois = [c for c in self._cois if c.id not in doomed]
            removed = before - len(self._cois)
            for id_ in doomed:
                self._selection.discard(id_)
            self._recompute()
            if removed:
                self._persist()

        if removed:
            logger.info("Deleted %d COI(s) ids=%s", removed, sorted(doomed))
        else:
            logger.debug("Delete ignored, unknown COI ids=%s", sorted(doomed))
        return removed

    # Names used by the dashboard
    add_coi = create
    update_coi = update
    delete_coi = delete

    # -----------------------------
    # Filters, sort and pagination
    # -----------------------------
    def set_filters(self, partial: Union[FilterUpdate, Dict[str, Any], None] = None, **fields: Any) -> FilterOptions:
        if partial is None:
            partial = fields
        elif fields:
            raise TypeError("Pass either a partial filter object or keyword fields, not both")
        if not isinstance(partial, FilterUpdate):
            partial = FilterUpdate.model_validate(partial)
        changes = {k: v for k, v in partial.model_dump(exclude_unset=True).items() if v is not None}

        with self._lock:
            self._filters = FilterOptions.model_validate({**self._filters.model_dump(), **changes})
            self._current_page = 1
            self._recompute()
            return self._filters

    def set_date_range_filter(self, date_range: Union[DateRangeFilter, Dict[str, Any]]) -> DateRangeFilter:
        if not isinstance(date_range, DateRangeFilter):
            date_range = DateRangeFilter.model_validate(date_range)

        with self._lock:
            self._date_range = date_range
            self._current_page = 1
            self._recompute()
            return self._date_range

    def set_sort_config(self, config: Union[SortConfig, Dict[str, Any]]) -> SortConfig:
        if not isinstance(config, SortConfig):
            config = SortConfig.model_validate(config)

        with self._lock:
            self._sort = config
            self._recompute()
            return self._sort

    def set_rows_per_page(self, rows: int) -> None:
        with self._lock:
            self._rows_per_page = rows
            self._current_page = 1

    def set_current_page(self, page: int) -> None:
        with self._lock:
            self._current_page = page

    def apply_filters(self) -> None:
        with self._lock:
            self._current_page = 1
            self._recompute()

    def reset_filters(self) -> None:
        with self._lock:
            self._filters = FilterOptions()
            self._date_range = DateRangeFilter()
            self._sort = SortConfig()
            self._current_page = 1
            self._recompute()

    # -----------------------------
    # Selection
    # -----------------------------
    def toggle_row_selection(self, id_: int) -> bool:
        with self._lock:
            return self._selection.toggle(id_)

    def select_all_rows(self, ids: Iterable[int]) -> None:
        with self._lock:
            self._selection.select_all(ids)

    set_selected_rows = select_all_rows

    def clear_selection(self) -> None:
        with self._lock:
            self._selection.clear()

    def is_selected(self, id_: int) -> bool:
        return self._selection.contains(id_)

    # -----------------------------
    # Preferences and persistence
    # -----------------------------
    def set_dark_mode(self, is_dark: bool) -> None:
        with self._lock:
            self._dark_mode = bool(is_dark)
            self._persist()

    def reload(self) -> bool:
        """Re-read the snapshot slot. Returns False (store untouched) if there is nothing usable."""
        if self._persistence is None:
            return False

        snapshot = self._persistence.load()
        if snapshot is None:
            return False

        with self._lock:
            self._cois = list(snapshot.cois)
            self._dark_mode = snapshot.is_dark_mode
            self._recompute()

        logger.info("Reloaded %d records from snapshot", len(snapshot.cois))
        return True

    load_from_storage = reload


def create_store(
    settings: Optional[Settings] = None,
    slot=None,
    clock: Callable[[], str] = utc_now_iso,
    today: Callable[[], date] = date.today,
) -> COIStore:
    """Build a store wired to the snapshot slot named by `settings` (or the given slot)."""
    settings = settings or Settings.from_env()
    if slot is None:
        slot = get_slot(settings)
    return COIStore(
        persistence=SnapshotPersistence(slot),
        rows_per_page=settings.rows_per_page,
        clock=clock,
        today=today,
    )
