# ---------------------------------------------------------------------------
# Unit Tests: View-state controller and selection
#
# Covers the filter/date-range/sort/pagination commands of the store and
# the page-reset law: filters, date range, page size and reset-all send
# the current page back to 1, sorting and record mutations do not.
# Selection toggling/replacement semantics are checked here too.
# ---------------------------------------------------------------------------
import json

import pytest

from conftest import make_coi, new_payload
from coi_tracker.schemas.coi import DateRangeFilter, FilterOptions, FilterUpdate, SortConfig
from coi_tracker.services.selection import SelectionTracker


def _ids(store):
    return [c.id for c in store.filtered_cois]


def test_status_filter_scenario(three_store):
    three_store.set_current_page(4)
    three_store.set_filters({"status": "Active"})
    assert _ids(three_store) == [1, 3]
    assert three_store.current_page == 1


def test_set_filters_merges(three_store):
    three_store.set_filters(status="Active")
    three_store.set_filters(FilterUpdate(search_query="tenant 3"))
    assert three_store.filters.status == "Active"
    assert three_store.filters.search_query == "tenant 3"
    assert _ids(three_store) == [3]


def test_set_filters_rejects_mixed_arguments(three_store):
    with pytest.raises(TypeError):
        three_store.set_filters({"status": "Active"}, search_query="x")


def test_properties_filter_accepts_list(three_store):
    three_store.set_filters(properties=["Oak Ridge Plaza"])
    assert three_store.filters.properties == frozenset({"Oak Ridge Plaza"})
    assert _ids(three_store) == [2]


@pytest.mark.parametrize("command", [
    lambda s: s.set_filters(status="Expired"),
    lambda s: s.set_date_range_filter({"startDate": "2024-06-01"}),
    lambda s: s.set_rows_per_page(20),
    lambda s: s.reset_filters(),
    lambda s: s.apply_filters(),
])
def test_page_resets_to_one(three_store, command):
    three_store.set_current_page(5)
    command(three_store)
    assert three_store.current_page == 1


@pytest.mark.parametrize("command", [
    lambda s: s.set_sort_config({"key": "property", "direction": "asc"}),
    lambda s: s.create(new_payload()),
    lambda s: s.update(1, {"unit": "2"}),
    lambda s: s.delete(3),
    lambda s: s.toggle_row_selection(1),
])
def test_page_kept(three_store, command):
    three_store.set_current_page(5)
    command(three_store)
    assert three_store.current_page == 5


def test_current_page_is_not_clamped(three_store):
    three_store.set_current_page(999)
    assert three_store.current_page == 999
    assert three_store.current_page_items() == []
    three_store.set_current_page(-2)
    assert three_store.current_page == -2


@pytest.mark.parametrize("page", [0, -2])
def test_pages_before_the_first_are_empty(make_store, page):
    store = make_store([make_coi(i) for i in range(1, 26)])
    store.set_current_page(page)
    assert store.current_page_items() == []
    assert (store.page().start_item, store.page().end_item) == (0, 0)


def test_date_range_replaces_wholesale(three_store):
    three_store.set_date_range_filter(DateRangeFilter(start_date="2024-06-01", end_date="2025-06-01"))
    assert _ids(three_store) == [1]
    three_store.set_date_range_filter({"endDate": "2024-12-31"})
    assert three_store.date_range_filter.start_date is None
    assert _ids(three_store) == [3]


def test_sort_scenario(three_store):
    three_store.set_sort_config(SortConfig(key="expiryDate", direction="desc"))
    assert [c.expiry_date for c in three_store.filtered_cois] == ["2026-01-01", "2025-01-01", "2024-01-01"]
    assert three_store.sort_config.key == "expiry_date"


def test_sort_none_preserves_order(three_store):
    three_store.set_sort_config({"key": "expiryDate", "direction": "asc"})
    three_store.set_sort_config({"key": None})
    assert _ids(three_store) == [1, 2, 3]


def test_reset_filters_restores_defaults(three_store):
    three_store.set_filters(status="Expired", search_query="test", expiry_filter="Expired")
    three_store.set_date_range_filter({"startDate": "2030-01-01"})
    three_store.set_sort_config({"key": "unit", "direction": "desc"})

    three_store.reset_filters()

    assert three_store.filters == FilterOptions()
    assert three_store.date_range_filter == DateRangeFilter()
    assert three_store.sort_config == SortConfig()
    assert _ids(three_store) == [1, 2, 3]


def test_thirty_day_scenario(make_store):
    store = make_store([
        make_coi(1, expiry_date="2025-06-15"),
        make_coi(2, expiry_date="2025-08-01"),
        make_coi(3, expiry_date="2025-05-01"),
    ])
    store.set_filters(expiry_filter="30days")
    assert _ids(store) == [1]


def test_pagination_slices_view(make_store):
    store = make_store([make_coi(i) for i in range(1, 26)], rows_per_page=10)
    page = store.page()
    assert page.total_items == 25
    assert page.total_pages == 3
    assert [c.id for c in page.items] == list(range(1, 11))

    store.set_current_page(3)
    page = store.page()
    assert [c.id for c in page.items] == list(range(21, 26))
    assert (page.start_item, page.end_item) == (21, 25)


def test_filters_are_not_persisted(three_store, slot):
    three_store.set_filters(status="Expired")
    three_store.set_sort_config({"key": "unit"})
    three_store.set_dark_mode(True)
    saved = json.loads(slot.data)
    assert set(saved) == {"cois", "isDarkMode"}
    assert saved["isDarkMode"] is True
    assert len(saved["cois"]) == 3


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


def test_toggle_is_symmetric(three_store):
    assert three_store.toggle_row_selection(1) is True
    assert three_store.is_selected(1)
    assert three_store.toggle_row_selection(1) is False
    assert three_store.selected_rows == []


def test_select_all_replaces(three_store):
    three_store.toggle_row_selection(3)
    three_store.select_all_rows([1, 2])
    assert three_store.selected_rows == [1, 2]
    three_store.select_all_rows([])
    assert three_store.selected_rows == []


def test_selection_survives_filtering(three_store):
    three_store.toggle_row_selection(2)
    three_store.set_filters(status="Active")
    assert 2 not in _ids(three_store)
    assert three_store.selected_rows == [2]


def test_clear_selection(three_store):
    three_store.set_selected_rows([1, 3])
    three_store.clear_selection()
    assert three_store.selected_rows == []


def test_selection_tracker_keeps_insertion_order():
    tracker = SelectionTracker()
    for id_ in (5, 2, 9):
        tracker.toggle(id_)
    tracker.toggle(2)
    tracker.discard(42)
    assert tracker.ids() == [5, 9]
    assert 9 in tracker
    assert len(tracker) == 2
