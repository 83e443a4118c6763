# COMPONENT: QUERY ENGINE
# REQUIREMENTS SATISFIED: filtered, searched, date-ranged and sorted record views
"""
coi_tracker/services/query.py

Computes the derived view of the COI collection.

`compute_view` is a pure function: it never mutates the input list or the
records, and identical inputs always produce the same ordered output. The
store calls it after every relevant change and keeps the result as its
`filtered_cois`; pagination and selection are layered on afterwards by the
caller.

Filtering stages (all AND-combined, applied in this order):
    1. property membership
    2. status equality
    3. case-insensitive substring search over property, tenant name,
       unit and COI name
    4. expiry bucket ("Expired", "30days", "60days", "90days")
    5. explicit start/end date range on the expiry date

Sorting happens last and only when a sort key is configured. Python's sort
is stable, so records with equal keys keep their relative order in either
direction.
"""
from __future__ import annotations

from datetime import date, timedelta
from functools import cmp_to_key
from typing import Iterable, List, Optional

from ..schemas.coi import COI, DateRangeFilter, FilterOptions, SortConfig
from ..utils.dates import parse_iso_date

EXPIRY_WINDOWS = {
    "30days": 30,
    "60days": 60,
    "90days": 90,
}

SEARCH_FIELDS = ("property", "tenant_name", "unit", "coi_name")


def _matches_search(coi: COI, needle: str) -> bool:
    for attr in SEARCH_FIELDS:
        value = getattr(coi, attr, "") or ""
        if needle in str(value).lower():
            return True
    return False


def _in_expiry_bucket(coi: COI, bucket: str, today: date) -> bool:
    expiry = parse_iso_date(coi.expiry_date)
    if expiry is None:
        return False

    if bucket == "Expired":
        return expiry < today

    days = EXPIRY_WINDOWS.get(bucket)
    if days is None:
        return True
    return today <= expiry <= today + timedelta(days=days)


def _in_date_range(coi: COI, start: Optional[date], end: Optional[date]) -> bool:
    expiry = parse_iso_date(coi.expiry_date)
    if expiry is None:
        return False
    if start is not None and expiry < start:
        return False
    if end is not None and expiry > end:
        return False
    return True


def _as_number(value) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _compare_values(a, b) -> int:
    if isinstance(a, str) and isinstance(b, str):
        fa, fb = a.casefold(), b.casefold()
        if fa != fb:
            return -1 if fa < fb else 1
        if a != b:
            return -1 if a < b else 1
        return 0

    na, nb = _as_number(a), _as_number(b)
    if na is None or nb is None:
        # Non-numeric values have no defined order
        return 0
    if na < nb:
        return -1
    if na > nb:
        return 1
    return 0


def sort_records(records: Iterable[COI], sort: SortConfig) -> List[COI]:
    result = list(records)
    if not sort.key:
        return result

    key = sort.key
    sign = -1 if sort.direction == "desc" else 1

    def _cmp(x: COI, y: COI) -> int:
        return sign * _compare_values(getattr(x, key, None), getattr(y, key, None))

    result.sort(key=cmp_to_key(_cmp))
    return result


def compute_view(
    records: Iterable[COI],
    filters: FilterOptions,
    date_range: DateRangeFilter,
    sort: SortConfig,
    today: Optional[date] = None,
) -> List[COI]:
    today = today or date.today()
    result = list(records)

    if filters.properties:
        wanted = set(filters.properties)
        result = [c for c in result if c.property in wanted]

    if filters.status != "All":
        result = [c for c in result if c.status == filters.status]

    if filters.search_query.strip():
        needle = filters.search_query.lower()
        result = [c for c in result if _matches_search(c, needle)]

    if filters.expiry_filter != "All":
        result = [c for c in result if _in_expiry_bucket(c, filters.expiry_filter, today)]

    if date_range.start_date or date_range.end_date:
        # An unparseable bound is ignored
        start = parse_iso_date(date_range.start_date)
        end = parse_iso_date(date_range.end_date)
        result = [c for c in result if _in_date_range(c, start, end)]

    return sort_records(result, sort)
