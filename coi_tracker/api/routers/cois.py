# COMPONENT: COI API ROUTES
# REQUIREMENTS SATISFIED: HTTP surface over the store's queries and commands
"""
coi_tracker/api/routers/cois.py

Thin FastAPI routes that let the dashboard drive the COI store.

Every route resolves the store from `app.state` and calls exactly one
store command or query; no business rules live here beyond request
validation (email shape, positive page size), which plays the part of the
dashboard's form checks.

Update and delete of unknown ids keep the store's lenient no-op policy and
answer 200 with a null/false result. Only read-by-id answers 404.
"""
from __future__ import annotations

import logging
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from pydantic import Field, field_validator

from ...schemas.coi import (
    COI,
    COICreate,
    COIStats,
    COIUpdate,
    CamelModel,
    DateRangeFilter,
    FilterOptions,
    FilterUpdate,
    Page,
    SortConfig,
)
from ...services.reporting import (
    export_filename,
    export_to_csv,
    get_total_stats,
    get_unique_properties,
)
from ...services.store import COIStore
from ...utils.debounce import DebouncedSearch
from ...utils.validation import validate_email

logger = logging.getLogger("coi_tracker.api")

router = APIRouter()

# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def get_store(request: Request) -> COIStore:
    return request.app.state.store


def get_search(request: Request) -> DebouncedSearch:
    return request.app.state.search


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------


class COIForm(COICreate):
    @field_validator("tenant_email")
    @classmethod
    def _email_shape(cls, v: str) -> str:
        if not validate_email(v):
            raise ValueError("Invalid email address")
        return v


class COIPatch(COIUpdate):
    @field_validator("tenant_email")
    @classmethod
    def _email_shape(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not validate_email(v):
            raise ValueError("Invalid email address")
        return v


class IdList(CamelModel):
    ids: List[int]


class SearchInput(CamelModel):
    text: str
    immediate: bool = False


class RowsPerPageInput(CamelModel):
    rows_per_page: int = Field(..., gt=0)


class PageInput(CamelModel):
    page: int


class DarkModeInput(CamelModel):
    is_dark_mode: bool


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get("/health")
def health(store: COIStore = Depends(get_store)):
    return {"status": "ok", "records": len(store.cois)}


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@router.get("/cois", response_model=Page[COI])
def current_page(store: COIStore = Depends(get_store)):
    return store.page()


@router.get("/cois/all", response_model=List[COI])
def all_cois(store: COIStore = Depends(get_store)):
    return store.cois


@router.get("/cois/view", response_model=List[COI])
def filtered_cois(store: COIStore = Depends(get_store)):
    return store.filtered_cois


@router.get("/cois/{coi_id}", response_model=COI)
def get_coi(coi_id: int, store: COIStore = Depends(get_store)):
    coi = store.get(coi_id)
    if coi is None:
        raise HTTPException(status_code=404, detail="COI does not exist.")
    return coi


@router.post("/cois", response_model=COI, status_code=201)
def create_coi(body: COIForm, store: COIStore = Depends(get_store)):
    logger.info("POST /cois property=%s", body.property)
    return store.create(COICreate.model_validate(body.model_dump()))


@router.patch("/cois/{coi_id}", response_model=Optional[COI])
def update_coi(coi_id: int, body: COIPatch, store: COIStore = Depends(get_store)):
    logger.info("PATCH /cois/%s", coi_id)
    changes = body.model_dump(exclude_unset=True)
    return store.update(coi_id, COIUpdate.model_validate(changes))


@router.delete("/cois/{coi_id}")
def delete_coi(coi_id: int, store: COIStore = Depends(get_store)):
    logger.info("DELETE /cois/%s", coi_id)
    return {"deleted": store.delete(coi_id)}


@router.post("/cois/bulk-delete")
def bulk_delete(body: IdList, store: COIStore = Depends(get_store)):
    logger.info("POST /cois/bulk-delete count=%d", len(body.ids))
    return {"deleted": store.delete_many(body.ids)}


# ---------------------------------------------------------------------------
# Filters, sort, search
# ---------------------------------------------------------------------------


@router.get("/filters", response_model=FilterOptions)
def get_filters(store: COIStore = Depends(get_store)):
    return store.filters


@router.patch("/filters", response_model=FilterOptions)
def patch_filters(body: FilterUpdate, store: COIStore = Depends(get_store)):
    return store.set_filters(body)


@router.post("/filters/reset", response_model=FilterOptions)
def reset_filters(store: COIStore = Depends(get_store)):
    store.reset_filters()
    return store.filters


@router.get("/filters/date-range", response_model=DateRangeFilter)
def get_date_range(store: COIStore = Depends(get_store)):
    return store.date_range_filter


@router.put("/filters/date-range", response_model=DateRangeFilter)
def put_date_range(body: DateRangeFilter, store: COIStore = Depends(get_store)):
    return store.set_date_range_filter(body)


@router.get("/sort", response_model=SortConfig)
def get_sort(store: COIStore = Depends(get_store)):
    return store.sort_config


@router.put("/sort", response_model=SortConfig)
def put_sort(body: SortConfig, store: COIStore = Depends(get_store)):
    return store.set_sort_config(body)


@router.post("/search")
def search(
    body: SearchInput,
    store: COIStore = Depends(get_store),
    debounced: DebouncedSearch = Depends(get_search),
):
    debounced.type(body.text)
    if body.immediate:
        debounced.flush()
    return {"pending": debounced.pending, "searchQuery": store.filters.search_query}


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


@router.get("/selection")
def get_selection(store: COIStore = Depends(get_store)):
    return {"selectedRows": store.selected_rows}


@router.post("/selection/toggle/{coi_id}")
def toggle_selection(coi_id: int, store: COIStore = Depends(get_store)):
    selected = store.toggle_row_selection(coi_id)
    return {"id": coi_id, "selected": selected, "selectedRows": store.selected_rows}


@router.put("/selection")
def replace_selection(body: IdList, store: COIStore = Depends(get_store)):
    store.select_all_rows(body.ids)
    return {"selectedRows": store.selected_rows}


@router.delete("/selection")
def clear_selection(store: COIStore = Depends(get_store)):
    store.clear_selection()
    return {"selectedRows": store.selected_rows}


# ---------------------------------------------------------------------------
# Pagination and preferences
# ---------------------------------------------------------------------------


@router.put("/pagination/rows-per-page")
def put_rows_per_page(body: RowsPerPageInput, store: COIStore = Depends(get_store)):
    store.set_rows_per_page(body.rows_per_page)
    return {"rowsPerPage": store.rows_per_page, "currentPage": store.current_page}


@router.put("/pagination/page")
def put_page(body: PageInput, store: COIStore = Depends(get_store)):
    store.set_current_page(body.page)
    return {"rowsPerPage": store.rows_per_page, "currentPage": store.current_page}


@router.get("/preferences/dark-mode")
def get_dark_mode(store: COIStore = Depends(get_store)):
    return {"isDarkMode": store.is_dark_mode}


@router.put("/preferences/dark-mode")
def put_dark_mode(body: DarkModeInput, store: COIStore = Depends(get_store)):
    store.set_dark_mode(body.is_dark_mode)
    return {"isDarkMode": store.is_dark_mode}


@router.post("/reload")
def reload_snapshot(store: COIStore = Depends(get_store)):
    reloaded = store.reload()
    logger.info("POST /reload reloaded=%s", reloaded)
    return {"reloaded": reloaded, "records": len(store.cois)}


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


@router.get("/stats", response_model=COIStats)
def stats(store: COIStore = Depends(get_store)):
    return get_total_stats(store.cois, store.today())


@router.get("/properties", response_model=List[str])
def properties(store: COIStore = Depends(get_store)):
    return get_unique_properties(store.cois)


@router.get("/export")
def export_csv(
    scope: Literal["filtered", "all"] = Query("filtered"),
    store: COIStore = Depends(get_store),
):
    rows = store.filtered_cois if scope == "filtered" else store.cois
    logger.info("GET /export scope=%s rows=%d", scope, len(rows))
    return Response(
        content=export_to_csv(rows),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename(store.today())}"'
        },
    )
