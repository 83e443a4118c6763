# COMPONENT: COI RECORD SCHEMAS AND VALUE OBJECTS
# REQUIREMENTS SATISFIED: record model, query parameters, snapshot shape
"""
coi_tracker/schemas/coi.py

Defines the Pydantic models used throughout the COI tracker.

This module contains the canonical record schema for Certificates of
Insurance together with the value objects that drive the query engine
(filters, date range, sort configuration), the persisted snapshot shape
and the response models consumed by the HTTP layer.

Key responsibilities:
    - Define the COI record; the closed status enumerations gate create
      and update payloads, stored records keep any status text
    - Define create/update payloads (record minus identity and timestamp)
    - Define filter, date-range and sort value objects with their defaults
    - Define the persisted snapshot and statistics/page response shapes

Python attributes are snake_case. Every model serializes with camelCase
aliases so the persisted snapshot and the HTTP payloads keep the field
names of the dashboard ("tenantName", "expiryDate", "isDarkMode", ...).
Models accept either spelling on input.
"""
from __future__ import annotations

from typing import Any, Dict, FrozenSet, Generic, List, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")

COIStatus = Literal["Active", "Expired", "Rejected", "Expiring Soon", "Not Processed"]
ReminderStatus = Literal["Not Sent", "Sent (30d)", "Sent (60d)", "N/A"]
ExpiryFilter = Literal["All", "30days", "60days", "90days", "Expired"]
SortDirection = Literal["asc", "desc"]

# camelCase name -> attribute name, for every record field a view can sort on
SORTABLE_FIELDS: Dict[str, str] = {
    "id": "id",
    "property": "property",
    "tenantName": "tenant_name",
    "tenantEmail": "tenant_email",
    "unit": "unit",
    "coiName": "coi_name",
    "expiryDate": "expiry_date",
    "status": "status",
    "reminderStatus": "reminder_status",
    "createdAt": "created_at",
}


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class COIBase(CamelModel):
    property: str = Field(..., examples=["Maplewood Apartments"])
    tenant_name: str = Field(..., examples=["Jane Johnson"])
    tenant_email: str = Field(..., examples=["jane@example.com"])
    unit: str = Field(..., examples=["101"])
    coi_name: str = Field(..., examples=["Liability Certificate 2025"])
    expiry_date: str = Field(..., description="Calendar date, YYYY-MM-DD", examples=["2025-12-31"])
    # Stored records keep whatever status text they were given
    status: str
    reminder_status: str


class COICreate(COIBase):
    """Record payload minus the store-assigned id and createdAt."""

    status: COIStatus
    reminder_status: ReminderStatus


class COI(COIBase):
    model_config = ConfigDict(frozen=True)

    id: int
    created_at: str = Field(..., description="ISO 8601 timestamp, set once at creation")


class COIUpdate(CamelModel):
    property: Optional[str] = None
    tenant_name: Optional[str] = None
    tenant_email: Optional[str] = None
    unit: Optional[str] = None
    coi_name: Optional[str] = None
    expiry_date: Optional[str] = None
    status: Optional[COIStatus] = None
    reminder_status: Optional[ReminderStatus] = None


class FilterOptions(CamelModel):
    model_config = ConfigDict(frozen=True)

    properties: FrozenSet[str] = Field(default_factory=frozenset)
    status: Union[COIStatus, Literal["All"]] = "All"
    expiry_filter: ExpiryFilter = "All"
    search_query: str = ""


class FilterUpdate(CamelModel):
    properties: Optional[FrozenSet[str]] = None
    status: Optional[Union[COIStatus, Literal["All"]]] = None
    expiry_filter: Optional[ExpiryFilter] = None
    search_query: Optional[str] = None


class DateRangeFilter(CamelModel):
    model_config = ConfigDict(frozen=True)

    start_date: Optional[str] = None
    end_date: Optional[str] = None


class SortConfig(CamelModel):
    model_config = ConfigDict(frozen=True)

    key: Optional[str] = None
    direction: SortDirection = "asc"

    @field_validator("key", mode="before")
    @classmethod
    def _normalize_key(cls, v: Any) -> Any:
        if v is None:
            return None
        if v in SORTABLE_FIELDS:
            return SORTABLE_FIELDS[v]
        if v in SORTABLE_FIELDS.values():
            return v
        raise ValueError(f"Unknown sort key: {v!r}")


class StoreSnapshot(CamelModel):
    """Persisted shape: {"cois": [...], "isDarkMode": bool}."""

    cois: List[COI]
    is_dark_mode: StrictBool = False


class COIStats(CamelModel):
    total: int
    accepted: int
    rejected: int
    expiring_in_30_days: int = Field(..., alias="expiringIn30Days")


class Page(CamelModel, Generic[T]):
    items: List[T]
    total_items: int
    total_pages: int
    current_page: int
    rows_per_page: int
    start_item: int
    end_item: int


# Required in some Pydantic v2 setups when using __future__.annotations + generics.
COI.model_rebuild()
COICreate.model_rebuild()
COIUpdate.model_rebuild()
FilterOptions.model_rebuild()
FilterUpdate.model_rebuild()
DateRangeFilter.model_rebuild()
SortConfig.model_rebuild()
StoreSnapshot.model_rebuild()
COIStats.model_rebuild()
Page.model_rebuild()
