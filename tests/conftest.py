# ---------------------------------------------------------------------------
# Shared test fixtures
#
# Forces the in-memory snapshot slot before any coi_tracker module builds
# the default app, and provides a store with a fixed clock and a fixed
# "today" (2025-06-01) so expiry-bucket and statistics tests are
# deterministic.
# ---------------------------------------------------------------------------
import os

os.environ["COI_STORAGE"] = "memory"
os.environ.setdefault("LOG_LEVEL", "0")

from datetime import date

import pytest

from coi_tracker.schemas.coi import COI
from coi_tracker.services.persistence import SnapshotPersistence
from coi_tracker.services.storage import MemorySlot
from coi_tracker.services.store import COIStore

FIXED_TODAY = date(2025, 6, 1)
FIXED_NOW = "2025-06-01T12:00:00.000Z"


def make_coi(id_, **overrides):
    fields = {
        "id": id_,
        "property": "Maplewood Apartments",
        "tenant_name": f"Tenant {id_}",
        "tenant_email": f"tenant{id_}@example.com",
        "unit": str(100 + id_),
        "coi_name": f"COI {id_}",
        "expiry_date": "2025-12-31",
        "status": "Active",
        "reminder_status": "Not Sent",
        "created_at": "2025-01-01T00:00:00.000Z",
    }
    fields.update(overrides)
    return COI(**fields)


def new_payload(**overrides):
    payload = {
        "property": "Oak",
        "tenantName": "New Tenant",
        "tenantEmail": "new@example.com",
        "unit": "9",
        "coiName": "New COI",
        "expiryDate": "2025-12-31",
        "status": "Active",
        "reminderStatus": "Not Sent",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def slot():
    return MemorySlot()


@pytest.fixture
def make_store(slot):
    """Build a store over `slot`, optionally pre-seeded with records."""

    def _make(records=None, dark_mode=False, rows_per_page=10):
        if records is not None:
            SnapshotPersistence(slot).save(records, dark_mode)
        return COIStore(
            persistence=SnapshotPersistence(slot),
            rows_per_page=rows_per_page,
            clock=lambda: FIXED_NOW,
            today=lambda: FIXED_TODAY,
        )

    return _make


@pytest.fixture
def three_store(make_store):
    """Records 1 and 3 Active, record 2 Expired."""
    return make_store([
        make_coi(1, expiry_date="2025-01-01"),
        make_coi(2, status="Expired", expiry_date="2026-01-01", property="Oak Ridge Plaza"),
        make_coi(3, expiry_date="2024-01-01"),
    ])
