# COMPONENT: PERSISTENCE ADAPTER
# REQUIREMENTS SATISFIED: write-through snapshot of records and display preference
"""
coi_tracker/services/persistence.py

Serializes the raw COI collection and the dark-mode preference to a
durable key-value slot, and reads them back at startup.

The snapshot is a JSON document with exactly two top-level fields:

    {"cois": [ {...record...}, ... ], "isDarkMode": false}

Records use the camelCase field names of the dashboard. Filters, sort,
pagination and selection are session-only state and are never written.

Key responsibilities:
    - Load the stored snapshot, reporting absence or a wrong shape as None
      instead of raising. Individual records are not checked against the
      status enumerations; a record that cannot be read at all (no
      integer id, non-text fields) is skipped with a warning
    - Replace the stored snapshot wholesale on every save
    - Log, but never propagate, storage write failures so a full disk or
      an unreachable bucket cannot take the store down
"""
import json
from typing import Any, Iterable, List, Optional

from pydantic import ValidationError

from ..schemas.coi import COI, StoreSnapshot
from ..utils.logging import get_logger

logger = get_logger("persistence")

# Stored objects are taken as they are; absent text fields read as empty
MISSING_FIELD_DEFAULTS = {
    "property": "",
    "tenantName": "",
    "tenantEmail": "",
    "unit": "",
    "coiName": "",
    "expiryDate": "",
    "status": "",
    "reminderStatus": "",
    "createdAt": "",
}


def _well_formed(data: Any) -> bool:
    """`cois` must be a list of objects and `isDarkMode`, when present, a bool."""
    if not isinstance(data, dict):
        return False
    cois = data.get("cois")
    if not isinstance(cois, list) or not all(isinstance(c, dict) for c in cois):
        return False
    return isinstance(data.get("isDarkMode", False), bool)


class SnapshotPersistence:
    def __init__(self, slot):
        self.slot = slot

    def load(self) -> Optional[StoreSnapshot]:
        """Return the stored snapshot, or None if it is absent or malformed."""
        try:
            raw = self.slot.read()
        except Exception as e:
            logger.error("Failed to read snapshot from %s: %s", self.slot.describe(), e)
            return None

        if raw is None:
            logger.info("No snapshot stored at %s", self.slot.describe())
            return None

        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning("Ignoring unparseable snapshot at %s: %s", self.slot.describe(), e)
            return None

        if not _well_formed(data):
            logger.warning("Ignoring snapshot with unexpected shape at %s", self.slot.describe())
            return None

        records: List[COI] = []
        for item in data["cois"]:
            try:
                records.append(COI.model_validate({**MISSING_FIELD_DEFAULTS, **item}))
            except ValidationError as e:
                logger.warning("Skipping stored record id=%r: %s", item.get("id"), e)

        snapshot = StoreSnapshot(cois=records, is_dark_mode=data.get("isDarkMode", False))
        logger.info("Loaded %d records from %s", len(snapshot.cois), self.slot.describe())
        return snapshot

    def save(self, records: Iterable[COI], is_dark_mode: bool) -> bool:
        """Write `{cois, isDarkMode}` through to the slot. Returns False on failure."""
        snapshot = StoreSnapshot(cois=list(records), is_dark_mode=is_dark_mode)
        try:
            self.slot.write(snapshot.model_dump_json(by_alias=True))
        except Exception as e:
            logger.error("Failed to save snapshot to %s: %s", self.slot.describe(), e)
            return False

        logger.debug("Saved %d records to %s", len(snapshot.cois), self.slot.describe())
        return True

