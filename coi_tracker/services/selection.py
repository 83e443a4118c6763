# COMPONENT: SELECTION TRACKER
# REQUIREMENTS SATISFIED: checked-row bookkeeping independent of filtering
"""
coi_tracker/services/selection.py

Tracks the set of checked record ids.

Membership is hash-based; ids are reported in the order they were
selected. The selection is independent of the derived view: an id stays
selected when its record is filtered out and only leaves the set when
toggled, replaced, cleared or discarded (the store discards on delete).
"""
from __future__ import annotations

from typing import Dict, Iterable, List


class SelectionTracker:
    def __init__(self) -> None:
        # dict keys keep insertion order with O(1) membership
        self._ids: Dict[int, None] = {}

    def toggle(self, id_: int) -> bool:
        """Select `id_` if absent, deselect it if present. Returns the new membership."""
        if id_ in self._ids:
            del self._ids[id_]
            return False
        self._ids[id_] = None
        return True

    def select_all(self, ids: Iterable[int]) -> None:
        """Replace the whole selection with exactly `ids`."""
        self._ids = dict.fromkeys(ids)

    def clear(self) -> None:
        self._ids = {}

    def discard(self, id_: int) -> None:
        self._ids.pop(id_, None)

    def contains(self, id_: int) -> bool:
        return id_ in self._ids

    def ids(self) -> List[int]:
        return list(self._ids)

    def __contains__(self, id_: object) -> bool:
        return id_ in self._ids

    def __len__(self) -> int:
        return len(self._ids)
