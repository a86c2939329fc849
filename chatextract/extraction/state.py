"""Group state store — latest extracted tag contents per conversation group."""

import logging
import threading
from typing import Optional

logger = logging.getLogger("chatextract.extraction.state")


class GroupStateStore:
    """In-memory map of group_id -> {tag: content}.

    Each group holds only the result of its most recent ingestion.
    Entries are replaced wholesale, never merged. There is no eviction;
    the store lives as long as the plugin that owns it.

    set() stores a copy and get() hands out a copy, both under one lock,
    so a reader never observes a half-replaced map.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._groups: dict[str, dict[str, str]] = {}

    def get(self, group_id: Optional[str]) -> Optional[dict[str, str]]:
        """Return a copy of the group's state, or None if never ingested."""
        if group_id is None:
            return None
        with self._lock:
            state = self._groups.get(group_id)
            return dict(state) if state is not None else None

    def set(self, group_id: str, state: dict[str, str]):
        """Replace the group's state."""
        snapshot = dict(state)
        with self._lock:
            self._groups[group_id] = snapshot
        logger.debug(f"[{group_id}] state replaced ({len(snapshot)} tags)")

    def clear(self):
        """Drop every group (plugin teardown)."""
        with self._lock:
            self._groups.clear()

    def group_ids(self) -> list[str]:
        with self._lock:
            return list(self._groups)

    def __contains__(self, group_id: object) -> bool:
        with self._lock:
            return group_id in self._groups

    def __len__(self) -> int:
        with self._lock:
            return len(self._groups)
