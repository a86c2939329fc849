"""Response ingestion — turn model replies into per-group tag state.

Correlation: a MessageProcessing event records request_id -> group_id;
the ModelResponse carrying the same request_id is ingested for that group.
A ModelResponse may also name its group directly. Responses with neither
are dropped. Hosts that deliver events for several groups concurrently
must tag each response with a request_id or group_id; nothing is inferred
from "the last group seen".

A newer MessageProcessing for a group supersedes that group's older
pending request, and at most MAX_PENDING_REQUESTS correlations are kept
(oldest dropped first), since many messages never get a model reply.
"""

import logging
import threading
from collections import OrderedDict
from typing import Iterable, Optional

from .state import GroupStateStore
from .tags import extract_all
from ..events import Event, MessageProcessing, ModelResponse

logger = logging.getLogger("chatextract.extraction.ingest")

# Preview length for extraction log lines
LOG_PREVIEW_CHARS = 100

# Cap on request_id -> group_id correlations awaiting a reply
MAX_PENDING_REQUESTS = 64


class ResponseIngestor:
    """Extracts configured tags from model replies into a GroupStateStore."""

    def __init__(
        self,
        store: GroupStateStore,
        tags: Iterable[str] = (),
        show_logs: bool = False,
    ):
        self.store = store
        self.tags = list(tags)
        self.show_logs = show_logs
        self._pending: OrderedDict[str, str] = OrderedDict()
        self._lock = threading.Lock()

    def _log(self, message: str):
        if self.show_logs:
            logger.info(message)
        else:
            logger.debug(message)

    def ingest(self, group_id: Optional[str], raw_text: str, tags: Optional[Iterable[str]] = None) -> bool:
        """Replace the group's state with the tags found in raw_text.

        Args:
            group_id: Conversation group; None makes this a no-op
            raw_text: Model response text
            tags: Tags to extract (defaults to the configured list)

        Returns:
            True if the group's state was replaced.
        """
        if group_id is None:
            logger.debug("Ingestion skipped: response has no group")
            return False

        contents = extract_all(raw_text or "", self.tags if tags is None else tags)
        for tag, content in contents.items():
            self._log(f"[{group_id}] extracted <{tag}>: {content[:LOG_PREVIEW_CHARS]}...")

        self.store.set(group_id, contents)
        return True

    def on_message_processing(self, event: MessageProcessing):
        """Remember which group a pending request belongs to."""
        self._log(f"[collect] processing group: {event.group_id}")
        if event.request_id is None or event.group_id is None:
            return
        with self._lock:
            superseded = [rid for rid, gid in self._pending.items() if gid == event.group_id]
            for rid in superseded:
                del self._pending[rid]
            self._pending[event.request_id] = event.group_id
            while len(self._pending) > MAX_PENDING_REQUESTS:
                self._pending.popitem(last=False)

    def on_model_response(self, event: ModelResponse) -> bool:
        """Ingest a model response for its correlated group."""
        group_id = event.group_id
        if event.request_id is not None:
            with self._lock:
                pending = self._pending.pop(event.request_id, None)
            if group_id is None:
                group_id = pending

        if group_id is None:
            logger.debug(f"Dropping uncorrelated model response (request_id={event.request_id})")
            return False

        self._log(f"[response] captured model response, group: {group_id}")
        return self.ingest(group_id, event.text)

    def handle_event(self, event: Event):
        """Hub listener entry point."""
        if isinstance(event, MessageProcessing):
            self.on_message_processing(event)
        elif isinstance(event, ModelResponse):
            self.on_model_response(event)

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def reset(self):
        """Forget pending correlations."""
        with self._lock:
            self._pending.clear()
