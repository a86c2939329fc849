"""Host notifications — the observer interface between the chat host and the extractor.

The host publishes two kinds of events on a ResponseHub:

  MessageProcessing  — an inbound message for a group is being handled
  ModelResponse      — the model produced reply text

A ModelResponse is tied to its group either directly (group_id) or
through the request_id carried by the MessageProcessing that started it.

Hosts that only expose a logger can attach a ResponseLogBridge to it;
the bridge turns "model response: ..." records into ModelResponse events.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

logger = logging.getLogger("chatextract.events")

# Prefix the host uses when logging raw model output
MODEL_RESPONSE_PREFIX = "model response: "


@dataclass(frozen=True)
class MessageProcessing:
    group_id: Optional[str]
    request_id: Optional[str] = None


@dataclass(frozen=True)
class ModelResponse:
    text: str
    group_id: Optional[str] = None
    request_id: Optional[str] = None


Event = Union[MessageProcessing, ModelResponse]
Listener = Callable[[Event], None]


class ResponseHub:
    """Synchronous publish/subscribe hub for host events."""

    def __init__(self):
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener):
        """Register a listener. Subscribing twice is a no-op."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> bool:
        """Remove a listener. Returns False if it was not subscribed."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            return False
        return True

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def publish(self, event: Event):
        """Deliver an event to every listener in subscription order.

        A failing listener is logged and skipped; the others still run.
        """
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Listener {listener!r} failed on {type(event).__name__}: {e}", exc_info=True)


class ResponseLogBridge(logging.Handler):
    """Logging handler that republishes model output found in log records.

    Correlation comes from the record's extra attributes:
        log.debug("model response: ...", extra={"group_id": gid, "request_id": rid})
    """

    def __init__(self, hub: ResponseHub, prefix: str = MODEL_RESPONSE_PREFIX):
        super().__init__(level=logging.DEBUG)
        self.hub = hub
        self.prefix = prefix
        self._attached_to: Optional[logging.Logger] = None

    def emit(self, record: logging.LogRecord):
        try:
            message = record.getMessage()
        except Exception:
            self.handleError(record)
            return
        if not message.startswith(self.prefix):
            return

        self.hub.publish(ModelResponse(
            text=message[len(self.prefix):],
            group_id=getattr(record, "group_id", None),
            request_id=getattr(record, "request_id", None),
        ))

    def attach(self, target: logging.Logger):
        """Start observing a logger."""
        if self._attached_to is not None:
            self.detach()
        if not target.isEnabledFor(logging.DEBUG):
            logger.warning(
                f"Logger '{target.name}' drops DEBUG records; "
                f"model responses logged at DEBUG will not be seen"
            )
        target.addHandler(self)
        self._attached_to = target
        logger.debug(f"Log bridge attached to '{target.name}'")

    def detach(self):
        """Stop observing."""
        target = self._attached_to
        if target is None:
            return
        target.removeHandler(self)
        self._attached_to = None
        logger.debug(f"Log bridge detached from '{target.name}'")
