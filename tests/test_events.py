"""Tests for the host event hub and log bridge."""

import logging
from unittest.mock import MagicMock

from chatextract.events import (
    MODEL_RESPONSE_PREFIX,
    MessageProcessing,
    ModelResponse,
    ResponseHub,
    ResponseLogBridge,
)


class TestResponseHub:
    """Test subscribe/publish/unsubscribe."""

    def test_publish_reaches_subscribers_in_order(self):
        hub = ResponseHub()
        calls = []
        hub.subscribe(lambda e: calls.append(("a", e)))
        hub.subscribe(lambda e: calls.append(("b", e)))
        event = MessageProcessing(group_id="-1", request_id="r")
        hub.publish(event)
        assert calls == [("a", event), ("b", event)]

    def test_double_subscribe_is_noop(self):
        hub = ResponseHub()
        listener = MagicMock()
        hub.subscribe(listener)
        hub.subscribe(listener)
        assert hub.listener_count == 1

    def test_unsubscribe(self):
        hub = ResponseHub()
        listener = MagicMock()
        hub.subscribe(listener)
        assert hub.unsubscribe(listener) is True
        assert hub.unsubscribe(listener) is False
        hub.publish(ModelResponse(text="x"))
        listener.assert_not_called()

    def test_failing_listener_does_not_block_others(self, caplog):
        hub = ResponseHub()
        bad = MagicMock(side_effect=RuntimeError("boom"))
        good = MagicMock()
        hub.subscribe(bad)
        hub.subscribe(good)
        with caplog.at_level(logging.ERROR, logger="chatextract.events"):
            hub.publish(ModelResponse(text="x"))
        good.assert_called_once()
        assert any("boom" in r.getMessage() for r in caplog.records)


class TestResponseLogBridge:
    """Test turning host log records into ModelResponse events."""

    def _host_logger(self, name):
        host = logging.getLogger(name)
        host.setLevel(logging.DEBUG)
        host.propagate = False
        return host

    def test_model_response_record_published(self):
        hub = ResponseHub()
        listener = MagicMock()
        hub.subscribe(listener)
        host = self._host_logger("test.host.published")
        bridge = ResponseLogBridge(hub)
        bridge.attach(host)
        try:
            host.debug(MODEL_RESPONSE_PREFIX + "<think>x</think>", extra={"group_id": "-1", "request_id": "r"})
        finally:
            bridge.detach()
        listener.assert_called_once_with(ModelResponse(text="<think>x</think>", group_id="-1", request_id="r"))

    def test_other_records_ignored(self):
        hub = ResponseHub()
        listener = MagicMock()
        hub.subscribe(listener)
        host = self._host_logger("test.host.ignored")
        bridge = ResponseLogBridge(hub)
        bridge.attach(host)
        try:
            host.debug("request sent")
            host.info("model said: hi")
        finally:
            bridge.detach()
        listener.assert_not_called()

    def test_formatted_args(self):
        hub = ResponseHub()
        listener = MagicMock()
        hub.subscribe(listener)
        host = self._host_logger("test.host.args")
        bridge = ResponseLogBridge(hub)
        bridge.attach(host)
        try:
            host.debug("model response: %s", "<memory>m</memory>")
        finally:
            bridge.detach()
        assert listener.call_args.args[0].text == "<memory>m</memory>"

    def test_detach_removes_handler(self):
        hub = ResponseHub()
        host = self._host_logger("test.host.detach")
        bridge = ResponseLogBridge(hub)
        bridge.attach(host)
        assert bridge in host.handlers
        bridge.detach()
        assert bridge not in host.handlers
        bridge.detach()

    def test_warns_when_debug_disabled(self, caplog):
        host = logging.getLogger("test.host.quiet")
        host.setLevel(logging.INFO)
        bridge = ResponseLogBridge(ResponseHub())
        with caplog.at_level(logging.WARNING, logger="chatextract.events"):
            bridge.attach(host)
        bridge.detach()
        assert any("drops DEBUG" in r.getMessage() for r in caplog.records)
