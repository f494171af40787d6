"""
Unit tests for LifecycleSignal ordering and failure propagation.
"""

import pytest

from switchboard.core.exceptions import LifecycleSignalError
from switchboard.core.signals import LifecycleSignal


@pytest.mark.asyncio
class TestLifecycleSignal:
    async def test_listeners_awaited_in_order(self):
        signal = LifecycleSignal("ready")
        calls = []

        async def first(event):
            calls.append(("first", event))

        def second(event):
            calls.append(("second", event))

        signal.connect(first)
        signal.connect(second)

        await signal.publish("payload")

        assert calls == [("first", "payload"), ("second", "payload")]

    async def test_duplicate_connect_is_ignored(self):
        signal = LifecycleSignal("ready")
        calls = []

        def listener(event):
            calls.append(event)

        signal.connect(listener)
        signal.connect(listener)
        await signal.publish("once")

        assert len(signal) == 1
        assert calls == ["once"]

    async def test_connect_returns_callback(self):
        signal = LifecycleSignal("ready")

        @signal.connect
        async def listener(event):
            return None

        assert callable(listener)
        assert len(signal) == 1

    async def test_failure_stops_publish_and_chains_cause(self):
        signal = LifecycleSignal("pre_initialize")
        later = []

        def broken(event):
            raise KeyError("missing")

        signal.connect(broken)
        signal.connect(later.append)

        with pytest.raises(LifecycleSignalError) as exc_info:
            await signal.publish(object())

        assert later == []
        assert isinstance(exc_info.value.__cause__, KeyError)
        assert "pre_initialize" in str(exc_info.value)

    async def test_disconnect(self):
        signal = LifecycleSignal("ready")
        calls = []

        def listener(event):
            calls.append(event)

        signal.connect(listener)

        assert signal.disconnect(listener) is True
        assert signal.disconnect(listener) is False

        await signal.publish(1)
        assert calls == []
