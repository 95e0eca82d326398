"""Tests for the storefront event stream."""

import asyncio

from fhr_mart.streaming import EVENT_SESSION_CLOSED, EVENT_TOAST_SHOWN, StorefrontEventStream


class TestEventStream:
    async def test_subscriber_receives_events(self):
        stream = StorefrontEventStream()
        received = []

        async def consume():
            async for event in stream.subscribe("s1"):
                received.append(event.event_type)

        task = asyncio.create_task(consume())
        await asyncio.sleep(0)
        assert stream.subscriber_count("s1") == 1

        stream.publish("s1", EVENT_TOAST_SHOWN, message="hi")
        stream.publish("s2", EVENT_TOAST_SHOWN, message="other session")
        stream.publish("s1", EVENT_SESSION_CLOSED)
        await asyncio.wait_for(task, timeout=1)

        assert received == [EVENT_TOAST_SHOWN, EVENT_SESSION_CLOSED]
        assert stream.subscriber_count("s1") == 0

    async def test_replay_history(self):
        stream = StorefrontEventStream()
        stream.publish("s1", EVENT_TOAST_SHOWN, message="before")
        received = []

        async def consume():
            async for event in stream.subscribe("s1", replay=True):
                received.append(event.message)

        task = asyncio.create_task(consume())
        await asyncio.sleep(0)
        stream.close("s1")
        await asyncio.wait_for(task, timeout=1)
        assert received == ["before"]

    def test_history_is_bounded(self):
        stream = StorefrontEventStream(max_history=3)
        for i in range(5):
            stream.publish("s1", EVENT_TOAST_SHOWN, message=str(i))
        assert [e.message for e in stream.get_history("s1")] == ["2", "3", "4"]
        stream.clear("s1")
        assert stream.get_history("s1") == []
