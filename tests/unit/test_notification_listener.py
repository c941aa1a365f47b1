import asyncio

import pytest

from fakes import FakeRealtimeClient
from src.infrastructure.realtime.notification_listener import (
    NotificationListener,
    SubscriptionState,
    extract_new_row,
)


def insert_payload(record):
    return {"data": {"type": "INSERT", "schema": "public", "table": "notifications", "record": record}}


def test_subscribes_and_forwards_rows_in_order():
    client = FakeRealtimeClient()
    handled = []

    async def handler(row):
        handled.append(row)

    async def scenario():
        listener = NotificationListener(client, handler)
        assert listener.state is SubscriptionState.INIT
        await listener.start()
        assert listener.state is SubscriptionState.SUBSCRIBED

        channel = client.channels[0]
        assert channel.name == "new_notification_channel"
        assert channel.bindings == [("*", "public", "notifications")]

        channel.change_callback(insert_payload({"id": 1, "recipient_id": "U1"}))
        channel.change_callback(insert_payload({"id": 2, "recipient_id": "U2"}))
        await listener.join()
        await listener.stop()
        return listener

    listener = asyncio.run(scenario())
    assert [r["id"] for r in handled] == [1, 2]
    assert listener.state is SubscriptionState.CLOSED
    assert len(client.removed) == 1


def test_handler_failure_does_not_stop_the_loop():
    client = FakeRealtimeClient()
    handled = []

    async def handler(row):
        if row["id"] == 1:
            raise RuntimeError("boom")
        handled.append(row["id"])

    async def scenario():
        listener = NotificationListener(client, handler)
        await listener.start()
        cb = client.channels[0].change_callback
        cb(insert_payload({"id": 1, "recipient_id": "U1"}))
        cb(insert_payload({"id": 2, "recipient_id": "U1"}))
        await listener.join()
        await listener.stop()

    asyncio.run(scenario())
    assert handled == [2]


def test_channel_error_sets_error_state():
    client = FakeRealtimeClient(status="CHANNEL_ERROR", error=RuntimeError("denied"))

    async def handler(row):
        pass

    async def scenario():
        listener = NotificationListener(client, handler)
        await listener.start()
        state, err = listener.state, listener.last_error
        await listener.stop()
        return state, err

    state, err = asyncio.run(scenario())
    assert state is SubscriptionState.ERROR
    assert str(err) == "denied"


def test_start_twice_is_rejected():
    async def handler(row):
        pass

    async def scenario():
        listener = NotificationListener(FakeRealtimeClient(), handler)
        await listener.start()
        try:
            with pytest.raises(RuntimeError):
                await listener.start()
        finally:
            await listener.stop()

    asyncio.run(scenario())


@pytest.mark.parametrize(
    "payload,expected",
    [
        (insert_payload({"id": 1}), {"id": 1}),
        ({"data": {"type": "DELETE", "record": {}, "old_record": {"id": 1}}}, None),
        ({"new": {"id": 2}}, {"id": 2}),
        ({"record": {"id": 3}}, {"id": 3}),
        ({"ids": [1]}, None),
        ("not-a-dict", None),
    ],
)
def test_extract_new_row(payload, expected):
    assert extract_new_row(payload) == expected
