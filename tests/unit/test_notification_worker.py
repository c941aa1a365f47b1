import asyncio

import pytest

from fakes import FakeRealtimeClient
from src import notification_worker
from src.infrastructure.config import Settings


def test_run_subscribes_and_stops_cleanly(monkeypatch):
    realtime = FakeRealtimeClient()

    async def fake_acreate_client(url, key):
        assert (url, key) == ("https://demo.supabase.co", "service-key")
        return realtime

    monkeypatch.setattr(notification_worker, "acreate_client", fake_acreate_client)
    monkeypatch.setattr(notification_worker, "create_worker_client", lambda settings: None)

    settings = Settings(
        supabase_url="https://demo.supabase.co",
        supabase_service_role_key="service-key",
        notifications_table="notifications",
    )

    async def scenario():
        stop = asyncio.Event()
        stop.set()
        await notification_worker.run(settings, stop)

    asyncio.run(scenario())

    channel = realtime.channels[0]
    assert channel.name == "new_notification_channel"
    assert channel.bindings == [("*", "public", "notifications")]
    assert realtime.removed == [channel]


def test_run_requires_supabase():
    with pytest.raises(RuntimeError):
        asyncio.run(notification_worker.run(Settings(supabase_disabled=True)))
