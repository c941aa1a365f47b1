"""Long-running process that forwards new notification rows to FCM.

Run with ``notification-worker`` or ``python -m src.notification_worker``.
"""
from __future__ import annotations

import asyncio
import logging
import signal

import httpx
from supabase import acreate_client

from src.application.use_cases.forward_notification import ForwardNotificationUseCase
from src.infrastructure.config import Settings
from src.infrastructure.database.repositories.profile_repository import ProfileRepository
from src.infrastructure.database.supabase_client import create_worker_client
from src.infrastructure.logging_config import setup_logging
from src.infrastructure.push.fcm_client import FcmClient
from src.infrastructure.realtime.notification_listener import NotificationListener

logger = logging.getLogger(__name__)


async def run(settings: Settings, stop_event: asyncio.Event | None = None) -> None:
    if settings.supabase_disabled or not settings.supabase_url or not settings.worker_key:
        raise RuntimeError("SUPABASE_URL and a Supabase key are required to listen for notifications")

    stop_event = stop_event or asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    realtime_client = await acreate_client(settings.supabase_url, settings.worker_key)
    profiles = ProfileRepository(create_worker_client(settings))

    async with httpx.AsyncClient(timeout=settings.fcm_timeout_seconds) as http:
        use_case = ForwardNotificationUseCase(
            profiles=profiles,
            push=FcmClient.from_settings(settings, http),
        )
        listener = NotificationListener(
            realtime_client,
            use_case.execute,
            channel_name=settings.notifications_channel,
            schema=settings.notifications_schema,
            table=settings.notifications_table,
            event=settings.notifications_event,
        )
        logger.info("Function started, listening for new notifications...")
        try:
            await listener.start()
            await stop_event.wait()
            logger.info("Shutdown signal received")
        finally:
            await listener.stop()


def main() -> None:
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    asyncio.run(run(settings))


if __name__ == "__main__":
    main()
