from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from src.domain.entities.notification import NotificationEntity
from src.domain.errors import NotificationForwardingError
from src.domain.services.push_message import build_push_message
from src.infrastructure.database.repositories.profile_repository import ProfileRepository
from src.infrastructure.push.fcm_client import FcmClient

logger = logging.getLogger(__name__)


@dataclass
class ForwardNotificationUseCase:
    """Forward one inserted notification row to its recipient's device.

    Best effort, at most once: every failure is logged and the event dropped.
    """

    profiles: ProfileRepository
    push: FcmClient

    async def execute(self, row: dict[str, Any] | None) -> bool:
        try:
            notification = NotificationEntity.from_row(row)
            token = await asyncio.to_thread(self.profiles.get_fcm_token, notification.recipient_id)
        except NotificationForwardingError as exc:
            logger.error("%s", exc)
            return False

        message = build_push_message(notification, token)
        try:
            await self.push.send(message)
        except NotificationForwardingError as exc:
            logger.error("Error sending FCM notification: %s", exc)
            return False
        except Exception:
            logger.exception("Unexpected error sending FCM notification %s", notification.id)
            return False

        logger.info("Successfully sent notification for user: %s", notification.recipient_id)
        return True
