from __future__ import annotations

from typing import Any

from src.domain.entities.notification import NotificationEntity

DEFAULT_TITLE = "New Notification"
DEFAULT_BODY = "You have a new notification from GrocerMate."


def build_push_message(notification: NotificationEntity, token: str) -> dict[str, Any]:
    """Build an FCM HTTP v1 request body addressed to a single device token.

    FCM requires every value under ``data`` to be a string.
    """
    return {
        "message": {
            "token": token,
            "notification": {
                "title": notification.title or DEFAULT_TITLE,
                "body": notification.message or DEFAULT_BODY,
            },
            "data": {
                "notification_id": "" if notification.id is None else str(notification.id),
                "type": notification.type or "",
            },
        }
    }
