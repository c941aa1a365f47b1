from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from src.domain.errors import InvalidPayloadError


@dataclass(frozen=True)
class NotificationEntity:
    id: int | str | None
    recipient_id: str
    title: str | None = None
    message: str | None = None
    type: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any] | None) -> "NotificationEntity":
        """Build from a `notifications` row as delivered by a change event."""
        if not row or not row.get("recipient_id"):
            raise InvalidPayloadError(f"Received invalid notification payload: {row!r}")
        return cls(
            id=row.get("id"),
            recipient_id=str(row["recipient_id"]),
            title=row.get("title"),
            message=row.get("message"),
            type=row.get("type"),
        )
