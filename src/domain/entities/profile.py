from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ProfileEntity:
    id: str  # user id from Supabase auth
    fcm_token: str | None = None  # device token used to address FCM
