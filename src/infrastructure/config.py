from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True, slots=True)
class Settings:
    """Process configuration, read from the environment once and passed around."""

    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    supabase_service_role_key: str | None = None
    supabase_disabled: bool = False
    firebase_service_account_key: str | None = None
    fcm_reuse_access_token: bool = True
    fcm_timeout_seconds: float = 10.0
    notifications_channel: str = "new_notification_channel"
    notifications_schema: str = "public"
    notifications_table: str = "notifications"
    notifications_event: str = "*"
    profile_delete_required: bool = False
    cors_allow_origins: tuple[str, ...] = ("*",)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.getenv("CORS_ALLOW_ORIGINS", "*")
        return cls(
            supabase_url=os.getenv("SUPABASE_URL"),
            supabase_anon_key=os.getenv("SUPABASE_ANON_KEY"),
            supabase_service_role_key=os.getenv("SUPABASE_SERVICE_ROLE_KEY"),
            supabase_disabled=_flag("SUPABASE_DISABLED"),
            firebase_service_account_key=os.getenv("FIREBASE_SERVICE_ACCOUNT_KEY") or None,
            fcm_reuse_access_token=_flag("FCM_REUSE_ACCESS_TOKEN", "1"),
            fcm_timeout_seconds=float(os.getenv("FCM_TIMEOUT_SECONDS", "10")),
            notifications_channel=os.getenv("NOTIFICATIONS_CHANNEL", "new_notification_channel"),
            notifications_schema=os.getenv("NOTIFICATIONS_SCHEMA", "public"),
            notifications_table=os.getenv("NOTIFICATIONS_TABLE", "notifications"),
            notifications_event=os.getenv("NOTIFICATIONS_EVENT", "*"),
            profile_delete_required=_flag("PROFILE_DELETE_REQUIRED"),
            cors_allow_origins=tuple(o.strip() for o in origins.split(",") if o.strip()) or ("*",),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    @property
    def worker_key(self) -> str | None:
        # service role when available; the listener historically ran on the anon key.
        # Account deletion never falls back: see create_admin_client.
        return self.supabase_service_role_key or self.supabase_anon_key


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
