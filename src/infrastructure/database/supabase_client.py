from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass

from supabase import Client, create_client

from src.domain.errors import AuthResolutionError, IdentityDeleteError
from src.infrastructure.config import Settings

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class UserInfo:
    id: str
    email: str | None


class SupabaseAuthAdapter:
    """Wrapper over the Supabase Auth admin API.

    Needs a client created with the service role key. When ``disabled`` is set
    (SUPABASE_DISABLED=1) tokens resolve to a fake user and deletions are only
    logged. Without a client and without ``disabled`` every call fails.
    """

    def __init__(self, client: Client | None, disabled: bool = False) -> None:
        self.disabled = disabled
        self._client = client

    def validate_token(self, token: str) -> UserInfo:
        if not token:
            raise AuthResolutionError("Missing access token")
        if self.disabled:
            # deterministic across processes, unlike hash()
            digest = hashlib.sha256(token.encode("utf-8")).hexdigest()[:10]
            return UserInfo(id=f"fake-{digest}", email=None)
        if self._client is None:
            raise AuthResolutionError("Supabase admin client is not configured")
        try:
            res = self._client.auth.get_user(token)
        except Exception as exc:
            raise AuthResolutionError(f"Invalid access token: {exc}") from exc
        user = res.user if res is not None else None
        if not user:
            raise AuthResolutionError("User not found.")
        return UserInfo(id=user.id, email=user.email)

    def delete_user(self, user_id: str) -> None:
        if self.disabled:
            logger.info("Supabase disabled, skipping auth deletion for user %s", user_id)
            return
        if self._client is None:
            raise IdentityDeleteError("Supabase admin client is not configured")
        try:
            self._client.auth.admin.delete_user(user_id)
        except Exception as exc:
            raise IdentityDeleteError(f"Failed to delete user {user_id}: {exc}") from exc


def create_admin_client(settings: Settings) -> Client | None:
    """Service-role client for the auth admin API.

    Returns None when Supabase is disabled or the URL / service role key is
    missing; the anon key is never used here since it cannot delete users.
    """
    if settings.supabase_disabled:
        return None
    if not settings.supabase_url or not settings.supabase_service_role_key:
        logger.error("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required for account deletion")
        return None
    return create_client(settings.supabase_url, settings.supabase_service_role_key)


def create_worker_client(settings: Settings) -> Client | None:
    """Client for the notification worker's profile lookups.

    Prefers the service role key and falls back to the anon key, which only
    works when RLS lets it read ``fcm_token``.
    """
    if settings.supabase_disabled or not settings.supabase_url or not settings.worker_key:
        return None
    return create_client(settings.supabase_url, settings.worker_key)
