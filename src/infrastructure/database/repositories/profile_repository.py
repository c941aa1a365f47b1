from __future__ import annotations

import logging

from supabase import Client

from src.domain.entities.profile import ProfileEntity
from src.domain.errors import ProfileDeleteError, TokenLookupError

logger = logging.getLogger(__name__)

# module-level in-memory store for disabled mode
_MEM_PROFILES: dict[str, ProfileEntity] = {}


class ProfileRepository:
    def __init__(self, client: Client | None, table: str = "profiles", disabled: bool = False) -> None:
        self.client = client
        self.table = table
        self.disabled = disabled

    def save(self, profile: ProfileEntity) -> ProfileEntity:
        """Seed the in-memory store used when SUPABASE_DISABLED=1 (local runs, tests)."""
        if not self.disabled:
            raise RuntimeError("save() is only available in disabled mode")
        _MEM_PROFILES[profile.id] = profile
        return profile

    def delete(self, user_id: str) -> bool:
        """Delete the profile row for ``user_id``. Returns whether a row was removed."""
        if self.disabled:
            return _MEM_PROFILES.pop(user_id, None) is not None
        if self.client is None:
            raise ProfileDeleteError("Supabase client is not configured")

        try:
            res = self.client.table(self.table).delete().eq("id", user_id).execute()
        except Exception as exc:
            raise ProfileDeleteError(f"DB delete profile failed: {exc}") from exc
        return bool(res.data)

    def get_fcm_token(self, user_id: str) -> str:
        if self.disabled:
            profile = _MEM_PROFILES.get(user_id)
            token = profile.fcm_token if profile else None
        elif self.client is None:
            raise TokenLookupError("Supabase client is not configured")
        else:
            try:
                # maybe_single() returns None instead of raising when no row matches
                res = (
                    self.client.table(self.table)
                    .select("fcm_token")
                    .eq("id", user_id)
                    .maybe_single()
                    .execute()
                )
            except Exception as exc:
                raise TokenLookupError(f"DB select profile failed: {exc}") from exc
            row = res.data if res is not None else None
            token = row.get("fcm_token") if row else None

        if not token:
            raise TokenLookupError(f"Profile or FCM token not found for recipient {user_id}")
        return token
