from __future__ import annotations

import logging
from dataclasses import dataclass

from src.domain.errors import ProfileDeleteError
from src.infrastructure.database.repositories.profile_repository import ProfileRepository
from src.infrastructure.database.supabase_client import SupabaseAuthAdapter, UserInfo

logger = logging.getLogger(__name__)


@dataclass
class DeleteAccountUseCase:
    """
    Delete the caller's account: profile row first, then the auth user.

    The two deletions hit different stores and are not transactional. If the
    auth deletion fails after the profile is gone, the profile stays deleted.
    """

    auth: SupabaseAuthAdapter
    profiles: ProfileRepository
    profile_delete_required: bool = False

    def execute(self, access_token: str) -> UserInfo:
        """
        Args:
            access_token: The caller's Supabase JWT (without the Bearer prefix)

        Returns:
            The identity that was deleted

        Raises:
            AuthResolutionError: If the token does not resolve to a user
            IdentityDeleteError: If the auth user could not be deleted
            ProfileDeleteError: Only when ``profile_delete_required`` is set
        """
        user = self.auth.validate_token(access_token)

        try:
            removed = self.profiles.delete(user.id)
        except ProfileDeleteError as exc:
            if self.profile_delete_required:
                raise
            logger.warning("Could not delete profile for user %s: %s", user.id, exc)
        else:
            if not removed:
                logger.info("No profile row found for user %s", user.id)

        self.auth.delete_user(user.id)
        logger.info("Deleted user %s", user.id)
        return user
