from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from supabase import Client

from src.application.use_cases.delete_account import DeleteAccountUseCase
from src.domain.errors import AuthResolutionError
from src.infrastructure.config import Settings
from src.infrastructure.database.repositories.profile_repository import ProfileRepository
from src.infrastructure.database.supabase_client import SupabaseAuthAdapter, create_admin_client

_bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


@lru_cache(maxsize=4)
def _admin_client_for(settings: Settings) -> Client | None:
    return create_admin_client(settings)


def get_admin_client(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> Client | None:
    return _admin_client_for(settings)


def get_auth_adapter(
    settings: Annotated[Settings, Depends(get_app_settings)],
    client: Annotated[Client | None, Depends(get_admin_client)],
) -> SupabaseAuthAdapter:
    return SupabaseAuthAdapter(client, disabled=settings.supabase_disabled)


def get_profile_repo(
    settings: Annotated[Settings, Depends(get_app_settings)],
    client: Annotated[Client | None, Depends(get_admin_client)],
) -> ProfileRepository:
    return ProfileRepository(client, disabled=settings.supabase_disabled)


def get_delete_account_use_case(
    settings: Annotated[Settings, Depends(get_app_settings)],
    auth: Annotated[SupabaseAuthAdapter, Depends(get_auth_adapter)],
    profiles: Annotated[ProfileRepository, Depends(get_profile_repo)],
) -> DeleteAccountUseCase:
    return DeleteAccountUseCase(
        auth=auth,
        profiles=profiles,
        profile_delete_required=settings.profile_delete_required,
    )


def get_bearer_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(_bearer_scheme)] = None,
) -> str:
    if not credentials or not credentials.scheme or credentials.scheme.lower() != "bearer":
        raise AuthResolutionError("Missing bearer token")
    if not credentials.credentials:
        raise AuthResolutionError("Missing bearer token")
    return credentials.credentials
