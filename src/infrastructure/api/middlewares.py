from __future__ import annotations

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send

from src.infrastructure.config import Settings

# headers the Supabase JS client sends with function invocations
CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]

# routes that answer their own OPTIONS and set their own CORS headers
SELF_CORS_PATHS = ("/delete-user",)


class RouteAwareCORSMiddleware(CORSMiddleware):
    """CORSMiddleware that leaves some paths to their route handlers.

    Starlette answers every preflight itself ("OK", merged allow-headers,
    400 for unlisted origins); the paths in ``skip_paths`` keep the
    permissive ``ok`` preflight their clients expect.
    """

    def __init__(self, app: ASGIApp, skip_paths: tuple[str, ...] = (), **kwargs) -> None:
        super().__init__(app, **kwargs)
        self.skip_paths = frozenset(skip_paths)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["path"].rstrip("/") in self.skip_paths:
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)


def add_default_middlewares(app: FastAPI, settings: Settings) -> None:
    # Browsers call these endpoints straight from the mobile/web clients,
    # so the default is any origin. Credentials are bearer tokens, not cookies.
    app.add_middleware(
        RouteAwareCORSMiddleware,
        skip_paths=SELF_CORS_PATHS,
        allow_origins=list(settings.cors_allow_origins),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=CORS_ALLOW_HEADERS,
    )
