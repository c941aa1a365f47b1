from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.domain.errors import AccountDeletionError
from src.infrastructure.api.middlewares import add_default_middlewares
from src.infrastructure.api.routes.account_routes import router as account_router
from src.infrastructure.config import Settings, get_settings
from src.infrastructure.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="GrocerMate Functions",
        version="0.1.0",
        description="""
        ## GrocerMate Functions

        Account maintenance endpoints backed by Supabase Auth and the `profiles` table.
        Push delivery runs separately as the `notification-worker` process.

        ### Authentication
        Endpoints that act on an account require the caller's Supabase access token:
        ```
        Authorization: Bearer your-jwt-token
        ```

        ### Error Responses
        Failures are returned as `{"error": "<message>"}` with status **500**.
        """,
    )
    app.state.settings = settings
    add_default_middlewares(app, settings)

    @app.exception_handler(AccountDeletionError)
    async def account_error_handler(request: Request, exc: AccountDeletionError):
        logger.error("Error deleting user: %s", exc)
        return JSONResponse(
            status_code=500,
            content={"error": str(exc) or "An unknown error occurred."},
            headers={"Access-Control-Allow-Origin": "*"},
        )

    @app.get(
        "/",
        summary="API Root",
        description="Get basic information about the service",
        response_description="Service information including status and version",
    )
    def root():
        """Get API root information."""
        return {"status": "ok", "service": "grocermate-functions", "version": app.version}

    @app.get(
        "/health",
        summary="Health Check",
        description="Check if the API service is running and healthy",
        response_description="Health status of the API service",
    )
    def health():
        """Check API health status."""
        return {"status": "healthy"}

    app.include_router(account_router)
    return app


app = create_app()
