from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import PlainTextResponse

from src.application.dtos.account_dto import DeleteAccountResponse, ErrorResponse
from src.application.use_cases.delete_account import DeleteAccountUseCase
from src.infrastructure.api.dependencies import get_bearer_token, get_delete_account_use_case

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey",
}

router = APIRouter(
    tags=["Account"],
    responses={
        500: {
            "model": ErrorResponse,
            "description": "Missing or invalid token, or the auth user could not be deleted",
        },
    },
)


@router.options(
    "/delete-user",
    summary="CORS Preflight",
    response_class=PlainTextResponse,
    include_in_schema=False,
)
def delete_user_preflight():
    return PlainTextResponse("ok", headers=PREFLIGHT_HEADERS)


@router.api_route(
    "/delete-user",
    methods=["POST", "DELETE", "GET", "PUT", "PATCH"],
    response_model=DeleteAccountResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete Current User",
    description="""
    Permanently delete the account of the caller identified by the bearer token.

    **This operation will:**
    - Delete the caller's row in `profiles` (a missing row is not an error)
    - Delete the caller's Supabase Auth user
    - Cannot be undone

    **Authentication required**: Yes (Bearer token)
    """,
    response_description="Confirmation of successful deletion",
)
def delete_user(
    response: Response,
    token: str = Depends(get_bearer_token),
    use_case: DeleteAccountUseCase = Depends(get_delete_account_use_case),
):
    """Delete the caller's profile and auth user."""
    user = use_case.execute(token)
    response.headers["Access-Control-Allow-Origin"] = "*"
    return DeleteAccountResponse(message=f"User {user.id} and profile deleted.")
