"""DTOs for the account endpoints."""
from __future__ import annotations

from pydantic import BaseModel, Field


class DeleteAccountResponse(BaseModel):
    """Confirmation returned after the account was removed."""
    message: str = Field(
        ...,
        description="Confirmation message including the deleted user id",
        examples=["User 3f1c2a9e-... and profile deleted."],
    )


class ErrorResponse(BaseModel):
    """Error body used by the account endpoints."""
    error: str = Field(..., description="Error message describing what went wrong")
