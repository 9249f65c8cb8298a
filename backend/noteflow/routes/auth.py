"""
NoteFlow Backend — Sign-in Route
==================================

What:  POST /auth/signin — verifies email + password.
Why:   The frontend stores the returned user ID and sends it as the acting
       user when creating notes.

Error responses (handled by global exception handlers):
    HTTP 400: Email or password missing
    HTTP 401: Unknown email or wrong password (same message for both)
    HTTP 500: Database failure
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from noteflow.database import get_db_session
from noteflow.exceptions import ValidationError
from noteflow.schemas.ai import ErrorResponse
from noteflow.schemas.auth import SignInRequest, SignInResponse, UserResponse
from noteflow.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/signin",
    response_model=SignInResponse,
    responses={
        400: {"description": "Missing credentials", "model": ErrorResponse},
        401: {"description": "Invalid credentials", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Sign in with email and password",
)
async def sign_in(
    body: SignInRequest,
    db: AsyncSession = Depends(get_db_session),
) -> SignInResponse:
    if not body.email or not body.password:
        raise ValidationError(message="Email and password are required")

    user = await auth_service.sign_in(db, body.email, body.password)
    return SignInResponse(user=UserResponse.model_validate(user))
