"""
NoteFlow Backend — Sign-in Schemas
====================================

What:  Request/response models for POST /auth/signin.
"""

import uuid
from typing import Optional

from pydantic import ConfigDict

from noteflow.schemas.ai import CamelModel


class SignInRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserResponse(CamelModel):
    """Public user fields. The password hash is deliberately absent."""
    id: uuid.UUID
    name: Optional[str] = None
    email: str

    model_config = ConfigDict(from_attributes=True)


class SignInResponse(CamelModel):
    message: str = "Signed in successfully"
    user: UserResponse
