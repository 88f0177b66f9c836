"""
Parking API — Auth Schemas
===========================

What:  Request/response contracts for registration, login and the decoded
       token identity attached to each authenticated request.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from parking_api.schemas.common import UTCDateTime


def _normalize_email(v: str) -> str:
    email = v.strip().lower()
    local, _, domain = email.partition("@")
    if not local or "." not in domain or " " in email:
        raise ValueError("Email must be a valid email address")
    return email


class RegisterRequest(BaseModel):
    email: str = Field(max_length=255, description="Login email (case-insensitive)")
    password: str = Field(description="At least 8 characters")
    full_name: str = Field(min_length=1, max_length=255)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _normalize_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters long")
        return v


class LoginRequest(BaseModel):
    email: str
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return v.strip().lower()


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Token lifetime in seconds")


class UserResponse(BaseModel):
    id: uuid.UUID
    email: str
    full_name: str
    role: str
    created_at: UTCDateTime

    model_config = {"from_attributes": True}


class Identity(BaseModel):
    """
    Decoded bearer token, stored on `request.state.identity`.

    Built from claims only; no database lookup happens on authenticated
    requests, so a role change takes effect when the user's token is reissued.
    """
    user_id: uuid.UUID
    role: str
    email: Optional[str] = None
