"""
Parking API — Auth Route Handlers
==================================

What:  Registration, login (token issue) and "who am I".
Who:   Login is the only way to obtain the bearer token every other /api
       route requires.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from parking_api.auth import authenticate
from parking_api.database import get_db_session
from parking_api.schemas.auth import (
    Identity,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from parking_api.schemas.common import ErrorResponse, ValidationErrorResponse
from parking_api.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/register",
    status_code=201,
    response_model=UserResponse,
    responses={
        400: {"description": "Invalid input", "model": ValidationErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Create a user account",
)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await auth_service.register(db, data)


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={
        400: {"description": "Invalid input", "model": ValidationErrorResponse},
        401: {"description": "Invalid credentials", "model": ErrorResponse},
    },
    summary="Exchange email and password for a bearer token",
)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> TokenResponse:
    return await auth_service.login(db, data.email, data.password)


@router.get(
    "/me",
    response_model=UserResponse,
    responses={401: {"description": "Not authenticated", "model": ErrorResponse}},
    summary="Current user",
)
async def me(
    identity: Identity = Depends(authenticate),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await auth_service.get_user(db, identity.user_id)
