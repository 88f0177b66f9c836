"""
Parking API — Auth Service
===========================

What:  Registers users, checks credentials, issues access tokens, and
       bootstraps the configured admin account at startup.
Who:   Called by routes/auth.py and by the lifespan handler in main.py.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from parking_api.config import settings
from parking_api.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ParkingAPIError,
    PersistenceError,
)
from parking_api.models.user import ROLE_ADMIN, ROLE_USER, User
from parking_api.schemas.auth import RegisterRequest, TokenResponse, UserResponse
from parking_api.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    """
    Error Handling Strategy:
        Application errors (ConflictError, AuthenticationError, NotFoundError)
        propagate unchanged. SQLAlchemy errors are logged and wrapped in
        PersistenceError so the client only ever sees a generic 500.
    """

    async def _find_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def register(
        self,
        db: AsyncSession,
        data: RegisterRequest,
        role: str = ROLE_USER,
    ) -> UserResponse:
        """
        Create a user account. Self-registration always yields role "user".

        Raises:
            ConflictError: the email is already registered (→ 409)
            PersistenceError: database failure (→ 500)
        """
        try:
            if await self._find_by_email(db, data.email) is not None:
                raise ConflictError(
                    message="An account with this email already exists",
                    context={"email": data.email},
                )
            user = User(
                email=data.email,
                full_name=data.full_name,
                password_hash=hash_password(data.password),
                role=role,
            )
            db.add(user)
            await db.flush()
            logger.info("Registered user %s (role=%s)", user.id, user.role)
            return UserResponse.model_validate(user)

        except ParkingAPIError:
            raise
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            raise ConflictError(message="An account with this email already exists")
        except SQLAlchemyError as e:
            logger.error("Database error registering user: %s", str(e), exc_info=True)
            raise PersistenceError(context={"operation": "register", "error_type": type(e).__name__})

    async def login(self, db: AsyncSession, email: str, password: str) -> TokenResponse:
        """
        Verify credentials and issue a bearer token.

        The same message is used for an unknown email and a wrong password so
        the endpoint cannot be used to discover which emails are registered.

        Raises:
            AuthenticationError: bad credentials (→ 401)
        """
        try:
            user = await self._find_by_email(db, email)
        except SQLAlchemyError as e:
            logger.error("Database error during login: %s", str(e), exc_info=True)
            raise PersistenceError(context={"operation": "login", "error_type": type(e).__name__})

        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt for %s", email)
            raise AuthenticationError(message=INVALID_CREDENTIALS)

        token = create_access_token(subject=str(user.id), role=user.role, email=user.email)
        logger.info("User %s logged in", user.id)
        return TokenResponse(
            access_token=token,
            expires_in=settings.jwt_expire_minutes * 60,
        )

    async def get_user(self, db: AsyncSession, user_id: UUID) -> UserResponse:
        try:
            result = await db.execute(select(User).where(User.id == user_id))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise PersistenceError(context={"user_id": str(user_id)})
        if user is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))
        return UserResponse.model_validate(user)

    async def ensure_admin(self, db: AsyncSession, email: str, password: str) -> bool:
        """
        Create the bootstrap admin if no user with `email` exists.

        Returns:
            True if an account was created, False if it already existed.
            An existing account is left untouched, including its role.
        """
        if await self._find_by_email(db, email) is not None:
            return False
        db.add(
            User(
                email=email.lower(),
                full_name="Administrator",
                password_hash=hash_password(password),
                role=ROLE_ADMIN,
            )
        )
        await db.flush()
        logger.info("Created bootstrap admin account %s", email)
        return True


auth_service = AuthService()
