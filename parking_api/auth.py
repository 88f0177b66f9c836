"""
Parking API — Authentication & Authorization Dependencies
==========================================================

What:  FastAPI dependencies that move a request through
       unauthenticated → authenticated-user → authenticated-admin.
How:
    authenticate:     reads `Authorization: Bearer <token>`, verifies it, stores
                      the decoded Identity on `request.state.identity`.
                      Missing/invalid/expired token → AuthenticationError (401).
    authorize_admin:  depends on authenticate; role claim must be "admin",
                      otherwise AuthorizationError (403).

Why HTTPBearer(auto_error=False):
    With auto_error=True FastAPI answers a missing header itself, with its
    own body and (depending on version) 403. We want 401 with our error format.
"""

import logging
import uuid
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from parking_api.exceptions import AuthenticationError, AuthorizationError
from parking_api.models.user import ROLE_ADMIN
from parking_api.schemas.auth import Identity
from parking_api.security import decode_access_token

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False, description="JWT issued by POST /api/auth/login")


async def authenticate(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Identity:
    if credentials is None:
        # HTTPBearer also returns None for a non-Bearer scheme
        raise AuthenticationError(message="Missing bearer token")

    claims = decode_access_token(credentials.credentials)
    try:
        user_id = uuid.UUID(str(claims["sub"]))
    except ValueError:
        raise AuthenticationError(message="Invalid authentication token")

    identity = Identity(user_id=user_id, role=claims["role"], email=claims.get("email"))
    request.state.identity = identity
    return identity


async def authorize_admin(identity: Identity = Depends(authenticate)) -> Identity:
    if identity.role != ROLE_ADMIN:
        logger.warning("User %s (role=%s) denied admin route", identity.user_id, identity.role)
        raise AuthorizationError(
            message="Admin privileges are required",
            required_role=ROLE_ADMIN,
        )
    return identity
