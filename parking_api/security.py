"""
Parking API — Password Hashing & JWT Helpers
=============================================

What:  Hashes/verifies passwords and issues/verifies signed bearer tokens.
Why:   Keeps every cryptographic call behind two small functions each, so the
       auth dependencies and the auth service never touch passlib or jose directly.
How:   passlib's CryptContext (argon2) for passwords; python-jose for HS256 JWTs.

Token Claims:
    sub:   user id (UUID string)
    email: user email, for display and logging
    role:  "user" or "admin" (checked by authorize_admin)
    iat:   issued-at (seconds since epoch)
    exp:   expiry (seconds since epoch); jose rejects expired tokens on decode
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from parking_api.config import settings
from parking_api.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

REQUIRED_CLAIMS = ("sub", "role", "exp")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Returns False for malformed hashes instead of raising."""
    try:
        return pwd_context.verify(plain_password, password_hash)
    except (ValueError, TypeError):
        logger.warning("Stored password hash could not be parsed")
        return False


def create_access_token(
    subject: str,
    role: str,
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Issue a signed access token.

    Args:
        subject: user id placed in the `sub` claim
        role: role claim ("user" or "admin")
        email: optional email claim
        expires_delta: lifetime; defaults to settings.jwt_expire_minutes.
            A negative delta produces an already-expired token (used in tests).
    """
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_expire_minutes)
    claims: Dict[str, Any] = {
        "sub": subject,
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
    }
    if email:
        claims["email"] = email
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry, then return the claims.

    Raises:
        AuthenticationError: expired, badly signed, malformed, or missing
            one of the required claims.
    """
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except ExpiredSignatureError:
        raise AuthenticationError(message="Token has expired")
    except JWTError as e:
        logger.info("Rejected bearer token: %s", str(e))
        raise AuthenticationError(message="Invalid authentication token")

    missing = [claim for claim in REQUIRED_CLAIMS if not claims.get(claim)]
    if missing:
        raise AuthenticationError(
            message="Invalid authentication token",
            context={"missing_claims": missing},
        )
    return claims
