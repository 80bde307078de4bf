"""
Security utilities for authentication and authorization.
Issues and checks bearer access tokens and hashes passwords.
"""
import jwt
from datetime import timedelta
from typing import Any, Dict, Optional
from fastapi import HTTPException, status
from passlib.context import CryptContext

from app.config import settings
from app.utils.datetime_utils import utc_now

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

BEARER_SCHEME = "bearer"


class SecurityException(HTTPException):
    """401 raised for any authentication problem."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


def create_access_token(
    user_id: str,
    is_admin: bool = False,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Issue an access token for a user.

    The subject is the user's document id; `is_admin` lets the Socket.IO
    handshake place admins in their room without a store lookup.

    Example:
        ```python
        token = create_access_token(user.id, is_admin=False)
        ```
    """
    issued_at = utc_now()
    lifetime = expires_delta or timedelta(hours=settings.jwt_expiration_hours)
    claims = {
        "sub": user_id,
        "is_admin": is_admin,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Dict[str, Any]:
    """
    Verify a token's signature and expiry and return its claims.

    Raises:
        SecurityException: If the token is expired or invalid
    """
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise SecurityException("Token has expired")
    except jwt.InvalidTokenError:
        raise SecurityException("Invalid token")


def token_from_authorization(authorization: Optional[str]) -> str:
    """
    Pull the token out of a "Bearer <token>" Authorization header.

    Raises:
        SecurityException: If the header is missing or not a bearer header
    """
    if not authorization:
        raise SecurityException("Missing authorization header")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != BEARER_SCHEME or not token.strip() or " " in token.strip():
        raise SecurityException("Invalid authorization header format")
    return token.strip()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)
