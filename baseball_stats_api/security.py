"""Password hashing and bearer-token authentication.

Passwords are hashed with bcrypt via passlib. Access tokens are HS256 JWTs
carrying the user id (`sub`) and email, valid for `JWT_EXPIRY_DAYS` from
issuance.

`get_current_user` is the FastAPI dependency every authenticated route
declares. It rejects missing, malformed or expired tokens, and tokens whose
user no longer exists, with a 401.
"""

import logging
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlalchemy import text
from sqlalchemy.orm import Session

from .db import get_db
from .errors import Unauthorized
from .settings import get_settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
bearer = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_token(user_id: int, email: str, now: datetime | None = None) -> str:
    """Issue a signed access token for a user.

    Args:
        user_id: `users.id` of the authenticated user.
        email: User email, included for client convenience.
        now: Issuance time (defaults to the current UTC time; tests pass a fixed value).

    Returns:
        str: Encoded JWT.
    """
    settings = get_settings()
    issued = now or datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "iat": issued,
        "exp": issued + timedelta(days=settings.jwt_expiry_days),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    """Verify a token's signature and expiry.

    Raises:
        Unauthorized: If the token is expired or invalid.
    """
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token expired")
    except jwt.InvalidTokenError:
        raise Unauthorized("Invalid token")


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> dict:
    """Resolve the acting user from the `Authorization: Bearer` header.

    Returns:
        dict: `{id, email, name, profile_pic}` of the authenticated user.

    Raises:
        Unauthorized: Missing/invalid/expired token, or the user was deleted.
    """
    if not credentials:
        raise Unauthorized("Access token required")

    payload = decode_token(credentials.credentials)
    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise Unauthorized("Invalid token")

    row = db.execute(
        text("SELECT id, email, name, profile_pic FROM users WHERE id = :user_id"),
        {"user_id": user_id},
    ).mappings().first()

    if not row:
        logger.warning("Token presented for missing user id=%s", user_id)
        raise Unauthorized("Invalid token")

    return dict(row)
