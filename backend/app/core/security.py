"""
Bearer token helpers.

Tokens are issued elsewhere; this module only reads the user id out of them.
"""

from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger

from app.core.config import settings

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(user_id: int, expires_minutes: int | None = None) -> str:
    """Mint a signed access token for a user."""
    if expires_minutes is None:
        expires_minutes = settings.jwt_access_token_expire_minutes
    expires = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    payload = {"sub": str(user_id), "exp": expires}
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> int:
    """
    Decode token and return the user id.

    Raises:
        jwt.InvalidTokenError: If signature, expiry or subject is invalid
    """
    payload = jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm],
    )
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError) as e:
        raise jwt.InvalidTokenError("Token subject is not a user id") from e


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> int:
    """FastAPI dependency returning the authenticated user id."""
    if credentials is None:
        raise HTTPException(status_code=401, detail="Unauthorized")

    try:
        return decode_access_token(credentials.credentials)
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise HTTPException(status_code=401, detail="Unauthorized") from e
