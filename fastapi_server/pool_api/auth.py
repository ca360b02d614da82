"""
JWT bearer authentication.

Tokens are HS256 JWTs issued by POST /users. The `sub` claim carries the
user id; `name` and `avatar_url` are copied from the user row at sign time.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from loguru import logger
from pydantic import BaseModel

from pool_api.config import JWT_ALGORITHM, JWT_EXPIRES_DAYS, JWT_SECRET
from pool_api.models.user import User

bearer_scheme = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    sub: int
    name: str
    avatar_url: Optional[str] = None


def create_access_token(user: User) -> str:
    """Sign a token for `user`, valid for JWT_EXPIRES_DAYS."""
    payload = {
        "sub": str(user.id),
        "name": user.name,
        "avatar_url": user.avatar_url,
        "exp": datetime.now(timezone.utc) + timedelta(days=JWT_EXPIRES_DAYS),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> CurrentUser:
    """Verify signature and expiry. Raises jwt.PyJWTError on a bad token."""
    claims = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    return CurrentUser(**claims)


def optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[CurrentUser]:
    """Return the caller if a valid bearer token was sent, else None."""
    if credentials is None:
        return None
    try:
        return decode_access_token(credentials.credentials)
    except (jwt.PyJWTError, ValueError) as e:
        logger.debug("Ignoring invalid bearer token: {}", e)
        return None


def authenticate(
    user: Optional[CurrentUser] = Depends(optional_user),
) -> CurrentUser:
    """Dependency: 401 unless a valid bearer token was sent."""
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized.")
    return user
