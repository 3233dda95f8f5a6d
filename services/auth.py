from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config import settings
from core.errors import UnauthorizedError

_ALGO = "HS256"
_bearer = HTTPBearer(auto_error=False)


def create_token(user_id: str, ttl_minutes: int = 60) -> str:
    exp = datetime.now(timezone.utc) + timedelta(minutes=ttl_minutes)
    payload = {"sub": user_id, "exp": exp}
    return jwt.encode(payload, settings.jwt_secret, algorithm=_ALGO)


def verify_token(token: str) -> str:
    payload = jwt.decode(token, settings.jwt_secret, algorithms=[_ALGO])
    return payload["sub"]


async def current_user_id(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> str:
    """Resolve the caller from the bearer token; anything short of a valid token is 401."""
    if creds is None or not creds.credentials:
        raise UnauthorizedError(details="Missing bearer token")
    try:
        user_id = verify_token(creds.credentials)
    except (jwt.PyJWTError, KeyError) as exc:
        raise UnauthorizedError(details="Invalid or expired token") from exc
    if not user_id:
        raise UnauthorizedError(details="Token has no subject")
    return user_id
