"""Authentication helpers built on HS256 JSON Web Tokens.

``get_current_user`` reads an optional ``Authorization: Bearer <token>`` header
and returns the token payload, or ``None`` for anonymous callers. Invalid tokens
are logged and treated as anonymous so that public routes keep working.

``ensure_admin`` is the dependency that gates mutating routes: it raises
UnauthorizedError unless the caller's token carries ``isAdmin: true``.
"""
from __future__ import annotations

from typing import Annotated, Optional

import structlog
from fastapi import Depends, Request
from jose import JWTError, jwt
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from errors import UnauthorizedError
from settings import Settings, get_settings

logger = structlog.get_logger(__name__)


class TokenPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str
    is_admin: bool = Field(default=False, alias="isAdmin")


def create_token(username: str, is_admin: bool = False, settings: Optional[Settings] = None) -> str:
    """Sign a token for ``username``."""
    settings = settings or get_settings()
    payload = TokenPayload(username=username, is_admin=is_admin)
    return jwt.encode(
        payload.model_dump(by_alias=True),
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )


def verify_token(token: str, settings: Optional[Settings] = None) -> TokenPayload:
    """Verify signature and return payload.

    Raises UnauthorizedError on failure.
    """
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
        return TokenPayload.model_validate(payload)
    except (JWTError, ValidationError) as exc:
        logger.warning("JWT verification failed", exc=str(exc))
        raise UnauthorizedError("Invalid token") from exc


# Helper to extract Authorization header (works with FastAPI DI)
def _get_authorization_header(request: Request) -> Optional[str]:
    return request.headers.get("Authorization")


# --- FastAPI dependencies ---
async def get_current_user(
    authorization: Annotated[Optional[str], Depends(_get_authorization_header)],
    settings: Settings = Depends(get_settings),
) -> Optional[TokenPayload]:
    if not authorization or not authorization.lower().startswith("bearer "):
        return None

    token = authorization.split(" ", 1)[1].strip()
    try:
        return verify_token(token, settings)
    except UnauthorizedError:
        return None


async def ensure_admin(
    current_user: Annotated[Optional[TokenPayload], Depends(get_current_user)],
) -> TokenPayload:
    if current_user is None or not current_user.is_admin:
        raise UnauthorizedError()
    return current_user
