import logging
import re
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError, jwt
from passlib.context import CryptContext

from jobly.core.auth import (
    Principal,
    UnauthorizedError,
    ensure_admin,
    ensure_logged_in,
    ensure_self_or_admin,
    principal_from_claims,
)
from jobly.core.config import Settings, get_settings
from jobly.core.telemetry import record_principal

logger = logging.getLogger(__name__)

_BEARER_PREFIX_RE = re.compile(r"^bearer(?=\s|$)", re.IGNORECASE)


@lru_cache
def _password_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def hash_password(password: str, settings: Settings | None = None) -> str:
    settings = settings or get_settings()
    return _password_context(settings.bcrypt_work_factor).hash(password)


def verify_password(password: str, hashed_password: str, settings: Settings | None = None) -> bool:
    settings = settings or get_settings()
    return _password_context(settings.bcrypt_work_factor).verify(password, hashed_password)


def create_token(username: str, *, is_admin: bool = False, settings: Settings | None = None) -> str:
    """Sign ``{username, isAdmin, iat}`` (plus ``exp`` when configured) with the shared secret."""
    settings = settings or get_settings()
    issued_at = datetime.now(timezone.utc)
    claims: dict[str, Any] = {
        "username": username,
        "isAdmin": is_admin,
        "iat": int(issued_at.timestamp()),
    }
    if settings.token_expire_minutes is not None:
        expires_at = issued_at + timedelta(minutes=settings.token_expire_minutes)
        claims["exp"] = int(expires_at.timestamp())
    return jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings | None = None) -> dict[str, Any] | None:
    """Return the verified claims, or None for malformed, forged or expired tokens."""
    settings = settings or get_settings()
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        logger.debug("ignoring bearer token: %s", exc)
        return None


def parse_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    token = _BEARER_PREFIX_RE.sub("", authorization.strip(), count=1).strip()
    return token or None


def authenticate_request(authorization: str | None, settings: Settings | None = None) -> Principal | None:
    """Resolve the Authorization header into a principal.

    A missing header or a token that fails verification is not an error: the
    request simply carries no principal and the route gates decide.
    """
    token = parse_bearer_token(authorization)
    if token is None:
        return None

    claims = decode_token(token, settings)
    if claims is None:
        return None

    principal = principal_from_claims(claims)
    if principal is None:
        logger.debug("ignoring bearer token without a username claim")
    return principal


async def authenticate_jwt(request: Request, call_next):
    principal = authenticate_request(request.headers.get("Authorization"), get_settings())
    request.state.principal = principal
    if principal is None:
        record_principal(None, False)
    else:
        record_principal(principal.username, principal.has_admin_flag)
    return await call_next(request)


async def get_current_principal(request: Request) -> Principal | None:
    return getattr(request.state, "principal", None)


async def require_logged_in(principal: Principal | None = Depends(get_current_principal)) -> Principal:
    try:
        return ensure_logged_in(principal)
    except UnauthorizedError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc


async def require_admin(principal: Principal | None = Depends(get_current_principal)) -> Principal:
    try:
        return ensure_admin(principal)
    except UnauthorizedError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc


async def require_self_or_admin(
    username: str,
    principal: Principal | None = Depends(get_current_principal),
) -> Principal:
    try:
        return ensure_self_or_admin(principal, username)
    except UnauthorizedError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
