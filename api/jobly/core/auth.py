from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class UnauthorizedError(Exception):
    """Raised when a request fails an authorization gate."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


@dataclass(slots=True)
class Principal:
    username: str
    # Kept exactly as the token carried it; gates compare it with ``is True``.
    is_admin: Any = False
    claims: dict[str, Any] = field(default_factory=dict)

    @property
    def has_admin_flag(self) -> bool:
        return self.is_admin is True


def principal_from_claims(claims: Any) -> Principal | None:
    """Build a principal from decoded token claims, or None when unusable."""
    if not isinstance(claims, dict):
        return None
    username = claims.get("username")
    if not isinstance(username, str) or not username:
        return None
    return Principal(username=username, is_admin=claims.get("isAdmin"), claims=dict(claims))


def ensure_logged_in(principal: Principal | None) -> Principal:
    if principal is None:
        raise UnauthorizedError()
    return principal


def ensure_admin(principal: Principal | None) -> Principal:
    if principal is None or not principal.has_admin_flag:
        raise UnauthorizedError()
    return principal


def ensure_self_or_admin(principal: Principal | None, username: str) -> Principal:
    if principal is None:
        raise UnauthorizedError()
    if principal.username == username or principal.has_admin_flag:
        return principal
    raise UnauthorizedError()
