from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from fastapi.concurrency import run_in_threadpool

from jobly.core.auth import UnauthorizedError
from jobly.core.security import hash_password, verify_password
from jobly.services.database import Database, RepositoryDuplicateError, RepositoryNotFoundError
from jobly.services.sql import ColumnMap, sql_for_partial_update

logger = logging.getLogger(__name__)

USER_COLUMNS = ColumnMap(
    {
        "firstName": "first_name",
        "lastName": "last_name",
        "email": "email",
        "password": "password",
        "isAdmin": "is_admin",
    }
)

_RETURNING = "username, first_name, last_name, email, is_admin"


async def authenticate(db: Database, username: str, password: str) -> dict[str, Any]:
    rows = await db.fetch(
        f"""
        select {_RETURNING}, password
        from users
        where username = $1
        """,
        username,
    )
    if not rows:
        # Unknown usernames still pay for one bcrypt check.
        placeholder = await run_in_threadpool(_placeholder_hash)
        await run_in_threadpool(verify_password, password, placeholder)
    elif await run_in_threadpool(verify_password, password, rows[0]["password"]):
        return _user_row_to_dict(rows[0])
    raise UnauthorizedError("Invalid username/password")


async def register(db: Database, data: Mapping[str, Any]) -> dict[str, Any]:
    username = data["username"]
    hashed = await run_in_threadpool(hash_password, data["password"])
    rows = await db.fetch(
        f"""
        insert into users (username, password, first_name, last_name, email, is_admin)
        values ($1, $2, $3, $4, $5, $6)
        on conflict (username) do nothing
        returning {_RETURNING}
        """,
        username,
        hashed,
        data["firstName"],
        data["lastName"],
        data["email"],
        bool(data.get("isAdmin", False)),
    )
    if not rows:
        raise RepositoryDuplicateError(f"Duplicate username: {username}")

    logger.info("registered user username=%s is_admin=%s", username, rows[0]["is_admin"])
    return _user_row_to_dict(rows[0])


async def find_all(db: Database) -> list[dict[str, Any]]:
    rows = await db.fetch(
        f"""
        select {_RETURNING}
        from users
        order by username
        """
    )
    return [_user_row_to_dict(row) for row in rows]


async def get(db: Database, username: str) -> dict[str, Any]:
    rows = await db.fetch(
        f"""
        select {_RETURNING}
        from users
        where username = $1
        """,
        username,
    )
    if not rows:
        raise RepositoryNotFoundError(f"No user: {username}")
    return _user_row_to_dict(rows[0])


async def update(db: Database, username: str, data: Mapping[str, Any]) -> dict[str, Any]:
    changes = dict(data)
    if changes.get("password") is not None:
        changes["password"] = await run_in_threadpool(hash_password, changes["password"])

    fragment = sql_for_partial_update(changes, USER_COLUMNS)
    rows = await db.fetch(
        f"""
        update users
        set {fragment.sql}
        where username = {fragment.next_marker()}
        returning {_RETURNING}
        """,
        *fragment.values,
        username,
    )
    if not rows:
        raise RepositoryNotFoundError(f"No user: {username}")
    return _user_row_to_dict(rows[0])


async def remove(db: Database, username: str) -> None:
    rows = await db.fetch(
        """
        delete from users
        where username = $1
        returning username
        """,
        username,
    )
    if not rows:
        raise RepositoryNotFoundError(f"No user: {username}")


@lru_cache
def _placeholder_hash() -> str:
    return hash_password("jobly-placeholder-password")


def _user_row_to_dict(row: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "username": row["username"],
        "firstName": row["first_name"],
        "lastName": row["last_name"],
        "email": row["email"],
        "isAdmin": bool(row["is_admin"]),
    }
