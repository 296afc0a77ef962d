"""Company persistence.

Records are dicts keyed by the public field names:
``{handle, name, description, numEmployees, logoUrl}``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from asyncpg import exceptions as pg_exc

from jobly.services.database import (
    Database,
    RepositoryDuplicateError,
    RepositoryNotFoundError,
    RepositoryValidationError,
)
from jobly.services.sql import ColumnMap, SqlFragment, sql_for_partial_update, where_clause

COMPANY_COLUMNS = ColumnMap(
    {
        "name": "name",
        "description": "description",
        "numEmployees": "num_employees",
        "logoUrl": "logo_url",
    }
)

_RETURNING = "handle, name, description, num_employees, logo_url"


def company_filter_sql(filter_by: Mapping[str, Any]) -> SqlFragment:
    """WHERE criteria for ``nameLike``, ``minEmployees`` and ``maxEmployees``.

    ``{"nameLike": "net", "minEmployees": 5}`` becomes
    ``"name ilike $1 and num_employees >= $2"`` with values ``["%net%", 5]``.
    """
    conditions: list[str] = []
    params: list[Any] = []

    def bind(value: Any) -> str:
        params.append(value)
        return f"${len(params)}"

    name_like = filter_by.get("nameLike")
    if name_like is not None:
        conditions.append(f"name ilike {bind(f'%{name_like}%')}")

    min_employees = filter_by.get("minEmployees")
    if min_employees is not None:
        conditions.append(f"num_employees >= {bind(min_employees)}")

    max_employees = filter_by.get("maxEmployees")
    if max_employees is not None:
        conditions.append(f"num_employees <= {bind(max_employees)}")

    return SqlFragment(sql=" and ".join(conditions), values=params)


async def create(db: Database, data: Mapping[str, Any]) -> dict[str, Any]:
    handle = data["handle"]
    try:
        rows = await db.fetch(
            f"""
            insert into companies (handle, name, description, num_employees, logo_url)
            values ($1, $2, $3, $4, $5)
            on conflict (handle) do nothing
            returning {_RETURNING}
            """,
            handle,
            data["name"],
            data["description"],
            data.get("numEmployees"),
            data.get("logoUrl"),
        )
    except pg_exc.UniqueViolationError as exc:
        raise RepositoryDuplicateError(f"Duplicate company name: {data['name']}") from exc

    if not rows:
        raise RepositoryDuplicateError(f"Duplicate company: {handle}")
    return _company_row_to_dict(rows[0])


async def find_all(db: Database) -> list[dict[str, Any]]:
    rows = await db.fetch(
        f"""
        select {_RETURNING}
        from companies
        order by name
        """
    )
    return [_company_row_to_dict(row) for row in rows]


async def find_some(db: Database, filter_by: Mapping[str, Any]) -> list[dict[str, Any]]:
    min_employees = filter_by.get("minEmployees")
    max_employees = filter_by.get("maxEmployees")
    if min_employees is not None and max_employees is not None and min_employees > max_employees:
        raise RepositoryValidationError("minEmployees cannot be greater than maxEmployees")

    fragment = company_filter_sql(filter_by)
    rows = await db.fetch(
        f"""
        select {_RETURNING}
        from companies
        {where_clause(fragment)}
        order by name
        """,
        *fragment.values,
    )
    return [_company_row_to_dict(row) for row in rows]


async def get(db: Database, handle: str) -> dict[str, Any]:
    rows = await db.fetch(
        f"""
        select {_RETURNING}
        from companies
        where handle = $1
        """,
        handle,
    )
    if not rows:
        raise RepositoryNotFoundError(f"No company: {handle}")
    return _company_row_to_dict(rows[0])


async def update(db: Database, handle: str, data: Mapping[str, Any]) -> dict[str, Any]:
    """Partial update: only the supplied fields change."""
    fragment = sql_for_partial_update(data, COMPANY_COLUMNS)
    rows = await db.fetch(
        f"""
        update companies
        set {fragment.sql}
        where handle = {fragment.next_marker()}
        returning {_RETURNING}
        """,
        *fragment.values,
        handle,
    )
    if not rows:
        raise RepositoryNotFoundError(f"No company: {handle}")
    return _company_row_to_dict(rows[0])


async def remove(db: Database, handle: str) -> None:
    rows = await db.fetch(
        """
        delete from companies
        where handle = $1
        returning handle
        """,
        handle,
    )
    if not rows:
        raise RepositoryNotFoundError(f"No company: {handle}")


def _company_row_to_dict(row: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "handle": row["handle"],
        "name": row["name"],
        "description": row["description"],
        "numEmployees": row["num_employees"],
        "logoUrl": row["logo_url"],
    }
