"""Job persistence.

Records are dicts keyed by the public field names:
``{id, title, salary, equity, companyHandle}``. ``equity`` comes back from
PostgreSQL as a ``Decimal``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from asyncpg import exceptions as pg_exc

from jobly.services.database import Database, RepositoryNotFoundError
from jobly.services.sql import ColumnMap, SqlFragment, sql_for_partial_update, where_clause

JOB_COLUMNS = ColumnMap(
    {
        "title": "title",
        "salary": "salary",
        "equity": "equity",
    }
)

_RETURNING = "id, title, salary, equity, company_handle"


def job_filter_sql(filter_by: Mapping[str, Any]) -> SqlFragment:
    """WHERE criteria for ``titleLike``, ``minSalary`` and ``hasEquity``.

    ``hasEquity`` only narrows the result when it is exactly ``True``; it never
    consumes a bind value.
    """
    conditions: list[str] = []
    params: list[Any] = []

    def bind(value: Any) -> str:
        params.append(value)
        return f"${len(params)}"

    title_like = filter_by.get("titleLike")
    if title_like is not None:
        conditions.append(f"title ilike {bind(f'%{title_like}%')}")

    min_salary = filter_by.get("minSalary")
    if min_salary is not None:
        conditions.append(f"salary >= {bind(min_salary)}")

    if filter_by.get("hasEquity") is True:
        conditions.append("equity > 0")

    return SqlFragment(sql=" and ".join(conditions), values=params)


async def create(db: Database, data: Mapping[str, Any]) -> dict[str, Any]:
    company_handle = data["companyHandle"]
    company_rows = await db.fetch(
        """
        select handle
        from companies
        where handle = $1
        """,
        company_handle,
    )
    if not company_rows:
        raise RepositoryNotFoundError(f"No company: {company_handle}")

    # The company can still disappear between the check and the insert.
    try:
        rows = await db.fetch(
            f"""
            insert into jobs (title, salary, equity, company_handle)
            values ($1, $2, $3, $4)
            returning {_RETURNING}
            """,
            data["title"],
            data.get("salary"),
            data.get("equity"),
            company_handle,
        )
    except pg_exc.ForeignKeyViolationError as exc:
        raise RepositoryNotFoundError(f"No company: {company_handle}") from exc

    return _job_row_to_dict(rows[0])


async def find_all(db: Database) -> list[dict[str, Any]]:
    rows = await db.fetch(
        f"""
        select {_RETURNING}
        from jobs
        order by company_handle, title
        """
    )
    return [_job_row_to_dict(row) for row in rows]


async def find_some(db: Database, filter_by: Mapping[str, Any]) -> list[dict[str, Any]]:
    fragment = job_filter_sql(filter_by)
    rows = await db.fetch(
        f"""
        select {_RETURNING}
        from jobs
        {where_clause(fragment)}
        order by company_handle, title
        """,
        *fragment.values,
    )
    return [_job_row_to_dict(row) for row in rows]


async def get(db: Database, job_id: int) -> dict[str, Any]:
    rows = await db.fetch(
        f"""
        select {_RETURNING}
        from jobs
        where id = $1
        """,
        job_id,
    )
    if not rows:
        raise RepositoryNotFoundError(f"No job: {job_id}")
    return _job_row_to_dict(rows[0])


async def update(db: Database, job_id: int, data: Mapping[str, Any]) -> dict[str, Any]:
    """Partial update of title, salary and equity; the owning company is fixed."""
    fragment = sql_for_partial_update(data, JOB_COLUMNS)
    rows = await db.fetch(
        f"""
        update jobs
        set {fragment.sql}
        where id = {fragment.next_marker()}
        returning {_RETURNING}
        """,
        *fragment.values,
        job_id,
    )
    if not rows:
        raise RepositoryNotFoundError(f"No job: {job_id}")
    return _job_row_to_dict(rows[0])


async def remove(db: Database, job_id: int) -> None:
    rows = await db.fetch(
        """
        delete from jobs
        where id = $1
        returning id
        """,
        job_id,
    )
    if not rows:
        raise RepositoryNotFoundError(f"No job: {job_id}")


def _job_row_to_dict(row: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "id": row["id"],
        "title": row["title"],
        "salary": row["salary"],
        "equity": row["equity"],
        "companyHandle": row["company_handle"],
    }
