"""Helpers for building parameterized SQL fragments.

Fragments use asyncpg's positional markers (``$1``, ``$2``, ...). Callers
splice ``fragment.sql`` into their statement and pass ``*fragment.values``
(followed by any trailing parameters) to ``fetch``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from jobly.services.database import RepositoryValidationError

_COLUMN_NAME_RE = re.compile(r"^[a-z_][a-z0-9_]*$")

# Largest value a PostgreSQL `integer` column or parameter accepts.
PG_INTEGER_MAX = 2**31 - 1


@dataclass(slots=True)
class SqlFragment:
    sql: str = ""
    values: list[Any] = field(default_factory=list)

    def next_marker(self) -> str:
        """Marker for the first parameter bound after this fragment's values."""
        return f"${len(self.values) + 1}"


class ColumnMap:
    """Closed mapping from public field names to storage column names."""

    def __init__(self, columns: Mapping[str, str]) -> None:
        if not columns:
            raise ValueError("column map must not be empty")
        for field_name, column in columns.items():
            if not _COLUMN_NAME_RE.match(column):
                raise ValueError(f"invalid column name for {field_name!r}: {column!r}")
        self._columns = dict(columns)

    @property
    def fields(self) -> frozenset[str]:
        return frozenset(self._columns)

    def column_for(self, field_name: str) -> str:
        try:
            return self._columns[field_name]
        except KeyError:
            raise RepositoryValidationError(f"Field cannot be updated: {field_name}") from None


def sql_for_partial_update(data: Mapping[str, Any], columns: ColumnMap) -> SqlFragment:
    """Build the SET clause of a partial UPDATE.

    ``{"firstName": "Aliya", "age": 32}`` becomes ``'"first_name"=$1, "age"=$2'``
    with values ``["Aliya", 32]``.
    """
    if not data:
        raise RepositoryValidationError("No data")

    clauses: list[str] = []
    values: list[Any] = []
    for field_name, value in data.items():
        values.append(value)
        clauses.append(f'"{columns.column_for(field_name)}"=${len(values)}')

    return SqlFragment(sql=", ".join(clauses), values=values)


def where_clause(fragment: SqlFragment) -> str:
    return f"where {fragment.sql}" if fragment.sql else ""
