"""Table-scoped access to the hosted database.

Every screen talks to the database through ``Gateway``: select with column
projection, filters and ordering, plus insert/update/delete returning row ids.
Driver errors are rolled back and re-raised as ``GatewayError``.
"""
from __future__ import annotations

import logging
import re
import sqlite3
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence, Union

import pandas as pd

from core.db_init import DBConnection, is_postgres
from core.errors import GatewayError

try:
    import psycopg2
except ImportError:
    psycopg2 = None

logger = logging.getLogger(__name__)

TABLES = ("products", "categories", "sales", "customers", "settings")

OPERATORS = {
    "eq": "=",
    "neq": "<>",
    "lt": "<",
    "lte": "<=",
    "gt": ">",
    "gte": ">=",
}

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _plain(value: Any) -> Any:
    """Unwrap numpy scalars (ids read back through pandas) for the driver."""
    if hasattr(value, "item") and not isinstance(value, (str, bytes)):
        return value.item()
    return value


def _driver_errors() -> tuple:
    errors = [sqlite3.Error]
    if psycopg2 is not None:
        errors.append(psycopg2.Error)
    return tuple(errors)


class Filter(NamedTuple):
    column: str
    op: str
    value: Any


def eq(column: str, value: Any) -> Filter:
    return Filter(column, "eq", value)


def lte(column: str, value: Any) -> Filter:
    return Filter(column, "lte", value)


def gt(column: str, value: Any) -> Filter:
    return Filter(column, "gt", value)


class Gateway:
    """CRUD operations on the dashboard tables over a DB-API connection."""

    def __init__(self, conn: DBConnection):
        self.conn = conn
        self.placeholder = "%s" if is_postgres(conn) else "?"

    # ---------- validation helpers ----------

    @staticmethod
    def _table(table: str) -> str:
        if table not in TABLES:
            raise GatewayError(f"Unknown table: {table}")
        return table

    @staticmethod
    def _column(column: str) -> str:
        if not _IDENTIFIER.match(column):
            raise GatewayError(f"Invalid column name: {column!r}")
        return column

    def _columns(self, columns: Union[str, Sequence[str]]) -> str:
        if columns == "*":
            return "*"
        if isinstance(columns, str):
            columns = [c.strip() for c in columns.split(",")]
        return ", ".join(self._column(c) for c in columns)

    def _where(self, filters: Iterable[Filter]) -> tuple:
        clauses: List[str] = []
        params: List[Any] = []
        for f in filters:
            if f.op not in OPERATORS:
                raise GatewayError(f"Unsupported filter operator: {f.op}")
            clauses.append(f"{self._column(f.column)} {OPERATORS[f.op]} {self.placeholder}")
            params.append(_plain(f.value))
        sql = (" WHERE " + " AND ".join(clauses)) if clauses else ""
        return sql, params

    def _fail(self, action: str, table: str, exc: Exception) -> GatewayError:
        logger.exception("Failed to %s %s", action, table)
        try:
            self.conn.rollback()
        except _driver_errors():
            logger.warning("Rollback failed after %s error", action)
        return GatewayError(f"Failed to {action} {table}: {exc}")

    # ---------- table operations ----------

    def select(
        self,
        table: str,
        columns: Union[str, Sequence[str]] = "*",
        filters: Iterable[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> pd.DataFrame:
        """Return matching rows as a DataFrame."""
        table = self._table(table)
        where, params = self._where(filters)
        query = f"SELECT {self._columns(columns)} FROM {table}{where}"
        if order_by:
            query += f" ORDER BY {self._column(order_by)} {'DESC' if descending else 'ASC'}"
        try:
            return pd.read_sql(query, self.conn, params=params or None)
        except (*_driver_errors(), pd.errors.DatabaseError) as exc:
            raise self._fail("read", table, exc) from exc

    def insert(self, table: str, values: Dict[str, Any]) -> Any:
        """Insert one row and return its id."""
        table = self._table(table)
        if not values:
            raise GatewayError("Nothing to insert")
        cols = ", ".join(self._column(c) for c in values)
        marks = ", ".join([self.placeholder] * len(values))
        query = f"INSERT INTO {table} ({cols}) VALUES ({marks})"
        if is_postgres(self.conn):
            query += " RETURNING id"
        cur = self.conn.cursor()
        try:
            cur.execute(query, tuple(_plain(v) for v in values.values()))
            row_id = cur.fetchone()[0] if is_postgres(self.conn) else cur.lastrowid
            self.conn.commit()
        except _driver_errors() as exc:
            raise self._fail("insert into", table, exc) from exc
        logger.info("Inserted %s id=%s", table, row_id)
        return row_id

    def update(self, table: str, row_id: Any, values: Dict[str, Any]) -> Any:
        """Update one row by id and return the id."""
        table = self._table(table)
        if not values:
            raise GatewayError("Nothing to update")
        assignments = ", ".join(f"{self._column(c)}={self.placeholder}" for c in values)
        query = f"UPDATE {table} SET {assignments} WHERE id={self.placeholder}"
        cur = self.conn.cursor()
        try:
            cur.execute(query, (*(_plain(v) for v in values.values()), _plain(row_id)))
            if cur.rowcount == 0:
                self.conn.rollback()
                raise GatewayError(f"No {table} row with id {row_id}")
            self.conn.commit()
        except _driver_errors() as exc:
            raise self._fail("update", table, exc) from exc
        logger.info("Updated %s id=%s", table, row_id)
        return row_id

    def delete(self, table: str, row_id: Any) -> None:
        """Delete one row by id."""
        table = self._table(table)
        cur = self.conn.cursor()
        try:
            cur.execute(f"DELETE FROM {table} WHERE id={self.placeholder}", (_plain(row_id),))
            self.conn.commit()
        except _driver_errors() as exc:
            raise self._fail("delete from", table, exc) from exc
        logger.info("Deleted %s id=%s", table, row_id)
