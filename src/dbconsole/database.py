"""Database handles that execute finished statements."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any

import psycopg

from dbconsole.errors import DatabaseError
from dbconsole.types import CommandKind, Statement, TabularResult

logger = logging.getLogger(__name__)


def to_cell(value: Any) -> str | None:
    """Convert a driver value to display text, keeping NULL as None."""
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    return str(value)


class Database:
    """One open connection that runs queries and mutations.

    Subclasses provide ``_cursor_execute`` for their driver. The handle is a
    context manager and closes exactly once.
    """

    driver_errors: tuple[type[Exception], ...] = ()

    def __init__(self) -> None:
        self._conn: Any = None

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def _connect(self) -> Any:
        raise NotImplementedError

    def open(self) -> Database:
        """Open the connection if it is not open yet."""
        if self._conn is None:
            try:
                self._conn = self._connect()
            except self.driver_errors as e:
                raise DatabaseError(str(e).strip()) from e
            logger.info("opened %s", self)
        return self

    def close(self) -> None:
        """Close the connection; later calls do nothing."""
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        try:
            conn.close()
        finally:
            logger.info("closed %s", self)

    def __enter__(self) -> Database:
        return self.open()

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _require_open(self) -> Any:
        if self._conn is None:
            raise DatabaseError("Database connection is not open")
        return self._conn

    def query(self, statement: Statement) -> TabularResult:
        """Run a statement that returns rows."""
        conn = self._require_open()
        logger.debug("query: %s", statement.text)
        try:
            cur = conn.cursor()
            try:
                cur.execute(statement.text)
                if cur.description is None:
                    return TabularResult(columns=())
                columns = tuple(d[0] for d in cur.description)
                rows = tuple(tuple(to_cell(v) for v in row) for row in cur.fetchall())
            finally:
                cur.close()
        except self.driver_errors as e:
            raise DatabaseError(str(e).strip()) from e
        return TabularResult(columns=columns, rows=rows)

    def mutate(self, statement: Statement) -> int:
        """Run a statement that changes state; return the affected row count."""
        conn = self._require_open()
        logger.debug("mutation: %s", statement.text)
        try:
            cur = conn.cursor()
            try:
                cur.execute(statement.text)
                return cur.rowcount
            finally:
                cur.close()
        except self.driver_errors as e:
            raise DatabaseError(str(e).strip()) from e

    def execute(self, statement: Statement) -> TabularResult | int:
        """Run a statement according to its kind."""
        if statement.kind == CommandKind.QUERY:
            return self.query(statement)
        return self.mutate(statement)


class SQLiteDatabase(Database):
    """SQLite file (or ``:memory:``) in autocommit mode."""

    driver_errors = (sqlite3.Error,)

    def __init__(self, path: Path | str) -> None:
        super().__init__()
        self.path = str(path)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path, isolation_level=None)
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def __str__(self) -> str:
        return f"sqlite:{self.path}"


class PostgresDatabase(Database):
    """PostgreSQL server reached through psycopg, in autocommit mode."""

    driver_errors = (psycopg.Error,)

    def __init__(
        self,
        dbname: str,
        port: int | str,
        user: str,
        password: str = "",
        host: str = "localhost",
    ) -> None:
        super().__init__()
        self.dbname = dbname
        self.port = str(port)
        self.user = user
        self.password = password
        self.host = host

    def _connect(self) -> psycopg.Connection:
        return psycopg.connect(
            host=self.host,
            port=self.port,
            dbname=self.dbname,
            user=self.user,
            password=self.password,
            autocommit=True,
        )

    def __str__(self) -> str:
        return f"postgresql://{self.user}@{self.host}:{self.port}/{self.dbname}"
