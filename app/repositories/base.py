"""
Base Repository - Lawyer Performance Scoring
app/repositories/base.py

Snowflake plumbing shared by the lawyer repository: one connection per call,
dict cursors for reads, and connector errors translated into RepositoryException.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Sequence

import snowflake.connector
from snowflake.connector import DictCursor
from snowflake.connector.errors import DatabaseError, InterfaceError, ProgrammingError

from app.core.exceptions import (
    DatabaseConnectionException,
    DuplicateEntityException,
    RepositoryException,
)
from app.services.snowflake import get_snowflake_connection


@contextmanager
def translate_errors() -> Iterator[None]:
    """Re-raise connector errors as repository exceptions."""
    try:
        yield
    except ProgrammingError as e:
        message = str(e)
        if any(marker in message.upper() for marker in ("UNIQUE", "DUPLICATE")):
            raise DuplicateEntityException(message)
        raise RepositoryException(f"Query error: {message}")
    except DatabaseError as e:
        raise RepositoryException(f"Database error: {e}")


class BaseRepository:
    """Snowflake access for repositories that store one table each."""

    @contextmanager
    def get_connection(self) -> Iterator[snowflake.connector.SnowflakeConnection]:
        conn = None
        try:
            conn = get_snowflake_connection()
            yield conn
        except InterfaceError as e:
            raise DatabaseConnectionException(f"Failed to connect to Snowflake: {e}")
        finally:
            if conn:
                conn.close()

    @contextmanager
    def get_cursor(self, dict_cursor: bool = True) -> Iterator[Any]:
        """Cursor on a fresh connection; both are closed on exit."""
        with self.get_connection() as conn:
            cursor = conn.cursor(DictCursor) if dict_cursor else conn.cursor()
            try:
                yield cursor
            finally:
                cursor.close()

    def execute_query(
        self,
        sql: str,
        params: Optional[tuple] = None,
        fetch_all: bool = False,
        commit: bool = False,
    ) -> Any:
        """
        Run one statement.

        Returns the fetched rows when `fetch_all` is set, otherwise the
        affected row count.
        """
        with self.get_cursor() as cursor, translate_errors():
            cursor.execute(sql, params or ())
            if commit:
                cursor.connection.commit()
            return cursor.fetchall() if fetch_all else cursor.rowcount

    def execute_many(self, sql: str, rows: Sequence[tuple]) -> int:
        """Run a parameterized statement for every row in one transaction."""
        with self.get_cursor(dict_cursor=False) as cursor, translate_errors():
            cursor.executemany(sql, list(rows))
            cursor.connection.commit()
            return cursor.rowcount

    @staticmethod
    def normalize_timestamp(dt: Optional[datetime]) -> Optional[datetime]:
        """Snowflake returns naive TIMESTAMP_NTZ values; they are stored as UTC."""
        if dt is None:
            return None
        return dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt.astimezone(timezone.utc)

    @staticmethod
    def rows_to_dicts(rows: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
        """Lower-case the column names Snowflake returns upper-cased."""
        return [{key.lower(): value for key, value in row.items()} for row in rows or []]
