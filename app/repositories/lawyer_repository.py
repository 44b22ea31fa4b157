"""
Lawyer Repository - Lawyer Performance Scoring
app/repositories/lawyer_repository.py

Persistence for scored lawyer records:
    insert(records) -> rows with server-assigned id + created_at
    list_all()      -> rows, newest first
    clear()         -> number of rows removed
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Sequence
from uuid import uuid4

from app.models.lawyer import LawyerRecord
from app.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

LAWYER_COLUMNS: List[str] = list(LawyerRecord.model_fields)


def _stamp(record: LawyerRecord) -> Dict[str, Any]:
    row = record.model_dump(mode="python")
    row["id"] = str(uuid4())
    row["created_at"] = datetime.now(timezone.utc)
    return row


class LawyerRepository(ABC):
    """Persistence collaborator for scored lawyer records."""

    @abstractmethod
    def insert(self, records: Sequence[LawyerRecord]) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def list_all(self) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def clear(self) -> int:
        ...


class InMemoryLawyerRepository(LawyerRepository):
    """Process-local store for development and tests."""

    def __init__(self):
        self._rows: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def insert(self, records: Sequence[LawyerRecord]) -> List[Dict[str, Any]]:
        rows = [_stamp(record) for record in records]
        with self._lock:
            self._rows.extend(rows)
        return [dict(row) for row in rows]

    def list_all(self) -> List[Dict[str, Any]]:
        with self._lock:
            # stable sort keeps insertion order inside one batch
            rows = sorted(
                enumerate(self._rows),
                key=lambda pair: (pair[1]["created_at"], pair[0]),
                reverse=True,
            )
        return [dict(row) for _, row in rows]

    def clear(self) -> int:
        with self._lock:
            removed = len(self._rows)
            self._rows.clear()
        return removed


class SnowflakeLawyerRepository(BaseRepository, LawyerRepository):
    """Repository for the `lawyers` table in Snowflake."""

    TABLE = "lawyers"

    def insert(self, records: Sequence[LawyerRecord]) -> List[Dict[str, Any]]:
        if not records:
            return []
        rows = [_stamp(record) for record in records]
        columns = ["id", "created_at"] + LAWYER_COLUMNS
        placeholders = ", ".join(["%s"] * len(columns))
        sql = f"""
            INSERT INTO {self.TABLE} ({', '.join(c.upper() for c in columns)})
            VALUES ({placeholders})
        """
        self.execute_many(sql, [tuple(row[c] for c in columns) for row in rows])
        logger.info(f"Inserted {len(rows)} lawyer records into Snowflake")
        return rows

    def list_all(self) -> List[Dict[str, Any]]:
        columns = ["id", "created_at"] + LAWYER_COLUMNS
        sql = f"""
            SELECT {', '.join(c.upper() for c in columns)}
            FROM {self.TABLE}
            ORDER BY CREATED_AT DESC
        """
        rows = self.rows_to_dicts(self.execute_query(sql, fetch_all=True))
        for row in rows:
            row["created_at"] = self.normalize_timestamp(row.get("created_at"))
        return rows

    def clear(self) -> int:
        removed = self.execute_query(f"DELETE FROM {self.TABLE}", commit=True)
        logger.info(f"Cleared {removed} lawyer records from Snowflake")
        return removed or 0
