from __future__ import annotations

import json
import logging
import os
import sqlite3
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Generator, List, Optional, Tuple

from .models import TaskEntity
from .repositories import ListQuery, Repository, filter_sort_page
from .schemas import TaskCreate, TaskUpdate
from .settings import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "tasks"
    id: str = "id"
    title: str = "title"
    description: str = "description"
    target_date: str = "target_date"
    notification_time: str = "notification_time"
    notify_offsets: str = "notify_offsets"
    completed: str = "completed"
    created_at: str = "created_at"
    updated_at: str = "updated_at"


_COLS = _Cols()


class SQLiteRepository(Repository):
    """
    Lightweight SQLite repository implementing the Repository interface.

    Dates and times are stored as ISO8601 text; notify offsets as a JSON array.
    """

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.id} TEXT PRIMARY KEY,
                    {_COLS.title} TEXT NOT NULL,
                    {_COLS.description} TEXT NULL,
                    {_COLS.target_date} TEXT NOT NULL,
                    {_COLS.notification_time} TEXT NOT NULL,
                    {_COLS.notify_offsets} TEXT NOT NULL DEFAULT '[]',
                    {_COLS.completed} INTEGER NOT NULL DEFAULT 0,
                    {_COLS.created_at} TEXT NOT NULL,
                    {_COLS.updated_at} TEXT NOT NULL
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_completed ON {_COLS.table}({_COLS.completed})"
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_target_date ON {_COLS.table}({_COLS.target_date})"
            )

    def _row_to_entity(self, row: sqlite3.Row) -> TaskEntity:
        return {
            "id": str(row[_COLS.id]),
            "title": str(row[_COLS.title]),
            "description": row[_COLS.description],
            "target_date": date.fromisoformat(row[_COLS.target_date]),
            "notification_time": time.fromisoformat(row[_COLS.notification_time]),
            "notify_offsets": [int(n) for n in json.loads(row[_COLS.notify_offsets])],
            "completed": bool(row[_COLS.completed]),
            "created_at": datetime.fromisoformat(row[_COLS.created_at]),
            "updated_at": datetime.fromisoformat(row[_COLS.updated_at]),
        }

    def _fetch(self, conn: sqlite3.Connection, task_id: str) -> Optional[sqlite3.Row]:
        return conn.execute(f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (task_id,)).fetchone()

    def create(self, data: TaskCreate) -> TaskEntity:
        now = datetime.now().isoformat()
        new_id = str(uuid.uuid4())
        notification_time = data.notification_time or get_settings().default_notification_time
        with self._conn() as conn:
            conn.execute(
                f"""
                INSERT INTO {_COLS.table} ({_COLS.id}, {_COLS.title}, {_COLS.description},
                    {_COLS.target_date}, {_COLS.notification_time}, {_COLS.notify_offsets},
                    {_COLS.completed}, {_COLS.created_at}, {_COLS.updated_at})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    new_id,
                    data.title,
                    data.description,
                    data.target_date.isoformat(),
                    notification_time.isoformat(timespec="minutes"),
                    json.dumps(list(data.notify_offsets)),
                    1 if data.completed else 0,
                    now,
                    now,
                ),
            )
            row = self._fetch(conn, new_id)
            assert row is not None
            return self._row_to_entity(row)

    def get(self, task_id: str) -> Optional[TaskEntity]:
        with self._conn() as conn:
            row = self._fetch(conn, task_id)
            return self._row_to_entity(row) if row else None

    def update(self, task_id: str, data: TaskUpdate) -> Optional[TaskEntity]:
        with self._conn() as conn:
            row = self._fetch(conn, task_id)
            if not row:
                return None
            current = self._row_to_entity(row)

            fields = data.model_fields_set
            title = data.title if data.title is not None else current["title"]
            description = data.description if "description" in fields else current["description"]
            target_date = data.target_date if data.target_date is not None else current["target_date"]
            notification_time = (
                data.notification_time if data.notification_time is not None else current["notification_time"]
            )
            notify_offsets = (
                data.notify_offsets if data.notify_offsets is not None else current["notify_offsets"]
            )
            completed = data.completed if data.completed is not None else current["completed"]
            conn.execute(
                f"""
                UPDATE {_COLS.table}
                SET {_COLS.title} = ?, {_COLS.description} = ?, {_COLS.target_date} = ?,
                    {_COLS.notification_time} = ?, {_COLS.notify_offsets} = ?,
                    {_COLS.completed} = ?, {_COLS.updated_at} = ?
                WHERE {_COLS.id} = ?
                """,
                (
                    title,
                    description,
                    target_date.isoformat(),
                    notification_time.isoformat(timespec="minutes"),
                    json.dumps(list(notify_offsets)),
                    1 if completed else 0,
                    datetime.now().isoformat(),
                    task_id,
                ),
            )
            row2 = self._fetch(conn, task_id)
            assert row2 is not None
            return self._row_to_entity(row2)

    def delete(self, task_id: str) -> bool:
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?", (task_id,))
            return cur.rowcount > 0

    def all(self) -> List[TaskEntity]:
        with self._conn() as conn:
            rows = conn.execute(f"SELECT * FROM {_COLS.table} ORDER BY {_COLS.created_at}").fetchall()
            return [self._row_to_entity(r) for r in rows]

    def list(self, query: Optional[ListQuery] = None) -> Tuple[List[TaskEntity], int]:
        q = query or ListQuery()
        clauses = []
        params: list = []

        if q.completed is not None:
            clauses.append(f"{_COLS.completed} = ?")
            params.append(1 if q.completed else 0)

        where_sql = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with self._conn() as conn:
            rows = conn.execute(
                f"SELECT * FROM {_COLS.table} {where_sql} ORDER BY {_COLS.created_at}", params
            ).fetchall()
        # SQLite LIKE only folds ASCII case, so search, ordering and paging happen in Python
        return filter_sort_page((self._row_to_entity(r) for r in rows), q)
