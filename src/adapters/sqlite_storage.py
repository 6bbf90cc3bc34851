"""SQLite storage adapter.

Implements the core ReviewStorePort using a simple SQLite database.
"""

from __future__ import annotations

import dataclasses
import sqlite3
from datetime import date
from typing import List

from core.errors import PersistenceError
from core.models import Rating, ReviewRecord

TABLE_NAME = "review"


class SQLiteReviewStore:
    """Thin SQLite wrapper that satisfies the ReviewStorePort contract."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(self._db_path)
        except sqlite3.Error as exc:
            raise PersistenceError(f"Cannot open database {self._db_path}: {exc}") from exc
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create the review table if it does not exist.

        Fields:
        - id: allocated as max(id) + 1 on insert
        - author: display name of the reviewer
        - author_key: review permalink, the deduplication key (UNIQUE)
        - title / message: review text
        - rate: star count as text, "0" for unrated
        - updated_at: review date shown on the storefront
        """

        try:
            with self._connect() as conn:
                conn.execute(
                    f"""
                    CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
                        id INTEGER PRIMARY KEY,
                        author TEXT,
                        author_key TEXT NOT NULL UNIQUE,
                        title TEXT,
                        message TEXT,
                        rate TEXT,
                        updated_at TIMESTAMP
                    )
                    """
                )
        except sqlite3.Error as exc:
            raise PersistenceError(f"Cannot create {TABLE_NAME} table: {exc}") from exc

    def exists(self, author_key: str) -> bool:
        """Check if a review with this permalink has already been stored."""

        try:
            with self._connect() as conn:
                row = conn.execute(
                    f"SELECT 1 FROM {TABLE_NAME} WHERE author_key = ?",
                    (author_key,),
                ).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Lookup of {author_key} failed: {exc}") from exc
        return row is not None

    @staticmethod
    def _next_id(conn: sqlite3.Connection) -> int:
        row = conn.execute(f"SELECT MAX(id) AS max_id FROM {TABLE_NAME}").fetchone()
        return int(row["max_id"] or 0) + 1

    def next_id(self) -> int:
        """Return one more than the highest stored id, or 1 when empty."""

        try:
            with self._connect() as conn:
                return self._next_id(conn)
        except sqlite3.Error as exc:
            raise PersistenceError(f"Id allocation failed: {exc}") from exc

    def insert(self, record: ReviewRecord) -> ReviewRecord:
        """Persist a review and return it with its allocated id.

        A second insert of the same author_key violates the UNIQUE constraint
        and surfaces as PersistenceError.
        """

        try:
            with self._connect() as conn:
                review_id = self._next_id(conn)
                conn.execute(
                    f"""
                    INSERT INTO {TABLE_NAME} (
                        id,
                        author,
                        author_key,
                        title,
                        message,
                        rate,
                        updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        review_id,
                        record.author,
                        record.author_key,
                        record.title,
                        record.body,
                        str(int(record.rate)),
                        record.updated_at.isoformat(),
                    ),
                )
        except sqlite3.Error as exc:
            raise PersistenceError(f"Insert of {record.author_key} failed: {exc}") from exc
        return dataclasses.replace(record, id=review_id)

    def list_recent(self, limit: int = 10) -> List[ReviewRecord]:
        """Return the most recently stored reviews, highest id first."""

        try:
            with self._connect() as conn:
                rows = conn.execute(
                    f"""
                    SELECT id, author, author_key, title, message, rate, updated_at
                    FROM {TABLE_NAME}
                    ORDER BY id DESC
                    LIMIT ?
                    """,
                    (limit,),
                ).fetchall()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Listing reviews failed: {exc}") from exc
        return [_row_to_record(row) for row in rows]


def _row_to_record(row: sqlite3.Row) -> ReviewRecord:
    raw_rate = row["rate"] or "0"
    try:
        rate = Rating(int(raw_rate))
    except ValueError:
        rate = Rating.UNRATED
    return ReviewRecord(
        id=int(row["id"]),
        author=row["author"] or "",
        author_key=row["author_key"],
        title=row["title"] or "",
        body=row["message"] or "",
        rate=rate,
        updated_at=date.fromisoformat(str(row["updated_at"])[:10]),
    )
