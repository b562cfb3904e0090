"""
SQLite backed document store for blog posts.

Each post is stored as a JSON document in the ``posts`` table, keyed by
an opaque string id generated on insert.  ``PostStore`` is an explicit
handle: whoever calls ``open`` owns the connection and is responsible
for calling ``close``.  The application builds its own store at
startup unless one is injected, and the test suite opens a store once
per session and shares it with the app.

The connection is shared between threads (the ASGI worker and the
caller), so every statement runs under a re‑entrant lock and inside a
transaction that is committed on success and rolled back on failure.
Driver failures are re‑raised as ``StoreError``.
"""

from __future__ import annotations

import json
import logging
import os
import re
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional

from .errors import StoreError, ValidationError

MEMORY_DATABASE = ":memory:"

_POST_ID_RE = re.compile(r"^[0-9a-f]{32}$")

# Keys held in dedicated columns rather than in the JSON document.
_COLUMN_KEYS = ("id", "created")

_SCHEMA = """
CREATE TABLE IF NOT EXISTS posts (
    id TEXT PRIMARY KEY,
    created TEXT NOT NULL,
    document TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_posts_created ON posts(created);
"""


def get_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    ``:memory:`` and absolute paths are returned as is; relative paths
    are resolved against the project root.
    """
    if database_url == MEMORY_DATABASE or os.path.isabs(database_url):
        return database_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / database_url).resolve())


def new_post_id() -> str:
    return uuid.uuid4().hex


def is_valid_post_id(value: Any) -> bool:
    """Return ``True`` if ``value`` looks like an id issued by the store."""
    return isinstance(value, str) and bool(_POST_ID_RE.match(value))


def format_timestamp(value: datetime | str | None = None) -> str:
    """Normalise a timestamp to an ISO‑8601 UTC string.

    Naive datetimes are taken to be UTC.  ``None`` means "now".  The
    fixed format keeps string ordering in SQLite chronological.  Raises
    ``ValueError`` for strings that are not ISO‑8601 and for values that
    fall outside the representable range once shifted to UTC.
    """
    if value is None:
        value = datetime.now(timezone.utc)
    elif isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    try:
        value = value.astimezone(timezone.utc)
    except OverflowError as exc:
        raise ValueError(f"Timestamp {value.isoformat()} is out of range in UTC") from exc
    return value.isoformat(timespec="microseconds")


class PostStore:
    """Handle on the ``posts`` collection."""

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url
        self.path = get_database_path(database_url)
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()
        self._logger = logging.getLogger(__name__)

    # -- lifecycle -------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self) -> "PostStore":
        """Connect to the database and create the schema if needed."""
        with self._lock:
            if self._conn is not None:
                return self
            try:
                conn = sqlite3.connect(self.path, check_same_thread=False)
                conn.row_factory = sqlite3.Row
                conn.executescript(_SCHEMA)
            except sqlite3.Error as exc:
                raise StoreError(f"Could not open post store at {self.path}: {exc}") from exc
            self._conn = conn
        self._logger.info("Opened post store at %s", self.path)
        return self

    def close(self) -> None:
        with self._lock:
            if self._conn is None:
                return
            self._conn.close()
            self._conn = None
        self._logger.info("Closed post store at %s", self.path)

    def __enter__(self) -> "PostStore":
        return self.open()

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor inside a transaction on the shared connection."""
        with self._lock:
            conn = self._conn
            if conn is None:
                raise StoreError("Post store is not open")
            cursor = conn.cursor()
            try:
                yield cursor
                conn.commit()
            except sqlite3.Error as exc:
                conn.rollback()
                raise StoreError(f"Post store operation failed: {exc}") from exc
            except Exception:
                conn.rollback()
                raise
            finally:
                cursor.close()

    # -- serialisation ---------------------------------------------------

    @staticmethod
    def _prepare(doc: dict[str, Any]) -> dict[str, Any]:
        prepared = {k: v for k, v in doc.items() if k not in _COLUMN_KEYS}
        prepared["id"] = new_post_id()
        try:
            prepared["created"] = format_timestamp(doc.get("created"))
        except ValueError as exc:
            raise ValidationError(f"Invalid created timestamp: {exc}") from exc
        return prepared

    @staticmethod
    def _encode(doc: dict[str, Any]) -> str:
        return json.dumps({k: v for k, v in doc.items() if k not in _COLUMN_KEYS})

    @staticmethod
    def _row_to_doc(row: sqlite3.Row) -> dict[str, Any]:
        doc = json.loads(row["document"])
        doc["id"] = row["id"]
        doc["created"] = row["created"]
        return doc

    # -- operations ------------------------------------------------------

    def insert_one(self, doc: dict[str, Any]) -> dict[str, Any]:
        """Store a single post and return it with ``id`` and ``created`` set."""
        return self.insert_many([doc])[0]

    def insert_many(self, docs: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
        """Store several posts in one transaction; either all persist or none."""
        prepared = [self._prepare(doc) for doc in docs]
        with self._cursor() as cursor:
            cursor.executemany(
                "INSERT INTO posts (id, created, document) VALUES (?, ?, ?)",
                [(doc["id"], doc["created"], self._encode(doc)) for doc in prepared],
            )
        self._logger.debug("Inserted %d post(s)", len(prepared))
        return prepared

    def find_all(self) -> list[dict[str, Any]]:
        """Return every stored post, newest first."""
        with self._cursor() as cursor:
            rows = cursor.execute(
                "SELECT id, created, document FROM posts ORDER BY created DESC, id ASC"
            ).fetchall()
        return [self._row_to_doc(row) for row in rows]

    def find_by_id(self, post_id: str) -> Optional[dict[str, Any]]:
        with self._cursor() as cursor:
            row = cursor.execute(
                "SELECT id, created, document FROM posts WHERE id = ?", (post_id,)
            ).fetchone()
        return self._row_to_doc(row) if row else None

    def find_one(self) -> Optional[dict[str, Any]]:
        """Return an arbitrary stored post, or ``None`` if the collection is empty."""
        with self._cursor() as cursor:
            row = cursor.execute("SELECT id, created, document FROM posts LIMIT 1").fetchone()
        return self._row_to_doc(row) if row else None

    def update_one(self, post_id: str, fields: dict[str, Any]) -> Optional[dict[str, Any]]:
        """Overwrite the given fields of a post and return the result.

        ``id`` and ``created`` are never changed.  Returns ``None`` when
        no post has ``post_id``.
        """
        changes = {k: v for k, v in fields.items() if k not in _COLUMN_KEYS}
        with self._cursor() as cursor:
            row = cursor.execute(
                "SELECT id, created, document FROM posts WHERE id = ?", (post_id,)
            ).fetchone()
            if row is None:
                return None
            doc = self._row_to_doc(row)
            doc.update(changes)
            cursor.execute(
                "UPDATE posts SET document = ? WHERE id = ?",
                (self._encode(doc), post_id),
            )
        return doc

    def delete_one(self, post_id: str) -> bool:
        with self._cursor() as cursor:
            cursor.execute("DELETE FROM posts WHERE id = ?", (post_id,))
            deleted = cursor.rowcount
        return deleted > 0

    def count(self) -> int:
        with self._cursor() as cursor:
            row = cursor.execute("SELECT COUNT(*) AS total FROM posts").fetchone()
        return row["total"]

    def drop(self) -> int:
        """Remove every post.  Returns the number of posts removed."""
        with self._cursor() as cursor:
            cursor.execute("DELETE FROM posts")
            removed = cursor.rowcount
        self._logger.debug("Dropped %d post(s)", removed)
        return removed
