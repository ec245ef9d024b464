from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Sequence

EVENTS_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS events (
    position INTEGER PRIMARY KEY,
    id TEXT NOT NULL UNIQUE,
    json TEXT NOT NULL
);
"""

# Seconds a writer waits for the lock held by the backup job or another request.
BUSY_TIMEOUT_SECONDS = 5.0

EventRow = tuple[int, str, str]


def _prepare_db_path(db_path: Path) -> Path:
    normalized = Path(db_path)
    normalized.parent.mkdir(parents=True, exist_ok=True)
    return normalized


def connect(db_path: Path) -> sqlite3.Connection:
    normalized = _prepare_db_path(db_path)
    connection = sqlite3.connect(normalized, timeout=BUSY_TIMEOUT_SECONDS)
    connection.row_factory = sqlite3.Row
    connection.execute("PRAGMA journal_mode = WAL;")
    connection.execute("PRAGMA synchronous = NORMAL;")
    return connection


def ensure_schema(connection: sqlite3.Connection) -> None:
    connection.executescript(EVENTS_TABLE_SCHEMA)
    connection.commit()


@contextmanager
def transaction(connection: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Hold the write lock for the block; commit on success, roll back on any error."""
    connection.execute("BEGIN IMMEDIATE;")
    try:
        yield connection
    except BaseException:
        connection.rollback()
        raise
    connection.commit()


@contextmanager
def open_db(db_path: Path, *, write: bool = False) -> Iterator[sqlite3.Connection]:
    """Open the events database with its schema in place.

    With ``write=True`` the block runs inside a single immediate transaction,
    so a replaced collection is either stored whole or not at all.
    """
    connection = connect(db_path)
    try:
        ensure_schema(connection)
        if write:
            with transaction(connection):
                yield connection
        else:
            yield connection
    finally:
        connection.close()


def fetch_event_rows(connection: sqlite3.Connection) -> list[str]:
    rows = connection.execute("SELECT json FROM events ORDER BY position ASC").fetchall()
    return [str(row["json"]) for row in rows]


def replace_event_rows(connection: sqlite3.Connection, rows: Sequence[EventRow]) -> None:
    connection.execute("DELETE FROM events")
    connection.executemany("INSERT INTO events (position, id, json) VALUES (?, ?, ?)", rows)


def initialize_database(db_path: Path) -> None:
    with open_db(db_path):
        return
