"""SQLite connection set-up and schema migrations."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from uuid import UUID

logger = logging.getLogger(__name__)

_MEMORY = ":memory:"
_SCHEMA_VERSION = 1

_SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id UUID TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT NOT NULL UNIQUE,
    created_at TIMESTAMP TEXT NOT NULL,
    updated_at TIMESTAMP TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS events (
    id UUID TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    date_time TIMESTAMP TEXT NOT NULL,
    total_tickets INTEGER NOT NULL CHECK (total_tickets > 0),
    ticket_price REAL NOT NULL CHECK (ticket_price >= 0),
    created_at TIMESTAMP TEXT NOT NULL,
    updated_at TIMESTAMP TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS bookings (
    id UUID TEXT PRIMARY KEY,
    user_id UUID TEXT NOT NULL REFERENCES users (id) ON DELETE CASCADE,
    event_id UUID TEXT NOT NULL REFERENCES events (id) ON DELETE CASCADE,
    quantity INTEGER NOT NULL CHECK (quantity > 0),
    status TEXT NOT NULL DEFAULT 'PENDING'
        CHECK (status IN ('PENDING', 'CONFIRMED', 'CANCELLED')),
    total_amount REAL NOT NULL,
    payment_deadline TIMESTAMP TEXT,
    created_at TIMESTAMP TEXT NOT NULL,
    updated_at TIMESTAMP TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_bookings_user_id ON bookings (user_id);
CREATE INDEX IF NOT EXISTS idx_bookings_event_id ON bookings (event_id);
CREATE INDEX IF NOT EXISTS idx_bookings_status_deadline ON bookings (status, payment_deadline);
CREATE INDEX IF NOT EXISTS idx_events_date_time ON events (date_time);
"""


def _adapt_datetime(value: datetime) -> str:
    # A fixed-width UTC form keeps textual comparison and ordering correct.
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f+00:00")


def _convert_timestamp(raw: bytes) -> datetime:
    return datetime.fromisoformat(raw.decode())


def _convert_uuid(raw: bytes) -> UUID:
    return UUID(raw.decode())


sqlite3.register_adapter(datetime, _adapt_datetime)
sqlite3.register_adapter(UUID, str)
sqlite3.register_converter("TIMESTAMP", _convert_timestamp)
sqlite3.register_converter("UUID", _convert_uuid)


def _database_path(database_url: str) -> str:
    if "://" not in database_url:
        return database_url
    scheme, rest = database_url.split("://", 1)
    if scheme.lower() not in ("sqlite", "sqlite3"):
        raise ValueError(f"unsupported database URL scheme: {scheme!r}")
    rest = rest.split("?", 1)[0]
    if rest.startswith("/"):
        rest = rest[1:]
    return rest or _MEMORY


def connect(database_url: str) -> sqlite3.Connection:
    """Open the database named by ``database_url`` and check that it answers."""
    connection = sqlite3.connect(
        _database_path(database_url),
        detect_types=sqlite3.PARSE_DECLTYPES,
        check_same_thread=False,
    )
    try:
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON")
        connection.execute("SELECT 1").fetchone()
    except sqlite3.Error:
        connection.close()
        raise
    return connection


def run_migrations(connection: sqlite3.Connection) -> None:
    """Bring the schema up to date; a no-op when it already is."""
    (version,) = connection.execute("PRAGMA user_version").fetchone()
    if version < _SCHEMA_VERSION:
        connection.executescript(_SCHEMA + f"PRAGMA user_version = {_SCHEMA_VERSION};")
    logger.info("Database migrations completed successfully")