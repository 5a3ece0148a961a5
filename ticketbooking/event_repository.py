"""Persistence of events, their statistics and ticket availability."""

from __future__ import annotations

import sqlite3
import uuid
from datetime import datetime, timezone

from .models import Event, EventStatistics, NotFoundError

_SELECT = (
    "SELECT id, name, description, date_time, total_tickets, ticket_price,"
    " created_at, updated_at FROM events"
)

_RESERVED = "('PENDING', 'CONFIRMED')"


class InsufficientTicketsError(Exception):
    """An event has fewer free tickets than were requested."""

    def __init__(self, available: int, requested: int) -> None:
        super().__init__(
            f"insufficient tickets available. Available: {available}, Requested: {requested}"
        )
        self.available = available
        self.requested = requested


def _row_to_event(row: sqlite3.Row) -> Event:
    return Event(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        date_time=row["date_time"],
        total_tickets=row["total_tickets"],
        ticket_price=row["ticket_price"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class EventRepository:
    """Stores events in the ``events`` table."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection

    def create(self, event: Event) -> Event:
        """Insert ``event``, filling in its id and timestamps."""
        event_id = uuid.uuid4()
        now = datetime.now(timezone.utc)
        with self._connection:
            self._connection.execute(
                "INSERT INTO events (id, name, description, date_time, total_tickets,"
                " ticket_price, created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    event_id,
                    event.name,
                    event.description,
                    event.date_time,
                    event.total_tickets,
                    event.ticket_price,
                    now,
                    now,
                ),
            )
        event.id, event.created_at, event.updated_at = event_id, now, now
        return event

    def get_by_id(self, event_id: uuid.UUID) -> Event:
        row = self._connection.execute(f"{_SELECT} WHERE id = ?", (event_id,)).fetchone()
        if row is None:
            raise NotFoundError("event not found")
        return _row_to_event(row)

    def get_all(self) -> list[Event]:
        """All events, soonest first."""
        rows = self._connection.execute(f"{_SELECT} ORDER BY date_time ASC")
        return [_row_to_event(row) for row in rows]

    def update(self, event: Event) -> Event:
        """Save every editable field of ``event`` and refresh its update time."""
        now = datetime.now(timezone.utc)
        with self._connection:
            cursor = self._connection.execute(
                "UPDATE events SET name = ?, description = ?, date_time = ?,"
                " total_tickets = ?, ticket_price = ?, updated_at = ? WHERE id = ?",
                (
                    event.name,
                    event.description,
                    event.date_time,
                    event.total_tickets,
                    event.ticket_price,
                    now,
                    event.id,
                ),
            )
        if cursor.rowcount == 0:
            raise NotFoundError("event not found")
        event.updated_at = now
        return event

    def delete(self, event_id: uuid.UUID) -> None:
        with self._connection:
            cursor = self._connection.execute("DELETE FROM events WHERE id = ?", (event_id,))
        if cursor.rowcount == 0:
            raise NotFoundError("event not found")

    def get_statistics(self, event_id: uuid.UUID) -> EventStatistics:
        """Tickets sold and revenue from confirmed bookings of one event."""
        row = self._connection.execute(
            "SELECT e.total_tickets AS total_tickets,"
            " COALESCE(SUM(CASE WHEN b.status = 'CONFIRMED' THEN b.quantity ELSE 0 END), 0)"
            " AS total_sold,"
            " COALESCE(SUM(CASE WHEN b.status = 'CONFIRMED' THEN b.total_amount ELSE 0 END), 0)"
            " AS estimated_revenue"
            " FROM events e LEFT JOIN bookings b ON e.id = b.event_id"
            " WHERE e.id = ? GROUP BY e.id, e.total_tickets",
            (event_id,),
        ).fetchone()
        if row is None:
            raise NotFoundError("event not found")
        total_sold = int(row["total_sold"])
        return EventStatistics(
            event_id=event_id,
            total_sold=total_sold,
            estimated_revenue=float(row["estimated_revenue"]),
            available_tickets=row["total_tickets"] - total_sold,
        )

    def get_available_tickets(self, event_id: uuid.UUID) -> int:
        """Tickets not held by pending or confirmed bookings."""
        row = self._connection.execute(
            "SELECT e.total_tickets - COALESCE(SUM(CASE WHEN b.status IN "
            f"{_RESERVED} THEN b.quantity ELSE 0 END), 0) AS available_tickets"
            " FROM events e LEFT JOIN bookings b ON e.id = b.event_id"
            " WHERE e.id = ? GROUP BY e.total_tickets",
            (event_id,),
        ).fetchone()
        if row is None:
            raise NotFoundError("event not found")
        return int(row["available_tickets"])

    def reserve_tickets(self, event_id: uuid.UUID, quantity: int) -> None:
        """Check, under a write lock, that ``quantity`` tickets are free."""
        with self._connection:
            if not self._connection.in_transaction:
                self._connection.execute("BEGIN IMMEDIATE")
            row = self._connection.execute(
                "SELECT total_tickets FROM events WHERE id = ?", (event_id,)
            ).fetchone()
            if row is None:
                raise NotFoundError("event not found")
            (reserved,) = self._connection.execute(
                "SELECT COALESCE(SUM(CASE WHEN status IN "
                f"{_RESERVED} THEN quantity ELSE 0 END), 0)"
                " FROM bookings WHERE event_id = ?",
                (event_id,),
            ).fetchone()
            available = row["total_tickets"] - int(reserved)
            if available < quantity:
                raise InsufficientTicketsError(available, quantity)