"""Persistence of bookings."""

from __future__ import annotations

import sqlite3
import uuid
from datetime import datetime, timezone

from .models import Booking, BookingStatus, NotFoundError

_SELECT = (
    "SELECT id, user_id, event_id, quantity, status, total_amount, payment_deadline,"
    " created_at, updated_at FROM bookings"
)


def _row_to_booking(row: sqlite3.Row) -> Booking:
    return Booking(
        id=row["id"],
        user_id=row["user_id"],
        event_id=row["event_id"],
        quantity=row["quantity"],
        status=BookingStatus(row["status"]),
        total_amount=row["total_amount"],
        payment_deadline=row["payment_deadline"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class BookingRepository:
    """Stores bookings in the ``bookings`` table."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection

    def _insert(self, booking: Booking) -> Booking:
        booking_id = uuid.uuid4()
        now = datetime.now(timezone.utc)
        self._connection.execute(
            "INSERT INTO bookings (id, user_id, event_id, quantity, status, total_amount,"
            " payment_deadline, created_at, updated_at)"
            " VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                booking_id,
                booking.user_id,
                booking.event_id,
                booking.quantity,
                BookingStatus(booking.status).value,
                booking.total_amount,
                booking.payment_deadline,
                now,
                now,
            ),
        )
        booking.id, booking.created_at, booking.updated_at = booking_id, now, now
        return booking

    def create(self, booking: Booking) -> Booking:
        """Insert ``booking``, filling in its id and timestamps."""
        with self._connection:
            return self._insert(booking)

    def create_with_transaction(self, booking: Booking) -> Booking:
        """Insert ``booking`` inside an explicit transaction."""
        with self._connection:
            if not self._connection.in_transaction:
                self._connection.execute("BEGIN")
            return self._insert(booking)

    def get_by_id(self, booking_id: uuid.UUID) -> Booking:
        row = self._connection.execute(f"{_SELECT} WHERE id = ?", (booking_id,)).fetchone()
        if row is None:
            raise NotFoundError("booking not found")
        return _row_to_booking(row)

    def get_by_user_id(self, user_id: uuid.UUID) -> list[Booking]:
        """Bookings of one user, newest first."""
        rows = self._connection.execute(
            f"{_SELECT} WHERE user_id = ? ORDER BY created_at DESC", (user_id,)
        )
        return [_row_to_booking(row) for row in rows]

    def update_status(self, booking_id: uuid.UUID, status: BookingStatus) -> None:
        now = datetime.now(timezone.utc)
        with self._connection:
            cursor = self._connection.execute(
                "UPDATE bookings SET status = ?, updated_at = ? WHERE id = ?",
                (BookingStatus(status).value, now, booking_id),
            )
        if cursor.rowcount == 0:
            raise NotFoundError("booking not found")

    def get_pending_bookings(self) -> list[Booking]:
        """Pending bookings that have a deadline, earliest deadline first."""
        rows = self._connection.execute(
            f"{_SELECT} WHERE status = 'PENDING' AND payment_deadline IS NOT NULL"
            " ORDER BY payment_deadline ASC"
        )
        return [_row_to_booking(row) for row in rows]

    def get_expired_bookings(self) -> list[Booking]:
        """Pending bookings whose deadline has passed, earliest deadline first."""
        rows = self._connection.execute(
            f"{_SELECT} WHERE status = 'PENDING' AND payment_deadline < ?"
            " ORDER BY payment_deadline ASC",
            (datetime.now(timezone.utc),),
        )
        return [_row_to_booking(row) for row in rows]