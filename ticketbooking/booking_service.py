"""Booking of tickets and the booking lifecycle."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import UUID

from .interfaces import BookingRepositoryProtocol, EventRepositoryProtocol
from .models import Booking, BookingStatus, CreateBookingRequest


class BookingError(Exception):
    """A booking request could not be carried out."""


def _parse_id(value: str, what: str) -> UUID:
    try:
        return UUID(value)
    except (ValueError, TypeError, AttributeError) as exc:
        raise BookingError(f"invalid {what} ID: {exc}") from exc


class BookingService:
    """Creates bookings and moves them between states."""

    def __init__(
        self,
        booking_repo: BookingRepositoryProtocol,
        event_repo: EventRepositoryProtocol,
        payment_deadline: int,
    ) -> None:
        self._bookings = booking_repo
        self._events = event_repo
        self._payment_deadline = timedelta(minutes=payment_deadline)

    def create_booking(self, request: CreateBookingRequest) -> Booking:
        """Reserve tickets for a future event and record a pending booking."""
        user_id = _parse_id(request.user_id, "user")
        event_id = _parse_id(request.event_id, "event")

        try:
            event = self._events.get_by_id(event_id)
        except Exception as exc:
            raise BookingError(f"event not found: {exc}") from exc

        now = datetime.now(timezone.utc)
        if event.date_time.astimezone(timezone.utc) < now:
            raise BookingError("cannot book tickets for past events")

        try:
            self._events.reserve_tickets(event_id, request.quantity)
        except Exception as exc:
            raise BookingError(f"failed to reserve tickets: {exc}") from exc

        booking = Booking(
            user_id=user_id,
            event_id=event_id,
            quantity=request.quantity,
            status=BookingStatus.PENDING,
            total_amount=request.quantity * event.ticket_price,
            payment_deadline=datetime.now(timezone.utc) + self._payment_deadline,
        )
        try:
            self._bookings.create_with_transaction(booking)
        except Exception as exc:
            raise BookingError(f"failed to create booking: {exc}") from exc
        return booking

    def get_booking(self, booking_id: UUID) -> Booking:
        return self._bookings.get_by_id(booking_id)

    def get_user_bookings(self, user_id: UUID) -> list[Booking]:
        return self._bookings.get_by_user_id(user_id)

    def _transition(self, booking_id: UUID, status: BookingStatus, verb: str) -> None:
        booking = self._bookings.get_by_id(booking_id)
        if booking.status != BookingStatus.PENDING:
            raise BookingError(f"only pending bookings can be {verb}")
        self._bookings.update_status(booking_id, status)

    def cancel_booking(self, booking_id: UUID) -> None:
        """Cancel a pending booking."""
        self._transition(booking_id, BookingStatus.CANCELLED, "cancelled")

    def confirm_booking(self, booking_id: UUID) -> None:
        """Confirm a pending booking."""
        self._transition(booking_id, BookingStatus.CONFIRMED, "confirmed")