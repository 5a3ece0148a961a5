"""Structural types the services expect of their repositories."""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from .models import Booking, BookingStatus, Event, EventStatistics, User


class EventRepositoryProtocol(Protocol):
    def create(self, event: Event) -> Event: ...

    def get_by_id(self, event_id: UUID) -> Event: ...

    def get_all(self) -> list[Event]: ...

    def update(self, event: Event) -> Event: ...

    def delete(self, event_id: UUID) -> None: ...

    def get_statistics(self, event_id: UUID) -> EventStatistics: ...

    def get_available_tickets(self, event_id: UUID) -> int: ...

    def reserve_tickets(self, event_id: UUID, quantity: int) -> None: ...


class UserRepositoryProtocol(Protocol):
    def create(self, user: User) -> User: ...

    def get_by_id(self, user_id: UUID) -> User: ...

    def get_by_email(self, email: str) -> User: ...

    def get_all(self) -> list[User]: ...

    def update(self, user: User) -> User: ...

    def delete(self, user_id: UUID) -> None: ...


class BookingRepositoryProtocol(Protocol):
    def create(self, booking: Booking) -> Booking: ...

    def get_by_id(self, booking_id: UUID) -> Booking: ...

    def get_by_user_id(self, user_id: UUID) -> list[Booking]: ...

    def update_status(self, booking_id: UUID, status: BookingStatus) -> None: ...

    def get_pending_bookings(self) -> list[Booking]: ...

    def get_expired_bookings(self) -> list[Booking]: ...

    def create_with_transaction(self, booking: Booking) -> Booking: ...