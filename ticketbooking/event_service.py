"""Business operations on events."""

from __future__ import annotations

from dataclasses import fields
from uuid import UUID

from .interfaces import EventRepositoryProtocol
from .models import CreateEventRequest, Event, EventStatistics, UpdateEventRequest


class EventService:
    """Creates, reads, edits and removes events."""

    def __init__(self, event_repo: EventRepositoryProtocol) -> None:
        self._events = event_repo

    def create_event(self, request: CreateEventRequest) -> Event:
        """Store a new event built from ``request``."""
        event = Event(
            name=request.name,
            description=request.description,
            date_time=request.date_time,
            total_tickets=request.total_tickets,
            ticket_price=request.ticket_price,
        )
        self._events.create(event)
        return event

    def get_event(self, event_id: UUID) -> Event:
        return self._events.get_by_id(event_id)

    def get_events(self) -> list[Event]:
        return self._events.get_all()

    def update_event(self, event_id: UUID, request: UpdateEventRequest) -> Event:
        """Apply the fields given in ``request`` to an existing event."""
        event = self._events.get_by_id(event_id)
        for field in fields(request):
            value = getattr(request, field.name)
            if value is not None:
                setattr(event, field.name, value)
        self._events.update(event)
        return event

    def delete_event(self, event_id: UUID) -> None:
        self._events.delete(event_id)

    def get_event_statistics(self, event_id: UUID) -> EventStatistics:
        return self._events.get_statistics(event_id)