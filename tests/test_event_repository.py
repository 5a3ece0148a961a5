import uuid
from datetime import datetime, timedelta, timezone

import pytest

from ticketbooking.booking_repository import BookingRepository
from ticketbooking.database import connect, run_migrations
from ticketbooking.event_repository import EventRepository, InsufficientTicketsError
from ticketbooking.models import Booking, BookingStatus, Event, NotFoundError, User
from ticketbooking.user_repository import UserRepository


@pytest.fixture
def connection():
    conn = connect(":memory:")
    run_migrations(conn)
    yield conn
    conn.close()


@pytest.fixture
def events(connection):
    return EventRepository(connection)


@pytest.fixture
def bookings(connection):
    return BookingRepository(connection)


@pytest.fixture
def user(connection):
    return UserRepository(connection).create(User(name="Ann", email="ann@example.com"))


def _event(events, name="Concert", tickets=10, price=25.0, when=None):
    when = when or datetime(2030, 1, 1, 20, 0, tzinfo=timezone.utc)
    return events.create(
        Event(name=name, description="live", date_time=when, total_tickets=tickets, ticket_price=price)
    )


def _book(bookings, user, event, quantity, status):
    return bookings.create(
        Booking(
            user_id=user.id,
            event_id=event.id,
            quantity=quantity,
            status=status,
            total_amount=quantity * event.ticket_price,
        )
    )


def test_create_and_get_round_trip(events):
    created = _event(events)
    fetched = events.get_by_id(created.id)
    assert fetched == created
    assert created.created_at == created.updated_at


def test_get_missing_raises(events):
    with pytest.raises(NotFoundError, match="event not found"):
        events.get_by_id(uuid.uuid4())


def test_get_all_ordered_by_date(events):
    base = datetime(2030, 1, 1, tzinfo=timezone.utc)
    late = _event(events, name="late", when=base + timedelta(days=2))
    early = _event(events, name="early", when=base)
    assert [e.id for e in events.get_all()] == [early.id, late.id]


def test_update_persists(events):
    event = _event(events)
    event.name = "Renamed"
    event.total_tickets = 42
    events.update(event)
    fetched = events.get_by_id(event.id)
    assert fetched.name == "Renamed"
    assert fetched.total_tickets == 42
    assert fetched.updated_at >= fetched.created_at


def test_update_missing_raises(events):
    ghost = Event(
        id=uuid.uuid4(),
        name="x",
        date_time=datetime(2030, 1, 1, tzinfo=timezone.utc),
        total_tickets=1,
        ticket_price=1.0,
    )
    with pytest.raises(NotFoundError):
        events.update(ghost)


def test_delete(events):
    event = _event(events)
    events.delete(event.id)
    with pytest.raises(NotFoundError):
        events.get_by_id(event.id)
    with pytest.raises(NotFoundError):
        events.delete(event.id)


def test_statistics_count_confirmed_only(events, bookings, user):
    event = _event(events)
    confirmed = _book(bookings, user, event, 3, BookingStatus.CONFIRMED)
    _book(bookings, user, event, 2, BookingStatus.PENDING)
    _book(bookings, user, event, 4, BookingStatus.CANCELLED)
    stats = events.get_statistics(event.id)
    assert stats.event_id == event.id
    assert stats.total_sold == confirmed.quantity
    assert stats.estimated_revenue == confirmed.total_amount
    assert stats.available_tickets == event.total_tickets - confirmed.quantity


def test_statistics_without_bookings(events):
    event = _event(events)
    stats = events.get_statistics(event.id)
    assert stats.total_sold == 0
    assert stats.available_tickets == event.total_tickets


def test_statistics_missing_event(events):
    with pytest.raises(NotFoundError):
        events.get_statistics(uuid.uuid4())


def test_available_tickets_excludes_cancelled(events, bookings, user):
    event = _event(events, tickets=10)
    _book(bookings, user, event, 4, BookingStatus.CANCELLED)
    assert events.get_available_tickets(event.id) == event.total_tickets
    _book(bookings, user, event, 10, BookingStatus.PENDING)
    assert events.get_available_tickets(event.id) == 0


def test_available_tickets_missing_event(events):
    with pytest.raises(NotFoundError):
        events.get_available_tickets(uuid.uuid4())


def test_reserve_within_capacity(events, bookings, user):
    event = _event(events, tickets=10)
    events.reserve_tickets(event.id, 10)
    assert events.get_available_tickets(event.id) == 10


def test_reserve_insufficient(events, bookings, user):
    event = _event(events, tickets=10)
    _book(bookings, user, event, 10, BookingStatus.CONFIRMED)
    with pytest.raises(InsufficientTicketsError, match="insufficient tickets available") as info:
        events.reserve_tickets(event.id, 1)
    assert info.value.available == 0
    assert info.value.requested == 1
    assert str(info.value) == "insufficient tickets available. Available: 0, Requested: 1"


def test_reserve_missing_event(events):
    with pytest.raises(NotFoundError):
        events.reserve_tickets(uuid.uuid4(), 1)