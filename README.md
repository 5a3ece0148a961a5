# ticketbooking

A small HTTP service for selling tickets to events. It keeps events, users
and bookings in an SQLite database, queues payments through Redis and
confirms them in the background, and cancels bookings whose payment deadline
has passed.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Running the server

```
ticketbooking
ticketbooking --port 9000
```

The same entry point is `ticketbooking.app.main`, which can also be run with
`python -m ticketbooking.app`. It returns exit status 1 if the port is not a
number, the database cannot be opened, the schema cannot be created, or the
server cannot start.

The server reads its settings from the environment:

| Variable           | Meaning                                         | Default                       |
|--------------------|-------------------------------------------------|-------------------------------|
| `DATABASE_URL`     | SQLite database: `sqlite:///path`, `sqlite3:///path` or a plain file path | `sqlite:///ticket_booking.db` |
| `REDIS_URL`        | Redis address as `host:port`, `host`, or a `redis://` URL | `localhost:6379`      |
| `PAYMENT_DEADLINE` | minutes a new booking may stay unpaid           | `15`                          |
| `PORT`             | port the HTTP server listens on (`--port` wins) | `8080`                        |

A value of `PAYMENT_DEADLINE` that is not a whole number is ignored and the
default is used. A `DATABASE_URL` with any scheme other than `sqlite` or
`sqlite3` is refused; `sqlite://` with no path opens an in-memory database.

On start the database schema is created if it is not there yet, and two
background threads run alongside the HTTP server until it stops:

* the payment processor, which takes payment jobs off the `payment_queue`
  list in Redis and confirms the booking each job belongs to;
* the expiry processor, which once a minute cancels pending bookings whose
  payment deadline has passed.

## HTTP API

All routes live under `/api/v1`. Request and response bodies are JSON;
timestamps are ISO 8601 strings and identifiers are UUID strings. Every
response carries permissive CORS headers, and `OPTIONS` requests are
answered with `204 No Content`. Errors are answered with a body of the form
`{"error": "..."}`.

### Events

| Method   | Path                          | Purpose                              |
|----------|-------------------------------|--------------------------------------|
| `GET`    | `/events`                     | list events, earliest first          |
| `GET`    | `/events/<id>`                | one event                            |
| `POST`   | `/events`                     | create an event (`201`)              |
| `PUT`    | `/events/<id>`                | change some fields of an event       |
| `DELETE` | `/events/<id>`                | delete an event (`204`)              |
| `GET`    | `/events/<id>/statistics`     | tickets sold, revenue, tickets left  |

Creating an event:

```json
{
  "name": "Spring Concert",
  "description": "Open air",
  "date_time": "2030-05-01T19:00:00Z",
  "total_tickets": 500,
  "ticket_price": 25.0
}
```

`name`, `date_time`, `total_tickets` and `ticket_price` are required;
`description` defaults to an empty string. `date_time` must be an RFC 3339
timestamp with a time zone (`Z` or `+hh:mm`). `total_tickets` must be a whole
number of at least 1. `ticket_price` must be a positive number: a price of
`0` is treated as missing. An update takes any subset of these fields; there
`total_tickets` must still be at least 1 and `ticket_price` not negative.

The statistics of an event count only confirmed bookings:

```json
{"event_id": "...", "total_sold": 4, "estimated_revenue": 100.0, "available_tickets": 496}
```

### Users

| Method   | Path            | Purpose                  |
|----------|-----------------|--------------------------|
| `GET`    | `/users`        | list users, newest first |
| `GET`    | `/users/<id>`   | one user                 |
| `POST`   | `/users`        | create a user (`201`)    |
| `PUT`    | `/users/<id>`   | change name or e-mail    |
| `DELETE` | `/users/<id>`   | delete a user (`204`)    |

```json
{"name": "Ada", "email": "ada@example.com"}
```

Both fields are required when creating a user, and the e-mail address must
look like one. E-mail addresses are unique.

### Bookings

| Method | Path                          | Purpose                              |
|--------|-------------------------------|--------------------------------------|
| `POST` | `/bookings`                   | book tickets and queue payment (`201`) |
| `GET`  | `/bookings/<id>`              | one booking                          |
| `PUT`  | `/bookings/<id>/cancel`       | cancel a pending booking             |
| `GET`  | `/bookings/user/<user_id>`    | a user's bookings, newest first      |

```json
{
  "user_id": "6f1c2e8a-0000-4000-8000-000000000001",
  "event_id": "6f1c2e8a-0000-4000-8000-000000000002",
  "quantity": 2
}
```

`quantity` must be at least 1. The total amount is the quantity times the
event's ticket price. A booking starts as `PENDING` with a payment deadline,
becomes `CONFIRMED` once its payment is processed, and becomes `CANCELLED`
when the user cancels it or the deadline passes. Tickets cannot be booked for
events in the past, nor more tickets than remain; pending and confirmed
bookings both count against the event's total. Only pending bookings can be
cancelled; other attempts give `400`.

If the booking is stored but its payment job cannot be queued, the answer is
`500` with the booking included:
`{"error": "Booking created but payment processing failed", "booking": {...}}`.

### Status codes

Malformed identifiers and invalid bodies give `400`. Unknown identifiers give
`404`. A booking that cannot be made gives `400` with the reason. Failures
listing records or creating events or users give `500`.

## Using it from Python

The pieces can be wired together by hand, for example to embed the
application in another WSGI server:

```python
import redis

from ticketbooking.app import create_app
from ticketbooking.booking_repository import BookingRepository
from ticketbooking.booking_service import BookingService
from ticketbooking.database import connect, run_migrations
from ticketbooking.event_repository import EventRepository
from ticketbooking.event_service import EventService
from ticketbooking.payment_service import PaymentService
from ticketbooking.user_repository import UserRepository
from ticketbooking.user_service import UserService

connection = connect("sqlite:///ticket_booking.db")
run_migrations(connection)

event_repo = EventRepository(connection)
user_repo = UserRepository(connection)
booking_repo = BookingRepository(connection)

payments = PaymentService(redis.Redis(host="localhost", port=6379), booking_repo, 2.0)

app = create_app(
    EventService(event_repo),
    UserService(user_repo),
    BookingService(booking_repo, event_repo, 15),
    payments,
)
```

The modules:

* `ticketbooking.config` – `load()` builds a `Config` from the environment
  (or from a mapping passed in).
* `ticketbooking.models` – the `Event`, `User`, `Booking` and
  `EventStatistics` records with `to_dict()`, the request types with
  `from_dict()`, `BookingStatus`, and the `ValidationError` and
  `NotFoundError` exceptions.
* `ticketbooking.database` – `connect()` and `run_migrations()`.
* `ticketbooking.event_repository`, `ticketbooking.user_repository`,
  `ticketbooking.booking_repository` – storage; `EventRepository.reserve_tickets`
  raises `InsufficientTicketsError` when too few tickets remain.
* `ticketbooking.interfaces` – the protocols the services expect of their
  repositories, so other storage can be plugged in.
* `ticketbooking.event_service`, `ticketbooking.user_service`,
  `ticketbooking.booking_service` – business operations;
  `BookingService` raises `BookingError` for bookings that cannot be made,
  cancelled or confirmed.
* `ticketbooking.payment_service` – `PaymentJob` and `PaymentService`.
* `ticketbooking.handlers` – the Flask blueprints for each group of routes.
* `ticketbooking.app` – `create_app()` and `main()`.

`PaymentService.run_processor` and
`PaymentService.run_expired_booking_processor` each take a
`threading.Event` and run until it is set, so they fit naturally in
background threads; `PaymentService.process_next` and
`PaymentService.process_expired_bookings` do a single round of work.

## What it does not do

* Payments are simulated: processing a job waits for the configured delay
  (two seconds by default) and then confirms the booking. No payment
  provider is contacted, and a payment never fails on its own.
* Only SQLite is supported as a database.
* There is no authentication or authorisation; any client may call any
  route.
* The server is Flask's built-in development server.