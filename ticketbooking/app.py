"""Application assembly and the server entry point."""

from __future__ import annotations

import argparse
import logging
import os
import sys
import threading
from contextlib import closing

import redis
from flask import Flask, Response, request

from . import config, database
from .booking_repository import BookingRepository
from .booking_service import BookingService
from .event_repository import EventRepository
from .event_service import EventService
from .handlers import (
    create_bookings_blueprint,
    create_events_blueprint,
    create_users_blueprint,
)
from .payment_service import PaymentService
from .user_repository import UserRepository
from .user_service import UserService

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8080

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


def create_app(
    event_service: EventService,
    user_service: UserService,
    booking_service: BookingService,
    payment_service: PaymentService,
) -> Flask:
    """Build the web application with CORS handling and all API routes."""
    app = Flask(__name__)
    app.json.sort_keys = False

    @app.before_request
    def _answer_preflight():
        if request.method == "OPTIONS":
            return Response(status=204)
        return None

    @app.after_request
    def _add_cors_headers(response: Response) -> Response:
        response.headers.update(_CORS_HEADERS)
        return response

    app.register_blueprint(create_events_blueprint(event_service))
    app.register_blueprint(create_users_blueprint(user_service))
    app.register_blueprint(create_bookings_blueprint(booking_service, payment_service))
    return app


def _redis_client(url: str) -> redis.Redis:
    if "://" in url:
        return redis.Redis.from_url(url)
    host, _, port = url.rpartition(":")
    if not host:
        return redis.Redis(host=url)
    return redis.Redis(host=host, port=int(port))


def _port(value: int | None) -> int:
    if value is not None:
        return value
    raw = os.environ.get("PORT")
    return int(raw) if raw else DEFAULT_PORT


def main(argv: list[str] | None = None) -> int:
    """Start the booking server and its background processors."""
    parser = argparse.ArgumentParser(prog="ticketbooking", description="Ticket booking server")
    parser.add_argument("--port", type=int, default=None, help="port to listen on")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    settings = config.load()

    try:
        port = _port(args.port)
    except ValueError as exc:
        logger.critical("Failed to start server: invalid port: %s", exc)
        return 1

    try:
        connection = database.connect(settings.database_url)
    except Exception as exc:
        logger.critical("Failed to connect to database: %s", exc)
        return 1

    with closing(connection):
        try:
            database.run_migrations(connection)
        except Exception as exc:
            logger.critical("Failed to run migrations: %s", exc)
            return 1

        event_repo = EventRepository(connection)
        user_repo = UserRepository(connection)
        booking_repo = BookingRepository(connection)

        event_service = EventService(event_repo)
        user_service = UserService(user_repo)
        booking_service = BookingService(booking_repo, event_repo, settings.payment_deadline)
        payment_service = PaymentService(_redis_client(settings.redis_url), booking_repo)

        stop = threading.Event()
        workers = [
            threading.Thread(target=payment_service.run_processor, args=(stop,), daemon=True),
            threading.Thread(
                target=payment_service.run_expired_booking_processor, args=(stop,), daemon=True
            ),
        ]
        for worker in workers:
            worker.start()

        app = create_app(event_service, user_service, booking_service, payment_service)
        logger.info("Server starting on port %s", port)
        try:
            app.run(host="0.0.0.0", port=port)
        except Exception as exc:
            logger.critical("Failed to start server: %s", exc)
            return 1
        finally:
            stop.set()
    return 0


if __name__ == "__main__":
    sys.exit(main())