"""HTTP endpoints for events, users and bookings."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar
from uuid import UUID

from flask import Blueprint, jsonify, request

from .booking_service import BookingService
from .event_service import EventService
from .models import (
    CreateBookingRequest,
    CreateEventRequest,
    CreateUserRequest,
    UpdateEventRequest,
    UpdateUserRequest,
    ValidationError,
)
from .payment_service import PaymentService
from .user_service import UserService

T = TypeVar("T")

API_PREFIX = "/api/v1"


class _ApiError(Exception):
    """An error that is answered with a JSON body and a status code."""

    def __init__(self, status: int, message: str, **extra: Any) -> None:
        super().__init__(message)
        self.status = status
        self.payload = {"error": message, **extra}


def _render_error(error: _ApiError):
    return jsonify(error.payload), error.status


def _blueprint(name: str, path: str) -> Blueprint:
    blueprint = Blueprint(name, __name__, url_prefix=f"{API_PREFIX}{path}")
    blueprint.register_error_handler(_ApiError, _render_error)
    return blueprint


def _parse_id(raw: str, what: str) -> UUID:
    try:
        return UUID(raw)
    except ValueError as exc:
        raise _ApiError(400, f"Invalid {what} ID") from exc


def _parse_body(model: Any) -> Any:
    data = request.get_json(silent=True)
    if data is None:
        raise _ApiError(400, "request body must be a JSON object")
    try:
        return model.from_dict(data)
    except ValidationError as exc:
        raise _ApiError(400, str(exc)) from exc


def _call(status: int, action: Callable[..., T], *args: Any) -> T:
    """Run a service call, answering any failure with ``status``."""
    try:
        return action(*args)
    except Exception as exc:
        raise _ApiError(status, str(exc)) from exc


def create_events_blueprint(event_service: EventService) -> Blueprint:
    """Routes under /api/v1/events."""
    blueprint = _blueprint("events", "/events")

    @blueprint.get("")
    def get_events():
        events = _call(500, event_service.get_events)
        return jsonify([event.to_dict() for event in events])

    @blueprint.get("/<event_id>")
    def get_event(event_id: str):
        parsed = _parse_id(event_id, "event")
        return jsonify(_call(404, event_service.get_event, parsed).to_dict())

    @blueprint.post("")
    def create_event():
        body = _parse_body(CreateEventRequest)
        event = _call(500, event_service.create_event, body)
        return jsonify(event.to_dict()), 201

    @blueprint.put("/<event_id>")
    def update_event(event_id: str):
        parsed = _parse_id(event_id, "event")
        body = _parse_body(UpdateEventRequest)
        return jsonify(_call(404, event_service.update_event, parsed, body).to_dict())

    @blueprint.delete("/<event_id>")
    def delete_event(event_id: str):
        parsed = _parse_id(event_id, "event")
        _call(404, event_service.delete_event, parsed)
        return "", 204

    @blueprint.get("/<event_id>/statistics")
    def get_event_statistics(event_id: str):
        parsed = _parse_id(event_id, "event")
        return jsonify(_call(404, event_service.get_event_statistics, parsed).to_dict())

    return blueprint


def create_users_blueprint(user_service: UserService) -> Blueprint:
    """Routes under /api/v1/users."""
    blueprint = _blueprint("users", "/users")

    @blueprint.get("")
    def get_users():
        users = _call(500, user_service.get_users)
        return jsonify([user.to_dict() for user in users])

    @blueprint.get("/<user_id>")
    def get_user(user_id: str):
        parsed = _parse_id(user_id, "user")
        return jsonify(_call(404, user_service.get_user, parsed).to_dict())

    @blueprint.post("")
    def create_user():
        body = _parse_body(CreateUserRequest)
        user = _call(500, user_service.create_user, body)
        return jsonify(user.to_dict()), 201

    @blueprint.put("/<user_id>")
    def update_user(user_id: str):
        parsed = _parse_id(user_id, "user")
        body = _parse_body(UpdateUserRequest)
        return jsonify(_call(404, user_service.update_user, parsed, body).to_dict())

    @blueprint.delete("/<user_id>")
    def delete_user(user_id: str):
        parsed = _parse_id(user_id, "user")
        _call(404, user_service.delete_user, parsed)
        return "", 204

    return blueprint


def create_bookings_blueprint(
    booking_service: BookingService, payment_service: PaymentService
) -> Blueprint:
    """Routes under /api/v1/bookings."""
    blueprint = _blueprint("bookings", "/bookings")

    @blueprint.post("")
    def create_booking():
        body = _parse_body(CreateBookingRequest)
        booking = _call(400, booking_service.create_booking, body)
        try:
            payment_service.queue_payment(booking.id, booking.total_amount)
        except Exception as exc:
            raise _ApiError(
                500,
                "Booking created but payment processing failed",
                booking=booking.to_dict(),
            ) from exc
        return jsonify(booking.to_dict()), 201

    @blueprint.get("/<booking_id>")
    def get_booking(booking_id: str):
        parsed = _parse_id(booking_id, "booking")
        return jsonify(_call(404, booking_service.get_booking, parsed).to_dict())

    @blueprint.put("/<booking_id>/cancel")
    def cancel_booking(booking_id: str):
        parsed = _parse_id(booking_id, "booking")
        _call(400, booking_service.cancel_booking, parsed)
        return jsonify({"message": "Booking cancelled successfully"})

    @blueprint.get("/user/<user_id>")
    def get_user_bookings(user_id: str):
        parsed = _parse_id(user_id, "user")
        bookings = _call(500, booking_service.get_user_bookings, parsed)
        return jsonify([booking.to_dict() for booking in bookings])

    return blueprint