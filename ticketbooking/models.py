"""Domain records, request bodies and their validation."""

from __future__ import annotations

import enum
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID


class ValidationError(ValueError):
    """A request body failed validation."""


class NotFoundError(LookupError):
    """A requested record does not exist."""


class BookingStatus(str, enum.Enum):
    """Lifecycle state of a booking."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


def _iso(value: datetime | None) -> str | None:
    return None if value is None else value.isoformat()


def _id(value: UUID | None) -> str | None:
    return None if value is None else str(value)


@dataclass(kw_only=True)
class Event:
    name: str
    date_time: datetime
    total_tickets: int
    ticket_price: float
    description: str = ""
    id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": _id(self.id),
            "name": self.name,
            "description": self.description,
            "date_time": _iso(self.date_time),
            "total_tickets": self.total_tickets,
            "ticket_price": self.ticket_price,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


@dataclass(kw_only=True)
class User:
    name: str
    email: str
    id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": _id(self.id),
            "name": self.name,
            "email": self.email,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


@dataclass(kw_only=True)
class Booking:
    user_id: UUID
    event_id: UUID
    status: BookingStatus
    quantity: int = 0
    total_amount: float = 0.0
    payment_deadline: datetime | None = None
    id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": _id(self.id),
            "user_id": _id(self.user_id),
            "event_id": _id(self.event_id),
            "quantity": self.quantity,
            "status": BookingStatus(self.status).value,
            "total_amount": self.total_amount,
            "payment_deadline": _iso(self.payment_deadline),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


@dataclass(kw_only=True)
class EventStatistics:
    event_id: UUID
    total_sold: int
    estimated_revenue: float
    available_tickets: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_id": _id(self.event_id),
            "total_sold": self.total_sold,
            "estimated_revenue": self.estimated_revenue,
            "available_tickets": self.available_tickets,
        }


_TIMESTAMP = re.compile(
    r"(\d{4}-\d{2}-\d{2})T(\d{2}:\d{2}:\d{2})(?:\.(\d{1,9}))?(Z|[+-]\d{2}:\d{2})"
)
_EMAIL = re.compile(r"[^@\s]+@[^@\s.]+(?:\.[^@\s.]+)*")


def _body(data: Any, kind: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValidationError(f"{kind} must be a JSON object")
    return data


def _as_str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{key} must be an integer")
    return value


def _as_float(value: Any, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{key} must be a number")
    return float(value)


def _as_timestamp(value: Any, key: str) -> datetime:
    message = f"{key} must be an RFC 3339 timestamp"
    if not isinstance(value, str):
        raise ValidationError(message)
    match = _TIMESTAMP.fullmatch(value)
    if match is None:
        raise ValidationError(message)
    date, clock, fraction, zone = match.groups()
    micro = (fraction or "").ljust(6, "0")[:6]
    if zone == "Z":
        zone = "+00:00"
    try:
        return datetime.fromisoformat(f"{date}T{clock}.{micro}{zone}")
    except ValueError as exc:
        raise ValidationError(message) from exc


def _as_email(value: Any, key: str) -> str:
    text = _as_str(value, key)
    if not _EMAIL.fullmatch(text):
        raise ValidationError(f"{key} must be a valid email address")
    return text


def _required_str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None or _as_str(value, key) == "":
        raise ValidationError(f"{key} is required")
    return value


def _required_int(data: Mapping[str, Any], key: str, minimum: int) -> int:
    value = data.get(key)
    if value is None or _as_int(value, key) == 0:
        raise ValidationError(f"{key} is required")
    if value < minimum:
        raise ValidationError(f"{key} must be at least {minimum}")
    return value


def _required_float(data: Mapping[str, Any], key: str, minimum: float) -> float:
    value = data.get(key)
    if value is None:
        raise ValidationError(f"{key} is required")
    number = _as_float(value, key)
    if number == 0:
        raise ValidationError(f"{key} is required")
    if number < minimum:
        raise ValidationError(f"{key} must be at least {minimum:g}")
    return number


@dataclass(kw_only=True)
class CreateEventRequest:
    name: str
    date_time: datetime
    total_tickets: int
    ticket_price: float
    description: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> CreateEventRequest:
        body = _body(data, "event")
        description = body.get("description")
        date_time = body.get("date_time")
        if date_time is None:
            raise ValidationError("date_time is required")
        return cls(
            name=_required_str(body, "name"),
            description="" if description is None else _as_str(description, "description"),
            date_time=_as_timestamp(date_time, "date_time"),
            total_tickets=_required_int(body, "total_tickets", 1),
            ticket_price=_required_float(body, "ticket_price", 0),
        )


@dataclass(kw_only=True)
class UpdateEventRequest:
    name: str | None = None
    description: str | None = None
    date_time: datetime | None = None
    total_tickets: int | None = None
    ticket_price: float | None = None

    @classmethod
    def from_dict(cls, data: Any) -> UpdateEventRequest:
        body = _body(data, "event")
        request = cls()
        if (name := body.get("name")) is not None:
            request.name = _as_str(name, "name")
        if (description := body.get("description")) is not None:
            request.description = _as_str(description, "description")
        if (date_time := body.get("date_time")) is not None:
            request.date_time = _as_timestamp(date_time, "date_time")
        if (tickets := body.get("total_tickets")) is not None:
            request.total_tickets = _as_int(tickets, "total_tickets")
            if request.total_tickets < 1:
                raise ValidationError("total_tickets must be at least 1")
        if (price := body.get("ticket_price")) is not None:
            request.ticket_price = _as_float(price, "ticket_price")
            if request.ticket_price < 0:
                raise ValidationError("ticket_price must be at least 0")
        return request


@dataclass(kw_only=True)
class CreateUserRequest:
    name: str
    email: str

    @classmethod
    def from_dict(cls, data: Any) -> CreateUserRequest:
        body = _body(data, "user")
        name = _required_str(body, "name")
        email = _as_email(_required_str(body, "email"), "email")
        return cls(name=name, email=email)


@dataclass(kw_only=True)
class UpdateUserRequest:
    name: str | None = None
    email: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> UpdateUserRequest:
        body = _body(data, "user")
        request = cls()
        if (name := body.get("name")) is not None:
            request.name = _as_str(name, "name")
        if (email := body.get("email")) is not None:
            request.email = _as_email(email, "email")
        return request


@dataclass(kw_only=True)
class CreateBookingRequest:
    user_id: str
    event_id: str
    quantity: int

    @classmethod
    def from_dict(cls, data: Any) -> CreateBookingRequest:
        body = _body(data, "booking")
        return cls(
            user_id=_required_str(body, "user_id"),
            event_id=_required_str(body, "event_id"),
            quantity=_required_int(body, "quantity", 1),
        )