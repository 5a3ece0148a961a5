"""Queued payment processing and expiry of unpaid bookings."""

from __future__ import annotations

import json
import logging
import re
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

import redis

from .interfaces import BookingRepositoryProtocol
from .models import BookingStatus

logger = logging.getLogger(__name__)

PAYMENT_QUEUE = "payment_queue"

_TIMESTAMP = re.compile(
    r"(\d{4}-\d{2}-\d{2})[T ](\d{2}:\d{2}:\d{2})(?:\.(\d{1,9}))?(Z|[+-]\d{2}:\d{2})?"
)


def _parse_time(text: str) -> datetime:
    match = _TIMESTAMP.fullmatch(text)
    if match is None:
        raise ValueError(f"invalid timestamp: {text!r}")
    date, clock, fraction, zone = match.groups()
    micro = (fraction or "").ljust(6, "0")[:6]
    if zone == "Z":
        zone = "+00:00"
    return datetime.fromisoformat(f"{date}T{clock}.{micro}{zone or ''}")


@dataclass
class PaymentJob:
    """A payment waiting in the queue."""

    booking_id: UUID
    amount: float
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_json(self) -> str:
        return json.dumps(
            {
                "booking_id": str(self.booking_id),
                "amount": self.amount,
                "created_at": self.created_at.isoformat(),
            }
        )

    @classmethod
    def from_json(cls, data: str | bytes) -> PaymentJob:
        """Decode a job; raises ValueError if ``data`` is not a valid job."""
        try:
            payload: Any = json.loads(data)
            return cls(
                booking_id=UUID(payload["booking_id"]),
                amount=float(payload["amount"]),
                created_at=_parse_time(payload["created_at"]),
            )
        except (KeyError, TypeError, AttributeError) as exc:
            raise ValueError(f"malformed payment job: {exc}") from exc


class PaymentService:
    """Feeds bookings through a payment queue and expires unpaid ones."""

    def __init__(
        self,
        redis_client: Any,
        booking_repo: BookingRepositoryProtocol,
        processing_delay: float = 2.0,
    ) -> None:
        self._redis = redis_client
        self._bookings = booking_repo
        self._delay = processing_delay

    def process_payment(self, booking_id: UUID) -> None:
        """Settle a payment (simulated) and confirm its booking."""
        time.sleep(self._delay)
        try:
            self._bookings.update_status(booking_id, BookingStatus.CONFIRMED)
        except Exception as exc:
            logger.error("Failed to confirm booking %s: %s", booking_id, exc)
            raise
        logger.info("Payment processed successfully for booking %s", booking_id)

    def queue_payment(self, booking_id: UUID, amount: float) -> PaymentJob:
        """Push a payment job for ``booking_id`` onto the queue."""
        job = PaymentJob(booking_id=booking_id, amount=amount)
        try:
            self._redis.lpush(PAYMENT_QUEUE, job.to_json())
        except redis.exceptions.RedisError as exc:
            raise RuntimeError(f"failed to queue payment job: {exc}") from exc
        logger.info("Payment job queued for booking %s", booking_id)
        return job

    def process_next(self, timeout: float = 0) -> PaymentJob | None:
        """Wait up to ``timeout`` seconds (0: forever) for a job and process it.

        Returns the job taken, or None when none arrived or it was unreadable.
        """
        result = self._redis.brpop([PAYMENT_QUEUE], timeout=timeout)
        if result is None:
            return None
        _, raw = result
        try:
            job = PaymentJob.from_json(raw)
        except ValueError as exc:
            logger.error("Failed to unmarshal payment job: %s", exc)
            return None
        try:
            self.process_payment(job.booking_id)
        except Exception as exc:
            logger.error("Failed to process payment for booking %s: %s", job.booking_id, exc)
        return job

    def run_processor(self, stop_event: threading.Event | None = None) -> None:
        """Process queued payments until ``stop_event`` is set."""
        stop = stop_event or threading.Event()
        logger.info("Starting payment processor...")
        while not stop.is_set():
            try:
                self.process_next(timeout=1)
            except redis.exceptions.RedisError as exc:
                logger.error("Error waiting for payment jobs: %s", exc)
                stop.wait(5)

    def process_expired_bookings(self) -> int:
        """Cancel every pending booking past its deadline; return how many."""
        try:
            expired = self._bookings.get_expired_bookings()
        except Exception as exc:
            raise RuntimeError(f"failed to get expired bookings: {exc}") from exc
        cancelled = 0
        for booking in expired:
            try:
                self._bookings.update_status(booking.id, BookingStatus.CANCELLED)
            except Exception as exc:
                logger.error("Failed to cancel expired booking %s: %s", booking.id, exc)
                continue
            logger.info("Cancelled expired booking %s", booking.id)
            cancelled += 1
        return cancelled

    def run_expired_booking_processor(
        self, stop_event: threading.Event | None = None, interval: float = 60.0
    ) -> None:
        """Every ``interval`` seconds, cancel expired bookings, until stopped."""
        stop = stop_event or threading.Event()
        logger.info("Starting expired booking processor...")
        while not stop.wait(interval):
            try:
                self.process_expired_bookings()
            except Exception as exc:
                logger.error("Error processing expired bookings: %s", exc)