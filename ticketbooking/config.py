"""Runtime configuration read from environment variables."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_DATABASE_URL = "sqlite:///ticket_booking.db"
DEFAULT_REDIS_URL = "localhost:6379"
DEFAULT_PAYMENT_DEADLINE = 15

_INTEGER = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class Config:
    """Settings for the booking service."""

    database_url: str
    redis_url: str
    payment_deadline: int  # minutes


def _get(environ: Mapping[str, str], key: str, default: str) -> str:
    return environ.get(key) or default


def _get_int(environ: Mapping[str, str], key: str, default: int) -> int:
    value = environ.get(key)
    if not value or not _INTEGER.fullmatch(value):
        return default
    return int(value)


def load(environ: Mapping[str, str] | None = None) -> Config:
    """Build a Config from ``environ`` (the process environment by default)."""
    env = os.environ if environ is None else environ
    return Config(
        database_url=_get(env, "DATABASE_URL", DEFAULT_DATABASE_URL),
        redis_url=_get(env, "REDIS_URL", DEFAULT_REDIS_URL),
        payment_deadline=_get_int(env, "PAYMENT_DEADLINE", DEFAULT_PAYMENT_DEADLINE),
    )