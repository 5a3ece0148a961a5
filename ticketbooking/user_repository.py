"""Persistence of users."""

from __future__ import annotations

import sqlite3
import uuid
from datetime import datetime, timezone

from .models import NotFoundError, User

_SELECT = "SELECT id, name, email, created_at, updated_at FROM users"


def _row_to_user(row: sqlite3.Row) -> User:
    return User(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class UserRepository:
    """Stores users in the ``users`` table."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection

    def create(self, user: User) -> User:
        """Insert ``user``, filling in its id and timestamps."""
        user_id = uuid.uuid4()
        now = datetime.now(timezone.utc)
        with self._connection:
            self._connection.execute(
                "INSERT INTO users (id, name, email, created_at, updated_at)"
                " VALUES (?, ?, ?, ?, ?)",
                (user_id, user.name, user.email, now, now),
            )
        user.id, user.created_at, user.updated_at = user_id, now, now
        return user

    def _fetch_one(self, condition: str, value: object) -> User:
        row = self._connection.execute(f"{_SELECT} WHERE {condition} = ?", (value,)).fetchone()
        if row is None:
            raise NotFoundError("user not found")
        return _row_to_user(row)

    def get_by_id(self, user_id: uuid.UUID) -> User:
        return self._fetch_one("id", user_id)

    def get_by_email(self, email: str) -> User:
        return self._fetch_one("email", email)

    def get_all(self) -> list[User]:
        """All users, newest first."""
        rows = self._connection.execute(f"{_SELECT} ORDER BY created_at DESC")
        return [_row_to_user(row) for row in rows]

    def update(self, user: User) -> User:
        """Save the name and email of ``user`` and refresh its update time."""
        now = datetime.now(timezone.utc)
        with self._connection:
            cursor = self._connection.execute(
                "UPDATE users SET name = ?, email = ?, updated_at = ? WHERE id = ?",
                (user.name, user.email, now, user.id),
            )
        if cursor.rowcount == 0:
            raise NotFoundError("user not found")
        user.updated_at = now
        return user

    def delete(self, user_id: uuid.UUID) -> None:
        with self._connection:
            cursor = self._connection.execute("DELETE FROM users WHERE id = ?", (user_id,))
        if cursor.rowcount == 0:
            raise NotFoundError("user not found")