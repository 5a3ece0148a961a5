"""Business operations on users."""

from __future__ import annotations

from dataclasses import fields
from uuid import UUID

from .interfaces import UserRepositoryProtocol
from .models import CreateUserRequest, UpdateUserRequest, User


class UserService:
    """Creates, reads, edits and removes users."""

    def __init__(self, user_repo: UserRepositoryProtocol) -> None:
        self._users = user_repo

    def create_user(self, request: CreateUserRequest) -> User:
        user = User(name=request.name, email=request.email)
        self._users.create(user)
        return user

    def get_user(self, user_id: UUID) -> User:
        return self._users.get_by_id(user_id)

    def get_users(self) -> list[User]:
        return self._users.get_all()

    def update_user(self, user_id: UUID, request: UpdateUserRequest) -> User:
        """Apply the fields given in ``request`` to an existing user."""
        user = self._users.get_by_id(user_id)
        for field in fields(request):
            value = getattr(request, field.name)
            if value is not None:
                setattr(user, field.name, value)
        self._users.update(user)
        return user

    def delete_user(self, user_id: UUID) -> None:
        self._users.delete(user_id)