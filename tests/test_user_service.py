import sqlite3
import uuid

import pytest

from ticketbooking.database import connect, run_migrations
from ticketbooking.models import CreateUserRequest, NotFoundError, UpdateUserRequest
from ticketbooking.user_repository import UserRepository
from ticketbooking.user_service import UserService


@pytest.fixture
def service():
    connection = connect(":memory:")
    run_migrations(connection)
    yield UserService(UserRepository(connection))
    connection.close()


def test_create_and_get_user(service):
    user = service.create_user(CreateUserRequest(name="Alice", email="alice@example.com"))
    assert user.id is not None
    fetched = service.get_user(user.id)
    assert fetched.name == "Alice"
    assert fetched.email == "alice@example.com"
    assert fetched.created_at == user.created_at


def test_duplicate_email_rejected(service):
    service.create_user(CreateUserRequest(name="Alice", email="alice@example.com"))
    with pytest.raises(sqlite3.IntegrityError):
        service.create_user(CreateUserRequest(name="Other", email="alice@example.com"))


def test_get_users_newest_first(service):
    created = [
        service.create_user(CreateUserRequest(name=name, email=f"{name}@example.com"))
        for name in ("a", "b", "c")
    ]
    users = service.get_users()
    assert {u.id for u in users} == {u.id for u in created}
    stamps = [u.created_at for u in users]
    assert stamps == sorted(stamps, reverse=True)


def test_update_user_changes_only_given_fields(service):
    user = service.create_user(CreateUserRequest(name="Alice", email="alice@example.com"))
    updated = service.update_user(user.id, UpdateUserRequest(email="new@example.com"))
    assert updated.email == "new@example.com"
    fetched = service.get_user(user.id)
    assert fetched.name == "Alice"
    assert fetched.email == "new@example.com"
    assert fetched.updated_at >= fetched.created_at


def test_update_missing_user_raises(service):
    with pytest.raises(NotFoundError, match="user not found"):
        service.update_user(uuid.uuid4(), UpdateUserRequest(name="x"))


def test_delete_user(service):
    user = service.create_user(CreateUserRequest(name="Alice", email="alice@example.com"))
    service.delete_user(user.id)
    with pytest.raises(NotFoundError):
        service.get_user(user.id)
    with pytest.raises(NotFoundError):
        service.delete_user(user.id)