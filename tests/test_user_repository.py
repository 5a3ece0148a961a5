import sqlite3
from uuid import uuid4

import pytest

from ticketbooking.database import connect, run_migrations
from ticketbooking.models import NotFoundError, User
from ticketbooking.user_repository import UserRepository


@pytest.fixture
def repo():
    connection = connect(":memory:")
    run_migrations(connection)
    yield UserRepository(connection)
    connection.close()


def test_create_assigns_id_and_timestamps(repo):
    user = repo.create(User(name="Alice", email="alice@example.com"))
    assert user.id is not None
    assert user.created_at == user.updated_at
    assert user.created_at.tzinfo is not None


def test_get_by_id_round_trip(repo):
    created = repo.create(User(name="Alice", email="alice@example.com"))
    fetched = repo.get_by_id(created.id)
    assert fetched == created


def test_get_by_email(repo):
    created = repo.create(User(name="Bob", email="bob@example.com"))
    assert repo.get_by_email("bob@example.com").id == created.id


def test_missing_user_raises_not_found(repo):
    with pytest.raises(NotFoundError, match="user not found"):
        repo.get_by_id(uuid4())
    with pytest.raises(NotFoundError, match="user not found"):
        repo.get_by_email("nobody@example.com")


def test_duplicate_email_is_rejected(repo):
    repo.create(User(name="Alice", email="alice@example.com"))
    duplicate = User(name="Other", email="alice@example.com")
    with pytest.raises(sqlite3.IntegrityError):
        repo.create(duplicate)
    assert duplicate.id is None


def test_get_all_newest_first(repo):
    created = [
        repo.create(User(name=f"User {n}", email=f"user{n}@example.com")) for n in range(3)
    ]
    users = repo.get_all()
    assert {u.id for u in users} == {u.id for u in created}
    stamps = [u.created_at for u in users]
    assert stamps == sorted(stamps, reverse=True)


def test_get_all_empty(repo):
    assert repo.get_all() == []


def test_update_saves_fields(repo):
    user = repo.create(User(name="Alice", email="alice@example.com"))
    original_updated = user.updated_at
    user.name = "Alicia"
    user.email = "alicia@example.com"
    repo.update(user)
    fetched = repo.get_by_id(user.id)
    assert fetched.name == "Alicia"
    assert fetched.email == "alicia@example.com"
    assert fetched.updated_at >= original_updated
    assert fetched.created_at == user.created_at


def test_update_missing_user_raises(repo):
    with pytest.raises(NotFoundError):
        repo.update(User(id=uuid4(), name="Ghost", email="ghost@example.com"))


def test_delete_removes_user(repo):
    user = repo.create(User(name="Alice", email="alice@example.com"))
    repo.delete(user.id)
    with pytest.raises(NotFoundError):
        repo.get_by_id(user.id)
    with pytest.raises(NotFoundError, match="user not found"):
        repo.delete(user.id)