import pytest

from ticketbooking import database
from ticketbooking.app import create_app, main
from ticketbooking.booking_repository import BookingRepository
from ticketbooking.booking_service import BookingService
from ticketbooking.event_repository import EventRepository
from ticketbooking.event_service import EventService
from ticketbooking.payment_service import PaymentService
from ticketbooking.user_repository import UserRepository
from ticketbooking.user_service import UserService


class FakeRedis:
    def __init__(self):
        self.items = []

    def lpush(self, key, value):
        self.items.insert(0, (key, value))
        return len(self.items)


@pytest.fixture
def client():
    connection = database.connect(":memory:")
    database.run_migrations(connection)
    booking_repo = BookingRepository(connection)
    event_repo = EventRepository(connection)
    app = create_app(
        EventService(event_repo),
        UserService(UserRepository(connection)),
        BookingService(booking_repo, event_repo, 15),
        PaymentService(FakeRedis(), booking_repo, processing_delay=0),
    )
    yield app.test_client()
    connection.close()


def test_cors_headers_on_normal_request(client):
    response = client.get("/api/v1/events")
    assert response.status_code == 200
    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert response.headers["Access-Control-Allow-Methods"] == "GET, POST, PUT, DELETE, OPTIONS"
    assert response.headers["Access-Control-Allow-Headers"] == "Content-Type, Authorization"


def test_preflight_answers_no_content(client):
    response = client.options("/api/v1/users")
    assert response.status_code == 204
    assert response.data == b""
    assert response.headers["Access-Control-Allow-Origin"] == "*"


def test_preflight_on_unknown_path(client):
    response = client.options("/nowhere")
    assert response.status_code == 204


def test_unknown_route_still_has_cors(client):
    response = client.get("/api/v1/nowhere")
    assert response.status_code == 404
    assert response.headers["Access-Control-Allow-Origin"] == "*"


def test_routes_are_wired(client):
    created = client.post("/api/v1/users", json={"name": "Alice", "email": "alice@example.com"})
    assert created.status_code == 201
    user_id = created.get_json()["id"]
    fetched = client.get(f"/api/v1/users/{user_id}")
    assert fetched.get_json() == created.get_json()
    assert client.get(f"/api/v1/bookings/user/{user_id}").get_json() == []


def test_main_rejects_bad_port_argument():
    with pytest.raises(SystemExit):
        main(["--port", "abc"])