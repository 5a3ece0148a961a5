from ticketbooking.config import Config, load


def test_defaults_when_environment_is_empty():
    cfg = load({})
    assert cfg.redis_url == "localhost:6379"
    assert cfg.payment_deadline == 15
    assert cfg.database_url.startswith("sqlite://")


def test_values_from_environment():
    cfg = load(
        {
            "DATABASE_URL": "sqlite:///other.db",
            "REDIS_URL": "redis-host:6380",
            "PAYMENT_DEADLINE": "30",
        }
    )
    assert cfg == Config(
        database_url="sqlite:///other.db",
        redis_url="redis-host:6380",
        payment_deadline=30,
    )


def test_empty_values_fall_back_to_defaults():
    cfg = load({"DATABASE_URL": "", "REDIS_URL": "", "PAYMENT_DEADLINE": ""})
    assert cfg == load({})


def test_invalid_integer_falls_back_to_default():
    assert load({"PAYMENT_DEADLINE": "soon"}).payment_deadline == 15
    assert load({"PAYMENT_DEADLINE": "1.5"}).payment_deadline == 15


def test_signed_integer_is_accepted():
    assert load({"PAYMENT_DEADLINE": "-5"}).payment_deadline == -5
    assert load({"PAYMENT_DEADLINE": "+7"}).payment_deadline == 7


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("REDIS_URL", "queue.example.com:6379")
    monkeypatch.setenv("PAYMENT_DEADLINE", "42")
    cfg = load()
    assert cfg.redis_url == "queue.example.com:6379"
    assert cfg.payment_deadline == 42