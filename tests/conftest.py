import random

import pytest

from gift_exchange import create_app
from gift_exchange.extensions import db


def _config(**overrides):
    config = {
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "WTF_CSRF_ENABLED": False,
        "ROOM_STORE": "sql",
        "DRAW_RNG": random.Random(1234),
        "LOG_LEVEL": "WARNING",
    }
    config.update(overrides)
    return config


@pytest.fixture
def app():
    app = create_app(_config())
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def memory_app():
    return create_app(_config(ROOM_STORE="memory"))


@pytest.fixture(params=["sql", "memory"])
def any_app(request):
    app = create_app(_config(ROOM_STORE=request.param))
    yield app
    if request.param == "sql":
        with app.app_context():
            db.session.remove()
            db.drop_all()


@pytest.fixture
def client(any_app):
    return any_app.test_client()

