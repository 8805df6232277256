import pytest
from cryptography.fernet import Fernet

from gift_exchange import create_app
from gift_exchange.security import (
    decrypt_assignment_recipient,
    encrypt_assignment_recipient,
    identity_cookie_name,
)


def test_recipient_token_round_trip(memory_app):
    with memory_app.app_context():
        token = encrypt_assignment_recipient("participant-7")
        assert "participant-7" not in token
        assert decrypt_assignment_recipient(token) == "participant-7"


def test_explicit_encryption_key_is_used():
    key = Fernet.generate_key().decode()
    app = create_app({"TESTING": True, "ROOM_STORE": "memory", "ASSIGNMENT_ENC_KEY": key})
    with app.app_context():
        token = encrypt_assignment_recipient("abc")
    assert Fernet(key.encode()).decrypt(token.encode()) == b"abc"


def test_garbage_token_is_rejected(memory_app):
    with memory_app.app_context():
        with pytest.raises(ValueError):
            decrypt_assignment_recipient("not-a-token")


def test_identity_cookie_is_scoped_per_room():
    assert identity_cookie_name("r1") == "secretSantaUser_r1"
    assert identity_cookie_name("r1") != identity_cookie_name("r2")


def test_env_configuration(monkeypatch):
    monkeypatch.setenv("ROOM_STORE", "Memory")
    monkeypatch.setenv("DERANGEMENT_MAX_TRIALS", "50")
    monkeypatch.setenv("ROOM_COOKIE_MAX_AGE", "60")
    app = create_app({"TESTING": True})

    assert app.config["ROOM_STORE"] == "memory"
    assert app.extensions["room_service"].max_trials == 50
    assert app.config["ROOM_COOKIE_MAX_AGE"] == 60
    assert app.test_client().get("/health").get_json()["store"] == "memory"
