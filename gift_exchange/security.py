from __future__ import annotations

import base64
import hashlib
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken
from flask import Request, Response, current_app


# ---------------------------------------------------------------------------
# Assignment encryption-at-rest
#
# Receiver ids are encrypted before they hit the database so the draw cannot
# be read off a table dump. Anyone holding SECRET_KEY or ASSIGNMENT_ENC_KEY
# can still decrypt.
# ---------------------------------------------------------------------------


def _assignment_fernet() -> Fernet:
    """Returns a Fernet instance keyed by ASSIGNMENT_ENC_KEY or derived from SECRET_KEY."""
    explicit = (current_app.config.get("ASSIGNMENT_ENC_KEY") or "").strip()
    if explicit:
        # Expect a urlsafe base64-encoded 32-byte key.
        return Fernet(explicit.encode("utf-8"))

    # Derive a stable key so tokens survive restarts.
    secret = (current_app.config.get("SECRET_KEY") or "").encode("utf-8")
    digest = hashlib.sha256(b"gift-exchange-assignments|" + secret).digest()
    return Fernet(base64.urlsafe_b64encode(digest))


def encrypt_assignment_recipient(receiver_id: str) -> str:
    token = _assignment_fernet().encrypt(receiver_id.encode("utf-8"))
    return token.decode("utf-8")


def decrypt_assignment_recipient(token: str) -> str:
    """Decrypt ciphertext token -> receiver id. Raises ValueError on failure."""
    try:
        raw = _assignment_fernet().decrypt(token.encode("utf-8"))
        return raw.decode("utf-8")
    except (InvalidToken, ValueError, TypeError) as e:
        raise ValueError("Invalid assignment token") from e


# ---------------------------------------------------------------------------
# Per-room identity cookie
#
# The cookie holds an opaque participant id and nothing else. Whether it
# names a real participant is decided by the caller against the loaded room.
# ---------------------------------------------------------------------------

IDENTITY_COOKIE_PREFIX = "secretSantaUser_"


def identity_cookie_name(room_id: str) -> str:
    return f"{IDENTITY_COOKIE_PREFIX}{room_id}"


def read_identity(request: Request, room_id: str) -> Optional[str]:
    return request.cookies.get(identity_cookie_name(room_id)) or None


def remember_identity(response: Response, room_id: str, participant_id: str) -> Response:
    response.set_cookie(
        identity_cookie_name(room_id),
        participant_id,
        max_age=current_app.config["ROOM_COOKIE_MAX_AGE"],
        httponly=True,
        samesite="Lax",
    )
    return response
