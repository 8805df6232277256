"""
Room stores: load a whole Room by id, save a whole Room back.

There are no partial updates. A save replaces every row belonging to the
room, so two unserialized writers lose updates (last write wins). Callers
go through RoomLocks to serialize load-modify-save per room.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from .domain import Assignment, DrawStatus, Participant, Room
from .errors import RoomNotFound, StoreReadError, StoreWriteError
from .extensions import db
from .models import MatchRecord, ParticipantRecord, RoomRecord
from .security import decrypt_assignment_recipient, encrypt_assignment_recipient

logger = logging.getLogger(__name__)


class RoomStore:
    kind = "abstract"

    def load(self, room_id: str) -> Room:
        raise NotImplementedError

    def save(self, room: Room) -> None:
        raise NotImplementedError


class MemoryRoomStore(RoomStore):
    kind = "memory"

    def __init__(self):
        self._rooms: dict[str, Room] = {}
        self._lock = threading.RLock()

    def load(self, room_id: str) -> Room:
        with self._lock:
            room = self._rooms.get(room_id)
        if room is None:
            raise RoomNotFound(room_id)
        return room

    def save(self, room: Room) -> None:
        # Room snapshots are frozen, so holding the reference is enough.
        with self._lock:
            self._rooms[room.id] = room


class SqlRoomStore(RoomStore):
    kind = "sql"

    def load(self, room_id: str) -> Room:
        try:
            record = db.session.get(RoomRecord, room_id)
            if record is None:
                raise RoomNotFound(room_id)

            participants = (
                ParticipantRecord.query.filter_by(room_id=room_id)
                .order_by(ParticipantRecord.position.asc())
                .all()
            )
            match_rows = MatchRecord.query.filter_by(room_id=room_id).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to load room {room_id}: {e}", exc_info=True)
            db.session.rollback()
            raise StoreReadError(f"Could not load room {room_id}") from e

        try:
            matches = tuple(
                Assignment(giver_id=m.giver_id, receiver_id=decrypt_assignment_recipient(m.receiver_ciphertext))
                for m in match_rows
            )
        except ValueError as e:
            logger.error(f"Undecryptable assignment in room {room_id}", exc_info=True)
            raise StoreReadError(f"Could not decrypt assignments for room {room_id}") from e

        # Order by giver join order so snapshots compare equal across round trips.
        order = {p.id: p.position for p in participants}
        matches = tuple(sorted(matches, key=lambda m: order.get(m.giver_id, 0)))

        return Room(
            id=record.id,
            name=record.name,
            max_date=record.max_date,
            max_price=record.max_price,
            created_at=record.created_at,
            participants=tuple(
                Participant(id=p.id, name=p.name, gift_hint=p.gift_hint) for p in participants
            ),
            matches=matches,
            draw_status=DrawStatus(record.draw_status),
        )

    def save(self, room: Room) -> None:
        try:
            # Children are flushed out before re-adding; participant ids are reused.
            for model in (MatchRecord, ParticipantRecord):
                for row in model.query.filter_by(room_id=room.id).all():
                    db.session.delete(row)
                db.session.flush()

            record = db.session.get(RoomRecord, room.id)
            if record is None:
                record = RoomRecord(id=room.id)
                db.session.add(record)
            record.name = room.name
            record.max_date = room.max_date
            record.max_price = room.max_price
            record.created_at = room.created_at
            record.draw_status = room.draw_status.value
            db.session.flush()

            for position, p in enumerate(room.participants):
                db.session.add(ParticipantRecord(
                    id=p.id,
                    room_id=room.id,
                    position=position,
                    name=p.name,
                    gift_hint=p.gift_hint,
                ))
            db.session.flush()

            for m in room.matches:
                db.session.add(MatchRecord(
                    room_id=room.id,
                    giver_id=m.giver_id,
                    receiver_ciphertext=encrypt_assignment_recipient(m.receiver_id),
                ))
            db.session.commit()
        except (SQLAlchemyError, ValueError) as e:
            # ValueError: the assignment key is unusable
            logger.error(f"Failed to save room {room.id}: {e}", exc_info=True)
            db.session.rollback()
            raise StoreWriteError(f"Could not save room {room.id}") from e


class RoomLocks:
    """One lock per room id, created on first use."""

    def __init__(self):
        self._locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, room_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(room_id)
            if lock is None:
                lock = self._locks[room_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, room_id: str) -> Iterator[None]:
        with self._lock_for(room_id):
            yield


def build_store(kind: str) -> RoomStore:
    if kind == "memory":
        return MemoryRoomStore()
    if kind == "sql":
        return SqlRoomStore()
    raise ValueError(f"Unknown ROOM_STORE {kind!r} (expected 'sql' or 'memory')")


def current_store() -> RoomStore:
    return current_app.extensions["room_store"]


def current_locks() -> RoomLocks:
    return current_app.extensions["room_locks"]
