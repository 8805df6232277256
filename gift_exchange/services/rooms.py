"""
Store-backed room operations.

Each mutation is load -> lifecycle step -> save under the room's lock.
Nothing counts as applied until save() returns.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..domain import Participant, Room
from ..errors import DerangementRetryExhausted
from ..store import RoomLocks, RoomStore
from .derangement import DEFAULT_MAX_TRIALS, RandomSource
from .lifecycle import admit_participant, create_room, perform_draw

logger = logging.getLogger(__name__)


class RoomService:
    def __init__(
        self,
        store: RoomStore,
        locks: RoomLocks,
        rng: RandomSource | None = None,
        max_trials: int = DEFAULT_MAX_TRIALS,
    ):
        self.store = store
        self.locks = locks
        self.rng = rng
        self.max_trials = max_trials

    def get_room(self, room_id: str) -> Room:
        return self.store.load(room_id)

    def _ensure_exists(self, room_id: str) -> None:
        # Locks are never evicted; only known rooms get one.
        self.store.load(room_id)

    def open_room(self, name: str, max_date: Optional[str], max_price: Optional[str]) -> Room:
        room = create_room(name, max_date, max_price)
        self.store.save(room)
        logger.info(f"Created room {room.id} ({room.name!r})")
        return room

    def join_room(self, room_id: str, name: str, gift_hint: Optional[str]) -> tuple[Room, Participant]:
        self._ensure_exists(room_id)
        with self.locks.hold(room_id):
            room = self.store.load(room_id)
            room, participant = admit_participant(room, name, gift_hint)
            self.store.save(room)

        logger.info(f"Participant {participant.id} joined room {room_id} ({len(room.participants)} total)")
        return room, participant

    def draw_room(self, room_id: str) -> Room:
        self._ensure_exists(room_id)
        with self.locks.hold(room_id):
            room = self.store.load(room_id)
            try:
                drawn = perform_draw(room, rng=self.rng, max_trials=self.max_trials)
            except DerangementRetryExhausted:
                logger.error(f"Draw aborted for room {room_id}; room left unchanged", exc_info=True)
                raise
            self.store.save(drawn)

        logger.info(f"Draw completed for room {room_id} with {len(drawn.participants)} participants")
        return drawn
