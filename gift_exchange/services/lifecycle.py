"""
Room state machine: pending -> completed, and nothing else.

Every function here is pure. Callers load a Room, apply one of these and
save whatever comes back.
"""
from __future__ import annotations

import dataclasses
from typing import Callable, Optional

from ..domain import DrawStatus, Participant, Room, new_id, utc_now_iso
from ..errors import DrawAlreadyCompleted, InsufficientParticipants
from .derangement import DEFAULT_MAX_TRIALS, RandomSource, derange

MIN_PARTICIPANTS = 2


def create_room(
    name: str,
    max_date: Optional[str],
    max_price: Optional[str],
    *,
    id_factory: Callable[[], str] = new_id,
    clock: Callable[[], str] = utc_now_iso,
) -> Room:
    return Room(
        id=id_factory(),
        name=name,
        max_date=max_date,
        max_price=max_price,
        created_at=clock(),
    )


def admit_participant(
    room: Room,
    name: str,
    gift_hint: Optional[str] = None,
    *,
    id_factory: Callable[[], str] = new_id,
) -> tuple[Room, Participant]:
    if room.is_completed:
        raise DrawAlreadyCompleted(room.id)

    participant = Participant(id=id_factory(), name=name, gift_hint=gift_hint)
    updated = dataclasses.replace(room, participants=room.participants + (participant,))
    return updated, participant


def can_draw(room: Room) -> bool:
    return room.draw_status is DrawStatus.PENDING and len(room.participants) >= MIN_PARTICIPANTS


def perform_draw(
    room: Room,
    rng: RandomSource | None = None,
    max_trials: int = DEFAULT_MAX_TRIALS,
) -> Room:
    if room.is_completed:
        raise DrawAlreadyCompleted(room.id)
    if len(room.participants) < MIN_PARTICIPANTS:
        raise InsufficientParticipants(len(room.participants))

    matches = derange([p.id for p in room.participants], rng=rng, max_trials=max_trials)
    return dataclasses.replace(room, matches=tuple(matches), draw_status=DrawStatus.COMPLETED)
