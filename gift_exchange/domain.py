from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class DrawStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Participant:
    id: str
    name: str
    gift_hint: Optional[str] = None


@dataclass(frozen=True)
class Assignment:
    giver_id: str
    receiver_id: str


@dataclass(frozen=True)
class Room:
    """
    Whole-room snapshot. Stores load and save these as a unit; lifecycle
    operations return a new snapshot instead of mutating this one.
    """
    id: str
    name: str
    max_date: Optional[str]
    max_price: Optional[str]
    created_at: str
    participants: tuple[Participant, ...] = ()
    matches: tuple[Assignment, ...] = ()
    draw_status: DrawStatus = DrawStatus.PENDING

    @property
    def is_completed(self) -> bool:
        return self.draw_status is DrawStatus.COMPLETED

    def participant(self, participant_id: Optional[str]) -> Optional[Participant]:
        if not participant_id:
            return None
        for p in self.participants:
            if p.id == participant_id:
                return p
        return None

    def has_participant(self, participant_id: Optional[str]) -> bool:
        return self.participant(participant_id) is not None


@dataclass(frozen=True)
class MatchView:
    """The only projection that carries assignment data: one viewer's recipient."""
    name: str
    gift_hint: Optional[str]


@dataclass(frozen=True)
class ParticipantEntry:
    name: str
    gift_hint: Optional[str]


@dataclass(frozen=True)
class RoomSummary:
    id: str
    name: str
    max_date: Optional[str]
    max_price: Optional[str]
    created_at: str
    participant_count: int
    draw_status: DrawStatus
    can_draw: bool = field(default=False)
