from __future__ import annotations

from typing import Optional

from ..domain import MatchView, ParticipantEntry, Room, RoomSummary
from .lifecycle import can_draw


def resolve_match(room: Room, viewer_id: Optional[str]) -> Optional[MatchView]:
    """
    Return the viewer's own recipient, or None.

    This is the only read path that exposes assignment data.
    """
    if not room.is_completed or not room.has_participant(viewer_id):
        return None

    match = next((m for m in room.matches if m.giver_id == viewer_id), None)
    if match is None:
        return None

    receiver = room.participant(match.receiver_id)
    if receiver is None:
        return None
    return MatchView(name=receiver.name, gift_hint=receiver.gift_hint)


def summarize_room(room: Room) -> RoomSummary:
    return RoomSummary(
        id=room.id,
        name=room.name,
        max_date=room.max_date,
        max_price=room.max_price,
        created_at=room.created_at,
        participant_count=len(room.participants),
        draw_status=room.draw_status,
        can_draw=can_draw(room),
    )


def list_participants(room: Room) -> list[ParticipantEntry]:
    return [ParticipantEntry(name=p.name, gift_hint=p.gift_hint) for p in room.participants]
