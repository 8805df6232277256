from __future__ import annotations

from typing import Optional

from flask import current_app, g, request
from flask.views import MethodView

from .domain import Room
from .security import read_identity
from .services.rooms import RoomService


def room_service() -> RoomService:
    return current_app.extensions["room_service"]


def resolve_viewer(room: Room) -> Optional[str]:
    """The cookie's participant id, but only if that participant is in this room."""
    participant_id = read_identity(request, room.id)
    if participant_id and room.has_participant(participant_id):
        return participant_id
    return None


class RoomViewMixin(MethodView):
    """
    Loads the room named in the URL into g.room and resolves g.viewer_id.
    A missing room raises RoomNotFound, which the app turns into a 404.
    """
    def dispatch_request(self, *args, **kwargs):
        room = room_service().get_room(kwargs["room_id"])
        g.room = room
        g.viewer_id = resolve_viewer(room)
        return super().dispatch_request(*args, **kwargs)
