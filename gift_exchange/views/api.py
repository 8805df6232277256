from __future__ import annotations

import dataclasses

from flask import Blueprint, g, jsonify
from flask.views import MethodView

from ..policies import RoomViewMixin
from ..services.visibility import resolve_match, summarize_room


api_bp = Blueprint("api", __name__, url_prefix="/api/rooms")


class RoomSummaryView(RoomViewMixin):
    def get(self, room_id: str):
        summary = dataclasses.asdict(summarize_room(g.room))
        summary["draw_status"] = g.room.draw_status.value
        return jsonify(summary)


class MyMatchView(RoomViewMixin):
    def get(self, room_id: str):
        match = resolve_match(g.room, g.viewer_id)
        return jsonify({
            "draw_status": g.room.draw_status.value,
            "match": dataclasses.asdict(match) if match else None,
        })


api_bp.add_url_rule("/<room_id>", view_func=RoomSummaryView.as_view("room_summary"))
api_bp.add_url_rule("/<room_id>/match", view_func=MyMatchView.as_view("my_match"))
