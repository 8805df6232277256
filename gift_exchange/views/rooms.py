from __future__ import annotations

from flask import Blueprint, flash, g, make_response, redirect, render_template, request, url_for

from ..errors import DrawAlreadyCompleted, InsufficientParticipants
from ..policies import RoomViewMixin, room_service
from ..security import remember_identity
from ..services.visibility import list_participants, resolve_match, summarize_room


rooms_bp = Blueprint("rooms", __name__)


class ShareView(RoomViewMixin):
    def get(self, room_id: str):
        links = {
            "join": url_for("rooms.join", room_id=room_id, _external=True),
            "list": url_for("rooms.participants", room_id=room_id, _external=True),
            "draw": url_for("rooms.draw", room_id=room_id, _external=True),
        }
        return render_template(
            "share.html",
            title="Sala Creada",
            room_id=room_id,
            room_name=g.room.name,
            links=links,
        )


class JoinView(RoomViewMixin):
    def get(self, room_id: str):
        if g.viewer_id:
            if g.room.is_completed:
                return redirect(url_for("rooms.draw", room_id=room_id))
            return redirect(url_for("rooms.participants", room_id=room_id))
        return render_template("unirse.html", title="Unirse al Grupo", room_id=room_id, room_name=g.room.name)

    def post(self, room_id: str):
        # Identity layer owns "already joined"; the lifecycle always admits.
        if g.viewer_id:
            return redirect(url_for("rooms.participants", room_id=room_id))

        name = (request.form.get("name") or "").strip()
        gift_hint = (request.form.get("giftHint") or "").strip() or None

        if not name:
            flash("El nombre es obligatorio.", "error")
            return render_template("unirse.html", title="Unirse al Grupo", room_id=room_id, room_name=g.room.name), 400

        try:
            _, participant = room_service().join_room(room_id, name, gift_hint)
        except DrawAlreadyCompleted:
            return "El sorteo ya ha sido realizado. No puedes unirte.", 400

        response = make_response(redirect(url_for("rooms.participants", room_id=room_id)))
        return remember_identity(response, room_id, participant.id)


class ParticipantListView(RoomViewMixin):
    def get(self, room_id: str):
        return render_template(
            "lista.html",
            title="Lista de Participantes",
            summary=summarize_room(g.room),
            participants=list_participants(g.room),
            is_participant=g.viewer_id is not None,
        )


class DrawView(RoomViewMixin):
    def get(self, room_id: str):
        return render_template(
            "sorteo.html",
            title="Sorteo",
            summary=summarize_room(g.room),
            participant=g.room.participant(g.viewer_id),
            user_match=resolve_match(g.room, g.viewer_id),
        )

    def post(self, room_id: str):
        try:
            room_service().draw_room(room_id)
        except DrawAlreadyCompleted:
            pass
        except InsufficientParticipants:
            return "No hay suficientes participantes", 400
        return redirect(url_for("rooms.draw", room_id=room_id))


rooms_bp.add_url_rule("/compartir/<room_id>", view_func=ShareView.as_view("share"))
rooms_bp.add_url_rule("/unirse/<room_id>", view_func=JoinView.as_view("join"), methods=["GET", "POST"])
rooms_bp.add_url_rule("/lista/<room_id>", view_func=ParticipantListView.as_view("participants"))
rooms_bp.add_url_rule("/sorteo/<room_id>", view_func=DrawView.as_view("draw"), methods=["GET", "POST"])
