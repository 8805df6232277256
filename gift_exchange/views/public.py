from __future__ import annotations

from flask import Blueprint, flash, jsonify, redirect, render_template, request, url_for
from flask.views import MethodView

from ..policies import room_service
from ..store import current_store


public_bp = Blueprint("public", __name__)


class LandingView(MethodView):
    def get(self):
        return render_template("index.html", title="Secret Santa")


class CreateRoomView(MethodView):
    def post(self):
        name = (request.form.get("nombreGrupo") or "").strip()
        max_date = (request.form.get("fechaMaxima") or "").strip() or None
        max_price = (request.form.get("precioMaximo") or "").strip() or None

        if not name:
            flash("El nombre del grupo es obligatorio.", "error")
            return render_template("index.html", title="Secret Santa"), 400

        room = room_service().open_room(name, max_date, max_price)
        return redirect(url_for("rooms.share", room_id=room.id))


class HealthView(MethodView):
    def get(self):
        return jsonify({"status": "ok", "store": current_store().kind})


public_bp.add_url_rule("/", view_func=LandingView.as_view("landing"))
public_bp.add_url_rule("/crear-sala", view_func=CreateRoomView.as_view("create_room"), methods=["POST"])
public_bp.add_url_rule("/health", view_func=HealthView.as_view("health"))
