from __future__ import annotations

import logging
import os

from flask import Flask

from .errors import DerangementRetryExhausted, RoomNotFound, StoreError
from .extensions import csrf, db, migrate
from .services.derangement import DEFAULT_MAX_TRIALS
from .services.rooms import RoomService
from .store import RoomLocks, build_store
from .views.api import api_bp
from .views.public import public_bp
from .views.rooms import rooms_bp

logger = logging.getLogger(__name__)


def create_app(test_config: dict | None = None) -> Flask:
    app = Flask(__name__)

    app.config["SECRET_KEY"] = os.environ.get("SECRET_KEY", "dev-secret-change-me")
    app.config["SQLALCHEMY_DATABASE_URI"] = os.environ.get("DATABASE_URL", "sqlite:///gift_exchange.db")
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False

    # "sql" persists through SQLAlchemy; "memory" keeps rooms for the life of the process
    app.config["ROOM_STORE"] = os.environ.get("ROOM_STORE", "sql").strip().lower()
    app.config["ASSIGNMENT_ENC_KEY"] = os.environ.get("ASSIGNMENT_ENC_KEY", "")
    app.config["ROOM_COOKIE_MAX_AGE"] = int(os.environ.get("ROOM_COOKIE_MAX_AGE", 30 * 24 * 60 * 60))
    app.config["DERANGEMENT_MAX_TRIALS"] = int(os.environ.get("DERANGEMENT_MAX_TRIALS", DEFAULT_MAX_TRIALS))
    app.config["LOG_LEVEL"] = os.environ.get("LOG_LEVEL", "INFO").upper()
    # Random source for draws; None means the system CSPRNG. Tests inject a seeded one.
    app.config["DRAW_RNG"] = None

    if test_config:
        app.config.update(test_config)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)

    store = build_store(app.config["ROOM_STORE"])
    locks = RoomLocks()
    app.extensions["room_store"] = store
    app.extensions["room_locks"] = locks
    app.extensions["room_service"] = RoomService(
        store,
        locks,
        rng=app.config["DRAW_RNG"],
        max_trials=app.config["DERANGEMENT_MAX_TRIALS"],
    )

    if store.kind == "sql":
        with app.app_context():
            db.create_all()

    # Blueprints
    app.register_blueprint(public_bp)
    app.register_blueprint(rooms_bp)
    app.register_blueprint(api_bp)

    register_error_handlers(app)
    logger.debug(f"Gift exchange app created with {store.kind} store")
    return app


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(RoomNotFound)
    def room_not_found(e: RoomNotFound):
        return "Sala no encontrada", 404

    @app.errorhandler(StoreError)
    def store_failure(e: StoreError):
        logger.error(f"Store failure: {e}")
        return "Error interno", 500

    @app.errorhandler(DerangementRetryExhausted)
    def draw_failure(e: DerangementRetryExhausted):
        logger.error(f"Draw failed: {e}")
        return "Error interno", 500
