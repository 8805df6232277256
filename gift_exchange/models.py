from .extensions import db


class RoomRecord(db.Model):
    __tablename__ = "rooms"

    id = db.Column(db.String(36), primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    max_date = db.Column(db.String(64), nullable=True)
    max_price = db.Column(db.String(64), nullable=True)
    created_at = db.Column(db.String(64), nullable=False)
    draw_status = db.Column(db.String(16), default="pending", nullable=False)


class ParticipantRecord(db.Model):
    __tablename__ = "room_participants"

    id = db.Column(db.String(36), primary_key=True)
    room_id = db.Column(db.String(36), db.ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True)
    # join order within the room
    position = db.Column(db.Integer, nullable=False)
    name = db.Column(db.String(255), nullable=False)
    gift_hint = db.Column(db.Text, nullable=True)

    __table_args__ = (
        db.UniqueConstraint("room_id", "position", name="uq_participant_room_position"),
    )


class MatchRecord(db.Model):
    """
    One giver -> receiver pairing. Only the giver is stored in plaintext;
    the receiver id is a Fernet token (see security.py).
    """
    __tablename__ = "room_matches"

    id = db.Column(db.Integer, primary_key=True)
    room_id = db.Column(db.String(36), db.ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True)
    giver_id = db.Column(db.String(36), db.ForeignKey("room_participants.id", ondelete="CASCADE"), nullable=False)
    receiver_ciphertext = db.Column(db.Text, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("room_id", "giver_id", name="uq_match_room_giver"),
    )
