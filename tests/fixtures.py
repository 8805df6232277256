from gift_exchange.services.lifecycle import admit_participant, create_room


class FixedRandom:
    """randrange() that always picks the top of the range, so every shuffle is the identity."""

    def randrange(self, stop: int) -> int:
        return stop - 1


class ZeroRandom:
    def randrange(self, stop: int) -> int:
        return 0


def sequential_ids(prefix: str = "p"):
    counter = iter(range(1, 10_000))
    return lambda: f"{prefix}{next(counter)}"


def room_with(*people, room_id="room-1"):
    """Pending room whose participants get ids "1", "2", ... in the given order."""
    room = create_room("Oficina", "2026-12-20", "20", id_factory=lambda: room_id)
    ids = sequential_ids(prefix="")
    for person in people:
        name, hint = person if isinstance(person, tuple) else (person, None)
        room, _ = admit_participant(room, name, hint, id_factory=ids)
    return room


def is_derangement(participant_ids, matches):
    ids = set(participant_ids)
    givers = [m.giver_id for m in matches]
    receivers = [m.receiver_id for m in matches]
    return (
        len(givers) == len(ids)
        and set(givers) == ids
        and set(receivers) == ids
        and len(set(receivers)) == len(receivers)
        and all(m.giver_id != m.receiver_id for m in matches)
    )
