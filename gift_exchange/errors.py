"""
Exceptions raised by the room lifecycle, the draw and the room stores.

Views translate them into HTTP responses; nothing below the view layer
catches them.
"""


class GiftExchangeError(Exception):
    pass


class RoomNotFound(GiftExchangeError):
    def __init__(self, room_id):
        self.room_id = room_id
        super().__init__(f"Room {room_id} not found")


class DrawAlreadyCompleted(GiftExchangeError):
    """The room has already been drawn; joins and draws are closed."""

    def __init__(self, room_id):
        self.room_id = room_id
        super().__init__(f"Draw for room {room_id} has already been completed")


class InsufficientParticipants(GiftExchangeError):
    def __init__(self, count: int):
        self.count = count
        super().__init__(f"Need at least 2 participants to draw, got {count}")


class DerangementRetryExhausted(GiftExchangeError):
    """No valid derangement was found within the trial cap. Should never happen with a sane RNG."""

    def __init__(self, trials: int):
        self.trials = trials
        super().__init__(f"No derangement found after {trials} shuffles")


class StoreError(GiftExchangeError):
    pass


class StoreReadError(StoreError):
    pass


class StoreWriteError(StoreError):
    pass
