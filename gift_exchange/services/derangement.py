from __future__ import annotations

import logging
import random
from typing import Protocol, Sequence

from ..domain import Assignment
from ..errors import DerangementRetryExhausted, InsufficientParticipants

logger = logging.getLogger(__name__)

DEFAULT_MAX_TRIALS = 10_000

_system_random = random.SystemRandom()


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int: ...


def shuffle_in_place(items: list, rng: RandomSource) -> None:
    """Fisher-Yates: walk from the last index down, swapping with a uniform index in [0, i]."""
    for i in range(len(items) - 1, 0, -1):
        j = rng.randrange(i + 1)
        items[i], items[j] = items[j], items[i]


def derange(
    participant_ids: Sequence[str],
    rng: RandomSource | None = None,
    max_trials: int = DEFAULT_MAX_TRIALS,
) -> list[Assignment]:
    """
    Pair every giver with a receiver so nobody draws themselves.

    Shuffles the receivers and keeps the first shuffle with no fixed point.
    Rejection sampling over uniform permutations yields a uniform derangement.
    """
    ids = list(participant_ids)
    if len(ids) < 2:
        raise InsufficientParticipants(len(ids))

    rng = rng or _system_random
    receivers = ids[:]

    for trial in range(1, max_trials + 1):
        shuffle_in_place(receivers, rng)
        if all(giver != receiver for giver, receiver in zip(ids, receivers)):
            logger.debug(f"Derangement of {len(ids)} participants found after {trial} shuffle(s)")
            return [Assignment(giver_id=g, receiver_id=r) for g, r in zip(ids, receivers)]

    raise DerangementRetryExhausted(max_trials)
