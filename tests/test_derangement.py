import random
from collections import Counter

import pytest

from gift_exchange.domain import Assignment
from gift_exchange.errors import DerangementRetryExhausted, InsufficientParticipants
from gift_exchange.services.derangement import derange, shuffle_in_place
from tests.fixtures import FixedRandom, ZeroRandom, is_derangement


@pytest.mark.parametrize("n", [2, 3, 4, 5, 8, 13, 40])
def test_derange_is_a_permutation_without_fixed_points(n):
    rng = random.Random(n)
    ids = [f"id-{i}" for i in range(n)]

    for _ in range(50):
        matches = derange(ids, rng=rng)

        assert len(matches) == n
        assert [m.giver_id for m in matches] == ids
        assert sorted(m.receiver_id for m in matches) == sorted(ids)
        assert all(m.giver_id != m.receiver_id for m in matches)
        assert is_derangement(ids, matches)


def test_two_participants_always_swap():
    rng = random.Random(7)
    for _ in range(200):
        matches = derange(["a", "b"], rng=rng)
        assert matches == [Assignment("a", "b"), Assignment("b", "a")]


def test_three_participants_draw_both_derangements_evenly():
    rng = random.Random(2024)
    trials = 4000
    seen = Counter(
        tuple(m.receiver_id for m in derange(["1", "2", "3"], rng=rng))
        for _ in range(trials)
    )

    assert set(seen) == {("2", "3", "1"), ("3", "1", "2")}
    for count in seen.values():
        assert 0.45 < count / trials < 0.55


def test_deterministic_source_gives_deterministic_result():
    # Always swapping with index 0: [a,b,c] -> [c,b,a] -> [b,c,a]
    matches = derange(["a", "b", "c"], rng=ZeroRandom())
    assert matches == [Assignment("a", "b"), Assignment("b", "c"), Assignment("c", "a")]


def test_shuffle_in_place_uses_top_down_indices():
    calls = []

    class Recording:
        def randrange(self, stop):
            calls.append(stop)
            return stop - 1

    items = [1, 2, 3, 4]
    shuffle_in_place(items, Recording())
    assert calls == [4, 3, 2]
    assert items == [1, 2, 3, 4]


def test_broken_randomness_hits_the_trial_cap():
    with pytest.raises(DerangementRetryExhausted) as excinfo:
        derange(["a", "b", "c"], rng=FixedRandom(), max_trials=25)
    assert excinfo.value.trials == 25


@pytest.mark.parametrize("ids", [[], ["solo"]])
def test_fewer_than_two_ids_are_rejected(ids):
    with pytest.raises(InsufficientParticipants):
        derange(ids, rng=random.Random(0))


def test_is_derangement_rejects_self_gifting_and_duplicates():
    ids = ["a", "b", "c"]
    assert not is_derangement(ids, [Assignment("a", "a"), Assignment("b", "c"), Assignment("c", "b")])
    assert not is_derangement(ids, [Assignment("a", "b"), Assignment("b", "a"), Assignment("c", "a")])
    assert not is_derangement(ids, [Assignment("a", "b"), Assignment("b", "a")])
