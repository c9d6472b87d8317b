from __future__ import annotations

import random

import pytest

from flickpick.core.shuffle import participant_seed, seed_hash, seeded_shuffle, shuffle_items


def test_seed_hash_matches_rolling_polynomial():
    assert seed_hash("") == 0
    assert seed_hash("a") == 97
    assert seed_hash("ab") == 97 * 31 + 98


def test_seed_hash_wraps_to_signed_32_bits():
    value = seed_hash("session_" + "z" * 64)
    assert -(2**31) <= value < 2**31


@pytest.mark.parametrize("seed", ["session_abc", "session_abc_participant_1", "x"])
def test_seeded_shuffle_is_deterministic_permutation(seed: str):
    items = list(range(25))

    first = seeded_shuffle(items, seed)
    second = seeded_shuffle(items, seed)

    assert first == second
    assert sorted(first) == items
    assert items == list(range(25)), "input must not be mutated"


def test_seeded_shuffle_edge_cases():
    assert seeded_shuffle([], "seed") == []
    assert seeded_shuffle(["only"], "seed") == ["only"]


def test_distinct_seeds_produce_distinct_orders():
    items = list(range(10))
    orders = {tuple(seeded_shuffle(items, participant_seed("session_1", f"p{n}"))) for n in range(6)}
    assert len(orders) > 1


def test_participant_seed_joins_session_and_participant():
    assert participant_seed("session_1", "participant_a") == "session_1_participant_a"


def test_shuffle_items_keeps_content():
    items = ["a", "b", "c", "d"]
    shuffled = shuffle_items(items, random.Random(7))
    assert sorted(shuffled) == items
    assert items == ["a", "b", "c", "d"]
