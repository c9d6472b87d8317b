"""Seeded shuffling shared by pool assembly and per-participant queues.

Every participant must see the same titles in a different, reproducible
order.  ``seeded_shuffle`` is therefore a pure function of the input order
and the seed string: the seed is folded into a signed 32-bit rolling hash
which then drives a linear congruential generator feeding a Fisher-Yates
pass.  None of this is cryptographic; it only has to be stable across runs
and platforms.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

_LCG_MULTIPLIER = 1103515245
_LCG_INCREMENT = 12345
_LCG_MASK = 0x7FFFFFFF


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def seed_hash(seed: str) -> int:
    """Return the signed 32-bit ``hash * 31 + code`` rolling hash of *seed*."""

    value = 0
    for char in seed:
        value = _to_int32(value * 31 + ord(char))
    return value


def seeded_shuffle(items: Sequence[T], seed: str) -> list[T]:
    shuffled = list(items)
    state = seed_hash(seed)
    for i in range(len(shuffled) - 1, 0, -1):
        state = (state * _LCG_MULTIPLIER + _LCG_INCREMENT) & _LCG_MASK
        j = state % (i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def participant_seed(session_seed: str, participant_id: str) -> str:
    return f"{session_seed}_{participant_id}"


def shuffle_items(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Non-reproducible shuffle for ad hoc mixes (e.g. catalog composition)."""

    shuffled = list(items)
    (rng or random.SystemRandom()).shuffle(shuffled)
    return shuffled
