from __future__ import annotations

import pytest

from flickpick.core.consensus import ApprovalTally, check_consensus
from flickpick.core.models import Item, Rating, RatingDirection

APPROVE = RatingDirection.APPROVE
REJECT = RatingDirection.REJECT


def _item(item_id: str) -> Item:
    return Item(id=item_id, title=item_id.upper(), category="Drama", duration_minutes=90, rating=7.0)


def _rating(participant: str, item_id: str, direction: RatingDirection) -> Rating:
    return Rating(
        id=f"r_{participant}_{item_id}_{direction.value}",
        session_id="s",
        participant_id=participant,
        item_id=item_id,
        direction=direction,
    )


POOL = [_item("x"), _item("y"), _item("z")]


def test_two_person_scenario_matches_first_shared_approval():
    ratings = [
        _rating("a", "x", APPROVE),
        _rating("a", "y", REJECT),
        _rating("a", "z", APPROVE),
        _rating("b", "x", APPROVE),
    ]
    assert check_consensus(ratings, POOL, 2) == POOL[0]


def test_pool_order_breaks_ties_not_rating_order():
    ratings = [
        _rating("a", "z", APPROVE),
        _rating("b", "z", APPROVE),
        _rating("a", "y", APPROVE),
        _rating("b", "y", APPROVE),
    ]
    assert check_consensus(ratings, POOL, 2).id == "y"
    assert check_consensus(ratings, list(reversed(POOL)), 2).id == "z"


def test_no_match_without_full_approval():
    ratings = [
        _rating("a", "x", APPROVE),
        _rating("b", "x", REJECT),
        _rating("b", "y", APPROVE),
    ]
    assert check_consensus(ratings, POOL, 2) is None


def test_repeat_approvals_from_one_participant_count_once():
    ratings = [_rating("a", "x", APPROVE), _rating("a", "x", APPROVE)]
    assert check_consensus(ratings, POOL, 2) is None


def test_items_outside_pool_never_match():
    ratings = [_rating("a", "w", APPROVE), _rating("b", "w", APPROVE)]
    assert check_consensus(ratings, POOL, 2) is None


def test_empty_roster_never_matches():
    assert check_consensus([_rating("a", "x", APPROVE)], POOL, 0) is None


@pytest.mark.parametrize(
    "ratings",
    [
        [],
        [_rating("a", "x", APPROVE), _rating("b", "x", APPROVE), _rating("c", "x", REJECT)],
        [_rating("a", "z", APPROVE), _rating("b", "z", APPROVE), _rating("c", "z", APPROVE)],
        [
            _rating("a", "y", APPROVE),
            _rating("b", "y", APPROVE),
            _rating("c", "y", APPROVE),
            _rating("a", "x", APPROVE),
            _rating("b", "x", APPROVE),
            _rating("c", "x", APPROVE),
        ],
    ],
)
def test_incremental_tally_agrees_with_full_scan(ratings: list[Rating]):
    tally = ApprovalTally(ratings)
    assert tally.first_match(POOL, 3) == check_consensus(ratings, POOL, 3)


def test_tally_discard_item_forgets_approvals():
    tally = ApprovalTally([_rating("a", "x", APPROVE), _rating("b", "x", APPROVE), _rating("a", "y", REJECT)])
    assert tally.approvals("x") == 2
    assert tally.approvals("y") == 0

    tally.discard_item("x")

    assert tally.approvals("x") == 0
    assert tally.first_match(POOL, 2) is None
