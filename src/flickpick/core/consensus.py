from __future__ import annotations

from collections.abc import Iterable, Sequence

from .models import Item, Rating

__all__ = ["ApprovalTally", "check_consensus"]


def check_consensus(ratings: Iterable[Rating], pool: Sequence[Item], participant_count: int) -> Item | None:
    """Return the first item in *pool* order approved by every participant.

    Pool order is the tie-break, not rating recency, so identical ratings
    always produce the same match.
    """

    if participant_count <= 0:
        return None
    approvers: dict[str, set[str]] = {}
    for rating in ratings:
        if rating.approved:
            approvers.setdefault(rating.item_id, set()).add(rating.participant_id)
    for item in pool:
        if len(approvers.get(item.id, ())) >= participant_count:
            return item
    return None


class ApprovalTally:
    """Incremental per-item approval sets, kept in step with the rating log.

    Avoids rescanning the whole log on every approval; ``first_match`` still
    walks the pool so the pool-order tie-break is preserved.
    """

    def __init__(self, ratings: Iterable[Rating] = ()) -> None:
        self._approvers: dict[str, set[str]] = {}
        for rating in ratings:
            self.add(rating)

    def add(self, rating: Rating) -> None:
        if rating.approved:
            self._approvers.setdefault(rating.item_id, set()).add(rating.participant_id)

    def discard_item(self, item_id: str) -> None:
        self._approvers.pop(item_id, None)

    def approvals(self, item_id: str) -> int:
        return len(self._approvers.get(item_id, ()))

    def first_match(self, pool: Sequence[Item], participant_count: int) -> Item | None:
        if participant_count <= 0:
            return None
        for item in pool:
            if self.approvals(item.id) >= participant_count:
                return item
        return None
