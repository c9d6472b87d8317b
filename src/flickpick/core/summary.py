from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from .models import Item, Participant, Rating

TOP_ITEMS = 3


@dataclass(frozen=True)
class ParticipantStats:
    participant_id: str
    name: str
    total: int
    approvals: int
    rejections: int
    approval_pct: float


@dataclass(frozen=True)
class SessionSummary:
    total_ratings: int
    approvals: int
    rejections: int
    participants: tuple[ParticipantStats, ...]
    # (item, approval count), most approved first; never includes the match
    top_items: tuple[tuple[Item, int], ...]
    matched_item: Item | None = None


def _participant_stats(participant: Participant, ratings: Sequence[Rating]) -> ParticipantStats:
    own = [rating for rating in ratings if rating.participant_id == participant.id]
    approvals = sum(1 for rating in own if rating.approved)
    total = len(own)
    return ParticipantStats(
        participant_id=participant.id,
        name=participant.name,
        total=total,
        approvals=approvals,
        rejections=total - approvals,
        approval_pct=(100.0 * approvals / total) if total else 0.0,
    )


def summarize_session(
    participants: Sequence[Participant],
    ratings: Sequence[Rating],
    pool: Sequence[Item],
    matched_item: Item | None = None,
) -> SessionSummary:
    approvals = sum(1 for rating in ratings if rating.approved)
    counts = Counter(rating.item_id for rating in ratings if rating.approved)
    matched_id = matched_item.id if matched_item else None
    position = {item.id: index for index, item in enumerate(pool)}
    ranked = sorted(
        (item for item in pool if counts.get(item.id) and item.id != matched_id),
        key=lambda item: (-counts[item.id], position[item.id]),
    )
    return SessionSummary(
        total_ratings=len(ratings),
        approvals=approvals,
        rejections=len(ratings) - approvals,
        participants=tuple(_participant_stats(p, ratings) for p in participants),
        top_items=tuple((item, counts[item.id]) for item in ranked[:TOP_ITEMS]),
        matched_item=matched_item,
    )
