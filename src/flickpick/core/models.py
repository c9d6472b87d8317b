from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionStatus(str, Enum):
    SETUP = "setup"
    SWIPING = "swiping"
    COMPLETED = "completed"


class RatingDirection(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


@dataclass(frozen=True)
class Item:
    """A rateable title as handed out by a content supplier."""

    id: str
    title: str
    category: str
    duration_minutes: int
    rating: float
    description: str | None = None
    year: int | None = None
    poster_url: str = ""


@dataclass
class Participant:
    id: str
    name: str
    # Round-scoped: reset whenever a fresh round begins.
    has_completed: bool = False


@dataclass(frozen=True)
class Rating:
    id: str
    session_id: str
    participant_id: str
    item_id: str
    direction: RatingDirection
    timestamp: datetime = field(default_factory=utcnow)

    @property
    def approved(self) -> bool:
        return self.direction is RatingDirection.APPROVE


@dataclass(frozen=True)
class SessionHistoryEntry:
    session_id: str
    shown_item_ids: frozenset[str]
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class Session:
    """Aggregate root for one pass-the-device session."""

    id: str
    created_at: datetime = field(default_factory=utcnow)
    status: SessionStatus = SessionStatus.SETUP
    participants: list[Participant] = field(default_factory=list)
    current_participant_index: int = 0
    matched_item: Item | None = None
    # participant id -> that participant's shuffled view of the shared pool
    participant_queues: dict[str, list[Item]] = field(default_factory=dict)

    @property
    def participant_count(self) -> int:
        return len(self.participants)

    def participant(self, participant_id: str) -> Participant | None:
        for participant in self.participants:
            if participant.id == participant_id:
                return participant
        return None

    def all_completed(self) -> bool:
        return bool(self.participants) and all(p.has_completed for p in self.participants)
