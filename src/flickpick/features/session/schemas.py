from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, field_validator

from ...core.models import Item, Participant, RatingDirection, SessionHistoryEntry, SessionStatus
from ...core.summary import SessionSummary

if TYPE_CHECKING:
    from .engine import SessionEngine

__all__ = [
    "AddParticipantRequest",
    "HistoryEntryPayload",
    "ItemPayload",
    "ParticipantPayload",
    "RateRequest",
    "SessionPayload",
    "StatePayload",
    "SummaryPayload",
    "state_payload",
    "summary_payload",
]


class _APIModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ItemPayload(_APIModel):
    id: str
    title: str
    category: str
    duration_minutes: int
    rating: float
    description: str | None = None
    year: int | None = None
    poster_url: str | None = None

    @classmethod
    def from_item(cls, item: Item) -> ItemPayload:
        return cls(
            id=item.id,
            title=item.title,
            category=item.category,
            duration_minutes=item.duration_minutes,
            rating=item.rating,
            description=item.description,
            year=item.year,
            poster_url=item.poster_url or None,
        )


class ParticipantPayload(_APIModel):
    id: str
    name: str
    has_completed: bool

    @classmethod
    def from_participant(cls, participant: Participant) -> ParticipantPayload:
        return cls(id=participant.id, name=participant.name, has_completed=participant.has_completed)


class SessionPayload(_APIModel):
    id: str
    created_at: datetime
    status: SessionStatus
    participants: list[ParticipantPayload]
    current_participant_index: int
    matched_item: ItemPayload | None = None


class StatePayload(_APIModel):
    session: SessionPayload
    active_participant: ParticipantPayload | None = None
    current_item: ItemPayload | None = None
    cursor: int
    queue_length: int
    queue_exhausted: bool
    ratings: int
    show_summary: bool
    celebrating: bool
    notice: str | None = None


class ParticipantStatsPayload(_APIModel):
    participant_id: str
    name: str
    total: int
    approvals: int
    rejections: int
    approval_pct: float


class TopItemPayload(_APIModel):
    item: ItemPayload
    approvals: int


class SummaryPayload(_APIModel):
    total_ratings: int
    approvals: int
    rejections: int
    participants: list[ParticipantStatsPayload]
    top_items: list[TopItemPayload]
    matched_item: ItemPayload | None = None


class HistoryEntryPayload(_APIModel):
    session_id: str
    shown_item_ids: list[str]
    created_at: datetime

    @classmethod
    def from_entry(cls, entry: SessionHistoryEntry) -> HistoryEntryPayload:
        return cls(session_id=entry.session_id, shown_item_ids=sorted(entry.shown_item_ids), created_at=entry.created_at)


class AddParticipantRequest(BaseModel):
    name: str


class RateRequest(BaseModel):
    item_id: str
    direction: RatingDirection

    @field_validator("direction", mode="before")
    @classmethod
    def _coerce_direction(cls, value: object) -> object:
        # Accept swipe vocabulary from gesture-driven clients.
        if isinstance(value, str):
            lowered = value.strip().lower()
            return {"right": "approve", "left": "reject"}.get(lowered, lowered)
        return value


def _item(item: Item | None) -> ItemPayload | None:
    return ItemPayload.from_item(item) if item is not None else None


def state_payload(engine: SessionEngine) -> StatePayload:
    session = engine.session
    active = engine.active_participant()
    return StatePayload(
        session=SessionPayload(
            id=session.id,
            created_at=session.created_at,
            status=session.status,
            participants=[ParticipantPayload.from_participant(p) for p in session.participants],
            current_participant_index=session.current_participant_index,
            matched_item=_item(session.matched_item),
        ),
        active_participant=ParticipantPayload.from_participant(active) if active else None,
        current_item=_item(engine.current_item()),
        cursor=engine.cursor,
        queue_length=len(engine.active_queue),
        queue_exhausted=engine.queue_exhausted,
        ratings=len(engine.ratings),
        show_summary=engine.show_summary,
        celebrating=engine.celebrating,
        notice=engine.notice,
    )


def summary_payload(summary: SessionSummary) -> SummaryPayload:
    return SummaryPayload(
        total_ratings=summary.total_ratings,
        approvals=summary.approvals,
        rejections=summary.rejections,
        participants=[
            ParticipantStatsPayload(
                participant_id=stats.participant_id,
                name=stats.name,
                total=stats.total,
                approvals=stats.approvals,
                rejections=stats.rejections,
                approval_pct=stats.approval_pct,
            )
            for stats in summary.participants
        ],
        top_items=[TopItemPayload(item=ItemPayload.from_item(item), approvals=count) for item, count in summary.top_items],
        matched_item=_item(summary.matched_item),
    )
