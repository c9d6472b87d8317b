"""Session feature: engine, pool assembly, schemas, and API router."""

from .engine import SessionEngine
from .router import create_session_router
from .schemas import (
    HistoryEntryPayload,
    ItemPayload,
    ParticipantPayload,
    SessionPayload,
    StatePayload,
    SummaryPayload,
)

__all__ = [
    "HistoryEntryPayload",
    "ItemPayload",
    "ParticipantPayload",
    "SessionEngine",
    "SessionPayload",
    "StatePayload",
    "SummaryPayload",
    "create_session_router",
]
