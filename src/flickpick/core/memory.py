"""Session memory: which titles recent sessions already showed.

The ledger is the only state that outlives a session.  It is read when a new
pool is assembled (to steer away from repeats) and written when a session
ends, either with a match or with an exhausted round.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from .models import SessionHistoryEntry, utcnow

HISTORY_WINDOW = 10


def _most_recent(history: Iterable[SessionHistoryEntry], window: int) -> list[SessionHistoryEntry]:
    ordered = sorted(history, key=lambda entry: entry.created_at, reverse=True)
    return ordered[: max(0, window)]


def exclusion_set(history: Sequence[SessionHistoryEntry], window: int = HISTORY_WINDOW) -> set[str]:
    excluded: set[str] = set()
    for entry in _most_recent(history, window):
        excluded.update(entry.shown_item_ids)
    return excluded


def record_session(
    history: Sequence[SessionHistoryEntry],
    session_id: str,
    shown_item_ids: Iterable[str],
    *,
    created_at: datetime | None = None,
    window: int = HISTORY_WINDOW,
) -> list[SessionHistoryEntry]:
    """Return a new ledger with the session's entry in front, capped at *window*.

    An existing entry for the same session is replaced rather than duplicated.
    """

    entry = SessionHistoryEntry(
        session_id=session_id,
        shown_item_ids=frozenset(shown_item_ids),
        created_at=created_at or utcnow(),
    )
    others = [existing for existing in history if existing.session_id != session_id]
    return _most_recent([entry, *others], window)
