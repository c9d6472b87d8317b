from __future__ import annotations

from datetime import datetime, timedelta, timezone

from flickpick.core.memory import HISTORY_WINDOW, exclusion_set, record_session
from flickpick.core.models import SessionHistoryEntry

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _entry(n: int) -> SessionHistoryEntry:
    return SessionHistoryEntry(
        session_id=f"session_{n}",
        shown_item_ids=frozenset({f"item_{n}"}),
        created_at=T0 + timedelta(hours=n),
    )


def test_exclusion_set_uses_most_recent_window_by_created_at():
    history = [_entry(n) for n in (3, 11, 0, 7, 1, 10, 2, 5, 9, 4, 8, 6)]

    excluded = exclusion_set(history)

    assert excluded == {f"item_{n}" for n in range(2, 12)}


def test_exclusion_set_of_empty_history_is_empty():
    assert exclusion_set([]) == set()


def test_record_eleventh_entry_evicts_oldest():
    history = [_entry(n) for n in range(HISTORY_WINDOW)]

    updated = record_session(history, "session_new", {"a", "b"}, created_at=T0 + timedelta(days=1))

    assert len(updated) == HISTORY_WINDOW
    assert updated[0].session_id == "session_new"
    assert updated[0].shown_item_ids == frozenset({"a", "b"})
    assert "session_0" not in {entry.session_id for entry in updated}
    assert len(history) == HISTORY_WINDOW, "input ledger must not be mutated"


def test_record_replaces_entry_for_same_session():
    history = [_entry(1), _entry(2)]

    updated = record_session(history, "session_1", {"item_1", "item_9"}, created_at=T0 + timedelta(days=1))

    assert [entry.session_id for entry in updated] == ["session_1", "session_2"]
    assert updated[0].shown_item_ids == frozenset({"item_1", "item_9"})


def test_record_honours_custom_window():
    history = [_entry(n) for n in range(5)]
    updated = record_session(history, "session_new", set(), created_at=T0 + timedelta(days=1), window=3)
    assert [entry.session_id for entry in updated] == ["session_new", "session_4", "session_3"]
