"""Persistence boundary for the session-memory ledger."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from pydantic import TypeAdapter, ValidationError

from ..core.models import SessionHistoryEntry

logger = logging.getLogger(__name__)

_LEDGER = TypeAdapter(list[SessionHistoryEntry])


class HistoryStore(Protocol):
    def load_history(self) -> list[SessionHistoryEntry]: ...

    def save_history(self, history: Sequence[SessionHistoryEntry]) -> None: ...


class InMemoryHistoryStore:
    def __init__(self, history: Sequence[SessionHistoryEntry] = ()) -> None:
        self._history = list(history)
        self.saves = 0

    def load_history(self) -> list[SessionHistoryEntry]:
        return list(self._history)

    def save_history(self, history: Sequence[SessionHistoryEntry]) -> None:
        self._history = list(history)
        self.saves += 1


class JsonHistoryStore:
    """Ledger stored as a JSON array on disk."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load_history(self) -> list[SessionHistoryEntry]:
        if not self.path.exists():
            return []
        try:
            return _LEDGER.validate_json(self.path.read_bytes())
        except ValidationError:
            logger.warning("Discarding unreadable session history", extra={"path": str(self.path)}, exc_info=True)
            return []
        except OSError:
            logger.warning("Could not read session history", extra={"path": str(self.path)}, exc_info=True)
            return []

    def save_history(self, history: Sequence[SessionHistoryEntry]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_bytes(_LEDGER.dump_json(list(history), indent=2))
        tmp.replace(self.path)
