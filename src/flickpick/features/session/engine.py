"""Pass-the-device session engine.

One ``SessionEngine`` owns the roster, the session lifecycle, turn rotation,
consensus detection and the post-match choices.  It is driven synchronously
by discrete user actions; only pool assembly awaits I/O.  Precondition
failures never raise: the action is a no-op and ``notice`` carries the
advisory message until the next action.
"""

from __future__ import annotations

import logging
import secrets
import string

from ...core.config import Settings
from ...core.consensus import ApprovalTally, check_consensus
from ...core.errors import SessionInvariantError
from ...core.feature_flags import FeatureFlag
from ...core.memory import exclusion_set, record_session
from ...core.models import (
    Item,
    Participant,
    Rating,
    RatingDirection,
    Session,
    SessionHistoryEntry,
    SessionStatus,
)
from ...core.shuffle import participant_seed, seeded_shuffle
from ...core.summary import SessionSummary, summarize_session
from ...data.catalog import ContentSupplier, StaticCatalog
from ...data.history_store import HistoryStore, InMemoryHistoryStore
from .celebration import MatchCelebration
from .pool import assemble_pool

__all__ = ["MIN_PARTICIPANTS", "SessionEngine"]

logger = logging.getLogger(__name__)

MIN_PARTICIPANTS = 2


def _sid(length: int = 10) -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def _new_id(prefix: str) -> str:
    return f"{prefix}_{_sid()}"


class SessionEngine:
    def __init__(
        self,
        *,
        supplier: ContentSupplier | None = None,
        fallback: StaticCatalog | None = None,
        history_store: HistoryStore | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.supplier = supplier
        self.fallback = fallback if fallback is not None else StaticCatalog()
        self.history_store = history_store if history_store is not None else InMemoryHistoryStore()
        self.history: list[SessionHistoryEntry] = self.history_store.load_history()
        self.celebration = MatchCelebration(self._celebration_finished, self.settings.celebration_seconds)
        self.notice: str | None = None
        self._clear()

    def _clear(self) -> None:
        self.session = Session(id=_new_id("session"))
        self.pool: list[Item] = []
        self.active_queue: list[Item] = []
        self.cursor = 0
        self.ratings: list[Rating] = []
        self.show_summary = False
        self._shown: set[str] = set()
        self._tally = ApprovalTally()

    # ------------------------------------------------------------------ accessors
    @property
    def status(self) -> SessionStatus:
        return self.session.status

    @property
    def celebrating(self) -> bool:
        return self.celebration.pending

    @property
    def queue_exhausted(self) -> bool:
        """True once the active participant has moved past their last title."""

        return self.status is SessionStatus.SWIPING and self.cursor >= len(self.active_queue)

    @property
    def shown_item_ids(self) -> frozenset[str]:
        return frozenset(self._shown)

    def active_participant(self) -> Participant | None:
        if self.status is not SessionStatus.SWIPING:
            return None
        return self.session.participants[self._active_index()]

    def current_item(self) -> Item | None:
        if self.status is not SessionStatus.SWIPING or self.queue_exhausted:
            return None
        return self.active_queue[self.cursor]

    def item_by_id(self, item_id: str) -> Item | None:
        for item in self.pool:
            if item.id == item_id:
                return item
        matched = self.session.matched_item
        if matched is not None and matched.id == item_id:
            return matched
        return None

    def exclusion_set(self) -> set[str]:
        return exclusion_set(self.history, self.settings.history_window)

    def summary(self) -> SessionSummary:
        return summarize_session(self.session.participants, self.ratings, self.pool, self.session.matched_item)

    # ------------------------------------------------------------------ roster
    def add_participant(self, name: str) -> Participant | None:
        self._begin()
        if self.status is not SessionStatus.SETUP:
            return self._reject("participants can only be added before the session starts")
        cleaned = (name or "").strip()
        if not cleaned:
            return self._reject("participant name cannot be empty")
        if any(p.name.lower() == cleaned.lower() for p in self.session.participants):
            return self._reject(f"a participant named '{cleaned}' already exists")
        participant = Participant(id=_new_id("participant"), name=cleaned)
        self.session.participants.append(participant)
        logger.debug("Participant added", extra={"participant_id": participant.id, "roster": self.session.participant_count})
        return participant

    def remove_participant(self, participant_id: str) -> None:
        self._begin()
        if self.status is not SessionStatus.SETUP:
            self._reject("participants can only be removed before the session starts")
            return
        remaining = [p for p in self.session.participants if p.id != participant_id]
        if len(remaining) == self.session.participant_count:
            self._reject(f"participant '{participant_id}' not found")
            return
        self.session.participants = remaining
        self.session.current_participant_index = min(
            self.session.current_participant_index, max(0, len(remaining) - 1)
        )

    # ------------------------------------------------------------------ lifecycle
    async def start_session(self) -> None:
        self._begin()
        if self.status is not SessionStatus.SETUP:
            self._reject("session has already started")
            return
        if self.session.participant_count < MIN_PARTICIPANTS:
            self._reject(f"at least {MIN_PARTICIPANTS} participants are needed to start")
            return
        session_id = _new_id("session")
        pool = await assemble_pool(self.supplier, self.fallback, session_id, self.exclusion_set())
        # The roster may have been edited while the pool was loading.
        if self.status is not SessionStatus.SETUP or self.session.participant_count < MIN_PARTICIPANTS:
            self._reject("session changed while loading titles; start again")
            return
        self._begin_round(session_id, pool)

    async def replay_same_participants(self) -> None:
        """Start a brand new session (new id and seed) with the current roster."""

        self._begin()
        if self.session.participant_count < MIN_PARTICIPANTS:
            self._reject(f"at least {MIN_PARTICIPANTS} participants are needed to replay")
            return
        session_id = _new_id("session")
        pool = await assemble_pool(self.supplier, self.fallback, session_id, self.exclusion_set())
        if self.session.participant_count < MIN_PARTICIPANTS:
            self._reject("session changed while loading titles; replay again")
            return
        self._begin_round(session_id, pool)

    def replay_new_participants(self) -> None:
        self._begin()
        self.celebration.resolve()
        self._clear()
        logger.info("Session cleared for a new roster", extra={"session_id": self.session.id})

    def reset_session(self) -> None:
        self.replay_new_participants()

    def _begin_round(self, session_id: str, pool: list[Item]) -> None:
        self.celebration.resolve()
        participants = self.session.participants
        for participant in participants:
            participant.has_completed = False
        self.session = Session(
            id=session_id,
            status=SessionStatus.SWIPING,
            participants=participants,
            participant_queues={
                p.id: seeded_shuffle(pool, participant_seed(session_id, p.id)) for p in participants
            },
        )
        self.pool = list(pool)
        self.ratings = []
        self.show_summary = False
        self._shown = set()
        self._tally = ApprovalTally()
        self._activate(0)
        logger.info(
            "Session started",
            extra={"session_id": session_id, "participants": len(participants), "pool": len(pool)},
        )

    # ------------------------------------------------------------------ turns
    def rate(self, item_id: str, direction: RatingDirection | str) -> None:
        self._begin()
        if self.status is not SessionStatus.SWIPING:
            self._reject("no active rating session")
            return
        participant = self.active_participant()
        if participant is None:
            self._reject("no active participant")
            return
        try:
            direction = RatingDirection(direction)
        except ValueError:
            self._reject(f"unknown rating direction '{direction}'")
            return
        if self.item_by_id(item_id) is None:
            self._reject(f"item '{item_id}' is not part of this session")
            return

        rating = Rating(
            id=_new_id("rating"),
            session_id=self.session.id,
            participant_id=participant.id,
            item_id=item_id,
            direction=direction,
        )
        self.ratings.append(rating)
        self._tally.add(rating)
        if rating.approved:
            match = self._find_match()
            if match is not None:
                self._complete_with_match(match)
        self._advance_cursor()

    def end_turn(self) -> None:
        self._begin()
        if self.status is not SessionStatus.SWIPING:
            self._reject("no active rating session")
            return
        index = self._active_index()
        participants = self.session.participants
        participants[index].has_completed = True

        if self.session.all_completed():
            match = self._find_match()
            if match is not None:
                self._complete_with_match(match)
                return
            self.session.status = SessionStatus.COMPLETED
            self._record_history()
            self.show_summary = True
            logger.info(
                "Round exhausted without a match",
                extra={"session_id": self.session.id, "shown": len(self._shown)},
            )
            return

        self._activate((index + 1) % len(participants))

    def _activate(self, index: int) -> None:
        participant = self.session.participants[index]
        self.session.current_participant_index = index
        self.active_queue = self.session.participant_queues.get(participant.id, [])
        self.cursor = 0
        self._mark_shown()
        logger.debug("Turn started", extra={"session_id": self.session.id, "participant_id": participant.id})

    def _advance_cursor(self) -> None:
        if self.cursor < len(self.active_queue):
            self.cursor += 1
            self._mark_shown()

    def _mark_shown(self) -> None:
        # Only titles someone can actually see while rating count as shown.
        if self.status is SessionStatus.SWIPING and self.cursor < len(self.active_queue):
            self._shown.add(self.active_queue[self.cursor].id)

    def _active_index(self) -> int:
        index = self.session.current_participant_index
        if not 0 <= index < self.session.participant_count:
            raise SessionInvariantError(
                f"active participant index {index} outside roster of {self.session.participant_count}"
            )
        return index

    # ------------------------------------------------------------------ consensus
    def _find_match(self) -> Item | None:
        count = self.session.participant_count
        if FeatureFlag.INCREMENTAL_TALLY in self.settings.features:
            return self._tally.first_match(self.pool, count)
        return check_consensus(self.ratings, self.pool, count)

    def _complete_with_match(self, item: Item) -> None:
        self.session.status = SessionStatus.COMPLETED
        self.session.matched_item = item
        self._record_history()
        self.celebration.arm()
        logger.info("Match found", extra={"session_id": self.session.id, "item_id": item.id})

    def _celebration_finished(self) -> None:
        self.show_summary = True

    def _record_history(self) -> None:
        self.history = record_session(
            self.history,
            self.session.id,
            self._shown,
            window=self.settings.history_window,
        )
        try:
            self.history_store.save_history(self.history)
        except OSError:
            logger.error("Could not persist session history", extra={"session_id": self.session.id}, exc_info=True)

    # ------------------------------------------------------------------ post-match
    def continue_after_match(self) -> None:
        """Keep going in the same session with the matched title taken out."""

        self._begin()
        matched = self._require_match()
        if matched is None:
            return
        self.celebration.resolve()
        self.session.participant_queues = {
            pid: [item for item in queue if item.id != matched.id]
            for pid, queue in self.session.participant_queues.items()
        }
        self.pool = [item for item in self.pool if item.id != matched.id]
        for participant in self.session.participants:
            participant.has_completed = False
        self.session.matched_item = None
        self.session.status = SessionStatus.SWIPING
        self.show_summary = False
        self._activate(0)
        logger.info("Continuing after match", extra={"session_id": self.session.id, "item_id": matched.id})

    def undo_match_and_continue(self) -> None:
        """Retract the approvals that produced the match and resume where it happened."""

        self._begin()
        matched = self._require_match()
        if matched is None:
            return
        self.celebration.resolve()
        self.ratings = [r for r in self.ratings if not (r.item_id == matched.id and r.approved)]
        self._tally.discard_item(matched.id)
        current = self.session.current_participant_index
        for index, participant in enumerate(self.session.participants):
            participant.has_completed = index < current
        self.session.matched_item = None
        self.session.status = SessionStatus.SWIPING
        self.show_summary = False
        self._mark_shown()
        logger.info("Match undone", extra={"session_id": self.session.id, "item_id": matched.id})

    def _require_match(self) -> Item | None:
        matched = self.session.matched_item
        if self.status is not SessionStatus.COMPLETED or matched is None:
            self._reject("there is no match to act on")
            return None
        return matched

    # ------------------------------------------------------------------ helpers
    def _begin(self) -> None:
        self.notice = None

    def _reject(self, message: str) -> None:
        self.notice = message
        logger.warning("Action ignored: %s", message, extra={"session_id": self.session.id})
        return None
