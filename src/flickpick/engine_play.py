"""Terminal pass-the-device loop driving a ``SessionEngine``."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any

from .core.errors import EmptyPoolError
from .core.models import RatingDirection, SessionStatus
from .features.session.engine import MIN_PARTICIPANTS, SessionEngine
from .ui.presenters import RichPresenter


def _collect_roster(engine: SessionEngine, presenter: RichPresenter) -> bool:
    presenter.console.print("Enter names one at a time; leave blank when everyone is in.")
    while True:
        name = presenter.ask("Name: ")
        if not name:
            if engine.session.participant_count >= MIN_PARTICIPANTS:
                return True
            if engine.session.participant_count == 0:
                return False
            presenter.show_notice(f"Add at least {MIN_PARTICIPANTS} people.")
            continue
        engine.add_participant(name)
        presenter.show_notice(engine.notice)
        presenter.show_roster(engine.session.participants)


def _play_round(engine: SessionEngine, presenter: RichPresenter) -> bool:
    """Rate until the session completes. Returns False if the group quit."""

    announced: str | None = None
    while engine.status is SessionStatus.SWIPING:
        participant = engine.active_participant()
        if participant is None:
            return False
        if participant.id != announced:
            presenter.start_turn(
                participant,
                engine.session.current_participant_index + 1,
                engine.session.participant_count,
            )
            announced = participant.id
        item = engine.current_item()
        if item is None:
            presenter.ask("Out of titles. Press enter and pass the device on.")
            engine.end_turn()
            announced = None
            continue
        presenter.show_item(item, engine.cursor + 1, len(engine.active_queue))
        choice = presenter.choose("Watch it?", ["y", "n", "e", "q"])
        if choice == "q":
            return False
        if choice == "e":
            engine.end_turn()
            announced = None
            continue
        engine.rate(item.id, RatingDirection.APPROVE if choice == "y" else RatingDirection.REJECT)
    return True


def _load_round(presenter: RichPresenter, step: Coroutine[Any, Any, None]) -> None:
    try:
        asyncio.run(step)
    except EmptyPoolError as exc:
        presenter.show_notice(f"Could not load any titles: {exc}")


def run_play(engine: SessionEngine, presenter: RichPresenter) -> None:
    if not _collect_roster(engine, presenter):
        return
    _load_round(presenter, engine.start_session())
    presenter.show_notice(engine.notice)

    while engine.status is SessionStatus.SWIPING:
        if not _play_round(engine, presenter):
            break
        matched = engine.session.matched_item
        if matched is None:
            presenter.show_summary(engine.summary())
            if presenter.choose("Play again with the same group?", ["r", "q"]) == "r":
                _load_round(presenter, engine.replay_same_participants())
            continue
        presenter.show_match(matched)
        choice = presenter.choose("Keep going, undo, replay or stop?", ["c", "u", "r", "s"])
        if choice == "c":
            engine.continue_after_match()
        elif choice == "u":
            engine.undo_match_and_continue()
        elif choice == "r":
            _load_round(presenter, engine.replay_same_participants())
        else:
            presenter.show_summary(engine.summary())
