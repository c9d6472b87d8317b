from __future__ import annotations

import io

from rich.console import Console

from flickpick.core.models import SessionStatus
from flickpick.data.catalog import StaticCatalog
from flickpick.data.history_store import InMemoryHistoryStore
from flickpick.engine_play import run_play
from flickpick.features.session.engine import SessionEngine
from flickpick.ui.presenters import RichPresenter


def _presenter(answers: list[str]) -> tuple[RichPresenter, io.StringIO]:
    buffer = io.StringIO()
    script = iter(answers)
    presenter = RichPresenter(
        console=Console(file=buffer, width=100, color_system=None),
        input_fn=lambda _prompt: next(script),
    )
    return presenter, buffer


def test_scripted_session_reaches_match():
    engine = SessionEngine(history_store=InMemoryHistoryStore())
    presenter, buffer = _presenter(["Ann", "Bob", ""] + ["y"] * 10 + ["", "y", "s"])

    run_play(engine, presenter)

    assert engine.status is SessionStatus.COMPLETED
    assert engine.session.matched_item is not None
    output = buffer.getvalue()
    assert "It's a match!" in output
    assert engine.session.matched_item.title in output


def test_blank_roster_exits_without_starting():
    engine = SessionEngine(history_store=InMemoryHistoryStore())
    presenter, _ = _presenter([""])

    run_play(engine, presenter)

    assert engine.status is SessionStatus.SETUP


def test_one_name_is_not_enough():
    engine = SessionEngine(history_store=InMemoryHistoryStore())
    presenter, buffer = _presenter(["Ann", "", "ann", "Bob", "", "q"])

    run_play(engine, presenter)

    output = buffer.getvalue()
    assert "Add at least 2 people." in output
    assert "already exists" in output
    assert engine.status is SessionStatus.SWIPING


def test_undo_choice_resumes_rating():
    engine = SessionEngine(history_store=InMemoryHistoryStore())
    answers = ["Ann", "Bob", ""] + ["y"] * 10 + ["", "y", "u", "q"]
    presenter, _ = _presenter(answers)

    run_play(engine, presenter)

    assert engine.status is SessionStatus.SWIPING
    assert engine.session.matched_item is None
    assert engine.active_participant().name == "Bob"


def test_empty_catalog_is_reported_not_raised():
    engine = SessionEngine(fallback=StaticCatalog(items=[]), history_store=InMemoryHistoryStore())
    presenter, buffer = _presenter(["Ann", "Bob", ""])

    run_play(engine, presenter)

    assert engine.status is SessionStatus.SETUP
    assert "Could not load any titles" in buffer.getvalue()
