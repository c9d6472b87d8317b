from __future__ import annotations

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from ...core.errors import EmptyPoolError
from .engine import SessionEngine
from .schemas import (
    AddParticipantRequest,
    HistoryEntryPayload,
    ItemPayload,
    RateRequest,
    state_payload,
    summary_payload,
)

__all__ = ["create_session_router"]


class _SessionController:
    def __init__(self, engine: SessionEngine) -> None:
        self.engine = engine

    def state(self) -> JSONResponse:
        return JSONResponse(state_payload(self.engine).to_dict())

    async def start(self) -> JSONResponse:
        try:
            await self.engine.start_session()
        except EmptyPoolError as exc:
            raise HTTPException(503, str(exc)) from exc
        return self.state()

    async def replay(self) -> JSONResponse:
        try:
            await self.engine.replay_same_participants()
        except EmptyPoolError as exc:
            raise HTTPException(503, str(exc)) from exc
        return self.state()

    def item(self, item_id: str) -> JSONResponse:
        item = self.engine.item_by_id(item_id)
        if item is None:
            raise HTTPException(404, f"item '{item_id}' not found")
        return JSONResponse(ItemPayload.from_item(item).to_dict())

    def summary(self) -> JSONResponse:
        return JSONResponse(summary_payload(self.engine.summary()).to_dict())

    def history(self) -> JSONResponse:
        entries = [HistoryEntryPayload.from_entry(entry).to_dict() for entry in self.engine.history]
        return JSONResponse({"entries": entries})


def create_session_router(engine: SessionEngine) -> APIRouter:
    controller = _SessionController(engine)
    router = APIRouter(prefix="/api/v1/session", tags=["session"])

    @router.get("")
    async def get_state() -> JSONResponse:
        return controller.state()

    @router.post("/participants")
    async def add_participant(body: AddParticipantRequest) -> JSONResponse:
        engine.add_participant(body.name)
        return controller.state()

    @router.delete("/participants/{participant_id}")
    async def remove_participant(participant_id: str) -> JSONResponse:
        engine.remove_participant(participant_id)
        return controller.state()

    @router.post("/start")
    async def start_session() -> JSONResponse:
        return await controller.start()

    @router.post("/rate")
    async def rate(body: RateRequest) -> JSONResponse:
        engine.rate(body.item_id, body.direction)
        return controller.state()

    @router.post("/end-turn")
    async def end_turn() -> JSONResponse:
        engine.end_turn()
        return controller.state()

    @router.post("/reset")
    async def reset_session() -> JSONResponse:
        engine.reset_session()
        return controller.state()

    @router.post("/continue")
    async def continue_after_match() -> JSONResponse:
        engine.continue_after_match()
        return controller.state()

    @router.post("/undo")
    async def undo_match() -> JSONResponse:
        engine.undo_match_and_continue()
        return controller.state()

    @router.post("/replay")
    async def replay_same_participants() -> JSONResponse:
        return await controller.replay()

    @router.post("/replay-new")
    async def replay_new_participants() -> JSONResponse:
        engine.replay_new_participants()
        return controller.state()

    @router.get("/summary")
    async def get_summary() -> JSONResponse:
        return controller.summary()

    @router.get("/items/{item_id}")
    async def get_item(item_id: str) -> JSONResponse:
        return controller.item(item_id)

    @router.get("/history")
    async def get_history() -> JSONResponse:
        return controller.history()

    return router
