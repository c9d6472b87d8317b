from __future__ import annotations

import os

from fastapi import FastAPI

from ..core.config import Settings
from ..data.catalog import StaticCatalog
from ..data.history_store import HistoryStore, JsonHistoryStore
from ..data.tmdb import TmdbCatalog
from ..features.session import SessionEngine, create_session_router


def build_engine(settings: Settings, *, history_store: HistoryStore | None = None) -> SessionEngine:
    supplier = TmdbCatalog.from_settings(settings) if settings.catalog_configured else None
    return SessionEngine(
        supplier=supplier,
        fallback=StaticCatalog(),
        history_store=history_store or JsonHistoryStore(settings.history_path),
        settings=settings,
    )


def create_app(settings: Settings | None = None, *, engine: SessionEngine | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    engine = engine or build_engine(settings)

    app = FastAPI(title="flickpick")
    app.state.engine = engine
    app.include_router(create_session_router(engine))

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    return app


def main(host: str | None = None, port: int | None = None) -> None:  # pragma: no cover - runner
    import uvicorn

    host = host or os.environ.get("BIND", "127.0.0.1")
    port = port or int(os.environ.get("PORT", "8000"))
    uvicorn.run(create_app(), host=host, port=port, factory=False)


if __name__ == "__main__":  # pragma: no cover
    main()
