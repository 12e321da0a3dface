import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request

from routes.realtime_ws import router as realtime_router
from routes.session_route import router as session_router
from routes.voice_route import router as voice_router
from services.realtime.connection_registry import ConnectionRegistry
from services.realtime.frame_parser import DEFAULT_MAX_FRAME_BYTES
from services.realtime.session_store import SessionStore, SqliteSessionStore
from utils.database_init import AsyncDatabaseInitializer

load_dotenv()  # Load environment variables from .env file if present

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
LOGGER = logging.getLogger(__name__)


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


async def build_session_store() -> SessionStore:
    """
    Build the session store selected by SESSION_STORE_BACKEND.

      - "memory" (default): process-local store, lost on restart.
      - "sqlite": durable store at DATABASE_DIR/app.db; DATABASE_RESET wipes it first.
    """
    backend = os.getenv("SESSION_STORE_BACKEND", "memory").strip().lower()
    if backend == "memory":
        return SessionStore()
    if backend == "sqlite":
        db_initializer = AsyncDatabaseInitializer(reset=_env_flag("DATABASE_RESET"))
        await db_initializer.ensure_database()
        return SqliteSessionStore(db_initializer)
    raise RuntimeError(f"Unknown SESSION_STORE_BACKEND {backend!r}; expected 'memory' or 'sqlite'")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - the session store (unless one was injected into `create_app`)
      - the connection registry used for server push
      - the shared httpx client for the voice agent exchange
    and attach them to `app.state`.
    """
    if getattr(app.state, "session_store", None) is None:
        app.state.session_store = await build_session_store()
    LOGGER.info("Session store backend: %s", app.state.session_store.backend)

    app.state.connection_registry = ConnectionRegistry()
    app.state.http_client = httpx.AsyncClient(timeout=10.0)

    try:
        yield
    finally:
        await app.state.http_client.aclose()


def create_app(session_store: Optional[SessionStore] = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    """
    app = FastAPI(lifespan=lifespan)
    app.state.session_store = session_store
    app.state.max_frame_bytes = int(os.getenv("MAX_FRAME_BYTES", DEFAULT_MAX_FRAME_BYTES))

    @app.get("/api/health")
    async def health(request: Request):
        """
        Simple health check reporting which session store is active.
        """
        store = getattr(request.app.state, "session_store", None)
        return {"ok": True, "store": getattr(store, "backend", None)}

    app.include_router(session_router)
    app.include_router(voice_router)
    app.include_router(realtime_router)

    return app


app = create_app()


def run() -> None:
    """
    Serve the application with uvicorn on HOST:PORT.
    """
    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        log_level=os.getenv("LOG_LEVEL", "INFO").lower(),
    )


if __name__ == "__main__":
    run()
