import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docledger import __version__
from docledger.config import Settings, get_settings
from docledger.create_tables import create_tables
from docledger.database import build_engine, build_session_factory
from docledger.documents.controllers.document_controller import router as document_router
from docledger.documents.controllers.signature_controller import router as signature_router
from docledger.documents.services import InMemoryDocumentStore, SqlDocumentStore
from docledger.events.controllers.event_controller import router as event_router
from docledger.events.services import InMemoryEventSink, SqlEventSink
from docledger.logging_config import configure_logging

logger = logging.getLogger(__name__)


def build_store(settings: Settings):
    """Builds the event sink and document store for the configured backend."""
    backend = settings.STORE_BACKEND.lower()

    if backend == "memory":
        events = InMemoryEventSink()
        return InMemoryDocumentStore(events), events

    if backend == "sql":
        engine = build_engine(settings.DATABASE_URL)
        create_tables(engine)
        session_factory = build_session_factory(engine)
        events = SqlEventSink(session_factory)
        return SqlDocumentStore(session_factory, events), events

    raise ValueError(f"Unknown store backend: {settings.STORE_BACKEND!r}")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # --- Startup logic ---
        logger.info("Starting ledger with %s store", settings.STORE_BACKEND)
        app.state.store, app.state.events = build_store(settings)
        yield
        # --- Shutdown logic ---
        logger.info("Ledger stopped after %d documents", app.state.store.count())

    app = FastAPI(
        title=settings.APP_NAME,
        description="Multi-party document signing ledger",
        version=__version__,
        lifespan=lifespan
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=[
            "Accept",
            "Content-Type",
            "Authorization",
            "Origin",
        ],
        max_age=86400,
    )
    # Routers
    app.include_router(document_router, prefix="/documents", tags=["documents"])
    app.include_router(signature_router, prefix="/documents", tags=["documents"])
    app.include_router(event_router, tags=["events"])
    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run("docledger.main:app", host="0.0.0.0", port=8000, reload=True)
