"""FastAPI application factory."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

import httpx
from dotenv import load_dotenv
from fastapi import FastAPI

# Load .env file from project root (must be before settings are read)
load_dotenv()
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from ngsimap.adapters.ngsi_client import NgsiClient  # noqa: E402
from ngsimap.api.routes import entities, layers, polling, view  # noqa: E402
from ngsimap.config import Settings  # noqa: E402
from ngsimap.services.session import MapSession  # noqa: E402

logger = logging.getLogger(__name__)

settings = Settings.from_env()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the map session and start polling in the background."""
    http = httpx.AsyncClient(timeout=settings.http_timeout_s)
    client = NgsiClient(settings, http)
    session = MapSession(settings, client)
    app.state.session = session
    if settings.stub_mode:
        logger.info("No NGSI_BASE_URL configured, serving stub entities")
    else:
        logger.info("Polling %s every %.0fs", settings.base_url, settings.poll_interval_s)

    startup = asyncio.create_task(session.start())
    try:
        yield
    finally:
        startup.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await startup
        await session.stop()
        await client.aclose()


app = FastAPI(
    title="ngsi-map API",
    description="Live NGSI-LD entity layers for a map view",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(entities.router, prefix="/api")
app.include_router(layers.router, prefix="/api")
app.include_router(polling.router, prefix="/api")
app.include_router(view.router, prefix="/api")


@app.get("/api/health")
async def health():
    session: MapSession = app.state.session
    return {
        "status": "ok",
        "stub_mode": session.settings.stub_mode,
        "poll_status": session.poller.state.status,
        "view_state": session.view.state,
        "layers": len(session.reconciler.layers),
    }
