"""FastAPI dependency injection wiring."""

from __future__ import annotations

from fastapi import Request

from ngsimap.services.session import MapSession


def get_session(request: Request) -> MapSession:
    """The process-wide map session created in the app lifespan."""
    return request.app.state.session
