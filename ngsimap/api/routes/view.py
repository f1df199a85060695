"""Viewport endpoints and HTML map export."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse

from ngsimap.adapters.folium_renderer import render_html
from ngsimap.adapters.map_surface import InMemoryMapSurface
from ngsimap.api.deps import get_session
from ngsimap.services.session import MapSession

router = APIRouter(prefix="/view", tags=["view"])


def _view_dict(session: MapSession) -> dict[str, Any]:
    surface = session.surface
    data: dict[str, Any] = {"state": session.view.state}
    if isinstance(surface, InMemoryMapSurface):
        data["viewport"] = surface.viewport.model_dump(mode="json", exclude_none=True)
        data["user_position"] = (
            surface.user_position.model_dump() if surface.user_position else None
        )
    return data


@router.get("")
async def get_view(session: MapSession = Depends(get_session)) -> dict[str, Any]:
    return _view_dict(session)


@router.post("/recenter")
async def recenter(session: MapSession = Depends(get_session)) -> dict[str, Any]:
    """Fit the viewport to the visible layers; repeatable."""
    fitted = session.recenter()
    return {"fitted": fitted, **_view_dict(session)}


@router.get("/map", response_class=HTMLResponse)
async def map_html(session: MapSession = Depends(get_session)) -> HTMLResponse:
    if not isinstance(session.surface, InMemoryMapSurface):
        raise HTTPException(status_code=501, detail="Surface cannot be rendered server-side")
    return HTMLResponse(render_html(session.reconciler.layers, session.surface))
