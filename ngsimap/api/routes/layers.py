"""Layer visibility, type selection and time window endpoints."""

from __future__ import annotations

import asyncio
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ngsimap.api.deps import get_session
from ngsimap.contracts.time_window import TimeWindow
from ngsimap.services.selection import ALL_TYPES
from ngsimap.services.session import MapSession
from ngsimap.services.styling import type_glyph

router = APIRouter(tags=["layers"])


class VisibilityRequest(BaseModel):
    visible: bool


class SelectionRequest(BaseModel):
    type: str = Field(default=ALL_TYPES, min_length=1, description="Entity type or __all__")


class TimeWindowRequest(BaseModel):
    start: float = Field(..., description="epoch seconds")
    end: float = Field(..., description="epoch seconds")


@router.get("/layers")
async def list_layers(session: MapSession = Depends(get_session)) -> list[dict[str, Any]]:
    surface = session.reconciler.surface
    return [
        {
            "type": entity_type,
            "color": layer.color,
            "glyph": type_glyph(entity_type),
            "visible": surface.is_attached(entity_type),
            "feature_count": len(layer.shapes),
        }
        for entity_type, layer in session.reconciler.layers.items()
    ]


@router.put("/layers/{entity_type}/visibility")
async def set_visibility(
    entity_type: str,
    request: VisibilityRequest,
    session: MapSession = Depends(get_session),
) -> dict[str, Any]:
    try:
        session.set_layer_visible(entity_type, request.visible)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Layer {entity_type} not found")
    return {"type": entity_type, "visible": request.visible}


@router.put("/selection")
async def set_selection(
    request: SelectionRequest,
    session: MapSession = Depends(get_session),
) -> dict[str, Any]:
    """Change the active type and wait for the superseding cycle."""
    task = session.set_selected_type(request.type)
    try:
        applied = await task
    except asyncio.CancelledError:
        applied = False
    return {
        "selected": session.selected_type,
        "applied": applied,
        "poll": session.poller.state.model_dump(mode="json"),
    }


@router.get("/time-window")
async def get_time_window(session: MapSession = Depends(get_session)) -> dict[str, Any]:
    return {
        "window": session.time_window.model_dump() if session.time_window else None,
        "observed": session.observed.model_dump() if session.observed else None,
    }


@router.put("/time-window")
async def set_time_window(
    request: TimeWindowRequest,
    session: MapSession = Depends(get_session),
) -> dict[str, Any]:
    session.set_time_window(TimeWindow(start=request.start, end=request.end))
    return {
        "window": session.time_window.model_dump(),
        "visible_features": len(session.visible_features),
    }


@router.delete("/time-window")
async def clear_time_window(session: MapSession = Depends(get_session)) -> dict[str, Any]:
    session.set_time_window(None)
    return {"window": None, "visible_features": len(session.visible_features)}
