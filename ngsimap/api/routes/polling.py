"""Refresh state and control endpoints."""

from __future__ import annotations

import asyncio
from typing import Any

from fastapi import APIRouter, Depends

from ngsimap.api.deps import get_session
from ngsimap.services.session import MapSession

router = APIRouter(prefix="/polling", tags=["polling"])


@router.get("")
async def get_state(session: MapSession = Depends(get_session)) -> dict[str, Any]:
    return session.poller.state.model_dump(mode="json")


@router.post("/refresh")
async def refresh(session: MapSession = Depends(get_session)) -> dict[str, Any]:
    """Manual refresh; the interval timer is not reset."""
    try:
        await session.refresh()
    except asyncio.CancelledError:
        pass
    return session.poller.state.model_dump(mode="json")


@router.post("/pause")
async def pause(session: MapSession = Depends(get_session)) -> dict[str, Any]:
    session.poller.pause()
    return session.poller.state.model_dump(mode="json")


@router.post("/resume")
async def resume(session: MapSession = Depends(get_session)) -> dict[str, Any]:
    session.poller.resume()
    return session.poller.state.model_dump(mode="json")
