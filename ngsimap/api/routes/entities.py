"""Type catalogue and feature endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from ngsimap.api.deps import get_session
from ngsimap.contracts.enums import PollStatus
from ngsimap.contracts.result import ServiceResult
from ngsimap.contracts.time_window import TimeWindow
from ngsimap.services.session import MapSession
from ngsimap.services.time_filter import filter_by_window

router = APIRouter(tags=["entities"])


@router.get("/types")
async def list_types(session: MapSession = Depends(get_session)) -> dict[str, Any]:
    """Known entity types, or the advisory/error state explaining why there are none."""
    state = session.poller.state
    if session.types:
        result = ServiceResult[list[str]].ok(session.types)
    elif state.status == PollStatus.ERROR and state.error is not None:
        result = ServiceResult[list[str]].fail(state.error.code, state.error.message)
    elif state.status == PollStatus.EMPTY_CATALOGUE:
        result = ServiceResult[list[str]].fail(
            "empty_catalogue", "The broker reports no entity types"
        )
    else:
        result = ServiceResult[list[str]].ok([])
    return result.model_dump(mode="json")


@router.get("/features")
async def list_features(
    start: float | None = None,
    end: float | None = None,
    session: MapSession = Depends(get_session),
) -> dict[str, Any]:
    """GeoJSON of the current features.

    With ``start`` and ``end`` (epoch seconds) the full collection is filtered
    to that window instead of the session's own.
    """
    if start is not None and end is not None:
        features = filter_by_window(session.features, TimeWindow(start=start, end=end))
    else:
        features = session.visible_features
    return features.to_geojson()
