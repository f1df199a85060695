"""Initial viewport and re-center handling.

State machine::

    IDLE --fix--> LOCATED
    IDLE --no fix / timeout--> UNLOCATED --first non-empty cycle--> FITTED

Automatic fitting happens at most once. ``recenter()`` is available from
every state and fits each time it is called without touching the state.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping

from ngsimap.adapters.errors import LocationUnavailableError
from ngsimap.adapters.geolocation import Locator
from ngsimap.adapters.map_surface import DEFAULT_ZOOM, MapSurface
from ngsimap.contracts.enums import ViewState
from ngsimap.contracts.layer import LayerState
from ngsimap.services.reconciler import attached_bounds

logger = logging.getLogger(__name__)

FIT_PADDING = 0.2
DEFAULT_LOCATE_TIMEOUT_S = 5.0


class ViewController:
    """Owns the map viewport together with the reconciler."""

    def __init__(
        self,
        surface: MapSurface,
        locator: Locator,
        locate_timeout_s: float = DEFAULT_LOCATE_TIMEOUT_S,
    ):
        self._surface = surface
        self._locator = locator
        self._timeout_s = locate_timeout_s
        self.state = ViewState.IDLE

    async def establish_initial_view(self) -> ViewState:
        """Try a location fix once; fall back to fitting the data."""
        if self.state != ViewState.IDLE:
            return self.state
        try:
            fix = await asyncio.wait_for(self._locator.locate(), timeout=self._timeout_s)
        except (LocationUnavailableError, TimeoutError) as exc:
            logger.info("No location fix (%s), will fit to data", str(exc) or "timeout")
            self.state = ViewState.UNLOCATED
            return self.state

        self._surface.set_view(fix, DEFAULT_ZOOM)
        self._surface.show_user_position(fix)
        self.state = ViewState.LOCATED
        logger.info("Viewport set to location fix %.4f, %.4f", fix.latitude, fix.longitude)
        return self.state

    def fit(self, layers: Mapping[str, LayerState]) -> bool:
        """Fit the viewport to the attached layers. False when nothing to fit."""
        bounds = attached_bounds(layers, self._surface)
        if bounds is None:
            return False
        self._surface.fit_bounds(bounds, FIT_PADDING)
        return True

    def on_reconciled(self, layers: Mapping[str, LayerState], rendered: int) -> bool:
        """Automatic fit after a reconciliation cycle, at most once."""
        if self.state != ViewState.UNLOCATED or rendered == 0:
            return False
        if not self.fit(layers):
            return False
        self.state = ViewState.FITTED
        return True

    def recenter(self, layers: Mapping[str, LayerState]) -> bool:
        return self.fit(layers)
