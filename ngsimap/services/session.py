"""MapSession — wires fetch, transform, filter, reconcile and view together.

One session backs one map view. All mutation happens on the event loop
inside a single apply step per data cycle.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from ngsimap.adapters.geolocation import FixedLocator, GeoIpLocator, Locator, NullLocator
from ngsimap.adapters.map_surface import InMemoryMapSurface, MapSurface
from ngsimap.adapters.ngsi_client import NgsiClient
from ngsimap.config import Settings
from ngsimap.contracts.enums import PollStatus
from ngsimap.contracts.feature import FeatureCollection
from ngsimap.contracts.time_window import TimeWindow
from ngsimap.services.polling import PollingController
from ngsimap.services.reconciler import ReconcileReport, ReconcilerState, reconcile, set_layer_visible
from ngsimap.services.selection import ALL_TYPES, resolve_active_types
from ngsimap.services.time_filter import filter_by_window, observed_range
from ngsimap.services.transformer import transform
from ngsimap.services.view_controller import ViewController

logger = logging.getLogger(__name__)


@dataclass
class CycleData:
    """Raw result of one fetch cycle."""

    types: list[str]
    entities: list[dict[str, Any]] = field(default_factory=list)


def locator_from_settings(settings: Settings) -> Locator:
    if settings.home is not None:
        return FixedLocator(settings.home)
    if settings.geoip_url:
        return GeoIpLocator(settings.geoip_url)
    return NullLocator()


class MapSession:
    """Live, filterable map state for one viewer."""

    def __init__(
        self,
        settings: Settings,
        client: NgsiClient,
        surface: MapSurface | None = None,
        locator: Locator | None = None,
        selected: str = ALL_TYPES,
    ):
        self.settings = settings
        self._client = client
        self.surface = surface or InMemoryMapSurface()
        self.reconciler = ReconcilerState(surface=self.surface)
        self.view = ViewController(
            self.surface,
            locator or locator_from_settings(settings),
            locate_timeout_s=settings.geolocation_timeout_s,
        )
        self.poller: PollingController[str, CycleData] = PollingController(
            self._fetch_cycle,
            self._apply_cycle,
            params=selected,
            interval_s=settings.poll_interval_s,
        )
        self.types: list[str] = []
        self.features = FeatureCollection()
        self.visible_features = FeatureCollection()
        self.time_window: TimeWindow | None = None
        self.observed: TimeWindow | None = None
        self.last_report = ReconcileReport()

    @property
    def selected_type(self) -> str:
        return self.poller.params

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self, poll: bool = True) -> None:
        """Start polling and establish the initial viewport concurrently."""
        if poll:
            self.poller.start()
        await self.view.establish_initial_view()
        # Data may already be on the map when the fix attempt gives up
        self.view.on_reconciled(self.reconciler.layers, self.last_report.rendered)

    async def load_once(self) -> bool:
        """Run a single fetch cycle to completion (no timer)."""
        try:
            return await self.poller.refresh()
        except asyncio.CancelledError:
            return False

    async def stop(self) -> None:
        await self.poller.stop()

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def refresh(self) -> asyncio.Task:
        return self.poller.refresh()

    def set_selected_type(self, selected: str) -> asyncio.Task:
        logger.info("Selection changed to %s", selected)
        return self.poller.set_params(selected)

    def set_time_window(self, window: TimeWindow | None) -> None:
        """Re-filter the last collection; no refetch."""
        self.time_window = window
        self._render()

    def set_layer_visible(self, entity_type: str, visible: bool) -> None:
        set_layer_visible(self.reconciler, entity_type, visible)

    def recenter(self) -> bool:
        return self.view.recenter(self.reconciler.layers)

    # ------------------------------------------------------------------
    # Cycle
    # ------------------------------------------------------------------

    async def _fetch_cycle(self, selected: str) -> CycleData:
        types = await self._client.get_types()
        active = resolve_active_types(types, selected)
        entities = await self._client.get_entities_for_types(active, self.settings.fetch_limit)
        return CycleData(types=types, entities=entities)

    def _apply_cycle(self, data: CycleData) -> None:
        self.types = data.types
        self.features = transform(data.entities)
        self.observed = observed_range(self.features)
        self._render()
        if not self.types:
            self.poller.state.status = PollStatus.EMPTY_CATALOGUE
        logger.info(
            "Applied cycle: %d types, %d entities, %d features rendered",
            len(data.types), len(data.entities), self.last_report.rendered,
        )

    def _render(self) -> None:
        self.visible_features = filter_by_window(self.features, self.time_window)
        self.last_report = reconcile(self.reconciler, set(self.types), self.visible_features)
        self.view.on_reconciled(self.reconciler.layers, self.last_report.rendered)
