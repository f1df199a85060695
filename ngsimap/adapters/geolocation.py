"""Best-effort location providers for the initial viewport."""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from ngsimap.adapters.errors import LocationUnavailableError
from ngsimap.contracts.common import GeoPoint

logger = logging.getLogger(__name__)


class Locator(Protocol):
    async def locate(self) -> GeoPoint: ...


class NullLocator:
    """No location source configured."""

    async def locate(self) -> GeoPoint:
        raise LocationUnavailableError("no location source configured")


class FixedLocator:
    """Location pinned in configuration."""

    def __init__(self, position: GeoPoint):
        self._position = position

    async def locate(self) -> GeoPoint:
        return self._position


class GeoIpLocator:
    """IP geolocation over HTTP; expects a JSON body with ``lat`` and ``lon``."""

    def __init__(self, url: str, http_client: httpx.AsyncClient | None = None):
        self._url = url
        self._client = http_client or httpx.AsyncClient(timeout=5.0)

    async def locate(self) -> GeoPoint:
        try:
            resp = await self._client.get(self._url)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise LocationUnavailableError(f"geoip lookup failed: {exc}") from exc

        lat = data.get("lat", data.get("latitude")) if isinstance(data, dict) else None
        lon = data.get("lon", data.get("longitude")) if isinstance(data, dict) else None
        try:
            return GeoPoint(latitude=float(lat), longitude=float(lon))
        except (TypeError, ValueError) as exc:
            raise LocationUnavailableError("geoip response has no coordinates") from exc
