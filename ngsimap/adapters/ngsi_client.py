"""NGSI-LD context broker client (entities + type catalogue)."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from ngsimap.adapters.errors import FetchError
from ngsimap.adapters.fixtures import stub_entities, stub_types
from ngsimap.config import Settings
from ngsimap.contracts.entity import EntityQuery
from ngsimap.services.selection import normalize_type_list

logger = logging.getLogger(__name__)

API_PREFIX = "/ngsi-ld/v1"
LD_JSON = "application/ld+json"
JSONLD_CONTEXT_REL = "http://www.w3.org/ns/json-ld#context"


def build_query(query: EntityQuery) -> dict[str, str]:
    """Query string parameters, keeping only the ones that are set."""
    params: dict[str, str] = {}
    for key, value in query.model_dump(exclude_none=True).items():
        if value == "":
            continue
        params[key] = str(value)
    return params


class NgsiClient:
    """Async HTTP client for an NGSI-LD broker.

    Falls back to the stub fixture when ``settings.stub_mode`` is set. Every
    call is a coroutine: cancelling the awaiting task aborts the request.
    """

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None):
        self._settings = settings
        self._client = http_client or httpx.AsyncClient(timeout=settings.http_timeout_s)

    @property
    def stub_mode(self) -> bool:
        return self._settings.stub_mode

    def _url(self, path: str) -> str:
        base = (self._settings.base_url or "").rstrip("/")
        return f"{base}{API_PREFIX}{path}"

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": LD_JSON}
        if self._settings.context_url:
            headers["Link"] = (
                f'<{self._settings.context_url}>; rel="{JSONLD_CONTEXT_REL}"; type="{LD_JSON}"'
            )
        return headers

    async def _get_json(self, url: str, params: dict[str, str] | None = None) -> Any:
        try:
            resp = await self._client.get(url, params=params, headers=self._headers())
        except httpx.HTTPError as exc:
            raise FetchError(url, reason=str(exc) or type(exc).__name__) from exc
        if not resp.is_success:
            raise FetchError(url, status_code=resp.status_code)
        try:
            return resp.json()
        except ValueError as exc:
            raise FetchError(url, reason="response body is not JSON") from exc

    async def get_entities(self, query: EntityQuery) -> list[dict[str, Any]]:
        """Fetch entities matching ``query``."""
        if self.stub_mode:
            return stub_entities(query.type, query.limit)

        url = self._url("/entities")
        data = await self._get_json(url, build_query(query))
        if not isinstance(data, list):
            raise FetchError(url, reason="expected a JSON array of entities")
        return data

    async def get_entities_for_types(
        self, types: list[str], limit: int | None = None
    ) -> list[dict[str, Any]]:
        """One request per type, flattened in type order."""
        if not types:
            return []
        limit = limit or self._settings.fetch_limit
        tasks = [
            asyncio.create_task(self.get_entities(EntityQuery(type=t, limit=limit)))
            for t in types
        ]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            # Cancel sibling requests of a failed type
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        entities = [entity for batch in results for entity in batch]
        logger.debug("Fetched %d entities for %d types", len(entities), len(types))
        return entities

    async def get_types(self) -> list[str]:
        """Type catalogue as a sorted, deduplicated list of names."""
        if self.stub_mode:
            return stub_types()
        return normalize_type_list(await self._get_json(self._url("/types")))

    async def aclose(self) -> None:
        await self._client.aclose()
