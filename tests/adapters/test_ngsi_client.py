"""Tests for the NGSI-LD client with mocked HTTP responses."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from ngsimap.adapters.errors import FetchError
from ngsimap.adapters.ngsi_client import NgsiClient, build_query
from ngsimap.config import Settings
from ngsimap.contracts import EntityQuery

BASE_URL = "http://broker:1026"
CONTEXT = "https://example.org/context.jsonld"

STATION = {
    "id": "urn:ngsi-ld:Station:1",
    "type": "Station",
    "location": {"type": "GeoProperty", "value": {"type": "Point", "coordinates": [18.0, 59.0]}},
}


def _settings(**overrides) -> Settings:
    return Settings(base_url=BASE_URL, **overrides)


class TestBuildQuery:
    def test_only_set_parameters(self):
        params = build_query(EntityQuery(type="Station", limit=200, q=""))
        assert params == {"type": "Station", "limit": "200"}

    def test_geo_parameters(self):
        params = build_query(EntityQuery(
            type="Sensor", georel="near;maxDistance==500", geometry="Point", coordinates="[18.0,59.3]",
        ))
        assert params["georel"] == "near;maxDistance==500"
        assert params["geometry"] == "Point"
        assert params["coordinates"] == "[18.0,59.3]"


class TestGetEntities:
    async def test_request_shape(self):
        seen: list[httpx.Request] = []

        def handler(req: httpx.Request) -> httpx.Response:
            seen.append(req)
            return httpx.Response(200, json=[STATION])

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            client = NgsiClient(_settings(context_url=CONTEXT), http_client=http)
            entities = await client.get_entities(EntityQuery(type="Station", limit=200))

        assert entities == [STATION]
        req = seen[0]
        assert req.url.path == "/ngsi-ld/v1/entities"
        assert req.url.params["type"] == "Station"
        assert req.url.params["limit"] == "200"
        assert req.headers["Accept"] == "application/ld+json"
        assert req.headers["Link"] == (
            f'<{CONTEXT}>; rel="http://www.w3.org/ns/json-ld#context"; type="application/ld+json"'
        )

    async def test_no_link_header_without_context(self):
        seen: list[httpx.Request] = []

        def handler(req: httpx.Request) -> httpx.Response:
            seen.append(req)
            return httpx.Response(200, json=[])

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            client = NgsiClient(_settings(), http_client=http)
            await client.get_entities(EntityQuery(type="Station"))

        assert "Link" not in seen[0].headers

    async def test_non_success_raises_fetch_error(self):
        transport = httpx.MockTransport(lambda req: httpx.Response(500, text="boom"))
        async with httpx.AsyncClient(transport=transport) as http:
            client = NgsiClient(_settings(), http_client=http)
            with pytest.raises(FetchError) as excinfo:
                await client.get_entities(EntityQuery(type="Station"))

        assert excinfo.value.status_code == 500
        assert "500" in str(excinfo.value)
        assert excinfo.value.url.endswith("/ngsi-ld/v1/entities")

    async def test_transport_error_raises_fetch_error(self):
        def handler(req: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=req)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            client = NgsiClient(_settings(), http_client=http)
            with pytest.raises(FetchError) as excinfo:
                await client.get_entities(EntityQuery(type="Station"))

        assert excinfo.value.status_code is None
        assert "connection refused" in str(excinfo.value)

    async def test_non_array_body_rejected(self):
        transport = httpx.MockTransport(lambda req: httpx.Response(200, json={"id": "x"}))
        async with httpx.AsyncClient(transport=transport) as http:
            client = NgsiClient(_settings(), http_client=http)
            with pytest.raises(FetchError):
                await client.get_entities(EntityQuery(type="Station"))

    async def test_one_request_per_type(self):
        requested: list[str] = []

        def handler(req: httpx.Request) -> httpx.Response:
            entity_type = req.url.params["type"]
            requested.append(entity_type)
            return httpx.Response(200, json=[{**STATION, "type": entity_type}])

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            client = NgsiClient(_settings(fetch_limit=50), http_client=http)
            entities = await client.get_entities_for_types(["Sensor", "Station"])

        assert sorted(requested) == ["Sensor", "Station"]
        assert [e["type"] for e in entities] == ["Sensor", "Station"]

    async def test_failed_type_cancels_sibling_requests(self):
        cancelled: list[str] = []

        async def handler(req: httpx.Request) -> httpx.Response:
            entity_type = req.url.params["type"]
            if entity_type == "Sensor":
                return httpx.Response(500)
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                cancelled.append(entity_type)
                raise
            return httpx.Response(200, json=[])

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            client = NgsiClient(_settings(), http_client=http)
            with pytest.raises(FetchError):
                await client.get_entities_for_types(["Sensor", "Station"])

        assert cancelled == ["Station"]

    async def test_no_types_no_requests(self):
        def handler(req: httpx.Request) -> httpx.Response:
            raise AssertionError("unexpected request")

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            client = NgsiClient(_settings(), http_client=http)
            assert await client.get_entities_for_types([]) == []


class TestGetTypes:
    async def test_type_list_envelope(self):
        body = {
            "id": "urn:ngsi-ld:EntityTypeList:1",
            "type": "EntityTypeList",
            "typeList": ["Station", "Sensor", "Station", ""],
        }
        transport = httpx.MockTransport(lambda req: httpx.Response(200, json=body))
        async with httpx.AsyncClient(transport=transport) as http:
            client = NgsiClient(_settings(), http_client=http)
            assert await client.get_types() == ["Sensor", "Station"]

    async def test_detailed_type_objects(self):
        body = [{"id": "https://uri/Station", "typeName": "Station"}, {"id": "Sensor"}]
        transport = httpx.MockTransport(lambda req: httpx.Response(200, json=body))
        async with httpx.AsyncClient(transport=transport) as http:
            client = NgsiClient(_settings(), http_client=http)
            assert await client.get_types() == ["Sensor", "Station"]


class TestStubMode:
    async def test_no_base_url_serves_fixture(self):
        client = NgsiClient(Settings())
        try:
            assert client.stub_mode
            assert "Station" in await client.get_types()
            stations = await client.get_entities(EntityQuery(type="Station"))
            assert {e["id"] for e in stations} == {
                "urn:ngsi-ld:Station:central",
                "urn:ngsi-ld:Station:north",
            }
            limited = await client.get_entities(EntityQuery(type="Station", limit=1))
            assert len(limited) == 1
        finally:
            await client.aclose()

    def test_use_mock_overrides_base_url(self):
        assert NgsiClient(_settings(use_mock=True)).stub_mode
