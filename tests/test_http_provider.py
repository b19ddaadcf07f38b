"""HTTP provider and transport tests against fake and local backends."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import aiohttp
import pytest
from aiohttp import test_utils, web

from pyfitment._transport import JsonTransport
from pyfitment.catalog.http import HttpCatalogProvider
from pyfitment.config import NavigatorConfig
from pyfitment.exceptions import FitmentTransportError
from pyfitment.models.search import CategoryResult, PartResult, VehicleResult
from tests.conftest import CIVIC_2010_SCOPE


@dataclass
class FakeTransport:
    """Return canned payloads per endpoint and record requests."""

    payloads: dict[str, Any]
    requests: list[tuple[str, dict[str, Any]]] = field(default_factory=list)

    async def get_json(self, endpoint: str, params: Mapping[str, Any] | None = None) -> Any:
        self.requests.append((endpoint, dict(params or {})))
        return self.payloads[endpoint]


@pytest.mark.asyncio
async def test_years_accept_objects_and_ints() -> None:
    provider = HttpCatalogProvider(FakeTransport({"/vehicles/years": [{"year": 2010}, 2009, "2008"]}))
    assert await provider.get_years() == [2010, 2009, 2008]


@pytest.mark.asyncio
async def test_invalid_years_raise() -> None:
    provider = HttpCatalogProvider(FakeTransport({"/vehicles/years": [{"year": "soon"}]}))
    with pytest.raises(FitmentTransportError):
        await provider.get_years()


@pytest.mark.asyncio
async def test_entity_endpoints_send_expected_params() -> None:
    transport = FakeTransport(
        {
            "/vehicles/makes": [{"id": 5, "name": "Honda", "country": "JP"}],
            "/vehicles/models": [{"id": 50, "name": "Civic", "makeId": 5}],
            "/vehicles/engines": [{"id": 500, "name": "1.8L", "modelId": 50}],
            "/categories": [{"id": 1, "name": "Brakes", "parentId": None}],
            "/parts": [{"id": 1000, "brand": "Bosch", "partNumber": "BP1234", "tier": "premium"}],
        }
    )
    provider = HttpCatalogProvider(transport)

    makes = await provider.get_makes(2010)
    models = await provider.get_models(5, 2010)
    engines = await provider.get_engines(50)
    categories = await provider.get_categories()
    parts = await provider.get_parts(2, 500)

    assert makes[0].country == "JP"
    assert models[0].make_id == 5
    assert engines[0].model_id == 50
    assert categories[0].is_root
    assert parts[0].part_number == "BP1234"
    assert transport.requests == [
        ("/vehicles/makes", {"year": 2010}),
        ("/vehicles/models", {"makeId": 5, "year": 2010}),
        ("/vehicles/engines", {"modelId": 50}),
        ("/categories", {}),
        ("/parts", {"categoryId": 2, "vehicleEngineId": 500}),
    ]


@pytest.mark.asyncio
async def test_search_parses_tagged_results() -> None:
    provider = HttpCatalogProvider(
        FakeTransport(
            {
                "/vehicles/search": [
                    {"type": "vehicle", "label": "2010 Honda", "year": 2010, "makeId": 5, "makeName": "Honda"},
                    {"type": "part", "label": "Bosch BP1234", "partNumber": "BP1234", "partId": 1000},
                ]
            }
        )
    )

    results = await provider.search("2010 h")

    assert isinstance(results[0], VehicleResult)
    assert results[0].make_id == 5
    assert isinstance(results[1], PartResult)


@pytest.mark.asyncio
async def test_unknown_result_type_is_a_transport_error() -> None:
    provider = HttpCatalogProvider(FakeTransport({"/vehicles/search": [{"type": "recipe", "label": "x"}]}))
    with pytest.raises(FitmentTransportError) as excinfo:
        await provider.search("xx")
    assert excinfo.value.endpoint == "/vehicles/search"


@pytest.mark.asyncio
async def test_category_search_lifts_flat_context() -> None:
    transport = FakeTransport(
        {
            "/categories/search": [
                {
                    "type": "category",
                    "label": "Brakes > Brake Pads",
                    "categoryId": 2,
                    "categoryName": "Brake Pads",
                    "year": 2010,
                    "makeId": 5,
                    "makeName": "Honda",
                    "modelId": 50,
                    "modelName": "Civic",
                    "engineId": 500,
                    "engineName": "1.8L",
                }
            ]
        }
    )
    results = await HttpCatalogProvider(transport).search_categories("pads")

    result = results[0]
    assert isinstance(result, CategoryResult)
    assert result.context == CIVIC_2010_SCOPE
    assert transport.requests == [("/categories/search", {"q": "pads"})]


@pytest.mark.asyncio
async def test_category_search_attaches_context_locally() -> None:
    transport = FakeTransport(
        {"/categories/search": [{"type": "category", "label": "Rotors", "categoryId": 3, "categoryName": "Rotors"}]}
    )
    results = await HttpCatalogProvider(transport).search_categories("rot", CIVIC_2010_SCOPE)

    assert isinstance(results[0], CategoryResult)
    assert results[0].context == CIVIC_2010_SCOPE
    assert results[0].to_path().engine_id == 500
    assert transport.requests[0][1] == {"q": "rot", "year": 2010, "makeId": 5, "modelId": 50, "engineId": 500}



@pytest.mark.asyncio
async def test_category_search_leaves_other_results_untouched() -> None:
    transport = FakeTransport(
        {
            "/categories/search": [
                {"type": "vehicle", "label": "2010", "year": 2010},
                {"type": "category", "label": "Rotors", "categoryId": 3, "categoryName": "Rotors"},
            ]
        }
    )
    results = await HttpCatalogProvider(transport).search_categories("rot", CIVIC_2010_SCOPE)

    assert isinstance(results[0], VehicleResult)
    assert results[0].to_path().make_id is None
    assert isinstance(results[1], CategoryResult)
    assert results[1].context == CIVIC_2010_SCOPE


class TestJsonTransport:
    @staticmethod
    async def _serve(handler: Any) -> test_utils.TestServer:
        app = web.Application()
        app.router.add_get("/api/vehicles/makes", handler)
        server = test_utils.TestServer(app)
        await server.start_server()
        return server

    @pytest.mark.asyncio
    async def test_get_json_sends_clean_params(self) -> None:
        seen: dict[str, str] = {}

        async def handler(request: web.Request) -> web.Response:
            seen.update(request.query)
            return web.json_response([{"id": 5, "name": "Honda"}])

        server = await self._serve(handler)
        try:
            config = NavigatorConfig(base_url=str(server.make_url("/api/")), use_mocks=False)
            async with aiohttp.ClientSession() as session:
                payload = await JsonTransport(config, session).get_json(
                    "/vehicles/makes", {"year": 2010, "skip": None}
                )
        finally:
            await server.close()

        assert payload == [{"id": 5, "name": "Honda"}]
        assert seen == {"year": "2010"}

    @pytest.mark.asyncio
    async def test_non_200_raises_with_status(self) -> None:
        async def handler(request: web.Request) -> web.Response:
            return web.Response(status=503, text="maintenance")

        server = await self._serve(handler)
        try:
            config = NavigatorConfig(base_url=str(server.make_url("/api")), use_mocks=False)
            async with aiohttp.ClientSession() as session:
                with pytest.raises(FitmentTransportError) as excinfo:
                    await JsonTransport(config, session).get_json("/vehicles/makes")
        finally:
            await server.close()

        assert excinfo.value.status_code == 503
        assert excinfo.value.endpoint == "/vehicles/makes"

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self) -> None:
        async def handler(request: web.Request) -> web.Response:
            return web.Response(text="<html>")

        server = await self._serve(handler)
        try:
            config = NavigatorConfig(base_url=str(server.make_url("/api")), use_mocks=False)
            async with aiohttp.ClientSession() as session:
                with pytest.raises(FitmentTransportError, match="Invalid JSON"):
                    await JsonTransport(config, session).get_json("/vehicles/makes")
        finally:
            await server.close()

    @pytest.mark.asyncio
    async def test_connection_error_is_wrapped(self) -> None:
        config = NavigatorConfig(base_url="http://127.0.0.1:9/api", use_mocks=False, request_timeout=2)
        async with aiohttp.ClientSession() as session:
            with pytest.raises(FitmentTransportError, match="failed"):
                await JsonTransport(config, session).get_json("/vehicles/makes")
