"""Catalog provider talking to the REST catalog backend."""

from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter, ValidationError

from pyfitment._transport import Transport
from pyfitment.exceptions import FitmentTransportError
from pyfitment.models.catalog import Category, Engine, Make, Model, Part
from pyfitment.models.search import CategoryResult, SearchResult, VehicleScope, search_results_adapter

_makes = TypeAdapter(list[Make])
_models = TypeAdapter(list[Model])
_engines = TypeAdapter(list[Engine])
_categories = TypeAdapter(list[Category])
_parts = TypeAdapter(list[Part])


def _parse(adapter: TypeAdapter[Any], payload: Any, endpoint: str) -> Any:
    try:
        return adapter.validate_python(payload)
    except ValidationError as exc:
        raise FitmentTransportError(
            f"Unexpected payload from {endpoint}: {exc.error_count()} validation error(s)",
            endpoint=endpoint,
        ) from exc


def _parse_years(payload: Any, endpoint: str) -> list[int]:
    """Years arrive as ``[{"year": 2010}, ...]``; bare ints are accepted too."""
    if not isinstance(payload, list):
        raise FitmentTransportError(f"Expected a list from {endpoint}", endpoint=endpoint)
    years: list[int] = []
    for item in payload:
        value = item.get("year") if isinstance(item, dict) else item
        try:
            years.append(int(value))
        except (TypeError, ValueError) as exc:
            raise FitmentTransportError(f"Invalid year {value!r} from {endpoint}", endpoint=endpoint) from exc
    return years


class HttpCatalogProvider:
    """Read the catalog through a :class:`~pyfitment._transport.Transport`."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def get_years(self) -> list[int]:
        endpoint = "/vehicles/years"
        return _parse_years(await self._transport.get_json(endpoint), endpoint)

    async def get_makes(self, year: int) -> list[Make]:
        endpoint = "/vehicles/makes"
        payload = await self._transport.get_json(endpoint, {"year": year})
        return _parse(_makes, payload, endpoint)  # type: ignore[no-any-return]

    async def get_models(self, make_id: int, year: int) -> list[Model]:
        endpoint = "/vehicles/models"
        payload = await self._transport.get_json(endpoint, {"makeId": make_id, "year": year})
        return _parse(_models, payload, endpoint)  # type: ignore[no-any-return]

    async def get_engines(self, model_id: int) -> list[Engine]:
        endpoint = "/vehicles/engines"
        payload = await self._transport.get_json(endpoint, {"modelId": model_id})
        return _parse(_engines, payload, endpoint)  # type: ignore[no-any-return]

    async def get_categories(self) -> list[Category]:
        endpoint = "/categories"
        payload = await self._transport.get_json(endpoint)
        return _parse(_categories, payload, endpoint)  # type: ignore[no-any-return]

    async def search(self, query: str) -> list[SearchResult]:
        endpoint = "/vehicles/search"
        payload = await self._transport.get_json(endpoint, {"q": query})
        return _parse(search_results_adapter, payload, endpoint)  # type: ignore[no-any-return]

    async def search_categories(self, query: str, context: VehicleScope | None = None) -> list[SearchResult]:
        endpoint = "/categories/search"
        params: dict[str, Any] = {"q": query}
        if context is not None:
            params.update(
                {
                    "year": context.year,
                    "makeId": context.make_id,
                    "modelId": context.model_id,
                    "engineId": context.engine_id,
                }
            )
        payload = await self._transport.get_json(endpoint, params)
        results: list[SearchResult] = _parse(search_results_adapter, payload, endpoint)
        if context is None:
            return results
        # The backend does not echo the context back; attach it locally.
        return [
            result.model_copy(update={"context": context})
            if isinstance(result, CategoryResult) and result.context is None
            else result
            for result in results
        ]

    async def get_parts(self, category_id: int, engine_id: int | None = None) -> list[Part]:
        endpoint = "/parts"
        payload = await self._transport.get_json(
            endpoint,
            {"categoryId": category_id, "vehicleEngineId": engine_id},
        )
        return _parse(_parts, payload, endpoint)  # type: ignore[no-any-return]
