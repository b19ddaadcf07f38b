from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

import pytest

from pyfitment.catalog.memory import InMemoryCatalog
from pyfitment.exceptions import FitmentTransportError
from pyfitment.models.catalog import CatalogSnapshot, Category, Engine, Make, Model, Part
from pyfitment.models.search import SearchResult, VehicleScope

CATALOG: dict[str, Any] = {
    "years": [2009, 2010],
    "makes": [
        {"id": 5, "name": "Honda", "country": "JP"},
        {"id": 7, "name": "Toyota", "country": "JP"},
        {"id": 9, "name": "Ford", "country": "US"},
    ],
    "models": [
        {"id": 50, "name": "Civic", "makeId": 5},
        {"id": 51, "name": "Accord", "makeId": 5},
        {"id": 70, "name": "Corolla", "makeId": 7},
        {"id": 90, "name": "Focus", "makeId": 9},
    ],
    "engines": [
        {"id": 500, "name": "1.8L", "modelId": 50},
        {"id": 501, "name": "2.0L", "modelId": 50},
        {"id": 510, "name": "2.4L", "modelId": 51},
        {"id": 700, "name": "1.8L", "modelId": 70},
        {"id": 900, "name": "2.0L", "modelId": 90},
    ],
    "categories": [
        {"id": 1, "name": "Brakes", "parentId": None},
        {"id": 2, "name": "Brake Pads", "parentId": 1},
        {"id": 3, "name": "Rotors", "parentId": 1},
        {"id": 4, "name": "Filters", "parentId": None},
        {"id": 5, "name": "Oil Filter", "parentId": 4},
        {"id": 6, "name": "Wipers", "parentId": None},
    ],
    "parts": [
        {
            "id": 1000,
            "brand": "Bosch",
            "partNumber": "BP1234",
            "description": "Ceramic front pads",
            "price": 42.5,
            "tier": "premium",
            "warranty": "Lifetime",
            "stock": 12,
            "position": "Front",
            "categoryId": 2,
            "engineId": 500,
        },
        {
            "id": 1001,
            "brand": "Akebono",
            "partNumber": "ACT787",
            "description": "Ultra premium rear pads",
            "price": 55.0,
            "tier": "performance",
            "warranty": "3 years",
            "stock": 4,
            "position": "Rear",
            "categoryId": 2,
            "engineId": 500,
        },
        {
            "id": 1002,
            "brand": "Fram",
            "partNumber": "PH7317",
            "description": "Extra guard oil filter",
            "price": 6.99,
            "tier": "economy",
            "warranty": "1 year",
            "stock": 40,
            "categoryId": 5,
            "engineId": 500,
        },
        {
            "id": 1003,
            "brand": "Bosch",
            "partNumber": "BP9000",
            "description": "Semi-metallic pads",
            "price": 39.0,
            "tier": "daily_driver",
            "warranty": "2 years",
            "stock": 0,
            "position": "Front",
            "categoryId": 2,
            "engineId": 900,
        },
    ],
    "yearMakeIds": {"2009": [5, 9], "2010": [5, 7]},
    "modelsByMakeYear": {
        "2009": {"5": [50], "9": [90]},
        "2010": {"5": [50, 51], "7": [70]},
    },
}

CIVIC_2010_SCOPE = VehicleScope(
    year=2010,
    make_id=5,
    make_name="Honda",
    model_id=50,
    model_name="Civic",
    engine_id=500,
    engine_name="1.8L",
)


@pytest.fixture
def snapshot() -> CatalogSnapshot:
    return CatalogSnapshot.model_validate(CATALOG)


@dataclass
class RecordingCatalog:
    """Wraps an :class:`InMemoryCatalog`, recording calls and injecting faults.

    ``delays`` maps a method name to per-call delays consumed in order;
    ``failing`` names methods that raise a transport error.
    """

    inner: InMemoryCatalog
    calls: list[tuple[str, tuple[Any, ...]]] = field(default_factory=list)
    failing: set[str] = field(default_factory=set)
    delays: dict[str, list[float]] = field(default_factory=dict)

    def count(self, method: str, *args: Any) -> int:
        return sum(1 for name, call_args in self.calls if name == method and (not args or call_args == args))

    async def _call(self, method: str, *args: Any) -> Any:
        self.calls.append((method, args))
        pending = self.delays.get(method)
        if pending:
            await asyncio.sleep(pending.pop(0))
        if method in self.failing:
            raise FitmentTransportError(f"{method} unavailable", endpoint=method)
        return await getattr(self.inner, method)(*args)

    async def get_years(self) -> list[int]:
        return await self._call("get_years")  # type: ignore[no-any-return]

    async def get_makes(self, year: int) -> list[Make]:
        return await self._call("get_makes", year)  # type: ignore[no-any-return]

    async def get_models(self, make_id: int, year: int) -> list[Model]:
        return await self._call("get_models", make_id, year)  # type: ignore[no-any-return]

    async def get_engines(self, model_id: int) -> list[Engine]:
        return await self._call("get_engines", model_id)  # type: ignore[no-any-return]

    async def get_categories(self) -> list[Category]:
        return await self._call("get_categories")  # type: ignore[no-any-return]

    async def search(self, query: str) -> list[SearchResult]:
        return await self._call("search", query)  # type: ignore[no-any-return]

    async def search_categories(self, query: str, context: VehicleScope | None = None) -> list[SearchResult]:
        return await self._call("search_categories", query, context)  # type: ignore[no-any-return]

    async def get_parts(self, category_id: int, engine_id: int | None = None) -> list[Part]:
        return await self._call("get_parts", category_id, engine_id)  # type: ignore[no-any-return]


@pytest.fixture
def provider(snapshot: CatalogSnapshot) -> RecordingCatalog:
    return RecordingCatalog(InMemoryCatalog(snapshot))
