"""Catalog provider backed by an in-memory :class:`CatalogSnapshot`."""

from __future__ import annotations

import asyncio
from typing import TypeVar

from pyfitment.config import NavigatorConfig
from pyfitment.models.catalog import CatalogSnapshot, Category, Engine, Make, Model, Part
from pyfitment.models.search import SearchResult, VehicleScope
from pyfitment.search.resolver import DEFAULT_RESULT_LIMIT, SearchResolver

T = TypeVar("T")


class InMemoryCatalog:
    """Serve catalog reads and searches from a snapshot.

    Every response is a fresh list so callers may mutate what they get.
    An optional *latency* is awaited before each response to mimic a
    remote backend.
    """

    def __init__(
        self,
        snapshot: CatalogSnapshot,
        *,
        latency: float = 0.0,
        result_limit: int = DEFAULT_RESULT_LIMIT,
    ) -> None:
        self._snapshot = snapshot
        self._latency = latency
        self._resolver = SearchResolver(snapshot, limit=result_limit)

    @classmethod
    def from_config(cls, config: NavigatorConfig, snapshot: CatalogSnapshot | None = None) -> InMemoryCatalog:
        if snapshot is None:
            snapshot = CatalogSnapshot.from_file(config.catalog_path) if config.catalog_path else CatalogSnapshot()
        return cls(snapshot, latency=config.mock_latency, result_limit=config.result_limit)

    @property
    def snapshot(self) -> CatalogSnapshot:
        return self._snapshot

    async def _respond(self, data: T) -> T:
        if self._latency > 0:
            await asyncio.sleep(self._latency)
        else:
            await asyncio.sleep(0)
        return data

    async def get_years(self) -> list[int]:
        return await self._respond(list(self._snapshot.years))

    async def get_makes(self, year: int) -> list[Make]:
        make_ids = self._snapshot.year_make_ids.get(year)
        if make_ids is None:
            return await self._respond(list(self._snapshot.makes))
        wanted = set(make_ids)
        return await self._respond([make for make in self._snapshot.makes if make.id in wanted])

    async def get_models(self, make_id: int, year: int) -> list[Model]:
        model_ids = self._snapshot.models_by_make_year.get(year, {}).get(make_id)
        if model_ids is None:
            return await self._respond([model for model in self._snapshot.models if model.make_id == make_id])
        wanted = set(model_ids)
        return await self._respond([model for model in self._snapshot.models if model.id in wanted])

    async def get_engines(self, model_id: int) -> list[Engine]:
        return await self._respond(self._snapshot.engines_for(model_id))

    async def get_categories(self) -> list[Category]:
        return await self._respond(list(self._snapshot.categories))

    async def search(self, query: str) -> list[SearchResult]:
        return await self._respond(self._resolver.resolve(query))

    async def search_categories(self, query: str, context: VehicleScope | None = None) -> list[SearchResult]:
        return await self._respond(self._resolver.resolve_categories(query, context))

    async def get_parts(self, category_id: int, engine_id: int | None = None) -> list[Part]:
        return await self._respond(
            [
                part
                for part in self._snapshot.parts
                if part.category_id == category_id and (engine_id is None or part.engine_id == engine_id)
            ]
        )
