"""Catalog data provider interface."""

from __future__ import annotations

from typing import Protocol

from pyfitment.models.catalog import Category, Engine, Make, Model, Part
from pyfitment.models.search import SearchResult, VehicleScope


class CatalogProvider(Protocol):
    """Structural interface for everything the navigator reads.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementations (:class:`InMemoryCatalog`,
    :class:`HttpCatalogProvider`) concrete.
    """

    async def get_years(self) -> list[int]: ...

    async def get_makes(self, year: int) -> list[Make]: ...

    async def get_models(self, make_id: int, year: int) -> list[Model]: ...

    async def get_engines(self, model_id: int) -> list[Engine]: ...

    async def get_categories(self) -> list[Category]: ...

    async def search(self, query: str) -> list[SearchResult]: ...

    async def search_categories(self, query: str, context: VehicleScope | None = None) -> list[SearchResult]: ...

    async def get_parts(self, category_id: int, engine_id: int | None = None) -> list[Part]: ...
