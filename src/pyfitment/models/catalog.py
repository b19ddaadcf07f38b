"""Catalog entities and the in-memory catalog snapshot."""

from __future__ import annotations

import json
from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import Field, PrivateAttr, model_validator

from pyfitment.exceptions import CatalogLookupError
from pyfitment.models._base import CatalogModel


class Make(CatalogModel):
    """A vehicle manufacturer."""

    id: int
    name: str
    country: str | None = None
    """Short country label shown next to the make (e.g. ``"JP"``)."""


class Model(CatalogModel):
    """A vehicle model.  Only valid inside a (year, make) scope."""

    id: int
    name: str
    make_id: int


class Engine(CatalogModel):
    """An engine option; the leaf of the vehicle hierarchy."""

    id: int
    name: str
    model_id: int


class Category(CatalogModel):
    """A part category.  Either a root or a direct child of a root."""

    id: int
    name: str
    parent_id: int | None = None

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


class PartTier(StrEnum):
    ECONOMY = "economy"
    DAILY_DRIVER = "daily_driver"
    PREMIUM = "premium"
    PERFORMANCE = "performance"


class Part(CatalogModel):
    """A sellable part record."""

    id: int
    brand: str
    part_number: str
    description: str = ""
    price: float = 0.0
    tier: PartTier = PartTier.DAILY_DRIVER
    warranty: str = ""
    stock: int = 0
    position: str | None = None
    category_id: int | None = None
    """Category the part is listed under."""
    engine_id: int | None = None
    """Engine the part fits."""


class CatalogSnapshot(CatalogModel):
    """Immutable in-memory copy of the whole catalog.

    ``year_make_ids`` indexes which makes are offered in a given year and
    ``models_by_make_year`` which models a make offers in a given year.
    Iteration order of every list is the catalog's natural order and is
    what search results follow.
    """

    years: list[int] = Field(default_factory=list)
    makes: list[Make] = Field(default_factory=list)
    models: list[Model] = Field(default_factory=list)
    engines: list[Engine] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    parts: list[Part] = Field(default_factory=list)
    year_make_ids: dict[int, list[int]] = Field(default_factory=dict)
    models_by_make_year: dict[int, dict[int, list[int]]] = Field(default_factory=dict)

    _makes_by_id: dict[int, Make] = PrivateAttr(default_factory=dict)
    _models_by_id: dict[int, Model] = PrivateAttr(default_factory=dict)
    _engines_by_id: dict[int, Engine] = PrivateAttr(default_factory=dict)
    _categories_by_id: dict[int, Category] = PrivateAttr(default_factory=dict)

    @model_validator(mode="after")
    def _check_category_depth(self) -> CatalogSnapshot:
        by_id = {category.id: category for category in self.categories}
        for category in self.categories:
            if category.parent_id is None:
                continue
            if category.parent_id == category.id:
                raise ValueError(f"category {category.id} is its own parent")
            parent = by_id.get(category.parent_id)
            if parent is None:
                raise ValueError(f"category {category.id} references unknown parent {category.parent_id}")
            if parent.parent_id is not None:
                raise ValueError(f"category {category.id} is nested deeper than two levels")
        return self

    def model_post_init(self, __context: Any) -> None:
        self._makes_by_id = {make.id: make for make in self.makes}
        self._models_by_id = {model.id: model for model in self.models}
        self._engines_by_id = {engine.id: engine for engine in self.engines}
        self._categories_by_id = {category.id: category for category in self.categories}

    @classmethod
    def from_file(cls, path: str | Path) -> CatalogSnapshot:
        """Load a snapshot from a JSON file."""
        with open(path, encoding="utf-8") as handle:
            return cls.model_validate(json.load(handle))

    def make(self, make_id: int) -> Make:
        try:
            return self._makes_by_id[make_id]
        except KeyError:
            raise CatalogLookupError("make", make_id) from None

    def model(self, model_id: int) -> Model:
        try:
            return self._models_by_id[model_id]
        except KeyError:
            raise CatalogLookupError("model", model_id) from None

    def engine(self, engine_id: int) -> Engine:
        try:
            return self._engines_by_id[engine_id]
        except KeyError:
            raise CatalogLookupError("engine", engine_id) from None

    def category(self, category_id: int) -> Category:
        try:
            return self._categories_by_id[category_id]
        except KeyError:
            raise CatalogLookupError("category", category_id) from None

    def engines_for(self, model_id: int) -> list[Engine]:
        return [engine for engine in self.engines if engine.model_id == model_id]
