"""Tagged node keys for the fitment tree.

Each hierarchy level has its own frozen key type carrying the parent-scope
fields that make it unique.  Keys hash structurally, so two keys are the
same node exactly when their level and fields are equal.

Scoping rules:

* a make is scoped by year (``MakeKey(year, make_id)``);
* a model is scoped by make (``ModelKey(make_id, model_id)``);
* engines and categories are global (``EngineKey(engine_id)``,
  ``CategoryKey(category_id)``).  Their ids are unique across the whole
  catalog, so the same category expanded under one engine is expanded
  under every engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import ClassVar


class NodeLevel(StrEnum):
    YEAR = "year"
    MAKE = "make"
    MODEL = "model"
    ENGINE = "engine"
    CATEGORY = "category"


@dataclass(frozen=True, slots=True)
class YearKey:
    level: ClassVar[NodeLevel] = NodeLevel.YEAR

    year: int


@dataclass(frozen=True, slots=True)
class MakeKey:
    level: ClassVar[NodeLevel] = NodeLevel.MAKE

    year: int
    make_id: int


@dataclass(frozen=True, slots=True)
class ModelKey:
    level: ClassVar[NodeLevel] = NodeLevel.MODEL

    make_id: int
    model_id: int


@dataclass(frozen=True, slots=True)
class EngineKey:
    level: ClassVar[NodeLevel] = NodeLevel.ENGINE

    engine_id: int


@dataclass(frozen=True, slots=True)
class CategoryKey:
    level: ClassVar[NodeLevel] = NodeLevel.CATEGORY

    category_id: int


NodeKey = YearKey | MakeKey | ModelKey | EngineKey | CategoryKey
