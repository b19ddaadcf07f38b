"""Base model for catalog entities.

Every catalog model inherits from :class:`CatalogModel` which provides:

* ``alias_generator=to_camel`` so the camelCase keys of the catalog
  backend (``makeId``, ``parentId``) map onto snake_case fields.
* ``populate_by_name`` so Python callers can use the snake_case names.
* Immutability: entities are shared between tree nodes, search results
  and selections, so they must never change after construction.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CatalogModel(BaseModel):
    """Base for catalog entities and wire payloads."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
        protected_namespaces=(),
    )
