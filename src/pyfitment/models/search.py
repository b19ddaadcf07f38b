"""Search result payloads.

A :data:`SearchResult` is a tagged union discriminated on ``type``.  The
same shapes are produced by the local resolver and returned by the
catalog backend's ``/vehicles/search`` and ``/categories/search``
endpoints, so every model accepts camelCase wire keys.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import Field, TypeAdapter, model_validator

from pyfitment.models._base import CatalogModel
from pyfitment.models.selection import SelectedPath

_SCOPE_KEYS: dict[str, str] = {
    "year": "year",
    "makeId": "make_id",
    "makeName": "make_name",
    "modelId": "model_id",
    "modelName": "model_name",
    "engineId": "engine_id",
    "engineName": "engine_name",
}


class VehicleScope(CatalogModel):
    """An already selected vehicle, used as ambient search context."""

    year: int
    make_id: int
    make_name: str
    model_id: int
    model_name: str
    engine_id: int | None = None
    engine_name: str | None = None


class VehicleResult(CatalogModel):
    """A vehicle match; carries a prefix of the vehicle coordinates."""

    type: Literal["vehicle"] = "vehicle"
    label: str
    year: int
    make_id: int | None = None
    make_name: str | None = None
    model_id: int | None = None
    model_name: str | None = None
    engine_id: int | None = None
    engine_name: str | None = None

    @model_validator(mode="after")
    def _check_prefix(self) -> VehicleResult:
        if self.model_id is not None and self.make_id is None:
            raise ValueError("model_id requires make_id")
        if self.engine_id is not None and self.model_id is None:
            raise ValueError("engine_id requires model_id")
        return self

    def to_path(self) -> SelectedPath:
        return SelectedPath(
            year=self.year,
            make_id=self.make_id,
            model_id=self.model_id,
            engine_id=self.engine_id,
        )

    def to_scope(self) -> VehicleScope | None:
        """Scope of the engine this result points at, if it is that deep."""
        if self.engine_id is None:
            return None
        return VehicleScope(
            year=self.year,
            make_id=self.make_id,
            make_name=self.make_name or "",
            model_id=self.model_id,
            model_name=self.model_name or "",
            engine_id=self.engine_id,
            engine_name=self.engine_name,
        )


class PartResult(CatalogModel):
    """A part-number or brand match."""

    type: Literal["part"] = "part"
    label: str
    part_number: str
    part_id: int

    def to_path(self) -> SelectedPath:
        return SelectedPath()


class CategoryResult(CatalogModel):
    """A category match, optionally bound to a vehicle context."""

    type: Literal["category"] = "category"
    label: str
    category_id: int
    category_name: str
    context: VehicleScope | None = None

    @model_validator(mode="before")
    @classmethod
    def _lift_flat_context(cls, values: Any) -> Any:
        """Accept the backend's flat shape where vehicle fields sit beside ``categoryId``."""
        if not isinstance(values, dict) or values.get("context") is not None:
            return values
        scope: dict[str, Any] = {}
        for wire_key, field_name in _SCOPE_KEYS.items():
            value = values.get(wire_key, values.get(field_name))
            if value is not None:
                scope[field_name] = value
        if not scope:
            return values
        scope_names = set(_SCOPE_KEYS) | set(_SCOPE_KEYS.values())
        merged = {key: value for key, value in values.items() if key not in scope_names}
        merged["context"] = scope
        return merged

    def to_path(self) -> SelectedPath:
        scope = self.context
        if scope is None:
            return SelectedPath(category_id=self.category_id)
        return SelectedPath(
            year=scope.year,
            make_id=scope.make_id,
            model_id=scope.model_id,
            engine_id=scope.engine_id,
            category_id=self.category_id,
        )


SearchResult = Annotated[VehicleResult | PartResult | CategoryResult, Field(discriminator="type")]

search_results_adapter: TypeAdapter[list[SearchResult]] = TypeAdapter(list[SearchResult])
"""Validates a JSON list of search results into typed models."""
