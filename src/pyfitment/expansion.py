"""Reconcile a chosen search result back into tree state.

The controller is driven by explicit command objects
(:class:`ExpandToVehicle`, :class:`ExpandToCategory`) so callers such as the
search bar never need a handle on the tree itself.  Every command reports
an :class:`~pyfitment.models.ExpansionOutcome`; failures are never raised.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from pyfitment.catalog.base import CatalogProvider
from pyfitment.models.catalog import Category
from pyfitment.models.search import CategoryResult, SearchResult, VehicleResult, VehicleScope
from pyfitment.models.selection import (
    ExpansionOutcome,
    ExpansionStatus,
    PartSelection,
    SelectedPath,
)
from pyfitment.state.keys import CategoryKey, EngineKey, MakeKey, ModelKey, YearKey
from pyfitment.state.tree import TreeState

_logger = logging.getLogger(__name__)

PartTypeSelectCallback = Callable[[PartSelection], None]

_CATEGORY_COORDINATES = ("year", "make_id", "model_id", "engine_id", "category_id")


@dataclass(frozen=True, slots=True)
class ExpandToVehicle:
    """Reveal and highlight the vehicle a result points at."""

    result: SearchResult


@dataclass(frozen=True, slots=True)
class ExpandToCategory:
    """Reveal a category under a vehicle and select it as the part type."""

    result: SearchResult


ExpansionCommand = ExpandToVehicle | ExpandToCategory


def _scope_of(result: SearchResult) -> VehicleScope | None:
    if isinstance(result, VehicleResult):
        return result.to_scope()
    if isinstance(result, CategoryResult):
        return result.context
    return None


def _find(items: Sequence[Any], item_id: int) -> Any | None:
    return next((item for item in items if getattr(item, "id", None) == item_id), None)


class ExpansionController:
    """Apply expansion commands to a :class:`TreeState`."""

    def __init__(
        self,
        tree: TreeState,
        provider: CatalogProvider,
        *,
        on_part_type_select: PartTypeSelectCallback | None = None,
    ) -> None:
        self._tree = tree
        self._provider = provider
        self._on_part_type_select = on_part_type_select

    async def dispatch(self, command: ExpansionCommand) -> ExpansionOutcome:
        if isinstance(command, ExpandToVehicle):
            return self.expand_to_vehicle(command.result)
        if isinstance(command, ExpandToCategory):
            return await self.expand_to_category(command.result)
        raise TypeError(f"Unsupported expansion command: {command!r}")

    def _expand_vehicle_nodes(self, path: SelectedPath, scope: VehicleScope | None) -> None:
        tree = self._tree
        if path.year is None:
            return
        tree.expand(YearKey(path.year))
        if path.make_id is None:
            return
        tree.expand(MakeKey(path.year, path.make_id))
        if path.model_id is None:
            return
        tree.expand(ModelKey(path.make_id, path.model_id))
        if path.engine_id is None:
            return
        tree.expand(EngineKey(path.engine_id), scope=scope)

    def expand_to_vehicle(self, result: SearchResult) -> ExpansionOutcome:
        """Expand every vehicle node named by *result* and select exactly that prefix."""
        full = result.to_path()
        if full.year is None:
            return ExpansionOutcome(status=ExpansionStatus.REJECTED)

        path = full.model_copy(update={"category_id": None})
        self._expand_vehicle_nodes(path, _scope_of(result))
        self._tree.select(path)
        return ExpansionOutcome(status=ExpansionStatus.APPLIED)

    async def expand_to_category(self, result: SearchResult) -> ExpansionOutcome:
        """Expand down to a category and resolve the full :class:`PartSelection`.

        Requires year, make, model, engine and category coordinates.  The
        selection is only applied when every entity resolves and no newer
        selection happened while the catalog lookups were in flight.
        """
        path = result.to_path()
        absent = [name for name in _CATEGORY_COORDINATES if getattr(path, name) is None]
        if absent:
            _logger.debug("Category expansion rejected; missing %s", absent)
            return ExpansionOutcome(status=ExpansionStatus.REJECTED)
        assert path.year is not None and path.make_id is not None  # noqa: S101
        assert path.model_id is not None and path.category_id is not None  # noqa: S101

        tree = self._tree
        generation = tree.begin_selection()

        self._expand_vehicle_nodes(path, _scope_of(result))
        categories = tree.categories
        target = _find(categories, path.category_id)
        if isinstance(target, Category) and target.parent_id is not None:
            tree.expand(CategoryKey(target.parent_id))

        try:
            makes, models, engines = await asyncio.gather(
                self._provider.get_makes(path.year),
                self._provider.get_models(path.make_id, path.year),
                self._provider.get_engines(path.model_id),
            )
        except Exception:
            _logger.warning("Catalog lookups for %s failed", result.label, exc_info=True)
            return ExpansionOutcome(status=ExpansionStatus.RESOLUTION_FAILED)

        if tree.selection_generation != generation:
            _logger.debug("Category expansion for %s superseded", result.label)
            return ExpansionOutcome(status=ExpansionStatus.SUPERSEDED)

        resolved = {
            "make": _find(makes, path.make_id),
            "model": _find(models, path.model_id),
            "engine": _find(engines, path.engine_id),
            "category": target,
        }
        missing = tuple(name for name, entity in resolved.items() if entity is None)
        if missing:
            _logger.debug("Category expansion for %s could not resolve %s", result.label, missing)
            return ExpansionOutcome(status=ExpansionStatus.RESOLUTION_FAILED, missing=missing)

        selection = PartSelection(year=path.year, **resolved)
        tree.apply_selection(selection.to_path(), generation)
        self._announce(selection)
        return ExpansionOutcome(status=ExpansionStatus.SELECTED, selection=selection)

    def select_part_type(self, selection: PartSelection) -> None:
        """A leaf category was activated directly in the tree."""
        self._tree.select(selection.to_path())
        self._announce(selection)

    def _announce(self, selection: PartSelection) -> None:
        if self._on_part_type_select is None:
            return
        try:
            self._on_part_type_select(selection)
        except Exception:
            _logger.warning("on_part_type_select callback failed", exc_info=True)
