"""Selection state and expansion outcomes."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from pyfitment.exceptions import ResolutionFailed
from pyfitment.models._base import CatalogModel
from pyfitment.models.catalog import Category, Engine, Make, Model


class SelectedPath(CatalogModel):
    """The currently highlighted coordinates in the tree.

    Always replaced wholesale; a partial path means the deeper levels are
    unselected, never "inherited" from an earlier selection.
    """

    year: int | None = None
    make_id: int | None = None
    model_id: int | None = None
    engine_id: int | None = None
    category_id: int | None = None

    @property
    def is_empty(self) -> bool:
        return all(
            value is None for value in (self.year, self.make_id, self.model_id, self.engine_id, self.category_id)
        )


class PartSelection(CatalogModel):
    """A fully resolved vehicle + category coordinate used to query parts."""

    year: int
    make: Make
    model: Model
    engine: Engine
    category: Category

    def to_path(self) -> SelectedPath:
        return SelectedPath(
            year=self.year,
            make_id=self.make.id,
            model_id=self.model.id,
            engine_id=self.engine.id,
            category_id=self.category.id,
        )


class ExpansionStatus(StrEnum):
    APPLIED = "applied"
    """Tree nodes were expanded and the path selected (vehicle results)."""
    SELECTED = "selected"
    """A :class:`PartSelection` was produced and announced."""
    REJECTED = "rejected"
    """The result lacked the coordinates the command needs; nothing changed."""
    RESOLUTION_FAILED = "resolution_failed"
    """Nodes were expanded but an entity could not be resolved."""
    SUPERSEDED = "superseded"
    """A newer selection happened while the command was in flight."""


class ExpansionOutcome(CatalogModel):
    """Result of an expansion command."""

    status: ExpansionStatus
    selection: PartSelection | None = None
    missing: tuple[str, ...] = Field(default_factory=tuple)
    """Coordinates that failed to resolve (``resolution_failed`` only)."""

    @property
    def ok(self) -> bool:
        return self.status in (ExpansionStatus.APPLIED, ExpansionStatus.SELECTED)

    def raise_for_status(self) -> None:
        """Raise :class:`ResolutionFailed` when entity resolution failed."""
        if self.status == ExpansionStatus.RESOLUTION_FAILED:
            raise ResolutionFailed(self.missing)
