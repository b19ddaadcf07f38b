"""Data models for the fitment catalog."""

from pyfitment.models._base import CatalogModel
from pyfitment.models.catalog import (
    CatalogSnapshot,
    Category,
    Engine,
    Make,
    Model,
    Part,
    PartTier,
)
from pyfitment.models.search import (
    CategoryResult,
    PartResult,
    SearchResult,
    VehicleResult,
    VehicleScope,
    search_results_adapter,
)
from pyfitment.models.selection import (
    ExpansionOutcome,
    ExpansionStatus,
    PartSelection,
    SelectedPath,
)

__all__ = [
    "CatalogModel",
    "CatalogSnapshot",
    "Category",
    "CategoryResult",
    "Engine",
    "ExpansionOutcome",
    "ExpansionStatus",
    "Make",
    "Model",
    "Part",
    "PartResult",
    "PartSelection",
    "PartTier",
    "SearchResult",
    "SelectedPath",
    "VehicleResult",
    "VehicleScope",
    "search_results_adapter",
]
