"""pyfitment - Async vehicle-fitment catalog navigation and search."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyfitment")
except PackageNotFoundError:
    __version__ = "0+local"
from pyfitment.catalog import CatalogProvider, HttpCatalogProvider, InMemoryCatalog
from pyfitment.compositor import build_category_tree, compose_breadcrumb, filter_parts
from pyfitment.config import NavigatorConfig
from pyfitment.exceptions import (
    CatalogLookupError,
    FitmentConfigError,
    FitmentError,
    FitmentTransportError,
    ResolutionFailed,
)
from pyfitment.expansion import ExpandToCategory, ExpandToVehicle, ExpansionController
from pyfitment.models import (
    CatalogSnapshot,
    Category,
    CategoryResult,
    Engine,
    ExpansionOutcome,
    ExpansionStatus,
    Make,
    Model,
    Part,
    PartResult,
    PartSelection,
    SearchResult,
    SelectedPath,
    VehicleResult,
    VehicleScope,
)
from pyfitment.navigator import FitmentNavigator
from pyfitment.search import SearchResolver, SearchSession
from pyfitment.state import NodeLevel, TreeState

__all__ = [
    "__version__",
    "CatalogLookupError",
    "CatalogProvider",
    "CatalogSnapshot",
    "Category",
    "CategoryResult",
    "Engine",
    "ExpandToCategory",
    "ExpandToVehicle",
    "ExpansionController",
    "ExpansionOutcome",
    "ExpansionStatus",
    "FitmentConfigError",
    "FitmentError",
    "FitmentNavigator",
    "FitmentTransportError",
    "HttpCatalogProvider",
    "InMemoryCatalog",
    "Make",
    "Model",
    "NavigatorConfig",
    "NodeLevel",
    "Part",
    "PartResult",
    "PartSelection",
    "ResolutionFailed",
    "SearchResolver",
    "SearchResult",
    "SearchSession",
    "SelectedPath",
    "TreeState",
    "VehicleResult",
    "VehicleScope",
    "build_category_tree",
    "compose_breadcrumb",
    "filter_parts",
]
