"""Catalog data providers.

The navigator only depends on the :class:`CatalogProvider` protocol; the
in-memory and HTTP implementations here are interchangeable.
"""

from pyfitment.catalog.base import CatalogProvider
from pyfitment.catalog.http import HttpCatalogProvider
from pyfitment.catalog.memory import InMemoryCatalog

__all__ = ["CatalogProvider", "HttpCatalogProvider", "InMemoryCatalog"]
