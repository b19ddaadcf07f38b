"""High-level async navigator wiring provider, tree, search and selection."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from pyfitment._transport import JsonTransport
from pyfitment.catalog.base import CatalogProvider
from pyfitment.catalog.http import HttpCatalogProvider
from pyfitment.catalog.memory import InMemoryCatalog
from pyfitment.compositor import CategoryNode, build_category_tree, compose_breadcrumb, filter_parts
from pyfitment.config import NavigatorConfig
from pyfitment.exceptions import FitmentError
from pyfitment.expansion import ExpansionCommand, ExpansionController
from pyfitment.models.catalog import CatalogSnapshot, Part
from pyfitment.models.search import PartResult, SearchResult, VehicleScope
from pyfitment.models.selection import ExpansionOutcome, PartSelection
from pyfitment.search.session import SearchSession
from pyfitment.state.tree import TreeState

_logger = logging.getLogger(__name__)


class FitmentNavigator:
    """Async catalog navigator.

    Usage::

        async with FitmentNavigator(config, on_part_type_select=show_parts) as nav:
            await nav.load()
            nav.search.update("2010 civic")
    """

    def __init__(
        self,
        config: NavigatorConfig | None = None,
        *,
        provider: CatalogProvider | None = None,
        snapshot: CatalogSnapshot | None = None,
        session: aiohttp.ClientSession | None = None,
        on_part_type_select: Callable[[PartSelection], None] | None = None,
        on_vehicle_expand: Callable[[VehicleScope], None] | None = None,
        on_part_select: Callable[[PartResult], None] | None = None,
        on_text_search: Callable[[str], None] | None = None,
    ) -> None:
        self._config = config or NavigatorConfig()
        self._provider = provider
        self._snapshot = snapshot
        self._external_session = session is not None
        self._http_session = session
        self._on_part_type_select = on_part_type_select
        self._on_vehicle_expand = on_vehicle_expand
        self._on_part_select = on_part_select
        self._on_text_search = on_text_search
        self._tree: TreeState | None = None
        self._controller: ExpansionController | None = None
        self._search: SearchSession | None = None
        self._selection: PartSelection | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FitmentNavigator:
        if self._provider is None:
            self._provider = self._build_provider()
        provider = self._provider
        self._tree = TreeState(provider, on_vehicle_expand=self._handle_vehicle_expand)
        self._controller = ExpansionController(
            self._tree,
            provider,
            on_part_type_select=self._handle_part_type_select,
        )
        self._search = SearchSession(
            provider,
            debounce=self._config.search_debounce,
            min_query_length=self._config.min_query_length,
            result_limit=self._config.result_limit,
            dispatch=self._controller.dispatch,
            on_part_select=self._on_part_select,
            on_text_search=self._on_text_search,
        )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        # Background work must stop before the HTTP session goes away.
        if self._search is not None:
            await self._search.aclose()
        if self._tree is not None:
            await self._tree.aclose()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    def _build_provider(self) -> CatalogProvider:
        if self._config.use_mocks:
            return InMemoryCatalog.from_config(self._config, self._snapshot)
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        return HttpCatalogProvider(JsonTransport(self._config, self._http_session))

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    @property
    def config(self) -> NavigatorConfig:
        return self._config

    @property
    def provider(self) -> CatalogProvider:
        if self._provider is None:
            raise FitmentError("Navigator not initialized. Use 'async with FitmentNavigator(...) as nav:'")
        return self._provider

    @property
    def tree(self) -> TreeState:
        if self._tree is None:
            raise FitmentError("Navigator not initialized. Use 'async with FitmentNavigator(...) as nav:'")
        return self._tree

    @property
    def controller(self) -> ExpansionController:
        if self._controller is None:
            raise FitmentError("Navigator not initialized. Use 'async with FitmentNavigator(...) as nav:'")
        return self._controller

    @property
    def search(self) -> SearchSession:
        if self._search is None:
            raise FitmentError("Navigator not initialized. Use 'async with FitmentNavigator(...) as nav:'")
        return self._search

    async def load(self) -> None:
        """Load years and categories for the tree roots."""
        await self.tree.load()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def expand_to_vehicle(self, result: SearchResult) -> ExpansionOutcome:
        return self.controller.expand_to_vehicle(result)

    async def expand_to_category(self, result: SearchResult) -> ExpansionOutcome:
        return await self.controller.expand_to_category(result)

    async def dispatch(self, command: ExpansionCommand) -> ExpansionOutcome:
        return await self.controller.dispatch(command)

    def select_part_type(self, selection: PartSelection) -> None:
        self.controller.select_part_type(selection)

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def selection(self) -> PartSelection | None:
        return self._selection

    @property
    def breadcrumb(self) -> str:
        return compose_breadcrumb(self._selection, self.tree.categories)

    @property
    def category_tree(self) -> list[CategoryNode]:
        return build_category_tree(self.tree.categories)

    async def get_parts(self, query: str = "") -> list[Part]:
        """Parts for the current selection, optionally filtered by free text."""
        selection = self._selection
        if selection is None:
            return []
        parts = await self.provider.get_parts(selection.category.id, selection.engine.id)
        return filter_parts(parts, query)

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------

    def _handle_part_type_select(self, selection: PartSelection) -> None:
        self._selection = selection
        if self._on_part_type_select is not None:
            self._on_part_type_select(selection)

    def _handle_vehicle_expand(self, scope: VehicleScope) -> None:
        if self._search is not None:
            self._search.set_context(scope)
        if self._on_vehicle_expand is not None:
            self._on_vehicle_expand(scope)
