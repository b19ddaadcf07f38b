"""Expand/collapse and selection state of the fitment tree.

This is the only component allowed to mutate tree state.  Expanding a node
is the sole trigger for loading its children from the catalog provider;
collapsing never cancels and never caches, so expanding the same node
again always issues a new fetch.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from pyfitment.catalog.base import CatalogProvider
from pyfitment.models.catalog import Category
from pyfitment.models.search import VehicleScope
from pyfitment.models.selection import SelectedPath
from pyfitment.state.keys import (
    CategoryKey,
    EngineKey,
    MakeKey,
    ModelKey,
    NodeKey,
    NodeLevel,
    YearKey,
)

_logger = logging.getLogger(__name__)

VehicleExpandCallback = Callable[[VehicleScope], None]


def _child(children: list[Any] | None, item_id: int) -> Any | None:
    if not children:
        return None
    return next((child for child in children if getattr(child, "id", None) == item_id), None)


@dataclass
class NodeState:
    """Lazily loaded children of one node plus its fetch status."""

    children: list[Any] | None = None
    loading: bool = False
    error: Exception | None = None
    fetch_seq: int = 0
    fetch_count: int = 0


@dataclass
class _Roots:
    years: list[int] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)
    error: Exception | None = None


class TreeState:
    """Per-session tree state.

    Must be used from inside a running event loop: expanding a node
    schedules its fetch as a task on the current loop.
    """

    def __init__(
        self,
        provider: CatalogProvider,
        *,
        on_vehicle_expand: VehicleExpandCallback | None = None,
    ) -> None:
        self._provider = provider
        self._on_vehicle_expand = on_vehicle_expand
        self._expanded: dict[NodeLevel, set[NodeKey]] = {level: set() for level in NodeLevel}
        self._nodes: dict[NodeKey, NodeState] = {}
        self._tasks: set[asyncio.Task[None]] = set()
        self._selected = SelectedPath()
        self._selection_generation = 0
        self._roots = _Roots()

    # ------------------------------------------------------------------
    # Roots
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Load the root years and the flat category list."""
        try:
            years, categories = await asyncio.gather(
                self._provider.get_years(),
                self._provider.get_categories(),
            )
        except Exception as exc:
            _logger.warning("Loading catalog roots failed", exc_info=True)
            self._roots.error = exc
            return
        self._roots = _Roots(years=list(years), categories=list(categories))

    @property
    def years(self) -> list[int]:
        return list(self._roots.years)

    @property
    def categories(self) -> list[Category]:
        return list(self._roots.categories)

    @property
    def load_error(self) -> Exception | None:
        return self._roots.error

    # ------------------------------------------------------------------
    # Expansion
    # ------------------------------------------------------------------

    def is_expanded(self, key: NodeKey) -> bool:
        return key in self._expanded[key.level]

    def expanded(self, level: NodeLevel) -> frozenset[NodeKey]:
        return frozenset(self._expanded[level])

    def toggle(self, key: NodeKey, *, scope: VehicleScope | None = None) -> None:
        """Flip *key* between expanded and collapsed.

        *scope* is only meaningful for engine keys.  Expanding an engine
        announces it through ``on_vehicle_expand``; without *scope* the
        vehicle is rebuilt from the loaded ancestor nodes.
        """
        if self.is_expanded(key):
            self.collapse(key)
        else:
            self.expand(key, scope=scope)

    def expand(self, key: NodeKey, *, scope: VehicleScope | None = None) -> None:
        """Expand *key* if it is collapsed.  Already expanded nodes are left alone."""
        expanded = self._expanded[key.level]
        if key in expanded:
            return
        expanded.add(key)
        self._issue_fetch(key)
        if isinstance(key, EngineKey):
            if scope is None:
                scope = self.scope_of_engine(key.engine_id)
            if scope is None:
                _logger.debug("Engine %d expanded outside a loaded vehicle; not announced", key.engine_id)
            else:
                self._announce_vehicle(scope)

    def collapse(self, key: NodeKey) -> None:
        self._expanded[key.level].discard(key)

    def toggle_year(self, year: int) -> None:
        self.toggle(YearKey(year))

    def toggle_make(self, year: int, make_id: int) -> None:
        self.toggle(MakeKey(year, make_id))

    def toggle_model(self, make_id: int, model_id: int) -> None:
        self.toggle(ModelKey(make_id, model_id))

    def toggle_engine(self, engine_id: int, scope: VehicleScope | None = None) -> None:
        self.toggle(EngineKey(engine_id), scope=scope)

    def toggle_category(self, category_id: int) -> None:
        self.toggle(CategoryKey(category_id))

    def scope_of_engine(self, engine_id: int) -> VehicleScope | None:
        """Rebuild the vehicle an engine belongs to from loaded ancestor nodes.

        Walks the expanded model, make and year nodes whose children contain
        the engine.  When the same model is open under several years the
        currently selected year wins, then the earliest year.  Returns
        ``None`` while any ancestor is not loaded.
        """
        model_keys = sorted(
            (key for key in self._expanded[NodeLevel.MODEL] if isinstance(key, ModelKey)),
            key=lambda key: (key.make_id, key.model_id),
        )
        for model_key in model_keys:
            engine = _child(self.children(model_key), engine_id)
            if engine is None:
                continue
            make_keys = [
                key
                for key in self._expanded[NodeLevel.MAKE]
                if isinstance(key, MakeKey)
                and key.make_id == model_key.make_id
                and _child(self.children(key), model_key.model_id) is not None
            ]
            make_keys.sort(key=lambda key: (key.year != self._selected.year, key.year))
            for make_key in make_keys:
                make = _child(self.children(YearKey(make_key.year)), make_key.make_id)
                model = _child(self.children(make_key), model_key.model_id)
                if make is None or model is None:
                    continue
                return VehicleScope(
                    year=make_key.year,
                    make_id=make.id,
                    make_name=make.name,
                    model_id=model.id,
                    model_name=model.name,
                    engine_id=engine.id,
                    engine_name=engine.name,
                )
        return None

    # ------------------------------------------------------------------
    # Lazy children
    # ------------------------------------------------------------------

    def _fetcher(self, key: NodeKey) -> Callable[[], Awaitable[Sequence[Any]]] | None:
        provider = self._provider
        if isinstance(key, YearKey):
            return lambda: provider.get_makes(key.year)
        if isinstance(key, MakeKey):
            return lambda: provider.get_models(key.make_id, key.year)
        if isinstance(key, ModelKey):
            return lambda: provider.get_engines(key.model_id)
        # Engines and categories have no remote children.
        return None

    def _issue_fetch(self, key: NodeKey) -> None:
        fetch = self._fetcher(key)
        if fetch is None:
            return
        node = self._nodes.setdefault(key, NodeState())
        node.fetch_seq += 1
        node.fetch_count += 1
        node.loading = True
        node.error = None
        _logger.debug("Fetching children of %s (#%d)", key, node.fetch_seq)
        task = asyncio.get_running_loop().create_task(self._run_fetch(key, node.fetch_seq, fetch))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_fetch(
        self,
        key: NodeKey,
        seq: int,
        fetch: Callable[[], Awaitable[Sequence[Any]]],
    ) -> None:
        node = self._nodes[key]
        try:
            children = list(await fetch())
        except Exception as exc:
            if seq != node.fetch_seq:
                return
            _logger.warning("Fetching children of %s failed", key, exc_info=True)
            node.children = []
            node.error = exc
            node.loading = False
            return
        if seq != node.fetch_seq:
            _logger.debug("Dropping stale children of %s (#%d < #%d)", key, seq, node.fetch_seq)
            return
        node.children = children
        node.loading = False

    def children(self, key: NodeKey) -> list[Any] | None:
        """Children loaded by the latest completed fetch, ``None`` if never loaded."""
        node = self._nodes.get(key)
        if node is None or node.children is None:
            return None
        return list(node.children)

    def is_loading(self, key: NodeKey) -> bool:
        node = self._nodes.get(key)
        return node is not None and node.loading

    def error(self, key: NodeKey) -> Exception | None:
        node = self._nodes.get(key)
        return node.error if node is not None else None

    def fetch_count(self, key: NodeKey) -> int:
        node = self._nodes.get(key)
        return node.fetch_count if node is not None else 0

    async def wait_idle(self) -> None:
        """Wait until every in-flight node fetch has settled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel in-flight node fetches and wait for them to finish.

        Cancelled nodes stop loading and keep whatever children they had.
        """
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        for node in self._nodes.values():
            node.loading = False

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    @property
    def selected_path(self) -> SelectedPath:
        return self._selected

    @property
    def selection_generation(self) -> int:
        return self._selection_generation

    def begin_selection(self) -> int:
        """Reserve a selection generation for an asynchronous selection."""
        self._selection_generation += 1
        return self._selection_generation

    def select(self, path: SelectedPath) -> None:
        """Replace the selected path wholesale."""
        self._selection_generation += 1
        self._selected = path

    def apply_selection(self, path: SelectedPath, generation: int) -> bool:
        """Select *path* only if no other selection happened since *generation*."""
        if generation != self._selection_generation:
            return False
        self._selected = path
        return True

    def _announce_vehicle(self, scope: VehicleScope) -> None:
        if self._on_vehicle_expand is None:
            return
        try:
            self._on_vehicle_expand(scope)
        except Exception:
            _logger.warning("on_vehicle_expand callback failed", exc_info=True)
