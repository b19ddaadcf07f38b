"""Debounced search-as-you-type session.

Each keystroke restarts a debounce timer; when it fires the query is
resolved through the catalog provider.  Resolutions are only cancelled
by `aclose`, so every request is tagged with a generation and only the latest
generation may publish results.  A slow, older request therefore can
never overwrite a newer one.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from pyfitment.catalog.base import CatalogProvider
from pyfitment.expansion import ExpandToCategory, ExpandToVehicle, ExpansionCommand
from pyfitment.models.search import (
    CategoryResult,
    PartResult,
    SearchResult,
    VehicleResult,
    VehicleScope,
)
from pyfitment.models.selection import ExpansionOutcome
from pyfitment.search.resolver import DEFAULT_RESULT_LIMIT

_logger = logging.getLogger(__name__)

CommandDispatcher = Callable[[ExpansionCommand], Awaitable[ExpansionOutcome]]


def _merge(*batches: list[SearchResult], limit: int) -> list[SearchResult]:
    seen: set[str] = set()
    merged: list[SearchResult] = []
    for batch in batches:
        for result in batch:
            if result.label in seen:
                continue
            seen.add(result.label)
            merged.append(result)
    return merged[:limit]


class SearchSession:
    """State of one search bar.

    Must be used from inside a running event loop.
    """

    def __init__(
        self,
        provider: CatalogProvider,
        *,
        debounce: float = 0.2,
        min_query_length: int = 2,
        result_limit: int = DEFAULT_RESULT_LIMIT,
        dispatch: CommandDispatcher | None = None,
        on_part_select: Callable[[PartResult], None] | None = None,
        on_text_search: Callable[[str], None] | None = None,
        on_results: Callable[[list[SearchResult]], None] | None = None,
    ) -> None:
        self._provider = provider
        self._debounce = debounce
        self._min_query_length = min_query_length
        self._result_limit = result_limit
        self._dispatch = dispatch
        self._on_part_select = on_part_select
        self._on_text_search = on_text_search
        self._on_results = on_results

        self._query = ""
        self._results: list[SearchResult] = []
        self._is_open = False
        self._is_loading = False
        self._resolved = False
        self._highlighted = -1
        self._context: VehicleScope | None = None
        self._generation = 0
        self._timer: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def query(self) -> str:
        return self._query

    @property
    def results(self) -> list[SearchResult]:
        return list(self._results)

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def highlighted(self) -> int:
        return self._highlighted

    @property
    def has_no_matches(self) -> bool:
        """A resolution completed for the current query and found nothing."""
        return self._resolved and not self._is_loading and not self._results

    @property
    def context(self) -> VehicleScope | None:
        return self._context

    def set_context(self, scope: VehicleScope | None) -> None:
        """Scope category matches to an already selected vehicle."""
        self._context = scope

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def update(self, query: str) -> None:
        """Record a keystroke and restart the debounce timer."""
        self._query = query
        self._resolved = False
        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._debounce, self._fire)

    def clear(self) -> None:
        self._cancel_timer()
        # Invalidate anything still in flight.
        self._generation += 1
        self._query = ""
        self._results = []
        self._is_open = False
        self._is_loading = False
        self._resolved = False
        self._highlighted = -1

    async def aclose(self) -> None:
        """Clear the session and cancel resolutions still in flight."""
        self.clear()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def flush(self) -> None:
        """Fire a pending debounce timer now and wait for every resolution to settle."""
        if self._timer is not None:
            self._cancel_timer()
            self._fire()
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self) -> None:
        self._timer = None
        query = self._query
        if len(query.strip()) < self._min_query_length:
            self._generation += 1
            self._is_loading = False
            self._publish([], open_dropdown=False)
            return

        self._generation += 1
        generation = self._generation
        self._is_loading = True
        task = asyncio.get_running_loop().create_task(self._resolve(query, generation))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _resolve(self, query: str, generation: int) -> None:
        context = self._context
        try:
            if context is None:
                results = await self._provider.search(query)
            else:
                matches, categories = await asyncio.gather(
                    self._provider.search(query),
                    self._provider.search_categories(query, context),
                )
                results = _merge(list(matches), list(categories), limit=self._result_limit)
        except Exception:
            _logger.warning("Search for %r failed", query, exc_info=True)
            results = []

        if generation != self._generation:
            _logger.debug("Dropping stale results for %r (generation %d < %d)", query, generation, self._generation)
            return

        self._is_loading = False
        self._resolved = True
        self._publish(list(results), open_dropdown=bool(results))

    def _publish(self, results: list[SearchResult], *, open_dropdown: bool) -> None:
        self._results = results
        self._is_open = open_dropdown
        self._highlighted = -1
        if self._on_results is None:
            return
        try:
            self._on_results(list(results))
        except Exception:
            _logger.warning("on_results callback failed", exc_info=True)

    # ------------------------------------------------------------------
    # Keyboard navigation
    # ------------------------------------------------------------------

    def highlight_next(self) -> None:
        if self._highlighted < len(self._results) - 1:
            self._highlighted += 1

    def highlight_previous(self) -> None:
        self._highlighted = self._highlighted - 1 if self._highlighted > 0 else -1

    def close(self) -> None:
        self._is_open = False

    async def choose(self, index: int | None = None) -> ExpansionOutcome | None:
        """Activate a result (the highlighted one by default).

        Vehicles and categories are turned into expansion commands, parts go
        to ``on_part_select``.  With no result to activate a non-blank query
        is submitted through ``on_text_search``.
        """
        position = self._highlighted if index is None else index
        if not 0 <= position < len(self._results):
            if self._query.strip() and self._on_text_search is not None:
                self._on_text_search(self._query)
                self._is_open = False
            return None

        result = self._results[position]
        self._cancel_timer()
        self._query = result.label
        self._is_open = False

        if isinstance(result, PartResult):
            if self._on_part_select is not None:
                self._on_part_select(result)
            return None
        if self._dispatch is None:
            return None
        if isinstance(result, VehicleResult):
            return await self._dispatch(ExpandToVehicle(result))
        if isinstance(result, CategoryResult):
            return await self._dispatch(ExpandToCategory(result))
        return None
