"""Free-text resolution of queries into catalog coordinates.

The resolver walks the catalog hierarchy in its natural order; it does not
score or rank.  For a fixed snapshot and query the output is always the
same list in the same order.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from pyfitment.exceptions import CatalogLookupError
from pyfitment.models.catalog import CatalogSnapshot, Make, Model
from pyfitment.models.search import (
    CategoryResult,
    PartResult,
    SearchResult,
    VehicleResult,
    VehicleScope,
)

_logger = logging.getLogger(__name__)

DEFAULT_RESULT_LIMIT = 10

_YEAR_TOKEN = re.compile(r"\d{4}")


@dataclass(frozen=True, slots=True)
class ParsedQuery:
    """A lowercased query split into an optional year and name tokens."""

    text: str
    year: int | None = None
    name_tokens: tuple[str, ...] = ()


def parse_query(query: str) -> ParsedQuery:
    """Lowercase and tokenize *query*; the first 4-digit token becomes the year."""
    text = query.strip().lower()
    year: int | None = None
    names: list[str] = []
    for token in text.split():
        if year is None and _YEAR_TOKEN.fullmatch(token):
            year = int(token)
        else:
            names.append(token)
    return ParsedQuery(text=text, year=year, name_tokens=tuple(names))


def _any_token_matches(tokens: tuple[str, ...], name: str) -> bool:
    # Substring covers prefix.
    return any(token in name for token in tokens)


@dataclass
class _Collector:
    """Accumulates results, dropping duplicate labels, until *limit* is hit."""

    limit: int
    results: list[SearchResult] = field(default_factory=list)
    _seen: set[str] = field(default_factory=set)

    @property
    def full(self) -> bool:
        return len(self.results) >= self.limit

    def add(self, result: SearchResult) -> None:
        if self.full or result.label in self._seen:
            return
        self._seen.add(result.label)
        self.results.append(result)


class SearchResolver:
    """Resolve free-text queries against a :class:`CatalogSnapshot`."""

    def __init__(self, snapshot: CatalogSnapshot, *, limit: int = DEFAULT_RESULT_LIMIT) -> None:
        self._snapshot = snapshot
        self._limit = limit

    @property
    def snapshot(self) -> CatalogSnapshot:
        return self._snapshot

    def resolve(self, query: str, context: VehicleScope | None = None) -> list[SearchResult]:
        """Vehicles, then parts, then (with a *context*) categories."""
        parsed = parse_query(query)
        if not parsed.text:
            return []

        collector = _Collector(self._limit)
        self._collect_vehicles(parsed, collector)
        self._collect_parts(parsed, collector)
        if context is not None:
            self._collect_categories(parsed, context, collector)
        return collector.results

    def resolve_categories(self, query: str, context: VehicleScope | None = None) -> list[SearchResult]:
        parsed = parse_query(query)
        if not parsed.text:
            return []

        collector = _Collector(self._limit)
        self._collect_categories(parsed, context, collector)
        return collector.results

    # ------------------------------------------------------------------
    # Vehicles
    # ------------------------------------------------------------------

    def _collect_vehicles(self, parsed: ParsedQuery, collector: _Collector) -> None:
        snapshot = self._snapshot
        for year in snapshot.years:
            if parsed.year is not None and year != parsed.year:
                continue
            for make_id in snapshot.year_make_ids.get(year, []):
                if collector.full:
                    return
                try:
                    make = snapshot.make(make_id)
                except CatalogLookupError:
                    _logger.debug("Year %s indexes unknown make %s", year, make_id)
                    continue
                self._collect_make(parsed, year, make, collector)

    def _collect_make(self, parsed: ParsedQuery, year: int, make: Make, collector: _Collector) -> None:
        make_lower = make.name.lower()
        make_matches = not parsed.name_tokens or _any_token_matches(parsed.name_tokens, make_lower)

        # Without a year the make itself has to match; with one, every make
        # of that year is walked so a bare model name can still hit.
        if not make_matches and parsed.year is None:
            return

        if make_matches:
            collector.add(
                VehicleResult(
                    label=f"{year} {make.name}",
                    year=year,
                    make_id=make.id,
                    make_name=make.name,
                )
            )

        remaining = tuple(token for token in parsed.name_tokens if token not in make_lower)
        model_ids = self._snapshot.models_by_make_year.get(year, {}).get(make.id, [])
        for model_id in model_ids:
            if collector.full:
                return
            try:
                model = self._snapshot.model(model_id)
            except CatalogLookupError:
                _logger.debug("Make %s/%s indexes unknown model %s", year, make.id, model_id)
                continue
            if remaining and not _any_token_matches(remaining, model.name.lower()):
                continue
            self._collect_model(year, make, model, collector)

    def _collect_model(self, year: int, make: Make, model: Model, collector: _Collector) -> None:
        base = f"{year} {make.name} {model.name}"
        collector.add(
            VehicleResult(
                label=base,
                year=year,
                make_id=make.id,
                make_name=make.name,
                model_id=model.id,
                model_name=model.name,
            )
        )
        for engine in self._snapshot.engines_for(model.id):
            collector.add(
                VehicleResult(
                    label=f"{base} {engine.name}",
                    year=year,
                    make_id=make.id,
                    make_name=make.name,
                    model_id=model.id,
                    model_name=model.name,
                    engine_id=engine.id,
                    engine_name=engine.name,
                )
            )

    # ------------------------------------------------------------------
    # Parts and categories
    # ------------------------------------------------------------------

    def _collect_parts(self, parsed: ParsedQuery, collector: _Collector) -> None:
        for part in self._snapshot.parts:
            if collector.full:
                return
            if parsed.text in part.part_number.lower() or parsed.text in part.brand.lower():
                collector.add(
                    PartResult(
                        label=f"{part.brand} {part.part_number}",
                        part_number=part.part_number,
                        part_id=part.id,
                    )
                )

    def _collect_categories(
        self,
        parsed: ParsedQuery,
        context: VehicleScope | None,
        collector: _Collector,
    ) -> None:
        snapshot = self._snapshot
        for category in snapshot.categories:
            if collector.full:
                return
            if parsed.text not in category.name.lower():
                continue
            label = category.name
            if category.parent_id is not None:
                try:
                    parent = snapshot.category(category.parent_id)
                except CatalogLookupError:
                    _logger.debug("Category %s has unknown parent %s", category.id, category.parent_id)
                else:
                    label = f"{parent.name} > {category.name}"
            collector.add(
                CategoryResult(
                    label=label,
                    category_id=category.id,
                    category_name=category.name,
                    context=context,
                )
            )
