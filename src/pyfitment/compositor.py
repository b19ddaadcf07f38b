"""Derived views of the current selection.

Pure functions only; callers recompute them whenever the selection, the
category list or the part list changes.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from pyfitment.models.catalog import Category, Part
from pyfitment.models.selection import PartSelection


@dataclass(frozen=True, slots=True)
class CategoryNode:
    """A root category with its direct children."""

    category: Category
    children: tuple[Category, ...] = field(default_factory=tuple)

    @property
    def has_children(self) -> bool:
        return bool(self.children)


def compose_breadcrumb(selection: PartSelection | None, categories: Sequence[Category]) -> str:
    """Render ``"{year} {make} {model} > {engine} > [{parent} > ]{category}"``.

    The category (and its parent) are looked up in *categories* so renamed
    entries show their current names; the selection's own category is the
    fallback when it is missing from the list.
    """
    if selection is None:
        return ""

    by_id = {category.id: category for category in categories}
    category = by_id.get(selection.category.id, selection.category)
    parent = by_id.get(category.parent_id) if category.parent_id is not None else None
    category_label = f"{parent.name} > {category.name}" if parent is not None else category.name
    vehicle_label = f"{selection.year} {selection.make.name} {selection.model.name}"

    return f"{vehicle_label} > {selection.engine.name} > {category_label}"


def build_category_tree(categories: Sequence[Category]) -> list[CategoryNode]:
    """Group a flat category list into roots and their children, in list order."""
    return [
        CategoryNode(
            category=root,
            children=tuple(child for child in categories if child.parent_id == root.id),
        )
        for root in categories
        if root.parent_id is None
    ]


def filter_parts(parts: Sequence[Part], query: str) -> list[Part]:
    """Keep parts whose brand, number, description, position or warranty contain *query*."""
    needle = query.strip().lower()
    if not needle:
        return list(parts)

    def _haystack(part: Part) -> str:
        fields = (part.brand, part.part_number, part.description, part.position, part.warranty)
        return " ".join(value for value in fields if value).lower()

    return [part for part in parts if needle in _haystack(part)]
