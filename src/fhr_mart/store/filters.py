"""Catalog filter engine.

Derives the visible product list from the search box and the selected
category chip.
"""

from __future__ import annotations

from typing import Iterable

from fhr_mart.models import Category, Product


def matches(product: Product, search_term: str, category: Category) -> bool:
    """Case-insensitive name substring match AND category match."""
    return search_term.lower() in product.name.lower() and category.matches(product.category)


def filter_products(
    products: Iterable[Product],
    search_term: str = "",
    category: Category = Category.ALL,
) -> list[Product]:
    """Return the products matching *search_term* and *category*, in order."""
    return [p for p in products if matches(p, search_term, category)]


class FilterEngine:
    """Filters a fixed product collection, memoizing the last input pair."""

    def __init__(self, products: Iterable[Product]) -> None:
        self._products: tuple[Product, ...] = tuple(products)
        self._last_key: tuple[str, Category] | None = None
        self._last_result: tuple[Product, ...] = ()

    def filter(self, search_term: str = "", category: Category = Category.ALL) -> list[Product]:
        key = (search_term, category)
        if key != self._last_key:
            self._last_result = tuple(filter_products(self._products, search_term, category))
            self._last_key = key
        return list(self._last_result)
