"""Wishlist: an insertion-ordered set of product ids."""

from __future__ import annotations

from typing import Iterator


class Wishlist:
    def __init__(self) -> None:
        # dict keys keep insertion order and give O(1) membership
        self._ids: dict[str, None] = {}

    def toggle(self, product_id: str) -> bool:
        """Flip membership of *product_id*. Returns True if it is now saved."""
        if product_id in self._ids:
            del self._ids[product_id]
            return False
        self._ids[product_id] = None
        return True

    def contains(self, product_id: str) -> bool:
        return product_id in self._ids

    __contains__ = contains

    @property
    def ids(self) -> list[str]:
        return list(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._ids))

    def __len__(self) -> int:
        return len(self._ids)
