"""Cart ledger.

Ordered collection of ``CartEntry`` objects with at most one entry per
product id. Quantities never drop below 1; ``remove`` is the only way to
take a product out of the bag. Entries handed to callers are copies, so the
ledger is only changed through its own methods.
"""

from __future__ import annotations

from typing import Iterator

from fhr_mart.models import CartEntry, Product


class CartLedger:
    """In-memory shopping bag."""

    def __init__(self) -> None:
        self._entries: list[CartEntry] = []

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def entries(self) -> list[CartEntry]:
        """Entries in the order they were first added."""
        return [entry.model_copy() for entry in self._entries]

    def get(self, product_id: str) -> CartEntry | None:
        entry = self._find(product_id)
        return entry.model_copy() if entry is not None else None

    def quantity(self, product_id: str) -> int:
        """Quantity of *product_id* in the bag, 0 when absent."""
        entry = self._find(product_id)
        return entry.quantity if entry is not None else 0

    def total(self) -> int:
        """Sum of price x quantity over all entries."""
        return sum(entry.line_total for entry in self._entries)

    def item_count(self) -> int:
        """Sum of quantities (the navbar badge)."""
        return sum(entry.quantity for entry in self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    def __contains__(self, product_id: object) -> bool:
        return any(entry.product_id == product_id for entry in self._entries)

    def __iter__(self) -> Iterator[CartEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self._entries)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, product: Product) -> CartEntry:
        """Add one unit of *product*, merging with an existing entry."""
        entry = self._find(product.id)
        if entry is not None:
            entry.quantity += 1
            return entry.model_copy()
        entry = CartEntry(product=product, quantity=1)
        self._entries.append(entry)
        return entry.model_copy()

    def increment(self, product_id: str) -> CartEntry | None:
        entry = self._find(product_id)
        if entry is None:
            return None
        entry.quantity += 1
        return entry.model_copy()

    def decrement(self, product_id: str) -> CartEntry | None:
        """Reduce quantity by one, never below 1."""
        entry = self._find(product_id)
        if entry is None:
            return None
        entry.quantity = max(1, entry.quantity - 1)
        return entry.model_copy()

    def remove(self, product_id: str) -> bool:
        """Delete the entry for *product_id*. Returns False if it was absent."""
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.product_id != product_id]
        return len(self._entries) != before

    def clear(self) -> None:
        self._entries.clear()

    def _find(self, product_id: str) -> CartEntry | None:
        for entry in self._entries:
            if entry.product_id == product_id:
                return entry
        return None
