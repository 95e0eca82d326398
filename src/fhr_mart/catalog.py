"""Static product catalog.

The catalog is bundled with the service and loaded once at import time.
Records are validated into frozen :class:`Product` models and never
mutated afterwards.
"""

from __future__ import annotations

from typing import Any, Iterator

from fhr_mart.models import Category, Product


class UnknownProductError(LookupError):
    """Raised when a product id is not present in the catalog."""

    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


_PRODUCT_RECORDS: list[dict[str, Any]] = [
    {
        "id": "1",
        "name": "Stealth Pro Wireless Headphones",
        "price": 14999,
        "original_price": 19999,
        "category": Category.ELECTRONICS,
        "image": "https://images.unsplash.com/photo-1505740420928-5e560c06d30e?q=80&w=600&auto=format&fit=crop",
        "rating": 4.8,
        "reviews": 1250,
        "description": (
            "Active noise cancelling headphones with 40h battery life and spatial audio. "
            "Experience studio-quality sound in Pakistan."
        ),
        "tag": "Best Seller",
        "specs": {"Driver": "40mm Dynamic", "Battery": "40 Hours", "ANC": "Hybrid Pro"},
        "seller": {"name": "FHR Official Store", "rating": "98%", "followers": "125k"},
        "user_reviews": [
            {
                "user": "Alex J.",
                "comment": "Best audio I've ever heard in this price range.",
                "stars": 5,
                "date": "2 days ago",
            }
        ],
    },
    {
        "id": "2",
        "name": "Cyber Edition Mechanical Keyboard",
        "price": 8500,
        "original_price": 12000,
        "category": Category.GADGETS,
        "image": "https://images.unsplash.com/photo-1511467687858-23d96c32e4ae?q=80&w=600&auto=format&fit=crop",
        "rating": 4.9,
        "reviews": 840,
        "description": (
            "Ultra-responsive mechanical switches with customizable RGB lighting "
            "and hot-swappable keys."
        ),
        "tag": "Hot",
        "specs": {"Switches": "Blue Tactile", "Lights": "RGB Per-Key", "Mode": "Wired/Wireless"},
        "seller": {"name": "TechNova FHR", "rating": "94%", "followers": "45k"},
    },
    {
        "id": "3",
        "name": "Titanium Smart Watch Series X",
        "price": 24999,
        "original_price": 35000,
        "category": Category.ELECTRONICS,
        "image": "https://images.unsplash.com/photo-1523275335684-37898b6baf30?q=80&w=600&auto=format&fit=crop",
        "rating": 4.7,
        "reviews": 2100,
        "description": (
            "Aerospace-grade titanium body with advanced health monitoring "
            "and LTE connectivity."
        ),
        "tag": "Premium",
        "specs": {
            "Case": "Grade 5 Titanium",
            "Display": "OLED Sapphire",
            "Depth": "50m Water Resistant",
        },
        "seller": {"name": "FHR Flagship", "rating": "99%", "followers": "300k"},
    },
    {
        "id": "4",
        "name": "Urban Explorer Waterproof Backpack",
        "price": 4500,
        "original_price": 6000,
        "category": Category.FASHION,
        "image": "https://images.unsplash.com/photo-1553062407-98eeb64c6a62?q=80&w=600&auto=format&fit=crop",
        "rating": 4.5,
        "reviews": 430,
        "description": (
            "Minimalist design meets extreme durability. Features hidden anti-theft pockets."
        ),
        "specs": {
            "Material": "1680D Ballistic Nylon",
            "Capacity": "24L",
            "Laptop": "Up to 16-inch",
        },
        "seller": {"name": "StreetWear Elite", "rating": "92%", "followers": "12k"},
    },
    {
        "id": "5",
        "name": "Limited Edition Walnut Desk Lamp",
        "price": 6500,
        "original_price": 8500,
        "category": Category.HOME,
        "image": "https://images.unsplash.com/photo-1534073828943-f801091bb18c?q=80&w=600&auto=format&fit=crop",
        "rating": 4.9,
        "reviews": 320,
        "description": (
            "Handcrafted walnut wood lamp with touch control and integrated "
            "wireless Qi charging."
        ),
        "seller": {"name": "NatureHome FHR", "rating": "96%", "followers": "8k"},
    },
    {
        "id": "6",
        "name": "Professional 8K Cinematic Drone",
        "price": 185000,
        "original_price": 220000,
        "category": Category.GADGETS,
        "image": "https://images.unsplash.com/photo-1507582020474-9a35b7d455d9?q=80&w=600&auto=format&fit=crop",
        "rating": 4.8,
        "reviews": 156,
        "description": (
            "Unmatched 8K resolution with 45-minute flight time and "
            "omnidirectional obstacle avoidance."
        ),
        "tag": "New",
        "specs": {"Video": "8K @ 60fps", "Range": "15km", "Sensors": "360° Vision"},
        "seller": {"name": "SkyHigh Official", "rating": "97%", "followers": "56k"},
    },
]


class Catalog:
    """Read-only collection of products and the category set."""

    def __init__(self, products: list[Product]) -> None:
        self._products: tuple[Product, ...] = tuple(products)
        self._by_id: dict[str, Product] = {}
        for product in self._products:
            if product.id in self._by_id:
                raise ValueError(f"Duplicate product id in catalog: {product.id}")
            if product.category is Category.ALL:
                raise ValueError(f"Product {product.id} cannot use the ALL category")
            self._by_id[product.id] = product

    @classmethod
    def from_records(cls, records: list[dict[str, Any]]) -> Catalog:
        """Validate raw product dicts into a catalog."""
        return cls([Product.model_validate(record) for record in records])

    @property
    def products(self) -> tuple[Product, ...]:
        return self._products

    @property
    def categories(self) -> list[Category]:
        """Every category in display order, ``ALL`` first."""
        return list(Category)

    def get(self, product_id: str) -> Product:
        """Return the product with *product_id* or raise ``UnknownProductError``."""
        try:
            return self._by_id[product_id]
        except KeyError:
            raise UnknownProductError(product_id) from None

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._by_id

    def __iter__(self) -> Iterator[Product]:
        return iter(self._products)

    def __len__(self) -> int:
        return len(self._products)


def load_catalog() -> Catalog:
    """Build the bundled demo catalog."""
    return Catalog.from_records(_PRODUCT_RECORDS)


DEFAULT_CATALOG = load_catalog()
