"""Pydantic models for the FHR Mart storefront.

Covers catalog products and categories, cart entries, the demo user,
checkout steps, toast notifications, SSE events, and the request/response
shapes of the HTTP API.
"""

from __future__ import annotations

import enum
from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class Category(str, enum.Enum):
    """Closed set of catalog categories.

    ``ALL`` is a wildcard sentinel that matches every product; no product
    is ever stored under it.
    """

    ALL = "All"
    ELECTRONICS = "Electronics"
    FASHION = "Fashion"
    HOME = "Home"
    BEAUTY = "Beauty"
    GADGETS = "Gadgets"
    GROCERY = "Grocery"
    SPORTS = "Sports"

    def matches(self, category: Category) -> bool:
        """Return True if a product in *category* belongs to this selection."""
        return self is Category.ALL or self is category


class SellerInfo(BaseModel):
    """Store that lists a product."""

    model_config = ConfigDict(frozen=True)

    name: str
    rating: str
    followers: str


class UserReview(BaseModel):
    """A single customer review shown on the product sheet."""

    model_config = ConfigDict(frozen=True)

    user: str
    comment: str
    stars: int = Field(ge=1, le=5)
    date: str


class Product(BaseModel):
    """Immutable catalog product. Prices are whole rupees."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    price: int
    original_price: int
    category: Category
    image: str
    rating: float
    reviews: int
    description: str
    tag: str | None = None
    specs: Mapping[str, str] = Field(default_factory=dict, validate_default=True)
    seller: SellerInfo | None = None
    user_reviews: tuple[UserReview, ...] = ()

    @field_validator("specs", mode="after")
    @classmethod
    def freeze_specs(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @field_serializer("specs")
    def serialize_specs(self, value: Mapping[str, str]) -> dict[str, str]:
        return dict(value)

    @property
    def discount_percent(self) -> int:
        """Percentage saved against the original price."""
        if self.original_price <= self.price:
            return 0
        return round((self.original_price - self.price) / self.original_price * 100)


# ---------------------------------------------------------------------------
# Cart and checkout
# ---------------------------------------------------------------------------


class CartEntry(BaseModel):
    """A product in the bag together with its quantity."""

    model_config = ConfigDict(validate_assignment=True)

    product: Product
    quantity: int = Field(default=1, ge=1)

    @property
    def product_id(self) -> str:
        return self.product.id

    @property
    def line_total(self) -> int:
        return self.product.price * self.quantity


class CheckoutStep(str, enum.Enum):
    """Panels of the cart drawer, in order."""

    BAG = "bag"
    SHIPPING = "shipping"
    PAYMENT = "payment"


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class User(BaseModel):
    """Signed-in shopper. Created wholesale on login."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str
    avatar: str
    balance: int
    vouchers: tuple[str, ...] = ()


class AccountSection(BaseModel):
    """One tile on the account page."""

    icon: str
    label: str
    description: str


class AccountSummary(BaseModel):
    """Account page for a signed-in shopper."""

    user: User
    sections: list[AccountSection] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


class Toast(BaseModel):
    """A transient status message."""

    id: int
    message: str
    created_at: datetime
    expires_at: datetime


class StorefrontEvent(BaseModel):
    """Server-Sent Event pushed to a storefront session's subscribers."""

    event_type: str
    session_id: str
    data: dict[str, Any] = Field(default_factory=dict)
    message: str = ""
    timestamp: datetime = Field(default_factory=datetime.utcnow)


# ---------------------------------------------------------------------------
# API views
# ---------------------------------------------------------------------------


class CartView(BaseModel):
    """Cart drawer contents."""

    entries: list[CartEntry] = Field(default_factory=list)
    item_count: int = 0
    total: int = 0
    formatted_total: str = ""
    is_open: bool = False
    checkout_step: CheckoutStep = CheckoutStep.BAG
    action_label: str = "Checkout"
    can_checkout: bool = False


class AssistantView(BaseModel):
    """State of the shopping assistant panel."""

    message: str
    loading: bool = False


class SessionView(BaseModel):
    """Snapshot of a storefront session."""

    id: str
    search_term: str = ""
    category: Category = Category.ALL
    cart: CartView
    wishlist: list[str] = Field(default_factory=list)
    user: User | None = None
    toast: Toast | None = None
    assistant: AssistantView
    created_at: datetime
