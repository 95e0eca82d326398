"""Session-scoped storefront stores: filters, cart, wishlist, checkout."""

from fhr_mart.store.cart import CartLedger
from fhr_mart.store.checkout import CheckoutOutcome, CheckoutStepper
from fhr_mart.store.filters import FilterEngine, filter_products
from fhr_mart.store.wishlist import Wishlist

__all__ = [
    "CartLedger",
    "CheckoutOutcome",
    "CheckoutStepper",
    "FilterEngine",
    "Wishlist",
    "filter_products",
]
