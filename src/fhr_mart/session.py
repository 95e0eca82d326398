"""Storefront session state.

A ``StorefrontSession`` owns everything one shopper mutates: filter inputs,
the cart ledger, the wishlist, the signed-in user, the checkout stepper,
the toast and the assistant panel. Callers go through its methods; the
stores themselves are not exposed for direct mutation.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import structlog

from fhr_mart.advisor import AdvisoryGateway
from fhr_mart.catalog import DEFAULT_CATALOG, Catalog
from fhr_mart.formatting import format_price
from fhr_mart.models import (
    AccountSection,
    AccountSummary,
    AssistantView,
    CartEntry,
    CartView,
    Category,
    CheckoutStep,
    Product,
    SessionView,
    Toast,
    User,
)
from fhr_mart.store import CartLedger, CheckoutOutcome, CheckoutStepper, FilterEngine, Wishlist
from fhr_mart.streaming import (
    EVENT_ASSISTANT_REPLY,
    EVENT_ORDER_PLACED,
    EVENT_SESSION_CLOSED,
    StorefrontEventStream,
)
from fhr_mart.toast import ToastEmitter

logger = structlog.get_logger(__name__)

ASSISTANT_GREETING = (
    "Assalam-o-Alaikum! Looking for premium tech? I'm FHR Mart's AI guide. "
    "How can I assist you today?"
)

DEMO_USER = User(
    id="fida1",
    name="Fida Rana",
    email="fida@fhr.com",
    avatar="https://i.pravatar.cc/150?u=fida",
    balance=500000,
    vouchers=(),
)


class AssistantBusyError(RuntimeError):
    """Raised when a second assistant request arrives while one is in flight."""


class StorefrontSession:
    """One shopper's in-memory storefront state."""

    def __init__(
        self,
        session_id: str,
        advisor: AdvisoryGateway,
        catalog: Catalog = DEFAULT_CATALOG,
        events: StorefrontEventStream | None = None,
        toast_duration_seconds: float = 3.0,
        currency_marker: str = "Rs.",
    ) -> None:
        self.id = session_id
        self.catalog = catalog
        self.created_at = datetime.now(tz=timezone.utc)
        self._advisor = advisor
        self._events = events
        self._marker = currency_marker

        self._filters = FilterEngine(catalog.products)
        self._search_term = ""
        self._category = Category.ALL

        self._cart = CartLedger()
        self._wishlist = Wishlist()
        self._stepper = CheckoutStepper()
        self._cart_open = False
        self._user: User | None = None

        self._toasts = ToastEmitter(duration_seconds=toast_duration_seconds)
        if events is not None:
            self._toasts.subscribe(self._forward_toast)

        self._assistant_message = ASSISTANT_GREETING
        self._assistant_loading = False
        self._closed = False

    # ------------------------------------------------------------------
    # Catalog browsing
    # ------------------------------------------------------------------

    @property
    def search_term(self) -> str:
        return self._search_term

    @property
    def category(self) -> Category:
        return self._category

    def search(self, term: str) -> list[Product]:
        self._search_term = term
        return self.visible_products()

    def select_category(self, category: Category) -> list[Product]:
        self._category = category
        return self.visible_products()

    def visible_products(self) -> list[Product]:
        return self._filters.filter(self._search_term, self._category)

    # ------------------------------------------------------------------
    # Cart
    # ------------------------------------------------------------------

    @property
    def cart_entries(self) -> list[CartEntry]:
        return self._cart.entries

    @property
    def cart_total(self) -> int:
        return self._cart.total()

    @property
    def cart_count(self) -> int:
        return self._cart.item_count()

    @property
    def cart_open(self) -> bool:
        return self._cart_open

    @property
    def checkout_step(self) -> CheckoutStep:
        return self._stepper.step

    def add_to_cart(self, product_id: str) -> CartEntry:
        product = self.catalog.get(product_id)
        entry = self._cart.add(product)
        self._toasts.show(f"{product.name} added to bag!")
        return entry

    def increment(self, product_id: str) -> CartEntry | None:
        self.catalog.get(product_id)
        entry = self._cart.increment(product_id)
        if entry is not None:
            self._toasts.show(f"{entry.product.name} quantity updated")
        return entry

    def decrement(self, product_id: str) -> CartEntry | None:
        self.catalog.get(product_id)
        before = self._cart.quantity(product_id)
        entry = self._cart.decrement(product_id)
        if entry is not None and entry.quantity != before:
            self._toasts.show(f"{entry.product.name} quantity updated")
        return entry

    def remove_from_cart(self, product_id: str) -> bool:
        product = self.catalog.get(product_id)
        removed = self._cart.remove(product_id)
        if removed:
            self._toasts.show(f"{product.name} removed from bag")
        return removed

    def open_cart(self) -> None:
        self._stepper.reset()
        self._cart_open = True

    def close_cart(self) -> None:
        self._cart_open = False

    # ------------------------------------------------------------------
    # Checkout
    # ------------------------------------------------------------------

    def proceed_checkout(self) -> CheckoutOutcome:
        """The drawer's primary button."""
        return self._after_checkout(self._stepper.proceed(self._cart))

    def advance_checkout(self) -> CheckoutOutcome:
        return self._after_checkout(self._stepper.advance(self._cart))

    def confirm_order(self) -> CheckoutOutcome:
        return self._after_checkout(self._stepper.confirm(self._cart))

    def _after_checkout(self, outcome: CheckoutOutcome) -> CheckoutOutcome:
        if outcome is CheckoutOutcome.CONFIRMED:
            self._cart_open = False
            self._toasts.show("Order Successful!")
            self._publish(EVENT_ORDER_PLACED, message="Order Successful!")
        return outcome

    # ------------------------------------------------------------------
    # Wishlist
    # ------------------------------------------------------------------

    @property
    def wishlist(self) -> list[str]:
        return self._wishlist.ids

    def is_wishlisted(self, product_id: str) -> bool:
        return self._wishlist.contains(product_id)

    def toggle_wishlist(self, product_id: str) -> bool:
        self.catalog.get(product_id)
        saved = self._wishlist.toggle(product_id)
        self._toasts.show("Saved to favorites" if saved else "Removed from favorites")
        return saved

    # ------------------------------------------------------------------
    # Identity (demo stub: no credentials, no logout)
    # ------------------------------------------------------------------

    @property
    def user(self) -> User | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def login(self) -> User:
        self._user = DEMO_USER.model_copy(deep=True)
        self._toasts.show(f"Welcome back, {self._user.name}!")
        logger.info("session_login", session_id=self.id, user_id=self._user.id)
        return self._user

    def account(self) -> AccountSummary | None:
        """Account page tiles, or ``None`` when nobody is signed in."""
        if self._user is None:
            return None
        return AccountSummary(
            user=self._user,
            sections=[
                AccountSection(
                    icon="fa-box-open", label="My Orders", description="Track your packages"
                ),
                AccountSection(
                    icon="fa-heart",
                    label="Wishlist",
                    description=f"Your saved favorites ({len(self._wishlist)})",
                ),
                AccountSection(
                    icon="fa-wallet",
                    label="FHR Wallet",
                    description="Balance: " + format_price(self._user.balance, self._marker),
                ),
                AccountSection(
                    icon="fa-location-dot",
                    label="Addresses",
                    description="Manage your locations",
                ),
            ],
        )

    # ------------------------------------------------------------------
    # Toasts
    # ------------------------------------------------------------------

    @property
    def toast(self) -> Toast | None:
        return self._toasts.current

    def dismiss_toast(self) -> None:
        self._toasts.dismiss()

    def _forward_toast(self, event_type: str, toast: Toast) -> None:
        self._publish(event_type, data={"toast_id": toast.id}, message=toast.message)

    # ------------------------------------------------------------------
    # Shopping assistant
    # ------------------------------------------------------------------

    @property
    def assistant(self) -> AssistantView:
        return AssistantView(message=self._assistant_message, loading=self._assistant_loading)

    async def ask_assistant(self, query: str) -> AssistantView:
        """Forward *query* to the advisor and store the reply.

        Blank queries are ignored. Only one request may be in flight.
        """
        if not query.strip():
            return self.assistant
        if self._assistant_loading:
            raise AssistantBusyError("The assistant is already answering a question.")

        self._assistant_loading = True
        try:
            reply = await self._advisor.get_advice(query, self.catalog.products)
        finally:
            self._assistant_loading = False
        self._assistant_message = reply
        self._publish(EVENT_ASSISTANT_REPLY, message=reply)
        return self.assistant

    # ------------------------------------------------------------------
    # Views / lifecycle
    # ------------------------------------------------------------------

    def cart_view(self) -> CartView:
        total = self._cart.total()
        return CartView(
            entries=self._cart.entries,
            item_count=self._cart.item_count(),
            total=total,
            formatted_total=format_price(total, self._marker),
            is_open=self._cart_open,
            checkout_step=self._stepper.step,
            action_label=self._stepper.action_label,
            can_checkout=not self._cart.is_empty(),
        )

    def snapshot(self) -> SessionView:
        return SessionView(
            id=self.id,
            search_term=self._search_term,
            category=self._category,
            cart=self.cart_view(),
            wishlist=self._wishlist.ids,
            user=self._user,
            toast=self.toast,
            assistant=self.assistant,
            created_at=self.created_at,
        )

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Stop timers and publish the final event; later events are dropped."""
        if self._closed:
            return
        self._toasts.close()
        self._publish(EVENT_SESSION_CLOSED)
        self._closed = True

    def _publish(self, event_type: str, data: dict | None = None, message: str = "") -> None:
        if self._events is not None and not self._closed:
            self._events.publish(self.id, event_type, data=data, message=message)


class SessionManager:
    """In-memory storefront session store."""

    def __init__(
        self,
        advisor: AdvisoryGateway,
        catalog: Catalog = DEFAULT_CATALOG,
        events: StorefrontEventStream | None = None,
        toast_duration_seconds: float = 3.0,
        currency_marker: str = "Rs.",
    ) -> None:
        self._advisor = advisor
        self._catalog = catalog
        self._events = events
        self._toast_duration = toast_duration_seconds
        self._marker = currency_marker
        self._sessions: dict[str, StorefrontSession] = {}

    def create_session(self) -> StorefrontSession:
        """Create a new storefront session with empty stores."""
        session = StorefrontSession(
            session_id=str(uuid.uuid4()),
            advisor=self._advisor,
            catalog=self._catalog,
            events=self._events,
            toast_duration_seconds=self._toast_duration,
            currency_marker=self._marker,
        )
        self._sessions[session.id] = session
        logger.info("session_created", session_id=session.id)
        return session

    def get_session(self, session_id: str) -> StorefrontSession | None:
        return self._sessions.get(session_id)

    def end_session(self, session_id: str) -> bool:
        """Discard a session and all of its state."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.close()
        if self._events is not None:
            self._events.clear(session_id)
        logger.info("session_ended", session_id=session_id)
        return True

    def list_sessions(self) -> list[StorefrontSession]:
        return list(self._sessions.values())
