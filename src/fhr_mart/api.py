"""FastAPI application for the FHR Mart storefront.

Exposes REST endpoints for:
- Catalog browsing (categories, filtered products, product details)
- Storefront sessions (filters, cart, checkout, wishlist, login, account)
- Toast notifications, polled or streamed over SSE
- The shopping assistant
"""

from __future__ import annotations

import json
from typing import Any

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sse_starlette.sse import EventSourceResponse

from common import ErrorResponse, HealthResponse

from fhr_mart.advisor import AdvisoryGateway
from fhr_mart.catalog import DEFAULT_CATALOG, Catalog, UnknownProductError
from fhr_mart.config import Settings
from fhr_mart.formatting import format_price
from fhr_mart.models import Category, Product
from fhr_mart.session import AssistantBusyError, SessionManager, StorefrontSession
from fhr_mart.store import filter_products
from fhr_mart.streaming import StorefrontEventStream

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class FilterRequest(BaseModel):
    """Search box and category chip."""

    search_term: str = ""
    category: Category = Category.ALL


class AddToCartRequest(BaseModel):
    product_id: str


class AssistantRequest(BaseModel):
    query: str


# ---------------------------------------------------------------------------
# Application state container
# ---------------------------------------------------------------------------


class AppState:
    """Shared application state accessible from route handlers."""

    def __init__(
        self,
        settings: Settings,
        catalog: Catalog = DEFAULT_CATALOG,
        advisor: AdvisoryGateway | None = None,
    ) -> None:
        self.settings = settings
        self.catalog = catalog
        self.advisor = advisor or AdvisoryGateway(settings)
        self.event_stream = StorefrontEventStream()
        self.session_manager = SessionManager(
            advisor=self.advisor,
            catalog=catalog,
            events=self.event_stream,
            toast_duration_seconds=settings.toast_duration_seconds,
            currency_marker=settings.currency_marker,
        )


def _product_card(product: Product, marker: str) -> dict[str, Any]:
    data = product.model_dump()
    data["formatted_price"] = format_price(product.price, marker)
    data["formatted_original_price"] = format_price(product.original_price, marker)
    data["discount_percent"] = product.discount_percent
    return data


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app(
    settings: Settings | None = None,
    advisor: AdvisoryGateway | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or Settings()

    app = FastAPI(
        title="FHR Mart",
        description=(
            "Demo storefront: catalog browsing, cart and checkout, wishlist, "
            "mock account and an AI shopping assistant."
        ),
        version=settings.service_version,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    state = AppState(settings, advisor=advisor)
    app.state.app_state = state
    app.state.settings = settings
    marker = settings.currency_marker

    def _session(session_id: str) -> StorefrontSession:
        session = state.session_manager.get_session(session_id)
        if session is None:
            raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
        return session

    def _cart_response(session: StorefrontSession, **extra: Any) -> dict[str, Any]:
        payload = session.cart_view().model_dump()
        payload.update(extra)
        return payload

    # -------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(
            status="healthy",
            service=settings.service_name,
            version=settings.service_version,
        )

    # -------------------------------------------------------------------
    # Catalog endpoints
    # -------------------------------------------------------------------

    @app.get("/api/v1/categories", tags=["catalog"])
    async def list_categories() -> dict[str, Any]:
        return {"categories": [c.value for c in state.catalog.categories]}

    @app.get("/api/v1/products", tags=["catalog"])
    async def list_products(q: str = "", category: Category = Category.ALL) -> dict[str, Any]:
        """Browse the catalog without a session."""
        products = filter_products(state.catalog, q, category)
        return {
            "products": [_product_card(p, marker) for p in products],
            "total": len(products),
            "query": q or None,
            "category": category.value,
        }

    @app.get("/api/v1/products/{product_id}", tags=["catalog"])
    async def get_product(product_id: str) -> dict[str, Any]:
        return _product_card(state.catalog.get(product_id), marker)

    # -------------------------------------------------------------------
    # Session endpoints
    # -------------------------------------------------------------------

    @app.post("/api/v1/sessions", tags=["sessions"])
    async def create_session() -> dict[str, Any]:
        session = state.session_manager.create_session()
        return session.snapshot().model_dump()

    @app.get("/api/v1/sessions/{session_id}", tags=["sessions"])
    async def get_session(session_id: str) -> dict[str, Any]:
        return _session(session_id).snapshot().model_dump()

    @app.delete("/api/v1/sessions/{session_id}", tags=["sessions"])
    async def end_session(session_id: str) -> dict[str, Any]:
        if not state.session_manager.end_session(session_id):
            raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
        return {"session_id": session_id, "status": "ended"}

    @app.put("/api/v1/sessions/{session_id}/filters", tags=["sessions"])
    async def update_filters(session_id: str, req: FilterRequest) -> dict[str, Any]:
        session = _session(session_id)
        session.search(req.search_term)
        products = session.select_category(req.category)
        return {
            "search_term": session.search_term,
            "category": session.category.value,
            "products": [_product_card(p, marker) for p in products],
            "total": len(products),
        }

    @app.get("/api/v1/sessions/{session_id}/products", tags=["sessions"])
    async def session_products(session_id: str) -> dict[str, Any]:
        session = _session(session_id)
        products = session.visible_products()
        return {
            "products": [
                {**_product_card(p, marker), "wishlisted": session.is_wishlisted(p.id)}
                for p in products
            ],
            "total": len(products),
        }

    # -------------------------------------------------------------------
    # Cart endpoints
    # -------------------------------------------------------------------

    @app.get("/api/v1/sessions/{session_id}/cart", tags=["cart"])
    async def get_cart(session_id: str) -> dict[str, Any]:
        return _cart_response(_session(session_id))

    @app.post("/api/v1/sessions/{session_id}/cart/items", tags=["cart"])
    async def add_to_cart(session_id: str, req: AddToCartRequest) -> dict[str, Any]:
        session = _session(session_id)
        session.add_to_cart(req.product_id)
        return _cart_response(session)

    @app.post("/api/v1/sessions/{session_id}/cart/items/{product_id}/increment", tags=["cart"])
    async def increment_item(session_id: str, product_id: str) -> dict[str, Any]:
        session = _session(session_id)
        if session.increment(product_id) is None:
            raise HTTPException(status_code=404, detail=f"Product {product_id} is not in the bag")
        return _cart_response(session)

    @app.post("/api/v1/sessions/{session_id}/cart/items/{product_id}/decrement", tags=["cart"])
    async def decrement_item(session_id: str, product_id: str) -> dict[str, Any]:
        session = _session(session_id)
        if session.decrement(product_id) is None:
            raise HTTPException(status_code=404, detail=f"Product {product_id} is not in the bag")
        return _cart_response(session)

    @app.delete("/api/v1/sessions/{session_id}/cart/items/{product_id}", tags=["cart"])
    async def remove_item(session_id: str, product_id: str) -> dict[str, Any]:
        session = _session(session_id)
        if not session.remove_from_cart(product_id):
            raise HTTPException(status_code=404, detail=f"Product {product_id} is not in the bag")
        return _cart_response(session)

    @app.post("/api/v1/sessions/{session_id}/cart/open", tags=["cart"])
    async def open_cart(session_id: str) -> dict[str, Any]:
        session = _session(session_id)
        session.open_cart()
        return _cart_response(session)

    @app.post("/api/v1/sessions/{session_id}/cart/close", tags=["cart"])
    async def close_cart(session_id: str) -> dict[str, Any]:
        session = _session(session_id)
        session.close_cart()
        return _cart_response(session)

    # -------------------------------------------------------------------
    # Checkout endpoints
    # -------------------------------------------------------------------

    @app.post("/api/v1/sessions/{session_id}/checkout/proceed", tags=["checkout"])
    async def proceed_checkout(session_id: str) -> dict[str, Any]:
        session = _session(session_id)
        outcome = session.proceed_checkout()
        return _cart_response(session, outcome=outcome.value)

    @app.post("/api/v1/sessions/{session_id}/checkout/advance", tags=["checkout"])
    async def advance_checkout(session_id: str) -> dict[str, Any]:
        session = _session(session_id)
        outcome = session.advance_checkout()
        return _cart_response(session, outcome=outcome.value)

    @app.post("/api/v1/sessions/{session_id}/checkout/confirm", tags=["checkout"])
    async def confirm_order(session_id: str) -> dict[str, Any]:
        session = _session(session_id)
        outcome = session.confirm_order()
        return _cart_response(session, outcome=outcome.value)

    # -------------------------------------------------------------------
    # Wishlist endpoints
    # -------------------------------------------------------------------

    @app.get("/api/v1/sessions/{session_id}/wishlist", tags=["wishlist"])
    async def get_wishlist(session_id: str) -> dict[str, Any]:
        session = _session(session_id)
        products = [state.catalog.get(pid) for pid in session.wishlist]
        return {
            "product_ids": session.wishlist,
            "products": [_product_card(p, marker) for p in products],
            "total": len(products),
        }

    @app.post("/api/v1/sessions/{session_id}/wishlist/{product_id}/toggle", tags=["wishlist"])
    async def toggle_wishlist(session_id: str, product_id: str) -> dict[str, Any]:
        session = _session(session_id)
        saved = session.toggle_wishlist(product_id)
        return {"product_id": product_id, "wishlisted": saved, "total": len(session.wishlist)}

    # -------------------------------------------------------------------
    # Identity endpoints
    # -------------------------------------------------------------------

    @app.post("/api/v1/sessions/{session_id}/login", tags=["account"])
    async def login(session_id: str) -> dict[str, Any]:
        user = _session(session_id).login()
        return {"authenticated": True, "user": user.model_dump()}

    @app.get("/api/v1/sessions/{session_id}/account", tags=["account"])
    async def account(session_id: str) -> dict[str, Any]:
        summary = _session(session_id).account()
        if summary is None:
            return {
                "authenticated": False,
                "message": f"Please login to access your {settings.store_name} account.",
            }
        return {"authenticated": True, **summary.model_dump()}

    # -------------------------------------------------------------------
    # Notification endpoints
    # -------------------------------------------------------------------

    @app.get("/api/v1/sessions/{session_id}/toast", tags=["notifications"])
    async def get_toast(session_id: str) -> dict[str, Any]:
        toast = _session(session_id).toast
        return {"toast": toast.model_dump() if toast else None}

    @app.delete("/api/v1/sessions/{session_id}/toast", tags=["notifications"])
    async def dismiss_toast(session_id: str) -> dict[str, Any]:
        _session(session_id).dismiss_toast()
        return {"toast": None}

    @app.get("/api/v1/sessions/{session_id}/events", tags=["notifications"])
    async def stream_events(session_id: str, replay: bool = False) -> EventSourceResponse:
        """SSE stream of toasts, orders and assistant replies.

        With ``?replay=true`` the retained history is sent before live events.
        """
        _session(session_id)

        async def event_generator():  # type: ignore[no-untyped-def]
            async for event in state.event_stream.subscribe(session_id, replay=replay):
                yield {
                    "event": event.event_type,
                    "data": json.dumps(event.model_dump(), default=str),
                }

        return EventSourceResponse(event_generator())

    # -------------------------------------------------------------------
    # Shopping assistant
    # -------------------------------------------------------------------

    @app.post("/api/v1/sessions/{session_id}/assistant", tags=["assistant"])
    async def ask_assistant(session_id: str, req: AssistantRequest) -> dict[str, Any]:
        session = _session(session_id)
        try:
            view = await session.ask_assistant(req.query)
        except AssistantBusyError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return view.model_dump()

    # -------------------------------------------------------------------
    # Error handlers
    # -------------------------------------------------------------------

    @app.exception_handler(UnknownProductError)
    async def unknown_product_handler(
        request: Request, exc: UnknownProductError
    ) -> JSONResponse:
        logger.info("unknown_product", product_id=exc.product_id, path=request.url.path)
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.error(
            "unhandled_exception", error=str(exc), path=request.url.path
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="Internal server error",
                detail=str(exc),
                status_code=500,
            ).model_dump(),
        )

    return app
