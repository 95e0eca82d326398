"""Checkout stepper for the cart drawer.

Three panels are shown in order: ``bag`` -> ``shipping`` -> ``payment``.
``advance`` moves forward one panel, ``confirm`` places the order from any
panel after ``bag``, and ``proceed`` is the drawer's single primary button
(advance from ``bag``, confirm otherwise). No order is placed and no
panel is advanced while the ledger is empty; confirming over an empty
ledger only returns the drawer to ``bag``.
"""

from __future__ import annotations

import enum

import structlog

from fhr_mart.models import CheckoutStep
from fhr_mart.store.cart import CartLedger

logger = structlog.get_logger(__name__)

_ORDER: list[CheckoutStep] = [CheckoutStep.BAG, CheckoutStep.SHIPPING, CheckoutStep.PAYMENT]


class CheckoutOutcome(str, enum.Enum):
    """Result of a stepper action."""

    IGNORED = "ignored"
    ADVANCED = "advanced"
    CONFIRMED = "confirmed"


class CheckoutStepper:
    """Tracks which cart-drawer panel is active."""

    def __init__(self) -> None:
        self._step = CheckoutStep.BAG

    @property
    def step(self) -> CheckoutStep:
        return self._step

    @property
    def action_label(self) -> str:
        """Label of the drawer's primary button."""
        return "Checkout" if self._step is CheckoutStep.BAG else "Confirm Order"

    def reset(self) -> None:
        self._step = CheckoutStep.BAG

    def advance(self, cart: CartLedger) -> CheckoutOutcome:
        """Move to the next panel. Ignored on an empty bag or at ``payment``."""
        if cart.is_empty():
            return CheckoutOutcome.IGNORED
        index = _ORDER.index(self._step)
        if index == len(_ORDER) - 1:
            return CheckoutOutcome.IGNORED
        self._step = _ORDER[index + 1]
        logger.debug("checkout_advanced", step=self._step.value)
        return CheckoutOutcome.ADVANCED

    def confirm(self, cart: CartLedger) -> CheckoutOutcome:
        """Place the order: empty the ledger and return to ``bag``.

        Ignored at ``bag``. With an empty ledger no order is placed, but a
        later panel still falls back to ``bag``.
        """
        if self._step is CheckoutStep.BAG:
            return CheckoutOutcome.IGNORED
        if cart.is_empty():
            self.reset()
            return CheckoutOutcome.IGNORED
        logger.info("order_confirmed", items=cart.item_count(), total=cart.total())
        cart.clear()
        self.reset()
        return CheckoutOutcome.CONFIRMED

    def proceed(self, cart: CartLedger) -> CheckoutOutcome:
        """Primary drawer button: "Checkout" at ``bag``, "Confirm Order" after."""
        if self._step is CheckoutStep.BAG:
            return self.advance(cart)
        return self.confirm(cart)
