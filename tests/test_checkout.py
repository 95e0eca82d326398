"""Tests for the checkout stepper and wishlist."""

import pytest

from fhr_mart.models import CheckoutStep
from fhr_mart.store import CartLedger, CheckoutOutcome, CheckoutStepper, Wishlist


@pytest.fixture
def cart():
    return CartLedger()


@pytest.fixture
def stepper():
    return CheckoutStepper()


class TestCheckoutStepper:
    def test_starts_at_bag(self, stepper):
        assert stepper.step is CheckoutStep.BAG
        assert stepper.action_label == "Checkout"

    def test_advance_guarded_on_empty_cart(self, stepper, cart):
        assert stepper.advance(cart) is CheckoutOutcome.IGNORED
        assert stepper.proceed(cart) is CheckoutOutcome.IGNORED
        assert stepper.step is CheckoutStep.BAG

    def test_three_step_flow(self, stepper, cart, headphones):
        cart.add(headphones)
        assert stepper.advance(cart) is CheckoutOutcome.ADVANCED
        assert stepper.step is CheckoutStep.SHIPPING
        assert stepper.advance(cart) is CheckoutOutcome.ADVANCED
        assert stepper.step is CheckoutStep.PAYMENT
        assert stepper.advance(cart) is CheckoutOutcome.IGNORED
        assert stepper.step is CheckoutStep.PAYMENT
        assert stepper.action_label == "Confirm Order"

    @pytest.mark.parametrize("advances", [1, 2])
    def test_confirm_from_any_later_step(self, stepper, cart, headphones, advances):
        cart.add(headphones)
        for _ in range(advances):
            stepper.advance(cart)
        assert stepper.confirm(cart) is CheckoutOutcome.CONFIRMED
        assert cart.is_empty()
        assert stepper.step is CheckoutStep.BAG

    def test_confirm_ignored_at_bag(self, stepper, cart, headphones):
        cart.add(headphones)
        assert stepper.confirm(cart) is CheckoutOutcome.IGNORED
        assert len(cart) == 1

    def test_proceed_is_two_hop(self, stepper, cart, headphones):
        cart.add(headphones)
        assert stepper.proceed(cart) is CheckoutOutcome.ADVANCED
        assert stepper.step is CheckoutStep.SHIPPING
        assert stepper.proceed(cart) is CheckoutOutcome.CONFIRMED
        assert cart.is_empty()
        assert stepper.step is CheckoutStep.BAG

    def test_confirm_over_emptied_bag_returns_to_bag(self, stepper, cart, headphones):
        cart.add(headphones)
        stepper.advance(cart)
        cart.remove("1")
        assert stepper.confirm(cart) is CheckoutOutcome.IGNORED
        assert stepper.step is CheckoutStep.BAG
        assert stepper.action_label == "Checkout"

    def test_reset(self, stepper, cart, headphones):
        cart.add(headphones)
        stepper.advance(cart)
        stepper.reset()
        assert stepper.step is CheckoutStep.BAG


class TestWishlist:
    def test_toggle_adds_then_removes(self):
        wishlist = Wishlist()
        assert wishlist.toggle("1") is True
        assert "1" in wishlist
        assert wishlist.toggle("1") is False
        assert "1" not in wishlist
        assert len(wishlist) == 0

    def test_toggle_is_its_own_inverse(self):
        wishlist = Wishlist()
        wishlist.toggle("3")
        before = wishlist.ids
        wishlist.toggle("5")
        wishlist.toggle("5")
        assert wishlist.ids == before

    def test_keeps_insertion_order(self):
        wishlist = Wishlist()
        for pid in ("4", "1", "6"):
            wishlist.toggle(pid)
        assert list(wishlist) == ["4", "1", "6"]
