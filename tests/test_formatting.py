"""Tests for price formatting and catalog data."""

import locale

import pytest
from pydantic import ValidationError

from fhr_mart.catalog import Catalog, UnknownProductError
from fhr_mart.formatting import format_price, group_digits
from fhr_mart.models import Category


class TestFormatting:
    @pytest.mark.parametrize(
        "value, expected",
        [(0, "0"), (999, "999"), (4500, "4,500"), (185000, "185,000"), (1234567, "1,234,567")],
    )
    def test_group_digits(self, value, expected):
        assert group_digits(value) == expected

    def test_format_price(self):
        assert format_price(14999) == "Rs. 14,999"

    def test_custom_marker(self):
        assert format_price(500000, marker="PKR").startswith("PKR ")

    def test_uses_locale_grouping_when_defined(self, monkeypatch):
        monkeypatch.setattr(
            locale, "localeconv", lambda: {"grouping": [3, 0], "thousands_sep": "."}
        )
        calls = []

        def fake_format_string(fmt, value, grouping=False):
            calls.append((fmt, value, grouping))
            return "14.999"

        monkeypatch.setattr(locale, "format_string", fake_format_string)
        assert format_price(14999) == "Rs. 14.999"
        assert calls == [("%d", 14999, True)]

    def test_falls_back_when_locale_has_no_grouping(self, monkeypatch):
        monkeypatch.setattr(locale, "localeconv", lambda: {"grouping": [], "thousands_sep": ""})
        assert format_price(185000) == "Rs. 185,000"

    def test_falls_back_when_locale_fails(self, monkeypatch):
        def broken_format_string(fmt, value, grouping=False):
            raise ValueError("bad locale")

        monkeypatch.setattr(
            locale, "localeconv", lambda: {"grouping": [3, 0], "thousands_sep": ","}
        )
        monkeypatch.setattr(locale, "format_string", broken_format_string)
        assert format_price(4500) == "Rs. 4,500"


class TestCatalog:
    def test_bundled_catalog(self, catalog):
        assert len(catalog) == 6
        assert catalog.categories[0] is Category.ALL
        assert "1" in catalog

    def test_unknown_product(self, catalog):
        with pytest.raises(UnknownProductError):
            catalog.get("999")

    def test_discount_percent(self, headphones):
        assert headphones.discount_percent == 25

    def test_optional_fields(self, catalog):
        lamp = catalog.get("5")
        assert lamp.tag is None
        assert lamp.user_reviews == ()
        assert catalog.get("1").user_reviews[0].stars == 5

    def test_duplicate_ids_rejected(self, headphones):
        with pytest.raises(ValueError):
            Catalog([headphones, headphones])

    def test_products_are_immutable(self, headphones):
        with pytest.raises(ValidationError):
            headphones.price = 1

    def test_nested_collections_are_read_only(self, headphones, catalog):
        with pytest.raises(TypeError):
            headphones.specs["Driver"] = "tampered"
        assert isinstance(headphones.user_reviews, tuple)
        assert len(catalog.get("5").specs) == 0
        assert headphones.model_dump()["specs"]["Driver"] == "40mm Dynamic"
