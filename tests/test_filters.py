"""Tests for the catalog filter engine."""

from fhr_mart.models import Category
from fhr_mart.store import FilterEngine, filter_products


class TestFilterProducts:
    def test_empty_term_and_all_returns_catalog_in_order(self, catalog):
        result = filter_products(catalog, "", Category.ALL)
        assert [p.id for p in result] == [p.id for p in catalog.products]

    def test_search_is_case_insensitive(self, catalog):
        result = filter_products(catalog, "stealth", Category.ALL)
        assert [p.name for p in result] == ["Stealth Pro Wireless Headphones"]

    def test_no_match_returns_empty(self, catalog):
        assert filter_products(catalog, "espresso machine", Category.ALL) == []

    def test_category_filter(self, catalog):
        result = filter_products(catalog, "", Category.GADGETS)
        assert {p.id for p in result} == {"2", "6"}

    def test_term_and_category_combined(self, catalog):
        assert [p.id for p in filter_products(catalog, "s", Category.ELECTRONICS)] == ["1", "3"]
        assert filter_products(catalog, "drone", Category.ELECTRONICS) == []

    def test_empty_category_yields_nothing(self, catalog):
        assert filter_products(catalog, "", Category.GROCERY) == []

    def test_search_matches_name_only(self, catalog):
        # "aerospace" only appears in the smart watch description
        assert filter_products(catalog, "aerospace", Category.ALL) == []


class TestFilterEngine:
    def test_memoizes_last_input_pair(self, catalog):
        engine = FilterEngine(catalog.products)
        first = engine.filter("watch", Category.ALL)
        second = engine.filter("watch", Category.ALL)
        assert first == second
        assert first is not second

    def test_recomputes_on_change(self, catalog):
        engine = FilterEngine(catalog.products)
        assert len(engine.filter("", Category.ALL)) == len(catalog)
        assert [p.id for p in engine.filter("", Category.HOME)] == ["5"]
        assert len(engine.filter("", Category.ALL)) == len(catalog)

    def test_result_mutation_does_not_leak(self, catalog):
        engine = FilterEngine(catalog.products)
        engine.filter("", Category.ALL).clear()
        assert len(engine.filter("", Category.ALL)) == len(catalog)
