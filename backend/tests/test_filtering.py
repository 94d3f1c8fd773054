"""Test the catalog search/category/visibility filter."""

import pytest

from storefront.filtering import ALL_CATEGORIES, filter_products
from storefront.models import Product


@pytest.fixture
def products():
    return [
        Product(id=1, name="Atlantic Salmon", price="$38", category="Fresh Fish"),
        Product(id=2, name="Tiger Prawns", price="$32", category="Shellfish", is_visible=False),
        Product.model_validate({"id": 3, "name": "Smoked salmon", "price": "$12", "category": "Other", "is_visible": None}),
        Product(id=4, name="Oysters", price="$24", category="Shellfish"),
        Product(id=5, name="Flathead", price="$30", category="fresh fish"),
    ]


def ids(products):
    return [p.id for p in products]


class TestSearch:
    def test_search_is_case_insensitive_substring(self):
        salmon = Product(id=1, name="Salmon", price="$1")
        assert filter_products([salmon], "salmon", ALL_CATEGORIES, False) == [salmon]
        assert filter_products([salmon], "ALM", ALL_CATEGORIES, False) == [salmon]

    def test_search_without_match_returns_empty(self, products):
        assert filter_products(products, "xyz", ALL_CATEGORIES, False) == []

    def test_empty_search_keeps_everything(self, products):
        assert ids(filter_products(products, "", ALL_CATEGORIES, False)) == [1, 2, 3, 4, 5]

    def test_search_matches_all_names_containing_term(self, products):
        assert ids(filter_products(products, "salmon")) == [1, 3]


class TestCategory:
    def test_all_sentinel_does_not_restrict(self, products):
        assert ids(filter_products(products, category=ALL_CATEGORIES)) == ids(products)

    def test_category_is_exact_and_case_sensitive(self, products):
        assert ids(filter_products(products, category="Fresh Fish")) == [1]
        assert ids(filter_products(products, category="fresh fish")) == [5]

    def test_unknown_category_returns_empty(self, products):
        assert filter_products(products, category="Sashimi") == []

    def test_search_and_category_combine(self, products):
        assert ids(filter_products(products, "s", "Shellfish")) == [2, 4]


class TestVisibility:
    def test_public_view_hides_explicitly_hidden(self, products):
        assert 2 not in ids(filter_products(products, visible_only=True))

    def test_unset_visibility_counts_as_visible(self, products):
        assert 3 in ids(filter_products(products, visible_only=True))

    def test_admin_view_sees_hidden_products(self, products):
        assert 2 in ids(filter_products(products, visible_only=False))


class TestProperties:
    @pytest.mark.parametrize(
        "search,category,visible_only",
        [
            ("", ALL_CATEGORIES, False),
            ("salmon", ALL_CATEGORIES, True),
            ("", "Shellfish", True),
            ("o", "Shellfish", False),
        ],
    )
    def test_subset_order_preserving_and_idempotent(self, products, search, category, visible_only):
        once = filter_products(products, search, category, visible_only)
        positions = [ids(products).index(p.id) for p in once]

        assert all(p in products for p in once)
        assert positions == sorted(positions)
        assert filter_products(once, search, category, visible_only) == once

    def test_source_is_not_mutated(self, products):
        before = list(products)
        filter_products(products, "salmon", "Fresh Fish", True)
        assert products == before
