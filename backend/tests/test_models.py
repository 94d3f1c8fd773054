"""Test entity defaults and null handling."""

import pytest

from storefront.models import HomepageContent, Product, SiteSettings
from storefront.seo import opening_hours_spec
from storefront.uploads import storage_path


def test_product_nulls_resolve_to_defaults():
    product = Product.model_validate(
        {"id": 7, "name": "Whiting", "price": "$18", "description": None, "is_visible": None, "is_fresh": None}
    )
    assert product.description == ""
    assert product.is_visible is True
    assert product.is_fresh is False
    assert product.category == "Fresh Fish"


def test_product_status_flags_are_independent():
    product = Product(name="Crayfish", price="POA", is_fresh=True, on_order=True, out_of_stock=True)
    assert (product.is_fresh, product.on_order, product.out_of_stock) == (True, True, True)


def test_product_name_is_required():
    with pytest.raises(ValueError):
        Product.model_validate({"name": None, "price": "$1"})


def test_settings_background_stays_nullable():
    settings = SiteSettings.model_validate({"background_url": None, "social_links": None, "categories": []})
    assert settings.background_url is None
    assert settings.social_links.facebook == ""
    assert settings.categories == ["Fresh Fish", "Shellfish", "Sashimi", "Platters", "Other"]


def test_content_ignores_unknown_columns():
    content = HomepageContent.model_validate({"id": 1, "hero_title": "Hi", "updated_at": "2025-01-01"})
    assert content.hero_title == "Hi"


def test_storage_path_keeps_extension():
    path = storage_path("Snapper Photo.JPEG")
    assert path.startswith("public/")
    assert path.endswith(".jpeg")
    assert storage_path("a.png") != storage_path("a.png")


def test_storage_path_without_extension():
    assert "." not in storage_path("README")


def test_closed_days_are_left_out_of_schema():
    settings = SiteSettings()
    specs = opening_hours_spec(settings.opening_hours)
    assert specs[0] == {"@type": "OpeningHoursSpecification", "dayOfWeek": "Wednesday", "opens": "7am", "closes": "1pm"}
    assert len(specs) == 3
