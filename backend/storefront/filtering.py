from typing import Iterable, List

from .models import Product

ALL_CATEGORIES = "All"


def filter_products(
    products: Iterable[Product],
    search_term: str = "",
    category: str = ALL_CATEGORIES,
    visible_only: bool = False,
) -> List[Product]:
    """
    Derive the displayed product list. Order of ``products`` is preserved.

    Name search is a case-insensitive substring match, category is an exact
    match unless it is "All", and the public view drops hidden products.
    """
    filtered = list(products)

    if search_term:
        term = search_term.lower()
        filtered = [p for p in filtered if term in p.name.lower()]

    if category != ALL_CATEGORIES:
        filtered = [p for p in filtered if p.category == category]

    if visible_only:
        filtered = [p for p in filtered if p.is_visible is not False]

    return filtered
