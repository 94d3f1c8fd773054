"""In-memory product catalog kept in step with the ``products`` table.

Add, update and delete only touch local state after Supabase confirms the
write. Toggling visibility replaces the record with the returned row.
Reordering is applied locally first and rolled back if persisting the new
ranks fails. Rows that fail validation on load are skipped and logged.
"""

import threading
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from .errors import GatewayError, NotFoundError
from .logging_config import get_logger
from .models import DashboardStats, Product, ProductDraft, ProductForm
from .uploads import uploaded_image

logger = get_logger("catalog")


def rank_products(products: Sequence[Product]) -> List[Product]:
    # Unranked products (newly added) stay on top in their loaded order.
    return sorted(products, key=lambda p: (p.sort_order is not None, p.sort_order or 0))


def move_to_top(order: Sequence[int], product_id: int) -> List[int]:
    ids = [i for i in order if i != product_id]
    return [product_id] + ids


def move_to_bottom(order: Sequence[int], product_id: int) -> List[int]:
    ids = [i for i in order if i != product_id]
    return ids + [product_id]


class CatalogStore:
    def __init__(self, gateway):
        self._gateway = gateway
        self._products: List[Product] = []
        self._lock = threading.Lock()

    @property
    def products(self) -> Tuple[Product, ...]:
        with self._lock:
            return tuple(p.model_copy() for p in self._products)

    @property
    def order(self) -> List[int]:
        with self._lock:
            return [p.id for p in self._products]

    def __len__(self) -> int:
        with self._lock:
            return len(self._products)

    def get(self, product_id: int) -> Product:
        with self._lock:
            product = self._find(product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} not found")
        return product.model_copy()

    def _find(self, product_id: int) -> Optional[Product]:
        return next((p for p in self._products if p.id == product_id), None)

    def _replace(self, product: Product) -> None:
        with self._lock:
            self._products = [product if p.id == product.id else p for p in self._products]

    def stats(self) -> DashboardStats:
        products = self.products
        return DashboardStats(
            product_count=len(products),
            fresh_count=sum(1 for p in products if p.is_fresh),
        )

    def load(self) -> None:
        """Replace the catalog with every product, newest first. Errors leave it untouched."""
        rows = self._gateway.list_products()
        products = []
        for row in rows:
            try:
                products.append(Product.model_validate(row))
            except ValidationError as exc:
                logger.warning("Skipping product %s: %s", row.get("id"), exc)
        products = rank_products(products)
        with self._lock:
            self._products = products
        logger.info("Loaded %d products", len(products))

    def add(self, draft: ProductDraft) -> Product:
        row = self._gateway.insert_product(draft.model_dump(mode="json"))
        product = Product.model_validate(row)
        with self._lock:
            self._products = [product] + self._products
        logger.info("Added product %s (%s)", product.id, product.name)
        return product

    def add_with_image(self, form: ProductForm, filename: str, data: bytes, content_type: Optional[str] = None) -> Product:
        with uploaded_image(self._gateway, filename, data, content_type) as url:
            return self.add(ProductDraft(**form.model_dump(), image_url=url))

    def update(self, product_id: int, fields: ProductDraft) -> Product:
        self.get(product_id)
        row = self._gateway.update_product(product_id, fields.model_dump(mode="json"))
        product = Product.model_validate(row)
        self._replace(product)
        logger.info("Updated product %s", product_id)
        return product

    def replace_image(self, product_id: int, filename: str, data: bytes, content_type: Optional[str] = None) -> Product:
        current = self.get(product_id)
        with uploaded_image(self._gateway, filename, data, content_type) as url:
            fields = current.editable_fields().model_copy(update={"image_url": url})
            return self.update(product_id, fields)

    def delete(self, product_id: int) -> None:
        self.get(product_id)
        self._gateway.delete_product(product_id)
        with self._lock:
            self._products = [p for p in self._products if p.id != product_id]
        logger.info("Deleted product %s", product_id)

    def toggle_visibility(self, product_id: int) -> Product:
        current = self.get(product_id)
        row = self._gateway.update_product(product_id, {"is_visible": not current.is_visible})
        product = Product.model_validate(row)
        self._replace(product)
        return product

    def reorder(self, new_order: Sequence[int]) -> Tuple[Product, ...]:
        """
        Apply a full permutation of product ids and persist ranks 0..n-1.

        Only products whose rank changed are written. If a write fails the
        previous local order is restored, keeping the ranks that were already
        saved so the next reorder rewrites them, and the error is re-raised.
        """
        new_order = list(new_order)
        with self._lock:
            previous = list(self._products)
            by_id: Dict[int, Product] = {p.id: p for p in previous}
            if len(set(new_order)) != len(new_order):
                raise ValueError("Product order contains duplicate ids")
            if set(new_order) != set(by_id):
                raise ValueError("Product order must list every product exactly once")
            reordered = [by_id[i].model_copy(update={"sort_order": rank}) for rank, i in enumerate(new_order)]
            self._products = reordered

        saved: Dict[int, int] = {}
        try:
            for product in reordered:
                if by_id[product.id].sort_order != product.sort_order:
                    self._gateway.update_product(product.id, {"sort_order": product.sort_order})
                    saved[product.id] = product.sort_order
        except GatewayError:
            logger.error("Failed to save product order after %d of %d rank writes", len(saved), len(reordered))
            with self._lock:
                self._products = [
                    p.model_copy(update={"sort_order": saved[p.id]}) if p.id in saved else p for p in previous
                ]
            raise
        logger.info("Saved product order (%d products)", len(reordered))
        return self.products

    def move(self, product_id: int, to: str) -> Tuple[Product, ...]:
        self.get(product_id)
        if to == "top":
            return self.reorder(move_to_top(self.order, product_id))
        if to == "bottom":
            return self.reorder(move_to_bottom(self.order, product_id))
        raise ValueError(f"Unknown position {to!r}; expected 'top' or 'bottom'")
