from typing import List, Optional

from .catalog import CatalogStore
from .content import ContentStore, SettingsStore
from .errors import GatewayError
from .filtering import ALL_CATEGORIES, filter_products
from .logging_config import get_logger
from .models import HomepageContent, Product
from .views import ViewRouter

logger = get_logger("state")

ENQUIRY_TEMPLATE = "I'm interested in the {name}. Is it available?"


def banner_visible(content: HomepageContent, dismissed: bool) -> bool:
    return bool(content.announcement_text) and not dismissed


def enquiry_message(product: Product) -> str:
    return ENQUIRY_TEMPLATE.format(name=product.name)


class SiteState:
    """
    Application state owned by the FastAPI app: the product catalog, the
    settings and homepage content singletons, and the view router.

    Routers read through projections (copies) and change state only through
    the store methods.
    """

    def __init__(self, gateway, path: str = "/"):
        self.gateway = gateway
        self.catalog = CatalogStore(gateway)
        self.settings = SettingsStore(gateway)
        self.content = ContentStore(gateway)
        self.router = ViewRouter(path)
        self._subscription = None

    def load(self) -> None:
        """Initial fetch. A failed read is logged and leaves that store on its defaults."""
        for name, store in (("products", self.catalog), ("settings", self.settings), ("content", self.content)):
            try:
                store.load()
            except GatewayError:
                logger.exception("Failed to load %s; serving defaults", name)

    def start(self) -> None:
        self._subscription = self.gateway.on_auth_state_change(self.router.handle_auth_event)
        self.load()

    def stop(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def public_products(self, search_term: str = "", category: str = ALL_CATEGORIES) -> List[Product]:
        return filter_products(self.catalog.products, search_term, category, visible_only=True)

    def admin_products(self, search_term: str = "", category: str = ALL_CATEGORIES) -> List[Product]:
        return filter_products(self.catalog.products, search_term, category, visible_only=False)

    def public_product(self, product_id: int) -> Optional[Product]:
        return next((p for p in self.public_products() if p.id == product_id), None)
