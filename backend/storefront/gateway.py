"""Thin wrapper over the Supabase client.

Every table, storage and auth call the storefront makes goes through
``SupabaseGateway`` so failures surface as ``GatewayError`` /
``UploadError`` / ``AuthenticationError`` instead of SDK-specific exceptions.
"""

from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional

from supabase import Client, create_client

from .config import get_settings
from .errors import AuthenticationError, GatewayError, UploadError

PRODUCTS = "products"
SITE_SETTINGS = "site_settings"
HOMEPAGE_CONTENT = "homepage_content"
CONTACT_SUBMISSIONS = "contact_submissions"
SINGLETON_ID = 1


@lru_cache()
def get_supabase() -> Client:
    settings = get_settings()
    url = str(settings.supabase_url)

    if "your-project.supabase.co" in url:
        raise RuntimeError(
            "SUPABASE_URL in .env is still the placeholder (your-project). "
            "Fill in your real project URL and anon key."
        )
    return create_client(url, settings.supabase_key)


class SupabaseGateway:
    def __init__(self, client: Client, bucket: str = "images"):
        self.client = client
        self.bucket = bucket

    # --- tables ---

    def _execute(self, operation: str, query) -> List[Dict[str, Any]]:
        try:
            resp = query.execute()
        except Exception as exc:
            raise GatewayError(operation, exc) from exc
        error = getattr(resp, "error", None)
        if error:
            raise GatewayError(operation, error)
        return getattr(resp, "data", None) or []

    def list_products(self) -> List[Dict[str, Any]]:
        query = self.client.table(PRODUCTS).select("*").order("created_at", desc=True)
        return self._execute("load products", query)

    def insert_product(self, record: Dict[str, Any]) -> Dict[str, Any]:
        data = self._execute("add product", self.client.table(PRODUCTS).insert(record))
        if not data:
            raise GatewayError("add product", "no row returned")
        return data[0]

    def update_product(self, product_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
        operation = f"update product {product_id}"
        data = self._execute(operation, self.client.table(PRODUCTS).update(fields).eq("id", product_id))
        if not data:
            raise GatewayError(operation, "no row returned")
        return data[0]

    def delete_product(self, product_id: int) -> None:
        self._execute(f"delete product {product_id}", self.client.table(PRODUCTS).delete().eq("id", product_id))

    def fetch_singleton(self, table: str) -> Optional[Dict[str, Any]]:
        data = self._execute(f"load {table}", self.client.table(table).select("*").limit(1))
        return data[0] if data else None

    def update_singleton(self, table: str, fields: Dict[str, Any]) -> None:
        query = self.client.table(table).update(fields).eq("id", SINGLETON_ID)
        self._execute(f"update {table} ({', '.join(fields)})", query)

    def insert_contact(self, record: Dict[str, Any]) -> None:
        self._execute("submit contact form", self.client.table(CONTACT_SUBMISSIONS).insert(record))

    # --- storage ---

    def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        """Upload bytes to the images bucket and return the object's public URL."""
        bucket = self.client.storage.from_(self.bucket)
        options = {"content-type": content_type} if content_type else None
        try:
            bucket.upload(path, data, options)
        except Exception as exc:
            raise UploadError(f"Failed to upload {path}: {exc}") from exc
        return bucket.get_public_url(path)

    def remove(self, path: str) -> None:
        try:
            self.client.storage.from_(self.bucket).remove([path])
        except Exception as exc:
            raise UploadError(f"Failed to remove {path}: {exc}") from exc

    # --- auth ---

    def sign_in(self, email: str, password: str):
        try:
            resp = self.client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as exc:
            raise AuthenticationError(str(exc)) from exc
        if resp.session is None:
            raise AuthenticationError("Invalid credentials")
        return resp.session

    def sign_out(self) -> None:
        self.client.auth.sign_out()

    def get_user(self, access_token: str):
        try:
            user = self.client.auth.get_user(access_token).user
        except Exception as exc:
            raise AuthenticationError("Invalid or expired token") from exc
        if user is None:
            raise AuthenticationError("User not found")
        return user

    def authorize(self, access_token: str) -> None:
        """Send later table and storage calls with the given user's access token."""
        header = f"Bearer {access_token}"
        if self.client.options.headers.get("Authorization") == header:
            return
        # Same switch supabase-py makes on SIGNED_IN: the postgrest and storage
        # clients are rebuilt lazily from options.headers.
        self.client.options.headers["Authorization"] = header
        self.client._postgrest = None
        self.client._storage = None

    def on_auth_state_change(self, callback: Callable[[str, Any], None]):
        """Subscribe to auth events; returns a handle with ``unsubscribe()``."""
        return self.client.auth.on_auth_state_change(callback)
