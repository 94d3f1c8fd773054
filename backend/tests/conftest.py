"""Shared fixtures: an in-memory stand-in for the Supabase gateway and a test client."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from storefront.errors import AuthenticationError, GatewayError, UploadError
from storefront.gateway import HOMEPAGE_CONTENT, SITE_SETTINGS
from storefront.main import create_app
from storefront.state import SiteState

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse"

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


class FakeGateway:
    """Mimics SupabaseGateway against Python lists and dicts.

    Put an operation name in ``fail`` (e.g. ``"update_product"``) to make
    that call raise the same error the real gateway would. ``fail_after``
    maps an operation to how many calls succeed before it starts failing.
    """

    def __init__(self, products=None, settings=None, content=None):
        self.products = []
        self.tables = {SITE_SETTINGS: settings, HOMEPAGE_CONTENT: content}
        self.contacts = []
        self.objects = {}
        self.calls = []
        self.fail = set()
        self.fail_after = {}
        self.authorized_token = None
        self._next_id = 1
        self._listeners = []
        self._tokens = {}
        for row in products or []:
            self._store(dict(row))

    def _check(self, operation, error=GatewayError):
        self.calls.append(operation)
        if operation in self.fail_after:
            if self.fail_after[operation] == 0:
                self.fail.add(operation)
            else:
                self.fail_after[operation] -= 1
        if operation in self.fail:
            if error is GatewayError:
                raise GatewayError(operation, "simulated outage")
            raise error(f"{operation}: simulated outage")

    def _store(self, record):
        record.setdefault("id", self._next_id)
        record.setdefault("created_at", (BASE_TIME + timedelta(minutes=record["id"])).isoformat())
        self._next_id = max(self._next_id, record["id"]) + 1
        self.products.append(record)
        return dict(record)

    def _row(self, product_id):
        return next((p for p in self.products if p["id"] == product_id), None)

    # --- tables ---

    def list_products(self):
        self._check("list_products")
        return [dict(p) for p in sorted(self.products, key=lambda p: p["created_at"], reverse=True)]

    def insert_product(self, record):
        self._check("insert_product")
        return self._store(dict(record))

    def update_product(self, product_id, fields):
        self._check("update_product")
        row = self._row(product_id)
        if row is None:
            raise GatewayError(f"update product {product_id}", "no row returned")
        row.update(fields)
        return dict(row)

    def delete_product(self, product_id):
        self._check("delete_product")
        self.products = [p for p in self.products if p["id"] != product_id]

    def fetch_singleton(self, table):
        self._check("fetch_singleton")
        row = self.tables.get(table)
        return dict(row) if row is not None else None

    def update_singleton(self, table, fields):
        self._check("update_singleton")
        row = self.tables.get(table) or {"id": 1}
        row.update(fields)
        self.tables[table] = row

    def insert_contact(self, record):
        self._check("insert_contact")
        self.contacts.append({**record, "created_at": BASE_TIME.isoformat()})

    # --- storage ---

    def upload(self, path, data, content_type=None):
        self._check("upload", UploadError)
        self.objects[path] = data
        return f"https://storage.test/images/{path}"

    def remove(self, path):
        self._check("remove", UploadError)
        self.objects.pop(path, None)

    # --- auth ---

    def _notify(self, event, session):
        for callback in list(self._listeners):
            callback(event, session)

    def sign_in(self, email, password):
        if email != ADMIN_EMAIL or password != ADMIN_PASSWORD:
            raise AuthenticationError("Invalid login credentials")
        token = f"token-{len(self._tokens) + 1}"
        user = SimpleNamespace(id="admin-user", email=email)
        self._tokens[token] = user
        session = SimpleNamespace(access_token=token, refresh_token="refresh", user=user)
        self._notify("SIGNED_IN", session)
        return session

    def sign_out(self):
        self._tokens.clear()
        self._notify("SIGNED_OUT", None)

    def get_user(self, access_token):
        user = self._tokens.get(access_token)
        if user is None:
            raise AuthenticationError("Invalid or expired token")
        return user

    def authorize(self, access_token):
        self.authorized_token = access_token

    def on_auth_state_change(self, callback):
        self._listeners.append(callback)
        return SimpleNamespace(unsubscribe=lambda: self._listeners.remove(callback))


SAMPLE_PRODUCTS = [
    {"id": 1, "name": "Oysters", "price": "$24/dozen", "category": "Shellfish", "image_url": "https://img.test/1.jpg"},
    {
        "id": 2,
        "name": "Smoked Salmon",
        "price": "$12",
        "category": "Other",
        "image_url": "https://img.test/2.jpg",
        "is_visible": None,
    },
    {
        "id": 3,
        "name": "Tiger Prawns",
        "price": "$32/kg",
        "category": "Shellfish",
        "image_url": "https://img.test/3.jpg",
        "is_visible": False,
    },
    {
        "id": 4,
        "name": "Atlantic Salmon Fillet",
        "price": "$38.99/kg",
        "category": "Fresh Fish",
        "image_url": "https://img.test/4.jpg",
        "is_fresh": True,
        "is_visible": True,
    },
]


@pytest.fixture
def gateway():
    return FakeGateway(
        products=SAMPLE_PRODUCTS,
        settings={"id": 1, "categories": ["Fresh Fish", "Shellfish"], "abn": "12 345 678 901"},
        content={"id": 1, "hero_title": "Fresh Today"},
    )


@pytest.fixture
def site(gateway):
    state = SiteState(gateway)
    state.load()
    return state


@pytest.fixture
def client(site):
    app = create_app(site=site, env="test")
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(gateway):
    session = gateway.sign_in(ADMIN_EMAIL, ADMIN_PASSWORD)
    return {"Authorization": f"Bearer {session.access_token}"}
