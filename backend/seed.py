#!/usr/bin/env python
"""
Seed script that writes the default settings/homepage rows and demo products
so a fresh Supabase project renders a complete storefront.
"""
from __future__ import annotations

import argparse
import sys

from storefront.gateway import HOMEPAGE_CONTENT, PRODUCTS, SINGLETON_ID, SITE_SETTINGS, get_supabase
from storefront.models import HomepageContent, ProductDraft, SiteSettings

DEMO_PRODUCTS = [
    ProductDraft(
        name="Tasmanian Atlantic Salmon",
        price="$38.99/kg",
        category="Fresh Fish",
        description="Whole sides, skin on, pin-boned to order.",
        image_url="https://images.unsplash.com/photo-1574781330855-d0db8cc6a79c?q=80&w=1200&auto=format&fit=crop",
        is_fresh=True,
    ),
    ProductDraft(
        name="Pacific Oysters",
        price="$24/dozen",
        category="Shellfish",
        description="Shucked daily from Pittwater.",
        image_url="https://images.unsplash.com/photo-1606731219412-3b1fb8e6d4a2?q=80&w=1200&auto=format&fit=crop",
        is_fresh=True,
    ),
    ProductDraft(
        name="Sashimi Platter",
        price="Market price",
        category="Platters",
        image_url="https://images.unsplash.com/photo-1534482421-64566f976cfa?q=80&w=1200&auto=format&fit=crop",
        on_order=True,
    ),
]


def seed(with_products: bool = True):
    client = get_supabase()

    settings = {"id": SINGLETON_ID, **SiteSettings().model_dump(mode="json")}
    content = {"id": SINGLETON_ID, **HomepageContent().model_dump(mode="json")}
    client.table(SITE_SETTINGS).upsert(settings, on_conflict="id").execute()
    client.table(HOMEPAGE_CONTENT).upsert(content, on_conflict="id").execute()

    if with_products:
        existing = client.table(PRODUCTS).select("name").execute()
        names = {row["name"] for row in (getattr(existing, "data", None) or [])}
        for draft in DEMO_PRODUCTS:
            # Products have generated ids, so skip by name to keep reruns idempotent.
            if draft.name in names:
                continue
            client.table(PRODUCTS).insert(draft.model_dump(mode="json")).execute()

    print("Seeded site settings, homepage content" + (" and demo products" if with_products else ""))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed default storefront rows into Supabase tables.")
    parser.add_argument("--no-products", action="store_true", help="Only write the settings/content singletons.")
    args = parser.parse_args()
    try:
        seed(with_products=not args.no_products)
    except Exception as exc:
        print(
            "Seed failed:",
            exc,
            "\nCommon fixes:",
            "\n- Ensure .env has real SUPABASE_URL and SUPABASE_ANON_KEY (not placeholders)."
            "\n- Writing singleton rows needs a key allowed by your row level security policies."
            "\n- Verify network access to Supabase.",
            file=sys.stderr,
        )
        sys.exit(1)
