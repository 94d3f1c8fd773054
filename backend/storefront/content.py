"""Singleton settings and homepage content, synced to Supabase field by field.

A setter applies the new value locally first, then writes that single column
to row ``id = 1``. When the write fails the field is put back to its previous
value and the error is re-raised.
"""

import threading
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Type

from pydantic import BaseModel, ValidationError

from .errors import GatewayError
from .gateway import HOMEPAGE_CONTENT, SITE_SETTINGS
from .logging_config import get_logger
from .models import HomepageContent, OpeningHour, SiteSettings, SocialLinks
from .uploads import uploaded_image

logger = get_logger("content")


class SingletonStore:
    table: str
    model: Type[BaseModel]
    image_fields: FrozenSet[str] = frozenset()

    def __init__(self, gateway):
        self._gateway = gateway
        self._record = self.model()
        self._lock = threading.Lock()

    @property
    def current(self):
        with self._lock:
            return self._record.model_copy(deep=True)

    def load(self) -> None:
        row = self._gateway.fetch_singleton(self.table)
        if row is None:
            logger.warning("No %s row found; using defaults", self.table)
            return
        try:
            record = self.model.model_validate(row)
        except ValidationError as exc:
            invalid = {error["loc"][0] for error in exc.errors() if error["loc"]}
            logger.warning("Invalid %s columns %s; using defaults for them", self.table, sorted(map(str, invalid)))
            record = self.model.model_validate({k: v for k, v in row.items() if k not in invalid})
        with self._lock:
            self._record = record

    def _check_field(self, field: str) -> None:
        if field not in self.model.model_fields:
            raise ValueError(f"Unknown {self.table} field {field!r}")

    def set_field(self, field: str, value: Any):
        self._check_field(field)
        if value is None and self.model.model_fields[field].default is not None:
            raise ValueError(f"{self.table} field {field!r} cannot be null")
        with self._lock:
            previous = getattr(self._record, field)
            updated = self.model.model_validate({**self._record.model_dump(), field: value})
            self._record = self._record.model_copy(update={field: getattr(updated, field)})
            persisted = updated.model_dump(mode="json", include={field})

        try:
            self._gateway.update_singleton(self.table, persisted)
        except GatewayError:
            logger.error("Failed to save %s.%s; restoring previous value", self.table, field)
            with self._lock:
                self._record = self._record.model_copy(update={field: previous})
            raise
        logger.info("Saved %s.%s", self.table, field)
        return getattr(updated, field)

    def set_image(self, field: str, filename: str, data: bytes, content_type: Optional[str] = None) -> str:
        self._check_field(field)
        if field not in self.image_fields:
            raise ValueError(f"{field!r} is not an image field")
        with uploaded_image(self._gateway, filename, data, content_type) as url:
            self.set_field(field, url)
        return url


class SettingsStore(SingletonStore):
    table = SITE_SETTINGS
    model = SiteSettings
    image_fields = frozenset({"logo_url", "background_url"})
    text_fields = frozenset({"logo_url", "background_url", "abn", "phone_number"})

    def set_field(self, field: str, value: Any):
        if field == "background_url":
            # An empty value clears the background.
            value = value or None
        return super().set_field(field, value)

    def set_logo(self, url: str) -> str:
        return self.set_field("logo_url", url)

    def set_background(self, url: Optional[str]) -> Optional[str]:
        return self.set_field("background_url", url)

    def set_social_links(self, links: SocialLinks) -> SocialLinks:
        return self.set_field("social_links", links)

    def set_abn(self, abn: str) -> str:
        return self.set_field("abn", abn)

    def set_phone_number(self, phone_number: str) -> str:
        return self.set_field("phone_number", phone_number)

    def set_opening_hours(self, hours: Sequence[OpeningHour]) -> List[OpeningHour]:
        return self.set_field("opening_hours", list(hours))

    def set_categories(self, categories: Sequence[str]) -> List[str]:
        return self.set_field("categories", list(categories))

    def add_category(self, label: str) -> bool:
        """Append a category. Blank or already-present labels are a no-op."""
        label = label.strip()
        categories = self.current.categories
        if not label or label in categories:
            return False
        self.set_categories(categories + [label])
        return True

    def remove_category(self, label: str) -> bool:
        # Products tagged with the label keep it and still render.
        categories = self.current.categories
        if label not in categories:
            return False
        self.set_categories([c for c in categories if c != label])
        return True


class ContentStore(SingletonStore):
    table = HOMEPAGE_CONTENT
    model = HomepageContent
    image_fields = frozenset({"about_image_url", "gateway1_image_url", "gateway2_image_url"})

    def update_many(self, fields: Dict[str, str]) -> HomepageContent:
        """Save several fields, one request each. Stops at the first failure."""
        for field, value in fields.items():
            self.set_field(field, value)
        return self.current
