from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

DEFAULT_CATEGORY = "Fresh Fish"
DEFAULT_CATEGORIES = ["Fresh Fish", "Shellfish", "Sashimi", "Platters", "Other"]
INITIAL_LOGO_URL = "https://i.imgur.com/Gq6h2rQ.png"

Weekday = Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


class _Record(BaseModel):
    """Row mirrored from a Supabase table.

    Columns that come back as null fall back to the field default, so callers
    never have to re-apply defaults when reading a value.
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {
            key: value
            for key, value in data.items()
            if value is not None or key not in cls.model_fields or cls.model_fields[key].default is None
        }


# --- public.products ---
class ProductForm(_Record):
    """Editable product fields, minus the image reference."""

    name: str = Field(min_length=1)
    price: str = Field(min_length=1)  # free-form, e.g. "$38/kg" or "Market price"
    category: str = Field(default=DEFAULT_CATEGORY, min_length=1)
    description: str = ""
    is_fresh: bool = False
    on_order: bool = False
    out_of_stock: bool = False
    is_visible: bool = True


class ProductDraft(ProductForm):
    """Full set of editable fields, used for creation and full-replace edits."""

    image_url: str = Field(min_length=1)


class Product(_Record):
    id: Optional[int] = None  # PRIMARY KEY, assigned by Supabase
    name: str = Field(min_length=1)
    price: str
    image_url: str = ""
    category: str = DEFAULT_CATEGORY
    description: str = ""
    is_fresh: bool = False
    on_order: bool = False
    out_of_stock: bool = False
    is_visible: bool = True
    sort_order: Optional[int] = None
    created_at: Optional[datetime] = None

    def editable_fields(self) -> ProductDraft:
        return ProductDraft.model_validate(self.model_dump(include=set(ProductDraft.model_fields)))


# --- site_settings.opening_hours (jsonb) ---
class OpeningHour(BaseModel):
    day: Weekday
    time: str  # free-form; "Closed" is valid


DEFAULT_OPENING_HOURS = [
    OpeningHour(day="Monday", time="Closed"),
    OpeningHour(day="Tuesday", time="Closed"),
    OpeningHour(day="Wednesday", time="7am - 1pm"),
    OpeningHour(day="Thursday", time="7am - 2pm"),
    OpeningHour(day="Friday", time="7am - 2:30pm"),
    OpeningHour(day="Saturday", time="Closed"),
    OpeningHour(day="Sunday", time="Closed"),
]


# --- site_settings.social_links (jsonb) ---
class SocialLinks(_Record):
    facebook: str = ""
    instagram: str = ""


# --- public.site_settings --- singleton row id = 1
class SiteSettings(_Record):
    logo_url: str = INITIAL_LOGO_URL
    background_url: Optional[str] = None  # None means no background image
    social_links: SocialLinks = Field(default_factory=SocialLinks)
    abn: str = ""
    phone_number: str = ""
    categories: List[str] = Field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    opening_hours: List[OpeningHour] = Field(default_factory=lambda: [h.model_copy() for h in DEFAULT_OPENING_HOURS])

    @field_validator("categories")
    @classmethod
    def _unique_categories(cls, value: List[str]) -> List[str]:
        labels: List[str] = []
        for label in value:
            label = label.strip()
            if label and label not in labels:
                labels.append(label)
        # An empty set from the database keeps the shop's default categories.
        return labels or list(DEFAULT_CATEGORIES)


# --- public.homepage_content --- singleton row id = 1
class HomepageContent(_Record):
    hero_title: str = "Fresh From The Ocean"
    hero_subtitle: str = "Proudly offering the freshest, locally sourced seafood in Tasmania."
    announcement_text: str = "Free delivery on all orders over $100 this week!"
    about_text: str = (
        "Founded in 1988, Wilson's Seafoods has been the heart of Glenorchy's fresh fish market "
        "for over three decades. Our family-run business is built on a simple promise: to provide "
        "our community with the freshest, highest-quality, and sustainably sourced seafood Tasmania "
        "has to offer. We work directly with local fishermen to bring the best of the ocean straight "
        "to your table."
    )
    about_image_url: str = (
        "https://images.unsplash.com/photo-1577906161839-d4272b0755f3?q=80&w=1887&auto=format&fit=crop"
    )

    gateway1_image_url: str = (
        "https://images.unsplash.com/photo-1519708227418-c8fd9a32b7a2?q=80&w=1200&auto=format&fit=crop"
    )
    gateway1_title: str = "Public Fish Market"
    gateway1_description: str = (
        "Visit our store to see the freshest Tasmanian seafood. We are open to the public."
    )
    gateway1_button_text: str = "View Products"
    gateway1_button_url: str = "#products"

    gateway2_image_url: str = (
        "https://images.unsplash.com/photo-1577219491135-ce391730fb2c?q=80&w=1200&auto=format&fit=crop"
    )
    gateway2_title: str = "Wholesale & Chef's Portal"
    gateway2_description: str = (
        "For our restaurant, chef, and wholesale partners. Log in to your Fresho account "
        "or apply for a new trade account here."
    )
    gateway2_button_text: str = "Enter Portal"
    gateway2_button_url: str = "https://www.fresho.com/"


# --- public.contact_submissions --- insert only
class ContactSubmission(_Record):
    name: str = Field(min_length=1)
    email: EmailStr
    message: str = Field(min_length=1)
    created_at: Optional[datetime] = None


class DashboardStats(BaseModel):
    product_count: int
    fresh_count: int
