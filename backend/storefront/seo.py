"""schema.org LocalBusiness JSON-LD for the storefront's home page."""

from typing import Any, Dict, List

from .models import HomepageContent, OpeningHour, SiteSettings

BUSINESS_NAME = "Wilsons Seafoods"
SITE_URL = "https://wilsonsseafoods.com.au"

ADDRESS = {
    "@type": "PostalAddress",
    "streetAddress": "5 Sussex St",
    "addressLocality": "Glenorchy",
    "addressRegion": "TAS",
    "postalCode": "7010",
    "addressCountry": "AU",
}
GEO = {"@type": "GeoCoordinates", "latitude": -42.832, "longitude": 147.274}


def opening_hours_spec(hours: List[OpeningHour]) -> List[Dict[str, Any]]:
    specs = []
    for hour in hours:
        # Free-form ranges like "7am - 1pm"; anything without a range is treated as closed.
        opens, sep, closes = hour.time.partition("-")
        if not sep:
            continue
        specs.append(
            {
                "@type": "OpeningHoursSpecification",
                "dayOfWeek": hour.day,
                "opens": opens.strip(),
                "closes": closes.strip(),
            }
        )
    return specs


def business_schema(settings: SiteSettings, content: HomepageContent) -> Dict[str, Any]:
    same_as = [link for link in (settings.social_links.facebook, settings.social_links.instagram) if link]
    return {
        "@context": "https://schema.org",
        "@type": "LocalBusiness",
        "@id": f"{SITE_URL}/#business",
        "name": BUSINESS_NAME,
        "image": content.about_image_url,
        "logo": settings.logo_url,
        "url": SITE_URL,
        "telephone": settings.phone_number,
        "priceRange": "$$",
        "address": ADDRESS,
        "geo": GEO,
        "openingHoursSpecification": opening_hours_spec(settings.opening_hours),
        "sameAs": same_as,
        "description": content.about_text,
        "servesCuisine": "Seafood",
        "paymentAccepted": "Cash, Credit Card",
        "currenciesAccepted": "AUD",
    }
