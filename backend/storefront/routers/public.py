from fastapi import APIRouter, Cookie, Depends, HTTPException, Query, Request, Response, status

from ..auth import get_site
from ..errors import GatewayError
from ..filtering import ALL_CATEGORIES
from ..logging_config import get_logger
from ..models import ContactSubmission
from ..seo import business_schema
from ..state import SiteState, banner_visible, enquiry_message
from ..views import view_for_path

router = APIRouter()
logger = get_logger("routers.public")

BANNER_COOKIE = "banner_dismissed"


@router.get("/")
def home(
    request: Request,
    search: str = Query(default=""),
    category: str = Query(default=ALL_CATEGORIES),
    banner_dismissed: str | None = Cookie(default=None),
    site: SiteState = Depends(get_site),
):
    """
    Public home view: site settings, homepage content and the visible catalog.
    """
    settings = site.settings.current
    content = site.content.current
    products = site.public_products(search, category)
    return {
        "view": view_for_path(request.url.path).value,
        "settings": settings.model_dump(mode="json"),
        "content": content.model_dump(mode="json"),
        "show_banner": banner_visible(content, bool(banner_dismissed)),
        "search": search,
        "category": category,
        "categories": [ALL_CATEGORIES] + settings.categories,
        "products": [p.model_dump(mode="json") for p in products],
        "schema": business_schema(settings, content),
    }


@router.get("/products")
def list_products(
    search: str = Query(default=""),
    category: str = Query(default=ALL_CATEGORIES),
    site: SiteState = Depends(get_site),
):
    return [p.model_dump(mode="json") for p in site.public_products(search, category)]


@router.get("/products/{product_id}/enquiry")
def enquiry(product_id: int, site: SiteState = Depends(get_site)):
    product = site.public_product(product_id)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return {"product_id": product_id, "message": enquiry_message(product)}


@router.post("/contact", status_code=status.HTTP_201_CREATED)
def submit_contact(payload: ContactSubmission, site: SiteState = Depends(get_site)):
    record = payload.model_dump(mode="json", include={"name", "email", "message"})
    try:
        site.gateway.insert_contact(record)
    except GatewayError as exc:
        logger.error("Error submitting contact form: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Something went wrong. Please try again later.",
        ) from exc
    return {"submitted": True}


@router.post("/banner/dismiss", status_code=status.HTTP_204_NO_CONTENT)
def dismiss_banner():
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    # No max_age: the browser drops the cookie when its session ends.
    response.set_cookie(BANNER_COOKIE, "true", httponly=True, samesite="lax")
    return response
