from typing import Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, Response, UploadFile, status
from pydantic import BaseModel

from ..auth import get_current_user, get_optional_user, get_site
from ..errors import NotFoundError, StorefrontError
from ..filtering import ALL_CATEGORIES
from ..logging_config import get_logger
from ..models import DEFAULT_CATEGORY, OpeningHour, ProductDraft, ProductForm, SocialLinks
from ..state import SiteState
from ..views import admin_screen, view_for_path

logger = get_logger("routers.admin")

# GET /admin renders the login form or the console, so it is not token-gated.
gate = APIRouter()
router = APIRouter(dependencies=[Depends(get_current_user)])


class FieldValue(BaseModel):
    value: Optional[str] = None


class ProductOrder(BaseModel):
    order: List[int]


class CategoryLabel(BaseModel):
    label: str


def _failed(action: str, exc: Exception) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ValueError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    logger.error("Failed to %s: %s", action, exc)
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Failed to {action}: {exc}")


def _read(upload: UploadFile) -> bytes:
    return upload.file.read()


@gate.get("")
def admin_home(request: Request, current_user=Depends(get_optional_user), site: SiteState = Depends(get_site)):
    """
    Admin view: the login form without a session, the console with one.
    """
    view = view_for_path(request.url.path)
    screen = admin_screen(current_user)
    if current_user is None:
        return {"view": view.value, "screen": screen.value}
    return {
        "view": view.value,
        "screen": screen.value,
        "stats": site.catalog.stats().model_dump(),
        "products": [p.model_dump(mode="json") for p in site.catalog.products],
        "settings": site.settings.current.model_dump(mode="json"),
        "content": site.content.current.model_dump(mode="json"),
    }


# --- products ---


@router.get("/products")
def list_products(
    search: str = Query(default=""),
    category: str = Query(default=ALL_CATEGORIES),
    site: SiteState = Depends(get_site),
):
    return [p.model_dump(mode="json") for p in site.admin_products(search, category)]


@router.post("/products", status_code=status.HTTP_201_CREATED)
def add_product(
    name: str = Form(...),
    price: str = Form(...),
    category: str = Form(DEFAULT_CATEGORY),
    description: str = Form(""),
    is_fresh: bool = Form(False),
    on_order: bool = Form(False),
    out_of_stock: bool = Form(False),
    is_visible: bool = Form(True),
    image: UploadFile = File(...),
    site: SiteState = Depends(get_site),
):
    try:
        form = ProductForm(
            name=name,
            price=price,
            category=category,
            description=description,
            is_fresh=is_fresh,
            on_order=on_order,
            out_of_stock=out_of_stock,
            is_visible=is_visible,
        )
        product = site.catalog.add_with_image(form, image.filename, _read(image), image.content_type)
    except (StorefrontError, ValueError) as exc:
        raise _failed("add product", exc) from exc
    return product.model_dump(mode="json")


@router.put("/products/order")
def reorder_products(payload: ProductOrder, site: SiteState = Depends(get_site)):
    try:
        products = site.catalog.reorder(payload.order)
    except (StorefrontError, ValueError) as exc:
        raise _failed("save product order", exc) from exc
    return [p.model_dump(mode="json") for p in products]


@router.put("/products/{product_id}")
def update_product(product_id: int, payload: ProductDraft, site: SiteState = Depends(get_site)):
    try:
        product = site.catalog.update(product_id, payload)
    except (StorefrontError, ValueError) as exc:
        raise _failed("update product", exc) from exc
    return product.model_dump(mode="json")


@router.put("/products/{product_id}/image")
def replace_product_image(product_id: int, image: UploadFile = File(...), site: SiteState = Depends(get_site)):
    try:
        product = site.catalog.replace_image(product_id, image.filename, _read(image), image.content_type)
    except (StorefrontError, ValueError) as exc:
        raise _failed("update product image", exc) from exc
    return product.model_dump(mode="json")


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(product_id: int, site: SiteState = Depends(get_site)):
    try:
        site.catalog.delete(product_id)
    except (StorefrontError, ValueError) as exc:
        raise _failed("delete product", exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/products/{product_id}/visibility")
def toggle_visibility(product_id: int, site: SiteState = Depends(get_site)):
    try:
        product = site.catalog.toggle_visibility(product_id)
    except (StorefrontError, ValueError) as exc:
        raise _failed("toggle visibility", exc) from exc
    return product.model_dump(mode="json")


@router.post("/products/{product_id}/move")
def move_product(
    product_id: int,
    to: Literal["top", "bottom"] = Query(...),
    site: SiteState = Depends(get_site),
):
    try:
        products = site.catalog.move(product_id, to)
    except (StorefrontError, ValueError) as exc:
        raise _failed("save product order", exc) from exc
    return [p.model_dump(mode="json") for p in products]


# --- site settings ---


@router.get("/settings")
def get_settings(site: SiteState = Depends(get_site)):
    return site.settings.current.model_dump(mode="json")


@router.put("/settings/social-links")
def update_social_links(payload: SocialLinks, site: SiteState = Depends(get_site)):
    try:
        links = site.settings.set_social_links(payload)
    except (StorefrontError, ValueError) as exc:
        raise _failed("save social links", exc) from exc
    return links.model_dump(mode="json")


@router.put("/settings/opening-hours")
def update_opening_hours(payload: List[OpeningHour], site: SiteState = Depends(get_site)):
    try:
        hours = site.settings.set_opening_hours(payload)
    except (StorefrontError, ValueError) as exc:
        raise _failed("save opening hours", exc) from exc
    return [h.model_dump(mode="json") for h in hours]


@router.post("/settings/categories")
def add_category(payload: CategoryLabel, site: SiteState = Depends(get_site)):
    try:
        added = site.settings.add_category(payload.label)
    except (StorefrontError, ValueError) as exc:
        raise _failed("save categories", exc) from exc
    return {"added": added, "categories": site.settings.current.categories}


@router.delete("/settings/categories/{label}")
def remove_category(label: str, site: SiteState = Depends(get_site)):
    try:
        removed = site.settings.remove_category(label)
    except (StorefrontError, ValueError) as exc:
        raise _failed("save categories", exc) from exc
    return {"removed": removed, "categories": site.settings.current.categories}


@router.delete("/settings/background")
def clear_background(site: SiteState = Depends(get_site)):
    try:
        site.settings.set_background(None)
    except (StorefrontError, ValueError) as exc:
        raise _failed("save background", exc) from exc
    return {"background_url": None}


@router.patch("/settings/{field}")
def update_setting(field: str, payload: FieldValue, site: SiteState = Depends(get_site)):
    if field not in site.settings.text_fields:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown setting {field!r}")
    try:
        value = site.settings.set_field(field, payload.value)
    except (StorefrontError, ValueError) as exc:
        raise _failed(f"save {field}", exc) from exc
    return {field: value}


@router.put("/settings/{field}/image")
def upload_setting_image(field: str, image: UploadFile = File(...), site: SiteState = Depends(get_site)):
    try:
        url = site.settings.set_image(field, image.filename, _read(image), image.content_type)
    except (StorefrontError, ValueError) as exc:
        raise _failed(f"save {field}", exc) from exc
    return {field: url}


# --- homepage content ---


@router.get("/content")
def get_content(site: SiteState = Depends(get_site)):
    return site.content.current.model_dump(mode="json")


@router.patch("/content")
def update_content(payload: Dict[str, str], site: SiteState = Depends(get_site)):
    try:
        content = site.content.update_many(payload)
    except (StorefrontError, ValueError) as exc:
        raise _failed("save content", exc) from exc
    return content.model_dump(mode="json")


@router.patch("/content/{field}")
def update_content_field(field: str, payload: FieldValue, site: SiteState = Depends(get_site)):
    try:
        value = site.content.set_field(field, payload.value)
    except (StorefrontError, ValueError) as exc:
        raise _failed(f"save {field}", exc) from exc
    return {field: value}


@router.put("/content/{field}/image")
def upload_content_image(field: str, image: UploadFile = File(...), site: SiteState = Depends(get_site)):
    try:
        url = site.content.set_image(field, image.filename, _read(image), image.content_type)
    except (StorefrontError, ValueError) as exc:
        raise _failed(f"save {field}", exc) from exc
    return {field: url}
