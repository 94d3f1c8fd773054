from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status

from .errors import AuthenticationError
from .state import SiteState


def get_site(request: Request) -> SiteState:
    site = getattr(request.app.state, "site", None)
    if site is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storefront state is not initialised",
        )
    return site


def get_current_user(
    authorization: Optional[str] = Header(default=None),
    site: SiteState = Depends(get_site),
):
    """
    Validate a Supabase access token (Bearer) and return the auth user object.

    Writes made while handling the request then run under that user's token.
    """
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    token = authorization.split(" ", 1)[1]
    try:
        user = site.gateway.get_user(token)
    except AuthenticationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    site.gateway.authorize(token)
    return user


def get_optional_user(
    authorization: Optional[str] = Header(default=None),
    site: SiteState = Depends(get_site),
):
    if not authorization:
        return None
    try:
        return get_current_user(authorization=authorization, site=site)
    except HTTPException:
        return None
