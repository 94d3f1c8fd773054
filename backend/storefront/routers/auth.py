from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr

from ..auth import get_current_user, get_site
from ..errors import AuthenticationError
from ..logging_config import get_logger
from ..state import SiteState

router = APIRouter()
logger = get_logger("routers.auth")


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class AuthResponse(BaseModel):
    access_token: str
    refresh_token: str | None = None
    token_type: str = "bearer"
    email: str | None = None
    view: str
    path: str


class LogoutResponse(BaseModel):
    view: str
    path: str


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, site: SiteState = Depends(get_site)):
    """
    Sign in with Supabase Auth. The SIGNED_IN event moves the router to /admin.
    """
    try:
        session = site.gateway.sign_in(payload.email, payload.password)
    except AuthenticationError as exc:
        logger.warning("Failed admin login for %s", payload.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    user = getattr(session, "user", None)
    return AuthResponse(
        access_token=session.access_token,
        refresh_token=getattr(session, "refresh_token", None),
        email=getattr(user, "email", None),
        view=site.router.view.value,
        path=site.router.path,
    )


@router.post("/logout", response_model=LogoutResponse)
def logout(current_user=Depends(get_current_user), site: SiteState = Depends(get_site)):
    site.gateway.sign_out()
    view = site.router.logout()
    return LogoutResponse(view=view.value, path=site.router.path)


@router.get("/session")
def session(current_user=Depends(get_current_user)):
    return {"id": str(current_user.id), "email": getattr(current_user, "email", None)}
