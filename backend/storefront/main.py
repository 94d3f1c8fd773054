from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .config import get_settings
from .gateway import SupabaseGateway, get_supabase
from .logging_config import get_logger, setup_logging
from .routers import admin, auth, public
from .state import SiteState

logger = get_logger("main")


def _default_site() -> tuple[SiteState, str, str]:
    settings = get_settings()
    gateway = SupabaseGateway(get_supabase(), bucket=settings.storage_bucket)
    return SiteState(gateway), settings.env, settings.log_level


def create_app(site: Optional[SiteState] = None, env: str = "local") -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.site is None:
            app.state.site, app.state.env, log_level = _default_site()
            setup_logging(log_level)
        else:
            setup_logging()
        logger.info("Starting storefront (%s); loading catalog and site content", app.state.env)
        app.state.site.start()
        yield
        logger.info("Shutting down")
        app.state.site.stop()

    app = FastAPI(title="Seafood Storefront", version="0.1.0", lifespan=lifespan)
    app.state.site = site
    app.state.env = env

    @app.get("/health")
    def healthcheck():
        return {"status": "ok", "env": app.state.env}

    app.include_router(public.router, tags=["public"])
    app.include_router(auth.router, prefix="/admin", tags=["auth"])
    app.include_router(admin.gate, prefix="/admin", tags=["admin"])
    app.include_router(admin.router, prefix="/admin", tags=["admin"])
    return app


app = create_app()
