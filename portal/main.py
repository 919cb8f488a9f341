# portal/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from portal.core.config import get_settings
from portal.core.exception_handlers import setup_exception_handlers
from portal.core.supabase_client import supabase_admin, supabase_public
from portal.dependencies import build_portal

# Routers
from portal.routers.auth import router as auth_router
from portal.routers.dashboard import router as dashboard_router
from portal.routers.organizations import router as organizations_router
from portal.routers.pages import router as pages_router
from portal.routers.settings import router as settings_router
from portal.routers.setup import router as setup_router
from portal.routers.users import router as users_router

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Create the Supabase clients and wire the portal components.
      - Restore the persisted session (always ends signed in or anonymous).

    Shutdown:
      - Drop the provider event subscription.
    """
    logger.info("Startup: connecting to Supabase at %s", settings.SUPABASE_URL)
    client = await supabase_public(settings)
    admin_client = await supabase_admin(settings)
    if admin_client is None:
        logger.warning("SUPABASE_SERVICE_ROLE_KEY not set: creating/inviting users is disabled")

    portal = build_portal(settings, client, admin_client)
    portal.attach()

    state = await portal.session.restore_session()
    await portal.profiles.settle()
    await portal.settings.settle()
    logger.info("Startup: session %s", state.status.value)

    app.state.portal = portal
    yield
    portal.detach()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)

app.include_router(pages_router)
app.include_router(auth_router)
app.include_router(setup_router)
app.include_router(dashboard_router)
app.include_router(organizations_router)
app.include_router(settings_router)
app.include_router(users_router)
