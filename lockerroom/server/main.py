"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request logging), registers exception handlers and includes all API routers.
It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lockerroom import __version__
from lockerroom.core.database import create_all, engine
from lockerroom.core.logging_config import get_logger, setup_logging
from lockerroom.core.monitoring import initialize_logfire

from .api.v1 import (
    analytics,
    announcements,
    auth,
    banners,
    evaluation_forms,
    health,
    notifications,
    posts,
    school_admin,
    school_applications,
    schools,
    search,
    system_settings,
    users,
    xen_watch,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import RequestLoggingMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Creates missing tables on startup (migrations are handled by Alembic)
    and disposes the engine on shutdown.
    """
    try:
        logger.info("Starting up LockerRoom Server...")
        await create_all(engine)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    logger.info("Shutting down LockerRoom Server...")
    await engine.dispose()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    LockerRoom Server API

    Backend for LockerRoom, a social platform for student athletes.
    It serves the feed and social graph, school administration (rosters, enrollment limits, subscriptions),
    the XEN Watch scout review marketplace, evaluation forms, notifications and platform analytics.
    """,
    version=__version__,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)

# Set all CORS enabled origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=settings.cors.allow_methods,
    allow_headers=settings.cors.allow_headers,
)

setup_exception_handlers(app)
initialize_logfire(app)

app.include_router(health.router, tags=["health"])
app.include_router(auth.router, prefix=f"{constant.API_V1_STR}/auth")
app.include_router(users.router, prefix=f"{constant.API_V1_STR}/users")
app.include_router(posts.router, prefix=f"{constant.API_V1_STR}/posts")
app.include_router(notifications.router, prefix=f"{constant.API_V1_STR}/notifications")
app.include_router(schools.router, prefix=f"{constant.API_V1_STR}/schools")
app.include_router(school_admin.router, prefix=f"{constant.API_V1_STR}/school-admin")
app.include_router(school_applications.router, prefix=f"{constant.API_V1_STR}/school-applications")
app.include_router(search.router, prefix=f"{constant.API_V1_STR}/search")
app.include_router(announcements.router, prefix=f"{constant.API_V1_STR}/announcements")
app.include_router(banners.router, prefix=f"{constant.API_V1_STR}/banners")
app.include_router(xen_watch.router, prefix=f"{constant.API_V1_STR}/xen-watch")
app.include_router(evaluation_forms.router, prefix=f"{constant.API_V1_STR}/evaluation-forms")
app.include_router(analytics.router, prefix=f"{constant.API_V1_STR}/analytics")
app.include_router(system_settings.router, prefix=f"{constant.API_V1_STR}/system-settings")
