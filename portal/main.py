"""Main FastAPI application"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portal import __version__
from portal.api.exception_handlers import register_exception_handlers
from portal.api.routes import (
    access_requests_router,
    admin_router,
    auth_router,
    content_routers,
    settings_router,
    sliders_router,
    upazilas_router,
    users_router,
)
from portal.core.config import settings
from portal.core.database import engine


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Portal API starting (%s)", settings.environment)

    # Note: schema is managed by Alembic (`alembic upgrade head`) or `portal db init`

    yield

    await engine.dispose()


app = FastAPI(
    title="District Portal",
    description="Community directory with a role-gated submission and approval workflow",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(auth_router, prefix=settings.api_prefix)
app.include_router(users_router, prefix=settings.api_prefix)
app.include_router(access_requests_router, prefix=settings.api_prefix)
app.include_router(upazilas_router, prefix=settings.api_prefix)
app.include_router(sliders_router, prefix=settings.api_prefix)
app.include_router(settings_router, prefix=settings.api_prefix)
app.include_router(admin_router, prefix=settings.api_prefix)
for content_router in content_routers:
    app.include_router(content_router, prefix=settings.api_prefix)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "name": "District Portal",
        "version": __version__,
        "status": "operational",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}
