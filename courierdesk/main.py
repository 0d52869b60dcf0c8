"""
Courier Desk - FastAPI Application
Main entry point for the API server.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from courierdesk.config import get_settings
from courierdesk.core.errors import register_error_handlers
from courierdesk.core.logging import configure_logging
from courierdesk.database import get_db
from courierdesk.api import (
    packages_router,
    tracking_numbers_router,
    customers_router,
    pre_alerts_router,
    customer_portal_router,
    tracking_router,
    api_keys_router,
)

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    configure_logging(settings.log_level)
    logger.info("Starting %s v%s (%s)", settings.app_title, settings.app_version, settings.app_env)
    
    # Create tables when running without migrations (SQLite, local dev)
    from courierdesk.database import init_db, async_session_maker
    await init_db()
    
    if settings.bootstrap_admin_key:
        from courierdesk.core.security import ensure_api_key
        from courierdesk.models import Role
        async with async_session_maker() as session:
            await ensure_api_key(session, settings.bootstrap_admin_key, Role.ADMIN, label="bootstrap-admin")
        logger.info("Bootstrap admin key ensured")
    
    yield
    logger.info("Shutting down")


app = FastAPI(
    title=settings.app_title,
    version=settings.app_version,
    description="""
    ## Courier Desk API
    
    Package intake and billing for a freight-forwarding warehouse.
    
    ### Features
    - **Intake**: receive packages against customer codes with unique tracking numbers
    - **Costs**: shipping, storage and balance figures computed on every read
    - **Billing**: intake invoices and payments
    - **Pre-alerts**: customers announce parcels before they arrive
    
    Authenticate with an `X-API-Key` header.
    """,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(packages_router, prefix=settings.api_prefix)
app.include_router(tracking_numbers_router, prefix=settings.api_prefix)
app.include_router(customers_router, prefix=settings.api_prefix)
app.include_router(pre_alerts_router, prefix=settings.api_prefix)
app.include_router(customer_portal_router, prefix=settings.api_prefix)
app.include_router(tracking_router, prefix=settings.api_prefix)
app.include_router(api_keys_router, prefix=settings.api_prefix)


@app.get("/health", tags=["Health"])
async def health_check(db: AsyncSession = Depends(get_db)):
    """Health check endpoint with a database round trip."""
    try:
        await db.execute(text("SELECT 1"))
        database = "connected"
    except Exception:
        logger.exception("Health check could not reach the database")
        database = "unavailable"
    return {
        "status": "healthy" if database == "connected" else "degraded",
        "service": settings.app_title,
        "version": settings.app_version,
        "database": database,
    }
