"""
Reseller Ops API - Main application entry point.

Quoting back office for a telecom reseller: catalog, agents and their
commissions, customer quotes, deal registrations and circuit pricing.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from app.config import get_settings
from app.api import (
    pricing,
    agents,
    categories,
    clients,
    items,
    quotes,
    deals,
    circuit_quotes,
)

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting %s...", settings.app_name)

    from app.services.quote_expiry import process_quote_expiry

    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        process_quote_expiry,
        trigger=CronTrigger(hour=settings.quote_expiry_hour_utc, minute=0),
        id="quote_expiry",
        name="Expire overdue pending quotes",
        replace_existing=True,
    )
    scheduler.start()
    logger.info("Scheduler started - quote expiry (%02d:00 UTC)", settings.quote_expiry_hour_utc)

    yield

    # Shutdown
    scheduler.shutdown(wait=False)
    logger.info("Shutting down %s...", settings.app_name)


app = FastAPI(
    title=settings.app_name,
    description="""
    ## Reseller Ops API

    Back office for a telecom reseller:

    - **Pricing**: markup / commission checks against category minimums
    - **Quotes**: MRC / NRC line items, totals, commission, PDF and email
    - **Agents & Clients**: commission rates and client-level overrides
    - **Circuit Quotes**: side-by-side carrier offers per location

    ### Authentication
    All endpoints require a Supabase JWT (Bearer token).
    """,
    version="1.0.0",
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

# Include routers
app.include_router(pricing.router, prefix="/pricing", tags=["Pricing"])
app.include_router(agents.router, prefix="/agents", tags=["Agents"])
app.include_router(categories.router, prefix="/categories", tags=["Categories"])
app.include_router(clients.router, prefix="/clients", tags=["Clients"])
app.include_router(items.router, prefix="/items", tags=["Items"])
app.include_router(quotes.router, prefix="/quotes", tags=["Quotes"])
app.include_router(deals.router, prefix="/deals", tags=["Deal Registrations"])
app.include_router(circuit_quotes.router, prefix="/circuit-quotes", tags=["Circuit Quotes"])


@app.get("/", tags=["Health"])
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": "1.0.0",
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "email": "configured" if settings.sendgrid_api_key else "simulated",
    }
