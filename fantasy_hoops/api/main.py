"""
Fantasy Hoops API Server

FastAPI server exposing NBA reference data, fantasy leagues, rosters and
subscriptions on top of the DomainStore.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import os
import uvicorn
from slowapi import _rate_limit_exceeded_handler  # type: ignore
from slowapi.errors import RateLimitExceeded  # type: ignore

from fantasy_hoops.api.routes import router, limiter as routes_limiter
from fantasy_hoops.database import db
from fantasy_hoops.models.schemas import HealthResponse
from fantasy_hoops.services.domain_store import DomainStore
from fantasy_hoops.services.exceptions import (
    ConstraintViolationError,
    NotFoundError,
    PaymentProviderError,
    StorageUnavailableError,
)
from fantasy_hoops.services.payment_service import StripeClient, build_stripe_client
from fantasy_hoops.services.revenue_ledger import RevenueLedger, build_revenue_ledger

# Set up logging
# Allow log level to be configured via environment variable (default: INFO)
log_level = os.getenv("LOG_LEVEL", "INFO").upper()
numeric_level = getattr(logging, log_level, logging.INFO)
logging.basicConfig(
    level=numeric_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def create_app(
    database_url: Optional[str] = None,
    revenue_ledger: Optional[RevenueLedger] = None,
    stripe_client: Optional[StripeClient] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        database_url: Overrides DATABASE_URL (tests point this at SQLite)
        revenue_ledger: Source of monthly revenue; defaults to Stripe when configured
        stripe_client: Stripe client; defaults to one built from STRIPE_SECRET_KEY
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan handler for startup and shutdown events."""
        # Startup
        logger.info("Starting up Fantasy Hoops API...")

        engine = db.create_engine(database_url)

        # Create tables that migrations have not created yet
        try:
            await db.init_database(engine)
            logger.info("Database initialized")
        except Exception as e:
            logger.error(f"Database initialization failed: {e}", exc_info=True)
            # Don't raise - health check reports the database as down

        client = stripe_client if stripe_client is not None else build_stripe_client()
        ledger = revenue_ledger if revenue_ledger is not None else build_revenue_ledger(client)

        app.state.stripe_client = client
        app.state.store = DomainStore(db.create_session_maker(engine), ledger)

        yield  # App is running

        # Shutdown
        logger.info("Shutting down Fantasy Hoops API...")
        await engine.dispose()
        logger.info("Database engine disposed")

    app = FastAPI(
        title="Fantasy Hoops API",
        description="API for fantasy basketball leagues, rosters and NBA player statistics",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Setup rate limiter
    app.state.limiter = routes_limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Domain errors
    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ConstraintViolationError)
    async def constraint_violation_handler(request: Request, exc: ConstraintViolationError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(StorageUnavailableError)
    async def storage_unavailable_handler(request: Request, exc: StorageUnavailableError):
        return JSONResponse(status_code=503, content={"detail": "Storage is temporarily unavailable"})

    @app.exception_handler(PaymentProviderError)
    async def payment_provider_handler(request: Request, exc: PaymentProviderError):
        return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})

    # Add CORS middleware; origins configured via ALLOWED_ORIGINS env var
    allowed_origins = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # Include API routes
    app.include_router(router)

    @app.get("/api/health", response_model=HealthResponse)
    async def health(request: Request):
        """Health check endpoint."""
        database_ok = await request.app.state.store.ping()
        return HealthResponse(status="healthy" if database_ok else "degraded", database=database_ok)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
