"""Admin dashboard and development seeding route handlers."""

import logging
import os

from fastapi import APIRouter, Depends, HTTPException, Request

from fantasy_hoops.api.auth_dependencies import get_store, require_admin
from fantasy_hoops.api.routes import limiter
from fantasy_hoops.models.schemas import AdminStatsResponse, MockDataResponse
from fantasy_hoops.services import seed_service
from fantasy_hoops.services.domain_store import DomainStore

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/admin/stats", response_model=AdminStatsResponse)
async def get_admin_stats(
    user: dict = Depends(require_admin),
    store: DomainStore = Depends(get_store),
):
    """User, league and subscription counts plus trailing revenue."""
    return await store.get_admin_stats()


@router.post("/api/init-mock-data", response_model=MockDataResponse)
@limiter.limit("5/minute")
async def init_mock_data(request: Request, store: DomainStore = Depends(get_store)):
    """
    Seed NBA reference data for development.

    Disabled in production. Seeding is skipped when teams already exist.
    """
    if os.getenv("ENV", "").lower() == "production":
        raise HTTPException(status_code=403, detail="Mock data is disabled in production")
    created = await seed_service.seed_mock_data(store)
    return MockDataResponse(message="Mock data initialized successfully", created=created)
