"""League route handlers."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from fantasy_hoops.api.auth_dependencies import get_current_user, get_store
from fantasy_hoops.models.schemas import LeagueCreate, LeagueCreateRequest
from fantasy_hoops.services.domain_store import DomainStore
from fantasy_hoops.utils.constants import CURRENT_SEASON

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/leagues")
async def list_leagues(store: DomainStore = Depends(get_store)):
    """List active leagues, newest first (public)."""
    return await store.list_leagues()


@router.get("/api/leagues/user")
async def list_user_leagues(
    user: dict = Depends(get_current_user),
    store: DomainStore = Depends(get_store),
):
    """List active leagues the caller has a team in."""
    return await store.list_leagues_for_user(user["id"])


@router.post("/api/leagues")
async def create_league(
    payload: LeagueCreateRequest,
    user: dict = Depends(get_current_user),
    store: DomainStore = Depends(get_store),
):
    """
    Create a league owned by the caller, in the current season.
    The caller's fantasy team is created with it.
    """
    league = await store.create_league(
        LeagueCreate(owner_id=user["id"], season=CURRENT_SEASON, **payload.model_dump())
    )
    logger.info(f"User {user['id']} created league {league['id']}")
    return league


@router.get("/api/leagues/{league_id}")
async def get_league(league_id: int, store: DomainStore = Depends(get_store)):
    """Get a league by id."""
    league = await store.get_league(league_id)
    if not league:
        raise HTTPException(status_code=404, detail="League not found")
    return league


@router.get("/api/leagues/{league_id}/teams")
async def list_league_teams(league_id: int, store: DomainStore = Depends(get_store)):
    """List a league's fantasy teams by rank."""
    return await store.list_fantasy_teams_for_league(league_id)


@router.get("/api/leagues/{league_id}/matchups")
async def list_league_matchups(
    league_id: int,
    week: Optional[int] = Query(default=None, ge=1),
    store: DomainStore = Depends(get_store),
):
    """List a league's matchups, optionally for a single week."""
    return await store.list_matchups(league_id, week)
