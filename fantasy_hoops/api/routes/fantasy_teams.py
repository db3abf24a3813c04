"""Fantasy team and roster route handlers."""

import logging

from fastapi import APIRouter, Depends

from fantasy_hoops.api.auth_dependencies import get_current_user, get_store
from fantasy_hoops.models.schemas import FantasyTeamCreate, FantasyTeamCreateRequest
from fantasy_hoops.services.domain_store import DomainStore

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/fantasy-teams/user")
async def list_user_fantasy_teams(
    user: dict = Depends(get_current_user),
    store: DomainStore = Depends(get_store),
):
    """List the caller's fantasy teams, most recently updated first."""
    return await store.list_fantasy_teams_for_user(user["id"])


@router.post("/api/fantasy-teams")
async def create_fantasy_team(
    payload: FantasyTeamCreateRequest,
    user: dict = Depends(get_current_user),
    store: DomainStore = Depends(get_store),
):
    """Join a league with a new fantasy team owned by the caller."""
    return await store.create_fantasy_team(
        FantasyTeamCreate(user_id=user["id"], **payload.model_dump())
    )


@router.get("/api/fantasy-teams/{team_id}/roster")
async def get_fantasy_team_roster(team_id: int, store: DomainStore = Depends(get_store)):
    """Active roster of a fantasy team."""
    return await store.get_active_roster(team_id)
