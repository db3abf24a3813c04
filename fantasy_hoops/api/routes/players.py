"""NBA team, player and player stats route handlers."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from fantasy_hoops.api.auth_dependencies import get_store
from fantasy_hoops.services.domain_store import DomainStore

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/teams")
async def list_teams(store: DomainStore = Depends(get_store)):
    """List NBA teams by name."""
    return await store.list_teams()


@router.get("/api/teams/{team_id}/players")
async def list_team_players(team_id: int, store: DomainStore = Depends(get_store)):
    """List active players on an NBA team."""
    return await store.list_players_by_team(team_id)


@router.get("/api/players")
async def list_players(store: DomainStore = Depends(get_store)):
    """List active players by name."""
    return await store.list_players()


@router.get("/api/players/{player_id}")
async def get_player(player_id: int, store: DomainStore = Depends(get_store)):
    """Get a player by id."""
    player = await store.get_player(player_id)
    if not player:
        raise HTTPException(status_code=404, detail="Player not found")
    return player


@router.get("/api/players/{player_id}/stats")
async def get_player_stats(
    player_id: int,
    season: Optional[str] = None,
    store: DomainStore = Depends(get_store),
):
    """Get a player's stat lines, newest season first, optionally for one season."""
    return await store.get_player_stats(player_id, season)
