"""
Matchup service layer: weekly head-to-head pairings inside a league.
"""

from typing import List, Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from fantasy_hoops.database.models import Matchup, League, FantasyTeam
from fantasy_hoops.services.exceptions import ConstraintViolationError
from fantasy_hoops.utils.serialization import decimal_to_str, isoformat_or_none
import logging

logger = logging.getLogger(__name__)


async def list_matchups(session: AsyncSession, league_id: int, week: Optional[int] = None) -> List[Dict]:
    """List a league's matchups, optionally for one week, ordered by week."""
    query = select(Matchup).where(Matchup.league_id == league_id)
    if week is not None:
        query = query.where(Matchup.week == week)
    query = query.order_by(Matchup.week.asc(), Matchup.id.asc())
    result = await session.execute(query)
    return [_matchup_to_dict(matchup) for matchup in result.scalars().all()]


async def create_matchup(
    session: AsyncSession,
    league_id: int,
    week: int,
    season: str,
    team1_id: int,
    team2_id: int,
    winner_id: Optional[int] = None,
    **scores,
) -> Dict:
    """
    Schedule a matchup between two teams of the same league.

    Raises:
        ConstraintViolationError: If the league is missing, a team is missing or
            belongs to another league, the teams are the same, or the winner is
            not one of them
    """
    if week < 1:
        raise ConstraintViolationError("Week must be 1 or greater")
    if team1_id == team2_id:
        raise ConstraintViolationError("A team cannot play itself")
    if winner_id is not None and winner_id not in (team1_id, team2_id):
        raise ConstraintViolationError(f"Winner {winner_id} is not part of the matchup")
    if await session.get(League, league_id) is None:
        raise ConstraintViolationError(f"League {league_id} does not exist")

    for team_id in (team1_id, team2_id):
        team = await session.get(FantasyTeam, team_id)
        if team is None:
            raise ConstraintViolationError(f"Fantasy team {team_id} does not exist")
        if team.league_id != league_id:
            raise ConstraintViolationError(
                f"Fantasy team {team_id} does not belong to league {league_id}"
            )

    matchup = Matchup(
        league_id=league_id,
        week=week,
        season=season,
        team1_id=team1_id,
        team2_id=team2_id,
        winner_id=winner_id,
        **scores,
    )
    session.add(matchup)
    await session.flush()
    logger.info(f"Scheduled matchup {matchup.id}: {team1_id} vs {team2_id} (league {league_id}, week {week})")
    return _matchup_to_dict(matchup)


def _matchup_to_dict(matchup: Matchup) -> Dict:
    return {
        "id": matchup.id,
        "league_id": matchup.league_id,
        "week": matchup.week,
        "season": matchup.season,
        "team1_id": matchup.team1_id,
        "team2_id": matchup.team2_id,
        "team1_score": decimal_to_str(matchup.team1_score),
        "team2_score": decimal_to_str(matchup.team2_score),
        "winner_id": matchup.winner_id,
        "is_complete": matchup.is_complete,
        "created_at": isoformat_or_none(matchup.created_at),
    }
