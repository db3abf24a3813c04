"""
League service layer: leagues and the fantasy teams inside them.
"""

from typing import List, Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from fantasy_hoops.database.models import League, FantasyTeam, User
from fantasy_hoops.services.exceptions import ConstraintViolationError, NotFoundError
from fantasy_hoops.utils.datetime_utils import utcnow
from fantasy_hoops.utils.serialization import decimal_to_str, isoformat_or_none
import logging

logger = logging.getLogger(__name__)

FANTASY_TEAM_STAT_FIELDS = ("name", "total_points", "weekly_points", "wins", "losses", "rank")


def default_owner_team_name(first_name: Optional[str]) -> str:
    """Name given to the team created alongside a new league."""
    return f"{first_name or 'User'}'s Team"


#
# Leagues
#

async def list_leagues(session: AsyncSession) -> List[Dict]:
    """List active leagues, newest first."""
    result = await session.execute(
        select(League)
        .where(League.is_active.is_(True))
        .order_by(League.created_at.desc(), League.id.desc())
    )
    return [_league_to_dict(league) for league in result.scalars().all()]


async def list_leagues_for_user(session: AsyncSession, user_id: str) -> List[Dict]:
    """
    List active leagues in which the user owns at least one fantasy team.

    Membership is checked with a subquery rather than a join so a league
    appears once even if the user has several teams in it.
    """
    member_league_ids = select(FantasyTeam.league_id).where(FantasyTeam.user_id == user_id)
    result = await session.execute(
        select(League)
        .where(League.is_active.is_(True), League.id.in_(member_league_ids))
        .order_by(League.created_at.desc(), League.id.desc())
    )
    return [_league_to_dict(league) for league in result.scalars().all()]


async def get_league(session: AsyncSession, league_id: int) -> Optional[Dict]:
    """Get a league by ID."""
    league = await session.get(League, league_id)
    return _league_to_dict(league) if league else None


async def create_league(
    session: AsyncSession,
    name: str,
    owner_id: str,
    season: str,
    owner_team_name: Optional[str] = None,
    **attributes,
) -> Dict:
    """
    Create a league together with its owner's fantasy team.

    Both rows are flushed in the caller's transaction; if creating the team
    fails the caller rolls back and the league is never committed.

    Raises:
        ConstraintViolationError: If the owner does not exist
    """
    owner = await session.get(User, owner_id)
    if owner is None:
        raise ConstraintViolationError(f"Owner {owner_id} does not exist")

    league = League(name=name, owner_id=owner_id, season=season, **attributes)
    session.add(league)
    await session.flush()  # Get the league ID

    await create_fantasy_team(
        session,
        name=owner_team_name or default_owner_team_name(owner.first_name),
        league_id=league.id,
        user_id=owner_id,
    )
    logger.info(f"Created league {league.id} ({league.name}) owned by {owner_id}")
    return _league_to_dict(league)


#
# Fantasy teams
#

def league_for_update(league_id: int):
    """SELECT of a league row that locks it until the transaction ends (no-op on SQLite)."""
    return select(League).where(League.id == league_id).with_for_update()


async def list_fantasy_teams_for_user(session: AsyncSession, user_id: str) -> List[Dict]:
    """List the user's fantasy teams, most recently updated first."""
    result = await session.execute(
        select(FantasyTeam)
        .where(FantasyTeam.user_id == user_id)
        .order_by(FantasyTeam.updated_at.desc(), FantasyTeam.id.desc())
    )
    return [_fantasy_team_to_dict(team) for team in result.scalars().all()]


async def list_fantasy_teams_for_league(session: AsyncSession, league_id: int) -> List[Dict]:
    """List a league's fantasy teams by rank ascending."""
    result = await session.execute(
        select(FantasyTeam)
        .where(FantasyTeam.league_id == league_id)
        .order_by(FantasyTeam.rank.asc(), FantasyTeam.id.asc())
    )
    return [_fantasy_team_to_dict(team) for team in result.scalars().all()]


async def create_fantasy_team(session: AsyncSession, name: str, league_id: int, user_id: str) -> Dict:
    """
    Create a fantasy team for a user in a league.

    Raises:
        ConstraintViolationError: If the league or user does not exist, the league
            is inactive or full, or the user already has a team in the league
    """
    # Row lock serialises concurrent joins so the max_teams count below stays accurate
    league = (await session.execute(league_for_update(league_id))).scalar_one_or_none()
    if league is None:
        raise ConstraintViolationError(f"League {league_id} does not exist")
    if not league.is_active:
        raise ConstraintViolationError(f"League {league_id} is not active")
    if await session.get(User, user_id) is None:
        raise ConstraintViolationError(f"User {user_id} does not exist")

    existing = await session.execute(
        select(FantasyTeam.id).where(
            FantasyTeam.league_id == league_id, FantasyTeam.user_id == user_id
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise ConstraintViolationError(f"User {user_id} already has a team in league {league_id}")

    team_count = await session.scalar(
        select(func.count(FantasyTeam.id)).where(FantasyTeam.league_id == league_id)
    )
    if team_count >= league.max_teams:
        raise ConstraintViolationError(f"League {league_id} is full ({league.max_teams} teams)")

    team = FantasyTeam(name=name, league_id=league_id, user_id=user_id)
    session.add(team)
    await session.flush()
    logger.info(f"Created fantasy team {team.id} in league {league_id} for {user_id}")
    return _fantasy_team_to_dict(team)


async def update_fantasy_team_stats(session: AsyncSession, team_id: int, updates: Dict) -> Dict:
    """
    Update standings fields on a fantasy team.

    Raises:
        NotFoundError: If the team does not exist
        ConstraintViolationError: If updates name a field outside the standings fields
    """
    unknown = set(updates) - set(FANTASY_TEAM_STAT_FIELDS)
    if unknown:
        raise ConstraintViolationError(f"Cannot update fields: {', '.join(sorted(unknown))}")

    team = await session.get(FantasyTeam, team_id)
    if team is None:
        raise NotFoundError(f"Fantasy team {team_id} not found")

    for key, value in updates.items():
        setattr(team, key, value)
    team.updated_at = utcnow()
    await session.flush()
    return _fantasy_team_to_dict(team)


def _league_to_dict(league: League) -> Dict:
    return {
        "id": league.id,
        "name": league.name,
        "description": league.description,
        "owner_id": league.owner_id,
        "max_teams": league.max_teams,
        "entry_fee": decimal_to_str(league.entry_fee),
        "prize_pool": decimal_to_str(league.prize_pool),
        "is_public": league.is_public,
        "is_active": league.is_active,
        "draft_date": isoformat_or_none(league.draft_date),
        "season": league.season,
        "created_at": isoformat_or_none(league.created_at),
        "updated_at": isoformat_or_none(league.updated_at),
    }


def _fantasy_team_to_dict(team: FantasyTeam) -> Dict:
    return {
        "id": team.id,
        "name": team.name,
        "league_id": team.league_id,
        "user_id": team.user_id,
        "total_points": decimal_to_str(team.total_points),
        "weekly_points": decimal_to_str(team.weekly_points),
        "wins": team.wins,
        "losses": team.losses,
        "rank": team.rank,
        "created_at": isoformat_or_none(team.created_at),
        "updated_at": isoformat_or_none(team.updated_at),
    }
