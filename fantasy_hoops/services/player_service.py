"""
Reference data service: NBA teams, players and per-season player stats.
"""

from decimal import Decimal
from typing import List, Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from fantasy_hoops.database.models import Team, Player, PlayerStats
from fantasy_hoops.services.exceptions import ConstraintViolationError, NotFoundError
from fantasy_hoops.utils.constants import FANTASY_POINT_WEIGHTS
from fantasy_hoops.utils.datetime_utils import utcnow
from fantasy_hoops.utils.serialization import decimal_to_str, isoformat_or_none
import logging

logger = logging.getLogger(__name__)

STAT_FIELDS = (
    "games_played",
    "points_per_game",
    "rebounds_per_game",
    "assists_per_game",
    "field_goal_percentage",
    "three_point_percentage",
    "free_throw_percentage",
    "steals_per_game",
    "blocks_per_game",
    "turnovers_per_game",
    "fantasy_points",
)


def compute_fantasy_points(stats: Dict) -> Decimal:
    """
    Fantasy points per game for a stat line, using FANTASY_POINT_WEIGHTS.

    Missing categories count as zero.
    """
    total = Decimal("0")
    for field, weight in FANTASY_POINT_WEIGHTS.items():
        value = stats.get(field)
        if value is not None:
            total += Decimal(str(value)) * Decimal(str(weight))
    return total.quantize(Decimal("0.01"))


#
# Teams
#

async def list_teams(session: AsyncSession) -> List[Dict]:
    """List all NBA teams ordered by name."""
    result = await session.execute(select(Team).order_by(Team.name, Team.id))
    return [_team_to_dict(team) for team in result.scalars().all()]


async def create_team(
    session: AsyncSession,
    name: str,
    abbreviation: str,
    city: str,
    conference: str,
    division: str,
    logo_url: Optional[str] = None,
) -> Dict:
    """Create an NBA team."""
    team = Team(
        name=name,
        abbreviation=abbreviation.upper(),
        city=city,
        conference=conference,
        division=division,
        logo_url=logo_url,
    )
    session.add(team)
    await session.flush()
    logger.info(f"Created team {team.id} ({team.abbreviation})")
    return _team_to_dict(team)


#
# Players
#

async def list_players(session: AsyncSession) -> List[Dict]:
    """List active players ordered by name."""
    result = await session.execute(
        select(Player).where(Player.is_active.is_(True)).order_by(Player.name, Player.id)
    )
    return [_player_to_dict(player) for player in result.scalars().all()]


async def get_player(session: AsyncSession, player_id: int) -> Optional[Dict]:
    """Get a player by ID (active or not)."""
    player = await session.get(Player, player_id)
    return _player_to_dict(player) if player else None


async def list_players_by_team(session: AsyncSession, team_id: int) -> List[Dict]:
    """List active players on an NBA team, ordered by name."""
    result = await session.execute(
        select(Player)
        .where(Player.team_id == team_id, Player.is_active.is_(True))
        .order_by(Player.name, Player.id)
    )
    return [_player_to_dict(player) for player in result.scalars().all()]


async def create_player(session: AsyncSession, name: str, position: str, team_id: Optional[int] = None, **attributes) -> Dict:
    """
    Create a player.

    Raises:
        ConstraintViolationError: If team_id is set but the team does not exist
    """
    if team_id is not None and await session.get(Team, team_id) is None:
        raise ConstraintViolationError(f"Team {team_id} does not exist")

    player = Player(name=name, position=position, team_id=team_id, **attributes)
    session.add(player)
    await session.flush()
    logger.info(f"Created player {player.id} ({player.name})")
    return _player_to_dict(player)


#
# Player stats
#

async def get_player_stats(session: AsyncSession, player_id: int, season: Optional[str] = None) -> List[Dict]:
    """
    Get a player's stat lines, most recent season first.

    Season labels ("2022-23", "2023-24") sort chronologically as strings.
    """
    query = select(PlayerStats).where(PlayerStats.player_id == player_id)
    if season:
        query = query.where(PlayerStats.season == season)
    query = query.order_by(PlayerStats.season.desc(), PlayerStats.id.desc())
    result = await session.execute(query)
    return [_player_stats_to_dict(stats) for stats in result.scalars().all()]


async def create_player_stats(session: AsyncSession, player_id: int, season: str, **fields) -> Dict:
    """
    Record a stat line for (player, season).

    fantasy_points is computed from the stat line when not supplied.

    Raises:
        ConstraintViolationError: If the player does not exist or the season already has a row
    """
    if await session.get(Player, player_id) is None:
        raise ConstraintViolationError(f"Player {player_id} does not exist")

    existing = await session.execute(
        select(PlayerStats.id).where(
            PlayerStats.player_id == player_id, PlayerStats.season == season
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise ConstraintViolationError(
            f"Stats for player {player_id} in season {season} already exist"
        )

    values = {key: value for key, value in fields.items() if key in STAT_FIELDS and value is not None}
    if "fantasy_points" not in values:
        values["fantasy_points"] = compute_fantasy_points(values)

    stats = PlayerStats(player_id=player_id, season=season, **values)
    session.add(stats)
    await session.flush()
    return _player_stats_to_dict(stats)


async def update_player_stats(session: AsyncSession, player_id: int, season: str, updates: Dict) -> Dict:
    """
    Update only the given fields on the (player, season) stat line.

    Raises:
        NotFoundError: If there is no stat line for the pair; nothing is inserted
        ConstraintViolationError: If updates name a field that is not a stat field
    """
    unknown = set(updates) - set(STAT_FIELDS)
    if unknown:
        raise ConstraintViolationError(f"Cannot update fields: {', '.join(sorted(unknown))}")

    result = await session.execute(
        select(PlayerStats).where(
            PlayerStats.player_id == player_id, PlayerStats.season == season
        )
    )
    stats = result.scalar_one_or_none()
    if stats is None:
        raise NotFoundError(f"No stats for player {player_id} in season {season}")

    for key, value in updates.items():
        setattr(stats, key, value)
    stats.updated_at = utcnow()
    await session.flush()
    return _player_stats_to_dict(stats)


def _team_to_dict(team: Team) -> Dict:
    return {
        "id": team.id,
        "name": team.name,
        "abbreviation": team.abbreviation,
        "city": team.city,
        "conference": team.conference,
        "division": team.division,
        "logo_url": team.logo_url,
        "created_at": isoformat_or_none(team.created_at),
    }


def _player_to_dict(player: Player) -> Dict:
    return {
        "id": player.id,
        "name": player.name,
        "team_id": player.team_id,
        "position": player.position,
        "jersey_number": player.jersey_number,
        "height": player.height,
        "weight": player.weight,
        "age": player.age,
        "profile_image_url": player.profile_image_url,
        "is_active": player.is_active,
        "created_at": isoformat_or_none(player.created_at),
    }


def _player_stats_to_dict(stats: PlayerStats) -> Dict:
    data = {
        "id": stats.id,
        "player_id": stats.player_id,
        "season": stats.season,
        "games_played": stats.games_played,
    }
    for field in STAT_FIELDS[1:]:
        data[field] = decimal_to_str(getattr(stats, field))
    data["created_at"] = isoformat_or_none(stats.created_at)
    data["updated_at"] = isoformat_or_none(stats.updated_at)
    return data
