"""
Roster service layer: assigning players to fantasy teams.

Removing a player clears is_active instead of deleting the row, so the
roster history of a team stays queryable.
"""

from typing import List, Dict
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import case, select, update
from fantasy_hoops.database.models import FantasyRoster, FantasyTeam, Player, RosterSlot
from fantasy_hoops.services.exceptions import ConstraintViolationError
from fantasy_hoops.utils.serialization import isoformat_or_none
import logging

logger = logging.getLogger(__name__)

# Display order of roster slots
SLOT_ORDER = case(
    {RosterSlot.STARTER.value: 0, RosterSlot.BENCH.value: 1, RosterSlot.INJURED_RESERVE.value: 2},
    value=FantasyRoster.position,
    else_=3,
)


async def get_active_roster(session: AsyncSession, fantasy_team_id: int) -> List[Dict]:
    """Active roster entries for a team: starters, then bench, then injured reserve."""
    result = await session.execute(
        select(FantasyRoster)
        .where(
            FantasyRoster.fantasy_team_id == fantasy_team_id,
            FantasyRoster.is_active.is_(True),
        )
        .order_by(SLOT_ORDER, FantasyRoster.id)
    )
    return [_roster_entry_to_dict(entry) for entry in result.scalars().all()]


async def add_to_roster(session: AsyncSession, fantasy_team_id: int, player_id: int, position: str) -> Dict:
    """
    Place a player on a fantasy team.

    Raises:
        ConstraintViolationError: If the team or player does not exist, or the
            player is already active on this team
    """
    if await session.get(FantasyTeam, fantasy_team_id) is None:
        raise ConstraintViolationError(f"Fantasy team {fantasy_team_id} does not exist")
    if await session.get(Player, player_id) is None:
        raise ConstraintViolationError(f"Player {player_id} does not exist")

    existing = await session.execute(
        select(FantasyRoster.id).where(
            FantasyRoster.fantasy_team_id == fantasy_team_id,
            FantasyRoster.player_id == player_id,
            FantasyRoster.is_active.is_(True),
        )
    )
    if existing.first() is not None:
        raise ConstraintViolationError(
            f"Player {player_id} is already on the roster of fantasy team {fantasy_team_id}"
        )

    entry = FantasyRoster(
        fantasy_team_id=fantasy_team_id, player_id=player_id, position=position, is_active=True
    )
    session.add(entry)
    await session.flush()
    logger.debug(f"Added player {player_id} to fantasy team {fantasy_team_id} as {position}")
    return _roster_entry_to_dict(entry)


async def remove_from_roster(session: AsyncSession, fantasy_team_id: int, player_id: int) -> int:
    """
    Deactivate the player's active roster row(s) on a team.

    Returns the number of rows deactivated; zero is not an error.
    """
    result = await session.execute(
        update(FantasyRoster)
        .where(
            FantasyRoster.fantasy_team_id == fantasy_team_id,
            FantasyRoster.player_id == player_id,
            FantasyRoster.is_active.is_(True),
        )
        .values(is_active=False)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount:
        logger.debug(f"Removed player {player_id} from fantasy team {fantasy_team_id}")
    return result.rowcount


def _roster_entry_to_dict(entry: FantasyRoster) -> Dict:
    return {
        "id": entry.id,
        "fantasy_team_id": entry.fantasy_team_id,
        "player_id": entry.player_id,
        "position": entry.position,
        "is_active": entry.is_active,
        "created_at": isoformat_or_none(entry.created_at),
    }
