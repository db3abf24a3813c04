"""
DomainStore: the one component allowed to touch persisted state.

Every public method runs in its own session and transaction. The service
modules it delegates to only flush; the store commits when the operation
returns and rolls back on any error, so multi-row writes such as
create_league are all-or-nothing.

Errors are translated at this boundary:
    - referential/uniqueness problems  -> ConstraintViolationError
    - missing targets of writes        -> NotFoundError
    - engine/connection/transaction    -> StorageUnavailableError
Single-entity reads return None when the row does not exist.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from fantasy_hoops.database.models import SubscriptionTier
from fantasy_hoops.models.schemas import (
    FantasyTeamCreate,
    FantasyTeamStatsUpdate,
    LeagueCreate,
    MatchupCreate,
    PlayerCreate,
    PlayerStatsCreate,
    PlayerStatsUpdate,
    RosterEntryCreate,
    TeamCreate,
    UserUpsert,
)
from fantasy_hoops.services import (
    admin_service,
    league_service,
    matchup_service,
    player_service,
    roster_service,
    user_service,
)
from fantasy_hoops.services.exceptions import (
    ConstraintViolationError,
    DomainStoreError,
    StorageUnavailableError,
)
from fantasy_hoops.services.revenue_ledger import RevenueLedger

logger = logging.getLogger(__name__)


class DomainStore:
    """Read/write operations over users, reference data, leagues, rosters and matchups."""

    def __init__(self, session_maker: async_sessionmaker, revenue_ledger: RevenueLedger):
        self._session_maker = session_maker
        self._revenue_ledger = revenue_ledger

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncGenerator[AsyncSession, None]:
        """Open a session, commit on success, roll back and translate errors on failure."""
        try:
            async with self._session_maker() as session:
                try:
                    yield session
                    await session.commit()
                except Exception:
                    await session.rollback()
                    raise
        except DomainStoreError as e:
            logger.warning(f"{operation} rejected: {e}")
            raise
        except IntegrityError as e:
            logger.warning(f"{operation} violated a database constraint: {e.orig}")
            raise ConstraintViolationError(f"{operation} violates a data constraint") from e
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"{operation} failed: storage unavailable", exc_info=True)
            raise StorageUnavailableError(f"{operation} failed: {e.__class__.__name__}") from e

    async def ping(self) -> bool:
        """True when a trivial query round-trips."""
        try:
            async with self._transaction("ping") as session:
                await session.execute(text("SELECT 1"))
            return True
        except StorageUnavailableError:
            return False

    #
    # Users
    #

    async def get_user(self, user_id: str) -> Optional[Dict]:
        async with self._transaction("get_user") as session:
            return await user_service.get_user(session, user_id)

    async def upsert_user(self, payload: UserUpsert) -> Dict:
        """Insert or merge identity claims; claims not set on the payload are left alone."""
        claims = payload.model_dump(exclude_unset=True, exclude={"id"})
        async with self._transaction("upsert_user") as session:
            return await user_service.upsert_user(session, payload.id, **claims)

    async def set_user_payment_info(
        self,
        user_id: str,
        stripe_customer_id: str,
        stripe_subscription_id: str,
        subscription_tier: str = SubscriptionTier.PRO.value,
    ) -> Dict:
        async with self._transaction("set_user_payment_info") as session:
            return await user_service.set_user_payment_info(
                session, user_id, stripe_customer_id, stripe_subscription_id, subscription_tier
            )

    #
    # Teams and players
    #

    async def list_teams(self) -> List[Dict]:
        async with self._transaction("list_teams") as session:
            return await player_service.list_teams(session)

    async def create_team(self, payload: TeamCreate) -> Dict:
        async with self._transaction("create_team") as session:
            return await player_service.create_team(session, **payload.model_dump())

    async def list_players(self) -> List[Dict]:
        async with self._transaction("list_players") as session:
            return await player_service.list_players(session)

    async def get_player(self, player_id: int) -> Optional[Dict]:
        async with self._transaction("get_player") as session:
            return await player_service.get_player(session, player_id)

    async def list_players_by_team(self, team_id: int) -> List[Dict]:
        async with self._transaction("list_players_by_team") as session:
            return await player_service.list_players_by_team(session, team_id)

    async def create_player(self, payload: PlayerCreate) -> Dict:
        async with self._transaction("create_player") as session:
            return await player_service.create_player(session, **payload.model_dump())

    #
    # Player stats
    #

    async def get_player_stats(self, player_id: int, season: Optional[str] = None) -> List[Dict]:
        async with self._transaction("get_player_stats") as session:
            return await player_service.get_player_stats(session, player_id, season)

    async def create_player_stats(self, payload: PlayerStatsCreate) -> Dict:
        async with self._transaction("create_player_stats") as session:
            return await player_service.create_player_stats(session, **payload.model_dump())

    async def update_player_stats(self, player_id: int, season: str, payload: PlayerStatsUpdate) -> Dict:
        """Change only the fields set on the payload; NotFoundError if (player, season) has no row."""
        updates = payload.model_dump(exclude_unset=True)
        async with self._transaction("update_player_stats") as session:
            return await player_service.update_player_stats(session, player_id, season, updates)

    #
    # Leagues
    #

    async def list_leagues(self) -> List[Dict]:
        async with self._transaction("list_leagues") as session:
            return await league_service.list_leagues(session)

    async def list_leagues_for_user(self, user_id: str) -> List[Dict]:
        async with self._transaction("list_leagues_for_user") as session:
            return await league_service.list_leagues_for_user(session, user_id)

    async def get_league(self, league_id: int) -> Optional[Dict]:
        async with self._transaction("get_league") as session:
            return await league_service.get_league(session, league_id)

    async def create_league(self, payload: LeagueCreate, owner_team_name: Optional[str] = None) -> Dict:
        """Create the league and its owner's fantasy team in a single transaction."""
        async with self._transaction("create_league") as session:
            return await league_service.create_league(
                session, owner_team_name=owner_team_name, **payload.model_dump()
            )

    #
    # Fantasy teams
    #

    async def list_fantasy_teams_for_user(self, user_id: str) -> List[Dict]:
        async with self._transaction("list_fantasy_teams_for_user") as session:
            return await league_service.list_fantasy_teams_for_user(session, user_id)

    async def list_fantasy_teams_for_league(self, league_id: int) -> List[Dict]:
        async with self._transaction("list_fantasy_teams_for_league") as session:
            return await league_service.list_fantasy_teams_for_league(session, league_id)

    async def create_fantasy_team(self, payload: FantasyTeamCreate) -> Dict:
        async with self._transaction("create_fantasy_team") as session:
            return await league_service.create_fantasy_team(session, **payload.model_dump())

    async def update_fantasy_team_stats(self, team_id: int, payload: FantasyTeamStatsUpdate) -> Dict:
        updates = payload.model_dump(exclude_unset=True)
        async with self._transaction("update_fantasy_team_stats") as session:
            return await league_service.update_fantasy_team_stats(session, team_id, updates)

    #
    # Rosters
    #

    async def get_active_roster(self, fantasy_team_id: int) -> List[Dict]:
        async with self._transaction("get_active_roster") as session:
            return await roster_service.get_active_roster(session, fantasy_team_id)

    async def add_to_roster(self, payload: RosterEntryCreate) -> Dict:
        async with self._transaction("add_to_roster") as session:
            return await roster_service.add_to_roster(session, **payload.model_dump())

    async def remove_from_roster(self, fantasy_team_id: int, player_id: int) -> None:
        """Soft-delete; a no-op when the player has no active entry on the team."""
        async with self._transaction("remove_from_roster") as session:
            await roster_service.remove_from_roster(session, fantasy_team_id, player_id)

    #
    # Matchups
    #

    async def list_matchups(self, league_id: int, week: Optional[int] = None) -> List[Dict]:
        async with self._transaction("list_matchups") as session:
            return await matchup_service.list_matchups(session, league_id, week)

    async def create_matchup(self, payload: MatchupCreate) -> Dict:
        async with self._transaction("create_matchup") as session:
            return await matchup_service.create_matchup(session, **payload.model_dump())

    #
    # Admin
    #

    async def get_admin_stats(self) -> Dict:
        """
        Counts from the database plus revenue from the ledger.

        The ledger read happens outside the transaction; its failures propagate
        as PaymentProviderError, not as storage errors.
        """
        async with self._transaction("get_admin_stats") as session:
            counts = await admin_service.get_admin_counts(session)
        counts["monthly_revenue"] = await self._revenue_ledger.monthly_revenue()
        return counts
