"""
Pydantic models for input validation and API request/response bodies.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from fantasy_hoops.database.models import (
    Conference,
    PlayerPosition,
    RosterSlot,
)
from fantasy_hoops.utils.constants import DEFAULT_MAX_TEAMS


class UserUpsert(BaseModel):
    """Identity-provider claims persisted on each login."""

    id: str = Field(min_length=1)
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None


class TeamCreate(BaseModel):
    """Request to create an NBA team."""

    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(min_length=1)
    abbreviation: str = Field(min_length=2, max_length=4)
    city: str = Field(min_length=1)
    conference: Conference
    division: str = Field(min_length=1)
    logo_url: Optional[str] = None


class PlayerCreate(BaseModel):
    """Request to create a player."""

    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(min_length=1)
    team_id: Optional[int] = None
    position: PlayerPosition
    jersey_number: Optional[int] = Field(default=None, ge=0, le=99)
    height: Optional[str] = None
    weight: Optional[int] = Field(default=None, gt=0)
    age: Optional[int] = Field(default=None, gt=0)
    profile_image_url: Optional[str] = None
    is_active: bool = True


class PlayerStatsFields(BaseModel):
    """Stat line fields shared by create and partial update."""

    games_played: Optional[int] = Field(default=None, ge=0)
    points_per_game: Optional[Decimal] = Field(default=None, ge=0, max_digits=5, decimal_places=2)
    rebounds_per_game: Optional[Decimal] = Field(default=None, ge=0, max_digits=5, decimal_places=2)
    assists_per_game: Optional[Decimal] = Field(default=None, ge=0, max_digits=5, decimal_places=2)
    field_goal_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100, max_digits=5, decimal_places=2)
    three_point_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100, max_digits=5, decimal_places=2)
    free_throw_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100, max_digits=5, decimal_places=2)
    steals_per_game: Optional[Decimal] = Field(default=None, ge=0, max_digits=5, decimal_places=2)
    blocks_per_game: Optional[Decimal] = Field(default=None, ge=0, max_digits=5, decimal_places=2)
    turnovers_per_game: Optional[Decimal] = Field(default=None, ge=0, max_digits=5, decimal_places=2)
    fantasy_points: Optional[Decimal] = Field(default=None, max_digits=6, decimal_places=2)


class PlayerStatsCreate(PlayerStatsFields):
    """Request to record a player's stat line for a season."""

    player_id: int
    season: str = Field(min_length=1)


class PlayerStatsUpdate(PlayerStatsFields):
    """Partial stat update. Only fields explicitly set are written."""

    model_config = ConfigDict(extra="forbid")


class LeagueCreate(BaseModel):
    """Validated league input. owner_id is supplied by the caller's identity, not the body."""

    # New leagues are always active; the owner's team is created with them
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    description: Optional[str] = None
    owner_id: str = Field(min_length=1)
    max_teams: int = Field(default=DEFAULT_MAX_TEAMS, ge=1)
    entry_fee: Decimal = Field(default=Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    prize_pool: Decimal = Field(default=Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    is_public: bool = True
    draft_date: Optional[datetime] = None
    season: str = Field(min_length=1)


class LeagueCreateRequest(BaseModel):
    """HTTP body for creating a league."""

    name: str = Field(min_length=1)
    description: Optional[str] = None
    max_teams: int = Field(default=DEFAULT_MAX_TEAMS, ge=1)
    entry_fee: Decimal = Field(default=Decimal("0"), ge=0)
    prize_pool: Decimal = Field(default=Decimal("0"), ge=0)
    is_public: bool = True
    draft_date: Optional[datetime] = None


class FantasyTeamCreate(BaseModel):
    """Validated fantasy team input."""

    name: str = Field(min_length=1)
    league_id: int
    user_id: str = Field(min_length=1)


class FantasyTeamCreateRequest(BaseModel):
    """HTTP body for joining a league with a new fantasy team."""

    name: str = Field(min_length=1)
    league_id: int


class FantasyTeamStatsUpdate(BaseModel):
    """Partial standings update for a fantasy team."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1)
    total_points: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    weekly_points: Optional[Decimal] = Field(default=None, max_digits=8, decimal_places=2)
    wins: Optional[int] = Field(default=None, ge=0)
    losses: Optional[int] = Field(default=None, ge=0)
    rank: Optional[int] = Field(default=None, ge=0)


class RosterEntryCreate(BaseModel):
    """Request to place a player on a fantasy team."""

    model_config = ConfigDict(use_enum_values=True)

    fantasy_team_id: int
    player_id: int
    position: RosterSlot


class MatchupCreate(BaseModel):
    """Request to schedule a matchup."""

    league_id: int
    week: int = Field(ge=1)
    season: str = Field(min_length=1)
    team1_id: int
    team2_id: int
    team1_score: Decimal = Field(default=Decimal("0"), max_digits=8, decimal_places=2)
    team2_score: Decimal = Field(default=Decimal("0"), max_digits=8, decimal_places=2)
    winner_id: Optional[int] = None
    is_complete: bool = False

    @model_validator(mode="after")
    def validate_teams(self):
        """Both sides must be different teams; a winner must be one of them."""
        if self.team1_id == self.team2_id:
            raise ValueError("team1_id and team2_id must be different teams")
        if self.winner_id is not None and self.winner_id not in (self.team1_id, self.team2_id):
            raise ValueError("winner_id must be one of the two matchup teams")
        return self


class AdminStatsResponse(BaseModel):
    """Aggregate counts for the admin dashboard."""

    total_users: int
    total_leagues: int
    premium_users: int
    monthly_revenue: float


class SubscriptionResponse(BaseModel):
    """Subscription id and the client secret needed to confirm payment."""

    subscription_id: str
    client_secret: Optional[str] = None


class PaymentIntentRequest(BaseModel):
    """One-time payment in dollars."""

    amount: Decimal = Field(gt=0)


class PaymentIntentResponse(BaseModel):
    """Client secret for a created payment intent."""

    client_secret: Optional[str] = None


class MessageResponse(BaseModel):
    """Plain status message."""

    message: str


class MockDataResponse(MessageResponse):
    """Result of seeding development data: rows created per entity."""

    created: Dict[str, int]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: bool
