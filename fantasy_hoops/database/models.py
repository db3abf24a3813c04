"""
SQLAlchemy ORM models for the fantasy basketball system.
"""

import enum
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Boolean,
    Numeric,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    CheckConstraint,
    Index,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from fantasy_hoops.database.db import Base
from fantasy_hoops.utils.datetime_utils import utcnow


class SubscriptionTier(str, enum.Enum):
    """Paid-feature level mirrored from the payment provider."""

    FREE = "free"
    PRO = "pro"
    ELITE = "elite"


class PlayerPosition(str, enum.Enum):
    """Basketball positions."""

    PG = "PG"
    SG = "SG"
    SF = "SF"
    PF = "PF"
    C = "C"


class RosterSlot(str, enum.Enum):
    """Role a player occupies on a fantasy team."""

    STARTER = "starter"
    BENCH = "bench"
    INJURED_RESERVE = "IR"


class Conference(str, enum.Enum):
    """NBA conferences."""

    EASTERN = "Eastern"
    WESTERN = "Western"


class User(Base):
    """Accounts keyed by the identity provider's subject id."""

    __tablename__ = "users"

    id = Column(String, primary_key=True)  # Identity-provider subject, not generated here
    email = Column(String, nullable=True, unique=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    profile_image_url = Column(String, nullable=True)
    stripe_customer_id = Column(String, nullable=True)
    stripe_subscription_id = Column(String, nullable=True)
    subscription_tier = Column(
        String, nullable=False, default=SubscriptionTier.FREE.value,
        server_default=SubscriptionTier.FREE.value,
    )
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    # Relationships
    owned_leagues = relationship("League", back_populates="owner")
    fantasy_teams = relationship("FantasyTeam", back_populates="user")

    __table_args__ = (
        CheckConstraint(
            "subscription_tier IN ('free', 'pro', 'elite')", name="ck_users_subscription_tier"
        ),
        Index("idx_users_subscription_tier", "subscription_tier"),
    )


class Team(Base):
    """NBA teams (reference data)."""

    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    abbreviation = Column(String, nullable=False)
    city = Column(String, nullable=False)
    conference = Column(String, nullable=False)  # Eastern, Western
    division = Column(String, nullable=False)
    logo_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    # Relationships
    players = relationship("Player", back_populates="team")

    __table_args__ = (Index("idx_teams_name", "name"),)


class Player(Base):
    """NBA players (reference data)."""

    __tablename__ = "players"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    team_id = Column(Integer, ForeignKey("teams.id"), nullable=True)
    position = Column(String, nullable=False)  # PG, SG, SF, PF, C
    jersey_number = Column(Integer, nullable=True)
    height = Column(String, nullable=True)  # e.g. "6'9\""
    weight = Column(Integer, nullable=True)  # Pounds
    age = Column(Integer, nullable=True)
    profile_image_url = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False, server_default=text("true"))
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    # Relationships
    team = relationship("Team", back_populates="players")
    stats = relationship("PlayerStats", back_populates="player")
    roster_entries = relationship("FantasyRoster", back_populates="player")

    __table_args__ = (
        CheckConstraint("position IN ('PG', 'SG', 'SF', 'PF', 'C')", name="ck_players_position"),
        Index("idx_players_name", "name"),
        Index("idx_players_team", "team_id"),
    )


class PlayerStats(Base):
    """Per-season, per-game statistics for a player. One row per (player, season)."""

    __tablename__ = "player_stats"

    id = Column(Integer, primary_key=True, autoincrement=True)
    player_id = Column(Integer, ForeignKey("players.id"), nullable=False)
    season = Column(String, nullable=False)  # e.g. "2023-24"
    games_played = Column(Integer, default=0, nullable=False)
    points_per_game = Column(Numeric(5, 2), default=0, nullable=False)
    rebounds_per_game = Column(Numeric(5, 2), default=0, nullable=False)
    assists_per_game = Column(Numeric(5, 2), default=0, nullable=False)
    field_goal_percentage = Column(Numeric(5, 2), default=0, nullable=False)
    three_point_percentage = Column(Numeric(5, 2), default=0, nullable=False)
    free_throw_percentage = Column(Numeric(5, 2), default=0, nullable=False)
    steals_per_game = Column(Numeric(5, 2), default=0, nullable=False)
    blocks_per_game = Column(Numeric(5, 2), default=0, nullable=False)
    turnovers_per_game = Column(Numeric(5, 2), default=0, nullable=False)
    fantasy_points = Column(Numeric(6, 2), default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    # Relationships
    player = relationship("Player", back_populates="stats")

    __table_args__ = (
        UniqueConstraint("player_id", "season", name="uq_player_stats_player_season"),
        Index("idx_player_stats_player", "player_id"),
    )


class League(Base):
    """Fantasy leagues."""

    __tablename__ = "leagues"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    owner_id = Column(String, ForeignKey("users.id"), nullable=False)
    max_teams = Column(Integer, default=12, nullable=False)
    entry_fee = Column(Numeric(10, 2), default=0, nullable=False)
    prize_pool = Column(Numeric(10, 2), default=0, nullable=False)
    is_public = Column(Boolean, default=True, nullable=False, server_default=text("true"))
    is_active = Column(Boolean, default=True, nullable=False, server_default=text("true"))
    draft_date = Column(DateTime(timezone=True), nullable=True)
    season = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    # Relationships
    owner = relationship("User", back_populates="owned_leagues")
    fantasy_teams = relationship("FantasyTeam", back_populates="league")
    matchups = relationship("Matchup", back_populates="league")

    __table_args__ = (
        CheckConstraint("max_teams >= 1", name="ck_leagues_max_teams"),
        Index("idx_leagues_owner", "owner_id"),
        Index("idx_leagues_active_created", "is_active", "created_at"),
    )


class FantasyTeam(Base):
    """A user's team within one league."""

    __tablename__ = "fantasy_teams"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    league_id = Column(Integer, ForeignKey("leagues.id"), nullable=False)
    user_id = Column(String, ForeignKey("users.id"), nullable=False)
    total_points = Column(Numeric(10, 2), default=0, nullable=False)
    weekly_points = Column(Numeric(8, 2), default=0, nullable=False)
    wins = Column(Integer, default=0, nullable=False)
    losses = Column(Integer, default=0, nullable=False)
    rank = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    # Relationships
    league = relationship("League", back_populates="fantasy_teams")
    user = relationship("User", back_populates="fantasy_teams")
    roster = relationship("FantasyRoster", back_populates="fantasy_team")

    __table_args__ = (
        UniqueConstraint("league_id", "user_id", name="uq_fantasy_teams_league_user"),
        Index("idx_fantasy_teams_user", "user_id"),
        Index("idx_fantasy_teams_league_rank", "league_id", "rank"),
    )


class FantasyRoster(Base):
    """(fantasy team, player) assignments. Removal clears is_active; rows are kept as history."""

    __tablename__ = "fantasy_rosters"

    id = Column(Integer, primary_key=True, autoincrement=True)
    fantasy_team_id = Column(Integer, ForeignKey("fantasy_teams.id"), nullable=False)
    player_id = Column(Integer, ForeignKey("players.id"), nullable=False)
    position = Column(String, nullable=False)  # starter, bench, IR
    is_active = Column(Boolean, default=True, nullable=False, server_default=text("true"))
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    # Relationships
    fantasy_team = relationship("FantasyTeam", back_populates="roster")
    player = relationship("Player", back_populates="roster_entries")

    __table_args__ = (
        CheckConstraint("position IN ('starter', 'bench', 'IR')", name="ck_fantasy_rosters_position"),
        # At most one active assignment per (team, player); inactive history rows are unrestricted
        Index(
            "uq_fantasy_rosters_active_team_player",
            "fantasy_team_id",
            "player_id",
            unique=True,
            postgresql_where=text("is_active = true"),
            sqlite_where=text("is_active = 1"),
        ),
        Index("idx_fantasy_rosters_team", "fantasy_team_id"),
    )


class Matchup(Base):
    """Weekly head-to-head pairing of two fantasy teams."""

    __tablename__ = "matchups"

    id = Column(Integer, primary_key=True, autoincrement=True)
    league_id = Column(Integer, ForeignKey("leagues.id"), nullable=False)
    week = Column(Integer, nullable=False)
    season = Column(String, nullable=False)
    team1_id = Column(Integer, ForeignKey("fantasy_teams.id"), nullable=False)
    team2_id = Column(Integer, ForeignKey("fantasy_teams.id"), nullable=False)
    team1_score = Column(Numeric(8, 2), default=0, nullable=False)
    team2_score = Column(Numeric(8, 2), default=0, nullable=False)
    winner_id = Column(Integer, ForeignKey("fantasy_teams.id"), nullable=True)
    is_complete = Column(Boolean, default=False, nullable=False, server_default=text("false"))
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    # Relationships
    league = relationship("League", back_populates="matchups")
    team1 = relationship("FantasyTeam", foreign_keys=[team1_id])
    team2 = relationship("FantasyTeam", foreign_keys=[team2_id])
    winner = relationship("FantasyTeam", foreign_keys=[winner_id])

    __table_args__ = (
        CheckConstraint("team1_id <> team2_id", name="ck_matchups_distinct_teams"),
        CheckConstraint("week >= 1", name="ck_matchups_week"),
        Index("idx_matchups_league_week", "league_id", "week"),
    )
