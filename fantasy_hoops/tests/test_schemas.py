"""Tests for input validation models."""
from decimal import Decimal

import pytest
from pydantic import ValidationError

from fantasy_hoops.models.schemas import (
    LeagueCreate,
    MatchupCreate,
    PaymentIntentRequest,
    PlayerCreate,
    PlayerStatsUpdate,
    RosterEntryCreate,
)


def test_matchup_requires_distinct_teams():
    with pytest.raises(ValidationError):
        MatchupCreate(league_id=1, week=1, season="2023-24", team1_id=3, team2_id=3)


def test_matchup_winner_must_be_a_participant():
    with pytest.raises(ValidationError):
        MatchupCreate(league_id=1, week=1, season="2023-24", team1_id=3, team2_id=4, winner_id=5)

    matchup = MatchupCreate(league_id=1, week=1, season="2023-24", team1_id=3, team2_id=4, winner_id=4)
    assert matchup.winner_id == 4


def test_matchup_week_starts_at_one():
    with pytest.raises(ValidationError):
        MatchupCreate(league_id=1, week=0, season="2023-24", team1_id=3, team2_id=4)


def test_player_position_is_stored_as_plain_value():
    player = PlayerCreate(name="Stephen Curry", position="PG")
    assert player.model_dump()["position"] == "PG"

    with pytest.raises(ValidationError):
        PlayerCreate(name="Stephen Curry", position="QB")


def test_roster_slot_values():
    entry = RosterEntryCreate(fantasy_team_id=5, player_id=42, position="IR")
    assert entry.model_dump()["position"] == "IR"

    with pytest.raises(ValidationError):
        RosterEntryCreate(fantasy_team_id=5, player_id=42, position="captain")


def test_player_stats_update_tracks_set_fields_only():
    update = PlayerStatsUpdate(points_per_game=Decimal("30"))
    assert update.model_dump(exclude_unset=True) == {"points_per_game": Decimal("30")}

    with pytest.raises(ValidationError):
        PlayerStatsUpdate(player_id=7)


def test_league_defaults():
    league = LeagueCreate(name="Friends League", owner_id="u1", season="2023-24")
    assert league.max_teams == 12
    assert league.entry_fee == Decimal("0")
    assert league.is_public is True

    with pytest.raises(ValidationError):
        LeagueCreate(name="Bad", owner_id="u1", season="2023-24", max_teams=0)


def test_league_create_has_no_inactive_option():
    with pytest.raises(ValidationError):
        LeagueCreate(name="Offseason", owner_id="u1", season="2023-24", is_active=False)


def test_payment_amount_must_be_positive():
    with pytest.raises(ValidationError):
        PaymentIntentRequest(amount=0)
    assert PaymentIntentRequest(amount="19.99").amount == Decimal("19.99")
