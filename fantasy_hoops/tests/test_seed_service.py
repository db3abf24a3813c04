"""Tests for development seed data."""
import pytest

from fantasy_hoops.services.seed_service import seed_mock_data


@pytest.mark.asyncio
async def test_seed_mock_data_creates_reference_data(store):
    created = await seed_mock_data(store)

    assert created == {"teams": 4, "players": 4, "player_stats": 4}
    assert [team["abbreviation"] for team in await store.list_teams()] == ["BOS", "MIA", "LAL", "GSW"]

    players = {player["name"]: player for player in await store.list_players()}
    assert set(players) == {"LeBron James", "Stephen Curry", "Jayson Tatum", "Jimmy Butler"}

    curry_stats = await store.get_player_stats(players["Stephen Curry"]["id"])
    assert len(curry_stats) == 1
    assert curry_stats[0]["season"] == "2023-24"
    assert curry_stats[0]["points_per_game"] == "26.40"
    assert curry_stats[0]["fantasy_points"] == "42.80"


@pytest.mark.asyncio
async def test_seed_mock_data_is_idempotent(store):
    await seed_mock_data(store)
    second = await seed_mock_data(store)

    assert second == {"teams": 0, "players": 0, "player_stats": 0}
    assert len(await store.list_teams()) == 4
    assert len(await store.list_players()) == 4
