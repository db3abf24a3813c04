"""
Development seed data: a handful of NBA teams, players and 2023-24 stat lines.
"""

import logging
from typing import Dict

from fantasy_hoops.models.schemas import PlayerCreate, PlayerStatsCreate, TeamCreate

logger = logging.getLogger(__name__)

SEED_SEASON = "2023-24"

SEED_TEAMS = [
    {"name": "Lakers", "abbreviation": "LAL", "city": "Los Angeles", "conference": "Western", "division": "Pacific"},
    {"name": "Warriors", "abbreviation": "GSW", "city": "Golden State", "conference": "Western", "division": "Pacific"},
    {"name": "Celtics", "abbreviation": "BOS", "city": "Boston", "conference": "Eastern", "division": "Atlantic"},
    {"name": "Heat", "abbreviation": "MIA", "city": "Miami", "conference": "Eastern", "division": "Southeast"},
]

# (player, team abbreviation, stat line)
SEED_PLAYERS = [
    (
        {"name": "LeBron James", "position": "SF", "jersey_number": 6, "age": 39},
        "LAL",
        {"points_per_game": "25.7", "rebounds_per_game": "7.3", "assists_per_game": "8.3",
         "field_goal_percentage": "54.0", "fantasy_points": "45.2"},
    ),
    (
        {"name": "Stephen Curry", "position": "PG", "jersey_number": 30, "age": 35},
        "GSW",
        {"points_per_game": "26.4", "rebounds_per_game": "4.5", "assists_per_game": "5.2",
         "field_goal_percentage": "45.0", "fantasy_points": "42.8"},
    ),
    (
        {"name": "Jayson Tatum", "position": "SF", "jersey_number": 0, "age": 25},
        "BOS",
        {"points_per_game": "26.9", "rebounds_per_game": "8.1", "assists_per_game": "4.9",
         "field_goal_percentage": "47.1", "fantasy_points": "44.1"},
    ),
    (
        {"name": "Jimmy Butler", "position": "SF", "jersey_number": 22, "age": 34},
        "MIA",
        {"points_per_game": "20.9", "rebounds_per_game": "5.3", "assists_per_game": "5.0",
         "field_goal_percentage": "49.9", "fantasy_points": "38.7"},
    ),
]


async def seed_mock_data(store) -> Dict[str, int]:
    """
    Insert the seed teams, players and stats through the store.

    Does nothing when any team already exists, so it is safe to call on
    every startup of a dev environment.

    Returns:
        Counts of rows created per entity
    """
    if await store.list_teams():
        logger.info("Seed skipped: teams already present")
        return {"teams": 0, "players": 0, "player_stats": 0}

    team_ids = {}
    for team_data in SEED_TEAMS:
        team = await store.create_team(TeamCreate(**team_data))
        team_ids[team["abbreviation"]] = team["id"]

    stats_created = 0
    for player_data, abbreviation, stat_line in SEED_PLAYERS:
        player = await store.create_player(PlayerCreate(team_id=team_ids[abbreviation], **player_data))
        await store.create_player_stats(
            PlayerStatsCreate(player_id=player["id"], season=SEED_SEASON, **stat_line)
        )
        stats_created += 1

    logger.info(f"Seeded {len(team_ids)} teams and {len(SEED_PLAYERS)} players")
    return {"teams": len(team_ids), "players": len(SEED_PLAYERS), "player_stats": stats_created}
