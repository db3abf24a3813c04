"""
Constants used across the fantasy basketball system.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# Season label new leagues are created in (e.g. "2023-24")
CURRENT_SEASON = os.getenv("CURRENT_SEASON", "2023-24")

# League defaults
DEFAULT_MAX_TEAMS = 12

# Fantasy scoring weights applied to a per-game stat line
FANTASY_POINT_WEIGHTS = {
    "points_per_game": 1.0,
    "rebounds_per_game": 1.2,
    "assists_per_game": 1.5,
    "steals_per_game": 3.0,
    "blocks_per_game": 3.0,
    "turnovers_per_game": -1.0,
}

# Revenue window for admin stats (trailing days)
REVENUE_WINDOW_DAYS = 30
