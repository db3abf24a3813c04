"""001_initial_schema

Revision ID: 001
Revises: 
Create Date: 2026-10-19 09:00:00.000000

Initial schema for the fantasy basketball app:
- Identity: users
- NBA reference data: teams, players, player_stats
- Fantasy: leagues, fantasy_teams, fantasy_rosters, matchups
- Partial unique index keeping one active roster row per (team, player)
"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables from scratch."""
    # Import models to register them with Base.metadata
    from fantasy_hoops.database.db import Base
    from fantasy_hoops.database import models  # noqa: F401

    bind = op.get_bind()
    Base.metadata.create_all(bind=bind, checkfirst=True)


def downgrade() -> None:
    """Drop all tables."""
    from fantasy_hoops.database.db import Base
    from fantasy_hoops.database import models  # noqa: F401

    bind = op.get_bind()
    Base.metadata.drop_all(bind=bind, checkfirst=True)
