"""
Aggregate counts for the admin dashboard.
"""

from typing import Dict
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from fantasy_hoops.database.models import User, League, SubscriptionTier


async def get_admin_counts(session: AsyncSession) -> Dict[str, int]:
    """
    Count all users, active leagues and users on a paid tier.

    Revenue is not stored here; the DomainStore reads it from the ledger.
    """
    total_users = await session.scalar(select(func.count(User.id)))
    total_leagues = await session.scalar(
        select(func.count(League.id)).where(League.is_active.is_(True))
    )
    premium_users = await session.scalar(
        select(func.count(User.id)).where(User.subscription_tier != SubscriptionTier.FREE.value)
    )
    return {
        "total_users": total_users or 0,
        "total_leagues": total_leagues or 0,
        "premium_users": premium_users or 0,
    }
