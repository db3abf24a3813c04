"""
User service layer for account and payment-identifier persistence.

Functions here flush but never commit; the DomainStore owns the transaction.
"""

from typing import Optional, Dict
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from fantasy_hoops.database.models import User, SubscriptionTier
from fantasy_hoops.services.exceptions import ConstraintViolationError, NotFoundError
from fantasy_hoops.utils.datetime_utils import utcnow
from fantasy_hoops.utils.serialization import isoformat_or_none
import logging

logger = logging.getLogger(__name__)

# Claims the identity provider may set; payment fields are written only by set_user_payment_info
IDENTITY_CLAIM_FIELDS = ("email", "first_name", "last_name", "profile_image_url")


def _normalize_email(email: Optional[str]) -> Optional[str]:
    if email is None:
        return None
    email = email.strip().lower()
    return email or None


async def get_user(session: AsyncSession, user_id: str) -> Optional[Dict]:
    """
    Get user by identity-provider id.

    Args:
        session: Database session
        user_id: Identity-provider subject id

    Returns:
        User dictionary or None if not found
    """
    user = await session.get(User, user_id)
    return _user_to_dict(user) if user else None


async def upsert_user(session: AsyncSession, user_id: str, **claims) -> Dict:
    """
    Insert a user or merge new identity claims into an existing one.

    Only claims present in ``claims`` are written, so a login that omits a
    claim keeps the stored value. updated_at is refreshed on every call.

    Args:
        session: Database session
        user_id: Identity-provider subject id
        **claims: Any of email, first_name, last_name, profile_image_url

    Returns:
        The stored user dictionary

    Raises:
        ConstraintViolationError: If the email already belongs to another user
    """
    values = {key: claims[key] for key in IDENTITY_CLAIM_FIELDS if key in claims}
    if "email" in values:
        values["email"] = _normalize_email(values["email"])

    if values.get("email"):
        result = await session.execute(
            select(User.id).where(User.email == values["email"], User.id != user_id)
        )
        if result.scalar_one_or_none() is not None:
            raise ConstraintViolationError(f"Email {values['email']} is already in use by another user")

    user = await session.get(User, user_id)
    if user is None:
        user = User(id=user_id, subscription_tier=SubscriptionTier.FREE.value, **values)
        session.add(user)
        logger.info(f"Created user {user_id}")
    else:
        for key, value in values.items():
            setattr(user, key, value)
    user.updated_at = utcnow()
    await session.flush()
    return _user_to_dict(user)


async def set_user_payment_info(
    session: AsyncSession,
    user_id: str,
    stripe_customer_id: str,
    stripe_subscription_id: str,
    subscription_tier: str = SubscriptionTier.PRO.value,
) -> Dict:
    """
    Record the payment provider's identifiers and the tier they grant.

    All three fields are written together.

    Raises:
        NotFoundError: If the user does not exist
        ConstraintViolationError: If the tier is not a known subscription tier
    """
    valid_tiers = {tier.value for tier in SubscriptionTier}
    if subscription_tier not in valid_tiers:
        raise ConstraintViolationError(f"Unknown subscription tier: {subscription_tier}")

    user = await session.get(User, user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")

    user.stripe_customer_id = stripe_customer_id
    user.stripe_subscription_id = stripe_subscription_id
    user.subscription_tier = subscription_tier
    user.updated_at = utcnow()
    await session.flush()
    logger.info(f"Stored payment info for user {user_id} (tier={subscription_tier})")
    return _user_to_dict(user)


def _user_to_dict(user: User) -> Dict:
    """Convert User model to dictionary."""
    return {
        "id": user.id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "profile_image_url": user.profile_image_url,
        "stripe_customer_id": user.stripe_customer_id,
        "stripe_subscription_id": user.stripe_subscription_id,
        "subscription_tier": user.subscription_tier,
        "created_at": isoformat_or_none(user.created_at),
        "updated_at": isoformat_or_none(user.updated_at),
    }
