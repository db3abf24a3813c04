"""Stripe subscription and one-time payment route handlers."""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from fantasy_hoops.api.auth_dependencies import get_current_user, get_store, get_stripe_client
from fantasy_hoops.api.routes import limiter
from fantasy_hoops.models.schemas import (
    PaymentIntentRequest,
    PaymentIntentResponse,
    SubscriptionResponse,
)
from fantasy_hoops.services.domain_store import DomainStore
from fantasy_hoops.services.payment_service import (
    StripeClient,
    client_secret_from_subscription,
    get_stripe_price_id,
    get_subscription_tier,
)

logger = logging.getLogger(__name__)
router = APIRouter()

STRIPE_NOT_CONFIGURED_RESPONSE = HTTPException(
    status_code=500,
    detail="Stripe not configured. Please add STRIPE_SECRET_KEY environment variable.",
)


def require_stripe(client: Optional[StripeClient] = Depends(get_stripe_client)) -> StripeClient:
    """Stripe client, or 500 when payments are not configured."""
    if client is None:
        raise STRIPE_NOT_CONFIGURED_RESPONSE
    return client


@router.post("/api/get-or-create-subscription", response_model=SubscriptionResponse)
async def get_or_create_subscription(
    user: dict = Depends(get_current_user),
    store: DomainStore = Depends(get_store),
    stripe: StripeClient = Depends(require_stripe),
):
    """
    Return the caller's subscription, creating customer and subscription on first call.

    The response carries the client secret of the latest invoice's payment
    intent so the browser can confirm payment.
    """
    if user.get("stripe_subscription_id"):
        subscription = await stripe.retrieve_subscription(user["stripe_subscription_id"])
        return SubscriptionResponse(
            subscription_id=subscription["id"],
            client_secret=client_secret_from_subscription(subscription),
        )

    if not user.get("email"):
        raise HTTPException(status_code=400, detail="No user email on file")

    price_id = get_stripe_price_id()
    if not price_id:
        raise HTTPException(status_code=500, detail="STRIPE_PRICE_ID is not configured")

    name = f"{user.get('first_name') or ''} {user.get('last_name') or ''}".strip()
    customer = await stripe.create_customer(user["email"], name=name or None)
    subscription = await stripe.create_subscription(customer["id"], price_id)

    await store.set_user_payment_info(
        user["id"],
        stripe_customer_id=customer["id"],
        stripe_subscription_id=subscription["id"],
        subscription_tier=get_subscription_tier(),
    )
    logger.info(f"Created subscription {subscription['id']} for user {user['id']}")

    return SubscriptionResponse(
        subscription_id=subscription["id"],
        client_secret=client_secret_from_subscription(subscription),
    )


@router.post("/api/create-payment-intent", response_model=PaymentIntentResponse)
@limiter.limit("10/minute")
async def create_payment_intent(
    request: Request,
    payload: PaymentIntentRequest,
    stripe: StripeClient = Depends(require_stripe),
):
    """Create a one-time USD payment intent for an amount given in dollars."""
    amount_cents = int((payload.amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    intent = await stripe.create_payment_intent(amount_cents, currency="usd")
    return PaymentIntentResponse(client_secret=intent.get("client_secret"))
