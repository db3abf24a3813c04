"""
Revenue ledger: where the admin dashboard's monthly revenue comes from.

The figure is read from the payment provider rather than derived from
stored rows. The DomainStore receives a ledger at construction time.
"""

import logging
from decimal import Decimal
from typing import Optional, Protocol

from fantasy_hoops.services.payment_service import StripeClient
from fantasy_hoops.utils.constants import REVENUE_WINDOW_DAYS
from fantasy_hoops.utils.datetime_utils import days_ago

logger = logging.getLogger(__name__)


class RevenueLedger(Protocol):
    """Anything that can report revenue for the trailing month, in dollars."""

    async def monthly_revenue(self) -> float:
        ...


class StripeRevenueLedger:
    """Sums invoices Stripe marked paid during the trailing window."""

    def __init__(self, client: StripeClient, window_days: int = REVENUE_WINDOW_DAYS):
        self._client = client
        self._window_days = window_days

    async def monthly_revenue(self) -> float:
        invoices = await self._client.list_paid_invoices(since=days_ago(self._window_days))
        total_cents = sum(invoice.get("amount_paid", 0) for invoice in invoices)
        revenue = Decimal(total_cents) / Decimal(100)
        logger.debug(f"Monthly revenue from {len(invoices)} paid invoices: {revenue}")
        return float(revenue)


class UnconfiguredRevenueLedger:
    """Used when no payment provider is configured: there is no revenue to report."""

    async def monthly_revenue(self) -> float:
        logger.warning("No payment provider configured; reporting zero monthly revenue")
        return 0.0


def build_revenue_ledger(client: Optional[StripeClient]) -> RevenueLedger:
    """Ledger backed by Stripe when a client is available."""
    if client is None:
        return UnconfiguredRevenueLedger()
    return StripeRevenueLedger(client)
