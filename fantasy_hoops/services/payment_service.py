"""
Stripe REST API client.

Talks to Stripe over httpx with form-encoded requests. Only the pieces this
app needs are wrapped: customers, subscriptions, payment intents and paid
invoices for the revenue ledger. Every failure surfaces as
PaymentProviderError so callers never confuse it with a storage failure.
"""

import logging
import os
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx
from dotenv import load_dotenv

from fantasy_hoops.services.exceptions import PaymentProviderError

load_dotenv()

logger = logging.getLogger(__name__)

STRIPE_API_BASE = os.getenv("STRIPE_API_BASE", "https://api.stripe.com/v1")

# Default timeout for Stripe requests (in seconds)
STRIPE_REQUEST_TIMEOUT = 20.0

# Page size used when listing invoices
STRIPE_LIST_LIMIT = 100


def get_stripe_secret_key() -> Optional[str]:
    """Read the Stripe secret key from the environment; empty counts as unset."""
    return os.environ.get("STRIPE_SECRET_KEY") or None


def get_stripe_price_id() -> Optional[str]:
    """Price the subscription flow subscribes customers to."""
    return os.environ.get("STRIPE_PRICE_ID") or None


def get_subscription_tier() -> str:
    """Tier granted to users who start a subscription."""
    return os.environ.get("STRIPE_SUBSCRIPTION_TIER") or "pro"


def client_secret_from_subscription(subscription: Dict[str, Any]) -> Optional[str]:
    """
    Pull the payment intent's client secret out of a subscription.

    Only present when latest_invoice.payment_intent was expanded.
    """
    invoice = subscription.get("latest_invoice")
    if not isinstance(invoice, dict):
        return None
    payment_intent = invoice.get("payment_intent")
    if not isinstance(payment_intent, dict):
        return None
    return payment_intent.get("client_secret")


class StripeClient:
    """Minimal async Stripe client."""

    def __init__(
        self,
        secret_key: str,
        api_base: str = STRIPE_API_BASE,
        timeout: float = STRIPE_REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._secret_key = secret_key
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def _request(self, method: str, path: str, data=None, params=None) -> Dict[str, Any]:
        url = f"{self._api_base}{path}"
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                auth=(self._secret_key, ""),
                transport=self._transport,
            ) as client:
                response = await client.request(method, url, data=data, params=params)
                response.raise_for_status()
                return response.json()
        except httpx.TimeoutException:
            logger.error(f"Stripe request timed out: {method} {path}")
            raise PaymentProviderError(
                f"Payment provider timed out after {self._timeout} seconds", status_code=504
            )
        except httpx.HTTPStatusError as e:
            message = _stripe_error_message(e.response)
            logger.error(f"Stripe returned {e.response.status_code} for {method} {path}: {message}")
            status_code = 400 if e.response.status_code in (400, 402) else 502
            raise PaymentProviderError(message, status_code=status_code)
        except httpx.HTTPError as e:
            logger.error(f"Error communicating with Stripe: {e}", exc_info=True)
            raise PaymentProviderError(f"Error communicating with payment provider: {str(e)}")

    async def create_customer(self, email: str, name: Optional[str] = None) -> Dict[str, Any]:
        """Create a Stripe customer."""
        data = {"email": email}
        if name:
            data["name"] = name
        return await self._request("POST", "/customers", data=data)

    async def create_subscription(self, customer_id: str, price_id: str) -> Dict[str, Any]:
        """
        Create an incomplete subscription whose first invoice awaits payment.

        The payment intent is expanded so its client secret can be returned
        to the browser.
        """
        data = {
            "customer": customer_id,
            "items[0][price]": price_id,
            "payment_behavior": "default_incomplete",
            "expand[]": "latest_invoice.payment_intent",
        }
        return await self._request("POST", "/subscriptions", data=data)

    async def retrieve_subscription(self, subscription_id: str) -> Dict[str, Any]:
        """Fetch a subscription with its latest invoice's payment intent expanded."""
        return await self._request(
            "GET",
            f"/subscriptions/{subscription_id}",
            params={"expand[]": "latest_invoice.payment_intent"},
        )

    async def create_payment_intent(self, amount_cents: int, currency: str = "usd") -> Dict[str, Any]:
        """Create a one-time payment intent."""
        return await self._request(
            "POST",
            "/payment_intents",
            data={"amount": str(amount_cents), "currency": currency},
        )

    async def list_paid_invoices(self, since: datetime) -> List[Dict[str, Any]]:
        """All paid invoices created at or after `since`, following pagination."""
        invoices: List[Dict[str, Any]] = []
        params = {
            "status": "paid",
            "created[gte]": str(int(since.timestamp())),
            "limit": str(STRIPE_LIST_LIMIT),
        }
        while True:
            page = await self._request("GET", "/invoices", params=params)
            batch = page.get("data", [])
            invoices.extend(batch)
            if not page.get("has_more") or not batch:
                return invoices
            params["starting_after"] = batch[-1]["id"]


def _stripe_error_message(response: httpx.Response) -> str:
    """Extract Stripe's error message from an error response."""
    try:
        return response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return f"Payment provider error: {response.text}"


def build_stripe_client() -> Optional[StripeClient]:
    """Create a StripeClient from the environment, or None when Stripe is not configured."""
    secret_key = get_stripe_secret_key()
    if not secret_key:
        logger.warning("STRIPE_SECRET_KEY not set; payment endpoints are disabled")
        return None
    return StripeClient(secret_key)
