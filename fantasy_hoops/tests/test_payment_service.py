"""
Tests for the Stripe client and revenue ledgers.

Stripe is never contacted: requests go through httpx.MockTransport.
"""
from urllib.parse import parse_qs

import httpx
import pytest

from fantasy_hoops.services.exceptions import PaymentProviderError
from fantasy_hoops.services.payment_service import (
    StripeClient,
    build_stripe_client,
    client_secret_from_subscription,
)
from fantasy_hoops.services.revenue_ledger import (
    StripeRevenueLedger,
    UnconfiguredRevenueLedger,
    build_revenue_ledger,
)


def make_client(handler) -> StripeClient:
    return StripeClient("sk_test_123", api_base="https://stripe.test/v1", transport=httpx.MockTransport(handler))


def test_client_secret_from_subscription():
    subscription = {"id": "sub_1", "latest_invoice": {"payment_intent": {"client_secret": "pi_secret"}}}
    assert client_secret_from_subscription(subscription) == "pi_secret"
    assert client_secret_from_subscription({"id": "sub_1", "latest_invoice": "in_1"}) is None
    assert client_secret_from_subscription({"id": "sub_1", "latest_invoice": None}) is None


@pytest.mark.asyncio
async def test_create_subscription_sends_form_request():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["auth"] = request.headers["authorization"]
        seen["form"] = parse_qs(request.content.decode())
        return httpx.Response(200, json={"id": "sub_1", "latest_invoice": {"payment_intent": {"client_secret": "cs"}}})

    subscription = await make_client(handler).create_subscription("cus_1", "price_1")

    assert subscription["id"] == "sub_1"
    assert seen["method"] == "POST"
    assert seen["path"] == "/v1/subscriptions"
    assert seen["auth"].startswith("Basic ")
    assert seen["form"]["customer"] == ["cus_1"]
    assert seen["form"]["items[0][price]"] == ["price_1"]
    assert seen["form"]["payment_behavior"] == ["default_incomplete"]
    assert seen["form"]["expand[]"] == ["latest_invoice.payment_intent"]


@pytest.mark.asyncio
async def test_create_payment_intent_amount_in_cents():
    def handler(request: httpx.Request) -> httpx.Response:
        form = parse_qs(request.content.decode())
        assert form["amount"] == ["1999"]
        assert form["currency"] == ["usd"]
        return httpx.Response(200, json={"id": "pi_1", "client_secret": "pi_1_secret"})

    intent = await make_client(handler).create_payment_intent(1999)
    assert intent["client_secret"] == "pi_1_secret"


@pytest.mark.asyncio
async def test_card_error_maps_to_400():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(402, json={"error": {"message": "Your card was declined."}})

    with pytest.raises(PaymentProviderError) as exc_info:
        await make_client(handler).create_customer("a@example.com")

    assert exc_info.value.status_code == 400
    assert "declined" in str(exc_info.value)


@pytest.mark.asyncio
async def test_server_error_maps_to_502():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="upstream broke")

    with pytest.raises(PaymentProviderError) as exc_info:
        await make_client(handler).retrieve_subscription("sub_1")

    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_timeout_maps_to_504():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(PaymentProviderError) as exc_info:
        await make_client(handler).retrieve_subscription("sub_1")

    assert exc_info.value.status_code == 504


@pytest.mark.asyncio
async def test_stripe_revenue_ledger_sums_paid_invoices_across_pages():
    pages = {
        None: {"data": [{"id": "in_1", "amount_paid": 1999}, {"id": "in_2", "amount_paid": 999}], "has_more": True},
        "in_2": {"data": [{"id": "in_3", "amount_paid": 500}], "has_more": False},
    }

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/invoices"
        assert request.url.params["status"] == "paid"
        return httpx.Response(200, json=pages[request.url.params.get("starting_after")])

    revenue = await StripeRevenueLedger(make_client(handler)).monthly_revenue()

    assert revenue == pytest.approx(34.98)


@pytest.mark.asyncio
async def test_unconfigured_ledger_reports_zero():
    assert await UnconfiguredRevenueLedger().monthly_revenue() == 0.0


def test_build_stripe_client_requires_secret_key(monkeypatch):
    monkeypatch.delenv("STRIPE_SECRET_KEY", raising=False)
    assert build_stripe_client() is None

    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_abc")
    assert isinstance(build_stripe_client(), StripeClient)


def test_build_revenue_ledger():
    assert isinstance(build_revenue_ledger(None), UnconfiguredRevenueLedger)
    assert isinstance(build_revenue_ledger(make_client(lambda request: httpx.Response(200))), StripeRevenueLedger)
