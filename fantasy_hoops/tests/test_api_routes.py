"""
HTTP-level tests for the API routes.

Each test runs the real app against its own SQLite file; identity tokens are
signed with a test secret and Stripe is replaced by an httpx.MockTransport.
"""
from urllib.parse import parse_qs

import httpx
import pytest
from fastapi.testclient import TestClient
from jose import jwt

from fantasy_hoops.api.main import create_app
from fantasy_hoops.services.payment_service import StripeClient

from conftest import StubRevenueLedger

TEST_SECRET = "test-identity-secret"


def make_token(sub: str, **claims) -> str:
    return jwt.encode({"sub": sub, **claims}, TEST_SECRET, algorithm="HS256")


def auth_headers(sub: str = "u1", **claims) -> dict:
    claims.setdefault("email", f"{sub}@example.com")
    claims.setdefault("first_name", "Uma")
    return {"Authorization": f"Bearer {make_token(sub, **claims)}"}


@pytest.fixture(autouse=True)
def identity_env(monkeypatch):
    monkeypatch.setenv("IDENTITY_JWT_SECRET", TEST_SECRET)
    monkeypatch.delenv("IDENTITY_JWT_AUDIENCE", raising=False)
    monkeypatch.delenv("STRIPE_SECRET_KEY", raising=False)
    monkeypatch.setenv("ADMIN_USER_IDS", "admin-1")
    monkeypatch.setenv("ENV", "test")


def build_client(tmp_path, **kwargs) -> TestClient:
    kwargs.setdefault("revenue_ledger", StubRevenueLedger(revenue=99.0))
    app = create_app(database_url=f"sqlite+aiosqlite:///{tmp_path / 'api.db'}", **kwargs)
    return TestClient(app)


@pytest.fixture
def client(tmp_path):
    """TestClient whose lifespan has created the schema and the store."""
    with build_client(tmp_path) as test_client:
        yield test_client


@pytest.fixture
def seeded_client(client):
    response = client.post("/api/init-mock-data")
    assert response.status_code == 200
    return client


# ============================================================================
# Health and auth
# ============================================================================


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": True}


def test_auth_user_requires_token(client):
    assert client.get("/api/auth/user").status_code == 401


def test_auth_user_rejects_bad_signature(client):
    token = jwt.encode({"sub": "u1"}, "wrong-secret", algorithm="HS256")
    response = client.get("/api/auth/user", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_auth_user_upserts_claims(client):
    response = client.get("/api/auth/user", headers=auth_headers("u1", last_name="One"))
    assert response.status_code == 200
    user = response.json()
    assert user["id"] == "u1"
    assert user["email"] == "u1@example.com"
    assert user["last_name"] == "One"
    assert user["subscription_tier"] == "free"

    response = client.get("/api/auth/user", headers=auth_headers("u1", first_name="Renamed"))
    assert response.json()["first_name"] == "Renamed"
    assert response.json()["last_name"] == "One"


# ============================================================================
# Reference data
# ============================================================================


def test_teams_and_players(seeded_client):
    teams = seeded_client.get("/api/teams").json()
    assert [team["name"] for team in teams] == ["Celtics", "Heat", "Lakers", "Warriors"]

    lakers = next(team for team in teams if team["abbreviation"] == "LAL")
    roster = seeded_client.get(f"/api/teams/{lakers['id']}/players").json()
    assert [player["name"] for player in roster] == ["LeBron James"]

    players = seeded_client.get("/api/players").json()
    assert len(players) == 4

    player = seeded_client.get(f"/api/players/{roster[0]['id']}").json()
    assert player["position"] == "SF"

    stats = seeded_client.get(f"/api/players/{roster[0]['id']}/stats?season=2023-24").json()
    assert len(stats) == 1
    assert stats[0]["points_per_game"] == "25.70"


def test_get_player_not_found(client):
    assert client.get("/api/players/99999").status_code == 404


def test_init_mock_data_is_idempotent(seeded_client):
    response = seeded_client.post("/api/init-mock-data")
    assert response.status_code == 200
    assert response.json()["created"] == {"teams": 0, "players": 0, "player_stats": 0}


def test_init_mock_data_disabled_in_production(client, monkeypatch):
    monkeypatch.setenv("ENV", "production")
    assert client.post("/api/init-mock-data").status_code == 403


# ============================================================================
# Leagues and fantasy teams
# ============================================================================


def test_create_league_as_caller(client):
    response = client.post(
        "/api/leagues",
        json={"name": "Friends League", "max_teams": 10, "entry_fee": 0},
        headers=auth_headers("u1"),
    )
    assert response.status_code == 200
    league = response.json()
    assert league["owner_id"] == "u1"
    assert league["max_teams"] == 10
    assert league["season"] == "2023-24"

    teams = client.get(f"/api/leagues/{league['id']}/teams").json()
    assert len(teams) == 1
    assert teams[0]["user_id"] == "u1"
    assert teams[0]["name"] == "Uma's Team"

    assert client.get(f"/api/leagues/{league['id']}").json()["name"] == "Friends League"
    assert [item["id"] for item in client.get("/api/leagues").json()] == [league["id"]]
    mine = client.get("/api/leagues/user", headers=auth_headers("u1")).json()
    assert [item["id"] for item in mine] == [league["id"]]


def test_create_league_requires_auth(client):
    assert client.post("/api/leagues", json={"name": "Nope"}).status_code == 401


def test_create_league_validates_body(client):
    response = client.post("/api/leagues", json={"name": ""}, headers=auth_headers("u1"))
    assert response.status_code == 422


def test_get_league_not_found(client):
    assert client.get("/api/leagues/404").status_code == 404


def test_join_league_and_duplicate_team_conflict(client):
    league = client.post("/api/leagues", json={"name": "Open"}, headers=auth_headers("u1")).json()

    response = client.post(
        "/api/fantasy-teams",
        json={"name": "Vic's Squad", "league_id": league["id"]},
        headers=auth_headers("u2", first_name="Vic"),
    )
    assert response.status_code == 200
    assert response.json()["user_id"] == "u2"

    again = client.post(
        "/api/fantasy-teams",
        json={"name": "Second Squad", "league_id": league["id"]},
        headers=auth_headers("u2", first_name="Vic"),
    )
    assert again.status_code == 409

    teams = client.get("/api/fantasy-teams/user", headers=auth_headers("u2", first_name="Vic")).json()
    assert [team["name"] for team in teams] == ["Vic's Squad"]

    roster = client.get(f"/api/fantasy-teams/{teams[0]['id']}/roster").json()
    assert roster == []


def test_join_unknown_league_conflict(client):
    response = client.post(
        "/api/fantasy-teams", json={"name": "Lost", "league_id": 404}, headers=auth_headers("u1")
    )
    assert response.status_code == 409


def test_league_matchups_empty(client):
    league = client.post("/api/leagues", json={"name": "Open"}, headers=auth_headers("u1")).json()
    response = client.get(f"/api/leagues/{league['id']}/matchups?week=1")
    assert response.status_code == 200
    assert response.json() == []
    assert client.get(f"/api/leagues/{league['id']}/matchups?week=0").status_code == 422


# ============================================================================
# Admin
# ============================================================================


def test_admin_stats_requires_admin(client):
    assert client.get("/api/admin/stats", headers=auth_headers("u1")).status_code == 403


def test_admin_stats(client):
    client.post("/api/leagues", json={"name": "One"}, headers=auth_headers("u1"))

    response = client.get("/api/admin/stats", headers=auth_headers("admin-1", email="admin@example.com"))
    assert response.status_code == 200
    assert response.json() == {
        "total_users": 2,
        "total_leagues": 1,
        "premium_users": 0,
        "monthly_revenue": 99.0,
    }


# ============================================================================
# Payments
# ============================================================================


def test_payments_not_configured(client):
    response = client.post("/api/get-or-create-subscription", headers=auth_headers("u1"))
    assert response.status_code == 500
    assert "Stripe not configured" in response.json()["detail"]

    assert client.post("/api/create-payment-intent", json={"amount": 10}).status_code == 500


class FakeStripe:
    """Records Stripe calls and answers like the Stripe REST API."""

    def __init__(self):
        self.calls = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        form = parse_qs(request.content.decode()) if request.content else {}
        self.calls.append((request.method, request.url.path, form))
        intent = {"client_secret": "pi_secret_1"}
        if request.url.path == "/v1/customers":
            return httpx.Response(200, json={"id": "cus_1"})
        if request.url.path == "/v1/subscriptions":
            return httpx.Response(200, json={"id": "sub_1", "latest_invoice": {"payment_intent": intent}})
        if request.url.path == "/v1/subscriptions/sub_1":
            return httpx.Response(200, json={"id": "sub_1", "latest_invoice": {"payment_intent": intent}})
        if request.url.path == "/v1/payment_intents":
            return httpx.Response(200, json={"id": "pi_2", "client_secret": "pi_secret_2"})
        return httpx.Response(404, json={"error": {"message": "No such resource"}})


@pytest.fixture
def fake_stripe():
    return FakeStripe()


@pytest.fixture
def payment_client(tmp_path, fake_stripe, monkeypatch):
    monkeypatch.setenv("STRIPE_PRICE_ID", "price_pro")
    stripe = StripeClient("sk_test_1", api_base="https://stripe.test/v1", transport=httpx.MockTransport(fake_stripe))
    with build_client(tmp_path, stripe_client=stripe) as test_client:
        yield test_client


def test_get_or_create_subscription_creates_then_reuses(payment_client, fake_stripe):
    headers = auth_headers("u1", last_name="One")

    response = payment_client.post("/api/get-or-create-subscription", headers=headers)
    assert response.status_code == 200
    assert response.json() == {"subscription_id": "sub_1", "client_secret": "pi_secret_1"}

    customer_call = fake_stripe.calls[0]
    assert customer_call[1] == "/v1/customers"
    assert customer_call[2]["name"] == ["Uma One"]
    assert fake_stripe.calls[1][2]["items[0][price]"] == ["price_pro"]

    user = payment_client.get("/api/auth/user", headers=headers).json()
    assert user["stripe_customer_id"] == "cus_1"
    assert user["stripe_subscription_id"] == "sub_1"
    assert user["subscription_tier"] == "pro"

    again = payment_client.post("/api/get-or-create-subscription", headers=headers)
    assert again.json() == {"subscription_id": "sub_1", "client_secret": "pi_secret_1"}
    assert [call[1] for call in fake_stripe.calls] == [
        "/v1/customers",
        "/v1/subscriptions",
        "/v1/subscriptions/sub_1",
    ]


def test_get_or_create_subscription_requires_email(payment_client, fake_stripe):
    token = make_token("no-email")
    response = payment_client.post(
        "/api/get-or-create-subscription", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 400
    assert fake_stripe.calls == []


def test_create_payment_intent(payment_client, fake_stripe):
    response = payment_client.post("/api/create-payment-intent", json={"amount": 19.99})
    assert response.status_code == 200
    assert response.json() == {"client_secret": "pi_secret_2"}
    assert fake_stripe.calls[0][2]["amount"] == ["1999"]


def test_create_payment_intent_rejects_non_positive_amount(payment_client):
    assert payment_client.post("/api/create-payment-intent", json={"amount": 0}).status_code == 422
