"""
Authentication and shared dependencies for FastAPI routes.

Callers authenticate with a bearer JWT issued by the identity provider. The
token's claims are persisted through DomainStore.upsert_user on every
authenticated request, which is how users are created on first login.
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from fantasy_hoops.models.schemas import UserUpsert
from fantasy_hoops.services.domain_store import DomainStore
from fantasy_hoops.services.payment_service import StripeClient

load_dotenv()

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

CLAIM_FIELDS = ("email", "first_name", "last_name", "profile_image_url")


def get_store(request: Request) -> DomainStore:
    """The DomainStore the app was started with."""
    return request.app.state.store


def get_stripe_client(request: Request) -> Optional[StripeClient]:
    """The Stripe client, or None when payments are not configured."""
    return request.app.state.stripe_client


def verify_identity_token(token: str) -> Optional[dict]:
    """
    Verify an identity-provider JWT and return its claims.

    Returns None if the token is invalid, expired, or the secret is not configured.
    """
    secret = os.environ.get("IDENTITY_JWT_SECRET")
    if not secret:
        logger.error("IDENTITY_JWT_SECRET not set; rejecting all tokens")
        return None
    algorithm = os.environ.get("IDENTITY_JWT_ALGORITHM", "HS256")
    audience = os.environ.get("IDENTITY_JWT_AUDIENCE") or None
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            audience=audience,
            options={"verify_aud": audience is not None},
        )
    except JWTError as e:
        logger.info(f"Rejected identity token: {e}")
        return None


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    store: DomainStore = Depends(get_store),
) -> dict:
    """
    Dependency to get the current authenticated user from the identity token.

    Raises:
        HTTPException: 401 if the token is missing or invalid
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    claims = verify_identity_token(credentials.credentials)
    if claims is None or not claims.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    profile = {field: claims[field] for field in CLAIM_FIELDS if field in claims}
    return await store.upsert_user(UserUpsert(id=str(claims["sub"]), **profile))


async def require_admin(user: dict = Depends(get_current_user)) -> dict:
    """Require an authenticated user listed in ADMIN_USER_IDS."""
    admin_ids = {uid.strip() for uid in os.getenv("ADMIN_USER_IDS", "").split(",") if uid.strip()}
    if user["id"] not in admin_ids:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user
