"""Current-user route handlers."""

from fastapi import APIRouter, Depends

from fantasy_hoops.api.auth_dependencies import get_current_user

router = APIRouter()


@router.get("/api/auth/user")
async def get_auth_user(user: dict = Depends(get_current_user)):
    """Return the authenticated user's stored profile."""
    return user
