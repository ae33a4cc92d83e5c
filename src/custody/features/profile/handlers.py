"""API handlers for profile endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from src.custody.auth.dependencies import get_identity_claim
from src.custody.auth.models import IdentityClaim
from src.custody.features.profile.models import ProfileResponse
from src.custody.services.database import UserStore
from src.custody.services.rate_limiter import default_rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["profile"])


def get_user_store(request: Request) -> UserStore:
    """Get the user store built during application startup."""
    store = getattr(request.app.state, "user_store", None)
    if store is None:
        raise RuntimeError("User store not initialized. Ensure the application lifespan has run.")
    return store


@router.get("/profile", response_model=ProfileResponse, response_model_exclude_none=True)
@default_rate_limit
async def get_profile(
    request: Request,
    identity: IdentityClaim = Depends(get_identity_claim),
    store: UserStore = Depends(get_user_store),
) -> ProfileResponse:
    """
    Get the caller's local profile.

    Read-only: users are provisioned by ``POST /wallet/sync``, which the
    dashboard calls before reading the profile.

    Raises:
        HTTPException: 404 if the caller has never synced
        HTTPException: 500 if database error occurs
    """
    try:
        user = await store.find_by_subject(identity.subject_id, include_wallet=True)
    except Exception as e:
        logger.error(
            f"Error fetching profile for {identity.subject_id}: {e}",
            exc_info=True,
            extra={"subject_id": identity.subject_id},
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch profile. Please try again.",
        ) from e

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found. Sync your wallet first.",
        )

    return ProfileResponse(
        email=user.email,
        wallet_address=user.wallet.address if user.wallet else None,
    )
