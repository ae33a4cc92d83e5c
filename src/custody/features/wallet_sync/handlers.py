"""API handlers for wallet sync endpoints."""

import logging

from fastapi import APIRouter, Depends, Header, Request

from src.custody.auth.verifier import extract_bearer_token
from src.custody.features.wallet_sync.schemas import (
    ErrorResponse,
    SyncResult,
    WalletNotFoundResponse,
)
from src.custody.features.wallet_sync.service import WalletSyncService
from src.custody.services.rate_limiter import sync_rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/wallet", tags=["wallet"])


def get_wallet_sync_service(request: Request) -> WalletSyncService:
    """
    Get the wallet sync service built during application startup.

    Raises:
        RuntimeError: If the application lifespan has not initialized it
    """
    service = getattr(request.app.state, "wallet_sync_service", None)
    if service is None:
        raise RuntimeError(
            "Wallet sync service not initialized. Ensure the application lifespan has run."
        )
    return service


@router.post(
    "/sync",
    response_model=SyncResult,
    response_model_exclude_none=True,
    responses={
        401: {"model": ErrorResponse, "description": "Missing or invalid credential"},
        404: {"model": WalletNotFoundResponse, "description": "No embedded wallet yet"},
        500: {"model": ErrorResponse, "description": "Unexpected failure"},
    },
)
@sync_rate_limit
async def sync_wallet(
    request: Request,
    authorization: str | None = Header(default=None),
    service: WalletSyncService = Depends(get_wallet_sync_service),
) -> SyncResult:
    """
    Ensure the caller has a local user and, once Privy reports one, a wallet.

    Safe to call on every dashboard load: after the first successful sync it
    returns the stored address without contacting Privy. Errors are rendered
    by the application's exception handlers.

    Example Response:
        {
            "synced": false,
            "message": "Wallet already exists",
            "address": "0x3f5CE5FBFe3E9af3971dD833D26bA9b5C936f0bE"
        }
    """
    credential = extract_bearer_token(authorization)
    return await service.sync_wallet(credential)
