"""Custodial wallet provisioning."""

from src.custody.features.wallet_sync.handlers import router
from src.custody.features.wallet_sync.schemas import SyncResult
from src.custody.features.wallet_sync.service import WalletSyncService

__all__ = [
    "router",
    "SyncResult",
    "WalletSyncService",
]
