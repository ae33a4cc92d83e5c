"""Wallet provisioning: reconcile a caller's custodial wallet with Privy."""

import logging

from src.custody.auth.verifier import TokenVerifier
from src.custody.exceptions import (
    ConflictError,
    InternalError,
    UnauthorizedError,
    WalletNotFoundError,
)
from src.custody.features.wallet_sync.schemas import SyncResult
from src.custody.services.analytics import PostHogService
from src.custody.services.database import User, UserStore
from src.custody.services.privy import PrivyClient, find_custodial_wallet

logger = logging.getLogger(__name__)

WALLET_EXISTS_MESSAGE = "Wallet already exists"
WALLET_SYNCED_MESSAGE = "Wallet synced successfully"


def placeholder_email(subject_id: str, domain: str) -> str:
    """
    Build the deterministic email used when the token carries none.

    Example:
        >>> placeholder_email("did:privy:abc", "privy.local")
        'did:privy:abc@privy.local'
    """
    return f"{subject_id}@{domain}"


class WalletSyncService:
    """
    Ensures a local user exists for the caller and mirrors their Privy
    embedded wallet exactly once.

    Idempotent under retries and concurrent duplicate requests: the store's
    unique constraints pick a single winner for each insert and losers
    re-read the winning row. No in-process locking is involved, so any
    number of workers or processes may serve the endpoint.
    """

    def __init__(
        self,
        verifier: TokenVerifier,
        identity_provider: PrivyClient,
        store: UserStore,
        placeholder_email_domain: str = "privy.local",
        analytics: PostHogService | None = None,
    ):
        self.verifier = verifier
        self.identity_provider = identity_provider
        self.store = store
        self.placeholder_email_domain = placeholder_email_domain
        self.analytics = analytics or PostHogService()

    async def sync_wallet(self, credential: str) -> SyncResult:
        """
        Provision the caller's user and wallet records.

        Args:
            credential: Bearer token without the "Bearer " prefix

        Returns:
            SyncResult; ``synced`` is True only for the call that created the wallet

        Raises:
            UnauthorizedError: Credential rejected, nothing written
            WalletNotFoundError: Privy reports no embedded wallet yet
            InternalError: Any unexpected store or Privy failure
        """
        stage = "verify"
        subject_id: str | None = None
        try:
            identity = await self.verifier.verify(credential)
            subject_id = identity.subject_id

            stage = "resolve_user"
            user = await self.store.find_by_subject(subject_id, include_wallet=True)

            if user is None:
                stage = "create_user"
                email = identity.email or placeholder_email(
                    subject_id, self.placeholder_email_domain
                )
                user = await self._create_user(subject_id, email)

            stage = "resolve_wallet"
            if user.wallet is not None:
                return SyncResult(
                    synced=False, message=WALLET_EXISTS_MESSAGE, address=user.wallet.address
                )

            stage = "fetch_linked_accounts"
            accounts = await self.identity_provider.fetch_linked_accounts(subject_id)
            embedded_wallet = find_custodial_wallet(accounts)

            if embedded_wallet is None:
                logger.info(
                    f"No embedded wallet reported for {subject_id}",
                    extra={"subject_id": subject_id, "linked_accounts": len(accounts)},
                )
                raise WalletNotFoundError()

            stage = "create_wallet"
            return await self._create_wallet(user, embedded_wallet.address)

        except (UnauthorizedError, WalletNotFoundError, InternalError):
            raise
        except Exception as e:
            logger.error(
                f"Wallet sync failed at stage '{stage}' for {subject_id}: {e}",
                exc_info=True,
                extra={"subject_id": subject_id, "stage": stage},
            )
            raise InternalError(stage=stage, subject_id=subject_id) from e

    async def _create_user(self, subject_id: str, email: str) -> User:
        try:
            user = await self.store.create_user(subject_id, email)
        except ConflictError:
            logger.info(
                f"Concurrent user creation for {subject_id}, re-reading winner",
                extra={"subject_id": subject_id},
            )
            user = await self.store.find_by_subject(subject_id, include_wallet=True)
            if user is None:
                raise RuntimeError(f"User for {subject_id} missing after conflict")
            return user

        self.analytics.capture(
            distinct_id=subject_id,
            event="user_created_jit",
            properties={
                "has_email": email != placeholder_email(subject_id, self.placeholder_email_domain)
            },
        )
        return user

    async def _create_wallet(self, user: User, address: str) -> SyncResult:
        subject_id = user.external_subject_id
        try:
            wallet = await self.store.create_wallet(user.id, address)
        except ConflictError:
            logger.info(
                f"Concurrent wallet creation for {subject_id}, re-reading winner",
                extra={"subject_id": subject_id, "user_id": str(user.id)},
            )
            winner = await self.store.find_by_subject(subject_id, include_wallet=True)
            if winner is None or winner.wallet is None:
                raise RuntimeError(f"Wallet for {subject_id} missing after conflict")
            return SyncResult(
                synced=False, message=WALLET_EXISTS_MESSAGE, address=winner.wallet.address
            )

        self.analytics.capture(
            distinct_id=subject_id,
            event="wallet_synced",
            properties={"address": wallet.address},
        )
        logger.info(
            f"Wallet synced for {subject_id}",
            extra={"subject_id": subject_id, "address": wallet.address},
        )
        return SyncResult(synced=True, message=WALLET_SYNCED_MESSAGE, address=wallet.address)
