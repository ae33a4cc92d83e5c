"""Fixtures for wallet sync tests: in-memory collaborators with real race semantics."""

import asyncio
from unittest.mock import AsyncMock, Mock
from uuid import UUID, uuid4

import pytest

from src.custody.auth.models import IdentityClaim
from src.custody.exceptions import ConflictError, UnauthorizedError
from src.custody.features.wallet_sync.service import WalletSyncService
from src.custody.services.database.models import User, Wallet
from src.custody.services.privy.models import LinkedAccount, OtherAccount, WalletAccount

SUBJECT_ID = "did:privy:clabc123def456"
EMBEDDED_ADDRESS = "0x3f5CE5FBFe3E9af3971dD833D26bA9b5C936f0bE"
VALID_TOKEN = "valid-token"


class InMemoryUserStore:
    """
    UserStore double enforcing the same unique constraints as the database.

    Every call yields to the event loop first so concurrent syncs interleave
    between their read and their insert.
    """

    def __init__(self) -> None:
        self.users: dict[str, User] = {}
        self.wallets: dict[UUID, Wallet] = {}
        self.user_insert_attempts = 0
        self.wallet_insert_attempts = 0

    async def find_by_subject(self, subject_id: str, include_wallet: bool = False) -> User | None:
        await asyncio.sleep(0)
        user = self.users.get(subject_id)
        if user is None:
            return None
        wallet = self.wallets.get(user.id) if include_wallet else None
        return user.model_copy(update={"wallet": wallet})

    async def create_user(self, subject_id: str, email: str) -> User:
        await asyncio.sleep(0)
        self.user_insert_attempts += 1
        if subject_id in self.users:
            raise ConflictError("Duplicate users record")
        user = User(id=uuid4(), external_subject_id=subject_id, email=email)
        self.users[subject_id] = user
        return user

    async def create_wallet(self, user_id: UUID, address: str) -> Wallet:
        await asyncio.sleep(0)
        self.wallet_insert_attempts += 1
        if user_id in self.wallets:
            raise ConflictError("Duplicate wallets record")
        wallet = Wallet(id=uuid4(), user_id=user_id, address=address)
        self.wallets[user_id] = wallet
        return wallet


class FakePrivy:
    """Identity provider double returning a configurable account list."""

    def __init__(self, accounts: list[LinkedAccount] | None = None) -> None:
        self.accounts = accounts if accounts is not None else []
        self.calls = 0

    async def fetch_linked_accounts(self, subject_id: str) -> list[LinkedAccount]:
        await asyncio.sleep(0)
        self.calls += 1
        return list(self.accounts)


def embedded_wallet_accounts(address: str = EMBEDDED_ADDRESS) -> list[LinkedAccount]:
    return [
        OtherAccount(type="email"),
        WalletAccount(address=address, client_kind="privy", chain_type="ethereum"),
    ]


@pytest.fixture
def store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def privy() -> FakePrivy:
    return FakePrivy(embedded_wallet_accounts())


@pytest.fixture
def identity() -> IdentityClaim:
    return IdentityClaim(subject_id=SUBJECT_ID)


@pytest.fixture
def verifier(identity: IdentityClaim) -> Mock:
    """Verifier accepting VALID_TOKEN only."""

    async def verify(credential: str) -> IdentityClaim:
        if credential != VALID_TOKEN:
            raise UnauthorizedError("Invalid token")
        return identity

    mock = Mock()
    mock.verify = AsyncMock(side_effect=verify)
    return mock


@pytest.fixture
def analytics() -> Mock:
    return Mock()


@pytest.fixture
def service(verifier, privy, store, analytics) -> WalletSyncService:
    return WalletSyncService(
        verifier=verifier,
        identity_provider=privy,
        store=store,
        placeholder_email_domain="privy.local",
        analytics=analytics,
    )
