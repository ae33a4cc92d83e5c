"""Persistent store for users and their custodial wallets."""

import logging
from typing import Any
from uuid import UUID

from fastapi.concurrency import run_in_threadpool
from postgrest.exceptions import APIError

from src.custody.exceptions import ConflictError
from src.custody.services.database.models import User, Wallet
from src.custody.services.database.utils import SupabaseQueryBuilder

logger = logging.getLogger(__name__)

USERS_TABLE = "users"
WALLETS_TABLE = "wallets"

# PostgreSQL unique_violation
UNIQUE_VIOLATION = "23505"


class UserStore:
    """
    Supabase-backed store for the users and wallets tables.

    Uniqueness of ``users.external_subject_id`` and ``wallets.user_id`` is
    enforced by the database; a duplicate insert surfaces as ConflictError
    so callers can re-read the winning row.

    The Supabase client is synchronous, so every call is dispatched to the
    threadpool to keep the event loop free.
    """

    def __init__(self, db: SupabaseQueryBuilder):
        self.db = db

    async def find_by_subject(self, subject_id: str, include_wallet: bool = False) -> User | None:
        """
        Look up a user by identity provider subject ID.

        Args:
            subject_id: Privy user DID
            include_wallet: Embed the user's wallet, if any

        Returns:
            User or None if never seen
        """
        columns = f"*, {WALLETS_TABLE}(*)" if include_wallet else "*"
        record = await run_in_threadpool(
            self.db.get_by_field,
            USERS_TABLE,
            "external_subject_id",
            subject_id,
            columns,
        )
        return User.model_validate(record) if record else None

    async def create_user(self, subject_id: str, email: str) -> User:
        """
        Insert a new user.

        Raises:
            ConflictError: If a user with this subject ID already exists
        """
        record = await self._insert(
            USERS_TABLE, {"external_subject_id": subject_id, "email": email}
        )
        logger.info(f"Created user for {subject_id}", extra={"subject_id": subject_id})
        return User.model_validate(record)

    async def create_wallet(self, user_id: UUID, address: str) -> Wallet:
        """
        Insert the user's wallet.

        Raises:
            ConflictError: If the user already has a wallet
        """
        record = await self._insert(WALLETS_TABLE, {"user_id": str(user_id), "address": address})
        logger.info(f"Created wallet for user {user_id}", extra={"user_id": str(user_id)})
        return Wallet.model_validate(record)

    async def _insert(self, table: str, data: dict[str, Any]) -> dict[str, Any]:
        try:
            record = await run_in_threadpool(self.db.insert_record, table, data)
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                logger.info(
                    f"Unique violation inserting into {table}",
                    extra={"table": table, "details": e.details},
                )
                raise ConflictError(f"Duplicate {table} record") from e
            raise

        if not record:
            raise RuntimeError(f"Insert into {table} returned no record")
        return record
