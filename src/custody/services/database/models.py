"""Pydantic models for database entities."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, model_validator


class Wallet(BaseModel):
    """Custodial wallet record. At most one per user; never updated."""

    id: UUID
    user_id: UUID
    address: str
    created_at: datetime | None = None


class User(BaseModel):
    """Local user record keyed by the identity provider's subject ID."""

    id: UUID
    external_subject_id: str
    email: str
    created_at: datetime | None = None
    wallet: Wallet | None = None

    @model_validator(mode="before")
    @classmethod
    def unwrap_embedded_wallet(cls, data: Any) -> Any:
        """
        Normalize the PostgREST ``wallets`` embed onto ``wallet``.

        PostgREST returns a one-to-one embed as an object, or as a list when
        it cannot detect the unique foreign key.
        """
        if isinstance(data, dict) and "wallets" in data:
            data = dict(data)
            embedded = data.pop("wallets")
            if isinstance(embedded, list):
                embedded = embedded[0] if embedded else None
            data.setdefault("wallet", embedded)
        return data
