"""Linked account variants reported by Privy."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# wallet_client_type Privy assigns to its own embedded wallets
PRIVY_WALLET_CLIENT = "privy"


class WalletAccount(BaseModel):
    """A linked wallet, either embedded (custodial) or externally connected."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: Literal["wallet"] = "wallet"
    address: str
    client_kind: str | None = Field(default=None, alias="wallet_client_type")
    chain_type: str | None = None

    @property
    def is_custodial(self) -> bool:
        return self.client_kind == PRIVY_WALLET_CLIENT


class OtherAccount(BaseModel):
    """Any other linked account (email, phone, social login, ...)."""

    model_config = ConfigDict(extra="ignore")

    type: str


LinkedAccount = WalletAccount | OtherAccount


def parse_linked_account(raw: dict[str, Any]) -> LinkedAccount:
    """
    Parse one raw ``linked_accounts`` entry into its variant.

    Wallet entries without an address are treated as OtherAccount since
    they cannot be reconciled.

    Args:
        raw: Entry from the Privy user payload

    Returns:
        WalletAccount or OtherAccount
    """
    if raw.get("type") == "wallet" and raw.get("address"):
        return WalletAccount.model_validate(raw)
    return OtherAccount(type=str(raw.get("type", "unknown")))


def find_custodial_wallet(accounts: list[LinkedAccount]) -> WalletAccount | None:
    """Return the first Privy embedded wallet in provider order, if any."""
    return next(
        (
            account
            for account in accounts
            if isinstance(account, WalletAccount) and account.is_custodial
        ),
        None,
    )
