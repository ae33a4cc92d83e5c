"""Privy identity provider integration."""

from src.custody.services.privy.client import IdentityProviderError, PrivyClient
from src.custody.services.privy.models import (
    LinkedAccount,
    OtherAccount,
    WalletAccount,
    find_custodial_wallet,
    parse_linked_account,
)

__all__ = [
    "IdentityProviderError",
    "PrivyClient",
    "LinkedAccount",
    "OtherAccount",
    "WalletAccount",
    "find_custodial_wallet",
    "parse_linked_account",
]
