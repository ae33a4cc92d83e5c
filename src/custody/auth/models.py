"""Data models for authentication."""

from pydantic import BaseModel


class IdentityClaim(BaseModel):
    """
    Verified identity extracted from a Privy access token.

    Ephemeral: used to resolve or provision the local user, never stored as is.

    Attributes:
        subject_id: Privy user DID from the 'sub' claim
        email: Email from the 'email' claim, when the token carries one
    """

    subject_id: str
    email: str | None = None
