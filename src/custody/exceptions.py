"""Error taxonomy for wallet provisioning and its HTTP status mapping."""

from typing import Any


class WalletSyncError(Exception):
    """Base exception for all wallet provisioning errors."""

    default_message = "Failed to sync wallet"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> dict[str, Any]:
        """Render the error as a client-safe JSON body."""
        return {"error": self.message}


class UnauthorizedError(WalletSyncError):
    """Raised when the bearer credential is missing or fails verification."""

    default_message = "Unauthorized"


class WalletNotFoundError(WalletSyncError):
    """Raised when the identity provider reports no embedded wallet yet."""

    default_message = "No embedded wallet found. Please try logging out and back in."

    def to_body(self) -> dict[str, Any]:
        return {"synced": False, "error": self.message}


class ConflictError(WalletSyncError):
    """
    Raised by the user store when an insert hits a uniqueness constraint.

    Consumed by the provisioning service, which re-reads the winning row.
    Never meant to reach a caller.
    """

    default_message = "Record already exists"

    def to_body(self) -> dict[str, Any]:
        return {"error": InternalError.default_message}


class InternalError(WalletSyncError):
    """Raised for unexpected store or identity provider failures."""

    def __init__(
        self,
        message: str | None = None,
        stage: str | None = None,
        subject_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.stage = stage
        self.subject_id = subject_id

    def to_body(self) -> dict[str, Any]:
        # Internal details stay in the logs
        return {"error": self.default_message}


# Single source of truth for taxonomy -> HTTP status
ERROR_STATUS_CODES: dict[type[WalletSyncError], int] = {
    UnauthorizedError: 401,
    WalletNotFoundError: 404,
    ConflictError: 500,
    InternalError: 500,
}


def status_code_for(error: WalletSyncError) -> int:
    """
    Resolve the HTTP status code for an error by walking its class hierarchy.

    Args:
        error: Any wallet provisioning error

    Returns:
        Mapped status code, 500 for unmapped subclasses
    """
    for cls in type(error).__mro__:
        if cls in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[cls]
    return 500
