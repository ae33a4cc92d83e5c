"""Pydantic schemas for the wallet sync endpoint."""

from pydantic import BaseModel, Field


class SyncResult(BaseModel):
    """Outcome of a wallet sync call."""

    synced: bool = Field(description="True only for the call that stored the wallet")
    message: str = Field(description="Human-readable outcome")
    address: str | None = Field(None, description="Stored custodial wallet address")

    class Config:
        """Pydantic config."""

        json_schema_extra = {
            "example": {
                "synced": True,
                "message": "Wallet synced successfully",
                "address": "0x3f5CE5FBFe3E9af3971dD833D26bA9b5C936f0bE",
            }
        }


class ErrorResponse(BaseModel):
    """Error body for 401 and 500 responses."""

    error: str


class WalletNotFoundResponse(BaseModel):
    """Error body for 404 responses."""

    synced: bool = False
    error: str
