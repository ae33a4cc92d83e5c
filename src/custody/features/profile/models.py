"""Pydantic models for profile feature."""

from pydantic import BaseModel, Field


class ProfileResponse(BaseModel):
    """Response model for the dashboard profile read."""

    email: str = Field(description="User's email, or the placeholder assigned at provisioning")
    wallet_address: str | None = Field(None, description="Custodial wallet address, once synced")

    class Config:
        """Pydantic config."""

        json_schema_extra = {
            "example": {
                "email": "jane@example.com",
                "wallet_address": "0x3f5CE5FBFe3E9af3971dD833D26bA9b5C936f0bE",
            }
        }
