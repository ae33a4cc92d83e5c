"""Authentication module for Privy access tokens."""

from src.custody.auth.dependencies import get_identity_claim, get_token_verifier
from src.custody.auth.jwks import JWKSCache
from src.custody.auth.jwt_validator import JWTValidator
from src.custody.auth.models import IdentityClaim
from src.custody.auth.verifier import TokenVerifier, extract_bearer_token

__all__ = [
    "get_identity_claim",
    "get_token_verifier",
    "JWKSCache",
    "JWTValidator",
    "IdentityClaim",
    "TokenVerifier",
    "extract_bearer_token",
]
