"""Local JWT verification using JWKS for signature validation."""

import logging
from typing import Any

from jose import JWTError, jwt
from jose.backends.base import Key

from src.custody.auth.jwks import JWKSCache

logger = logging.getLogger(__name__)

# Privy signs with P-256; RS256 kept for keys published as RSA
ALLOWED_ALGORITHMS = ["ES256", "RS256"]


class JWTValidator:
    """
    Verifies Privy access tokens locally against cached JWKS keys.

    Validates signature, expiration, issuer and audience. Privy tokens are
    issued by ``privy.io`` with the app ID as audience and the user's DID
    as subject.

    A token that is malformed, badly signed, expired, or references a key
    the JWKS does not publish raises JWTError. Failing to reach the JWKS
    endpoint is not a verdict on the token: those httpx errors propagate
    unchanged so callers can report an outage instead of a bad credential.

    Example:
        >>> validator = JWTValidator(jwks_cache, issuer="privy.io", audience="<app-id>")
        >>> claims = await validator.verify_token(token)
        >>> claims["sub"]
        'did:privy:clabc123'
    """

    def __init__(
        self,
        jwks_cache: JWKSCache,
        issuer: str,
        audience: str,
        leeway: int = 10,
    ):
        self.jwks_cache = jwks_cache
        self.issuer = issuer
        self.audience = audience
        self.leeway = leeway

    async def verify_token(self, token: str) -> dict[str, Any]:
        """
        Verify a JWT and return its claims.

        Args:
            token: JWT string without the "Bearer " prefix

        Returns:
            Verified claims dictionary (sub, sid, iss, aud, iat, exp, ...)

        Raises:
            JWTError: If the token is malformed, expired, or the signature is invalid
            httpx.HTTPError: If the JWKS endpoint cannot be reached
        """
        key = await self._key_for(token)

        try:
            claims = jwt.decode(
                token,
                key,
                algorithms=ALLOWED_ALGORITHMS,
                audience=self.audience,
                issuer=self.issuer,
                options={
                    "verify_signature": True,
                    "verify_exp": True,
                    "verify_iss": True,
                    "verify_aud": True,
                    "require_exp": True,
                    "require_iat": True,
                    "leeway": self.leeway,
                },
            )
        except JWTError as e:
            logger.info(f"Rejected token: {e}", extra={"error_type": "jwt_claims_invalid"})
            raise

        logger.debug("JWT verified", extra={"subject_id": claims.get("sub")})
        return claims

    async def _key_for(self, token: str) -> Key:
        """Resolve the verification key named by the token's ``kid`` header."""
        kid = jwt.get_unverified_header(token).get("kid")
        if not kid:
            raise JWTError("JWT header missing 'kid' (key ID)")

        try:
            return await self.jwks_cache.get_signing_key(kid)
        except ValueError as e:
            # Unknown kid: the JWKS answered and does not publish this key
            raise JWTError(f"Unknown signing key '{kid}'") from e
