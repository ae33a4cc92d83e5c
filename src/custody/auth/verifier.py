"""Bearer credential extraction and identity verification."""

import logging

from jose import JWTError

from src.custody.auth.jwt_validator import JWTValidator
from src.custody.auth.models import IdentityClaim
from src.custody.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: str | None) -> str:
    """
    Strip the required "Bearer " prefix from an Authorization header.

    Args:
        authorization: Raw Authorization header value, if any

    Returns:
        The credential string

    Raises:
        UnauthorizedError: If the header is missing, lacks the prefix, or is blank

    Example:
        >>> extract_bearer_token("Bearer abc.def.ghi")
        'abc.def.ghi'
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise UnauthorizedError("Unauthorized")

    token = authorization[len(BEARER_PREFIX) :].strip()
    if not token:
        raise UnauthorizedError("Unauthorized")

    return token


class TokenVerifier:
    """Turns an opaque bearer credential into a verified IdentityClaim."""

    def __init__(self, jwt_validator: JWTValidator):
        self.jwt_validator = jwt_validator

    async def verify(self, credential: str) -> IdentityClaim:
        """
        Verify a credential and extract the caller's identity.

        Args:
            credential: Access token without the "Bearer " prefix

        Returns:
            IdentityClaim with the subject ID and optional email

        Raises:
            UnauthorizedError: If the token is malformed, expired, badly
                signed, or carries no subject
        """
        try:
            claims = await self.jwt_validator.verify_token(credential)
        except JWTError as e:
            logger.info(f"Rejected credential: {e}", extra={"error_type": "invalid_token"})
            raise UnauthorizedError("Invalid token") from e

        subject_id = claims.get("sub")
        if not subject_id:
            logger.warning(
                "Rejected credential: missing subject",
                extra={"error_type": "missing_sub_claim"},
            )
            raise UnauthorizedError("Invalid token")

        return IdentityClaim(subject_id=subject_id, email=claims.get("email") or None)
