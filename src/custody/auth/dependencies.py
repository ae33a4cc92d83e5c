"""FastAPI dependencies for bearer token authentication."""

import logging

from fastapi import Header, Request

from src.custody.auth.models import IdentityClaim
from src.custody.auth.verifier import TokenVerifier, extract_bearer_token

logger = logging.getLogger(__name__)


def get_token_verifier(request: Request) -> TokenVerifier:
    """
    Get the token verifier built during application startup.

    Raises:
        RuntimeError: If the application lifespan has not initialized it
    """
    verifier = getattr(request.app.state, "token_verifier", None)
    if verifier is None:
        raise RuntimeError(
            "Token verifier not initialized. Ensure the application lifespan has run."
        )
    return verifier


async def get_identity_claim(
    request: Request,
    authorization: str | None = Header(default=None),
) -> IdentityClaim:
    """
    Authenticate the caller from the Authorization header.

    The verified claim is also stored on ``request.state.identity`` so the
    rate limiter can key on the subject.

    Raises:
        UnauthorizedError: 401 if the header is missing or the token is invalid

    Example:
        @router.get("/me")
        async def me(identity: IdentityClaim = Depends(get_identity_claim)):
            return {"subject_id": identity.subject_id}
    """
    credential = extract_bearer_token(authorization)
    identity = await get_token_verifier(request).verify(credential)
    request.state.identity = identity
    logger.debug(f"Caller authenticated: {identity.subject_id}")
    return identity
