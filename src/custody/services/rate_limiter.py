"""Rate limiting service for API endpoints."""

import hashlib
import logging

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from src.custody.auth.models import IdentityClaim
from src.custody.auth.verifier import BEARER_PREFIX
from src.custody.config import settings

logger = logging.getLogger(__name__)


def get_subject_or_ip(request: Request) -> str:
    """
    Extract the verified subject ID or fall back to the client IP.

    Endpoints that authenticate through the ``get_identity_claim``
    dependency are limited per subject; the rest per IP address.

    Args:
        request: FastAPI request object

    Returns:
        Rate limit key
    """
    identity: IdentityClaim | None = getattr(request.state, "identity", None)

    if identity and identity.subject_id:
        return f"user:{identity.subject_id}"

    return f"ip:{get_remote_address(request)}"


def get_credential_or_ip(request: Request) -> str:
    """
    Key on the presented bearer credential, falling back to the client IP.

    For endpoints that verify the token inside the handler, so no identity
    is on ``request.state`` when the limit is checked. Callers sharing an
    address (NAT, corporate proxy) each get their own budget. Only a digest
    of the token is kept in limiter storage.

    Args:
        request: FastAPI request object

    Returns:
        Rate limit key
    """
    authorization = request.headers.get("authorization", "")

    if authorization.startswith(BEARER_PREFIX):
        token = authorization[len(BEARER_PREFIX) :].strip()
        if token:
            digest = hashlib.sha256(token.encode()).hexdigest()
            return f"credential:{digest}"

    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_subject_or_ip,
    default_limits=[],
    storage_uri="memory://",
    enabled=settings.rate_limit_enabled,
)


class RateLimitTiers:
    """Rate limit tiers for different endpoint categories."""

    # Reads
    DEFAULT = ["100 per minute", "1000 per hour"]

    # State-changing operations; sync is called on every dashboard load
    WRITE = ["30 per minute", "200 per hour"]


# Endpoints using these need a 'request: Request' parameter (slowapi requirement)
default_rate_limit = limiter.limit(";".join(RateLimitTiers.DEFAULT))
sync_rate_limit = limiter.limit(";".join(RateLimitTiers.WRITE), key_func=get_credential_or_ip)
