"""Privy server API client for reading a user's linked accounts."""

import logging

import httpx

from src.custody.services.privy.models import LinkedAccount, parse_linked_account

logger = logging.getLogger(__name__)


class IdentityProviderError(Exception):
    """Raised when Privy cannot be reached or returns an unusable response."""

    pass


class PrivyClient:
    """
    Async client for the Privy server API.

    Constructed once at application startup and closed at shutdown; the
    instance is injected into the services that need it.

    Attributes:
        app_id: Privy app ID (sent as basic auth user and ``privy-app-id`` header)
        base_url: Privy API base URL

    Example:
        >>> client = PrivyClient(app_id="app-id", app_secret="secret")
        >>> accounts = await client.fetch_linked_accounts("did:privy:clabc123")
        >>> await client.close()
    """

    def __init__(
        self,
        app_id: str,
        app_secret: str,
        base_url: str = "https://auth.privy.io",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.app_id = app_id
        self.base_url = base_url
        self._http_client = httpx.AsyncClient(
            base_url=base_url,
            auth=(app_id, app_secret),
            headers={"privy-app-id": app_id},
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def fetch_linked_accounts(self, subject_id: str) -> list[LinkedAccount]:
        """
        Fetch the accounts Privy has linked to a user.

        Args:
            subject_id: Privy user DID

        Returns:
            Linked accounts in provider order

        Raises:
            IdentityProviderError: On transport errors, non-2xx responses,
                or a payload without a ``linked_accounts`` list
        """
        try:
            response = await self._http_client.get(f"/api/v1/users/{subject_id}")
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Privy returned {e.response.status_code} for user {subject_id}",
                extra={"subject_id": subject_id, "status_code": e.response.status_code},
            )
            raise IdentityProviderError(
                f"Privy user lookup failed with status {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(
                f"Privy user lookup failed for {subject_id}: {e}",
                extra={"subject_id": subject_id, "error_type": "privy_request_failed"},
            )
            raise IdentityProviderError(f"Privy user lookup failed: {e}") from e

        raw_accounts = payload.get("linked_accounts") if isinstance(payload, dict) else None
        if not isinstance(raw_accounts, list):
            raise IdentityProviderError("Privy user payload missing 'linked_accounts'")

        accounts = [parse_linked_account(raw) for raw in raw_accounts if isinstance(raw, dict)]
        logger.debug(
            f"Fetched {len(accounts)} linked accounts for {subject_id}",
            extra={"subject_id": subject_id, "account_types": [a.type for a in accounts]},
        )
        return accounts

    async def close(self) -> None:
        """Close the HTTP client. Called during application shutdown."""
        await self._http_client.aclose()
        logger.info("Privy client closed")
