"""JWKS fetching and caching for Privy access token verification."""

import logging
from datetime import UTC, datetime

import httpx
from jose import jwk
from jose.backends.base import Key

logger = logging.getLogger(__name__)

# Privy signs access tokens with P-256 keys
_ALGORITHM_BY_KEY_TYPE = {"EC": "ES256", "RSA": "RS256"}


class JWKSCache:
    """
    Fetches the Privy app's JWKS and caches the verification keys in memory.

    Keys are refreshed when the TTL expires or when a token references a
    key ID that is not cached yet (key rotation). Unknown-kid refreshes are
    spaced at least ``min_refresh_interval`` seconds apart, so tokens with
    made-up key IDs cannot make every request refetch the JWKS.

    Attributes:
        jwks_url: URL of the app's JWKS document
        cache_ttl: Cache time-to-live in seconds
        min_refresh_interval: Minimum seconds between unknown-kid refreshes
        _keys: Cached keys by key ID
        _last_refresh: Timestamp of the last successful fetch

    Example:
        >>> cache = JWKSCache("https://auth.privy.io/api/v1/apps/<app-id>/jwks.json")
        >>> await cache.refresh_keys()
        >>> key = await cache.get_signing_key("kid-123")
    """

    def __init__(
        self,
        jwks_url: str,
        cache_ttl: int = 3600,
        http_client: httpx.AsyncClient | None = None,
        min_refresh_interval: int = 30,
    ):
        self.jwks_url = jwks_url
        self.cache_ttl = cache_ttl
        self.min_refresh_interval = min_refresh_interval
        self._keys: dict[str, Key] = {}
        self._last_refresh: datetime | None = None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(10.0, read=30.0, connect=10.0, write=10.0)
        )

    async def get_signing_key(self, kid: str) -> Key:
        """
        Get a verification key by key ID, refreshing the cache when needed.

        Args:
            kid: Key ID from the JWT header

        Returns:
            Public key for signature verification

        Raises:
            ValueError: If the key ID is not published by the JWKS
            httpx.HTTPError: If the JWKS fetch fails
        """
        if self._needs_refresh():
            await self.refresh_keys()

        key = self._keys.get(kid)

        if key is None and self._seconds_since_refresh() >= self.min_refresh_interval:
            logger.warning(
                f"Key ID '{kid}' not found in cache, refreshing JWKS",
                extra={"kid": kid, "cached_kids": list(self._keys.keys())},
            )
            await self.refresh_keys()
            key = self._keys.get(kid)

        if key is None:
            raise ValueError(f"Key ID '{kid}' not found in JWKS")

        return key

    async def refresh_keys(self) -> None:
        """
        Fetch the JWKS document and atomically replace the cached keys.

        Raises:
            httpx.HTTPError: If the HTTP request fails
            ValueError: If a key cannot be parsed
        """
        try:
            logger.info(f"Fetching JWKS from {self.jwks_url}")
            response = await self._http_client.get(self.jwks_url)
            response.raise_for_status()

            keys_list = response.json().get("keys", [])
            if not keys_list:
                logger.warning(
                    "JWKS response contains no keys, token verification will fail",
                    extra={"jwks_url": self.jwks_url},
                )

            new_keys: dict[str, Key] = {}
            for key_data in keys_list:
                kid = key_data.get("kid")
                if not kid:
                    logger.warning("JWKS key missing 'kid', skipping")
                    continue

                kty = key_data.get("kty")
                algorithm = _ALGORITHM_BY_KEY_TYPE.get(kty, key_data.get("alg", "ES256"))
                new_keys[kid] = jwk.construct(key_data, algorithm=algorithm)

                logger.debug(
                    f"Loaded key {kid} (type: {kty}, algorithm: {algorithm})",
                    extra={"kid": kid, "kty": kty, "alg": algorithm},
                )

            self._keys = new_keys
            self._last_refresh = datetime.now(UTC)

            logger.info(
                "JWKS cache refreshed successfully",
                extra={"key_count": len(new_keys), "key_ids": list(new_keys.keys())},
            )

        except httpx.HTTPError as e:
            logger.error(
                f"Failed to fetch JWKS from {self.jwks_url}: {e}",
                exc_info=True,
                extra={"error_type": "jwks_fetch_failed"},
            )
            raise

        except Exception as e:
            logger.error(
                f"Failed to parse JWKS: {e}",
                exc_info=True,
                extra={"error_type": "jwks_parse_failed"},
            )
            raise

    def _seconds_since_refresh(self) -> float:
        if self._last_refresh is None:
            return float("inf")
        return (datetime.now(UTC) - self._last_refresh).total_seconds()

    def _needs_refresh(self) -> bool:
        return self._seconds_since_refresh() >= self.cache_ttl

    async def close(self) -> None:
        """Close the HTTP client. Called during application shutdown."""
        await self._http_client.aclose()
        logger.info("JWKS cache closed")
