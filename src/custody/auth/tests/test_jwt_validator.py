"""Tests for JWT validator module."""

import time
from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from jose import JWTError, jwt

from src.custody.auth.jwks import JWKSCache
from src.custody.auth.jwt_validator import JWTValidator

APP_ID = "test-privy-app-id"
KEY_ID = "privy-key-1"


@pytest.fixture
async def validator(jwks_http_client) -> JWTValidator:
    """Validator backed by a JWKS cache serving the test key."""
    cache = JWKSCache("https://auth.privy.io/jwks.json", http_client=jwks_http_client)
    await cache.refresh_keys()
    return JWTValidator(jwks_cache=cache, issuer="privy.io", audience=APP_ID, leeway=0)


def sign(claims: dict, private_pem: str, kid: str | None = KEY_ID) -> str:
    headers = {"kid": kid} if kid else None
    return jwt.encode(claims, private_pem, algorithm="ES256", headers=headers)


@pytest.mark.asyncio
class TestJWTValidator:
    """Tests for JWTValidator class."""

    async def test_initialization(self):
        """Test JWT validator initialization."""
        cache = Mock()
        validator = JWTValidator(jwks_cache=cache, issuer="privy.io", audience=APP_ID, leeway=5)

        assert validator.jwks_cache is cache
        assert validator.issuer == "privy.io"
        assert validator.audience == APP_ID
        assert validator.leeway == 5

    async def test_valid_token_returns_claims(self, validator, ec_private_pem, privy_claims):
        """Test that a correctly signed Privy token verifies."""
        token = sign(privy_claims, ec_private_pem)

        claims = await validator.verify_token(token)

        assert claims["sub"] == privy_claims["sub"]
        assert claims["sid"] == "session-1"

    async def test_expired_token_rejected(self, validator, ec_private_pem, privy_claims):
        """Test that an expired token raises JWTError."""
        now = int(time.time())
        token = sign({**privy_claims, "iat": now - 7200, "exp": now - 3600}, ec_private_pem)

        with pytest.raises(JWTError):
            await validator.verify_token(token)

    async def test_wrong_audience_rejected(self, validator, ec_private_pem, privy_claims):
        """Test that a token for another Privy app is rejected."""
        token = sign({**privy_claims, "aud": "other-app"}, ec_private_pem)

        with pytest.raises(JWTError):
            await validator.verify_token(token)

    async def test_wrong_issuer_rejected(self, validator, ec_private_pem, privy_claims):
        """Test that a token from another issuer is rejected."""
        token = sign({**privy_claims, "iss": "evil.example"}, ec_private_pem)

        with pytest.raises(JWTError):
            await validator.verify_token(token)

    async def test_foreign_signature_rejected(self, validator, privy_claims):
        """Test that a token signed by an unknown key with a known kid is rejected."""
        other_pem = (
            ec.generate_private_key(ec.SECP256R1())
            .private_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PrivateFormat.PKCS8,
                encryption_algorithm=serialization.NoEncryption(),
            )
            .decode()
        )
        token = sign(privy_claims, other_pem)

        with pytest.raises(JWTError):
            await validator.verify_token(token)

    async def test_missing_kid_rejected(self, validator, ec_private_pem, privy_claims):
        """Test that a header without kid raises JWTError."""
        token = sign(privy_claims, ec_private_pem, kid=None)

        with pytest.raises(JWTError, match="missing 'kid'"):
            await validator.verify_token(token)

    async def test_malformed_token_rejected(self, validator):
        """Test that garbage input raises JWTError."""
        with pytest.raises(JWTError):
            await validator.verify_token("not-a-jwt")

    async def test_unknown_kid_wrapped_as_jwt_error(self, privy_claims, ec_private_pem):
        """Test that a kid the JWKS does not publish surfaces as JWTError."""
        cache = Mock()
        cache.get_signing_key = AsyncMock(side_effect=ValueError("Key ID 'x' not found in JWKS"))
        validator = JWTValidator(jwks_cache=cache, issuer="privy.io", audience=APP_ID)

        with pytest.raises(JWTError, match="Unknown signing key 'x'"):
            await validator.verify_token(sign(privy_claims, ec_private_pem, kid="x"))

    async def test_jwks_outage_is_not_a_token_error(self, privy_claims, ec_private_pem):
        """Test that a failing JWKS endpoint propagates the HTTP error unchanged."""
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(503))
        )
        cache = JWKSCache("https://auth.privy.io/jwks.json", http_client=client)
        validator = JWTValidator(jwks_cache=cache, issuer="privy.io", audience=APP_ID)

        with pytest.raises(httpx.HTTPStatusError):
            await validator.verify_token(sign(privy_claims, ec_private_pem))

    async def test_decode_options_enforce_claims(self, privy_claims):
        """Test that signature, expiry, issuer and audience checks are all enabled."""
        cache = Mock()
        cache.get_signing_key = AsyncMock(return_value=Mock())
        validator = JWTValidator(jwks_cache=cache, issuer="privy.io", audience=APP_ID)

        with patch("src.custody.auth.jwt_validator.jwt") as mock_jwt:
            mock_jwt.get_unverified_header.return_value = {"kid": KEY_ID}
            mock_jwt.decode.return_value = privy_claims

            await validator.verify_token("sample.jwt.token")

            options = mock_jwt.decode.call_args.kwargs["options"]
            assert options["verify_signature"] is True
            assert options["verify_exp"] is True
            assert options["verify_iss"] is True
            assert options["verify_aud"] is True
            assert mock_jwt.decode.call_args.kwargs["audience"] == APP_ID
