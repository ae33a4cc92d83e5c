"""Shared fixtures for authentication tests."""

import time
from typing import Any

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from jose import jwk

APP_ID = "test-privy-app-id"
ISSUER = "privy.io"
KEY_ID = "privy-key-1"


@pytest.fixture
def subject_id() -> str:
    """Provide a consistent Privy DID."""
    return "did:privy:clabc123def456"


@pytest.fixture(scope="session")
def ec_private_pem() -> str:
    """Generate a P-256 private key, as Privy uses for access tokens."""
    private_key = ec.generate_private_key(ec.SECP256R1())
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()


@pytest.fixture(scope="session")
def jwks_document(ec_private_pem: str) -> dict[str, Any]:
    """Public JWKS document for the generated key."""
    public_jwk = jwk.construct(ec_private_pem, algorithm="ES256").public_key().to_dict()
    public_jwk["kid"] = KEY_ID
    public_jwk["use"] = "sig"
    return {"keys": [public_jwk]}


@pytest.fixture
def jwks_http_client(jwks_document: dict[str, Any]) -> httpx.AsyncClient:
    """HTTP client serving the JWKS document."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=jwks_document)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def privy_claims(subject_id: str) -> dict[str, Any]:
    """Claims as found in a Privy access token."""
    now = int(time.time())
    return {
        "sid": "session-1",
        "sub": subject_id,
        "iss": ISSUER,
        "aud": APP_ID,
        "iat": now,
        "exp": now + 3600,
    }
