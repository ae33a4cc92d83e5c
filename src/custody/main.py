"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from src.custody.auth import JWKSCache, JWTValidator, TokenVerifier
from src.custody.config import settings
from src.custody.error_handlers import register_exception_handlers
from src.custody.features.profile import router as profile_router
from src.custody.features.wallet_sync import WalletSyncService
from src.custody.features.wallet_sync import router as wallet_sync_router
from src.custody.services.database import UserStore, get_query_builder
from src.custody.services.privy import PrivyClient
from src.custody.services.rate_limiter import limiter

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build collaborators on startup and release their connections on shutdown."""
    jwks_cache = JWKSCache(
        jwks_url=settings.privy_jwks_url,
        cache_ttl=settings.jwks_cache_ttl_seconds,
        min_refresh_interval=settings.jwks_min_refresh_seconds,
    )
    privy_client = PrivyClient(
        app_id=settings.privy_app_id,
        app_secret=settings.privy_app_secret,
        base_url=settings.privy_api_url,
        timeout=settings.privy_request_timeout_seconds,
    )

    try:
        logger.info("Initializing token verifier")
        await jwks_cache.refresh_keys()

        jwt_validator = JWTValidator(
            jwks_cache=jwks_cache,
            issuer=settings.privy_issuer,
            audience=settings.privy_app_id,
            leeway=settings.jwt_leeway_seconds,
        )
        token_verifier = TokenVerifier(jwt_validator)
        user_store = UserStore(get_query_builder())

        app.state.token_verifier = token_verifier
        app.state.user_store = user_store
        app.state.wallet_sync_service = WalletSyncService(
            verifier=token_verifier,
            identity_provider=privy_client,
            store=user_store,
            placeholder_email_domain=settings.placeholder_email_domain,
        )

        logger.info(
            "Wallet sync service initialized",
            extra={"jwks_url": settings.privy_jwks_url, "privy_api_url": settings.privy_api_url},
        )
    except Exception as e:
        logger.error(
            f"Failed to initialize services: {e}",
            exc_info=True,
            extra={"error_type": "startup_failed"},
        )
        await privy_client.close()
        await jwks_cache.close()
        raise

    yield

    for resource in (privy_client, jwks_cache):
        try:
            await resource.close()
        except Exception as e:
            logger.error(f"Error during shutdown of {type(resource).__name__}: {e}", exc_info=True)


app = FastAPI(
    title="Custody API",
    description="Custodial wallet provisioning for Privy-authenticated users",
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan,
)

app.state.limiter = limiter
register_exception_handlers(app)

origins = settings.cors_origins.split(",")
logger.info(f"Origins : {origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(wallet_sync_router, prefix=settings.api_v1_prefix, tags=["wallet"])
app.include_router(profile_router, prefix=settings.api_v1_prefix, tags=["profile"])


class HealthCheckResponse(BaseModel):
    """Health check response."""

    status: str


@app.get("/health", response_model=HealthCheckResponse)
async def health_check() -> HealthCheckResponse:
    """Health check endpoint."""
    return HealthCheckResponse(status="healthy")
