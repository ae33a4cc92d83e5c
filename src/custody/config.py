"""Application configuration using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # System Configuration
    api_v1_prefix: str = "/api/v1"
    debug: bool = False
    cors_origins: str = "http://localhost:3000"
    rate_limit_enabled: bool = True

    # Privy Configuration
    privy_app_id: str = "test-privy-app-id"
    privy_app_secret: str = "test-privy-app-secret"
    privy_api_url: str = "https://auth.privy.io"
    privy_issuer: str = "privy.io"
    privy_request_timeout_seconds: float = 10.0

    # JWT Verification Configuration
    jwks_cache_ttl_seconds: int = 3600  # 1 hour
    jwks_min_refresh_seconds: int = 30  # Floor between unknown-kid refetches
    jwt_leeway_seconds: int = 10  # Clock skew tolerance

    # Supabase Configuration
    supabase_url: str = "https://test.supabase.co"
    supabase_anon_key: str = "test-anon-key"
    supabase_service_role_key: str = "test-service-role-key"

    # Provisioning
    placeholder_email_domain: str = "privy.local"

    # PostHog Configuration
    posthog_api_key: str | None = None
    posthog_host: str = "https://app.posthog.com"

    @property
    def privy_jwks_url(self) -> str:
        """JWKS endpoint publishing the app's access token verification keys."""
        return f"{self.privy_api_url}/api/v1/apps/{self.privy_app_id}/jwks.json"


settings = Settings()
