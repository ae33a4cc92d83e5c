"""Supabase database connection management."""

from functools import lru_cache

from supabase import Client, create_client

from src.custody.config import settings


@lru_cache(maxsize=1)
def get_supabase_admin_client() -> Client:
    """
    Get Supabase admin client with service role key (singleton pattern).

    Bypasses Row-Level Security. Every caller of this service is
    authenticated by the token verifier before touching the store.

    Returns:
        Configured Supabase client with service role key

    Example:
        >>> client = get_supabase_admin_client()
        >>> response = client.table("users").select("*").execute()
    """
    return create_client(settings.supabase_url, settings.supabase_service_role_key)
