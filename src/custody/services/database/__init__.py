"""Database connection, models and stores."""

from src.custody.services.database.connection import get_supabase_admin_client
from src.custody.services.database.models import User, Wallet
from src.custody.services.database.user_store import UserStore
from src.custody.services.database.utils import SupabaseQueryBuilder, get_query_builder

__all__ = [
    "get_supabase_admin_client",
    "SupabaseQueryBuilder",
    "get_query_builder",
    "User",
    "Wallet",
    "UserStore",
]
