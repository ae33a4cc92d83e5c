"""Generic database utility functions for Supabase interactions."""

import logging
from typing import Any

from supabase import Client

from src.custody.services.database.connection import get_supabase_admin_client

logger = logging.getLogger(__name__)


class SupabaseQueryBuilder:
    """Helper class for building and executing Supabase queries."""

    def __init__(self, client: Client | None = None) -> None:
        """
        Initialize query builder.

        Args:
            client: Supabase client instance (uses the admin client if None)
        """
        self.client = client or get_supabase_admin_client()

    def get_by_field(
        self, table: str, field: str, value: Any, columns: str = "*"
    ) -> dict[str, Any] | None:
        """
        Fetch a single record by field value.

        Args:
            table: Table name
            field: Field name to filter by
            value: Field value
            columns: Columns to select, including PostgREST embeds (default: "*")

        Returns:
            First matching record or None

        Example:
            >>> builder = SupabaseQueryBuilder()
            >>> user = builder.get_by_field("users", "external_subject_id", "did:privy:abc")
        """
        response = self.client.table(table).select(columns).eq(field, value).limit(1).execute()
        return response.data[0] if response.data else None

    def insert_record(self, table: str, data: dict[str, Any]) -> dict[str, Any] | None:
        """
        Insert a single record.

        Args:
            table: Table name
            data: Record data dictionary

        Returns:
            Inserted record dictionary or None if nothing was returned

        Raises:
            postgrest.exceptions.APIError: If the insert is rejected (e.g. unique violation)

        Example:
            >>> builder = SupabaseQueryBuilder()
            >>> wallet = builder.insert_record("wallets", {"user_id": user_id, "address": "0x..."})
        """
        response = self.client.table(table).insert(data).execute()
        return response.data[0] if response.data else None


def get_query_builder(client: Client | None = None) -> SupabaseQueryBuilder:
    """
    Get instance of SupabaseQueryBuilder.

    Args:
        client: Optional Supabase client (uses the admin client if None)

    Returns:
        SupabaseQueryBuilder instance
    """
    return SupabaseQueryBuilder(client)
