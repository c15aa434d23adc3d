"""
Database connection management.

Provides the Supabase client singleton, the startup schema bootstrap
and the health check.
"""

from supabase import create_client, Client
from functools import lru_cache
from typing import Optional
import structlog

from config.settings import settings
from exceptions import SchemaBootstrapError

logger = structlog.get_logger(__name__)

# Defined in migrations/001_sample_mappings.sql
SCHEMA_BOOTSTRAP_FUNCTION = "ensure_sample_mappings_schema"


class ConnectionError(Exception):
    """Failed to connect to database."""
    pass


@lru_cache()
def get_supabase_client() -> Client:
    """
    Get cached Supabase client instance.

    Uses lru_cache to ensure only one client is created.
    Call get_supabase_client.cache_clear() to reconnect.

    Returns:
        Client: Supabase client

    Raises:
        ConnectionError: If the client cannot be created
    """
    try:
        logger.info(
            "connecting_to_supabase",
            url=settings.supabase_url[:30] + "..."  # Log partial URL only
        )

        client = create_client(
            settings.supabase_url,
            settings.supabase_key
        )

        logger.info("supabase_client_created")

        return client

    except Exception as e:
        logger.error(
            "supabase_connection_failed",
            error=str(e),
            error_type=type(e).__name__
        )
        raise ConnectionError(f"Failed to connect to Supabase: {e}") from e


def ensure_schema(client: Optional[Client] = None) -> None:
    """
    Create the mapping table and its index if they are missing.

    Runs the bootstrap function shipped with the migration for the
    configured table. It only issues IF NOT EXISTS statements, so
    repeated calls are harmless.

    Raises:
        SchemaBootstrapError: If the bootstrap call fails
    """
    client = client or get_supabase_client()
    table = settings.sample_mappings_table

    try:
        client.rpc(SCHEMA_BOOTSTRAP_FUNCTION, {"table_name": table}).execute()
    except Exception as e:
        logger.error(
            "schema_bootstrap_failed",
            function=SCHEMA_BOOTSTRAP_FUNCTION,
            table=table,
            error=str(e),
            error_type=type(e).__name__
        )
        raise SchemaBootstrapError(str(e)) from e

    logger.info("schema_ensured", table=table)


def check_connection(client: Optional[Client] = None) -> dict:
    """
    Check database connection health.

    Returns:
        dict: Connection status with details
    """
    try:
        client = client or get_supabase_client()

        mappings = (
            client.table(settings.sample_mappings_table)
            .select("item_id", count="exact")
            .limit(1)
            .execute()
        )

        return {
            "status": "healthy",
            "mappings_count": mappings.count
        }

    except Exception as e:
        return {
            "status": "unhealthy",
            "error": str(e)
        }
