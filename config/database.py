"""
Supabase access.

One cached client per process, plus the row-count health check used by
/health and the startup log.
"""

from functools import lru_cache
from typing import Iterable
from urllib.parse import urlparse
import structlog
from supabase import create_client, Client

from config.settings import settings
from exceptions import DatabaseUnavailableError

logger = structlog.get_logger(__name__)

# Tables whose row counts the health check reports
HEALTH_TABLES = ("products", "inventory", "production_schedule")


@lru_cache()
def get_supabase_client() -> Client:
    """
    Cached Supabase client built from SUPABASE_URL and SUPABASE_KEY.

    Nothing connects at import time; the first service that needs the
    database builds the client.

    Raises:
        DatabaseUnavailableError: If credentials are missing or the client
            cannot be built (503)
    """
    if not settings.database_configured:
        logger.error("supabase_not_configured")
        raise DatabaseUnavailableError("SUPABASE_URL and SUPABASE_KEY must be set")

    host = urlparse(settings.supabase_url).netloc or "unknown"
    logger.info("creating_supabase_client", host=host)

    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logger.error(
            "supabase_client_failed",
            host=host,
            error=str(e),
            error_type=type(e).__name__
        )
        raise DatabaseUnavailableError(f"Failed to create Supabase client: {e}") from e


def table_count(client: Client, table: str) -> int:
    """Exact row count for one table."""
    result = client.table(table).select("id", count="exact").execute()
    return result.count or 0


def check_connection(tables: Iterable[str] = HEALTH_TABLES) -> dict:
    """
    Database health with a row count per table.

    Returns:
        {"status": "not_configured"} without credentials,
        {"status": "unhealthy", "error": ...} if any count fails,
        otherwise {"status": "healthy", "<table>_count": n, ...}
    """
    if not settings.database_configured:
        return {"status": "not_configured"}

    try:
        client = get_supabase_client()
        counts = {f"{table}_count": table_count(client, table) for table in tables}
    except Exception as e:
        logger.warning("database_health_check_failed", error=str(e))
        return {"status": "unhealthy", "error": str(e)}

    return {"status": "healthy", **counts}
