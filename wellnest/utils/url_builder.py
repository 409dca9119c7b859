"""
Database URL utilities
"""
import logging
from urllib.parse import urlsplit, urlunsplit, parse_qsl, urlencode

logger = logging.getLogger(__name__)


def build_async_url(sync_url: str) -> str:
    """
    Convert postgres:// to postgresql+asyncpg:// and remove sslmode from URL

    Args:
        sync_url: Original database URL

    Returns:
        Async-compatible database URL
    """
    if not sync_url:
        return sync_url

    parts = urlsplit(sync_url)
    base_scheme = parts.scheme.split("+")[0]

    if base_scheme.startswith("postgres"):
        # asyncpg doesn't accept sslmode in the URL
        query_pairs = dict(parse_qsl(parts.query, keep_blank_values=True))
        query_pairs.pop("sslmode", None)
        new_query = urlencode(query_pairs) if query_pairs else ""
        return urlunsplit(("postgresql+asyncpg", parts.netloc, parts.path, new_query, parts.fragment))

    if base_scheme == "sqlite" and "+" not in parts.scheme:
        return sync_url.replace("sqlite://", "sqlite+aiosqlite://", 1)

    return sync_url


def normalize_database_url(database_url: str) -> str:
    """
    Normalize a Supabase database URL for connection pooling

    Args:
        database_url: Original database URL

    Returns:
        Normalized database URL
    """
    if not database_url:
        return database_url

    # Transaction Pooler (6543) doesn't support prepared statements
    if ":6543" in database_url:
        database_url = database_url.replace(":6543", ":5432")
        logger.info("Switched from Transaction Pooler (6543) to Session Pooler (5432)")
    elif ".pooler.supabase.com" in database_url and ".pooler.supabase.com:" not in database_url:
        database_url = database_url.replace(".pooler.supabase.com", ".pooler.supabase.com:5432")
        logger.info("Added Session Pooler port (5432)")

    return database_url
