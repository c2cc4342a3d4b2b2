# supabase_client.py: Supabase client initialization

import logging

from supabase import create_client, Client

from cortexia.config import SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY

logger = logging.getLogger(__name__)

_supabase_admin: Client | None = None


def is_supabase_configured() -> bool:
    """Check if Supabase is configured with the required environment variables."""
    return bool(SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY)


def get_supabase_admin() -> Client:
    """
    Get Supabase client with service role key (admin privileges).
    Used by the backend to mirror the local store.
    """
    global _supabase_admin

    if _supabase_admin is None:
        if not is_supabase_configured():
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set in environment variables")
        _supabase_admin = create_client(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY)
        logger.info("Supabase admin client created")

    return _supabase_admin
