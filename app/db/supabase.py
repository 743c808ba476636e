"""Supabase client singleton.

Provides ``get_supabase()`` which returns a lazily-initialized, process-wide
Supabase client authenticated with the service-role key from ``settings``.
The server never holds end-user sessions, so token refresh and session
persistence are disabled.
"""

import logging

from supabase import Client, ClientOptions, create_client

from app.core.config import settings

logger = logging.getLogger(__name__)

_client: Client | None = None


def get_supabase() -> Client:
    """Return the singleton Supabase client, creating it on first call."""
    global _client
    if _client is None:
        _client = create_client(
            settings.SUPABASE_URL,
            settings.SUPABASE_KEY,
            options=ClientOptions(auto_refresh_token=False, persist_session=False),
        )
        logger.info("supabase_client_created")
    return _client
