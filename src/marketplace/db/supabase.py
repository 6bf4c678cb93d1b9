"""Supabase client for Python backend."""

import logging
from functools import lru_cache
from supabase import create_client, Client
from ..config import settings


@lru_cache()
def get_supabase_client() -> Client | None:
    """Get cached Supabase client instance.

    Returns:
        Supabase Client instance if configured, None otherwise.
        Note: This does not test the connection - actual queries may fail with network errors.
    """
    if not settings.supabase_url or not settings.supabase_key:
        logging.info("Supabase credentials not configured; using the in-memory store")
        return None

    try:
        client = create_client(settings.supabase_url, settings.supabase_key)
        return client
    except Exception as e:
        logging.error(f"Failed to create Supabase client: {e}")
        return None


# Wallet mutations go through the Postgres functions defined in
# supabase/migrations/0001_marketplace_ledger.sql, e.g.
#
# result = client.rpc('marketplace_approve_withdrawal', {
#     'p_request_id': request_id,
#     'p_approved_by': 'admin-1',
# }).execute()
