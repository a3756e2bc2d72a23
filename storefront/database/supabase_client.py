import logging
from typing import Optional

from supabase import create_client, Client
from storefront.config import settings

logger = logging.getLogger(__name__)


class SupabaseClient:
    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Used for catalog writes."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        return cls._service_client or cls.get_client()

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None


def get_supabase() -> Optional[Client]:
    """Catalog client, or None when Supabase is not configured or unreachable."""
    try:
        return SupabaseClient.get_client()
    except Exception as e:
        logger.error(f"Supabase client unavailable: {e}")
        return None


def get_supabase_admin() -> Optional[Client]:
    try:
        return SupabaseClient.get_service_client()
    except Exception as e:
        logger.error(f"Supabase service client unavailable: {e}")
        return None
