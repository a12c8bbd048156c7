import logging

from supabase import create_client, Client
from supabase.client import ClientOptions
from fieldbase.config import settings

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
        """Client with service_role key; bypasses RLS. Never holds a user session."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url,
                settings.supabase_service_role_key,
                options=ClientOptions(persist_session=False, auto_refresh_token=False),
            )
        if cls._service_client is None:
            logger.warning("SUPABASE_SERVICE_ROLE_KEY is not set, falling back to the anon client")
            return cls.get_client()
        return cls._service_client

    @classmethod
    def new_session_client(cls) -> Client:
        """Throwaway anon client for sign-up and sign-in; its session dies with it"""
        return create_client(
            settings.supabase_url,
            settings.supabase_key,
            options=ClientOptions(persist_session=False, auto_refresh_token=False),
        )

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None


def get_supabase() -> Client:
    """Store access for request handlers; tenancy is enforced by core.access"""
    return SupabaseClient.get_service_client()


def rpc_row(data):
    """PostgREST returns a composite-returning function as an object, a setof as a list"""
    if isinstance(data, list):
        return data[0] if data else None
    return data
