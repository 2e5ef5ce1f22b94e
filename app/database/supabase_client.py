import logging
from typing import Optional

from supabase import create_client, Client

from app.config import settings
from app.database.credential_store import CredentialStore, SupabaseCredentialStore

logger = logging.getLogger(__name__)


class SupabaseClient:
    _client: Optional[Client] = None

    @classmethod
    def get_client(cls) -> Client:
        """Client for the users/groups/members tables.

        Prefers the service_role key: accounts are created on behalf of people who
        have not signed in yet (placeholders), which row-level security would block.
        """
        if cls._client is None:
            key = settings.supabase_service_role_key or settings.supabase_key
            if not settings.supabase_service_role_key:
                logger.warning("SUPABASE_SERVICE_ROLE_KEY not set, falling back to anon key")
            cls._client = create_client(settings.supabase_url, key)
        return cls._client


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def get_credential_store() -> CredentialStore:
    return SupabaseCredentialStore(get_supabase())
