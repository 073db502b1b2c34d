"""
Supabase-backed storage and identity.

SupabaseKeyValueStore keeps documents in a two-column table (key text
primary key, value jsonb). SupabaseIdentity verifies bearer tokens and
creates accounts with the service role key; it never sees user passwords
except when creating an account.
"""

import logging
from typing import Any, Dict, Optional

from supabase import Client, create_client

from storyloom.errors import UserInputError

logger = logging.getLogger(__name__)


def format_user(user) -> Dict[str, Any]:
    """Flatten a Supabase user object to {id, email, name}."""
    metadata = getattr(user, "user_metadata", None) or {}
    email = user.email or ""
    return {
        "id": user.id,
        "email": email,
        "name": metadata.get("name") or email.split("@")[0],
    }


class SupabaseKeyValueStore:
    """
    Key-value store on a Supabase table.

    Args:
        url: Supabase project URL
        key: service role key (the table is not exposed to end users)
        table: table name, `kv_store` by default
        client: pre-configured client, mainly for tests
    """

    def __init__(
        self,
        url: Optional[str] = None,
        key: Optional[str] = None,
        table: str = "kv_store",
        client: Optional[Client] = None,
    ):
        if client is None:
            if not url or not key:
                raise ValueError(
                    "Supabase URL and service role key required. "
                    "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables."
                )
            client = create_client(url, key)
        self._client = client
        self._table = table

    def get(self, key: str) -> Optional[Any]:
        response = self._client.table(self._table)\
            .select("value")\
            .eq("key", key)\
            .execute()
        if not response.data:
            return None
        return response.data[0]["value"]

    def set(self, key: str, value: Any) -> None:
        self._client.table(self._table)\
            .upsert({"key": key, "value": value})\
            .execute()

    def delete(self, key: str) -> None:
        self._client.table(self._table)\
            .delete()\
            .eq("key", key)\
            .execute()


class SupabaseIdentity:
    """Token verification and account creation against Supabase Auth."""

    def __init__(
        self,
        url: Optional[str] = None,
        service_role_key: Optional[str] = None,
        client: Optional[Client] = None,
    ):
        if client is None:
            if not url or not service_role_key:
                raise ValueError(
                    "Supabase URL and service role key required for identity checks. "
                    "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables."
                )
            client = create_client(url, service_role_key)
        self._client = client

    def get_user(self, token: str) -> Optional[Dict[str, Any]]:
        try:
            response = self._client.auth.get_user(token)
        except Exception as e:
            logger.info(f"Token rejected: {e}")
            return None
        if not response or not response.user:
            return None
        return format_user(response.user)

    def create_user(self, email: str, password: str, name: str) -> Dict[str, Any]:
        try:
            response = self._client.auth.admin.create_user({
                "email": email,
                "password": password,
                "user_metadata": {"name": name},
                "email_confirm": True,
            })
        except Exception as e:
            logger.warning(f"Account creation failed for {email}: {e}")
            raise UserInputError(str(e)) from e
        return format_user(response.user)
