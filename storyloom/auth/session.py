"""
Session management for Storyloom.

Signs users in against Supabase Auth and keeps the resulting tokens in
NiceGUI's per-user storage (app.storage.user), so a browser reload keeps
the author signed in. Account creation goes through the persistence
service's /signup route, which creates the account already confirmed.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, MutableMapping, Optional

from supabase import Client, create_client

from storyloom.errors import StoryloomError
from storyloom.storage.client import StoryApiClient
from storyloom.storage.supabase_store import format_user

logger = logging.getLogger(__name__)

SESSION_KEY = "supabase_session"
USER_KEY = "user"


class SessionManager:
    """
    Manages the signed-in author.

    Results of login/create_account are dicts with 'success', 'user' and 'error',
    ready to be shown by the auth pages.
    """

    def __init__(
        self,
        supabase_url: Optional[str] = None,
        supabase_key: Optional[str] = None,
        api_client: Optional[StoryApiClient] = None,
        session_expiry_hours: int = 168,
        storage: Optional[MutableMapping[str, Any]] = None,
    ):
        """
        Args:
            supabase_url: Supabase project URL
            supabase_key: Supabase anon (publishable) key
            api_client: persistence client used for /signup
            session_expiry_hours: how long a stored session stays valid
            storage: session storage; defaults to app.storage.user
        """
        self._supabase_url = supabase_url
        self._supabase_key = supabase_key
        self._api_client = api_client
        self._session_expiry = timedelta(hours=session_expiry_hours)
        self._storage = storage
        self._client: Optional[Client] = None
        if self.is_available:
            self._client = create_client(self._supabase_url, self._supabase_key)

    @property
    def is_available(self) -> bool:
        """True when a Supabase project is configured."""
        return bool(self._supabase_url) and bool(self._supabase_key)

    def _get_client(self) -> Client:
        if self._client is None:
            raise RuntimeError("Supabase not configured")
        return self._client

    def _get_storage(self) -> MutableMapping[str, Any]:
        if self._storage is not None:
            return self._storage
        from nicegui import app
        return app.storage.user

    # --- Authentication ---

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """Authenticate with email and password."""
        try:
            client = self._get_client()
            response = client.auth.sign_in_with_password({
                "email": email,
                "password": password
            })
        except Exception as e:
            logger.error(f"Login failed for {email}: {e}")
            return {"success": False, "user": None, "error": str(e)}

        if not response.user or not response.session:
            return {"success": False, "user": None, "error": "Invalid credentials"}

        self._store_session(response)
        logger.info(f"User {response.user.id} signed in")
        return {"success": True, "user": self._format_user(response.user), "error": None}

    def create_account(self, email: str, password: str, name: str) -> Dict[str, Any]:
        """
        Create the account through the persistence service.

        Only does network I/O, so pages can run it with `run.io_bound`
        (the service may be this same process).
        """
        if self._api_client is None:
            return {"success": False, "user": None, "error": "Registration is not available"}
        try:
            user = self._api_client.signup(email, password, name)
        except StoryloomError as e:
            logger.warning(f"Registration failed for {email}: {e}")
            return {"success": False, "user": None, "error": e.message}
        return {"success": True, "user": user, "error": None}

    def logout(self) -> None:
        """Sign out and clear the stored session."""
        if self._client is not None:
            try:
                self._client.auth.sign_out()
            except Exception as e:
                logger.warning(f"Logout error: {e}")

        storage = self._get_storage()
        storage.pop(SESSION_KEY, None)
        storage.pop(USER_KEY, None)

    # --- Session ---

    def _store_session(self, auth_response) -> None:
        storage = self._get_storage()
        session = auth_response.session
        storage[SESSION_KEY] = {
            "access_token": session.access_token if session else None,
            "refresh_token": session.refresh_token if session else None,
            "expires_at": (datetime.now(timezone.utc) + self._session_expiry).isoformat(),
            "user_id": auth_response.user.id,
        }
        storage[USER_KEY] = self._format_user(auth_response.user)

    @staticmethod
    def _format_user(user) -> Dict[str, Any]:
        return format_user(user)

    def get_current_user(self) -> Optional[Dict[str, Any]]:
        """The signed-in author as {id, email, name}, or None."""
        storage = self._get_storage()
        user = storage.get(USER_KEY)
        session = storage.get(SESSION_KEY)
        if not user or not session:
            return None

        expires_at = session.get("expires_at")
        if expires_at and datetime.now(timezone.utc) > datetime.fromisoformat(expires_at):
            logger.info(f"Session for {user.get('id')} expired")
            self.logout()
            return None
        return user

    def get_session_token(self) -> Optional[str]:
        """Access token of the current session."""
        session = self._get_storage().get(SESSION_KEY)
        return session.get("access_token") if session else None

    def refresh_session(self) -> bool:
        """Exchange the refresh token for a new session. Returns True on success."""
        session = self._get_storage().get(SESSION_KEY)
        if not session or not session.get("refresh_token"):
            return False
        try:
            response = self._get_client().auth.refresh_session(session["refresh_token"])
        except Exception as e:
            logger.error(f"Session refresh failed: {e}")
            return False
        if not response or not response.session or not response.user:
            return False
        self._store_session(response)
        return True

    def restore(self) -> Optional[Dict[str, Any]]:
        """
        Check the stored session on page load.

        Verifies the access token with Supabase, refreshing it once if it
        was rejected. A session that cannot be recovered is cleared.
        """
        user = self.get_current_user()
        if user is None or not self.is_available:
            return user

        try:
            response = self._get_client().auth.get_user(self.get_session_token())
            if response and response.user:
                return user
        except Exception as e:
            logger.info(f"Stored token rejected, trying refresh: {e}")

        if self.refresh_session():
            return self._get_storage().get(USER_KEY)

        self.logout()
        return None


# Global session manager instance
_session_manager: Optional[SessionManager] = None


def get_session_manager() -> SessionManager:
    """Get the global session manager instance."""
    global _session_manager
    if _session_manager is None:
        _session_manager = SessionManager()
    return _session_manager


def configure_session_manager(
    supabase_url: Optional[str] = None,
    supabase_key: Optional[str] = None,
    api_client: Optional[StoryApiClient] = None,
) -> SessionManager:
    """Configure and return the global session manager."""
    global _session_manager
    _session_manager = SessionManager(
        supabase_url=supabase_url,
        supabase_key=supabase_key,
        api_client=api_client,
    )
    return _session_manager
