"""
HTTP client for the persistence service.

Used by the editor UI. Every call is a single blocking request (run it via
`nicegui.run.io_bound` from UI handlers); failures are mapped onto the
Storyloom error types and never retried.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

import requests

from storyloom.errors import AuthError, NotFoundError, TransientNetworkError
from storyloom.models import Story, StoryMeta

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class StoryApiClient:
    """
    Args:
        base_url: service root including the API prefix, e.g. http://127.0.0.1:8081/api
        token_provider: returns the current session's access token (or None)
        anon_key: public Supabase key, sent as `apikey` when configured
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        anon_key: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._token_provider = token_provider or (lambda: None)
        self._anon_key = anon_key
        self._timeout = timeout
        self._session = session or requests.Session()

    # --- Requests ---

    def _headers(self, authenticated: bool) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._anon_key:
            headers["apikey"] = self._anon_key
        if authenticated:
            token = self._token_provider()
            if not token:
                raise AuthError("Unauthorized - no token provided")
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _request(self, method: str, path: str, authenticated: bool = True,
                 json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        headers = self._headers(authenticated)
        try:
            response = self._session.request(method, url, headers=headers, json=json, timeout=self._timeout)
        except requests.RequestException as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise TransientNetworkError() from e

        if response.ok:
            try:
                return response.json()
            except ValueError:
                return {}

        message = self._error_message(response)
        logger.warning(f"{method} {url} -> {response.status_code}: {message}")
        if response.status_code == 401:
            raise AuthError(message)
        if response.status_code == 404:
            raise NotFoundError(message)
        raise TransientNetworkError(message)

    @staticmethod
    def _error_message(response) -> str:
        try:
            body = response.json()
        except ValueError:
            return ""
        if isinstance(body, dict):
            return body.get("error") or ""
        return ""

    # --- Operations ---

    def signup(self, email: str, password: str, name: str) -> Dict[str, Any]:
        body = self._request("POST", "/signup", authenticated=False,
                             json={"email": email, "password": password, "name": name})
        return body.get("user") or {}

    def save_story(self, story: Story) -> None:
        self._request("POST", "/stories", json=story.to_dict())

    def list_stories(self) -> List[StoryMeta]:
        body = self._request("GET", "/stories")
        return [StoryMeta.from_dict(entry) for entry in body.get("stories") or []]

    def load_story(self, story_id: str) -> Story:
        body = self._request("GET", f"/stories/{story_id}")
        return Story.from_dict(body["story"])

    def delete_story(self, story_id: str) -> None:
        self._request("DELETE", f"/stories/{story_id}")
