"""
Storage protocol definitions.

The persistence service keeps every document under a string key in a
key-value store. Story layout on top of the store lives in
storyloom.storage.repository; account checks go through an
IdentityProvider.
"""

from typing import Any, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """
    Minimal JSON key-value store.

    Values are JSON-compatible (dicts / lists). A missing key reads as None.
    """

    def get(self, key: str) -> Optional[Any]:
        """Return the value stored under `key`, or None."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Create or overwrite the value under `key`."""
        ...

    def delete(self, key: str) -> None:
        """Remove `key`. Deleting a missing key is not an error."""
        ...


@runtime_checkable
class IdentityProvider(Protocol):
    """Server-side account lookups."""

    def get_user(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Resolve a bearer token.

        Returns:
            {id, email, name} for a valid token, None when the token is rejected
        """
        ...

    def create_user(self, email: str, password: str, name: str) -> Dict[str, Any]:
        """
        Create an account with the email already confirmed.

        Returns:
            {id, email, name}

        Raises:
            UserInputError: the provider refused the account (duplicate email, weak password...)
        """
        ...
