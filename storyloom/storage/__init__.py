"""
Story persistence for Storyloom.

- KeyValueStore implementations: FileKeyValueStore (local default),
  SupabaseKeyValueStore (cloud)
- StoryRepository: story key layout and list projection
- StoryApiClient: HTTP client used by the editor
"""

from storyloom.storage.protocol import IdentityProvider, KeyValueStore
from storyloom.storage.file_store import FileKeyValueStore
from storyloom.storage.repository import StoryRepository
from storyloom.storage.client import StoryApiClient
from storyloom.storage.factory import create_identity, create_kv_store

__all__ = [
    'IdentityProvider',
    'KeyValueStore',
    'FileKeyValueStore',
    'StoryRepository',
    'StoryApiClient',
    'create_identity',
    'create_kv_store',
]
