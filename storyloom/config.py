"""
Configuration management for Storyloom.

Settings come from, in order of priority:
1. Environment variables (a .env file is loaded by app.py via python-dotenv)
2. config.json in the application directory
3. Built-in defaults
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Optional

from storyloom.paths import get_config_path

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8081
DEFAULT_API_PREFIX = "/api"
DEFAULT_STORAGE_BACKEND = "file"
DEFAULT_KV_TABLE = "kv_store"
DEV_STORAGE_SECRET = "storyloom-dev-secret"


def load_config() -> dict:
    """Load configuration from config.json."""
    config_path = get_config_path()
    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Ignoring unreadable config file {config_path}: {e}")
            return {}
    return {}


@dataclass
class Settings:
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    supabase_service_role_key: Optional[str] = None
    storage_backend: str = DEFAULT_STORAGE_BACKEND
    kv_table: str = DEFAULT_KV_TABLE
    api_prefix: str = DEFAULT_API_PREFIX
    api_base_url: str = ""
    port: int = DEFAULT_PORT
    storage_secret: str = DEV_STORAGE_SECRET
    log_level: str = "INFO"

    @property
    def has_supabase(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


def _get(config: dict, env_names, key: str, default=None):
    for name in env_names:
        value = os.environ.get(name)
        if value:
            return value
    value = config.get(key)
    return default if value in (None, "") else value


def get_settings(config: Optional[dict] = None) -> Settings:
    """
    Resolve settings from the environment and config.json.

    Args:
        config: use this dict instead of reading config.json
    """
    if config is None:
        config = load_config()

    port = int(_get(config, ["STORYLOOM_PORT"], "port", DEFAULT_PORT))
    api_prefix = _get(config, ["STORYLOOM_API_PREFIX"], "api_prefix", DEFAULT_API_PREFIX)
    if not api_prefix.startswith("/"):
        api_prefix = "/" + api_prefix
    api_prefix = api_prefix.rstrip("/")

    api_base_url = _get(config, ["STORYLOOM_API_URL"], "api_base_url")
    if not api_base_url:
        api_base_url = f"http://127.0.0.1:{port}{api_prefix}"

    storage_backend = _get(config, ["STORYLOOM_STORAGE"], "storage_backend", DEFAULT_STORAGE_BACKEND)

    return Settings(
        supabase_url=_get(config, ["SUPABASE_URL"], "supabase_url"),
        supabase_anon_key=_get(config, ["SUPABASE_ANON_KEY", "SUPABASE_KEY"], "supabase_anon_key"),
        supabase_service_role_key=_get(config, ["SUPABASE_SERVICE_ROLE_KEY"], "supabase_service_role_key"),
        storage_backend=storage_backend.lower(),
        kv_table=_get(config, ["STORYLOOM_KV_TABLE"], "kv_table", DEFAULT_KV_TABLE),
        api_prefix=api_prefix,
        api_base_url=api_base_url.rstrip("/"),
        port=port,
        storage_secret=_get(config, ["STORYLOOM_STORAGE_SECRET"], "storage_secret", DEV_STORAGE_SECRET),
        log_level=str(_get(config, ["STORYLOOM_LOG_LEVEL"], "log_level", "INFO")).upper(),
    )
