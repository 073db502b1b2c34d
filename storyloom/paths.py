"""
Path utilities for Storyloom.

Local data (db/, config.json) lives in the project root during development
and next to the executable when the app is frozen.
"""

import sys
from pathlib import Path


def get_app_dir() -> Path:
    """
    Get the application directory.

    - In development: the project root (parent of storyloom/)
    - When frozen: the directory containing the executable
    """
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).parent
    return Path(__file__).parent.parent


def get_db_dir() -> Path:
    """Get the local data directory (db/)."""
    return get_app_dir() / "db"


def get_kv_dir() -> Path:
    """Directory of the file-backed key-value store."""
    return get_db_dir() / "kv"


def get_config_path() -> Path:
    """Get the path to the config file."""
    return get_app_dir() / "config.json"


def ensure_dir(path: Path) -> Path:
    """Create `path` (and parents) if missing and return it."""
    path.mkdir(parents=True, exist_ok=True)
    return path
