"""
File-backed key-value store.

One JSON file per key under db/kv/. Keys contain ':' so they are
percent-encoded into file names.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union
from urllib.parse import quote

from storyloom.paths import ensure_dir, get_kv_dir

logger = logging.getLogger(__name__)


class FileKeyValueStore:
    """Local default store, used when no Supabase project is configured."""

    def __init__(self, root: Optional[Union[str, Path]] = None):
        self.root = ensure_dir(Path(root) if root else get_kv_dir())

    def _path(self, key: str) -> Path:
        return self.root / f"{quote(key, safe='')}.json"

    def get(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix('.tmp')
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(value, f, indent=2, ensure_ascii=False)
        tmp_path.replace(path)
        logger.debug(f"Stored key {key} at {path}")

    def delete(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()
            logger.debug(f"Deleted key {key}")
