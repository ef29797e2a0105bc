"""
Simple JSON file cache for geolocation payloads
"""

import json
import time
from pathlib import Path
from typing import Any, Optional

import structlog

from .config import DEFAULT_CACHE_PATH, DEFAULT_CACHE_TTL


logger = structlog.get_logger(__name__)


class Cache:
    """
    Simple JSON file cache.

    Stores successful provider payloads in ~/.reqlens/cache.json keyed by
    address, with TTL support. Failed lookups are never stored.
    """

    DEFAULT_PATH = DEFAULT_CACHE_PATH
    DEFAULT_TTL = DEFAULT_CACHE_TTL

    def __init__(self, path: Optional[Path] = None, ttl: Optional[int] = None):
        self.path = Path(path) if path else self.DEFAULT_PATH
        self.ttl = self.DEFAULT_TTL if ttl is None else ttl
        self._data: dict[str, dict] = {}
        self._dirty = False
        self._load()

    def _load(self):
        """Load cache from file"""
        if self.path.exists():
            try:
                content = self.path.read_text(encoding='utf-8')
                data = json.loads(content)
                self._data = data if isinstance(data, dict) else {}
                self._cleanup_expired()
            except (json.JSONDecodeError, OSError) as e:
                logger.warning("cache_load_failed", path=str(self.path), error=str(e))
                self._data = {}

    def _save(self):
        """Save cache to file"""
        if not self._dirty:
            return

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            content = json.dumps(self._data, indent=2, ensure_ascii=False)
            self.path.write_text(content, encoding='utf-8')
            self._dirty = False
        except OSError as e:
            # Cache is not critical
            logger.warning("cache_save_failed", path=str(self.path), error=str(e))

    def _cleanup_expired(self):
        """Remove expired entries"""
        expired = [
            address for address, entry in self._data.items()
            if not self._is_valid(entry)
        ]

        for address in expired:
            del self._data[address]

        if expired:
            self._dirty = True

    def _is_valid(self, entry: dict) -> bool:
        """Check if cache entry is still valid"""
        if not isinstance(entry, dict):
            return False
        ts = entry.get('_ts', 0)
        if isinstance(ts, bool) or not isinstance(ts, (int, float)):
            return False
        return time.time() - ts < self.ttl

    def get(self, address: str) -> Optional[dict[str, Any]]:
        """
        Get cached payload for an address.

        Returns:
            Provider payload or None if not found/expired
        """
        entry = self._data.get(address)
        if entry and self._is_valid(entry) and isinstance(entry.get('payload'), dict):
            return dict(entry['payload'])
        return None

    def set(self, address: str, payload: dict[str, Any]):
        """Store a successful provider payload"""
        self._data[address] = {'_ts': time.time(), 'payload': payload}
        self._dirty = True

    def has(self, address: str) -> bool:
        """Check if address is in cache and valid"""
        return self.get(address) is not None

    def save(self):
        """Manually trigger save"""
        self._save()

    def clear(self):
        """Clear all cache entries"""
        self._data = {}
        self._dirty = True
        self._save()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._save()
        return False
