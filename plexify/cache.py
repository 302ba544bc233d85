"""Cache module for storing external ID lookups locally."""
import json
import logging
import threading
from pathlib import Path

from .models import MediaType

log = logging.getLogger(__name__)


CACHE_FILE = "imdb_cache.json"


class ExternalIDCache:
    """Local JSON cache mapping (title, year, media type) to an external ID.

    The whole file is loaded once and rewritten on every change.  A corrupt
    or missing file is an empty cache.  Safe to share between threads; the
    last write wins.
    """

    def __init__(self, cache_path: Path):
        """
        Initialize the cache.

        Args:
            cache_path: JSON file backing the cache
        """
        self.cache_path = Path(cache_path)
        self._lock = threading.Lock()
        self._cache: dict[str, str] = self._load()

    def _load(self) -> dict[str, str]:
        """Load cache from disk."""
        if not self.cache_path.exists():
            return {}
        try:
            with open(self.cache_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            log.warning("Ignoring unreadable cache %s: %s", self.cache_path, e)
            return {}
        if not isinstance(data, dict):
            log.warning("Ignoring malformed cache %s", self.cache_path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _save(self) -> None:
        """Save cache to disk. Called with the lock held."""
        try:
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.cache_path, 'w', encoding='utf-8') as f:
                json.dump(self._cache, f, indent=2, ensure_ascii=False)
        except OSError as e:
            log.warning("Could not write cache %s: %s", self.cache_path, e)

    @staticmethod
    def make_key(title: str, year: int | None, media_type: MediaType) -> str:
        """Build the cache key: lowercased title, year (0 if unknown), media type."""
        return f"{title.strip().lower()}|{year or 0}|{media_type.value}"

    def get(self, title: str, year: int | None, media_type: MediaType) -> str | None:
        """
        Get a cached external ID.

        Args:
            title: The title to look up (case-insensitive)
            year: Year used for the original lookup, or None
            media_type: Movie or TV show

        Returns:
            External ID if cached, None otherwise
        """
        key = self.make_key(title, year, media_type)
        with self._lock:
            return self._cache.get(key)

    def set(self, title: str, year: int | None, media_type: MediaType, external_id: str) -> None:
        """Cache an external ID and persist the cache."""
        key = self.make_key(title, year, media_type)
        with self._lock:
            self._cache[key] = external_id
            self._save()

    def clear(self) -> None:
        """Clear all cached data."""
        with self._lock:
            self._cache = {}
            self._save()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
