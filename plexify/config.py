"""Settings for plexify, read from settings.json and the environment."""
import json
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)


APP_NAME = "Plexify"
SETTINGS_FILE = "settings.json"


# ---------------------------------------------------------------------------
# Platform-appropriate app-data directory
# ---------------------------------------------------------------------------

def app_data_dir() -> Path:
    """Return the platform app-data directory for plexify (not created)."""
    if sys.platform == "win32":
        base = Path(os.environ.get("APPDATA", Path.home()))
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base / APP_NAME


# ---------------------------------------------------------------------------
# Default values for every known key
# ---------------------------------------------------------------------------

DEFAULT_SETTINGS: dict[str, Any] = {
    # TMDB
    "tmdb_api_key": "",
    "tmdb_language": "en-US",
    "request_timeout": 10.0,

    # Storage; empty means "imdb_cache.json in the app-data directory"
    "cache_file": "",
}

# Environment variables that override settings.json
ENV_OVERRIDES = {
    "TMDB_API_KEY": "tmdb_api_key",
    "PLEXIFY_LANGUAGE": "tmdb_language",
    "PLEXIFY_TIMEOUT": "request_timeout",
    "PLEXIFY_CACHE_FILE": "cache_file",
}


@dataclass(frozen=True)
class Settings:
    tmdb_api_key: str
    tmdb_language: str
    request_timeout: float
    cache_file: Path

    @classmethod
    def load(cls, config_dir: Path | None = None, environ: dict[str, str] | None = None) -> "Settings":
        """
        Load settings.

        Args:
            config_dir: Directory holding settings.json. Defaults to the
                app-data directory.
            environ: Environment mapping. Defaults to os.environ.

        Returns:
            Settings built from defaults, settings.json, then environment
        """
        config_dir = config_dir or app_data_dir()
        environ = os.environ if environ is None else environ

        data = dict(DEFAULT_SETTINGS)
        data.update(_read_settings_file(config_dir / SETTINGS_FILE))
        for variable, key in ENV_OVERRIDES.items():
            if environ.get(variable):
                data[key] = environ[variable]

        try:
            timeout = float(data["request_timeout"])
        except (TypeError, ValueError):
            log.warning("Invalid request_timeout %r, using default", data["request_timeout"])
            timeout = DEFAULT_SETTINGS["request_timeout"]

        cache_file = data["cache_file"]
        return cls(
            tmdb_api_key=str(data["tmdb_api_key"] or ""),
            tmdb_language=str(data["tmdb_language"] or DEFAULT_SETTINGS["tmdb_language"]),
            request_timeout=timeout,
            cache_file=Path(cache_file) if cache_file else config_dir / "imdb_cache.json",
        )


def _read_settings_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with open(path, 'r', encoding='utf-8') as f:
            stored = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        log.warning("Ignoring unreadable settings file %s: %s", path, e)
        return {}
    if not isinstance(stored, dict):
        return {}
    return {k: v for k, v in stored.items() if k in DEFAULT_SETTINGS}
