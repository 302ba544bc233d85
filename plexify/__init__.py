"""
Plexify - Plex Folder Renamer

A CLI tool for renaming movie and TV show folders to the Plex naming
convention using IMDb IDs looked up on TMDB.
"""
from .models import (
    MediaType,
    Episode,
    MediaItem,
    FileRename,
    SeasonFolder,
    RenamePlan,
    ScanResult,
    LookupResult,
)
from .errors import (
    PlexifyError,
    ScanError,
    MetadataLookupError,
    FileSystemError,
    ApplyError,
    ApplyConflictError,
    ApplyIOError,
)
from .sanitizer import sanitize
from .formatter import (
    format_movie_name,
    format_tv_show_folder_name,
    format_season_folder_name,
    format_tv_episode_name,
    format_tv_episode_name_date_based,
)
from .scanner import FolderScanner
from .cache import ExternalIDCache
from .lookup import LookupClient, StubLookupClient
from .tmdb import TMDBClient
from .resolver import MetadataResolver
from .planner import build_plan
from .applier import PlanApplier, ApplyReport

__version__ = "1.0.0"
__all__ = [
    "MediaType",
    "Episode",
    "MediaItem",
    "FileRename",
    "SeasonFolder",
    "RenamePlan",
    "ScanResult",
    "LookupResult",
    "PlexifyError",
    "ScanError",
    "MetadataLookupError",
    "FileSystemError",
    "ApplyError",
    "ApplyConflictError",
    "ApplyIOError",
    "sanitize",
    "format_movie_name",
    "format_tv_show_folder_name",
    "format_season_folder_name",
    "format_tv_episode_name",
    "format_tv_episode_name_date_based",
    "FolderScanner",
    "ExternalIDCache",
    "LookupClient",
    "StubLookupClient",
    "TMDBClient",
    "MetadataResolver",
    "build_plan",
    "PlanApplier",
    "ApplyReport",
]
