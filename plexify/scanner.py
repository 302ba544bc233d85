"""Folder scanning: exclusion rules, movie / TV classification, episode parsing."""
import logging
from pathlib import Path

from . import filesystem
from .errors import FileSystemError, FolderNotFoundError, NotAFolderError, ScanIOError
from .models import Episode, MediaType, ScanResult
from .parser import (
    has_date_marker,
    has_episode_marker,
    is_season_folder_name,
    is_video_file,
    parse_episode,
    season_from_path,
)

log = logging.getLogger(__name__)


# Folders Plex treats as extras / disc structure (compared lowercased)
EXCLUDED_FOLDER_NAMES = {
    "extras", "samples", "bonus", "bonus disc", "featurettes",
    "trailers", "behind the scenes", "deleted scenes", "scenes",
    "video_ts", "bdmv", "audio_ts",
}

# Substrings that mark a folder or file as non-feature content
EXCLUDED_NAME_PATTERNS = ("sample", "trailer")

# Real episodes occasionally contain "sample" in their name; samples are small.
SAMPLE_SIZE_LIMIT = 300 * 1024 * 1024

# Season used for episodes when neither the filename nor a folder names one.
DEFAULT_SEASON = 1

NO_MEDIA_WARNING = "No media files found in folder"
NO_SEASON_FOLDERS_WARNING = "TV show detected but no season folders found"
NO_EPISODES_WARNING = "Episode information is required for TV shows"


class FolderScanner:
    """Scans one media folder and describes what it contains."""

    def scan(self, folder_path: str | Path) -> ScanResult:
        """
        Scan a folder.

        Args:
            folder_path: Folder to scan

        Returns:
            ScanResult with the media type, media files, excluded items,
            warnings and (for TV shows) the parsed episodes

        Raises:
            FolderNotFoundError: If the folder does not exist
            NotAFolderError: If the path is a file
            ScanIOError: If the folder tree cannot be read
        """
        folder = Path(folder_path)
        if not filesystem.exists(folder):
            raise FolderNotFoundError(folder)
        if not filesystem.is_directory(folder):
            raise NotAFolderError(folder)

        log.debug("Scanning %s", folder)
        excluded: list[Path] = []
        files: list[Path] = []
        subdirectories: list[Path] = []

        for child in self._list(folder):
            is_dir = filesystem.is_directory(child)
            if self._is_excluded(child.name, is_dir):
                excluded.append(child)
            elif is_dir:
                subdirectories.append(child)
            else:
                files.append(child)

        media_files = self._filter_media_files(files, excluded)
        media_type = self._classify(media_files, subdirectories)
        log.debug("Classified %s as %s", folder.name, media_type.value)

        warnings: list[str] = []
        episodes: list[Episode] | None = None
        unparsed = 0

        if media_type == MediaType.TV_SHOW:
            episodes = []
            media_files = []
            unparsed = self._walk_episodes(folder, folder, media_files, episodes, excluded)

        if not media_files:
            warnings.append(NO_MEDIA_WARNING)
        if media_type == MediaType.TV_SHOW:
            if not subdirectories:
                warnings.append(NO_SEASON_FOLDERS_WARNING)
            if not episodes:
                warnings.append(NO_EPISODES_WARNING)
            elif unparsed:
                warnings.append(f"Some episode files could not be parsed ({unparsed})")

        for warning in warnings:
            log.info("%s: %s", folder.name, warning)

        return ScanResult(
            folder_path=folder,
            media_type=media_type,
            media_files=media_files,
            excluded_items=list(dict.fromkeys(excluded)),
            warnings=warnings,
            episodes=episodes,
        )

    # -- helpers ----------------------------------------------------

    def _list(self, directory: Path) -> list[Path]:
        try:
            return filesystem.list_directory(directory)
        except FileSystemError as e:
            raise ScanIOError(directory, str(e)) from e

    def _size(self, path: Path) -> int:
        try:
            return filesystem.file_size(path)
        except FileSystemError as e:
            raise ScanIOError(path, str(e)) from e

    def _is_excluded(self, name: str, is_dir: bool) -> bool:
        """Extras folders by name; any folder whose name mentions sample/trailer."""
        lowered = name.lower()
        if lowered in EXCLUDED_FOLDER_NAMES:
            return True
        return is_dir and any(pattern in lowered for pattern in EXCLUDED_NAME_PATTERNS)

    def _is_unwanted_file(self, path: Path) -> bool:
        """Small 'sample' files and every 'trailer' file."""
        lowered = path.name.lower()
        if "trailer" in lowered:
            return True
        return "sample" in lowered and self._size(path) < SAMPLE_SIZE_LIMIT

    def _filter_media_files(self, files: list[Path], excluded: list[Path]) -> list[Path]:
        media_files = []
        for path in files:
            if self._is_unwanted_file(path):
                log.debug("Excluding %s", path.name)
                excluded.append(path)
                continue
            if not is_video_file(path):
                continue
            media_files.append(path)
        return media_files

    def _classify(self, media_files: list[Path], subdirectories: list[Path]) -> MediaType:
        """Any single TV indicator is enough; no indicator means movie."""
        if any(is_season_folder_name(d.name) for d in subdirectories):
            return MediaType.TV_SHOW
        if any(has_episode_marker(f.name) or has_date_marker(f.name) for f in media_files):
            return MediaType.TV_SHOW
        return MediaType.MOVIE

    def _walk_episodes(
        self,
        directory: Path,
        root: Path,
        media_files: list[Path],
        episodes: list[Episode],
        excluded: list[Path],
    ) -> int:
        """Recursively collect episodes below *directory*. Returns the unparsed count."""
        unparsed = 0
        for child in self._list(directory):
            is_dir = filesystem.is_directory(child)
            if self._is_excluded(child.name, is_dir):
                excluded.append(child)
                continue
            if is_dir:
                unparsed += self._walk_episodes(child, root, media_files, episodes, excluded)
                continue
            if self._is_unwanted_file(child):
                excluded.append(child)
                continue
            if not is_video_file(child):
                continue

            media_files.append(child)
            episode = self._parse_episode_file(child, root)
            if episode is None:
                log.debug("Could not parse episode info from %s", child.name)
                unparsed += 1
            else:
                episodes.append(episode)
        return unparsed

    def _parse_episode_file(self, path: Path, root: Path) -> Episode | None:
        parsed = parse_episode(path.stem)
        if parsed is None:
            return None

        folder_season = season_from_path(path, root)
        if parsed.season is not None:
            season = parsed.season
        elif folder_season is not None:
            season = folder_season
        else:
            season = DEFAULT_SEASON

        return Episode(
            season=season,
            episode=parsed.episode,
            source_path=path,
            title=parsed.title,
            air_date=parsed.air_date,
        )
