"""Rename plan construction. Pure: nothing here touches the filesystem."""
from pathlib import Path

from .formatter import (
    format_movie_name,
    format_season_folder_name,
    format_tv_episode_name,
    format_tv_episode_name_date_based,
    format_tv_show_folder_name,
)
from .models import Episode, FileRename, MediaItem, MediaType, RenamePlan, SeasonFolder


MISSING_ID_WARNING = "Missing IMDb ID: Plex may not match this item reliably"
MISSING_YEAR_WARNING = "Missing year: Plex may pick the wrong release"
MULTIPLE_FILES_WARNING = "Multiple files detected: every file will get the movie name"
EPISODES_REQUIRED_WARNING = "Episode information is required for TV shows"
NO_ORGANIZATION_WARNING = "Episodes cannot be organized into season folders; files keep their names"


def _extension(path: Path) -> str:
    return path.suffix.lstrip('.')


def _metadata_warnings(media: MediaItem) -> list[str]:
    warnings = []
    if not media.external_id:
        warnings.append(MISSING_ID_WARNING)
    if media.year is None:
        warnings.append(MISSING_YEAR_WARNING)
    return warnings


def build_plan(media: MediaItem, file_paths: list[Path]) -> RenamePlan:
    """
    Build the rename plan for a media item.

    Args:
        media: Classified and (possibly) resolved media item
        file_paths: Media files found by the scanner

    Returns:
        RenamePlan describing the target folder name, the file renames
        and, for TV shows, the season folders
    """
    if media.media_type == MediaType.MOVIE:
        return build_movie_plan(media, file_paths)
    return build_tv_show_plan(media, file_paths)


def build_movie_plan(media: MediaItem, file_paths: list[Path]) -> RenamePlan:
    """Folder and every file share one name: ``Title (Year) {imdb-tt...}``."""
    name = format_movie_name(media.title, media.year, media.external_id, media.edition)

    renames = []
    for path in file_paths:
        extension = _extension(path)
        renames.append(FileRename(
            source_path=path,
            target_name=f"{name}.{extension}" if extension else name,
        ))

    warnings = _metadata_warnings(media)
    if len(file_paths) > 1:
        warnings.append(MULTIPLE_FILES_WARNING)

    return RenamePlan(
        source_folder_path=media.source_folder_path,
        target_folder_name=name,
        file_renames=renames,
        season_folders=None,
        warnings=warnings,
    )


def _episode_file_name(media: MediaItem, episode: Episode) -> str:
    extension = _extension(episode.source_path)
    if episode.air_date is not None:
        return format_tv_episode_name_date_based(
            media.title, media.year, episode.air_date, episode.title, extension
        )
    return format_tv_episode_name(
        media.title, media.year, episode.season, episode.episode, episode.title, extension
    )


def build_tv_show_plan(media: MediaItem, file_paths: list[Path]) -> RenamePlan:
    """
    Episodes go into ``Season NN`` folders, ordered by season.

    Without episode data every file keeps its own name at the show root.
    """
    folder_name = format_tv_show_folder_name(media.title, media.year, media.external_id)
    warnings = _metadata_warnings(media)

    if not media.episodes:
        renames = [FileRename(source_path=path, target_name=path.name) for path in file_paths]
        warnings.extend([EPISODES_REQUIRED_WARNING, NO_ORGANIZATION_WARNING])
        return RenamePlan(
            source_folder_path=media.source_folder_path,
            target_folder_name=folder_name,
            file_renames=renames,
            season_folders=None,
            warnings=warnings,
        )

    episodes = sorted(media.episodes, key=lambda ep: ep.season)
    seasons = sorted({ep.season for ep in episodes})

    return RenamePlan(
        source_folder_path=media.source_folder_path,
        target_folder_name=folder_name,
        file_renames=[
            FileRename(
                source_path=episode.source_path,
                target_name=_episode_file_name(media, episode),
                season_number=episode.season,
            )
            for episode in episodes
        ],
        season_folders=[
            SeasonFolder(season_number=season, target_name=format_season_folder_name(season))
            for season in seasons
        ],
        warnings=warnings,
    )
