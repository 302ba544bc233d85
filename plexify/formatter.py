"""Formatter module for generating Plex-style folder and file names.

Formats:
    Movie:          Title (Year) {edition-X} {imdb-ttXXXXXXX}
    TV show folder: Show (Year) {imdb-ttXXXXXXX}
    Season folder:  Season 01
    Episode:        Show (Year) - s01e01 - Title.ext
    Dated episode:  Show (Year) - 2020-01-15 - Title.ext
"""
import re
from datetime import date

from .sanitizer import sanitize


EXTERNAL_ID_TAG = "imdb"
EDITION_TAG = "edition"


def clean_title(title: str) -> str:
    """
    Strip naming artifacts a title may already carry.

    Removes any ``{...}`` tag block (and everything after it), ``(YYYY)``
    tokens and a trailing bare year, then collapses whitespace. This keeps
    an already-formatted folder name from being tagged twice.

    Args:
        title: Raw title, possibly a previously formatted folder name

    Returns:
        The bare title
    """
    brace = title.find('{')
    if brace != -1:
        title = title[:brace]
    title = re.sub(r'\(\d{4}\)', '', title)
    title = re.sub(r'\s(?:19|20)\d{2}$', '', title.rstrip())
    title = re.sub(r'\s{2,}', ' ', title)
    return title.strip()


def _join(parts: list[str]) -> str:
    return " ".join(part for part in parts if part)


def _year_part(year: int | None) -> str:
    return f"({year})" if year is not None else ""


def _tag(name: str, value: str | None) -> str:
    return f"{{{name}-{value}}}" if value else ""


def _with_extension(base_name: str, extension: str | None) -> str:
    extension = (extension or "").lstrip('.')
    return f"{base_name}.{extension}" if extension else base_name


def format_movie_name(
    title: str,
    year: int | None = None,
    external_id: str | None = None,
    edition: str | None = None
) -> str:
    """
    Format a movie folder / file base name.

    Args:
        title: Movie title
        year: Release year
        external_id: IMDb ID (e.g. 'tt0133093')
        edition: Edition label such as "Director's Cut"

    Returns:
        Name without extension, e.g. 'The Matrix (1999) {imdb-tt0133093}'
    """
    edition = sanitize(edition) if edition else None
    return _join([
        sanitize(clean_title(title)),
        _year_part(year),
        _tag(EDITION_TAG, edition),
        _tag(EXTERNAL_ID_TAG, external_id),
    ])


def format_tv_show_folder_name(
    title: str,
    year: int | None = None,
    external_id: str | None = None
) -> str:
    """Format a TV show folder name: ``Show (Year) {imdb-ttXXXXXXX}``."""
    return _join([
        sanitize(clean_title(title)),
        _year_part(year),
        _tag(EXTERNAL_ID_TAG, external_id),
    ])


def format_season_folder_name(season_number: int) -> str:
    """Season folders are always zero padded, specials included ('Season 00')."""
    return f"Season {season_number:02d}"


def format_episode_code(season: int, episode: int) -> str:
    return f"s{season:02d}e{episode:02d}"


def _format_episode(
    show_title: str,
    year: int | None,
    marker: str,
    episode_title: str | None,
    extension: str | None
) -> str:
    parts = [sanitize(clean_title(show_title)), _year_part(year), "-", marker]
    episode_title = sanitize(episode_title) if episode_title else ""
    if episode_title:
        parts.extend(["-", episode_title])
    return _with_extension(_join(parts), extension)


def format_tv_episode_name(
    show_title: str,
    year: int | None,
    season: int,
    episode: int,
    episode_title: str | None = None,
    extension: str | None = ""
) -> str:
    """
    Format a season-based episode file name.

    Args:
        show_title: Show title
        year: First-air year
        season: Season number
        episode: Episode number
        episode_title: Optional episode title
        extension: File extension, with or without the leading dot

    Returns:
        e.g. 'Band of Brothers (2001) - s01e01 - Currahee.mkv'
    """
    return _format_episode(
        show_title, year, format_episode_code(season, episode), episode_title, extension
    )


def format_tv_episode_name_date_based(
    show_title: str,
    year: int | None,
    air_date: date,
    episode_title: str | None = None,
    extension: str | None = ""
) -> str:
    """Format an air-date episode name: ``Show (Year) - YYYY-MM-DD - Title.ext``."""
    return _format_episode(
        show_title, year, air_date.strftime("%Y-%m-%d"), episode_title, extension
    )
