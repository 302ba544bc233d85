"""Parser module for extracting media information from file and folder names."""
import re
from datetime import date
from pathlib import Path
from typing import Callable

from .cleaner import clean_episode_title
from .models import ParsedEpisode


VIDEO_EXTENSIONS = {
    '.mp4', '.mkv', '.avi', '.mov', '.wmv', '.flv', '.webm', '.m4v',
    '.mpg', '.mpeg', '.3gp', '.ogv', '.ts', '.m2ts', '.vob'
}

# Classification markers
SEASON_EPISODE_MARKER = re.compile(r's\d+e\d+', re.IGNORECASE)
LONG_EPISODE_MARKER = re.compile(r'season\s*\d+\s*episode\s*\d+', re.IGNORECASE)
DATE_MARKER = re.compile(r'\d{4}-\d{2}-\d{2}')

# Episode patterns, tried in this order by parse_episode()
SEASON_EPISODE_PATTERN = re.compile(r's(\d{1,2})e(\d{1,2})', re.IGNORECASE)
LEADING_NUMBER_PATTERN = re.compile(r'^\s*(\d{1,3})(?:\D+?(.*))?$')
AIR_DATE_PATTERN = re.compile(r'(19\d{2}|20\d{2})[.\- ](\d{2})[.\- ](\d{2})')

# Season folders: "Season 1", "season02", "Specials"
SEASON_FOLDER_PATTERN = re.compile(r'season\s*(\d{1,2})', re.IGNORECASE)
SPECIALS_FOLDER = "specials"

FOLDER_YEAR_PATTERN = re.compile(r'\((\d{4})\)')
IMDB_ID_PATTERN = re.compile(r'\b(tt\d{7,10})\b')


def is_video_file(filepath: Path) -> bool:
    """Check if file is a video file based on extension."""
    return filepath.suffix.lower() in VIDEO_EXTENSIONS


def has_episode_marker(name: str) -> bool:
    """True for names like 'show.s01e02.mkv' or 'Season 1 Episode 2.mkv'."""
    return bool(SEASON_EPISODE_MARKER.search(name) or LONG_EPISODE_MARKER.search(name))


def has_date_marker(name: str) -> bool:
    return DATE_MARKER.search(name) is not None


def is_season_folder_name(name: str) -> bool:
    lowered = name.lower()
    return lowered.startswith("season") or lowered == SPECIALS_FOLDER


# ---------------------------------------------------------------------------
# Episode parser attempts
# ---------------------------------------------------------------------------

def parse_season_episode(stem: str) -> ParsedEpisode | None:
    """Parse 'Show.S01E04.Title' style names. The season comes from the name."""
    match = SEASON_EPISODE_PATTERN.search(stem)
    if not match:
        return None
    return ParsedEpisode(
        season=int(match.group(1)),
        episode=int(match.group(2)),
        title=clean_episode_title(stem[match.end():]),
    )


def parse_leading_number(stem: str) -> ParsedEpisode | None:
    """Parse '01', '01 - Title' or '01.Title'. No season information."""
    match = LEADING_NUMBER_PATTERN.match(stem)
    if not match:
        return None
    return ParsedEpisode(
        episode=int(match.group(1)),
        title=clean_episode_title(match.group(2)),
    )


def parse_air_date(stem: str) -> ParsedEpisode | None:
    """
    Parse air-date names such as 'Show 2020-01-15 Guest Name'.

    The episode number is the 0 sentinel. Dates that do not exist on the
    calendar are not a match.
    """
    match = AIR_DATE_PATTERN.search(stem)
    if not match:
        return None
    try:
        air_date = date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None
    return ParsedEpisode(
        episode=0,
        title=clean_episode_title(stem[match.end():]),
        air_date=air_date,
    )


EPISODE_PARSERS: tuple[Callable[[str], ParsedEpisode | None], ...] = (
    parse_season_episode,
    parse_leading_number,
    parse_air_date,
)


def parse_episode(stem: str) -> ParsedEpisode | None:
    """
    Run the episode parsers in priority order.

    Args:
        stem: Filename without extension

    Returns:
        The first successful parse, or None if no parser matched
    """
    for attempt in EPISODE_PARSERS:
        parsed = attempt(stem)
        if parsed is not None:
            return parsed
    return None


def season_from_path(filepath: Path, root: Path) -> int | None:
    """
    Find the season number implied by the folders between *root* and a file.

    The nearest matching ancestor wins. 'Specials' means season 0.

    Returns:
        Season number, or None if no ancestor names a season
    """
    try:
        relative = filepath.parent.relative_to(root)
    except ValueError:
        return None

    for component in reversed(relative.parts):
        if component.lower() == SPECIALS_FOLDER:
            return 0
        match = SEASON_FOLDER_PATTERN.search(component)
        if match:
            return int(match.group(1))
    return None


# ---------------------------------------------------------------------------
# Folder names and manual IDs
# ---------------------------------------------------------------------------

def extract_title(folder_name: str) -> str:
    """Folder name minus any '(YYYY)' token; the raw name if nothing is left."""
    cleaned = FOLDER_YEAR_PATTERN.sub('', folder_name).strip()
    return cleaned or folder_name


def extract_year(folder_name: str) -> int | None:
    match = FOLDER_YEAR_PATTERN.search(folder_name)
    if match:
        return int(match.group(1))
    return None


def parse_imdb_id(text: str) -> str | None:
    """
    Read an IMDb ID typed by the user.

    Supports:
    - tt0133093
    - https://www.imdb.com/title/tt0133093/

    Returns:
        The 'tt' ID, or None if the text does not contain one
    """
    match = IMDB_ID_PATTERN.search(text.strip())
    if match:
        return match.group(1)
    return None
