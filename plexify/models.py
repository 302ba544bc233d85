"""Data models for the plexify package."""
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from pathlib import Path


class MediaType(Enum):
    """Classification of a scanned folder."""
    MOVIE = "movie"
    TV_SHOW = "tv"


@dataclass(frozen=True)
class Episode:
    """One episode file found while scanning a TV show folder.

    ``season`` 0 is reserved for specials. ``episode`` 0 means the file
    carries no episode number (air-date based shows).
    """
    season: int
    episode: int
    source_path: Path
    title: str | None = None
    air_date: date | None = None


@dataclass(frozen=True)
class ParsedEpisode:
    """What one parser attempt read out of a filename stem.

    ``season`` is None when the filename itself does not name a season.
    """
    episode: int
    season: int | None = None
    title: str | None = None
    air_date: date | None = None


@dataclass(frozen=True)
class LookupResult:
    """What the resolver learned about a title."""
    external_id: str
    year: int | None = None
    provider_id: int | None = None


@dataclass(frozen=True)
class MediaItem:
    """A classified folder plus whatever metadata has been resolved for it.

    Instances are never mutated; the ``with_*`` helpers return a new item.
    """
    source_folder_path: Path
    title: str
    media_type: MediaType
    year: int | None = None
    external_id: str | None = None
    edition: str | None = None
    external_id_is_manual: bool = False
    episodes: tuple[Episode, ...] | None = None
    external_lookup_id: int | None = None

    def __post_init__(self):
        if self.external_id_is_manual and not self.external_id:
            raise ValueError("A manual external ID must not be empty")
        if self.episodes is not None and not isinstance(self.episodes, tuple):
            object.__setattr__(self, "episodes", tuple(self.episodes))

    def with_external_id(self, external_id: str, manual: bool = False) -> "MediaItem":
        return replace(self, external_id=external_id, external_id_is_manual=manual)

    def with_year(self, year: int | None) -> "MediaItem":
        return replace(self, year=year)

    def with_episodes(self, episodes) -> "MediaItem":
        return replace(self, episodes=tuple(episodes) if episodes is not None else None)

    def with_lookup(self, result: LookupResult) -> "MediaItem":
        """Fold a lookup result in without clobbering manual or known data."""
        external_id = self.external_id if self.external_id_is_manual else result.external_id
        return replace(
            self,
            external_id=external_id,
            year=self.year if self.year is not None else result.year,
            external_lookup_id=(
                result.provider_id if result.provider_id is not None
                else self.external_lookup_id
            ),
        )


@dataclass(frozen=True)
class FileRename:
    """Rename of a single file. ``season_number`` selects the season folder."""
    source_path: Path
    target_name: str
    season_number: int | None = None


@dataclass(frozen=True)
class SeasonFolder:
    season_number: int
    target_name: str


@dataclass(frozen=True)
class RenamePlan:
    """Declarative description of how a folder should look after renaming."""
    source_folder_path: Path
    target_folder_name: str
    file_renames: tuple[FileRename, ...] = ()
    season_folders: tuple[SeasonFolder, ...] | None = None
    warnings: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "file_renames", tuple(self.file_renames))
        object.__setattr__(self, "warnings", tuple(self.warnings))
        if self.season_folders is not None:
            object.__setattr__(self, "season_folders", tuple(self.season_folders))

        numbers = [s.season_number for s in self.season_folders or ()]
        if len(numbers) != len(set(numbers)):
            raise ValueError("Season folder numbers must be unique within a plan")
        for rename in self.file_renames:
            if rename.season_number is not None and rename.season_number not in numbers:
                raise ValueError(
                    f"No season folder for season {rename.season_number} "
                    f"({rename.source_path.name})"
                )

    def season_folder(self, season_number: int | None) -> SeasonFolder | None:
        if season_number is None:
            return None
        for folder in self.season_folders or ():
            if folder.season_number == season_number:
                return folder
        return None


@dataclass(frozen=True)
class ScanResult:
    """Outcome of scanning one folder."""
    folder_path: Path
    media_type: MediaType
    media_files: list[Path] = field(default_factory=list)
    excluded_items: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    episodes: list[Episode] | None = None
