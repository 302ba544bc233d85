"""The metadata lookup capability consumed by the resolver.

``TMDBClient`` (tmdb.py) talks to the real service; ``StubLookupClient``
answers from fixed tables so the pipeline can be exercised offline.
"""
from dataclasses import dataclass
from typing import Protocol

from .errors import MissingExternalIDError, NoResultsError
from .models import MediaType


@dataclass(frozen=True)
class SearchResult:
    """Best search hit for a title."""
    provider_id: int
    candidate_external_id: str | None = None
    candidate_year: int | None = None


class LookupClient(Protocol):
    """Anything that can answer the resolver's questions.

    Methods raise ``MetadataLookupError`` subclasses on failure.
    """

    def search(self, title: str, year: int | None, media_type: MediaType) -> SearchResult:
        ...

    def fetch_external_id(self, provider_id: int, media_type: MediaType) -> str | None:
        ...

    def fetch_episode_title(self, provider_id: int, season: int, episode: int) -> str | None:
        ...

    def find_provider_id(self, external_id: str, media_type: MediaType) -> int | None:
        ...


def stub_key(title: str, year: int | None, media_type: MediaType) -> str:
    return f"{title}|{year or 0}|{media_type.value}"


class StubLookupClient:
    """Deterministic lookup client backed by dictionaries.

    Usage::

        stub = StubLookupClient({"The Matrix|1999|movie": "tt0133093"})
        stub.search("The Matrix", 1999, MediaType.MOVIE)

    Provider IDs are assigned in mapping order starting at 1.  ``calls``
    records every method invocation so tests can assert that no lookup
    happened.
    """

    def __init__(
        self,
        results: dict[str, str] | None = None,
        years: dict[str, int] | None = None,
        episode_titles: dict[tuple[int, int, int], str] | None = None,
    ):
        """
        Args:
            results: ``"title|year|movie"`` (or ``|tv``) -> external ID
            years: same keys -> year the provider reports
            episode_titles: ``(provider_id, season, episode)`` -> title
        """
        self.results = dict(results or {})
        self.years = dict(years or {})
        self.episode_titles = dict(episode_titles or {})
        self.calls: list[tuple] = []
        self._provider_ids = {key: index for index, key in enumerate(self.results, start=1)}

    def search(self, title: str, year: int | None, media_type: MediaType) -> SearchResult:
        self.calls.append(("search", title, year, media_type))
        key = stub_key(title, year, media_type)
        if key not in self.results:
            raise NoResultsError(f"No results for '{title}'")
        return SearchResult(
            provider_id=self._provider_ids[key],
            candidate_external_id=self.results[key],
            candidate_year=self.years.get(key),
        )

    def fetch_external_id(self, provider_id: int, media_type: MediaType) -> str | None:
        self.calls.append(("fetch_external_id", provider_id, media_type))
        for key, pid in self._provider_ids.items():
            if pid == provider_id and key.endswith(f"|{media_type.value}"):
                return self.results[key]
        raise MissingExternalIDError(f"No external ID for provider ID {provider_id}")

    def fetch_episode_title(self, provider_id: int, season: int, episode: int) -> str | None:
        self.calls.append(("fetch_episode_title", provider_id, season, episode))
        title = self.episode_titles.get((provider_id, season, episode))
        if title is None:
            raise NoResultsError(f"No episode s{season:02d}e{episode:02d}")
        return title

    def find_provider_id(self, external_id: str, media_type: MediaType) -> int | None:
        self.calls.append(("find_provider_id", external_id, media_type))
        for key, value in self.results.items():
            if value == external_id and key.endswith(f"|{media_type.value}"):
                return self._provider_ids[key]
        return None
