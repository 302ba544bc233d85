"""Lookup client for The Movie Database (TMDB) v3 API.

Searches by title, reads the IMDb ID of the best match, and fetches episode
titles. Requests are spaced out, retried on network errors, and a 429
response waits for the server's ``Retry-After``.
"""
import logging
import os
import re
import time
from datetime import datetime, timezone
from difflib import SequenceMatcher
from email.utils import parsedate_to_datetime
from pathlib import Path
from typing import Any

import requests
from dotenv import dotenv_values

from .errors import (
    InvalidResponseError,
    MissingCredentialError,
    MissingExternalIDError,
    NoResultsError,
)
from .lookup import SearchResult
from .models import MediaType

log = logging.getLogger(__name__)


TMDB_BASE_URL = "https://api.themoviedb.org/3"
API_KEY_VARIABLE = "TMDB_API_KEY"
DEFAULT_LANGUAGE = "en-US"
DEFAULT_TIMEOUT = 10
MAX_ATTEMPTS = 3
RATE_LIMIT_DELAY = 0.25  # seconds between two requests
RETRY_DELAY = 1

MISSING_KEY_MESSAGE = (
    f"No TMDB API key configured. Set {API_KEY_VARIABLE} in the environment, "
    f"in a .env file (current or home directory) or in settings.json. "
    f"Keys are free at https://www.themoviedb.org/settings/api"
)


def env_file_candidates() -> list[Path]:
    return [Path.cwd() / ".env", Path.home() / ".env"]


def load_api_key() -> str | None:
    """
    Find the TMDB API key.

    The environment wins; otherwise the first .env file that defines
    ``TMDB_API_KEY`` is used. The .env files are read, not exported.

    Returns:
        The key, or None if none is configured
    """
    if os.environ.get(API_KEY_VARIABLE):
        return os.environ[API_KEY_VARIABLE]

    for env_file in env_file_candidates():
        if not env_file.is_file():
            continue
        value = dotenv_values(env_file).get(API_KEY_VARIABLE)
        if value:
            log.debug("Using TMDB API key from %s", env_file)
            return value
    return None


def normalize_for_comparison(text: str) -> str:
    """Lowercase, drop punctuation, single spaces."""
    words = re.sub(r'[^\w\s]', '', text.lower()).split()
    return " ".join(words)


def similarity_score(first: str, second: str) -> float:
    """0.0 - 1.0 similarity of two titles after normalization."""
    matcher = SequenceMatcher(None, normalize_for_comparison(first), normalize_for_comparison(second))
    return matcher.ratio()


def _year_from_date(value: str | None) -> int | None:
    # TMDB dates are "YYYY-MM-DD" or empty
    if value and value[:4].isdigit():
        return int(value[:4])
    return None


def retry_after_seconds(value: str | None) -> float:
    """
    Seconds to wait for a ``Retry-After`` header.

    The header is either a number of seconds or an HTTP date. Anything
    unreadable falls back to RETRY_DELAY.
    """
    if not value:
        return RETRY_DELAY
    try:
        return max(0, int(value))
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        log.debug("Unreadable Retry-After header: %r", value)
        return RETRY_DELAY
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max(0.0, (when - datetime.now(timezone.utc)).total_seconds())


def _result_id(result: Any, endpoint: str) -> int:
    # Search and find results must carry a numeric id
    raw_id = result.get("id") if isinstance(result, dict) else None
    try:
        return int(raw_id)
    except (TypeError, ValueError) as e:
        raise InvalidResponseError(f"{endpoint} returned a result without a valid id") from e


class TMDBClient:
    """LookupClient backed by TMDB.

    Provider IDs are TMDB movie / TV IDs; external IDs are IMDb IDs.
    """

    def __init__(
        self,
        api_key: str | None = None,
        language: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        """
        Args:
            api_key: TMDB v3 API key; found with load_api_key() when omitted
            language: Language tag for titles, e.g. "en-US"
            timeout: Seconds before a single request is abandoned
            session: requests session to reuse

        Raises:
            MissingCredentialError: If no API key can be found
        """
        self.api_key = api_key or load_api_key()
        if not self.api_key:
            raise MissingCredentialError(MISSING_KEY_MESSAGE)
        self.language = language or DEFAULT_LANGUAGE
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self._next_request_at = 0.0

    def _wait_for_slot(self) -> None:
        delay = self._next_request_at - time.monotonic()
        if delay > 0:
            time.sleep(delay)
        self._next_request_at = time.monotonic() + RATE_LIMIT_DELAY

    def _get(self, endpoint: str, **params: Any) -> dict | None:
        """
        GET an API endpoint.

        Returns:
            The JSON object, or None for a 404

        Raises:
            InvalidResponseError: After MAX_ATTEMPTS failed attempts, or if the
                body is not a JSON object
        """
        query = {"api_key": self.api_key, "language": self.language, **params}
        log.debug("GET %s %s", endpoint, params)

        failure: str = "rate limited"
        for attempt in range(1, MAX_ATTEMPTS + 1):
            self._wait_for_slot()
            try:
                response = self.session.get(
                    TMDB_BASE_URL + endpoint, params=query, timeout=self.timeout
                )
            except requests.exceptions.RequestException as e:
                failure = str(e)
                log.debug("%s failed (attempt %d/%d): %s", endpoint, attempt, MAX_ATTEMPTS, e)
                if attempt < MAX_ATTEMPTS:
                    time.sleep(RETRY_DELAY)
                continue

            if response.status_code == 429:
                failure = "rate limited"
                wait = retry_after_seconds(response.headers.get("Retry-After"))
                log.debug("%s rate limited, retrying in %ss", endpoint, wait)
                if attempt < MAX_ATTEMPTS:
                    time.sleep(wait)
                continue
            if response.status_code == 404:
                return None

            try:
                response.raise_for_status()
                data = response.json()
            except requests.exceptions.HTTPError as e:
                failure = str(e)
                log.debug("%s returned %s (attempt %d/%d)", endpoint, response.status_code, attempt, MAX_ATTEMPTS)
                continue
            except ValueError as e:
                raise InvalidResponseError(f"{endpoint} did not return JSON") from e

            if not isinstance(data, dict):
                raise InvalidResponseError(f"{endpoint} did not return a JSON object")
            return data

        raise InvalidResponseError(f"{endpoint} failed after {MAX_ATTEMPTS} attempts: {failure}")

    def _choose_best_match(
        self,
        results: list[dict],
        title: str,
        year: int | None,
        media_type: MediaType
    ) -> dict:
        """Pick the result whose title and year fit best; popularity breaks ties."""
        is_movie = media_type == MediaType.MOVIE
        name_keys = ("title", "original_title") if is_movie else ("name", "original_name")
        date_key = "release_date" if is_movie else "first_air_date"
        wanted = normalize_for_comparison(title)

        def score(result: dict) -> float:
            names = [result.get(key) or "" for key in name_keys]
            value = max(similarity_score(title, name) for name in names)
            if wanted in (normalize_for_comparison(name) for name in names):
                value += 0.3
            result_year = _year_from_date(result.get(date_key))
            if year and result_year:
                if result_year == year:
                    value += 0.25
                elif abs(result_year - year) == 1:
                    value += 0.1
            popularity = result.get("popularity") or 0
            return value + min(popularity / 1000, 1.0) * 0.05

        return max(results, key=score)

    # -- LookupClient -----------------------------------------------

    def search(self, title: str, year: int | None, media_type: MediaType) -> SearchResult:
        """
        Search TMDB for a title.

        Args:
            title: Title to search for
            year: Optional release / first-air year
            media_type: Movie or TV show

        Returns:
            SearchResult for the best match

        Raises:
            NoResultsError: If TMDB has no match
            InvalidResponseError: If the request failed
        """
        params: dict[str, Any] = {"query": title}
        if media_type == MediaType.MOVIE:
            endpoint = "/search/movie"
            if year:
                params["year"] = year
        else:
            endpoint = "/search/tv"
            if year:
                params["first_air_date_year"] = year

        data = self._get(endpoint, **params)
        results = (data or {}).get("results") or []
        if not results:
            raise NoResultsError(f"No TMDB results for '{title}'")

        best = self._choose_best_match(results, title, year, media_type)
        provider_id = _result_id(best, endpoint)
        date_field = "release_date" if media_type == MediaType.MOVIE else "first_air_date"
        log.debug("TMDB match for '%s': id=%s", title, provider_id)
        return SearchResult(
            provider_id=provider_id,
            candidate_year=_year_from_date(best.get(date_field)),
        )

    def fetch_external_id(self, provider_id: int, media_type: MediaType) -> str | None:
        """Return the IMDb ID TMDB has on file for a movie or show."""
        if media_type == MediaType.MOVIE:
            data = self._get(f"/movie/{provider_id}")
        else:
            data = self._get(f"/tv/{provider_id}/external_ids")
        imdb_id = (data or {}).get("imdb_id")
        if not imdb_id:
            raise MissingExternalIDError(f"TMDB {media_type.value} {provider_id} has no IMDb ID")
        return imdb_id

    def fetch_episode_title(self, provider_id: int, season: int, episode: int) -> str | None:
        data = self._get(f"/tv/{provider_id}/season/{season}/episode/{episode}")
        if not data:
            raise NoResultsError(f"TMDB has no s{season:02d}e{episode:02d} for show {provider_id}")
        return data.get("name") or None

    def find_provider_id(self, external_id: str, media_type: MediaType) -> int | None:
        """Translate an IMDb ID into the TMDB ID of a movie or show."""
        data = self._get(f"/find/{external_id}", external_source="imdb_id")
        key = "movie_results" if media_type == MediaType.MOVIE else "tv_results"
        results = (data or {}).get(key) or []
        if not results:
            return None
        return _result_id(results[0], "/find")
