"""External ID resolution with manual override, cache and provider lookup.

Lookups never fail the pipeline: every ``MetadataLookupError`` is logged
and turned into "no result", leaving the item for manual correction.
"""
from __future__ import annotations

import logging
from dataclasses import replace

from .cache import ExternalIDCache
from .errors import MetadataLookupError, MissingExternalIDError
from .lookup import LookupClient
from .models import Episode, LookupResult, MediaItem

log = logging.getLogger(__name__)


class MetadataResolver:
    """Resolves external IDs for media items.

    Precedence, first match wins:
      1. a manual external ID on the item
      2. an external ID already on the item
      3. the cache, then the lookup client (result is cached)
    """

    def __init__(self, client: LookupClient, cache: ExternalIDCache | None = None):
        self._client = client
        self._cache = cache

    def resolve_result(self, item: MediaItem, require_year: bool = False) -> LookupResult | None:
        """
        Resolve the external ID for *item*.

        Args:
            item: The media item to resolve
            require_year: When the item has no year, skip the cache-only
                shortcut and ask the provider so its year can be used

        Returns:
            LookupResult, or None when nothing could be found
        """
        if item.external_id_is_manual:
            log.debug("Using manual external ID %s for '%s'", item.external_id, item.title)
            return LookupResult(item.external_id, provider_id=item.external_lookup_id)

        if item.external_id:
            return LookupResult(item.external_id, provider_id=item.external_lookup_id)

        cached = None
        if self._cache is not None:
            cached = self._cache.get(item.title, item.year, item.media_type)
        if cached and not (require_year and item.year is None):
            log.debug("Cache hit for '%s': %s", item.title, cached)
            return LookupResult(cached)

        try:
            result = self._lookup(item)
        except MetadataLookupError as e:
            log.warning("Lookup failed for '%s': %s", item.title, e)
            return LookupResult(cached) if cached else None

        if self._cache is not None:
            self._cache.set(item.title, item.year, item.media_type, result.external_id)
        return result

    def _lookup(self, item: MediaItem) -> LookupResult:
        found = self._client.search(item.title, item.year, item.media_type)
        external_id = found.candidate_external_id
        if not external_id:
            external_id = self._client.fetch_external_id(found.provider_id, item.media_type)
        if not external_id:
            raise MissingExternalIDError(f"No external ID for '{item.title}'")
        log.info("Resolved '%s' -> %s", item.title, external_id)
        return LookupResult(
            external_id=external_id,
            year=found.candidate_year,
            provider_id=found.provider_id,
        )

    def resolve_item(self, item: MediaItem, require_year: bool = False) -> MediaItem:
        """Return a copy of *item* carrying the resolved ID, year and provider ID."""
        result = self.resolve_result(item, require_year=require_year)
        if result is None:
            return item
        return item.with_lookup(result)

    def _provider_id_for(self, item: MediaItem) -> int | None:
        if item.external_lookup_id is not None:
            return item.external_lookup_id
        if not item.external_id:
            return None
        try:
            return self._client.find_provider_id(item.external_id, item.media_type)
        except MetadataLookupError as e:
            log.warning("Could not find provider ID for %s: %s", item.external_id, e)
            return None

    def enrich_episode_titles(self, item: MediaItem, provider_id: int | None = None) -> MediaItem:
        """
        Replace parsed episode titles with the provider's titles.

        Episodes without a number (air-date episodes) are left alone, and
        an episode whose fetch fails keeps its parsed title.

        Args:
            item: A TV show item with episodes
            provider_id: Provider show ID; looked up from the item if omitted

        Returns:
            A new item, or *item* itself if there was nothing to enrich
        """
        if not item.episodes:
            return item
        if provider_id is None:
            provider_id = self._provider_id_for(item)
        if provider_id is None:
            log.info("No provider ID for '%s', keeping parsed episode titles", item.title)
            return item

        episodes: list[Episode] = []
        for episode in item.episodes:
            if episode.episode == 0:
                episodes.append(episode)
                continue
            try:
                title = self._client.fetch_episode_title(provider_id, episode.season, episode.episode)
            except MetadataLookupError as e:
                log.debug(
                    "No title for s%02de%02d: %s", episode.season, episode.episode, e
                )
                title = None
            episodes.append(replace(episode, title=title) if title else episode)

        return replace(item, episodes=tuple(episodes), external_lookup_id=provider_id)
