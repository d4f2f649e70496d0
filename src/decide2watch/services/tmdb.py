"""TMDB catalog client: supplies and enriches the items a bracket is played over.

Three ways to fill a bracket:
1. ``fetch_trending``: /trending/{movie|tv|all}/week
2. ``fetch_by_genre``: /discover/{movie|tv} sorted by popularity
3. ``fetch_by_search``: /search/multi

TMDB pages hold 20 results, so each fetch keeps paging until it has enough
items or runs out of pages. It may return fewer than requested; the
tournament reducer turns a short list into a Fail.

Enrichment (``enrich_item`` / ``enrich_all``) adds runtime, season counts,
tagline, top-5 cast and watch providers with a single details call per item.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Callable
from typing import Any

import httpx

from decide2watch.config import Settings
from decide2watch.models.genres import resolve_genre_names
from decide2watch.models.media import CastMember, MediaItem, MediaType, WatchProvider
from decide2watch.models.tournament import ContentFilter, TournamentConfig

logger = logging.getLogger(__name__)

MAX_CAST = 5
DEFAULT_ENRICH_BATCH_SIZE = 5

# Provider lists are read in this order; the first occurrence of a provider wins.
_PROVIDER_TYPES = ("flatrate", "free", "rent", "buy")


class TmdbError(Exception):
    """Raised when the TMDB API returns an error or an unusable response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


def map_raw_item(raw: dict[str, Any], forced_type: MediaType | None = None) -> MediaItem:
    """Convert a TMDB list result into a MediaItem.

    Movies carry ``title``/``release_date``; TV shows carry
    ``name``/``first_air_date``. ``forced_type`` is used by endpoints that
    don't include ``media_type`` in their results.
    """
    media_type: MediaType = forced_type or raw.get("media_type") or "movie"
    if media_type == "movie":
        title = raw.get("title") or "Unknown"
        release_date = raw.get("release_date") or ""
    else:
        title = raw.get("name") or "Unknown"
        release_date = raw.get("first_air_date") or ""
    genre_ids = raw.get("genre_ids") or []
    return MediaItem(
        id=raw["id"],
        media_type=media_type,
        title=title,
        poster_path=raw.get("poster_path"),
        backdrop_path=raw.get("backdrop_path"),
        overview=raw.get("overview") or "No synopsis available.",
        vote_average=raw.get("vote_average", 0.0),
        vote_count=raw.get("vote_count", 0),
        genre_ids=genre_ids,
        genres=resolve_genre_names(genre_ids),
        release_date=release_date,
        popularity=raw.get("popularity", 0.0),
    )


def _pick_region(results: dict[str, Any], region: str) -> dict[str, Any] | None:
    """Prefer ``region``; otherwise fall back to the first region listed."""
    if region in results:
        return results[region]
    return next(iter(results.values()), None)


def extract_watch_providers(payload: dict[str, Any], region: str = "US") -> list[WatchProvider]:
    """Flatten a ``watch/providers`` block into one de-duplicated list."""
    results = (payload.get("watch/providers") or {}).get("results") or {}
    region_data = _pick_region(results, region)
    if not region_data:
        return []

    providers: list[WatchProvider] = []
    seen: set[int] = set()
    for provider_type in _PROVIDER_TYPES:
        for p in region_data.get(provider_type) or []:
            if p["provider_id"] in seen:
                continue
            seen.add(p["provider_id"])
            providers.append(
                WatchProvider(
                    provider_id=p["provider_id"],
                    provider_name=p["provider_name"],
                    logo_path=p.get("logo_path") or "",
                    type=provider_type,
                )
            )
    return providers


def extract_cast(payload: dict[str, Any], limit: int = MAX_CAST) -> list[CastMember]:
    """Top-billed cast from a ``credits`` block."""
    cast = (payload.get("credits") or {}).get("cast") or []
    return [
        CastMember(
            id=c["id"],
            name=c["name"],
            character=c.get("character") or "",
            profile_path=c.get("profile_path"),
        )
        for c in cast[:limit]
    ]


class TmdbClient:
    """Async TMDB v3 client.

    Pass ``http_client`` to share a connection pool (the app does) or to
    inject a mock transport in tests. A client created here is owned here
    and closed by ``aclose()``.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.themoviedb.org/3",
        language: str = "en-US",
        region: str = "US",
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.language = language
        self.region = region
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    @classmethod
    def from_settings(
        cls, settings: Settings, http_client: httpx.AsyncClient | None = None
    ) -> TmdbClient:
        return cls(
            settings.tmdb_api_key,
            base_url=settings.tmdb_base_url,
            language=settings.tmdb_language,
            region=settings.tmdb_region,
            timeout=settings.tmdb_timeout_seconds,
            http_client=http_client,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> TmdbClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def _get(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        query = {"api_key": self.api_key, "language": self.language, **(params or {})}
        try:
            resp = await self._client.get(f"{self.base_url}{path}", params=query)
        except httpx.HTTPError as exc:
            raise TmdbError(f"TMDB request failed: {exc}") from exc
        if resp.is_error:
            raise TmdbError(
                f"TMDB API error: {resp.status_code} {resp.reason_phrase}",
                status_code=resp.status_code,
            )
        result: dict[str, Any] = resp.json()
        return result

    async def _collect(
        self,
        path: str,
        count: int,
        params: dict[str, str] | None = None,
        keep: Callable[[dict[str, Any]], bool] | None = None,
        forced_type: MediaType | None = None,
    ) -> list[MediaItem]:
        """Page through a list endpoint until ``count`` items are collected."""
        items: list[MediaItem] = []
        page = 1
        while len(items) < count:
            data = await self._get(path, {**(params or {}), "page": str(page)})
            for raw in data.get("results") or []:
                if keep is None or keep(raw):
                    items.append(map_raw_item(raw, forced_type))
            if page >= data.get("total_pages", 1):
                break
            page += 1
        logger.debug("tmdb_collect path=%s pages=%d items=%d", path, page, len(items))
        return items[:count]

    async def fetch_trending(self, content_filter: ContentFilter, count: int) -> list[MediaItem]:
        """This week's trending titles. For ``both``, people are filtered out."""
        if content_filter == "both":
            return await self._collect(
                "/trending/all/week",
                count,
                keep=lambda raw: raw.get("media_type") in ("movie", "tv"),
            )
        return await self._collect(
            f"/trending/{content_filter}/week", count, forced_type=content_filter
        )

    async def fetch_by_genre(
        self, content_filter: ContentFilter, genre_id: int, count: int
    ) -> list[MediaItem]:
        """Most popular titles in a genre. ``both`` splits the count between types."""
        types: list[MediaType] = ["movie", "tv"] if content_filter == "both" else [content_filter]
        per_type = math.ceil(count / 2) if content_filter == "both" else count
        items: list[MediaItem] = []
        for media_type in types:
            items.extend(
                await self._collect(
                    f"/discover/{media_type}",
                    per_type,
                    params={"with_genres": str(genre_id), "sort_by": "popularity.desc"},
                    forced_type=media_type,
                )
            )
        return items[:count]

    async def fetch_by_search(
        self, query: str, content_filter: ContentFilter, count: int
    ) -> list[MediaItem]:
        """Free-text search across movies and TV."""
        allowed = ("movie", "tv") if content_filter == "both" else (content_filter,)
        return await self._collect(
            "/search/multi",
            count,
            params={"query": query},
            keep=lambda raw: raw.get("media_type") in allowed,
        )

    async def fetch_items(self, config: TournamentConfig) -> list[MediaItem]:
        """Fetch ``config.bracket_size`` candidates.

        A search query wins over a genre; with neither, trending is used.
        """
        count = config.bracket_size
        if config.search_query:
            return await self.fetch_by_search(config.search_query, config.content_filter, count)
        if config.genre_id is not None:
            return await self.fetch_by_genre(config.content_filter, config.genre_id, count)
        return await self.fetch_trending(config.content_filter, count)

    async def enrich_item(self, item: MediaItem) -> MediaItem:
        """Return a copy of ``item`` with details, cast and watch providers filled in."""
        data = await self._get(
            f"/{item.media_type}/{item.id}",
            {"append_to_response": "credits,watch/providers"},
        )
        return item.model_copy(
            update={
                "runtime": data.get("runtime"),
                "number_of_seasons": data.get("number_of_seasons"),
                "number_of_episodes": data.get("number_of_episodes"),
                "tagline": data.get("tagline") or None,
                "cast": tuple(extract_cast(data)),
                "watch_providers": tuple(extract_watch_providers(data, self.region)),
            }
        )

    async def enrich_all(
        self,
        items: list[MediaItem],
        batch_size: int = DEFAULT_ENRICH_BATCH_SIZE,
        on_progress: Callable[[int], None] | None = None,
    ) -> list[MediaItem]:
        """Enrich items in concurrent batches, preserving order.

        Batching keeps us under TMDB's rate limit. ``on_progress`` receives
        the completed percentage after each batch.
        """
        enriched: list[MediaItem] = []
        for start in range(0, len(items), batch_size):
            batch = items[start : start + batch_size]
            enriched.extend(await asyncio.gather(*(self.enrich_item(i) for i in batch)))
            if on_progress is not None:
                on_progress(round(len(enriched) / len(items) * 100))
        return enriched
