"""Media item models: the candidates a tournament is played over.

Items come from the TMDB catalog (see ``decide2watch.services.tmdb``).
They are frozen: enrichment returns a new item via ``model_copy``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

MediaType = Literal["movie", "tv"]
ProviderType = Literal["flatrate", "rent", "buy", "free"]


class CastMember(BaseModel):
    """A credited cast member."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    character: str = ""
    profile_path: str | None = None


class WatchProvider(BaseModel):
    """A streaming / rental / purchase option for an item."""

    model_config = ConfigDict(frozen=True)

    provider_id: int
    provider_name: str
    logo_path: str = ""
    type: ProviderType = "flatrate"


class MediaItem(BaseModel):
    """A movie or TV show competing in the bracket.

    Only ``id`` matters to the bracket engine; everything else is display
    metadata. The optional fields at the bottom are filled by enrichment.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    media_type: MediaType = "movie"
    title: str
    poster_path: str | None = None
    backdrop_path: str | None = None
    overview: str = ""
    vote_average: float = 0.0
    vote_count: int = 0
    genre_ids: tuple[int, ...] = ()
    genres: tuple[str, ...] = ()
    release_date: str = ""
    popularity: float = 0.0

    # Enrichment
    runtime: int | None = None
    number_of_seasons: int | None = None
    number_of_episodes: int | None = None
    tagline: str | None = None
    cast: tuple[CastMember, ...] = Field(default_factory=tuple)
    watch_providers: tuple[WatchProvider, ...] = Field(default_factory=tuple)

    @property
    def year(self) -> str:
        """Release year, or empty string if unknown."""
        return self.release_date[:4]

    @property
    def is_enriched(self) -> bool:
        return bool(self.cast or self.watch_providers or self.runtime or self.number_of_seasons)
