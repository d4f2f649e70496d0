"""TMDB genre tables and image constants.

Placed in models so both the catalog client and the API layer can import
them without creating a layer violation.
"""

from __future__ import annotations

MOVIE_GENRES: dict[int, str] = {
    28: "Action",
    12: "Adventure",
    16: "Animation",
    35: "Comedy",
    80: "Crime",
    99: "Documentary",
    18: "Drama",
    10751: "Family",
    14: "Fantasy",
    36: "History",
    27: "Horror",
    10402: "Music",
    9648: "Mystery",
    10749: "Romance",
    878: "Sci-Fi",
    10770: "TV Movie",
    53: "Thriller",
    10752: "War",
    37: "Western",
}

TV_GENRES: dict[int, str] = {
    10759: "Action & Adventure",
    16: "Animation",
    35: "Comedy",
    80: "Crime",
    99: "Documentary",
    18: "Drama",
    10751: "Family",
    10762: "Kids",
    9648: "Mystery",
    10763: "News",
    10764: "Reality",
    10765: "Sci-Fi & Fantasy",
    10766: "Soap",
    10767: "Talk",
    10768: "War & Politics",
    37: "Western",
}

# TV names win on shared ids (they are identical for every shared id anyway).
ALL_GENRES: dict[int, str] = {**MOVIE_GENRES, **TV_GENRES}

# Genres offered on the setup form, in display order.
GENRE_OPTIONS: list[tuple[int, str]] = [
    (28, "Action"),
    (12, "Adventure"),
    (16, "Animation"),
    (35, "Comedy"),
    (80, "Crime"),
    (99, "Documentary"),
    (18, "Drama"),
    (10751, "Family"),
    (14, "Fantasy"),
    (36, "History"),
    (27, "Horror"),
    (9648, "Mystery"),
    (10749, "Romance"),
    (878, "Sci-Fi"),
    (53, "Thriller"),
    (10752, "War"),
    (37, "Western"),
]

TMDB_IMAGE_BASE = "https://image.tmdb.org/t/p"
POSTER_SIZE = "/w500"
BACKDROP_SIZE = "/w1280"
PROFILE_SIZE = "/w185"
LOGO_SIZE = "/w92"


def resolve_genre_names(genre_ids: list[int] | tuple[int, ...]) -> tuple[str, ...]:
    """Map TMDB genre ids to names, dropping ids we don't know."""
    return tuple(ALL_GENRES[gid] for gid in genre_ids if gid in ALL_GENRES)


def image_url(path: str | None, size: str = POSTER_SIZE) -> str | None:
    """Build a full TMDB image URL, or None if the item has no image."""
    if not path:
        return None
    return f"{TMDB_IMAGE_BASE}{size}{path}"
