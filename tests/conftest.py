"""Shared test fixtures."""

from collections.abc import Callable

import pytest

from decide2watch.config import Settings
from decide2watch.models.media import MediaItem


def _make_item(item_id: int, media_type: str = "movie") -> MediaItem:
    return MediaItem(
        id=item_id,
        media_type=media_type,
        title=f"Movie {item_id}",
        overview="",
        vote_average=7.0,
        vote_count=100,
        release_date="2024-01-01",
        popularity=100.0,
        runtime=120,
    )


@pytest.fixture
def settings() -> Settings:
    """Test settings with defaults."""
    return Settings(
        decide2watch_env="development",
        tmdb_api_key="test-key",
        tmdb_base_url="https://tmdb.test/3",
    )


@pytest.fixture
def make_items() -> Callable[[int], list[MediaItem]]:
    """Factory for ``n`` distinct movie items with ids 0..n-1."""

    def factory(n: int) -> list[MediaItem]:
        return [_make_item(i) for i in range(n)]

    return factory
