"""Loading flow: fetch, shuffle, enrich, then hand the items to the controller.

All the async work happens here, outside the reducer. The controller only
ever sees BeginLoad, then either ItemsReady or Fail.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from typing import Protocol

import httpx

from decide2watch.core.bracket import shuffle_items
from decide2watch.core.tournament import TournamentController
from decide2watch.models.media import MediaItem
from decide2watch.models.tournament import (
    BeginLoad,
    Fail,
    ItemsReady,
    TournamentConfig,
    TournamentState,
)
from decide2watch.services.tmdb import DEFAULT_ENRICH_BATCH_SIZE, TmdbError

logger = logging.getLogger(__name__)


class ItemSource(Protocol):
    """Anything that can supply and enrich candidate items (TmdbClient in production)."""

    async def fetch_items(self, config: TournamentConfig) -> list[MediaItem]: ...

    async def enrich_all(
        self,
        items: list[MediaItem],
        batch_size: int = ...,
        on_progress: Callable[[int], None] | None = ...,
    ) -> list[MediaItem]: ...


async def load_tournament(
    controller: TournamentController,
    source: ItemSource,
    *,
    enrich: bool = True,
    batch_size: int = DEFAULT_ENRICH_BATCH_SIZE,
    rng: random.Random | None = None,
    on_progress: Callable[[int], None] | None = None,
) -> TournamentState:
    """Fill a bracket for the controller's current config.

    Any error from the source becomes a Fail event with a readable message; a short
    supply is rejected by the reducer's item-count check.

    Args:
        controller: The tournament to load into.
        source: Item source (fetch + enrich).
        enrich: Whether to fetch cast / providers before starting.
        batch_size: Concurrent enrichment requests per batch.
        rng: Random source for the opening-round shuffle.
        on_progress: Called with an enrichment percentage after each batch.

    Returns:
        The controller's state after loading.
    """
    controller.dispatch(BeginLoad())
    config = controller.config
    logger.info(
        "tournament_loading filter=%s size=%d genre=%s query=%r",
        config.content_filter,
        config.bracket_size,
        config.genre_id,
        config.search_query,
    )

    try:
        items = await source.fetch_items(config)
        items = shuffle_items(items, rng)
        if enrich and len(items) == config.bracket_size:
            items = await source.enrich_all(items, batch_size=batch_size, on_progress=on_progress)
    except (TmdbError, httpx.HTTPError) as exc:
        logger.warning("tournament_load_failed error=%s", exc)
        return controller.dispatch(Fail(message=f"Couldn't load titles: {exc}"))
    except Exception as exc:
        # Malformed payloads (bad JSON, fields failing validation) land here.
        logger.exception("tournament_load_failed_unexpected")
        return controller.dispatch(Fail(message=f"Couldn't load titles: {exc}"))

    return controller.dispatch(ItemsReady(items=items))
