"""Tournament state and the events that drive it.

See ``decide2watch.core.tournament`` for the reducer that consumes these.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from decide2watch.models.bracket import Matchup, Round, Side
from decide2watch.models.media import MediaItem

ContentFilter = Literal["movie", "tv", "both"]

SUPPORTED_BRACKET_SIZES: tuple[int, ...] = (8, 16, 32)
DEFAULT_BRACKET_SIZE = 16


class Screen(StrEnum):
    """Which screen the tournament is on.

    Only the tournament reducer moves between screens; presentation code
    reads this and never writes it.
    """

    CONFIGURING = "configuring"
    LOADING = "loading"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


class TournamentConfig(BaseModel):
    """What to fetch and how big a bracket to build."""

    model_config = ConfigDict(frozen=True)

    content_filter: ContentFilter = "movie"
    bracket_size: int = DEFAULT_BRACKET_SIZE
    genre_id: int | None = None
    search_query: str = ""

    @field_validator("bracket_size")
    @classmethod
    def _supported_size(cls, v: int) -> int:
        if v not in SUPPORTED_BRACKET_SIZES:
            raise ValueError(f"bracket_size must be one of {list(SUPPORTED_BRACKET_SIZES)}")
        return v


class TournamentState(BaseModel):
    """The whole tournament at one point in time.

    Replaced wholesale on every transition. The cursor
    (``current_round_index``, ``current_matchup_index``) is only meaningful
    while ``screen`` is ``IN_PROGRESS``.
    """

    model_config = ConfigDict(frozen=True)

    config: TournamentConfig = Field(default_factory=TournamentConfig)
    rounds: tuple[Round, ...] = ()
    current_round_index: int = 0
    current_matchup_index: int = 0
    screen: Screen = Screen.CONFIGURING
    error: str | None = None

    @property
    def current_round(self) -> Round | None:
        if self.screen is not Screen.IN_PROGRESS:
            return None
        return self.rounds[self.current_round_index]

    @property
    def current_matchup(self) -> Matchup | None:
        current = self.current_round
        if current is None:
            return None
        return current.matchups[self.current_matchup_index]

    @property
    def champion(self) -> MediaItem | None:
        """The winning item. Only defined once the tournament is complete."""
        if self.screen is not Screen.COMPLETE:
            return None
        return self.rounds[-1].matchups[0].winner


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class SetConfig(BaseModel):
    """Merge new configuration. The bracket size is checked by the reducer."""

    type: Literal["set_config"] = "set_config"
    content_filter: ContentFilter = "movie"
    bracket_size: int = DEFAULT_BRACKET_SIZE
    genre_id: int | None = None
    search_query: str = ""


class BeginLoad(BaseModel):
    type: Literal["begin_load"] = "begin_load"


class ItemsReady(BaseModel):
    """Items fetched (and shuffled/enriched) in their final bracket order."""

    type: Literal["items_ready"] = "items_ready"
    items: list[MediaItem]


class PickWinner(BaseModel):
    """Choose a side of the matchup under the cursor."""

    type: Literal["pick_winner"] = "pick_winner"
    side: Side


class Fail(BaseModel):
    type: Literal["fail"] = "fail"
    message: str


class Reset(BaseModel):
    type: Literal["reset"] = "reset"


TournamentEvent = Annotated[
    SetConfig | BeginLoad | ItemsReady | PickWinner | Fail | Reset,
    Field(discriminator="type"),
]
