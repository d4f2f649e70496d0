"""Bracket models: Matchup and Round.

Both are frozen. Deciding a matchup returns a new Matchup; the bracket
engine and the tournament reducer build new rounds instead of editing them.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from decide2watch.models.media import MediaItem


class Side(StrEnum):
    """Which slot of a matchup won."""

    A = "a"
    B = "b"


class Matchup(BaseModel):
    """One binary choice between two items.

    The winner is stored as a side, never as an item, so it can only ever be
    ``a`` or ``b``.
    """

    model_config = ConfigDict(frozen=True)

    a: MediaItem
    b: MediaItem
    winner_side: Side | None = None

    @property
    def decided(self) -> bool:
        return self.winner_side is not None

    @property
    def winner(self) -> MediaItem | None:
        if self.winner_side is None:
            return None
        return self.a if self.winner_side is Side.A else self.b

    def decide(self, side: Side) -> Matchup:
        """Return a copy of this matchup with ``side`` as the winner.

        Raises:
            ValueError: If the matchup is already decided.
        """
        if self.winner_side is not None:
            raise ValueError(f"Matchup {self.a.id} vs {self.b.id} is already decided")
        return self.model_copy(update={"winner_side": Side(side)})


class Round(BaseModel):
    """The matchups played at one elimination stage."""

    model_config = ConfigDict(frozen=True)

    name: str
    matchups: tuple[Matchup, ...]

    @property
    def is_decided(self) -> bool:
        """True when every matchup in the round has a winner."""
        return all(m.decided for m in self.matchups)

    @property
    def winners(self) -> list[MediaItem]:
        """Winners in pairing order. Undecided matchups are skipped."""
        return [m.winner for m in self.matchups if m.winner is not None]

    def replace_matchup(self, index: int, matchup: Matchup) -> Round:
        """Return a copy of this round with one matchup swapped out."""
        matchups = list(self.matchups)
        matchups[index] = matchup
        return self.model_copy(update={"matchups": tuple(matchups)})
