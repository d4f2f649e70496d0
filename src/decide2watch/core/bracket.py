"""Bracket engine: pure functions for building and advancing a bracket.

Pairing is positional: item 2k plays item 2k+1, and round r+1 pairs the
winners of round r in the same order. Nothing here does I/O or keeps state.

Usage:
    rounds = [pair_items(shuffle_items(items))]
    ...decide every matchup in rounds[-1]...
    rounds = advance_bracket(rounds, total_rounds_for(len(items)))
"""

from __future__ import annotations

import math
import random
from collections.abc import Sequence
from typing import TypeVar

from decide2watch.models.bracket import Matchup, Round
from decide2watch.models.media import MediaItem

T = TypeVar("T")


def shuffle_items(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Return a uniformly random permutation of ``items``. The input is untouched.

    Fisher-Yates, walking from the back. Pass ``rng`` for a reproducible order.
    """
    rng = rng or random.Random()
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result


def total_rounds_for(bracket_size: int) -> int:
    """Number of rounds in a bracket of ``bracket_size`` items.

    Raises:
        ValueError: If ``bracket_size`` is not a positive power of two.
    """
    if bracket_size < 2 or bracket_size & (bracket_size - 1):
        raise ValueError(f"Bracket size must be a power of two >= 2, got {bracket_size}")
    return int(math.log2(bracket_size))


def round_name(round_index: int, total_rounds: int) -> str:
    """Name a round by how far it is from the end of the bracket.

    An 8-bracket's first round and a 32-bracket's third round are both
    "Quarterfinals".
    """
    remaining = total_rounds - round_index
    if remaining == 1:
        return "Final"
    if remaining == 2:
        return "Semifinals"
    if remaining == 3:
        return "Quarterfinals"
    return f"Round of {2**remaining}"


def _pair(items: Sequence[MediaItem]) -> tuple[Matchup, ...]:
    return tuple(Matchup(a=items[i], b=items[i + 1]) for i in range(0, len(items), 2))


def pair_items(items: Sequence[MediaItem]) -> Round:
    """Build the opening round: (0 v 1), (2 v 3), ... all undecided.

    Raises:
        ValueError: If the item count is not a power of two >= 2.
    """
    total_rounds = total_rounds_for(len(items))
    return Round(name=round_name(0, total_rounds), matchups=_pair(items))


def next_round(decided: Round, round_index: int, total_rounds: int) -> Round:
    """Build round ``round_index`` from the winners of ``decided``.

    The caller guarantees ``decided`` is fully decided.
    """
    return Round(name=round_name(round_index, total_rounds), matchups=_pair(decided.winners))


def advance_bracket(rounds: Sequence[Round], total_rounds: int) -> list[Round]:
    """Append the next round if the last one is fully decided.

    Returns the rounds unchanged when the last round still has undecided
    matchups, or when the bracket already has ``total_rounds`` rounds.
    """
    rounds = list(rounds)
    if not rounds:
        return rounds
    last = rounds[-1]
    if not last.is_decided:
        return rounds
    if len(rounds) >= total_rounds:
        return rounds
    return [*rounds, next_round(last, len(rounds), total_rounds)]


def is_tournament_complete(rounds: Sequence[Round], total_rounds: int) -> bool:
    """True when the final round exists and its matchup is decided."""
    return len(rounds) == total_rounds and rounds[-1].matchups[0].decided


def champion(rounds: Sequence[Round]) -> MediaItem | None:
    """Winner of the final matchup, or None if there isn't one yet.

    Returns None for an undecided final and for any last round that has
    more than one matchup.
    """
    if not rounds:
        return None
    final = rounds[-1]
    if len(final.matchups) != 1:
        return None
    return final.matchups[0].winner
