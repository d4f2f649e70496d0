"""Derived display values: how far through the bracket we are.

Pure functions of TournamentState; nothing here is stored.
"""

from __future__ import annotations

from dataclasses import dataclass

from decide2watch.core.bracket import total_rounds_for
from decide2watch.models.tournament import Screen, TournamentState


@dataclass(frozen=True)
class MatchProgress:
    """Everything a progress bar needs for the matchup under the cursor."""

    round_name: str
    match_number: int  # 1-based within the round
    matches_in_round: int
    round_number: int  # 1-based
    total_rounds: int
    fraction: float


def completed_matches(state: TournamentState) -> int:
    """Matchups decided before the one under the cursor.

    Each earlier round r contributed 2**(total_rounds - 1 - r) matchups.
    """
    if state.screen is Screen.COMPLETE:
        return state.config.bracket_size - 1
    if state.screen is not Screen.IN_PROGRESS:
        return 0
    total_rounds = total_rounds_for(state.config.bracket_size)
    done = sum(2 ** (total_rounds - 1 - r) for r in range(state.current_round_index))
    return done + state.current_matchup_index


def progress_fraction(state: TournamentState) -> float:
    """Overall progress in [0, 1]: completed matchups / (bracket_size - 1)."""
    total = state.config.bracket_size - 1
    if total <= 0:
        return 0.0
    return min(completed_matches(state) / total, 1.0)


def match_progress(state: TournamentState) -> MatchProgress | None:
    """Progress summary for the current matchup, or None outside a bracket."""
    current = state.current_round
    if current is None:
        return None
    return MatchProgress(
        round_name=current.name,
        match_number=state.current_matchup_index + 1,
        matches_in_round=len(current.matchups),
        round_number=state.current_round_index + 1,
        total_rounds=total_rounds_for(state.config.bracket_size),
        fraction=progress_fraction(state),
    )
