"""Tournament controller: a reducer over TournamentState.

Screens:
    CONFIGURING -> LOADING -> IN_PROGRESS -> COMPLETE
    LOADING -> CONFIGURING on Fail; any screen -> CONFIGURING on Reset.

``reduce_tournament(state, event)`` is pure: it returns a new state and
never edits the old one. ``TournamentController`` owns one state value and
replaces it on every dispatch, so observers never see a half-applied
transition.

Usage:
    controller = TournamentController()
    controller.dispatch(SetConfig(content_filter="tv", bracket_size=8))
    controller.dispatch(BeginLoad())
    controller.dispatch(ItemsReady(items=items))
    controller.dispatch(PickWinner(side=Side.A))
"""

from __future__ import annotations

import logging

from decide2watch.core.bracket import next_round, pair_items, total_rounds_for
from decide2watch.core.progress import MatchProgress, match_progress, progress_fraction
from decide2watch.models.bracket import Matchup, Round
from decide2watch.models.media import MediaItem
from decide2watch.models.tournament import (
    SUPPORTED_BRACKET_SIZES,
    BeginLoad,
    Fail,
    ItemsReady,
    PickWinner,
    Reset,
    Screen,
    SetConfig,
    TournamentConfig,
    TournamentEvent,
    TournamentState,
)

logger = logging.getLogger(__name__)


def initial_state() -> TournamentState:
    """The pristine configuring state a tournament starts in and resets to."""
    return TournamentState()


def _fail(state: TournamentState, message: str) -> TournamentState:
    """Drop any bracket progress and return to CONFIGURING with an error."""
    return state.model_copy(
        update={
            "rounds": (),
            "current_round_index": 0,
            "current_matchup_index": 0,
            "screen": Screen.CONFIGURING,
            "error": message,
        }
    )


def _apply_config(state: TournamentState, event: SetConfig) -> TournamentState:
    if event.bracket_size not in SUPPORTED_BRACKET_SIZES:
        return _fail(
            state,
            f"Unsupported bracket size {event.bracket_size}. "
            f"Choose one of {', '.join(str(s) for s in SUPPORTED_BRACKET_SIZES)}.",
        )
    bracket_size = event.bracket_size
    if state.rounds and bracket_size != state.config.bracket_size:
        # The built bracket fixes the size until the next BeginLoad or Reset.
        logger.warning(
            "set_config_size_kept screen=%s size=%d requested=%d",
            state.screen.value,
            state.config.bracket_size,
            bracket_size,
        )
        bracket_size = state.config.bracket_size
    config = TournamentConfig(
        content_filter=event.content_filter,
        bracket_size=bracket_size,
        genre_id=event.genre_id,
        search_query=event.search_query.strip(),
    )
    return state.model_copy(update={"config": config})


def _start_bracket(state: TournamentState, items: list[MediaItem]) -> TournamentState:
    size = state.config.bracket_size
    if len(items) != size:
        return _fail(
            state,
            f"Not enough titles found for a {size}-item bracket (got {len(items)}). "
            "Try a different filter, genre, or search.",
        )
    # Movie and TV ids are separate namespaces in TMDB.
    keys = {(item.media_type, item.id) for item in items}
    if len(keys) != len(items):
        return _fail(state, "The catalog returned duplicate titles. Try a different filter.")
    opening = pair_items(items)
    return state.model_copy(
        update={
            "rounds": (opening,),
            "current_round_index": 0,
            "current_matchup_index": 0,
            "screen": Screen.IN_PROGRESS,
            "error": None,
        }
    )


def _pick_winner(state: TournamentState, event: PickWinner) -> TournamentState:
    """Record the pick under the cursor, then move the cursor.

    Same result as deciding a whole round and calling ``advance_bracket``,
    one pick at a time.
    """
    if state.screen is not Screen.IN_PROGRESS:
        logger.warning("pick_winner_ignored screen=%s", state.screen.value)
        return state

    round_index = state.current_round_index
    matchup_index = state.current_matchup_index
    current: Round = state.rounds[round_index]
    decided: Matchup = current.matchups[matchup_index].decide(event.side)
    current = current.replace_matchup(matchup_index, decided)
    rounds = (*state.rounds[:round_index], current)

    if matchup_index + 1 < len(current.matchups):
        return state.model_copy(
            update={"rounds": rounds, "current_matchup_index": matchup_index + 1}
        )

    total_rounds = total_rounds_for(state.config.bracket_size)
    if round_index + 1 >= total_rounds:
        return state.model_copy(update={"rounds": rounds, "screen": Screen.COMPLETE})

    following = next_round(current, round_index + 1, total_rounds)
    return state.model_copy(
        update={
            "rounds": (*rounds, following),
            "current_round_index": round_index + 1,
            "current_matchup_index": 0,
        }
    )


def reduce_tournament(state: TournamentState, event: TournamentEvent) -> TournamentState:
    """Apply one event and return the next state."""
    if isinstance(event, SetConfig):
        return _apply_config(state, event)
    if isinstance(event, BeginLoad):
        return state.model_copy(
            update={
                "rounds": (),
                "current_round_index": 0,
                "current_matchup_index": 0,
                "screen": Screen.LOADING,
                "error": None,
            }
        )
    if isinstance(event, ItemsReady):
        return _start_bracket(state, event.items)
    if isinstance(event, PickWinner):
        return _pick_winner(state, event)
    if isinstance(event, Fail):
        return _fail(state, event.message)
    if isinstance(event, Reset):
        return initial_state()
    raise TypeError(f"Unknown tournament event: {type(event).__name__}")


class TournamentController:
    """Owns the authoritative TournamentState and applies events one at a time."""

    def __init__(self, state: TournamentState | None = None) -> None:
        self._state = state or initial_state()

    def dispatch(self, event: TournamentEvent) -> TournamentState:
        """Apply ``event`` and replace the current state with the result."""
        previous = self._state
        self._state = reduce_tournament(previous, event)
        if self._state.screen is not previous.screen:
            logger.info(
                "tournament_screen_changed event=%s from=%s to=%s",
                event.type,
                previous.screen.value,
                self._state.screen.value,
            )
        if self._state.error and self._state.error != previous.error:
            logger.warning("tournament_failed error=%s", self._state.error)
        if self._state.screen is Screen.COMPLETE and previous.screen is not Screen.COMPLETE:
            winner = self._state.champion
            logger.info(
                "tournament_complete champion_id=%s title=%s",
                winner.id if winner else None,
                winner.title if winner else None,
            )
        return self._state

    @property
    def state(self) -> TournamentState:
        return self._state

    @property
    def screen(self) -> Screen:
        return self._state.screen

    @property
    def config(self) -> TournamentConfig:
        return self._state.config

    @property
    def rounds(self) -> tuple[Round, ...]:
        return self._state.rounds

    @property
    def cursor(self) -> tuple[int, int]:
        """(current_round_index, current_matchup_index)."""
        return self._state.current_round_index, self._state.current_matchup_index

    @property
    def total_rounds(self) -> int:
        return total_rounds_for(self._state.config.bracket_size)

    @property
    def current_round(self) -> Round | None:
        return self._state.current_round

    @property
    def current_matchup(self) -> Matchup | None:
        return self._state.current_matchup

    @property
    def error(self) -> str | None:
        return self._state.error

    @property
    def champion(self) -> MediaItem | None:
        return self._state.champion

    @property
    def progress(self) -> float:
        return progress_fraction(self._state)

    @property
    def match_progress(self) -> MatchProgress | None:
        return match_progress(self._state)
