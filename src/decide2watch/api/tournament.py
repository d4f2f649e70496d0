"""Tournament API: read the bracket and forward user choices as events.

The controller lives on ``app.state.tournament``; every route either reads
its state or dispatches exactly one event (``/start`` runs the loading flow,
which dispatches BeginLoad followed by ItemsReady or Fail).
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from decide2watch.config import Settings
from decide2watch.core.loader import load_tournament
from decide2watch.core.tournament import TournamentController
from decide2watch.models.bracket import Round, Side
from decide2watch.models.media import MediaItem
from decide2watch.models.tournament import (
    PickWinner,
    Reset,
    Screen,
    SetConfig,
    TournamentConfig,
    TournamentState,
)
from decide2watch.services.tmdb import TmdbClient

router = APIRouter(prefix="/api/tournament", tags=["tournament"])


class TournamentResponse(BaseModel):
    """Read-only view of the tournament."""

    screen: Screen
    config: TournamentConfig
    rounds: list[Round]
    current_round_index: int
    current_matchup_index: int
    error: str | None
    champion: MediaItem | None
    progress: float

    @classmethod
    def from_controller(cls, controller: TournamentController) -> TournamentResponse:
        state: TournamentState = controller.state
        return cls(
            screen=state.screen,
            config=state.config,
            rounds=list(state.rounds),
            current_round_index=state.current_round_index,
            current_matchup_index=state.current_matchup_index,
            error=state.error,
            champion=state.champion,
            progress=controller.progress,
        )


class PickRequest(BaseModel):
    side: Side


def _controller(request: Request) -> TournamentController:
    return request.app.state.tournament


def _settings(request: Request) -> Settings:
    return request.app.state.settings


@router.get("", response_model=TournamentResponse)
async def get_tournament(request: Request) -> TournamentResponse:
    """Return the current tournament state."""
    return TournamentResponse.from_controller(_controller(request))


@router.post("/config", response_model=TournamentResponse)
async def set_config(body: SetConfig, request: Request) -> TournamentResponse:
    """Merge content filter, bracket size, genre and query into the config."""
    controller = _controller(request)
    controller.dispatch(body)
    return TournamentResponse.from_controller(controller)


@router.post("/start", response_model=TournamentResponse)
async def start(request: Request) -> TournamentResponse:
    """Fetch items for the current config and open the bracket.

    Returns 503 when no TMDB API key is configured. Catalog failures are
    not HTTP errors: they come back as screen=configuring with an error.
    """
    settings = _settings(request)
    if not settings.tmdb_api_key_set():
        raise HTTPException(
            status_code=503,
            detail="TMDB_API_KEY is not configured.",
        )
    controller = _controller(request)
    if controller.screen is Screen.LOADING:
        raise HTTPException(status_code=409, detail="A bracket is already loading.")

    tmdb: TmdbClient = request.app.state.tmdb
    await load_tournament(
        controller,
        tmdb,
        enrich=settings.decide2watch_enrich,
        batch_size=settings.decide2watch_enrich_batch_size,
    )
    return TournamentResponse.from_controller(controller)


@router.post("/pick", response_model=TournamentResponse)
async def pick(body: PickRequest, request: Request) -> TournamentResponse:
    """Pick side ``a`` or ``b`` of the matchup under the cursor."""
    controller = _controller(request)
    if controller.screen is not Screen.IN_PROGRESS:
        raise HTTPException(
            status_code=409,
            detail=f"No matchup to decide (screen is '{controller.screen.value}').",
        )
    controller.dispatch(PickWinner(side=body.side))
    return TournamentResponse.from_controller(controller)


@router.post("/reset", response_model=TournamentResponse)
async def reset(request: Request) -> TournamentResponse:
    """Discard everything and return to the configuring screen."""
    controller = _controller(request)
    controller.dispatch(Reset())
    return TournamentResponse.from_controller(controller)
