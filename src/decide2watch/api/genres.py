"""Genre options for the setup form."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from decide2watch.models.genres import GENRE_OPTIONS

router = APIRouter(prefix="/api/genres", tags=["genres"])


class GenreOption(BaseModel):
    id: int
    name: str


@router.get("", response_model=list[GenreOption])
async def list_genres() -> list[GenreOption]:
    """Genres a bracket can be restricted to, in display order."""
    return [GenreOption(id=gid, name=name) for gid, name in GENRE_OPTIONS]
