from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, Field


class SquadRequest(BaseModel):
    lam: float = Field(..., ge=0.0)
    league: str = Field(default="FPL")
    players: List[dict[str, Any]]


class SweepRequest(BaseModel):
    lams: List[float] = Field(..., min_length=1, max_length=200)
    league: str = Field(default="FPL")
    players: List[dict[str, Any]]
    jobs: int | None = Field(default=None, ge=1, le=32)


class SquadPlayerResponse(BaseModel):
    index: int
    name: str
    team_id: int
    position: str
    cost: float
    form: float
    expected_form: float


class SquadResponse(BaseModel):
    lam: float
    objective: float
    total_cost: float
    total_form: float
    total_expected_form: float
    backend: str
    players: List[SquadPlayerResponse]


class SweepPointResponse(BaseModel):
    lam: float
    objective: float | None = None
    total_cost: float | None = None
    total_form: float | None = None
    player_indices: List[int] = Field(default_factory=list)
    error: str | None = None


class SweepResponse(BaseModel):
    points: List[SweepPointResponse]
