"""Canonical player and catalog models consumed by the problem builder."""

from __future__ import annotations

from typing import Sequence, Tuple

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

from fplsquad.config import LeagueRules
from fplsquad.exceptions import DataLoadError


class PlayerRecord(BaseModel):
    """Normalized player attributes addressed by decision-variable index."""

    index: int = Field(..., ge=0)
    name: str
    team_id: int = Field(..., ge=0)
    position_id: int = Field(..., ge=0)
    cost: float = Field(..., ge=0.0)
    form: float
    availability: float = Field(default=1.0, ge=0.0, le=1.0)

    model_config = ConfigDict(frozen=True)

    @property
    def expected_form(self) -> float:
        return self.form * self.availability


class Catalog(BaseModel):
    """Ordered, immutable player pool with dense indices ``0..N-1``."""

    players: Tuple[PlayerRecord, ...] = ()

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_dense_indices(self) -> "Catalog":
        for position, player in enumerate(self.players):
            if player.index != position:
                raise ValueError(
                    f"player {player.name!r} has index {player.index}, expected {position}"
                )
        return self

    @classmethod
    def from_records(cls, records: Sequence[PlayerRecord]) -> "Catalog":
        return cls(players=tuple(records))

    def __len__(self) -> int:
        return len(self.players)

    def __getitem__(self, index: int) -> PlayerRecord:
        return self.players[index]

    def check_rules(self, rules: LeagueRules) -> None:
        """Raise DataLoadError if any team or position id falls outside ``rules``."""

        for player in self.players:
            if player.team_id >= rules.n_teams:
                raise DataLoadError(
                    f"player {player.index} ({player.name}) has team_id {player.team_id}; "
                    f"{rules.key} has {rules.n_teams} teams"
                )
            if player.position_id >= rules.n_positions:
                raise DataLoadError(
                    f"player {player.index} ({player.name}) has position_id {player.position_id}; "
                    f"{rules.key} has {rules.n_positions} positions"
                )
