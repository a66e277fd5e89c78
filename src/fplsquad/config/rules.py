"""Squad layout rules for supported fantasy leagues."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Tuple


@dataclass(frozen=True)
class LeagueRules:
    key: str
    n_teams: int
    team_max_players: int
    position_names: Tuple[str, ...]
    position_counts: Tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.position_names) != len(self.position_counts):
            raise ValueError("position_names and position_counts must have the same length")
        if self.n_teams < 1:
            raise ValueError(f"n_teams must be positive, got {self.n_teams}")
        if any(count < 0 for count in self.position_counts):
            raise ValueError("position_counts must be non-negative")

    @property
    def n_positions(self) -> int:
        return len(self.position_names)

    @property
    def squad_size(self) -> int:
        return sum(self.position_counts)

    def required_count(self, position_id: int) -> int:
        return self.position_counts[position_id]

    def position_name(self, position_id: int) -> str:
        return self.position_names[position_id]


_LEAGUE_RULES: Dict[str, LeagueRules] = {
    "FPL": LeagueRules(
        key="FPL",
        n_teams=20,
        team_max_players=3,
        position_names=("Goalkeeper", "Defender", "Midfielder", "Forward"),
        position_counts=(2, 5, 5, 3),
    ),
}


def iter_rules() -> Iterable[LeagueRules]:
    """Return an iterator of all configured rule sets."""

    return _LEAGUE_RULES.values()


def get_rules(key: str = "FPL") -> LeagueRules:
    """Fetch rules for a league key, raising KeyError if missing."""

    normalized = key.upper()
    if normalized not in _LEAGUE_RULES:
        raise KeyError(f"No squad rules configured for league={key!r}")
    return _LEAGUE_RULES[normalized]


DEFAULT_RULES: LeagueRules = _LEAGUE_RULES["FPL"]
