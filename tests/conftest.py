from __future__ import annotations

import pytest

from fplsquad.config import LeagueRules
from fplsquad.models import Catalog, PlayerRecord

# One goalkeeper, two defenders, two midfielders and one forward per team.
_TEAM_LAYOUT = (0, 1, 1, 2, 2, 3)


def _form(index: int) -> float:
    return float((index * 7) % 10) + 0.5


def _cost(index: int) -> float:
    return float(40 + (index * 13) % 60)


def _chance(index: int) -> float | None:
    if index % 9 == 0:
        return 50.0
    if index % 11 == 0:
        return 0.0
    return None


def make_raw_players(n_teams: int = 20) -> list[dict]:
    players = []
    for team_id in range(n_teams):
        for position_id in _TEAM_LAYOUT:
            index = len(players)
            players.append(
                {
                    "web_name": f"Player {index}",
                    "team": team_id + 1,
                    "element_type": position_id + 1,
                    "form": f"{_form(index):.1f}",
                    "now_cost": _cost(index),
                    "chance_of_playing_next_round": _chance(index),
                }
            )
    return players


def make_catalog(n_teams: int = 20) -> Catalog:
    records = []
    for raw in make_raw_players(n_teams):
        index = len(records)
        chance = raw["chance_of_playing_next_round"]
        records.append(
            PlayerRecord(
                index=index,
                name=raw["web_name"],
                team_id=raw["team"] - 1,
                position_id=raw["element_type"] - 1,
                cost=raw["now_cost"],
                form=_form(index),
                availability=1.0 if chance is None else chance / 100.0,
            )
        )
    return Catalog.from_records(records)


@pytest.fixture
def full_catalog() -> Catalog:
    return make_catalog()


@pytest.fixture
def raw_players() -> list[dict]:
    return make_raw_players()


@pytest.fixture
def goalkeeper_rules() -> LeagueRules:
    return LeagueRules(
        key="GK_ONLY",
        n_teams=1,
        team_max_players=4,
        position_names=("Goalkeeper",),
        position_counts=(2,),
    )


@pytest.fixture
def goalkeeper_catalog() -> Catalog:
    costs = [40, 45, 50, 55]
    forms = [5, 4, 6, 3]
    return Catalog.from_records(
        [
            PlayerRecord(
                index=i,
                name=f"Keeper {i + 1}",
                team_id=0,
                position_id=0,
                cost=cost,
                form=form,
            )
            for i, (cost, form) in enumerate(zip(costs, forms))
        ]
    )


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
