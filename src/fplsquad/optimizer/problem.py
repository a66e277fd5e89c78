"""Translate a player catalog into a totally unimodular linear program.

The squad problem is stated in minimization form::

    minimize    sum_i (lam * cost[i] - expected_form[i]) * x[i]
    subject to  sum_{i in team t} x[i]      <=  team_max_players   (one row per team)
                sum_{i in position p} x[i]  <=  required[p]        (one row per position)
                -sum_{i in position p} x[i] <= -required[p]        (mirror of the above)
                0 <= x[i] <= 1

Exact position counts are written as a pair of ``<=`` rows instead of one
equality row. Every column then holds a single 1 among the team rows and a
matched +1/-1 pair among the position rows, so the matrix is totally
unimodular and the LP relaxation has an integral optimal vertex. The budget is
not a row at all: it is priced into the objective through ``lam``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Tuple

from fplsquad.config import LeagueRules
from fplsquad.models import Catalog


class RowFamily(str, Enum):
    TEAM_CAP = "team_cap"
    POSITION_MAX = "position_max"
    POSITION_MIN = "position_min"


LESS_EQUAL = "<="


@dataclass(frozen=True)
class ConstraintRow:
    label: str
    family: RowFamily
    coefficients: Mapping[int, float]
    bound: float
    sense: str = LESS_EQUAL


@dataclass(frozen=True)
class LinearProblem:
    objective: Tuple[float, ...]
    lower_bounds: Tuple[float, ...]
    upper_bounds: Tuple[float, ...]
    rows: Tuple[ConstraintRow, ...]
    lam: float
    rules: LeagueRules

    @property
    def n_variables(self) -> int:
        return len(self.objective)

    def rows_for(self, family: RowFamily) -> Tuple[ConstraintRow, ...]:
        return tuple(row for row in self.rows if row.family is family)

    def is_totally_unimodular_layout(self) -> bool:
        """Check the column structure that makes the matrix totally unimodular.

        Every column must have at most one nonzero (equal to 1) among the team
        rows, and exactly one +1 and one -1 among the position rows, both for
        the same position.
        """

        if any(row.sense != LESS_EQUAL for row in self.rows):
            return False

        team_hits: List[int] = [0] * self.n_variables
        plus: Dict[int, List[int]] = {i: [] for i in range(self.n_variables)}
        minus: Dict[int, List[int]] = {i: [] for i in range(self.n_variables)}

        for row in self.rows_for(RowFamily.TEAM_CAP):
            for index, coefficient in row.coefficients.items():
                if coefficient != 1:
                    return False
                team_hits[index] += 1

        for family, expected, seen in (
            (RowFamily.POSITION_MAX, 1, plus),
            (RowFamily.POSITION_MIN, -1, minus),
        ):
            for position_id, row in enumerate(self.rows_for(family)):
                for index, coefficient in row.coefficients.items():
                    if coefficient != expected:
                        return False
                    seen[index].append(position_id)

        for index in range(self.n_variables):
            if team_hits[index] > 1:
                return False
            if len(plus[index]) != 1 or plus[index] != minus[index]:
                return False
        return True


def _objective_coefficient(lam: float, cost: float, expected_form: float) -> float:
    return lam * cost - expected_form


def build_problem(catalog: Catalog, lam: float, rules: LeagueRules) -> LinearProblem:
    """Build objective, bounds and the ``<=`` constraint rows for one solve.

    ``catalog`` must already satisfy ``Catalog.check_rules(rules)``.
    """

    n_teams = rules.n_teams
    n_positions = rules.n_positions

    team_members: List[Dict[int, float]] = [{} for _ in range(n_teams)]
    position_members: List[Dict[int, float]] = [{} for _ in range(n_positions)]
    objective: List[float] = []

    for index in range(len(catalog)):
        player = catalog[index]
        objective.append(_objective_coefficient(lam, player.cost, player.expected_form))
        team_members[player.team_id][index] = 1.0
        position_members[player.position_id][index] = 1.0

    rows: List[ConstraintRow] = []
    for team_id in range(n_teams):
        rows.append(
            ConstraintRow(
                label=f"team_{team_id}_max",
                family=RowFamily.TEAM_CAP,
                coefficients=team_members[team_id],
                bound=float(rules.team_max_players),
            )
        )
    for position_id in range(n_positions):
        rows.append(
            ConstraintRow(
                label=f"{rules.position_name(position_id).lower()}_max",
                family=RowFamily.POSITION_MAX,
                coefficients=position_members[position_id],
                bound=float(rules.required_count(position_id)),
            )
        )
    for position_id in range(n_positions):
        rows.append(
            ConstraintRow(
                label=f"{rules.position_name(position_id).lower()}_min",
                family=RowFamily.POSITION_MIN,
                coefficients={index: -1.0 for index in position_members[position_id]},
                bound=-float(rules.required_count(position_id)),
            )
        )

    n_players = len(catalog)
    return LinearProblem(
        objective=tuple(objective),
        lower_bounds=(0.0,) * n_players,
        upper_bounds=(1.0,) * n_players,
        rows=tuple(rows),
        lam=lam,
        rules=rules,
    )
