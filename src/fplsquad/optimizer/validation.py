"""Independent re-check of a solver assignment in exact arithmetic."""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
import logging
from typing import Dict, List, Tuple

from fplsquad.exceptions import ConstraintViolation, IntegralityViolation, SolverError
from fplsquad.models import Catalog, PlayerRecord
from fplsquad.optimizer.problem import LinearProblem
from fplsquad.optimizer.solver import SolverResult, exact_objective


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SquadEntry:
    player: PlayerRecord
    selected: bool


@dataclass(frozen=True)
class ValidatedSquad:
    entries: Tuple[SquadEntry, ...]
    objective: float
    total_cost: float
    total_form: float
    total_expected_form: float
    team_counts: Dict[int, int]
    position_counts: Dict[int, int]

    @property
    def selected(self) -> Tuple[PlayerRecord, ...]:
        return tuple(entry.player for entry in self.entries if entry.selected)

    @property
    def size(self) -> int:
        return sum(1 for entry in self.entries if entry.selected)


def _check_integral(index: int, value: Fraction) -> bool:
    if value.denominator != 1 or value.numerator not in (0, 1):
        raise IntegralityViolation(index, value)
    return value.numerator == 1


def _check_rows(problem: LinearProblem, values: Tuple[Fraction, ...]) -> None:
    for row in problem.rows:
        lhs = Fraction(0)
        for index, coefficient in row.coefficients.items():
            if values[index]:
                lhs += Fraction(coefficient) * values[index]
        bound = Fraction(row.bound)
        if lhs > bound:
            raise ConstraintViolation(row.label, lhs, bound)


def validate_solution(
    problem: LinearProblem,
    catalog: Catalog,
    result: SolverResult,
) -> ValidatedSquad:
    """Confirm ``result`` is a 0/1 point satisfying every row and assemble the squad.

    The solver's own status is not trusted for integrality: each value must be
    exactly 0 or 1 as a rational, and every ``<=`` row is re-evaluated exactly.
    """

    if len(result.values) != problem.n_variables or len(catalog) != problem.n_variables:
        raise SolverError(
            f"solver returned {len(result.values)} values for {problem.n_variables} variables"
        )

    selected_flags: List[bool] = []
    for index in range(problem.n_variables):
        selected_flags.append(_check_integral(index, result.values[index]))

    _check_rows(problem, result.values)

    entries: List[SquadEntry] = []
    team_counts: Dict[int, int] = {}
    position_counts: Dict[int, int] = {}
    total_cost = 0.0
    total_form = 0.0
    total_expected_form = 0.0
    for index in range(problem.n_variables):
        player = catalog[index]
        selected = selected_flags[index]
        entries.append(SquadEntry(player=player, selected=selected))
        if not selected:
            continue
        team_counts[player.team_id] = team_counts.get(player.team_id, 0) + 1
        position_counts[player.position_id] = position_counts.get(player.position_id, 0) + 1
        total_cost += player.cost
        total_form += player.form
        total_expected_form += player.expected_form

    if exact_objective(problem, result.values) != result.objective:
        raise SolverError(
            f"reported objective {result.objective} does not match the returned values"
        )
    objective = -result.objective
    logger.info(
        "Validated squad of %s players: objective %.4f, cost %.1f, form %.1f",
        sum(selected_flags),
        float(objective),
        total_cost,
        total_form,
    )
    return ValidatedSquad(
        entries=tuple(entries),
        objective=float(objective),
        total_cost=total_cost,
        total_form=total_form,
        total_expected_form=total_expected_form,
        team_counts=team_counts,
        position_counts=position_counts,
    )
