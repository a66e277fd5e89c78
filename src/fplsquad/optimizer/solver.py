"""Solver backends for the squad linear program."""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
import logging
import os
from typing import List, Optional, Protocol, Tuple

import pulp

from fplsquad.exceptions import InfeasibleModelError, SolverError, UnboundedModelError
from fplsquad.optimizer.problem import LinearProblem


logger = logging.getLogger(__name__)

_SOLVER_ENV = "FPLSQUAD_SOLVER"
_MAX_DENOMINATOR_ENV = "FPLSQUAD_MAX_DENOMINATOR"
_TOLERANCE_ENV = "FPLSQUAD_SOLVER_TOLERANCE"

_SOLVER_DEFAULT = "cbc"
_MAX_DENOMINATOR_DEFAULT = 1_000
_TOLERANCE_DEFAULT = 1e-6


def _env_float(name: str, default: float, *, clamp_min: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %g", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    return value


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


@dataclass(frozen=True)
class SolverResult:
    status: str
    values: Tuple[Fraction, ...]
    objective: Fraction
    backend: str


class LinearSolver(Protocol):
    def solve(self, problem: LinearProblem) -> SolverResult:
        ...


def exact_objective(problem: LinearProblem, values: Tuple[Fraction, ...]) -> Fraction:
    """Objective value in exact arithmetic; float coefficients are exact rationals."""

    total = Fraction(0)
    for index, value in enumerate(values):
        if value:
            total += Fraction(problem.objective[index]) * value
    return total


class PulpSolver:
    """Solve the LP relaxation through PuLP and recover exact rational values.

    Values within ``tolerance`` of an integer are taken as that integer. Any
    other value is reconstructed as the nearest fraction with a denominator of
    at most ``max_denominator``, so a fractional vertex surfaces as e.g. 1/2
    instead of being rounded away.
    """

    def __init__(
        self,
        backend: Optional[str] = None,
        *,
        integral: bool = False,
        max_denominator: Optional[int] = None,
        tolerance: Optional[float] = None,
    ):
        self.backend = (backend or os.getenv(_SOLVER_ENV, _SOLVER_DEFAULT)).lower()
        self.integral = integral
        self.max_denominator = max_denominator or _env_int(
            _MAX_DENOMINATOR_ENV, _MAX_DENOMINATOR_DEFAULT, min_value=1
        )
        self.tolerance = (
            tolerance
            if tolerance is not None
            else _env_float(_TOLERANCE_ENV, _TOLERANCE_DEFAULT, clamp_min=0.0)
        )

    def _lp_solver(self) -> Tuple[pulp.LpSolver, str]:
        if self.backend in {"highs", "hi_gs"}:
            try:
                from pulp.apis.highs_api import HiGHS_CMD

                candidate = HiGHS_CMD(msg=False)
                if candidate.available():
                    return candidate, "HiGHS"
                logger.warning("HiGHS solver unavailable (missing binary); falling back to CBC")
            except ImportError:
                logger.warning("HiGHS solver package not available; falling back to CBC")
        elif self.backend != "cbc":
            logger.warning("Unknown solver backend %r; falling back to CBC", self.backend)
        system_cbc = pulp.COIN_CMD(msg=False)
        if system_cbc.available():
            return system_cbc, "CBC"
        return pulp.PULP_CBC_CMD(msg=False), "CBC"

    def _to_exact(self, index: int, raw: Optional[float]) -> Fraction:
        if raw is None:
            raise SolverError(f"solver returned no value for variable {index}")
        nearest = round(raw)
        if abs(raw - nearest) <= self.tolerance:
            return Fraction(int(nearest))
        exact = Fraction(raw).limit_denominator(self.max_denominator)
        if abs(float(exact) - raw) > self.tolerance:
            raise SolverError(
                f"value {raw!r} of variable {index} has no rational form with "
                f"denominator <= {self.max_denominator}"
            )
        return exact

    def solve(self, problem: LinearProblem) -> SolverResult:
        prob = pulp.LpProblem("fpl_squad", pulp.LpMinimize)
        category = pulp.LpBinary if self.integral else pulp.LpContinuous
        x = [
            pulp.LpVariable(
                f"x_{index}",
                lowBound=problem.lower_bounds[index],
                upBound=problem.upper_bounds[index],
                cat=category,
            )
            for index in range(problem.n_variables)
        ]

        prob += pulp.LpAffineExpression(
            [(x[index], coefficient) for index, coefficient in enumerate(problem.objective)]
        )
        for row in problem.rows:
            if not row.coefficients:
                # A row with no players reduces to 0 <= bound.
                if row.bound < 0:
                    raise InfeasibleModelError(
                        f"row {row.label!r} requires {-row.bound:g} players but none are available"
                    )
                continue
            expression = pulp.LpAffineExpression(
                [(x[index], coefficient) for index, coefficient in row.coefficients.items()]
            )
            prob += (expression <= row.bound, row.label)

        lp_solver, label = self._lp_solver()
        try:
            status_code = prob.solve(lp_solver)
        except pulp.PulpSolverError as exc:
            raise SolverError(f"{label} failed: {exc}") from exc
        status = pulp.LpStatus[status_code]
        logger.info(
            "%s solved %s-variable %s with %s rows: %s",
            label,
            problem.n_variables,
            "MIP" if self.integral else "LP",
            len(problem.rows),
            status,
        )

        if status == "Infeasible":
            raise InfeasibleModelError(
                f"no squad satisfies the {problem.rules.key} constraints (lam={problem.lam:g})"
            )
        if status == "Unbounded":
            raise UnboundedModelError(f"objective is unbounded (lam={problem.lam:g})")
        if status != "Optimal":
            raise SolverError(f"{label} finished with status {status!r}")

        values: List[Fraction] = [
            self._to_exact(index, x[index].varValue) for index in range(problem.n_variables)
        ]
        exact_values = tuple(values)
        return SolverResult(
            status=status,
            values=exact_values,
            objective=exact_objective(problem, exact_values),
            backend=label,
        )
