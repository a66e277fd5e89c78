"""Squad optimizer: problem formulation, LP solve and exact validation."""

from .problem import ConstraintRow, LinearProblem, RowFamily, build_problem
from .service import SquadResult, SweepOutcome, optimize_squad, sweep_lambdas
from .solver import LinearSolver, PulpSolver, SolverResult
from .validation import SquadEntry, ValidatedSquad, validate_solution

__all__ = [
    "ConstraintRow",
    "LinearProblem",
    "LinearSolver",
    "PulpSolver",
    "RowFamily",
    "SolverResult",
    "SquadEntry",
    "SquadResult",
    "SweepOutcome",
    "ValidatedSquad",
    "build_problem",
    "optimize_squad",
    "sweep_lambdas",
    "validate_solution",
]
