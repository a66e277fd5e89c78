"""Error types raised by the squad optimizer pipeline."""

from __future__ import annotations


class SquadError(Exception):
    """Base class for every failure surfaced by a single solve."""


class DataLoadError(SquadError):
    """Raised when player records are missing, malformed, or out of range."""


class ModelError(SquadError):
    """Raised when the solver cannot produce an optimal point."""


class InfeasibleModelError(ModelError):
    """No assignment satisfies every constraint row."""


class UnboundedModelError(ModelError):
    """The objective decreases without limit over the feasible region."""


class SolverError(ModelError):
    """The backend failed or returned values that cannot be trusted."""


class ConsistencyError(SquadError):
    """A validated solution broke an invariant the formulation guarantees."""


class IntegralityViolation(ConsistencyError):
    def __init__(self, index: int, value: object):
        super().__init__(f"variable {index} has non-integral value {value}")
        self.index = index
        self.value = value


class ConstraintViolation(ConsistencyError):
    def __init__(self, label: str, lhs: object, bound: object):
        super().__init__(f"row {label!r} violated: {lhs} > {bound}")
        self.label = label
        self.lhs = lhs
        self.bound = bound


__all__ = [
    "SquadError",
    "DataLoadError",
    "ModelError",
    "InfeasibleModelError",
    "UnboundedModelError",
    "SolverError",
    "ConsistencyError",
    "IntegralityViolation",
    "ConstraintViolation",
]
