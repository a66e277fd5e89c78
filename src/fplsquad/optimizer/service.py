"""End-to-end squad selection: build, solve, validate."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import multiprocessing as mp
import os
import time
from typing import List, Optional, Sequence

from fplsquad.config import DEFAULT_RULES, LeagueRules
from fplsquad.exceptions import SquadError
from fplsquad.models import Catalog
from fplsquad.optimizer.problem import build_problem
from fplsquad.optimizer.solver import LinearSolver, PulpSolver
from fplsquad.optimizer.validation import ValidatedSquad, validate_solution


logger = logging.getLogger(__name__)

_SWEEP_JOBS_ENV = "FPLSQUAD_SWEEP_JOBS"


@dataclass(frozen=True)
class SquadResult:
    lam: float
    squad: ValidatedSquad
    backend: str

    @property
    def objective(self) -> float:
        return self.squad.objective


def optimize_squad(
    catalog: Catalog,
    lam: float,
    *,
    rules: LeagueRules = DEFAULT_RULES,
    solver: Optional[LinearSolver] = None,
) -> SquadResult:
    """Select the squad maximizing ``expected_form - lam * cost``.

    Raises DataLoadError for catalogs outside ``rules``, ModelError when the
    solver finds no optimum, and ConsistencyError when the returned point is
    not an integral feasible squad.
    """

    catalog.check_rules(rules)
    solver = solver or PulpSolver()

    start = time.perf_counter()
    problem = build_problem(catalog, lam, rules)
    logger.info(
        "Built %s problem: %s players, %s rows, lam=%g",
        rules.key,
        problem.n_variables,
        len(problem.rows),
        lam,
    )
    result = solver.solve(problem)
    squad = validate_solution(problem, catalog, result)
    logger.info("Solve for lam=%g finished in %.2fs", lam, time.perf_counter() - start)
    return SquadResult(lam=lam, squad=squad, backend=result.backend)


@dataclass(frozen=True)
class SweepJobConfig:
    job_id: int
    catalog: Catalog
    lam: float
    rules: LeagueRules
    backend: Optional[str]
    integral: bool


@dataclass(frozen=True)
class SweepOutcome:
    lam: float
    result: Optional[SquadResult] = None
    error: Optional[str] = None


def _run_sweep_job(config: SweepJobConfig) -> SweepOutcome:
    solver = PulpSolver(config.backend, integral=config.integral)
    try:
        result = optimize_squad(config.catalog, config.lam, rules=config.rules, solver=solver)
    except SquadError as exc:
        logger.warning("Sweep job %s (lam=%g) failed: %s", config.job_id, config.lam, exc)
        return SweepOutcome(lam=config.lam, error=f"{type(exc).__name__}: {exc}")
    return SweepOutcome(lam=config.lam, result=result)


def _sweep_jobs(jobs: Optional[int], n_lams: int) -> int:
    if jobs is None:
        raw = os.getenv(_SWEEP_JOBS_ENV)
        try:
            jobs = int(raw) if raw is not None else 1
        except ValueError:
            logger.warning("Invalid int for %s: %s; using 1", _SWEEP_JOBS_ENV, raw)
            jobs = 1
    return max(1, min(jobs, n_lams))


def sweep_lambdas(
    catalog: Catalog,
    lams: Sequence[float],
    *,
    rules: LeagueRules = DEFAULT_RULES,
    jobs: Optional[int] = None,
    backend: Optional[str] = None,
    integral: bool = False,
) -> List[SweepOutcome]:
    """Solve one squad per lambda; outcomes are returned in input order.

    Each solve is independent, so with ``jobs > 1`` they run in separate
    worker processes that each receive their own copy of the catalog.
    """

    if not lams:
        return []
    configs = [
        SweepJobConfig(
            job_id=job_id,
            catalog=catalog,
            lam=float(lam),
            rules=rules,
            backend=backend,
            integral=integral,
        )
        for job_id, lam in enumerate(lams)
    ]
    workers = _sweep_jobs(jobs, len(configs))
    logger.info("Sweeping %s lambda values with %s worker(s)", len(configs), workers)

    if workers == 1:
        return [_run_sweep_job(config) for config in configs]

    ctx = mp.get_context("spawn")
    with ctx.Pool(processes=workers) as pool:
        return pool.map(_run_sweep_job, configs)
