from collections import Counter
from fractions import Fraction

import pulp
import pytest

from fplsquad.config import DEFAULT_RULES
from fplsquad.exceptions import DataLoadError, InfeasibleModelError
from fplsquad.models import Catalog, PlayerRecord
from fplsquad.optimizer import PulpSolver, build_problem, optimize_squad, sweep_lambdas
from fplsquad.optimizer.service import _sweep_jobs


def _selected_indices(result) -> list[int]:
    return [player.index for player in result.squad.selected]


@pytest.mark.parametrize("lam", [0.0, 0.01, 0.05, 0.2])
def test_squad_satisfies_fpl_rules(full_catalog, lam):
    result = optimize_squad(full_catalog, lam)
    selected = result.squad.selected

    assert len(selected) == 15
    positions = Counter(player.position_id for player in selected)
    assert [positions[pid] for pid in range(4)] == [2, 5, 5, 3]
    teams = Counter(player.team_id for player in selected)
    assert max(teams.values()) <= 3


def test_every_indicator_is_zero_or_one(full_catalog):
    result = optimize_squad(full_catalog, 0.03)
    assert len(result.squad.entries) == len(full_catalog)
    assert {entry.selected for entry in result.squad.entries} <= {True, False}
    assert [entry.player.index for entry in result.squad.entries] == list(range(len(full_catalog)))


def test_objective_matches_selected_players(full_catalog):
    lam = 0.04
    result = optimize_squad(full_catalog, lam)
    expected = sum(player.expected_form - lam * player.cost for player in result.squad.selected)

    assert result.objective == pytest.approx(expected)
    assert result.squad.total_cost == pytest.approx(sum(p.cost for p in result.squad.selected))
    assert result.squad.total_form == pytest.approx(sum(p.form for p in result.squad.selected))


def test_repeated_solves_pick_the_same_squad(full_catalog):
    first = optimize_squad(full_catalog, 0.02)
    second = optimize_squad(full_catalog, 0.02)
    assert _selected_indices(first) == _selected_indices(second)


def test_higher_lambda_never_raises_cost_or_form(full_catalog):
    cheap = optimize_squad(full_catalog, 10.0)
    free = optimize_squad(full_catalog, 0.0)

    assert cheap.squad.total_cost <= free.squad.total_cost
    assert cheap.squad.total_expected_form <= free.squad.total_expected_form + 1e-9
    # With lam = 0 the objective is the best achievable expected form.
    assert free.objective == pytest.approx(free.squad.total_expected_form)


def test_goalkeeper_scenario(goalkeeper_catalog, goalkeeper_rules):
    result = optimize_squad(goalkeeper_catalog, 0.01, rules=goalkeeper_rules)

    assert _selected_indices(result) == [0, 2]
    assert result.objective == pytest.approx(10.1)


def test_integral_mode_agrees_with_relaxation(goalkeeper_catalog, goalkeeper_rules):
    relaxed = optimize_squad(goalkeeper_catalog, 0.01, rules=goalkeeper_rules)
    integral = optimize_squad(
        goalkeeper_catalog,
        0.01,
        rules=goalkeeper_rules,
        solver=PulpSolver(integral=True),
    )
    assert _selected_indices(relaxed) == _selected_indices(integral)


def test_single_goalkeeper_is_infeasible(full_catalog):
    keepers_seen = 0
    records = []
    for player in full_catalog.players:
        if player.position_id == 0:
            keepers_seen += 1
            if keepers_seen > 1:
                continue
        records.append(player.model_copy(update={"index": len(records)}))
    catalog = Catalog.from_records(records)

    with pytest.raises(InfeasibleModelError):
        optimize_squad(catalog, 0.01)


def test_no_goalkeepers_is_infeasible(full_catalog):
    records = []
    for player in full_catalog.players:
        if player.position_id != 0:
            records.append(player.model_copy(update={"index": len(records)}))

    with pytest.raises(InfeasibleModelError):
        optimize_squad(Catalog.from_records(records), 0.01)


def test_out_of_range_catalog_is_rejected_before_solving():
    catalog = Catalog.from_records(
        [PlayerRecord(index=0, name="Ghost", team_id=25, position_id=0, cost=40, form=1)]
    )
    with pytest.raises(DataLoadError):
        optimize_squad(catalog, 0.01, rules=DEFAULT_RULES)


def test_sweep_returns_outcomes_in_order(full_catalog):
    outcomes = sweep_lambdas(full_catalog, [0.0, 0.05, 1.0], jobs=1)

    assert [outcome.lam for outcome in outcomes] == [0.0, 0.05, 1.0]
    assert all(outcome.error is None for outcome in outcomes)
    costs = [outcome.result.squad.total_cost for outcome in outcomes]
    assert costs == sorted(costs, reverse=True)
    single = optimize_squad(full_catalog, 0.05)
    assert _selected_indices(outcomes[1].result) == _selected_indices(single)


def test_sweep_reports_failures_per_lambda(goalkeeper_catalog):
    outcomes = sweep_lambdas(goalkeeper_catalog, [0.01], jobs=1)

    assert outcomes[0].result is None
    assert outcomes[0].error.startswith("InfeasibleModelError")


def test_sweep_jobs_reads_environment(monkeypatch):
    monkeypatch.setenv("FPLSQUAD_SWEEP_JOBS", "4")
    assert _sweep_jobs(None, 10) == 4
    assert _sweep_jobs(None, 2) == 2
    monkeypatch.setenv("FPLSQUAD_SWEEP_JOBS", "many")
    assert _sweep_jobs(None, 10) == 1


def _with_team_zero_stars(catalog: Catalog) -> Catalog:
    records = list(catalog.players)
    for position_id in range(4):
        for _ in range(2):
            records.append(
                PlayerRecord(
                    index=len(records),
                    name=f"Star {len(records)}",
                    team_id=0,
                    position_id=position_id,
                    cost=40.0,
                    form=100.0,
                )
            )
    return Catalog.from_records(records)


def test_team_cap_binds_when_one_team_has_every_best_player(full_catalog):
    catalog = _with_team_zero_stars(full_catalog)
    stars = {player.index for player in catalog.players if player.name.startswith("Star")}

    result = optimize_squad(catalog, 0.0)

    assert result.squad.team_counts[0] == 3
    assert len({player.index for player in result.squad.selected} & stars) == 3
    assert {entry.selected for entry in result.squad.entries} <= {True, False}
    raw = PulpSolver().solve(build_problem(catalog, 0.0, DEFAULT_RULES))
    assert set(raw.values) <= {Fraction(0), Fraction(1)}


def test_parallel_sweep_matches_serial_sweep(full_catalog):
    lams = [1.0, 0.0, 0.05, 0.2]
    serial = sweep_lambdas(full_catalog, lams, jobs=1)
    parallel = sweep_lambdas(full_catalog, lams, jobs=2)

    assert [outcome.lam for outcome in parallel] == lams
    assert all(outcome.error is None for outcome in parallel)
    assert [_selected_indices(o.result) for o in parallel] == [
        _selected_indices(o.result) for o in serial
    ]
    assert [o.result.objective for o in parallel] == pytest.approx(
        [o.result.objective for o in serial]
    )


def test_sweep_keeps_going_after_a_solver_failure(full_catalog, monkeypatch):
    real_solve = pulp.LpProblem.solve
    calls = []

    def flaky_solve(self, solver=None, **kwargs):
        calls.append(solver)
        if len(calls) == 1:
            raise pulp.PulpSolverError("cbc crashed")
        return real_solve(self, solver, **kwargs)

    monkeypatch.setattr(pulp.LpProblem, "solve", flaky_solve)
    outcomes = sweep_lambdas(full_catalog, [0.0, 0.05], jobs=1)

    assert outcomes[0].result is None
    assert outcomes[0].error.startswith("SolverError")
    assert outcomes[1].error is None
    assert len(outcomes[1].result.squad.selected) == 15
