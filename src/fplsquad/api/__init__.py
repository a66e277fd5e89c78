"""REST API for the squad optimizer."""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException

from fplsquad.api.schemas import (
    SquadPlayerResponse,
    SquadRequest,
    SquadResponse,
    SweepPointResponse,
    SweepRequest,
    SweepResponse,
)
from fplsquad.config import LeagueRules, get_rules
from fplsquad.exceptions import ConsistencyError, DataLoadError, ModelError
from fplsquad.ingest import catalog_from_payload
from fplsquad.models import Catalog
from fplsquad.optimizer import SquadResult, optimize_squad, sweep_lambdas


logger = logging.getLogger(__name__)


def _resolve_rules(league: str) -> LeagueRules:
    try:
        return get_rules(league)
    except KeyError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _load(players: list[dict], rules: LeagueRules) -> Catalog:
    try:
        catalog = catalog_from_payload(players)
        catalog.check_rules(rules)
    except DataLoadError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return catalog


def _to_response(result: SquadResult, rules: LeagueRules) -> SquadResponse:
    squad = result.squad
    return SquadResponse(
        lam=result.lam,
        objective=squad.objective,
        total_cost=squad.total_cost,
        total_form=squad.total_form,
        total_expected_form=squad.total_expected_form,
        backend=result.backend,
        players=[
            SquadPlayerResponse(
                index=player.index,
                name=player.name,
                team_id=player.team_id,
                position=rules.position_name(player.position_id),
                cost=player.cost,
                form=player.form,
                expected_form=player.expected_form,
            )
            for player in squad.selected
        ],
    )


def create_app() -> FastAPI:
    app = FastAPI(title="fplsquad optimizer")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/squad", response_model=SquadResponse)
    def squad(request: SquadRequest) -> SquadResponse:
        rules = _resolve_rules(request.league)
        catalog = _load(request.players, rules)
        try:
            result = optimize_squad(catalog, request.lam, rules=rules)
        except ModelError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except ConsistencyError as exc:
            logger.error("Solution failed validation: %s", exc)
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return _to_response(result, rules)

    @app.post("/sweep", response_model=SweepResponse)
    def sweep(request: SweepRequest) -> SweepResponse:
        rules = _resolve_rules(request.league)
        catalog = _load(request.players, rules)
        outcomes = sweep_lambdas(catalog, request.lams, rules=rules, jobs=request.jobs)
        points: list[SweepPointResponse] = []
        for outcome in outcomes:
            if outcome.result is None:
                points.append(SweepPointResponse(lam=outcome.lam, error=outcome.error))
                continue
            squad = outcome.result.squad
            points.append(
                SweepPointResponse(
                    lam=outcome.lam,
                    objective=squad.objective,
                    total_cost=squad.total_cost,
                    total_form=squad.total_form,
                    player_indices=[player.index for player in squad.selected],
                )
            )
        return SweepResponse(points=points)

    return app
