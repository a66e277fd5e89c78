"""Helpers to load FPL player JSON and emit a validated catalog."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

import httpx
from pydantic import BaseModel, Field, ValidationError

from fplsquad.exceptions import DataLoadError
from fplsquad.models import Catalog, PlayerRecord


logger = logging.getLogger(__name__)

BOOTSTRAP_URL = "https://fantasy.premierleague.com/api/bootstrap-static/"
DEFAULT_PLAYERS_PATH = Path("data") / "players.json"

# The upstream feed formats form as a short decimal string ("5.5"); only the
# leading characters carry the value.
_FORM_WIDTH = 3


class RawPlayerRow(BaseModel):
    web_name: str
    team: int = Field(..., ge=1)
    element_type: int = Field(..., ge=1)
    form: Union[float, str]
    now_cost: float = Field(..., ge=0.0)
    chance_of_playing_next_round: Optional[float] = Field(default=None, ge=0.0, le=100.0)


def _parse_form(raw_form: Union[float, str], *, name: str) -> float:
    if not isinstance(raw_form, str):
        return float(raw_form)
    text = raw_form.strip()[:_FORM_WIDTH]
    try:
        return float(text)
    except ValueError:
        raise DataLoadError(f"form {raw_form!r} for {name!r} is not numeric") from None


def _availability(chance: Optional[float]) -> float:
    if chance is None:
        return 1.0
    return chance / 100.0


def _extract_elements(payload: Any) -> Sequence[Any]:
    if isinstance(payload, dict):
        if "elements" not in payload:
            raise DataLoadError("player document has no 'elements' list")
        payload = payload["elements"]
    if not isinstance(payload, list):
        raise DataLoadError(f"expected a list of players, got {type(payload).__name__}")
    return payload


def parse_rows(payload: Any) -> List[RawPlayerRow]:
    """Validate raw player objects, from a bare list or a bootstrap-static document."""

    rows: List[RawPlayerRow] = []
    for position, item in enumerate(_extract_elements(payload)):
        try:
            rows.append(RawPlayerRow.model_validate(item))
        except ValidationError as exc:
            raise DataLoadError(f"player record {position} is malformed: {exc}") from exc
    return rows


def rows_to_catalog(rows: Sequence[RawPlayerRow]) -> Catalog:
    records: List[PlayerRecord] = []
    for index, row in enumerate(rows):
        records.append(
            PlayerRecord(
                index=index,
                name=row.web_name,
                team_id=row.team - 1,
                position_id=row.element_type - 1,
                cost=row.now_cost,
                form=_parse_form(row.form, name=row.web_name),
                availability=_availability(row.chance_of_playing_next_round),
            )
        )
        logger.debug("Parsed player %d: %s", index, records[-1])
    return Catalog.from_records(records)


def catalog_from_payload(payload: Any) -> Catalog:
    return rows_to_catalog(parse_rows(payload))


def load_catalog(path: Path = DEFAULT_PLAYERS_PATH) -> Catalog:
    """Read a players JSON file from disk."""

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise DataLoadError(f"players file {path} does not exist") from exc
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"players file {path} is not valid JSON: {exc}") from exc
    catalog = catalog_from_payload(payload)
    logger.info("Loaded %s players from %s", len(catalog), path)
    return catalog


def fetch_catalog(
    url: str = BOOTSTRAP_URL,
    *,
    timeout: float = 10.0,
    client: httpx.Client | None = None,
) -> Catalog:
    """Download the bootstrap-static document and build a catalog from its elements."""

    owns_client = client is None
    http = client or httpx.Client(timeout=timeout)
    try:
        resp = http.get(url)
        resp.raise_for_status()
        payload = resp.json()
    except httpx.HTTPError as exc:
        raise DataLoadError(f"unable to fetch players from {url}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"response from {url} is not valid JSON: {exc}") from exc
    finally:
        if owns_client:
            http.close()
    catalog = catalog_from_payload(payload)
    logger.info("Fetched %s players from %s", len(catalog), url)
    return catalog
