"""Lightweight REST client for the fplsquad API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def _load_players(path: Path) -> list[dict]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid players JSON: {exc}") from exc
    if isinstance(payload, dict):
        payload = payload.get("elements", [])
    return payload


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the fplsquad REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("players", type=Path, help="Players JSON file")
    parser.add_argument("lams", type=float, nargs="+", help="One lambda for /squad, several for /sweep")
    parser.add_argument("--league", default="FPL", help="Squad rule set")
    parser.add_argument("--jobs", type=int, default=None, help="Worker processes for a sweep")
    args = parser.parse_args()

    players = _load_players(args.players)

    with httpx.Client(base_url=args.base_url, timeout=120.0) as client:
        if len(args.lams) == 1:
            resp = client.post(
                "/squad",
                json={"lam": args.lams[0], "league": args.league, "players": players},
            )
        else:
            resp = client.post(
                "/sweep",
                json={"lams": args.lams, "league": args.league, "players": players, "jobs": args.jobs},
            )
        if resp.status_code >= 400:
            raise SystemExit(f"{resp.status_code}: {resp.json().get('detail')}")
        print(json.dumps(resp.json(), indent=2))


if __name__ == "__main__":
    main()
