"""Command-line interface for selecting a squad for a given lambda."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional, Sequence

from fplsquad.config import get_rules, iter_rules
from fplsquad.exceptions import ConsistencyError, DataLoadError, ModelError
from fplsquad.ingest import BOOTSTRAP_URL, DEFAULT_PLAYERS_PATH, fetch_catalog, load_catalog
from fplsquad.optimizer import PulpSolver, optimize_squad
from fplsquad.report import format_report


logger = logging.getLogger(__name__)

EXIT_USAGE = 1
EXIT_DATA = 2
EXIT_MODEL = 3
EXIT_CONSISTENCY = 4


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, f"{self.prog}: error: {message}\n")


def _lambda(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid LAMBDA {raw!r}") from None
    if value < 0 or value != value:
        raise argparse.ArgumentTypeError(f"LAMBDA must be a non-negative number, got {raw!r}")
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="fplsquad",
        description="Select an optimal 15-player FPL squad for a cost trade-off LAMBDA",
    )
    parser.add_argument("lam", metavar="LAMBDA", type=_lambda, help="Lagrange multiplier on player cost")
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--players",
        type=Path,
        default=DEFAULT_PLAYERS_PATH,
        help="Players JSON file (list or bootstrap-static document)",
    )
    source.add_argument(
        "--fetch",
        nargs="?",
        const=BOOTSTRAP_URL,
        default=None,
        metavar="URL",
        help="Download players from the FPL bootstrap-static endpoint",
    )
    parser.add_argument(
        "--league",
        default="FPL",
        choices=[rules.key for rules in iter_rules()],
        help="Squad rule set",
    )
    parser.add_argument("--solver", default=None, help="Solver backend (cbc or highs)")
    parser.add_argument(
        "--integral",
        action="store_true",
        help="Declare variables binary instead of solving the LP relaxation",
    )
    parser.add_argument("--verbose", action="store_true", help="Log pipeline progress")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        catalog = fetch_catalog(args.fetch) if args.fetch else load_catalog(args.players)
        result = optimize_squad(
            catalog,
            args.lam,
            rules=get_rules(args.league),
            solver=PulpSolver(args.solver, integral=args.integral),
        )
    except DataLoadError as exc:
        print(f"Unable to load players: {exc}", file=sys.stderr)
        return EXIT_DATA
    except ModelError as exc:
        print(f"No squad found: {exc}", file=sys.stderr)
        return EXIT_MODEL
    except ConsistencyError as exc:
        logger.error("Solution failed validation: %s", exc)
        print(f"Internal consistency failure: {exc}", file=sys.stderr)
        return EXIT_CONSISTENCY

    sys.stdout.write(format_report(result.squad))
    return 0


if __name__ == "__main__":
    sys.exit(main())
