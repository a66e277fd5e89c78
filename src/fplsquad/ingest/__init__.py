"""Input adapters that normalize raw player data."""

from .players import (
    BOOTSTRAP_URL,
    DEFAULT_PLAYERS_PATH,
    RawPlayerRow,
    catalog_from_payload,
    fetch_catalog,
    load_catalog,
    parse_rows,
    rows_to_catalog,
)

__all__ = [
    "BOOTSTRAP_URL",
    "DEFAULT_PLAYERS_PATH",
    "RawPlayerRow",
    "catalog_from_payload",
    "fetch_catalog",
    "load_catalog",
    "parse_rows",
    "rows_to_catalog",
]
