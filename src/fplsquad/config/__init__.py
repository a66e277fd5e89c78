"""Configuration helpers for league squad rules."""

from .rules import DEFAULT_RULES, LeagueRules, get_rules, iter_rules

__all__ = [
    "DEFAULT_RULES",
    "LeagueRules",
    "get_rules",
    "iter_rules",
]
