"""Plain-text rendering of a validated squad."""

from __future__ import annotations

from typing import List

from fplsquad.optimizer.validation import ValidatedSquad

NAME_WIDTH = 20
COLUMN_WIDTH = 5


def _number(value: float) -> str:
    return f"{value:g}"


def _cell(value: object, width: int) -> str:
    return f"{value!s:<{width}}"


def format_table(squad: ValidatedSquad) -> str:
    rule = "-" * (NAME_WIDTH + 2 * COLUMN_WIDTH)
    lines: List[str] = [
        rule,
        _cell("Web Name", NAME_WIDTH) + _cell("Cost", COLUMN_WIDTH) + _cell("Form", COLUMN_WIDTH),
        rule,
    ]
    for player in squad.selected:
        lines.append(
            _cell(player.name, NAME_WIDTH)
            + _cell(_number(player.cost), COLUMN_WIDTH)
            + _cell(_number(player.form), COLUMN_WIDTH)
        )
    lines.append(rule)
    lines.append(f"Overall Cost: {_number(squad.total_cost)} $")
    lines.append(f"Overall Form: {_number(squad.total_form)}")
    return "\n".join(lines)


def format_report(squad: ValidatedSquad) -> str:
    """Objective line followed by the squad table, newline-terminated."""

    return f"Objective Value: {_number(squad.objective)}\n{format_table(squad)}\n"
