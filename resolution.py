from typing import Any, Dict

from board import Board
from models import Cell, CellKind, Move, Team

# Outcomes of a single resolved move
REINFORCED = "reinforced"
CAPTURED = "captured"
REPELLED = "repelled"
CONQUERED = "conquered"
KING_DEFEATED = "king_defeated"
BLOCKED = "blocked"
EXHAUSTED = "exhausted"


def resolve_move(board: Board, team: Team, move: Move) -> Dict[str, Any]:
    """Push units from `move.source` one step and resolve them against the target cell.

    The target is trusted to be on the board (producers validate before
    enqueueing). The caller decides what to do with the queue for the
    `exhausted` and `blocked` outcomes; the board is already settled.
    """
    x, y = move.source
    new_x, new_y = move.target
    result = {"team": team, "from": move.source, "to": move.target, "units": 0}

    source = board.get_mut(x, y)
    if not source.is_controlled_by(team):
        # Source lost to another team (or never held) since the move was queued
        result["outcome"] = EXHAUSTED
        return result

    units = source.take_units()
    result["units"] = units
    if units == 0:
        result["outcome"] = EXHAUSTED
        return result

    target = board.get_mut(new_x, new_y)

    if target.is_controlled_by(team):
        target.give_units(units)
        result["outcome"] = REINFORCED
    elif target.kind == CellKind.MOUNTAIN:
        source.give_units(units)
        result["outcome"] = BLOCKED
    elif target.kind == CellKind.OPEN:
        board.set(new_x, new_y, Cell.captured(team, units))
        result["outcome"] = CAPTURED
    elif target.kind in (CellKind.CAPTURED, CellKind.FORTRESS):
        result["defender"] = target.owner
        result["outcome"] = attack_cell(target, team, units)
    else:  # CellKind.KING
        result["defender"] = target.owner
        if target.units >= units:
            target.units -= units
            result["outcome"] = REPELLED
        else:
            units -= target.units - 1
            board.set(new_x, new_y, Cell.fortress(team, units))
            result["outcome"] = KING_DEFEATED

    return result


def attack_cell(target: Cell, team: Team, units: int) -> str:
    """Strength comparison against a Captured or Fortress cell, mutating it in place.

    Ties favour the defender, which may be left with 0 units.
    """
    if target.units >= units:
        target.units -= units
        return REPELLED
    target.owner = team
    target.units = units - target.units
    return CONQUERED
