"""
Growth phase for the tick engine.

Runs at the start of every tick, before any queued move is resolved:
- Fast clock (every 2 ticks): Kings and owned Fortresses gain 1 unit
- Slow clock (every 32 ticks, only when the fast clock also fires):
  Captured cells gain 1 unit
- Neutral Fortresses, Open and Mountain cells never grow
"""

from typing import TYPE_CHECKING, Dict

from board import Board
from models import CellKind

if TYPE_CHECKING:
    from state import GameState

FAST_GROWTH_INTERVAL = 2
SLOW_GROWTH_INTERVAL = 32


def is_fast_growth_tick(tick_number: int) -> bool:
    return tick_number % FAST_GROWTH_INTERVAL == 0


def is_slow_growth_tick(tick_number: int) -> bool:
    """Slow growth is gated by the fast clock as well as its own interval."""
    return tick_number % SLOW_GROWTH_INTERVAL == 0 and is_fast_growth_tick(tick_number)


def grow_board(board: Board, tick_number: int) -> int:
    """
    Apply one tick of growth to every cell of `board`.

    Args:
        board: Board to grow in place
        tick_number: Number of the tick being run (already incremented)

    Returns:
        Number of cells that gained a unit
    """
    fast = is_fast_growth_tick(tick_number)
    slow = is_slow_growth_tick(tick_number)
    if not fast:
        return 0

    grown = 0
    for _, cell in board.iter_cells():
        if cell.kind == CellKind.KING or (cell.kind == CellKind.FORTRESS and cell.owner is not None):
            cell.units += 1
            grown += 1
        elif cell.kind == CellKind.CAPTURED and slow:
            cell.units += 1
            grown += 1
    return grown


def perform_growth(game_state: "GameState") -> Dict:
    """
    Growth phase of `game_state.tick()`.

    Returns:
        {'fast': bool, 'slow': bool, 'cells_grown': int}
    """
    tick_number = game_state.tick_number
    return {
        'fast': is_fast_growth_tick(tick_number),
        'slow': is_slow_growth_tick(tick_number),
        'cells_grown': grow_board(game_state.board, tick_number),
    }
