from typing import TYPE_CHECKING, Any, Dict, List

from models import Direction, Move, Team
from resolution import BLOCKED, CONQUERED, EXHAUSTED, KING_DEFEATED, resolve_move

if TYPE_CHECKING:
    from state import GameState


class MoveValidationError(Exception):
    """Exception raised when a producer tries to queue an invalid move."""
    pass


def log_event(game_state: "GameState", event: str, **kwargs) -> None:
    """
    Add an event to the game state log.

    Args:
        game_state: Current game state
        event: Description of the event
        **kwargs: Additional event data to include
    """
    log_entry = {
        'tick': game_state.tick_number,
        'event': event,
        **kwargs
    }
    game_state.log.append(log_entry)


def validate_move(game_state: "GameState", team: Team, move: Move) -> bool:
    """Validate a move before it is queued.

    Ownership of the source is not checked here: a queued path may run
    through cells the team will only hold by the time the move is drained.
    """
    if not 0 <= team < len(game_state.player_states):
        raise MoveValidationError(f"Unknown team {team}")

    if not isinstance(move.direction, Direction):
        raise MoveValidationError(f"Invalid direction: {move.direction!r}")

    board = game_state.board
    if board.try_get(*move.source) is None:
        raise MoveValidationError(f"Source {move.source} is outside the board")

    if move.direction.step_from(move.source, board.width, board.height) is None:
        raise MoveValidationError(f"Target {move.target} is outside the board")

    return True


def resolve_moves(game_state: "GameState") -> List[Dict[str, Any]]:
    """Drain at most one queued move per team, in team-index order.

    An exhausted army or a bump into a Mountain clears that team's whole
    queue; every other outcome leaves the rest of the queue for later ticks.
    """
    results = []

    for team, player_state in enumerate(game_state.player_states):
        move = player_state.pop_move()
        if move is None:
            continue

        result = resolve_move(game_state.board, team, move)
        results.append(result)
        outcome = result["outcome"]

        if outcome == EXHAUSTED:
            dropped = len(player_state.moves)
            player_state.clear_movement_queue()
            log_event(game_state, f"Team {team} ran out of army at {move.source}, {dropped} queued moves dropped",
                      team=team, position=move.source, dropped=dropped)
        elif outcome == BLOCKED:
            dropped = len(player_state.moves)
            player_state.clear_movement_queue()
            log_event(game_state, f"Team {team} marched into a mountain at {move.target}, {dropped} queued moves dropped",
                      team=team, position=move.target, dropped=dropped)
        elif outcome == KING_DEFEATED:
            log_event(game_state, f"Team {team} took the king of team {result['defender']} at {move.target}",
                      team=team, defender=result['defender'], position=move.target, units=result['units'])
        elif outcome == CONQUERED:
            log_event(game_state, f"Team {team} conquered {move.target} with {result['units']} units",
                      team=team, defender=result['defender'], position=move.target, units=result['units'])
        else:
            log_event(game_state, f"Team {team} moved {result['units']} units {move.direction.value} "
                      f"from {move.source} to {move.target}: {outcome}",
                      team=team, outcome=outcome, units=result['units'])

    return results


def get_move_summary(move: Move) -> Dict[str, Any]:
    """Get a summary of a queued move for API responses."""
    return {
        "source": {"x": move.source[0], "y": move.source[1]},
        "direction": move.direction.value,
        "target": {"x": move.target[0], "y": move.target[1]},
    }
