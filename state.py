"""
Game state management for the territory-capture tick engine.

GameState owns the board, the tick counter and one PlayerState per team.
Each tick runs the growth phase and then drains at most one queued move per
team; producers only ever append moves (or clear a queue) between ticks.
"""

from __future__ import annotations
import json
import os
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from board import Board, generate_board
from models import Direction, Move, PlayerState, Position, Team
from orders import get_move_summary, log_event, resolve_moves, validate_move
from upkeep import perform_growth

DEFAULT_CONFIG: Dict[str, Any] = {
    'board_size': 32,
    'num_players': 2,
    'king_initial_units': 0,
    'tick_interval': 0.5,
    'open_weight': 100,
    'mountain_weight': 10,
    'fortress_weight': 3,
    'fortress_units': [40, 50],
}


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load config.json, falling back to defaults for a missing or invalid file.

    Args:
        config_path: Path to the config file (default: config.json next to this module)

    Returns:
        Defaults overlaid with the values found in the file
    """
    if config_path is None:
        config_path = os.path.join(os.path.dirname(__file__), 'config.json')

    config = dict(DEFAULT_CONFIG)
    try:
        with open(config_path, 'r') as f:
            config.update(json.load(f))
    except (FileNotFoundError, json.JSONDecodeError):
        # Use defaults if config file is missing or invalid
        pass
    return config


@dataclass
class GameState:
    """
    Complete simulation state.

    The tick engine and move producers are the only writers; `player_states`
    is indexed by team.
    """
    board: Board
    tick_number: int = 0  # Ticks run so far
    player_states: List[PlayerState] = field(default_factory=list)
    log: List[Dict[str, Any]] = field(default_factory=list)  # Event log

    @property
    def num_players(self) -> int:
        return len(self.player_states)

    @property
    def dimens(self) -> Tuple[int, int]:
        return self.board.dimens

    def player_mut(self, team: Team) -> PlayerState:
        """Mutable handle on a team's queue for move producers."""
        return self.player_states[team]

    def tick(self) -> List[Dict[str, Any]]:
        """
        Advance the simulation by one step: growth, then one move per team.

        Returns:
            Results of the moves resolved this tick, in team order
        """
        self.tick_number += 1
        perform_growth(self)
        return resolve_moves(self)

    def queue_move(self, team: Team, move: Move) -> Move:
        """Validate `move` and append it to the back of the team's queue."""
        validate_move(self, team, move)
        self.player_mut(team).push_move(move)
        return move

    def focus(self, position: Position, team: Team) -> bool:
        """Put the team's cursor on `position` if it is on the board."""
        if self.board.try_get(*position) is None:
            return False
        self.player_mut(team).focus = position
        return True

    def reset_player_focus(self, team: Team) -> None:
        """Drop the team's cursor along with everything it has queued."""
        player_state = self.player_mut(team)
        player_state.focus = None
        player_state.clear_movement_queue()

    def queue_direction(self, team: Team, direction: Direction) -> Optional[Move]:
        """
        Queue a move from the team's cursor and step the cursor onto its target.

        Returns:
            The queued Move, or None if there is no cursor or the step leaves the board
        """
        player_state = self.player_mut(team)
        if player_state.focus is None:
            return None
        target = direction.step_from(player_state.focus, self.board.width, self.board.height)
        if target is None:
            return None
        move = Move(player_state.focus, direction)
        player_state.push_move(move)
        player_state.focus = target
        return move


def initialize_game(seed: Optional[int] = None, size: Optional[int] = None,
                    num_players: Optional[int] = None,
                    config: Optional[Dict[str, Any]] = None) -> GameState:
    """
    Initialize a new game with a randomly generated board.

    Args:
        seed: Random seed for board generation (None for an unseeded board)
        size: Board side length (default from config)
        num_players: Number of teams, at least 2 (default from config)
        config: Config dict (default: load_config())

    Returns:
        New GameState at tick 0 with empty queues
    """
    config = {**DEFAULT_CONFIG, **config} if config is not None else load_config()
    size = size if size is not None else config['board_size']
    num_players = num_players if num_players is not None else config['num_players']
    if num_players < 2:
        raise ValueError(f"At least 2 players are required, got {num_players}")

    rng = random.Random(seed)
    board = generate_board(
        size,
        num_players,
        rng=rng,
        terrain_weights=(config['open_weight'], config['mountain_weight'], config['fortress_weight']),
        fortress_units=tuple(config['fortress_units']),
        king_units=config['king_initial_units'],
    )

    game_state = GameState(
        board=board,
        player_states=[PlayerState() for _ in range(num_players)],
    )
    log_event(game_state, f"Game created: {size}x{size} board, {num_players} players",
              seed=seed, size=size, num_players=num_players)
    return game_state


def get_game_summary(game_state: GameState) -> Dict:
    """
    Get a summary of the current game state for API responses.

    Args:
        game_state: Current game state

    Returns:
        Dictionary with tick, board and per-team queue information
    """
    width, height = game_state.dimens
    return {
        'tick': game_state.tick_number,
        'size': {'width': width, 'height': height},
        'players': [
            {
                'team': team,
                'dead': player_state.dead,
                'focus': list(player_state.focus) if player_state.focus else None,
                'moves': [get_move_summary(move) for move in player_state.moves],
            }
            for team, player_state in enumerate(game_state.player_states)
        ],
        'board': [
            [cell.to_dict() for cell in row]
            for row in game_state.board.cells()
        ],
    }
