from flask import Flask, request, jsonify
from flask_cors import CORS
from state import initialize_game, get_game_summary, GameState
from models import Direction, Move
from orders import MoveValidationError, get_move_summary, log_event
from typing import Dict
import threading
import uuid

app = Flask(__name__)
CORS(app)  # Enable CORS for all routes
games: Dict[str, GameState] = {}  # In-memory storage for game states
games_lock = threading.Lock()  # Ticks and queue writes never interleave

MAX_TICKS_PER_REQUEST = 1000
MAX_BOARD_SIZE = 128
MAX_PLAYERS = 16


@app.route('/api/game/new', methods=['POST'])
def new_game():
    """Create a new game with the provided seed, size and player count."""
    try:
        data = request.get_json(silent=True)
        if data is None:
            return jsonify({'error': 'Invalid JSON data'}), 400

        try:
            seed = int(data.get('seed', 42))
            size = int(data['size']) if 'size' in data else None
            num_players = int(data['num_players']) if 'num_players' in data else None
        except (ValueError, TypeError):
            return jsonify({'error': 'seed, size and num_players must be integers'}), 400

        if size is not None and not 2 <= size <= MAX_BOARD_SIZE:
            return jsonify({'error': f'size must be between 2 and {MAX_BOARD_SIZE}'}), 400

        if num_players is not None and num_players > MAX_PLAYERS:
            return jsonify({'error': f'num_players must be at most {MAX_PLAYERS}'}), 400

        try:
            game_state = initialize_game(seed, size=size, num_players=num_players)
        except ValueError as e:
            return jsonify({'error': str(e)}), 400

        game_id = str(uuid.uuid4())
        with games_lock:
            games[game_id] = game_state

        return jsonify({'game_id': game_id})

    except Exception as e:
        return jsonify({'error': f'Failed to create game: {str(e)}'}), 500


@app.route('/api/game/<game_id>/state', methods=['GET'])
def get_game_state(game_id: str):
    """Retrieve the current board and queues for the given game ID."""
    try:
        with games_lock:
            if game_id not in games:
                return jsonify({'error': 'Game not found'}), 404
            summary = get_game_summary(games[game_id])

        summary['game_id'] = game_id
        return jsonify(summary)

    except Exception as e:
        return jsonify({'error': f'Failed to retrieve game state: {str(e)}'}), 500


@app.route('/api/game/<game_id>/moves', methods=['POST'])
def queue_move(game_id: str):
    """Append one move to the back of a team's queue."""
    try:
        data = request.get_json(silent=True)
        if data is None:
            return jsonify({'error': 'Invalid JSON data'}), 400

        if not all(key in data for key in ['team', 'x', 'y', 'direction']):
            return jsonify({'error': 'Move must have team, x, y and direction fields'}), 400

        try:
            team = int(data['team'])
            source = (int(data['x']), int(data['y']))
        except (ValueError, TypeError):
            return jsonify({'error': 'team, x and y must be integers'}), 400

        try:
            direction = Direction(data['direction'])
        except ValueError:
            return jsonify({'error': f"Invalid direction: {data['direction']}"}), 400

        with games_lock:
            if game_id not in games:
                return jsonify({'error': 'Game not found'}), 404
            game_state = games[game_id]
            try:
                move = game_state.queue_move(team, Move(source, direction))
            except MoveValidationError as e:
                log_event(game_state, f"Rejected move for team {team}: {str(e)}",
                          team=team, error_type="validation_error")
                return jsonify({'error': str(e)}), 400
            queued = len(game_state.player_mut(team).moves)

        return jsonify({'game_id': game_id, 'team': team, 'move': get_move_summary(move), 'queued': queued})

    except Exception as e:
        return jsonify({'error': f'Failed to queue move: {str(e)}'}), 500


@app.route('/api/game/<game_id>/moves', methods=['DELETE'])
def clear_moves(game_id: str):
    """Clear a team's whole movement queue."""
    try:
        team = request.args.get('team', type=int)
        if team is None:
            return jsonify({'error': 'team query parameter is required'}), 400

        with games_lock:
            if game_id not in games:
                return jsonify({'error': 'Game not found'}), 404
            game_state = games[game_id]
            if not 0 <= team < game_state.num_players:
                return jsonify({'error': f'Unknown team {team}'}), 400
            game_state.player_mut(team).clear_movement_queue()
            log_event(game_state, f"Team {team} cleared its movement queue", team=team)

        return jsonify({'game_id': game_id, 'team': team, 'queued': 0})

    except Exception as e:
        return jsonify({'error': f'Failed to clear moves: {str(e)}'}), 500


@app.route('/api/game/<game_id>/tick', methods=['POST'])
def run_ticks(game_id: str):
    """Run one or more ticks and return the moves resolved in each."""
    try:
        data = request.get_json(silent=True) or {}
        try:
            count = int(data.get('count', 1))
        except (ValueError, TypeError):
            return jsonify({'error': 'count must be an integer'}), 400

        if not 1 <= count <= MAX_TICKS_PER_REQUEST:
            return jsonify({'error': f'count must be between 1 and {MAX_TICKS_PER_REQUEST}'}), 400

        with games_lock:
            if game_id not in games:
                return jsonify({'error': 'Game not found'}), 404
            game_state = games[game_id]
            ticks = []
            for _ in range(count):
                results = game_state.tick()
                ticks.append({'tick': game_state.tick_number, 'moves': results})
            summary = get_game_summary(game_state)

        return jsonify({'game_id': game_id, 'tick': summary['tick'], 'ticks': ticks, 'state': summary})

    except Exception as e:
        return jsonify({'error': f'Failed to run tick: {str(e)}'}), 500


@app.route('/api/game/<game_id>/log', methods=['GET'])
def get_game_log(game_id: str):
    """Retrieve the full game log for analysis."""
    try:
        with games_lock:
            if game_id not in games:
                return jsonify({'error': 'Game not found'}), 404
            game_state = games[game_id]
            log_response = {
                'game_id': game_id,
                'tick': game_state.tick_number,
                'log': list(game_state.log)
            }

        return jsonify(log_response)

    except Exception as e:
        return jsonify({'error': f'Failed to retrieve game log: {str(e)}'}), 500


if __name__ == '__main__':
    app.run(debug=True)
