import re

from tests.conftest import create_api_game


def test_new_game(api_client):
    """Test POST /api/game/new creates a game with a valid game_id."""
    response = api_client.post('/api/game/new', json={'seed': 42, 'size': 8})
    assert response.status_code == 200
    uuid_pattern = r'^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$'
    assert re.match(uuid_pattern, response.json['game_id']) is not None


def test_new_game_invalid_json(api_client):
    response = api_client.post('/api/game/new', data='not json', content_type='application/json')
    assert response.status_code == 400


def test_new_game_invalid_values(api_client):
    assert api_client.post('/api/game/new', json={'seed': 'abc'}).status_code == 400
    assert api_client.post('/api/game/new', json={'size': 1}).status_code == 400
    assert api_client.post('/api/game/new', json={'num_players': 1}).status_code == 400


def test_new_game_size_limits(api_client):
    assert api_client.post('/api/game/new', json={'size': 100000}).status_code == 400
    assert api_client.post('/api/game/new', json={'num_players': 1000}).status_code == 400
    response = api_client.post('/api/game/new', json={'size': 128, 'num_players': 16})
    assert response.status_code == 200


def test_get_game_state(api_client):
    game_id = create_api_game(api_client, num_players=3)
    response = api_client.get(f'/api/game/{game_id}/state')
    assert response.status_code == 200
    data = response.json
    assert data['game_id'] == game_id
    assert data['tick'] == 0
    assert data['size'] == {'width': 8, 'height': 8}
    assert len(data['players']) == 3
    assert len(data['board']) == 8


def test_unknown_game(api_client):
    assert api_client.get('/api/game/nope/state').status_code == 404
    assert api_client.get('/api/game/nope/log').status_code == 404
    assert api_client.post('/api/game/nope/tick', json={}).status_code == 404
    assert api_client.post('/api/game/nope/moves',
                           json={'team': 0, 'x': 1, 'y': 1, 'direction': 'up'}).status_code == 404
    assert api_client.delete('/api/game/nope/moves?team=0').status_code == 404


def test_queue_and_clear_moves(api_client):
    game_id = create_api_game(api_client)
    for x in (1, 2):
        response = api_client.post(f'/api/game/{game_id}/moves',
                                   json={'team': 0, 'x': x, 'y': 3, 'direction': 'right'})
        assert response.status_code == 200
    assert response.json['queued'] == 2
    assert response.json['move']['target'] == {'x': 3, 'y': 3}

    state = api_client.get(f'/api/game/{game_id}/state').json
    assert len(state['players'][0]['moves']) == 2

    response = api_client.delete(f'/api/game/{game_id}/moves?team=0')
    assert response.status_code == 200
    state = api_client.get(f'/api/game/{game_id}/state').json
    assert state['players'][0]['moves'] == []


def test_queue_move_rejections(api_client):
    game_id = create_api_game(api_client)
    url = f'/api/game/{game_id}/moves'
    assert api_client.post(url, json={'team': 0, 'x': 1}).status_code == 400
    assert api_client.post(url, json={'team': 0, 'x': 1, 'y': 1, 'direction': 'north'}).status_code == 400
    assert api_client.post(url, json={'team': 0, 'x': 'a', 'y': 1, 'direction': 'up'}).status_code == 400
    assert api_client.post(url, json={'team': 0, 'x': 0, 'y': 0, 'direction': 'up'}).status_code == 400
    assert api_client.post(url, json={'team': 5, 'x': 1, 'y': 1, 'direction': 'up'}).status_code == 400
    assert api_client.delete(f'{url}?team=9').status_code == 400
    assert api_client.delete(url).status_code == 400

    log = api_client.get(f'/api/game/{game_id}/log').json['log']
    assert any(entry.get('error_type') == 'validation_error' for entry in log)


def test_tick(api_client):
    game_id = create_api_game(api_client)
    response = api_client.post(f'/api/game/{game_id}/tick', json={'count': 4})
    assert response.status_code == 200
    data = response.json
    assert data['tick'] == 4
    assert [t['tick'] for t in data['ticks']] == [1, 2, 3, 4]
    kings = [cell for row in data['state']['board'] for cell in row if cell['kind'] == 'king']
    assert kings and all(cell['units'] == 2 for cell in kings)


def test_tick_count_bounds(api_client):
    game_id = create_api_game(api_client)
    assert api_client.post(f'/api/game/{game_id}/tick', json={'count': 0}).status_code == 400
    assert api_client.post(f'/api/game/{game_id}/tick', json={'count': 'x'}).status_code == 400


def test_tick_resolves_queued_move(api_client):
    game_id = create_api_game(api_client)
    state = api_client.get(f'/api/game/{game_id}/state').json
    x, y, team = next((x, y, cell['owner']) for y, row in enumerate(state['board'])
                      for x, cell in enumerate(row) if cell['kind'] == 'king')
    direction = 'left' if x > 0 else 'right'
    for _ in range(2):
        api_client.post(f'/api/game/{game_id}/moves',
                        json={'team': team, 'x': x, 'y': y, 'direction': direction})

    data = api_client.post(f'/api/game/{game_id}/tick', json={'count': 1}).json

    # King starts with 0 units and tick 1 does not grow it, so the army is exhausted
    assert data['ticks'][0]['moves'][0]['outcome'] == 'exhausted'
    assert data['state']['players'][team]['moves'] == []
