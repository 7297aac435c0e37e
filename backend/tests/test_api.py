from datetime import timedelta

from conftest import find_coordinates
from lexlock.services.games import scheduler


def _create(client, difficulty='medium'):
    res = client.post('/api/sessions/create', json={'difficulty': difficulty})
    assert res.status_code == 201
    return res.get_json()


def _join(client, code, name):
    res = client.post('/api/sessions/join', json={'session_code': code, 'player_name': name})
    assert res.status_code == 201
    return res.get_json()['player']


def test_index_and_health(client):
    assert client.get('/').status_code == 200
    res = client.get('/health')
    assert res.status_code == 200
    assert res.get_json()['status'] == 'ok'


def test_create_session(client):
    data = _create(client, 'hard')
    assert len(data['session_code']) == 6
    assert data['difficulty'] == 'hard'
    assert data['duration_seconds'] == 60
    assert len(data['grid']) == 12
    assert 0 < len(data['words']) <= 15
    word = data['words'][0]
    assert set(word) == {'word', 'clue', 'start', 'end', 'direction'}


def test_create_defaults_to_medium_and_rejects_unknown(client):
    res = client.post('/api/sessions/create')
    assert res.status_code == 201
    assert res.get_json()['duration_seconds'] == 90
    res = client.post('/api/sessions/create', json={'difficulty': 'nightmare'})
    assert res.status_code == 400
    assert res.get_json()['code'] == 'invalid_input'


def test_join_and_state(client):
    created = _create(client)
    alice = _join(client, created['session_code'], 'Alice')
    bob = _join(client, created['session_code'].lower(), 'Bob')
    assert alice['color'] == '#3B82F6'
    assert bob['color'] == '#EF4444'
    assert alice['score'] == 0

    res = client.get(f"/api/sessions/{created['session_id']}/state")
    assert res.status_code == 200
    state = res.get_json()
    assert state['session']['status'] == 'waiting'
    assert state['session']['session_code'] == created['session_code']
    assert [p['name'] for p in state['players']] == ['Alice', 'Bob']
    assert state['found_words'] == []
    assert state['time_remaining'] == 90
    assert state['poll_interval'] == 1.0


def test_lookup_by_code(client):
    created = _create(client)
    _join(client, created['session_code'], 'Alice')
    res = client.get(f"/api/sessions/code/{created['session_code']}")
    assert res.status_code == 200
    assert res.get_json()['session']['id'] == created['session_id']
    assert client.get('/api/sessions/code/ZZZZZZ').status_code == 404


def test_join_errors(client):
    res = client.post('/api/sessions/join', json={'session_code': 'ABCDEF'})
    assert res.status_code == 400
    res = client.post('/api/sessions/join', json={'session_code': 123456, 'player_name': 'Alice'})
    assert res.status_code == 400
    assert res.get_json()['code'] == 'invalid_input'
    res = client.post('/api/sessions/join', json={'session_code': 'ABCDEF', 'player_name': 42})
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Player name must be 1-100 characters'
    res = client.post('/api/sessions/join', json={'session_code': 'ZZZZZZ', 'player_name': 'Alice'})
    assert res.status_code == 404
    assert res.get_json()['error'] == 'Session not found'

    created = _create(client, 'easy')
    for i in range(8):
        _join(client, created['session_code'], f'P{i}')
    res = client.post('/api/sessions/join', json={'session_code': created['session_code'], 'player_name': 'Ninth'})
    assert res.status_code == 409
    assert res.get_json()['error'] == 'Session is full'

    other = _create(client)
    client.post(f"/api/sessions/{other['session_id']}/end")
    res = client.post('/api/sessions/join', json={'session_code': other['session_code'], 'player_name': 'Late'})
    assert res.status_code == 409
    assert res.get_json()['error'] == 'Game has already ended'


def test_full_game_flow(client):
    created = _create(client, 'hard')
    sid = created['session_id']
    alice = _join(client, created['session_code'], 'Alice')
    bob = _join(client, created['session_code'], 'Bob')
    target = created['words'][0]['word']
    start, end = find_coordinates(created['words'], target)

    # not started yet
    res = client.post(f'/api/sessions/{sid}/words', json={'player_id': alice['id'], 'start': start, 'end': end})
    assert res.status_code == 409

    res = client.post(f'/api/sessions/{sid}/start')
    assert res.status_code == 200
    assert res.get_json() == {'success': True, 'status': 'active'}
    state = client.get(f'/api/sessions/{sid}/state').get_json()
    assert state['session']['status'] == 'active'
    assert state['session']['start_time'] is not None

    res = client.post(f'/api/sessions/{sid}/words', json={'player_id': alice['id'], 'start': start, 'end': end})
    assert res.status_code == 200
    body = res.get_json()
    assert body['success'] is True
    assert body['word'] == target
    assert body['player']['score'] == 10

    res = client.post(f'/api/sessions/{sid}/words', json={'player_id': bob['id'], 'start': end, 'end': start})
    assert res.status_code == 409
    assert res.get_json()['error'] == 'Word already found'

    state = client.get(f'/api/sessions/{sid}/state').get_json()
    assert [f['word'] for f in state['found_words']] == [target]
    assert state['found_words'][0]['player_id'] == alice['id']
    assert state['players'][0]['name'] == 'Alice'

    res = client.post(f'/api/sessions/{sid}/end')
    assert res.get_json() == {'success': True, 'status': 'completed'}
    # idempotent
    assert client.post(f'/api/sessions/{sid}/end').status_code == 200
    assert client.post(f'/api/sessions/{sid}/start').status_code == 409

    second = created['words'][1]
    res = client.post(
        f'/api/sessions/{sid}/words',
        json={'player_id': bob['id'], 'start': second['start'], 'end': second['end']},
    )
    assert res.status_code == 409


def test_submit_validation(client):
    created = _create(client)
    sid = created['session_id']
    alice = _join(client, created['session_code'], 'Alice')
    client.post(f'/api/sessions/{sid}/start')

    res = client.post(f'/api/sessions/{sid}/words', json={'player_id': alice['id']})
    assert res.status_code == 400
    res = client.post(f'/api/sessions/{sid}/words', json={'player_id': 'x', 'start': {'row': 0, 'col': 0}, 'end': {'row': 0, 'col': 1}})
    assert res.status_code == 400
    res = client.post(f'/api/sessions/{sid}/words', json={'player_id': alice['id'], 'start': {'row': 0, 'col': 0}, 'end': {'row': 0, 'col': 40}})
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Coordinates are outside the grid'
    res = client.post(f'/api/sessions/{sid}/words', json={'player_id': alice['id'], 'start': {'row': 0, 'col': 0}, 'end': {'row': 2, 'col': 5}})
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Invalid word'
    res = client.post(f'/api/sessions/{sid}/words', json={'player_id': 9999, 'start': {'row': 0, 'col': 0}, 'end': {'row': 0, 'col': 1}})
    assert res.status_code == 404
    res = client.post('/api/sessions/9999/words', json={'player_id': alice['id'], 'start': {'row': 0, 'col': 0}, 'end': {'row': 0, 'col': 1}})
    assert res.status_code == 404


def test_unknown_session_routes(client):
    assert client.get('/api/sessions/9999/state').status_code == 404
    assert client.post('/api/sessions/9999/start').status_code == 404
    assert client.post('/api/sessions/9999/end').status_code == 404


def test_poll_closes_expired_session(flask_app, client):
    created = _create(client, 'hard')
    sid = created['session_id']
    client.post(f'/api/sessions/{sid}/start')

    engine = flask_app.extensions['lexlock'].engine
    real_clock = engine.clock
    engine.clock = lambda: real_clock() + timedelta(seconds=61)
    try:
        state = client.get(f'/api/sessions/{sid}/state').get_json()
    finally:
        engine.clock = real_clock
    assert state['session']['status'] == 'completed'
    assert state['time_remaining'] == 0


def test_expiry_timer_ends_session(flask_app, client):
    created = _create(client, 'easy')
    sid = created['session_id']
    client.post(f'/api/sessions/{sid}/start')

    engine = flask_app.extensions['lexlock'].engine
    real_clock = engine.clock
    engine.clock = lambda: real_clock() + timedelta(seconds=121)
    flask_app.config['ENABLE_SCHEDULER_IN_TESTS'] = True
    try:
        scheduler.schedule_expiry(flask_app, sid)
    finally:
        flask_app.config['ENABLE_SCHEDULER_IN_TESTS'] = False
        engine.clock = real_clock
    state = client.get(f'/api/sessions/{sid}/state').get_json()
    assert state['session']['status'] == 'completed'
    assert sid not in scheduler._scheduled_sessions
