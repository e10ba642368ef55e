def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_health_counts_rooms(flask_app, client):
    assert client.get('/health').get_json() == {'status': 'healthy', 'rooms': 0}
    flask_app.extensions['bluff'].registry.create_room('host')
    assert client.get('/health').get_json()['rooms'] == 1


def test_state_of_missing_room(client):
    res = client.get('/api/rooms/QQQQ/state')
    assert res.status_code == 404
    assert res.get_json() == {'error': 'Room not found'}


def test_state_hides_submissions(flask_app, client):
    room = flask_app.extensions['bluff'].registry.create_room('host')
    room.add_player('p1', 'Alice')
    room.lies = {'p1': 'my secret lie'}
    res = client.get(f'/api/rooms/{room.code.lower()}/state')
    assert res.status_code == 200
    state = res.get_json()
    assert state['code'] == room.code
    assert state['phase'] == 'LOBBY'
    assert [p['name'] for p in state['players']] == ['Alice']
    assert state['durations'] == {'writing': 45, 'voting': 45}
    assert 'my secret lie' not in res.get_data(as_text=True)
