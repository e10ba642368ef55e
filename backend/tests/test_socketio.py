from bluff.services.questions import DEFAULT_QUESTIONS
from bluff.socketio_events import HOST_LEFT, NO_ROOMS

NS = '/ws'


def drain(test_client):
    return test_client.get_received(NS)


def payloads(packets, name):
    return [pkt['args'][0] if pkt['args'] else None for pkt in packets if pkt['name'] == name]


def create_room(sio_factory, payload=None):
    host = sio_factory()
    host.emit('create_room', payload if payload is not None else {'rounds': 1, 'shuffle': False}, namespace=NS)
    joined = payloads(drain(host), 'joined_success')[0]
    return host, joined


def join(sio_factory, code, name):
    player = sio_factory()
    player.emit('join_room', {'roomCode': code, 'playerName': name}, namespace=NS)
    return player


def test_create_and_join_room(sio_factory):
    host, joined = create_room(sio_factory)
    assert joined['isHost'] is True
    assert len(joined['roomCode']) == 4 and joined['roomCode'].isupper()
    assert joined['settings'] == {'rounds': 1, 'betting': False, 'shuffle': False}

    alice = join(sio_factory, joined['roomCode'], 'Alice')
    packets = drain(alice)
    me = payloads(packets, 'joined_success')[0]
    assert me['isHost'] is False
    assert me['roomCode'] == joined['roomCode']
    assert [p['name'] for p in payloads(packets, 'update_players')[-1]] == ['Alice']
    assert [p['id'] for p in payloads(drain(host), 'update_players')[-1]] == [me['playerId']]


def test_host_can_also_play(sio_factory):
    host, joined = create_room(sio_factory, {'playerName': 'Hosty', 'settings': {'rounds': 2}})
    assert joined['color'] == '#FF6B6B'
    bob = join(sio_factory, joined['roomCode'], 'Bob')
    players = payloads(drain(bob), 'update_players')[-1]
    assert [p['name'] for p in players] == ['Hosty', 'Bob']


def test_create_room_when_codes_run_out(sio_factory, flask_app, monkeypatch):
    monkeypatch.setattr('bluff.registry.CODE_SPACE', 0)
    host = sio_factory()
    host.emit('create_room', {'rounds': 1}, namespace=NS)
    packets = drain(host)
    assert payloads(packets, 'error_message') == [NO_ROOMS]
    assert payloads(packets, 'joined_success') == []
    assert len(flask_app.extensions['bluff'].registry) == 0


def test_join_errors(sio_factory):
    stray = join(sio_factory, 'ZZZZ', 'Alice')
    assert payloads(drain(stray), 'error_message') == ['Room not found.']

    host, joined = create_room(sio_factory)
    code = joined['roomCode']
    join(sio_factory, code, 'Alice')
    dup = join(sio_factory, code, 'ALICE')
    assert payloads(drain(dup), 'error_message') == ['Name already taken.']

    join(sio_factory, code, 'Bob')
    host.emit('start_game', code, namespace=NS)
    late = join(sio_factory, code, 'Cara')
    assert payloads(drain(late), 'error_message') == ['Game already in progress.']


def test_non_host_cannot_start(sio_factory):
    host, joined = create_room(sio_factory)
    code = joined['roomCode']
    alice = join(sio_factory, code, 'Alice')
    join(sio_factory, code, 'Bob')
    drain(alice)
    alice.emit('start_game', code, namespace=NS)
    assert payloads(drain(alice), 'phase_change') == []


def test_malformed_messages_are_dropped(sio_factory):
    host, joined = create_room(sio_factory)
    alice = join(sio_factory, joined['roomCode'], 'Alice')
    drain(alice)
    alice.emit('submit_lie', 'not an object', namespace=NS)
    alice.emit('start_game', namespace=NS)
    assert drain(alice) == []


def test_full_round(sio_factory):
    host, joined = create_room(sio_factory)
    code = joined['roomCode']
    alice = join(sio_factory, code, 'Alice')
    bob = join(sio_factory, code, 'Bob')
    drain(alice)
    drain(bob)

    host.emit('start_game', code, namespace=NS)
    writing = payloads(drain(alice), 'phase_change')[-1]
    assert writing['phase'] == 'WRITING'
    assert writing['question'] == DEFAULT_QUESTIONS[0].prompt
    assert writing['timer'] == 45

    alice.emit('submit_lie', {'roomCode': code, 'lie': 'Horse'}, namespace=NS)
    assert payloads(drain(bob), 'update_progress')[-1] == {'current': 1, 'total': 2}
    bob.emit('submit_lie', {'roomCode': code, 'lie': 'Dragon'}, namespace=NS)
    voting = payloads(drain(alice), 'phase_change')[-1]
    assert voting['phase'] == 'VOTING'
    assert sorted(o['text'] for o in voting['options']) == ['dragon', 'horse', 'unicorn']

    alice.emit('submit_vote', {'roomCode': code, 'vote': 'unicorn', 'bet': 0}, namespace=NS)
    bob.emit('submit_vote', {'roomCode': code, 'vote': 'horse', 'bet': 0}, namespace=NS)
    results = payloads(drain(host), 'round_results')[-1]
    assert results['truth'] == 'Unicorn'
    scores = {p['name']: p['score'] for p in results['players']}
    assert scores == {'Alice': 1500, 'Bob': 0}
    assert [item['type'] for item in results['revealData']][-1] == 'TRUTH'
    drain(alice)
    drain(bob)

    alice.emit('trigger_next_reveal', code, namespace=NS)
    assert drain(bob) == []
    host.emit('trigger_next_reveal', code, namespace=NS)
    assert [pkt['name'] for pkt in drain(bob)] == ['next_reveal_card']

    host.emit('next_round', code, namespace=NS)
    final = payloads(drain(alice), 'game_over')[-1]
    assert [p['name'] for p in final] == ['Alice', 'Bob']


def test_player_leaving_completes_writing(sio_factory):
    host, joined = create_room(sio_factory)
    code = joined['roomCode']
    alice = join(sio_factory, code, 'Alice')
    bob = join(sio_factory, code, 'Bob')
    cara = join(sio_factory, code, 'Cara')
    host.emit('start_game', code, namespace=NS)
    alice.emit('submit_lie', {'roomCode': code, 'lie': 'Horse'}, namespace=NS)
    bob.emit('submit_lie', {'roomCode': code, 'lie': 'Dragon'}, namespace=NS)
    drain(alice)

    cara.disconnect(namespace=NS)
    packets = drain(alice)
    assert [p['name'] for p in payloads(packets, 'update_players')[-1]] == ['Alice', 'Bob']
    assert payloads(packets, 'update_progress')[-1] == {'current': 2, 'total': 2}
    assert payloads(packets, 'phase_change')[-1]['phase'] == 'VOTING'


def test_host_disconnect_ends_session(sio_factory, client):
    host, joined = create_room(sio_factory)
    code = joined['roomCode']
    alice = join(sio_factory, code, 'Alice')
    drain(alice)
    assert client.get(f'/api/rooms/{code}/state').status_code == 200

    host.disconnect(namespace=NS)
    packets = drain(alice)
    assert payloads(packets, 'error_message') == [HOST_LEFT]
    assert payloads(packets, 'game_over') == [[]]
    assert client.get(f'/api/rooms/{code}/state').status_code == 404
