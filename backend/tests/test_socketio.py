from companion import broadcast, socketio
from companion.client import apply_event
from conftest import join, stack_exploration_deck


def _events(sio_client, name):
    return [pkt['args'][0] for pkt in sio_client.get_received('/ws') if pkt['name'] == name]


def test_socket_connect_greets(sio_client):
    assert sio_client.is_connected('/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'connected' for pkt in received)


def test_ping_pong(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    assert _events(sio_client, 'pong') == [{'n': 1}]


def test_victory_point_relay_reaches_every_client(flask_app, sio_client):
    other = socketio.test_client(flask_app, namespace='/ws')
    try:
        sio_client.get_received('/ws')
        other.get_received('/ws')
        payload = {'victoryPoints': {'abc': 3}}
        sio_client.emit('update-victory-points', payload, namespace='/ws')
        assert _events(other, broadcast.VICTORY_POINTS_UPDATED) == [payload]
        assert _events(sio_client, broadcast.VICTORY_POINTS_UPDATED) == [payload]
    finally:
        other.disconnect(namespace='/ws')


def test_flat_victory_point_relay_folds_into_snapshot(client, sio_client):
    pid = join(client, 'Alice')['playerId']
    snapshot = client.get('/api/game-state').get_json()
    sio_client.get_received('/ws')
    sio_client.emit('update-victory-points', {pid: 7}, namespace='/ws')
    (relayed,) = _events(sio_client, broadcast.VICTORY_POINTS_UPDATED)
    assert relayed == {pid: 7}
    assert apply_event(snapshot, broadcast.VICTORY_POINTS_UPDATED, relayed)['victoryPoints'] == {pid: 7}


def test_join_broadcasts_response_body(client, sio_client):
    sio_client.get_received('/ws')
    body = join(client, 'Alice')
    assert _events(sio_client, broadcast.PLAYER_JOINED) == [body]


def test_mutations_broadcast_exactly_their_response(client, sio_client):
    pid = join(client, 'Alice')['playerId']
    sio_client.get_received('/ws')

    res = client.post('/api/strategy-cards/update-trade-goods', json={'cardId': 2, 'increment': True})
    assert _events(sio_client, broadcast.TRADE_GOOD_UPDATED) == [res.get_json()]

    res = client.post('/api/victory-points/update', json={'playerId': pid, 'points': 5})
    assert _events(sio_client, broadcast.VICTORY_POINTS_UPDATED) == [res.get_json()]

    stack_exploration_deck('industrial', 'attach')
    res = client.post('/api/explore-planet', json={'playerId': pid, 'planetId': 3})
    assert _events(sio_client, broadcast.PLANET_EXPLORED) == [res.get_json()]

    res = client.delete('/api/planets/3')
    assert _events(sio_client, broadcast.PLANET_DELETED) == [res.get_json()]


def test_failed_mutation_broadcasts_nothing(client, sio_client):
    sio_client.get_received('/ws')
    assert client.post('/api/victory-points/update', json={'playerId': 'ghost', 'points': 1}).status_code == 404
    assert client.post('/api/player/join', json={'name': ''}).status_code == 400
    assert sio_client.get_received('/ws') == []


def test_broadcast_failure_does_not_fail_the_request(client, flask_app, monkeypatch):
    def broken_emit(*args, **kwargs):
        raise RuntimeError('transport closed')

    monkeypatch.setattr(flask_app.extensions['broadcaster'].socketio, 'emit', broken_emit)
    res = client.post('/api/player/join', json={'name': 'Alice'})
    assert res.status_code == 201
    assert client.get('/api/game-state').get_json()['players'][0]['name'] == 'Alice'
