def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_rooms_empty(client):
    res = client.get('/rooms')
    assert res.status_code == 200
    assert res.get_json() == {'rooms': []}


def test_unknown_room_is_404(client):
    res = client.get('/rooms/nope')
    assert res.status_code == 404
    assert res.get_json()['error'] == 'Room not found'


def test_room_listing_and_state(flask_app, client):
    service = flask_app.extensions['race_service']
    service.join_room('alice', 'r1')
    service.join_room('bob', 'r1')
    service.join_room('carol', 'r2')

    rooms = {r['id']: r for r in client.get('/rooms').get_json()['rooms']}
    assert rooms['r1']['players'] == ['alice', 'bob']
    assert rooms['r1']['phase'] == 'countdown'
    assert rooms['r2']['phase'] == 'waiting'

    res = client.get('/rooms/r1')
    assert res.status_code == 200
    room = res.get_json()
    assert room['state']['countdown'] == 3
    assert set(room['state']['players']) == {'alice', 'bob'}
    assert room['state']['winner'] is None
