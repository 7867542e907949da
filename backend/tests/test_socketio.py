from datetime import timedelta

from timerbe import socketio
from timerbe.services.timers.timekeeping import to_iso

ONE_MINUTE = {'d': 0, 'h': 0, 'm': 1, 's': 0}


def _events(sio_client, name):
    return [pkt['args'][0] for pkt in sio_client.get_received() if pkt['name'] == name]


def _request(sio_client, event, payload):
    sio_client.emit(event, payload)
    return sio_client.get_received()


def test_socket_connects(sio_client):
    assert sio_client.is_connected()


def test_get_unknown_timer_returns_err(sio_client):
    received = _request(sio_client, 'get', 'alarm')
    assert received == [{'name': 'err', 'args': ['Timer not found.'], 'namespace': '/'}]


def test_set_and_get(sio_client, app_clock):
    sio_client.emit('set', {'eventName': 'alarm', 'duration': ONE_MINUTE})
    expected = {'state': 'inactive', 'endDate': to_iso(app_clock.now + timedelta(minutes=1))}
    assert _events(sio_client, 'timer') == [expected]

    sio_client.emit('get', 'alarm')
    assert _events(sio_client, 'timer') == [expected]


def test_invalid_duration_is_rejected(sio_client):
    sio_client.emit('set', {'eventName': 'alarm', 'duration': {'d': 0, 'h': 25, 'm': 0, 's': 0}})
    assert _events(sio_client, 'err') == ['Invalid timer set input.']
    sio_client.emit('get', 'alarm')
    assert _events(sio_client, 'err') == ['Timer not found.']


def test_full_cycle_over_socket(sio_client, app_clock):
    t0 = app_clock.now
    sio_client.emit('set', {'eventName': 'alarm', 'duration': ONE_MINUTE})
    sio_client.emit('start', 'alarm')
    app_clock.advance(seconds=10)
    sio_client.emit('pause', 'alarm')
    app_clock.advance(seconds=5)
    sio_client.emit('start', 'alarm')
    sio_client.emit('stop', 'alarm')
    timers = _events(sio_client, 'timer')
    assert [t['state'] for t in timers] == ['inactive', 'active', 'paused', 'active', 'undefined']
    assert timers[2]['endDate'] == to_iso(t0 + timedelta(seconds=60))
    assert timers[3]['endDate'] == to_iso(t0 + timedelta(seconds=65))
    assert timers[4]['endDate'] == ''


def test_illegal_transitions_report_reasons(sio_client):
    sio_client.emit('set', {'eventName': 'alarm', 'duration': ONE_MINUTE})
    sio_client.get_received()

    assert _request(sio_client, 'pause', 'alarm')[0]['args'] == [
        'Cannot pause a stopped, undefined or already paused timer.'
    ]
    sio_client.emit('start', 'alarm')
    sio_client.get_received()
    assert _request(sio_client, 'start', 'alarm')[0]['args'] == ['Cannot start an undefined or active timer.']
    assert _request(sio_client, 'set', {'eventName': 'alarm', 'duration': ONE_MINUTE})[0]['args'] == [
        'Cannot set a timer when active or paused.'
    ]
    sio_client.emit('stop', 'alarm')
    sio_client.get_received()
    assert _request(sio_client, 'stop', 'alarm')[0]['args'] == ['Cannot stop an undefined timer.']


def test_pause_on_missing_timer_is_not_found(sio_client):
    assert _request(sio_client, 'pause', 'ghost')[0]['args'] == ['Timer not found.']


def test_timer_results_are_broadcast(flask_app, sio_client):
    other = socketio.test_client(flask_app)
    other.get_received()
    sio_client.emit('set', {'eventName': 'alarm', 'duration': ONE_MINUTE})
    assert [pkt['name'] for pkt in other.get_received()] == ['timer']
    other.disconnect()


def test_errors_go_only_to_requester(flask_app, sio_client):
    other = socketio.test_client(flask_app)
    other.get_received()
    sio_client.emit('start', 'alarm')
    assert _events(sio_client, 'err') == ['Timer not found.']
    assert other.get_received() == []
    other.disconnect()


def test_reply_only_mode_does_not_broadcast(reply_only_app):
    requester = socketio.test_client(reply_only_app)
    bystander = socketio.test_client(reply_only_app)
    requester.emit('set', {'eventName': 'alarm', 'duration': ONE_MINUTE})
    assert [pkt['name'] for pkt in requester.get_received()] == ['timer']
    assert bystander.get_received() == []
    requester.disconnect()
    bystander.disconnect()


def test_store_failure_is_reported(flask_app, sio_client, monkeypatch):
    from timerbe.services.timers import StoreFailure
    engine = flask_app.extensions['timer_engine']

    def broken(event):
        raise StoreFailure(event, detail='unavailable')

    monkeypatch.setattr(engine.store, 'find_by_key', broken)
    assert _request(sio_client, 'get', 'alarm')[0]['args'] == ['Database query failed.']


def test_huge_day_count_reports_invalid_input(sio_client):
    for days in (3000000, 10**10):
        sio_client.emit('set', {'eventName': 'alarm', 'duration': {'d': days, 'h': 0, 'm': 0, 's': 0}})
        assert _events(sio_client, 'err') == ['Invalid timer set input.']
    sio_client.emit('get', 'alarm')
    assert _events(sio_client, 'err') == ['Timer not found.']
