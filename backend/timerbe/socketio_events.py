from flask import current_app, request
from flask_socketio import emit
from timerbe import socketio
from timerbe.services.timers import Operation, TimerError


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    current_app.logger.info(f"[disconnect] sid={_get_sid()}")


def _dispatch(operation: Operation, payload) -> None:
    """Run one timer request and report the outcome.

    Failures only ever go back to the requesting socket. Successful results
    either go to every client on the namespace or to the requester alone,
    depending on TIMER_BROADCAST.
    """
    engine = current_app.extensions['timer_engine']
    current_app.logger.info(f"[timer-{operation.value}] sid={_get_sid()} payload={payload!r}")
    try:
        result = engine.handle(operation, payload)
    except TimerError as exc:
        current_app.logger.warning(
            f"[timer-err] op={operation.value} kind={exc.kind} event={exc.event!r} {exc}"
        )
        emit('err', exc.reason)
        return
    if current_app.config.get('TIMER_BROADCAST', True):
        emit('timer', result, broadcast=True)
    else:
        emit('timer', result)


def handle_get(event_name):
    _dispatch(Operation.GET, event_name)


def handle_set(timer_data):
    _dispatch(Operation.SET, timer_data)


def handle_start(event_name):
    _dispatch(Operation.START, event_name)


def handle_pause(event_name):
    _dispatch(Operation.PAUSE, event_name)


def handle_stop(event_name):
    _dispatch(Operation.STOP, event_name)


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on the given namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('get', handle_get, namespace=namespace)
    socketio.on_event('set', handle_set, namespace=namespace)
    socketio.on_event('start', handle_start, namespace=namespace)
    socketio.on_event('pause', handle_pause, namespace=namespace)
    socketio.on_event('stop', handle_stop, namespace=namespace)
