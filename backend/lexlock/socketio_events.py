from flask_socketio import join_room, leave_room, emit
from lexlock import socketio
from lexlock.services.games.errors import GameError
from flask import current_app, request
from typing import Dict


_sid_to_session: Dict[str, int] = {}


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _session_id(data):
    try:
        return int((data or {}).get('session_id'))
    except (TypeError, ValueError):
        return None


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(*args):
    session_id = _sid_to_session.pop(_get_sid(), None)
    if session_id is not None:
        current_app.logger.info(f"[ws-disconnect] session={session_id}")


def handle_join_session(data):
    session_id = _session_id(data)
    if session_id is None:
        emit('error', {'message': 'session_id is required'})
        return
    room = f"session:{session_id}"
    join_room(room)
    _sid_to_session[_get_sid()] = session_id
    emit('joined', {'room': room})


def handle_leave_session(data):
    session_id = _session_id(data)
    if session_id is None:
        emit('error', {'message': 'session_id is required'})
        return
    room = f"session:{session_id}"
    leave_room(room)
    _sid_to_session.pop(_get_sid(), None)
    emit('left', {'room': room})


def handle_request_state(data):
    session_id = _session_id(data)
    if session_id is None:
        emit('error', {'message': 'session_id is required'})
        return
    try:
        payload = current_app.extensions['lexlock'].orchestrator.poll(session_id)
    except GameError as exc:
        emit('error', {'message': exc.message, 'code': exc.kind})
        return
    emit('state', payload)


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    handlers = {
        'connect': handle_connect,
        'disconnect': handle_disconnect,
        'join_session': handle_join_session,
        'leave_session': handle_leave_session,
        'request_state': handle_request_state,
        'ping': handle_ping,
    }
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        for event, handler in handlers.items():
            socketio.on_event(event, handler, namespace=namespace)
