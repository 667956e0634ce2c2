from flask import current_app, request
from flask_socketio import emit, join_room
from typing import Any, Optional

from race_server import socketio
from race_server.services.games import GameService


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _service() -> GameService:
    return current_app.extensions['race_service']


def _room_id_from(data: Any) -> Optional[str]:
    # requestRematch may carry the bare room id instead of an object
    if isinstance(data, str):
        room_id = data
    elif isinstance(data, dict):
        room_id = data.get('roomId')
    else:
        room_id = None
    if room_id is None or room_id == '':
        return None
    return str(room_id)


def _reject(message: str):
    emit('error', {'message': message})
    return {'success': False, 'message': message}


def handle_connect():
    current_app.logger.info(f"[connect] sid={_get_sid()}")
    emit('connected', {'sid': _get_sid()})


def handle_disconnect(reason=None):
    current_app.logger.info(f"[disconnect] sid={_get_sid()} reason={reason}")
    _service().handle_disconnect(_get_sid())


def handle_join_room(data):
    room_id = _room_id_from(data)
    if not room_id:
        return _reject('roomId is required')
    result = _service().join_room(_get_sid(), room_id, on_admitted=lambda: join_room(room_id))
    return result.to_dict()


def handle_player_input(data):
    room_id = _room_id_from(data)
    if not room_id:
        return _reject('roomId is required')
    controls = data.get('input') if isinstance(data, dict) else None
    if controls is not None and not isinstance(controls, dict):
        return _reject('input must be an object')
    _service().handle_player_input(_get_sid(), room_id, controls)


def handle_rematch_request(data):
    room_id = _room_id_from(data)
    if not room_id:
        return _reject('roomId is required')
    _service().handle_rematch_request(_get_sid(), room_id)


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on ``namespace``.

    Event names follow the browser client: joinRoom, playerInput and
    requestRematch. joinRoom acknowledges with ``{success, message?}``.
    """
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('joinRoom', handle_join_room, namespace=namespace)
    socketio.on_event('playerInput', handle_player_input, namespace=namespace)
    socketio.on_event('requestRematch', handle_rematch_request, namespace=namespace)
