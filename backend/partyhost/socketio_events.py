from flask_socketio import join_room, leave_room, emit
from flask import current_app, request
from typing import Any, Callable, Dict, Optional
import logging

from partyhost import socketio
from partyhost.errors import PartyHostError
from partyhost.models import GameType, RoomSettings


logger = logging.getLogger(__name__)


def _registry():
    return current_app.extensions['partyhost']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _payload(data: Any) -> Dict[str, Any]:
    return data if isinstance(data, dict) else {}


def _with_session(data: Any, action: Callable, game_type: Optional[GameType] = None) -> None:
    """Run ``action(session)`` for the payload's room; unknown rooms are ignored."""
    registry = _registry()
    with registry.lock:
        session = registry.get_room(_payload(data).get('roomCode'))
        if session is None:
            return
        if game_type is not None and session.room.game_type is not game_type:
            return
        action(session)


def handle_connect(auth=None):
    emit('connected', {'sid': _get_sid()})


def handle_disconnect(reason=None):
    sid = _get_sid()
    registry = _registry()
    with registry.lock:
        registry.handle_disconnect(sid)
    logger.debug(f"[disconnect] sid={sid} reason={reason}")


def handle_create_room(data):
    data = _payload(data)
    registry = _registry()
    try:
        game_type = GameType.parse(data.get('gameType'))
        settings = RoomSettings.from_payload(data.get('settings'), current_app.config)
        with registry.lock:
            code = registry.create_room(data.get('roomName'), _get_sid(), game_type, settings)
    except PartyHostError as exc:
        emit('error', {'message': exc.message})
        return
    emit('room_created', {'code': code})


def handle_join_room(data):
    data = _payload(data)
    room_code = data.get('roomCode')
    if not room_code:
        emit('error', {'message': 'roomCode is required'})
        return
    registry = _registry()
    with registry.lock:
        try:
            session = registry.require(room_code)
        except PartyHostError as exc:
            emit('error', {'message': exc.message})
            return
        # Subscribe first so the joiner receives the room broadcasts below
        join_room(session.code)
        session.join(_get_sid(), data.get('username'), data.get('avatar'))


def handle_leave_room(data):
    sid = _get_sid()

    def _leave(session):
        session.leave(sid)
        leave_room(session.code)
        emit('left', {'roomCode': session.code})

    _with_session(data, _leave)


def handle_start_game(data):
    sid = _get_sid()
    _with_session(data, lambda session: session.start_game(sid))


def handle_word_selected(data):
    sid = _get_sid()
    _with_session(data, lambda session: session.choose_word(sid, _payload(data).get('word')),
                  game_type=GameType.SCRIBBLE)


def handle_draw_data(data):
    sid = _get_sid()
    _with_session(data, lambda session: session.relay_drawing(sid, data))


def handle_chat_message(data):
    sid = _get_sid()
    _with_session(data, lambda session: session.chat(sid, _payload(data).get('message')))


def handle_chess_move(data):
    sid = _get_sid()
    _with_session(data, lambda session: session.move(sid, _payload(data).get('move')),
                  game_type=GameType.STRATEGY)


def handle_grid_move(data):
    sid = _get_sid()
    _with_session(data, lambda session: session.move(sid, _payload(data).get('index')),
                  game_type=GameType.GRID)


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('create_room', handle_create_room, namespace=namespace)
    socketio.on_event('join_room', handle_join_room, namespace=namespace)
    socketio.on_event('leave_room', handle_leave_room, namespace=namespace)
    socketio.on_event('scribble_start_game', handle_start_game, namespace=namespace)
    socketio.on_event('start_game', handle_start_game, namespace=namespace)
    socketio.on_event('scribble_word_selected', handle_word_selected, namespace=namespace)
    socketio.on_event('draw_data', handle_draw_data, namespace=namespace)
    socketio.on_event('chat_message', handle_chat_message, namespace=namespace)
    socketio.on_event('chess_move', handle_chess_move, namespace=namespace)
    socketio.on_event('grid_move', handle_grid_move, namespace=namespace)
    socketio.on_event('ping', handle_ping, namespace=namespace)
