from typing import Any


class Broadcaster:
    """Room multicast and per-connection unicast over Socket.IO.

    Uses ``socketio.emit`` rather than the request-bound ``emit`` so it can
    be called from background tasks as well as from event handlers.
    """

    def __init__(self, socketio, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def to_room(self, room_code: str, event: str, payload: Any = None) -> None:
        self.socketio.emit(event, payload, to=room_code, namespace=self.namespace)

    def to_user(self, connection_id: str, event: str, payload: Any = None) -> None:
        self.socketio.emit(event, payload, to=connection_id, namespace=self.namespace)

    def to_room_except(self, room_code: str, connection_id: str, event: str, payload: Any = None) -> None:
        self.socketio.emit(event, payload, to=room_code, skip_sid=connection_id, namespace=self.namespace)

    def system_message(self, room_code: str, text: str) -> None:
        self.to_room(room_code, 'system_message', text)
