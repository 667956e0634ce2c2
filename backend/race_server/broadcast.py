"""Outbound side of the transport: push named events to everyone in a room."""

from typing import Any, Optional, Protocol


class BroadcastSink(Protocol):
    def broadcast(self, room_id: str, event: str, payload: Any = None) -> None:
        ...


class SocketIOBroadcaster:
    """Fire-and-forget room broadcasts through a Flask-SocketIO server.

    Uses ``socketio.emit`` rather than the request-bound ``emit`` so it works
    from background tasks (countdowns and the global ticker).
    """

    def __init__(self, socketio, namespace: Optional[str] = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def broadcast(self, room_id: str, event: str, payload: Any = None) -> None:
        if payload is None:
            self.socketio.emit(event, to=room_id, namespace=self.namespace)
        else:
            self.socketio.emit(event, payload, to=room_id, namespace=self.namespace)
