from typing import Any, Optional


class Broadcaster:
    """Fire-and-forget fan-out over the Socket.IO server.

    Uses ``socketio.emit`` rather than the request-bound ``emit`` so it can
    be called from background tasks as well as handlers.
    """

    def __init__(self, socketio, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def to_all(self, event: str, data: Any = None) -> None:
        self.socketio.emit(event, data, namespace=self.namespace)

    def to_others(self, event: str, data: Any, sid: Optional[str]) -> None:
        self.socketio.emit(event, data, namespace=self.namespace, skip_sid=sid)

    def to_one(self, event: str, data: Any, sid: str) -> None:
        self.socketio.emit(event, data, to=sid, namespace=self.namespace)
