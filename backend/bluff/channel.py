import logging

logger = logging.getLogger(__name__)

NAMESPACE = '/ws'


def room_channel(code: str) -> str:
    return f"room:{code}"


class SocketChannel:
    """Broadcasts outbound messages to every connection of a game room."""

    def __init__(self, socketio, namespace: str = NAMESPACE):
        self.socketio = socketio
        self.namespace = namespace

    def broadcast(self, code: str, message) -> None:
        payload = message.payload()
        args = () if payload is None else (payload,)
        logger.debug(f"[emit] code={code} event={message.EVENT}")
        self.socketio.emit(message.EVENT, *args, to=room_channel(code), namespace=self.namespace)

    def close(self, code: str) -> None:
        self.socketio.close_room(room_channel(code), namespace=self.namespace)
