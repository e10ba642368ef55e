import logging
import random
import string
import threading
from typing import Dict, Optional

from bluff.exceptions import RoomCodesExhausted
from bluff.models import Room, Settings

logger = logging.getLogger(__name__)

CODE_LENGTH = 4
CODE_SPACE = len(string.ascii_uppercase) ** CODE_LENGTH


def generate_room_code(rng=random, length=CODE_LENGTH) -> str:
    """Draw a code uniformly from A-Z."""
    return ''.join(rng.choices(string.ascii_uppercase, k=length))


class RoomRegistry:
    """Owns every active room and the connection -> room index."""

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()
        self._rooms: Dict[str, Room] = {}
        self._connections: Dict[str, str] = {}
        self._lock = threading.Lock()

    def __len__(self):
        return len(self._rooms)

    def __contains__(self, code):
        return isinstance(code, str) and code.upper() in self._rooms

    def create_room(self, host_id: str, settings: Optional[Settings] = None) -> Room:
        with self._lock:
            if len(self._rooms) >= CODE_SPACE:
                raise RoomCodesExhausted()
            code = generate_room_code(self._rng)
            while code in self._rooms:
                logger.debug(f"[code-collision] code={code}, regenerating")
                code = generate_room_code(self._rng)
            room = Room(code=code, host_id=host_id, settings=settings or Settings())
            self._rooms[code] = room
            self._connections[host_id] = code
        logger.info(f"[room-created] code={code} host={host_id} settings={room.settings.to_dict()}")
        return room

    def lookup(self, code) -> Optional[Room]:
        if not isinstance(code, str):
            return None
        return self._rooms.get(code.strip().upper())

    def destroy(self, code) -> None:
        with self._lock:
            room = self._rooms.pop(code, None)
            if room is None:
                return
            for sid in [sid for sid, c in self._connections.items() if c == code]:
                del self._connections[sid]
        logger.info(f"[room-destroyed] code={code}")

    # ---- Connection index ----

    def bind(self, connection_id: str, code: str) -> None:
        with self._lock:
            self._connections[connection_id] = code

    def unbind(self, connection_id: str) -> Optional[str]:
        with self._lock:
            return self._connections.pop(connection_id, None)

    def room_for(self, connection_id: str) -> Optional[Room]:
        code = self._connections.get(connection_id)
        return self._rooms.get(code) if code else None
