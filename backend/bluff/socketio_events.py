from flask import current_app, request
from flask_socketio import emit, join_room as join_socket_room

from bluff.channel import NAMESPACE, room_channel
from bluff.exceptions import MalformedMessage, RoomCodesExhausted, RoomNotFound, UserInputError
from bluff.messages import (
    INBOUND,
    CreateRoom,
    ErrorMessage,
    GameOver,
    JoinedSuccess,
    JoinRoom,
    NextRound,
    StartGame,
    SubmitLie,
    SubmitVote,
    TriggerNextReveal,
    UpdatePlayers,
)

HOST_LEFT = 'The host disconnected. Game over.'
EVERYONE_LEFT = 'All players have left. Game over.'
NO_ROOMS = 'No rooms available. Try again later.'


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _reply(message) -> None:
    payload = message.payload()
    if payload is None:
        emit(message.EVENT)
    else:
        emit(message.EVENT, payload)


class ConnectionEventAdapter:
    """Turns Socket.IO events into calls on the game services.

    Every event is handled while holding the target room's lock, so one
    room's state changes never interleave.
    """

    def __init__(self, registry, controller, tracker, reveal, channel):
        self.registry = registry
        self.controller = controller
        self.tracker = tracker
        self.reveal = reveal
        self.channel = channel
        self._handlers = {
            CreateRoom: self.create_room,
            JoinRoom: self.join_room,
            StartGame: self.start_game,
            SubmitLie: self.submit_lie,
            SubmitVote: self.submit_vote,
            NextRound: self.next_round,
            TriggerNextReveal: self.trigger_next_reveal,
        }

    def dispatch(self, sid: str, message) -> None:
        try:
            self._handlers[type(message)](sid, message)
        except UserInputError as exc:
            current_app.logger.info(f"[user-error] event={message.EVENT} sid={sid} {exc.user_message}")
            _reply(ErrorMessage(exc.user_message))

    def _broadcast_players(self, room) -> None:
        self.channel.broadcast(room.code, UpdatePlayers([p.to_dict() for p in room.players]))

    def _room_in_play(self, code):
        room = self.registry.lookup(code)
        if room is None:
            current_app.logger.debug(f"[no-room] code={code} sid={_get_sid()}")
        return room

    # ---- Lobby ----

    def create_room(self, sid: str, message: CreateRoom) -> None:
        if self.registry.room_for(sid) is not None:
            current_app.logger.debug(f"[create-ignored] sid={sid} already in a room")
            return
        try:
            room = self.registry.create_room(sid, message.settings)
        except RoomCodesExhausted:
            current_app.logger.warning(f"[create-failed] sid={sid} no free room codes")
            _reply(ErrorMessage(NO_ROOMS))
            return
        with room.lock:
            player = None
            if message.player_name:
                try:
                    player = room.add_player(sid, message.player_name)
                except UserInputError:
                    self.registry.destroy(room.code)
                    raise
            join_socket_room(room_channel(room.code))
            _reply(JoinedSuccess(
                room_code=room.code,
                player_id=sid,
                is_host=True,
                settings=room.settings,
                color=player.color if player else None,
            ))
            self._broadcast_players(room)

    def join_room(self, sid: str, message: JoinRoom) -> None:
        if self.registry.room_for(sid) is not None:
            current_app.logger.debug(f"[join-ignored] sid={sid} already in a room")
            return
        room = self.registry.lookup(message.room_code)
        if room is None:
            raise RoomNotFound(message.room_code)
        with room.lock:
            # The room may have been torn down while we waited for its lock
            if self.registry.lookup(room.code) is not room:
                raise RoomNotFound(room.code)
            player = room.add_player(sid, message.player_name)
            self.registry.bind(sid, room.code)
            join_socket_room(room_channel(room.code))
            current_app.logger.info(f"[join] code={room.code} player={player.name} sid={sid}")
            _reply(JoinedSuccess(
                room_code=room.code,
                player_id=sid,
                is_host=False,
                settings=room.settings,
                color=player.color,
            ))
            self._broadcast_players(room)

    # ---- Game flow ----

    def start_game(self, sid: str, message: StartGame) -> None:
        room = self._room_in_play(message.room_code)
        if room is not None:
            with room.lock:
                self.controller.start_game(room, sid)

    def submit_lie(self, sid: str, message: SubmitLie) -> None:
        room = self._room_in_play(message.room_code)
        if room is not None:
            with room.lock:
                self.tracker.record_lie(room, sid, message.lie)

    def submit_vote(self, sid: str, message: SubmitVote) -> None:
        room = self._room_in_play(message.room_code)
        if room is not None:
            with room.lock:
                self.tracker.record_vote(room, sid, message.vote, message.bet)

    def next_round(self, sid: str, message: NextRound) -> None:
        room = self._room_in_play(message.room_code)
        if room is not None:
            with room.lock:
                self.controller.advance_or_end(room, sid)

    def trigger_next_reveal(self, sid: str, message: TriggerNextReveal) -> None:
        room = self._room_in_play(message.room_code)
        if room is not None:
            with room.lock:
                self.reveal.request_next_card(room, sid)

    # ---- Connection loss ----

    def _end_session(self, room, notice: str) -> None:
        """Tell everyone the game is over, then drop the room."""
        self.channel.broadcast(room.code, ErrorMessage(notice))
        self.channel.broadcast(room.code, GameOver([]))
        self.registry.destroy(room.code)
        self.channel.close(room.code)

    def disconnect(self, sid: str) -> None:
        room = self.registry.room_for(sid)
        self.registry.unbind(sid)
        if room is None:
            return
        with room.lock:
            if self.registry.lookup(room.code) is not room:
                return
            if room.is_host(sid):
                current_app.logger.info(f"[host-left] code={room.code} sid={sid}")
                self._end_session(room, HOST_LEFT)
                return
            player = room.remove_player(sid)
            if player is None:
                return
            current_app.logger.info(f"[leave] code={room.code} player={player.name} remaining={len(room.players)}")
            if not room.players:
                self._end_session(room, EVERYONE_LEFT)
                return
            self._broadcast_players(room)
            self.tracker.reevaluate(room)


def get_adapter() -> ConnectionEventAdapter:
    return current_app.extensions['bluff']


def handle_connect(auth=None):
    current_app.logger.debug(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    sid = _get_sid()
    current_app.logger.debug(f"[disconnect] sid={sid} reason={reason}")
    get_adapter().disconnect(sid)


def _make_handler(message_cls):
    def handler(data=None):
        try:
            message = message_cls.parse(data)
        except MalformedMessage as exc:
            current_app.logger.debug(f"[malformed] event={message_cls.EVENT} sid={_get_sid()} {exc}")
            return
        get_adapter().dispatch(_get_sid(), message)

    handler.__name__ = f"handle_{message_cls.EVENT}"
    return handler


def register_socketio_handlers(socketio, namespace: str = NAMESPACE) -> None:
    """Register Socket.IO event handlers on ``namespace`` (default '/ws')."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    for message_cls in INBOUND:
        socketio.on_event(message_cls.EVENT, _make_handler(message_cls), namespace=namespace)
