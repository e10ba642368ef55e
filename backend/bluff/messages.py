"""Wire messages.

One class per Socket.IO event, in each direction. Inbound classes parse a
raw payload with ``parse()`` (raising ``MalformedMessage``); outbound
classes render theirs with ``payload()``.
"""
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional

from bluff.exceptions import MalformedMessage
from bluff.models import Settings


def _room_code(data) -> str:
    # Host-only events send the bare code; the rest send an object
    if isinstance(data, dict):
        data = data.get('roomCode')
    if not isinstance(data, str) or not data.strip():
        raise MalformedMessage('roomCode is required')
    return data.strip().upper()


def _text(data, key) -> str:
    value = data.get(key) if isinstance(data, dict) else None
    if not isinstance(value, str):
        raise MalformedMessage(f'{key} must be a string')
    return value


def coerce_bet(value) -> int:
    """Non-negative integer bet; anything unusable (including inf and nan) is 0."""
    try:
        bet = int(value or 0)
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, bet)


# ---- Client -> server ----

@dataclass(frozen=True)
class CreateRoom:
    EVENT: ClassVar[str] = 'create_room'
    player_name: Optional[str]
    settings: Settings

    @classmethod
    def parse(cls, data):
        if data is not None and not isinstance(data, dict):
            raise MalformedMessage('create_room expects an object')
        data = data or {}
        if 'settings' in data or 'playerName' in data:
            name = data.get('playerName')
            return cls(
                player_name=name if isinstance(name, str) and name.strip() else None,
                settings=Settings.from_payload(data.get('settings')),
            )
        # Bare settings object: display-only host
        return cls(player_name=None, settings=Settings.from_payload(data))


@dataclass(frozen=True)
class JoinRoom:
    EVENT: ClassVar[str] = 'join_room'
    room_code: str
    player_name: str

    @classmethod
    def parse(cls, data):
        if not isinstance(data, dict):
            raise MalformedMessage('join_room expects an object')
        code = data.get('roomCode')
        name = data.get('playerName')
        return cls(
            room_code=code.strip().upper() if isinstance(code, str) else '',
            player_name=name if isinstance(name, str) else '',
        )


@dataclass(frozen=True)
class StartGame:
    EVENT: ClassVar[str] = 'start_game'
    room_code: str

    @classmethod
    def parse(cls, data):
        return cls(room_code=_room_code(data))


@dataclass(frozen=True)
class SubmitLie:
    EVENT: ClassVar[str] = 'submit_lie'
    room_code: str
    lie: str

    @classmethod
    def parse(cls, data):
        return cls(room_code=_room_code(data), lie=_text(data, 'lie'))


@dataclass(frozen=True)
class SubmitVote:
    EVENT: ClassVar[str] = 'submit_vote'
    room_code: str
    vote: str
    bet: int = 0

    @classmethod
    def parse(cls, data):
        return cls(room_code=_room_code(data), vote=_text(data, 'vote'), bet=coerce_bet(data.get('bet')))


@dataclass(frozen=True)
class NextRound:
    EVENT: ClassVar[str] = 'next_round'
    room_code: str

    @classmethod
    def parse(cls, data):
        return cls(room_code=_room_code(data))


@dataclass(frozen=True)
class TriggerNextReveal:
    EVENT: ClassVar[str] = 'trigger_next_reveal'
    room_code: str

    @classmethod
    def parse(cls, data):
        return cls(room_code=_room_code(data))


INBOUND = (CreateRoom, JoinRoom, StartGame, SubmitLie, SubmitVote, NextRound, TriggerNextReveal)


# ---- Server -> client ----

@dataclass(frozen=True)
class JoinedSuccess:
    EVENT: ClassVar[str] = 'joined_success'
    room_code: str
    player_id: str
    is_host: bool
    settings: Settings
    color: Optional[str] = None

    def payload(self):
        return {
            'roomCode': self.room_code,
            'playerId': self.player_id,
            'isHost': self.is_host,
            'color': self.color,
            'settings': self.settings.to_dict(),
        }


@dataclass(frozen=True)
class UpdatePlayers:
    EVENT: ClassVar[str] = 'update_players'
    players: List[Dict[str, Any]]

    def payload(self):
        return list(self.players)


@dataclass(frozen=True)
class PhaseChange:
    EVENT: ClassVar[str] = 'phase_change'
    phase: str
    question: Optional[str]
    timer: int
    round: int
    total_rounds: int
    options: Optional[List[Dict[str, Any]]] = None

    def payload(self):
        data = {
            'phase': self.phase,
            'question': self.question,
            'timer': self.timer,
            'round': self.round,
            'totalRounds': self.total_rounds,
        }
        if self.options is not None:
            data['options'] = list(self.options)
        return data


@dataclass(frozen=True)
class UpdateProgress:
    EVENT: ClassVar[str] = 'update_progress'
    current: int
    total: int

    def payload(self):
        return {'current': self.current, 'total': self.total}


@dataclass(frozen=True)
class RoundResults:
    EVENT: ClassVar[str] = 'round_results'
    reveal_data: List[Dict[str, Any]]
    players: List[Dict[str, Any]]
    round_breakdown: Dict[str, Dict[str, int]]
    truth: str
    question_text: str
    phase: str = 'REVEAL'

    def payload(self):
        return {
            'phase': self.phase,
            'revealData': list(self.reveal_data),
            'players': list(self.players),
            'roundBreakdown': dict(self.round_breakdown),
            'truth': self.truth,
            'questionText': self.question_text,
        }


@dataclass(frozen=True)
class NextRevealCard:
    EVENT: ClassVar[str] = 'next_reveal_card'

    def payload(self):
        return None


@dataclass(frozen=True)
class GameOver:
    EVENT: ClassVar[str] = 'game_over'
    players: List[Dict[str, Any]] = field(default_factory=list)

    def payload(self):
        return list(self.players)


@dataclass(frozen=True)
class ErrorMessage:
    EVENT: ClassVar[str] = 'error_message'
    message: str

    def payload(self):
        return self.message


OUTBOUND = (JoinedSuccess, UpdatePlayers, PhaseChange, UpdateProgress, RoundResults, NextRevealCard, GameOver, ErrorMessage)
