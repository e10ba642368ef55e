import enum
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from bluff.exceptions import GameAlreadyStarted, InvalidName, NameTaken

AVATAR_COLORS = [
    '#FF6B6B',
    '#4ECDC4',
    '#FFE66D',
    '#FF9F1C',
    '#C7F464',
    '#EF476F',
]

MAX_NAME_LENGTH = 12
NO_ANSWER = 'No Answer'


class Phase(str, enum.Enum):
    LOBBY = 'LOBBY'
    WRITING = 'WRITING'
    VOTING = 'VOTING'
    REVEAL = 'REVEAL'
    GAME_OVER = 'GAME_OVER'


class OptionType(str, enum.Enum):
    TRUTH = 'TRUTH'
    LIE = 'LIE'


def avatar_color(index: int) -> str:
    return AVATAR_COLORS[index % len(AVATAR_COLORS)]


def _as_bool(value, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)


@dataclass(frozen=True)
class Settings:
    round_count: int = 5
    betting_enabled: bool = False
    shuffle_questions: bool = True

    @classmethod
    def from_payload(cls, data) -> 'Settings':
        """Build settings from a client payload.

        Accepts the short keys (``rounds``, ``betting``, ``shuffle``) as
        well as the long ones. Anything missing or unusable falls back to
        the defaults.
        """
        data = data if isinstance(data, dict) else {}
        defaults = cls()
        rounds = data.get('rounds', data.get('roundCount'))
        try:
            rounds = int(rounds)
        except (TypeError, ValueError, OverflowError):
            rounds = defaults.round_count
        if rounds < 1:
            rounds = defaults.round_count
        return cls(
            round_count=rounds,
            betting_enabled=_as_bool(data.get('betting', data.get('bettingEnabled')), defaults.betting_enabled),
            shuffle_questions=_as_bool(data.get('shuffle', data.get('shuffleQuestions')), defaults.shuffle_questions),
        )

    def to_dict(self):
        return {
            'rounds': self.round_count,
            'betting': self.betting_enabled,
            'shuffle': self.shuffle_questions,
        }


@dataclass(frozen=True)
class Question:
    prompt: str
    answer: str

    def to_dict(self):
        return {'prompt': self.prompt, 'answer': self.answer}


@dataclass(frozen=True)
class Option:
    text: str
    type: OptionType
    author_id: Optional[str] = None


@dataclass
class Player:
    id: str
    name: str
    score: int = 0
    color: str = AVATAR_COLORS[0]

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'score': self.score,
            'color': self.color,
        }


@dataclass
class RevealItem:
    text: str
    type: OptionType
    author_name: Optional[str]
    voters: List[dict] = field(default_factory=list)

    def to_dict(self):
        return {
            'text': self.text,
            'type': self.type.value,
            'authorName': self.author_name,
            'voters': list(self.voters),
        }


@dataclass
class RoundBreakdown:
    correct: int = 0
    fooling: int = 0
    bet: int = 0
    penalty: int = 0

    @property
    def total(self) -> int:
        return self.correct + self.fooling + self.bet + self.penalty

    def to_dict(self):
        return {
            'correctPoints': self.correct,
            'foolingPoints': self.fooling,
            'betDelta': self.bet,
            'penaltyDelta': self.penalty,
            'total': self.total,
        }


@dataclass(eq=False)
class Room:
    code: str
    host_id: str
    settings: Settings = field(default_factory=Settings)
    players: List[Player] = field(default_factory=list)
    phase: Phase = Phase.LOBBY
    question_queue: List[Question] = field(default_factory=list)
    current_question: Optional[Question] = None
    lies: Dict[str, str] = field(default_factory=dict)
    votes: Dict[str, str] = field(default_factory=dict)
    bets: Dict[str, int] = field(default_factory=dict)
    penalties: Dict[str, int] = field(default_factory=dict)
    # Penalty charged in the current phase only, so a re-submission replaces it
    phase_penalties: Dict[str, int] = field(default_factory=dict)
    shuffled_options: List[Option] = field(default_factory=list)
    phase_started_at: Optional[float] = None
    round_number: int = 0
    total_rounds: int = 0
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    @property
    def truth(self) -> str:
        return self.current_question.answer.lower() if self.current_question else ''

    def is_host(self, connection_id) -> bool:
        return connection_id is not None and connection_id == self.host_id

    def get_player(self, player_id) -> Optional[Player]:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def name_taken(self, name: str) -> bool:
        lowered = name.lower()
        return any(p.name.lower() == lowered for p in self.players)

    def add_player(self, player_id: str, name) -> Player:
        """Add a player in LOBBY, enforcing case-insensitive unique names."""
        if self.phase != Phase.LOBBY:
            raise GameAlreadyStarted()
        name = (name or '').strip() if isinstance(name, str) else ''
        if not name or len(name) > MAX_NAME_LENGTH:
            raise InvalidName()
        if self.name_taken(name):
            raise NameTaken()
        player = Player(id=player_id, name=name, color=avatar_color(len(self.players)))
        self.players.append(player)
        return player

    def remove_player(self, player_id) -> Optional[Player]:
        player = self.get_player(player_id)
        if not player:
            return None
        self.players.remove(player)
        for submissions in (self.lies, self.votes, self.bets, self.penalties, self.phase_penalties):
            submissions.pop(player_id, None)
        return player

    def reset_round(self) -> None:
        self.lies = {}
        self.votes = {}
        self.bets = {}
        self.penalties = {}
        self.phase_penalties = {}
        self.shuffled_options = []

    def standings(self) -> List[Player]:
        return sorted(self.players, key=lambda p: p.score, reverse=True)

    def to_dict(self):
        return {
            'code': self.code,
            'phase': self.phase.value,
            'settings': self.settings.to_dict(),
            'players': [p.to_dict() for p in self.players],
            'question': self.current_question.prompt if self.current_question else None,
            'round': self.round_number,
            'total_rounds': self.total_rounds,
            'questions_remaining': len(self.question_queue),
            'lies_submitted': len(self.lies),
            'votes_submitted': len(self.votes),
        }
