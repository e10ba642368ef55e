import logging
import random
import time
from typing import Callable, Optional

from bluff.messages import GameOver, PhaseChange, RoundResults
from bluff.models import NO_ANSWER, Option, OptionType, Phase, Room
from bluff.services import GameRules
from bluff.services.questions import QuestionBank
from bluff.services.reveal import RevealSequencer
from bluff.services.scoring import score_current_round

logger = logging.getLogger(__name__)


class PhaseController:
    """Drives a room through LOBBY -> WRITING -> VOTING -> REVEAL -> ... -> GAME_OVER.

    Every transition starts with a guard clause. A call from the wrong phase,
    or a host-only call from anyone else, changes nothing and emits nothing:
    those come from stale or duplicated client messages.
    """

    def __init__(
        self,
        channel,
        questions: QuestionBank,
        rules: GameRules,
        reveal: Optional[RevealSequencer] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.channel = channel
        self.questions = questions
        self.rules = rules
        self.reveal = reveal or RevealSequencer(channel)
        self.rng = rng or random.Random()
        self.clock = clock

    def _ignored(self, room: Room, action: str, caller_id=None) -> bool:
        logger.debug(f"[{action}-ignored] code={room.code} phase={room.phase.value} caller={caller_id}")
        return False

    def start_game(self, room: Room, caller_id) -> bool:
        if room.phase != Phase.LOBBY or not room.is_host(caller_id):
            return self._ignored(room, 'start', caller_id)
        if len(room.players) < self.rules.min_players:
            logger.info(f"[start-ignored] code={room.code} players={len(room.players)} min={self.rules.min_players}")
            return False
        settings = room.settings
        deck = self.questions.deck(settings.round_count, shuffle=settings.shuffle_questions, rng=self.rng)
        if not deck:
            logger.warning(f"[start-ignored] code={room.code} question bank is empty")
            return False
        room.question_queue = deck
        room.total_rounds = len(deck)
        room.round_number = 0
        logger.info(f"[start] code={room.code} players={len(room.players)} rounds={room.total_rounds}")
        return self.begin_round(room)

    def begin_round(self, room: Room) -> bool:
        if room.phase not in (Phase.LOBBY, Phase.REVEAL) or not room.question_queue:
            return self._ignored(room, 'round')
        room.current_question = room.question_queue.pop(0)
        room.reset_round()
        room.round_number += 1
        room.phase = Phase.WRITING
        room.phase_started_at = self.clock()
        logger.info(f"[phase] code={room.code} WRITING round={room.round_number}/{room.total_rounds}")
        self.channel.broadcast(room.code, PhaseChange(
            phase=Phase.WRITING.value,
            question=room.current_question.prompt,
            timer=self.rules.writing_time_limit,
            round=room.round_number,
            total_rounds=room.total_rounds,
        ))
        return True

    def build_options(self, room: Room):
        options = [Option(text=room.truth, type=OptionType.TRUTH)]
        for p in room.players:
            text = (room.lies.get(p.id) or NO_ANSWER).lower()
            options.append(Option(text=text, type=OptionType.LIE, author_id=p.id))
        self.rng.shuffle(options)
        return options

    def begin_voting(self, room: Room) -> bool:
        if room.phase != Phase.WRITING:
            return self._ignored(room, 'voting')
        room.shuffled_options = self.build_options(room)
        room.phase = Phase.VOTING
        room.phase_started_at = self.clock()
        room.phase_penalties = {}
        logger.info(f"[phase] code={room.code} VOTING options={len(room.shuffled_options)}")
        self.channel.broadcast(room.code, PhaseChange(
            phase=Phase.VOTING.value,
            question=room.current_question.prompt,
            timer=self.rules.voting_time_limit,
            round=room.round_number,
            total_rounds=room.total_rounds,
            options=[{'text': o.text} for o in room.shuffled_options],
        ))
        return True

    def finish_round(self, room: Room) -> bool:
        if room.phase != Phase.VOTING:
            return self._ignored(room, 'finish')
        breakdown = score_current_round(room)
        reveal_items = self.reveal.build(room)
        room.phase = Phase.REVEAL
        room.phase_started_at = None
        logger.info(f"[phase] code={room.code} REVEAL round={room.round_number}/{room.total_rounds}")
        self.channel.broadcast(room.code, RoundResults(
            reveal_data=[item.to_dict() for item in reveal_items],
            players=[p.to_dict() for p in room.standings()],
            round_breakdown={pid: stats.to_dict() for pid, stats in breakdown.items()},
            truth=room.current_question.answer,
            question_text=room.current_question.prompt,
        ))
        return True

    def advance_or_end(self, room: Room, caller_id) -> bool:
        if room.phase != Phase.REVEAL or not room.is_host(caller_id):
            return self._ignored(room, 'advance', caller_id)
        if room.question_queue:
            return self.begin_round(room)
        room.phase = Phase.GAME_OVER
        room.current_question = None
        logger.info(f"[phase] code={room.code} GAME_OVER")
        self.channel.broadcast(room.code, GameOver(players=[p.to_dict() for p in room.standings()]))
        return True
