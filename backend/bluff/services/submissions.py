import logging

from bluff.messages import UpdateProgress, coerce_bet
from bluff.models import Phase, Room
from bluff.services import GameRules
from bluff.services.penalty import PenaltyClock
from bluff.services.phases import PhaseController

logger = logging.getLogger(__name__)


def submission_count(room: Room, submissions) -> int:
    return sum(1 for p in room.players if p.id in submissions)


class SubmissionTracker:
    """Records lies, votes and bets and advances once everyone has answered."""

    def __init__(self, controller: PhaseController, penalty: PenaltyClock, channel, rules: GameRules):
        self.controller = controller
        self.penalty = penalty
        self.channel = channel
        self.rules = rules

    def record_lie(self, room: Room, player_id, text: str) -> bool:
        if room.phase != Phase.WRITING or room.get_player(player_id) is None:
            logger.debug(f"[lie-ignored] code={room.code} phase={room.phase.value} player={player_id}")
            return False
        penalty = self.penalty.charge(room, player_id)
        room.lies[player_id] = text.strip()
        logger.debug(f"[lie] code={room.code} player={player_id} penalty={penalty}")
        self._check_complete(room)
        return True

    def record_vote(self, room: Room, player_id, vote: str, bet: int = 0) -> bool:
        player = room.get_player(player_id)
        if room.phase != Phase.VOTING or player is None:
            logger.debug(f"[vote-ignored] code={room.code} phase={room.phase.value} player={player_id}")
            return False
        penalty = self.penalty.charge(room, player_id)
        room.votes[player_id] = vote.strip().lower()
        if room.settings.betting_enabled:
            bet = coerce_bet(bet)
            if self.rules.clamp_bets:
                bet = min(bet, max(0, player.score))
            room.bets[player_id] = bet
        logger.debug(f"[vote] code={room.code} player={player_id} penalty={penalty}")
        self._check_complete(room)
        return True

    def reevaluate(self, room: Room) -> bool:
        """Re-run the completion check after a player left.

        Progress is reported either way; returns True if the phase advanced.
        """
        submissions = self._submissions(room)
        if submissions is None or not room.players:
            return False
        self._emit_progress(room, submissions)
        if submission_count(room, submissions) >= len(room.players):
            return self._advance(room)
        return False

    def _submissions(self, room: Room):
        if room.phase == Phase.WRITING:
            return room.lies
        if room.phase == Phase.VOTING:
            return room.votes
        return None

    def _emit_progress(self, room: Room, submissions) -> None:
        self.channel.broadcast(room.code, UpdateProgress(
            current=submission_count(room, submissions),
            total=len(room.players),
        ))

    def _advance(self, room: Room) -> bool:
        if room.phase == Phase.WRITING:
            return self.controller.begin_voting(room)
        return self.controller.finish_round(room)

    def _check_complete(self, room: Room) -> None:
        submissions = self._submissions(room)
        if submission_count(room, submissions) >= len(room.players):
            self._advance(room)
        else:
            self._emit_progress(room, submissions)
