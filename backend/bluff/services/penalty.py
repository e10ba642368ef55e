import math
import time
from typing import Callable, Optional

from bluff.models import Phase, Room
from bluff.services import GameRules


def compute_penalty(phase_started_at: Optional[float], now: float, time_limit: float = 45, per_second: int = 0) -> int:
    """Lateness penalty for a submission made at ``now``.

    Any overtime, however small, costs a full second's rate.
    """
    if phase_started_at is None:
        return 0
    overtime = (now - phase_started_at) - time_limit
    if overtime > 0:
        return math.ceil(overtime) * per_second
    return 0


class PenaltyClock:
    def __init__(self, rules: GameRules, clock: Callable[[], float] = time.time):
        self.rules = rules
        self.clock = clock

    def limits_for(self, phase: Phase):
        if phase == Phase.WRITING:
            return self.rules.writing_time_limit, self.rules.writing_penalty_per_second
        if phase == Phase.VOTING:
            return self.rules.voting_time_limit, self.rules.voting_penalty_per_second
        return None

    def charge(self, room: Room, player_id: str) -> int:
        """Record the penalty for a submission happening now.

        Penalties from WRITING and VOTING add up within a round; a second
        submission in the same phase replaces that phase's charge.
        """
        limits = self.limits_for(room.phase)
        if limits is None:
            return 0
        time_limit, rate = limits
        penalty = compute_penalty(room.phase_started_at, self.clock(), time_limit, rate)
        previous = room.phase_penalties.get(player_id, 0)
        room.phase_penalties[player_id] = penalty
        room.penalties[player_id] = room.penalties.get(player_id, 0) - previous + penalty
        return penalty
