import logging
from typing import Dict

from bluff.models import Room, RoundBreakdown

logger = logging.getLogger(__name__)

POINTS_CORRECT = 1000
POINTS_FOOL = 500


def score_current_round(room: Room) -> Dict[str, RoundBreakdown]:
    """Apply scoring for the current round and return each player's breakdown.

    - penalty: accumulated lateness is subtracted
    - correct: POINTS_CORRECT for voting the truth, and a positive bet is won
      with it; a positive bet on anything else is lost
    - fooling: POINTS_FOOL to a lie's author for every other player who
      voted that lie

    Scores are updated in place and may go negative.
    """
    truth = room.truth
    betting = room.settings.betting_enabled
    breakdown: Dict[str, RoundBreakdown] = {}

    for player in room.players:
        stats = RoundBreakdown()

        penalty = room.penalties.get(player.id, 0)
        if penalty:
            player.score -= penalty
            stats.penalty -= penalty

        vote = room.votes.get(player.id)
        bet = room.bets.get(player.id, 0) if betting else 0
        if vote is not None and vote == truth:
            player.score += POINTS_CORRECT
            stats.correct += POINTS_CORRECT
            if bet > 0:
                player.score += bet
                stats.bet += bet
        elif bet > 0:
            player.score -= bet
            stats.bet -= bet

        my_lie = (room.lies.get(player.id) or '').lower()
        if my_lie:
            for other in room.players:
                if other.id != player.id and room.votes.get(other.id) == my_lie:
                    player.score += POINTS_FOOL
                    stats.fooling += POINTS_FOOL

        breakdown[player.id] = stats

    logger.info(
        f"[score] code={room.code} round={room.round_number} "
        + ' '.join(f"{p.name}={breakdown[p.id].total:+d}" for p in room.players)
    )
    return breakdown
