"""Game domain services: phases, submissions, penalties, scoring and reveal.

This package contains the pure game logic that the Socket.IO handlers call
into, keeping transport concerns separated from core game mechanics. Nothing
here reads the Flask request context; outbound events go through the channel
object each service is given.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class GameRules:
    writing_time_limit: int = 45
    voting_time_limit: int = 45
    writing_penalty_per_second: int = 20
    voting_penalty_per_second: int = 20
    min_players: int = 2
    clamp_bets: bool = False

    @classmethod
    def from_config(cls, config) -> 'GameRules':
        defaults = cls()
        return cls(
            writing_time_limit=int(config.get('WRITING_TIME_LIMIT_SEC', defaults.writing_time_limit)),
            voting_time_limit=int(config.get('VOTING_TIME_LIMIT_SEC', defaults.voting_time_limit)),
            writing_penalty_per_second=int(config.get('WRITING_PENALTY_PER_SEC', defaults.writing_penalty_per_second)),
            voting_penalty_per_second=int(config.get('VOTING_PENALTY_PER_SEC', defaults.voting_penalty_per_second)),
            min_players=int(config.get('MIN_PLAYERS', defaults.min_players)),
            clamp_bets=bool(config.get('CLAMP_BETS', defaults.clamp_bets)),
        )
