import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Advisory phase time limits (seconds); enforced only through penalties
    WRITING_TIME_LIMIT_SEC = int(os.environ.get('WRITING_TIME_LIMIT_SEC', '45'))
    VOTING_TIME_LIMIT_SEC = int(os.environ.get('VOTING_TIME_LIMIT_SEC', '45'))
    # Points lost per started second of overtime
    WRITING_PENALTY_PER_SEC = int(os.environ.get('WRITING_PENALTY_PER_SEC', '20'))
    VOTING_PENALTY_PER_SEC = int(os.environ.get('VOTING_PENALTY_PER_SEC', '20'))
    # Minimum players before the host may start
    MIN_PLAYERS = int(os.environ.get('MIN_PLAYERS', '2'))
    # Cap bets at the bettor's current score. Off keeps the client-trusted behaviour.
    CLAMP_BETS = os.environ.get('CLAMP_BETS', '0').lower() in ('1', 'true', 'yes')
    # Optional JSON deck: [{"prompt": "...", "answer": "..."}, ...]
    QUESTIONS_PATH = os.environ.get('QUESTIONS_PATH') or None
