"""Game exceptions.

User input errors carry the message shown to the player through
``error_message``; everything else is handled server side.
"""


class BluffError(Exception):
    """Base class for all game errors."""
    pass


# ---- User input errors (surfaced to the caller) ----

class UserInputError(BluffError):
    message = 'Something went wrong.'

    def __init__(self, message=None):
        super().__init__(message or self.message)

    @property
    def user_message(self) -> str:
        return str(self)


class RoomNotFound(UserInputError):
    message = 'Room not found.'

    def __init__(self, code=None):
        self.code = code
        super().__init__()


class GameAlreadyStarted(UserInputError):
    message = 'Game already in progress.'


class NameTaken(UserInputError):
    message = 'Name already taken.'


class InvalidName(UserInputError):
    message = 'Name must be 1-12 characters.'


# ---- Protocol misuse (dropped silently) ----

class MalformedMessage(BluffError):
    """Inbound payload did not match its event's shape."""
    pass


# ---- Capacity ----

class RoomCodesExhausted(BluffError):
    """Every 4-letter code is in use."""
    pass
