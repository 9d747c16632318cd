"""Exceptions raised by the room services.

Socket handlers translate these into an ``error`` event for the requester.
Illegal moves and unauthorized actions are not exceptions: they are
ignored where they happen.
"""


class PartyHostError(Exception):
    """Base class for every room service error."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class RoomNotFound(PartyHostError):
    def __init__(self, code):
        self.code = code
        super().__init__('Room not found')


class InvalidGameType(PartyHostError):
    def __init__(self, value):
        self.value = value
        super().__init__(f'Unknown game type: {value!r}')


class RoomCodeExhausted(PartyHostError):
    """No free room code was found within the configured number of attempts."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__('No room codes available, try again later')
