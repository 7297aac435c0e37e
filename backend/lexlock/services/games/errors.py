"""Typed failures raised by the game services.

Each error carries a ``kind`` (not_found, conflict, invalid_input,
unavailable) and the HTTP status the API layer answers with. Messages are
short and safe to show to players.
"""


class GameError(Exception):
    kind = 'error'
    status_code = 500
    message = 'Something went wrong'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_dict(self):
        return {'error': self.message, 'code': self.kind}


class NotFound(GameError):
    kind = 'not_found'
    status_code = 404
    message = 'Not found'


class Conflict(GameError):
    kind = 'conflict'
    status_code = 409
    message = 'Conflicting change'


class InvalidInput(GameError):
    kind = 'invalid_input'
    status_code = 400
    message = 'Invalid input'


class Unavailable(GameError):
    kind = 'unavailable'
    status_code = 503
    message = 'Service unavailable, please try again'


class SessionNotFound(NotFound):
    message = 'Session not found'


class PlayerNotFound(NotFound):
    message = 'Player not found'


class WordAlreadyFound(Conflict):
    message = 'Word already found'


class SessionFull(Conflict):
    message = 'Session is full'


class GameEnded(Conflict):
    message = 'Game has already ended'


class GameNotActive(Conflict):
    message = 'Game has not started yet'


class InvalidWord(InvalidInput):
    message = 'Invalid word'


class InvalidCoordinates(InvalidInput):
    message = 'Coordinates are outside the grid'


class InvalidDifficulty(InvalidInput):
    message = 'Unknown difficulty'


class InvalidPlayerName(InvalidInput):
    message = 'Player name must be 1-100 characters'


class InvalidSessionCode(InvalidInput):
    message = 'Session code must be text'


class StoreUnavailable(Unavailable):
    pass


class SessionCodeExhausted(Unavailable):
    message = 'Could not allocate a session code'


class SessionCodeConflict(Exception):
    """Raised by a store when a generated code is already taken."""
