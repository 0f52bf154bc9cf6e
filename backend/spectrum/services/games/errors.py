"""Typed failures raised by the game registry.

Each error carries a stable ``code`` so transport handlers can translate it
into an acknowledgement or an HTTP response without string matching.
"""


class GameError(Exception):
    code = 'GameError'
    message = 'Game operation failed'
    http_status = 400

    def __init__(self, message=None):
        super().__init__(message or self.message)

    def to_dict(self):
        return {'success': False, 'error': str(self), 'code': self.code}


class GameNotFound(GameError):
    code = 'GameNotFound'
    message = 'Game not found'
    http_status = 404


class NameTaken(GameError):
    code = 'NameTaken'
    message = 'Name already taken'


class GameFull(GameError):
    code = 'GameFull'
    message = 'Game is full'
    http_status = 403


class CannotStart(GameError):
    code = 'CannotStart'
    message = 'Cannot start game'


class NotAcceptingSubmissions(GameError):
    code = 'NotAcceptingSubmissions'
    message = 'Not accepting submissions at this time'


class InvalidRound(GameError):
    code = 'InvalidRound'
    message = 'Invalid round'


class GameNotInProgress(GameError):
    code = 'GameNotInProgress'
    message = 'Game is not in progress'


class CannotAdvance(GameError):
    code = 'CannotAdvance'
    message = 'Cannot advance to next round'


class AlreadyInGame(GameError):
    code = 'AlreadyInGame'
    message = 'Player is already in a game'
