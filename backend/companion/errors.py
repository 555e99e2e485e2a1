"""Error taxonomy shared by the domain services and the HTTP layer."""


class GameError(Exception):
    status_code = 500
    message = 'Internal server error'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self):
        return {'error': self.message}


class ValidationError(GameError):
    status_code = 400
    message = 'Invalid request'


class NotFound(GameError):
    status_code = 404
    message = 'Not found'


class Conflict(GameError):
    status_code = 409
    message = 'Conflict'


class StoreError(GameError):
    """A query failed. The message is static; the cause is only logged."""
    status_code = 500
    message = 'Database error'
