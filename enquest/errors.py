class EnQuestError(Exception):
    """Base class for errors that map onto a client-facing HTTP status."""

    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class BadRequestError(EnQuestError):
    status_code = 400


class NotFoundError(EnQuestError):
    status_code = 404
