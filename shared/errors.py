"""
Error taxonomy for the station.

Every error carries the HTTP status it maps to; the API layer turns them
into `{"message": ...}` JSON responses.
"""


class StationError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(StationError):
    """Missing or invalid request field."""
    status_code = 400


class AuthError(StationError):
    """No session, expired session or bad credentials."""
    status_code = 401


class EncodeError(StationError):
    """The transcoder could not produce an MP3."""
    status_code = 500


class PersistenceError(StationError):
    """A store write or read failed."""
    status_code = 500


class UpstreamError(StationError):
    """A third-party HTTP service failed or answered with an unexpected shape."""
    status_code = 500
