"""
Error taxonomy.

Every failure a handler can report is an ErrorResponse subclass carrying a
human-readable message and the HTTP status it maps to. The exception handlers
in internhub.main turn them into the failure envelope.
"""


class ErrorResponse(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFound(ErrorResponse):
    """Referenced company or internship does not exist."""
    status_code = 404


class InvalidQuery(ErrorResponse):
    """Malformed filter, sort or pagination parameters."""
    status_code = 400


class UnsupportedResource(ErrorResponse):
    status_code = 400


class InvalidUnit(ErrorResponse):
    """Radius unit outside {mi, km}."""
    status_code = 400


class AddressNotFound(ErrorResponse):
    """The geocoder returned no candidates."""
    status_code = 404


class Unauthorized(ErrorResponse):
    status_code = 401


class Forbidden(ErrorResponse):
    status_code = 403


class Conflict(ErrorResponse):
    """A company was modified by someone else between read and save."""
    status_code = 409


class UpstreamFailure(ErrorResponse):
    """MongoDB or the geocoder failed."""
    status_code = 502
