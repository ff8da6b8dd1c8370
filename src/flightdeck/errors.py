"""
=============================================================================
EXCEPTIONS
=============================================================================

Everything flightdeck raises derives from ``FlightdeckError``:

    FlightdeckError
    ├── ConfigError            (also a ValueError) bad AppConfig value
    ├── RequestError           malformed request, carries a status code
    └── SessionError
        ├── SessionIOError         open/read/write/mkdir failed
        ├── SessionParseError      session file is not a valid record
        └── SessionNotInitialized  handler asked for a session no
                                   pre-flight attached

Two outcomes are deliberately NOT exceptions:

    - no route matched       → Router.handle() returns False
    - a flight said no       → the flight returns Outcome.REJECTED

Every exception reaching Application.dispatch() is logged and answered
with a generic 500 (or with RequestError.status_code).

=============================================================================
"""

class FlightdeckError(Exception):
    """Base class for all flightdeck errors."""


class ConfigError(FlightdeckError, ValueError):
    """Raised by AppConfig.validate() for an unusable setting."""


class RequestError(FlightdeckError):
    """
    Raised while building a Request from the transport.

    Like the status-carrying parse errors of an HTTP server, this holds the
    status the client should get back:

        400 Bad Request        CONTENT_LENGTH is not a number
        413 Payload Too Large  body exceeds AppConfig.max_body_size
    """

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class SessionError(FlightdeckError):
    """Base class for session store failures."""


class SessionIOError(SessionError):
    """
    A session file could not be opened, read, written or removed, or the
    session directory could not be created.

    "File does not exist" during load is not an error and never raises this.
    """

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class SessionParseError(SessionError):
    """The session file exists but does not decode into the payload type."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class SessionNotInitialized(SessionError):
    """
    A handler or flight asked the request context for a session, but no
    pre-flight loaded one. This is an ordering mistake in route
    registration, so it is fatal to the request.
    """
