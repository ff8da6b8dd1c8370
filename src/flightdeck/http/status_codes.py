"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes a server-rendered application actually answers with,
each carrying its reason phrase.

=============================================================================
WHERE THE PHRASE ENDS UP
=============================================================================

A CGI program never writes an HTTP status line itself. It writes a
``Status`` header and the gateway turns it into the real status line:

    What we write to stdout            What the browser receives
    ───────────────────────            ─────────────────────────
    Status: 302 Found\\r\\n              HTTP/1.1 302 Found
    Location: /dashboard\\r\\n           Location: /dashboard
    \\r\\n

So the phrase is still worth getting right: it is copied verbatim.

=============================================================================
"""

from enum import IntEnum
from typing import Union


class HTTPStatus(IntEnum):
    """
    HTTP status codes and reason phrases.

    IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.FOUND == 302
        True
        >>> HTTPStatus.FOUND.phrase
        'Found'
    """

    # =========================================================================
    # 2xx SUCCESS
    # =========================================================================
    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NO_CONTENT = 204

    # =========================================================================
    # 3xx REDIRECTION
    # =========================================================================
    # Form handlers answer a POST with 302/303 so a reload doesn't resubmit
    #
    MOVED_PERMANENTLY = 301
    FOUND = 302
    SEE_OTHER = 303
    NOT_MODIFIED = 304
    TEMPORARY_REDIRECT = 307
    PERMANENT_REDIRECT = 308

    # =========================================================================
    # 4xx CLIENT ERRORS
    # =========================================================================
    BAD_REQUEST = 400
    UNAUTHORIZED = 401                  # Flights reject with this when not logged in
    FORBIDDEN = 403                     # ... and with this on a CSRF mismatch
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    CONFLICT = 409
    LENGTH_REQUIRED = 411
    PAYLOAD_TOO_LARGE = 413
    UNSUPPORTED_MEDIA_TYPE = 415
    UNPROCESSABLE_ENTITY = 422
    TOO_MANY_REQUESTS = 429

    # =========================================================================
    # 5xx SERVER ERRORS
    # =========================================================================
    INTERNAL_SERVER_ERROR = 500         # Anything a handler raises ends here
    NOT_IMPLEMENTED = 501
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503

    @property
    def phrase(self) -> str:
        """Reason phrase written after the code in the ``Status`` header."""
        return _STATUS_PHRASES.get(self, "Unknown")


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.ACCEPTED: "Accepted",
    HTTPStatus.NO_CONTENT: "No Content",

    HTTPStatus.MOVED_PERMANENTLY: "Moved Permanently",
    HTTPStatus.FOUND: "Found",
    HTTPStatus.SEE_OTHER: "See Other",
    HTTPStatus.NOT_MODIFIED: "Not Modified",
    HTTPStatus.TEMPORARY_REDIRECT: "Temporary Redirect",
    HTTPStatus.PERMANENT_REDIRECT: "Permanent Redirect",

    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.UNAUTHORIZED: "Unauthorized",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.CONFLICT: "Conflict",
    HTTPStatus.LENGTH_REQUIRED: "Length Required",
    HTTPStatus.PAYLOAD_TOO_LARGE: "Payload Too Large",
    HTTPStatus.UNSUPPORTED_MEDIA_TYPE: "Unsupported Media Type",
    HTTPStatus.UNPROCESSABLE_ENTITY: "Unprocessable Entity",
    HTTPStatus.TOO_MANY_REQUESTS: "Too Many Requests",

    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
    HTTPStatus.BAD_GATEWAY: "Bad Gateway",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
}


def coerce_status(code: Union[HTTPStatus, int]) -> Union[HTTPStatus, int]:
    """
    The HTTPStatus member for ``code``, or the plain int for codes the enum
    doesn't list (410, 418, ...). Those still get sent, with phrase "Unknown".
    """
    try:
        return HTTPStatus(code)
    except ValueError:
        code = int(code)
        if not 100 <= code <= 999:
            raise ValueError(f"Status code out of range: {code}") from None
        return code


def status_phrase(code: Union[HTTPStatus, int]) -> str:
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return "Unknown"
