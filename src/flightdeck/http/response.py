"""
=============================================================================
HTTP RESPONSE
=============================================================================

The mutable response a handler writes into, and its CGI serialization.

=============================================================================
HANDLERS WRITE, THEY DON'T RETURN
=============================================================================

Every handler and flight receives the same Response object and writes to
it in place:

    def show_user(request, response, context):
        response.content_type = "text/html; charset=utf-8"
        response.write(f"<h1>{request.params['username']}</h1>")

This is what lets a post-flight see (and append to) what the handler
produced, and lets a rejecting pre-flight set a 401 that nobody else
overwrites.

=============================================================================
CGI RESPONSE FORMAT
=============================================================================

    Status: 302 Found\\r\\n                ← CGI status pseudo-header
    Location: /dashboard\\r\\n             ← headers, in insertion order,
    Set-Cookie: session_id=...\\r\\n         repeats allowed
    Content-Type: text/html\\r\\n
    Content-Length: 0\\r\\n
    \\r\\n
    <body bytes>

=============================================================================
"""

import json
from dataclasses import dataclass, field
from typing import Any, Union

from .cookies import SetCookie
from .headers import Headers
from .status_codes import HTTPStatus, coerce_status, status_phrase


DEFAULT_CONTENT_TYPE = "text/plain; charset=utf-8"


@dataclass
class Response:
    """
    Response under construction for one request cycle.

    ``buffer`` only grows through ``write()`` unless someone calls
    ``clear()``; headers are appended, never merged.
    ``status`` may also be assigned a plain int directly; serialization
    copes with codes HTTPStatus doesn't list.
    """

    status: Union[HTTPStatus, int] = HTTPStatus.OK
    content_type: str = DEFAULT_CONTENT_TYPE
    headers: Headers = field(default_factory=Headers)
    buffer: bytearray = field(default_factory=bytearray)

    # =========================================================================
    # BODY
    # =========================================================================

    def write(self, data: Union[str, bytes]) -> int:
        """Append to the body. Strings are UTF-8 encoded. Returns bytes written."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        self.buffer.extend(data)
        return len(data)

    def clear(self) -> None:
        """Drop everything written so far (the error path uses this)."""
        self.buffer.clear()

    @property
    def body(self) -> bytes:
        return bytes(self.buffer)

    @property
    def text(self) -> str:
        return self.buffer.decode("utf-8", errors="replace")

    def html(self, markup: str) -> "Response":
        self.content_type = "text/html; charset=utf-8"
        self.write(markup)
        return self

    def json(self, data: Any) -> "Response":
        self.content_type = "application/json"
        self.write(json.dumps(data))
        return self

    # =========================================================================
    # STATUS AND HEADERS
    # =========================================================================

    def set_status(self, status: Union[HTTPStatus, int]) -> "Response":
        self.status = coerce_status(status)
        return self

    def set_header(self, name: str, value: str) -> "Response":
        """Append a header. Use ``headers.set()`` to replace instead."""
        self.headers.add(name, value)
        return self

    def set_cookie(self, cookie: SetCookie) -> "Response":
        self.headers.add("Set-Cookie", cookie.to_header_value())
        return self

    def redirect(
        self,
        location: str,
        status: Union[HTTPStatus, int] = HTTPStatus.TEMPORARY_REDIRECT,
    ) -> "Response":
        """
        Point the browser somewhere else.

        307 keeps the method; pass ``HTTPStatus.FOUND`` or ``SEE_OTHER``
        after a form POST so the browser follows up with a GET.
        """
        self.status = coerce_status(status)
        self.headers.set("Location", location)
        return self

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    def to_cgi_bytes(self) -> bytes:
        """
        Serialize for a CGI gateway.

        Content-Type and Content-Length come from the fields, so any
        copies in ``headers`` are skipped.
        """
        lines = [f"Status: {int(self.status)} {status_phrase(self.status)}"]
        for name, value in self.headers:
            if name.lower() in ("content-type", "content-length"):
                continue
            lines.append(f"{name}: {value}")
        lines.append(f"Content-Type: {self.content_type}")
        lines.append(f"Content-Length: {len(self.buffer)}")
        lines.append("")
        head = "\r\n".join(lines).encode("utf-8") + b"\r\n"
        return head + bytes(self.buffer)


# =============================================================================
# CONVENIENCE WRITERS
# =============================================================================
#
# Flights that reject and the dispatcher's fallbacks all need the same
# "status + short plain-text body" shape.
#
# =============================================================================

def write_error(response: Response, status: Union[HTTPStatus, int], message: str = "") -> Response:
    """Replace the body with a plain-text error message and set ``status``."""
    status = coerce_status(status)
    response.status = status
    response.content_type = DEFAULT_CONTENT_TYPE
    response.clear()
    response.write(message or status_phrase(status))
    return response


def not_found(response: Response, path: str = "") -> Response:
    message = f"404 Not Found: {path}" if path else "404 Not Found"
    return write_error(response, HTTPStatus.NOT_FOUND, message)


def unauthorized(response: Response, message: str = "Unauthorized") -> Response:
    return write_error(response, HTTPStatus.UNAUTHORIZED, message)


def forbidden(response: Response, message: str = "Forbidden") -> Response:
    return write_error(response, HTTPStatus.FORBIDDEN, message)


def internal_error(response: Response, message: str = "Internal Server Error") -> Response:
    """Generic failure body. Never leaks the exception text."""
    return write_error(response, HTTPStatus.INTERNAL_SERVER_ERROR, message)
