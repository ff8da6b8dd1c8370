"""
=============================================================================
CGI TRANSPORT
=============================================================================

The gateway (Apache mod_cgi, nginx + fcgiwrap, lighttpd, ...) starts the
program once per request, hands over the request through environment
variables and stdin, and reads the response from stdout.

=============================================================================
REQUEST: ENVIRONMENT → Request
=============================================================================

    REQUEST_METHOD=POST                       method        "POST"
    PATH_INFO=/auth/login                     path          "/auth/login"
    QUERY_STRING=next=%2Fdashboard            query_params  {"next": "/dashboard"}
    HTTP_USER_AGENT=curl/8.5                  header        user-agent: curl/8.5
    HTTP_X_CSRF_TOKEN=ab12                    header        x-csrf-token: ab12
    HTTP_COOKIE=session_id=4f1c...            cookies       {"session_id": "4f1c..."}
    CONTENT_TYPE=application/x-www-form-...   header        content-type: ...
    CONTENT_LENGTH=27                         body          27 bytes from stdin
    REMOTE_ADDR=203.0.113.7                   remote_addr   "203.0.113.7"

HTTP_* names lose the prefix, "_" becomes "-", and the result is
lowercased. CONTENT_TYPE and CONTENT_LENGTH have no prefix.

=============================================================================
RESPONSE: Response → STDOUT
=============================================================================

    Status: 302 Found
    Location: /dashboard
    Set-Cookie: session_id=4f1c...; Path=/; HttpOnly; SameSite=Lax; Max-Age=86400
    Content-Type: text/plain; charset=utf-8
    Content-Length: 0
    <blank line>
    <body>

The gateway turns the Status line into the real HTTP status line.

=============================================================================
"""

import os
import sys
from typing import BinaryIO, Iterable, Mapping, Optional, Protocol, Tuple

from ..errors import RequestError
from ..http.headers import Headers
from ..http.request import Request
from ..http.response import Response
from ..http.status_codes import HTTPStatus


HEADER_PREFIX = "HTTP_"

# Variables that describe headers but carry no HTTP_ prefix.
UNPREFIXED_HEADERS = {
    "CONTENT_TYPE": "content-type",
    "CONTENT_LENGTH": "content-length",
}


class TransportProvider(Protocol):
    """
    Where a request comes from and where its response goes.

    CGIProvider is the only implementation shipped. A persistent-process
    gateway would implement the same five methods per request.
    """

    def get_env(self, key: str) -> Optional[str]:
        ...

    def env_items(self) -> Iterable[Tuple[str, str]]:
        ...

    def reader(self) -> BinaryIO:
        ...

    def writer(self) -> BinaryIO:
        ...

    def finish(self) -> None:
        ...


class CGIProvider:
    """
    Classic CGI: ``os.environ``, ``sys.stdin.buffer``, ``sys.stdout.buffer``.

    All three can be swapped out, which is how the tests drive it:

        provider = CGIProvider(
            environ={"REQUEST_METHOD": "GET", "PATH_INFO": "/about"},
            stdin=io.BytesIO(),
            stdout=io.BytesIO(),
        )
    """

    def __init__(
        self,
        environ: Optional[Mapping[str, str]] = None,
        stdin: Optional[BinaryIO] = None,
        stdout: Optional[BinaryIO] = None,
    ):
        self.environ = os.environ if environ is None else environ
        self.stdin = stdin if stdin is not None else sys.stdin.buffer
        self.stdout = stdout if stdout is not None else sys.stdout.buffer

    def get_env(self, key: str) -> Optional[str]:
        return self.environ.get(key)

    def env_items(self) -> Iterable[Tuple[str, str]]:
        return list(self.environ.items())

    def reader(self) -> BinaryIO:
        return self.stdin

    def writer(self) -> BinaryIO:
        return self.stdout

    def finish(self) -> None:
        self.stdout.flush()


def header_name(env_key: str) -> Optional[str]:
    """
    Header name for a CGI variable, or None if it isn't a header.

        header_name("HTTP_X_CSRF_TOKEN")  →  "x-csrf-token"
        header_name("CONTENT_TYPE")       →  "content-type"
        header_name("PATH_INFO")          →  None
    """
    if env_key in UNPREFIXED_HEADERS:
        return UNPREFIXED_HEADERS[env_key]
    if env_key.startswith(HEADER_PREFIX) and len(env_key) > len(HEADER_PREFIX):
        return env_key[len(HEADER_PREFIX):].replace("_", "-").lower()
    return None


def parse_cgi_headers(provider: TransportProvider) -> Headers:
    headers = Headers()
    for key, value in provider.env_items():
        name = header_name(key)
        if name is not None:
            headers.add(name, value)
    return headers


def read_body(provider: TransportProvider, max_body_size: int) -> bytes:
    """
    Read exactly CONTENT_LENGTH bytes from the provider's reader.

    Raises:
        RequestError: 400 for a non-numeric or negative length,
            413 when the length exceeds ``max_body_size``.
    """
    raw = (provider.get_env("CONTENT_LENGTH") or "").strip()
    if not raw:
        return b""

    try:
        length = int(raw)
    except ValueError:
        raise RequestError(f"Invalid CONTENT_LENGTH: {raw!r}", HTTPStatus.BAD_REQUEST) from None
    if length < 0:
        raise RequestError(f"Invalid CONTENT_LENGTH: {raw!r}", HTTPStatus.BAD_REQUEST)
    if length > max_body_size:
        raise RequestError(
            f"Request body of {length} bytes exceeds limit of {max_body_size}",
            HTTPStatus.PAYLOAD_TOO_LARGE,
        )

    stream = provider.reader()
    chunks = []
    remaining = length
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            # Gateway closed stdin early; keep what arrived.
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def build_request(provider: TransportProvider, max_body_size: int = 1024 * 1024) -> Request:
    """
    Build a Request from the CGI environment and stdin.

    Raises:
        RequestError: the body length is unusable (see read_body()).
    """
    return Request.build(
        method=provider.get_env("REQUEST_METHOD") or "GET",
        path=provider.get_env("PATH_INFO") or "/",
        query_string=provider.get_env("QUERY_STRING") or "",
        headers=parse_cgi_headers(provider),
        body=read_body(provider, max_body_size),
        remote_addr=provider.get_env("REMOTE_ADDR") or "",
    )


def send_response(provider: TransportProvider, response: Response) -> None:
    """Write ``response`` in CGI framing and finish the provider."""
    out = provider.writer()
    out.write(response.to_cgi_bytes())
    provider.finish()
