"""
=============================================================================
HTTP MODEL
=============================================================================

The plain-data request/response model a handler works with. Nothing in
here knows about sockets or CGI; the transport package fills a Request
and serializes a Response.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ REQUEST (request.py)                                                │
    │ ─────────────────────────────────────────────────────────────────── │
    │ method, path, headers, cookies, query_params, path_params, form     │
    │                                                                     │
    │ Request.build("GET", "/user/alice", "foo=bar", headers)             │
    │   → query_params={"foo": "bar"}, path_params filled by the router   │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ RESPONSE (response.py)                                              │
    │ ─────────────────────────────────────────────────────────────────── │
    │ status, content_type, headers, body buffer                          │
    │                                                                     │
    │ response.write("hello")         append to the body                  │
    │ response.redirect("/login")     307 + Location                      │
    │ response.set_cookie(cookie)     one Set-Cookie line per call        │
    └─────────────────────────────────────────────────────────────────────┘

    ┌─────────────────────────────────────────────────────────────────────┐
    │ HEADERS / COOKIES (headers.py, cookies.py)                          │
    │ ─────────────────────────────────────────────────────────────────── │
    │ Ordered multi-valued header list; Cookie parsing; Set-Cookie        │
    └─────────────────────────────────────────────────────────────────────┘

The router lives in ``flightdeck.http.router``. It depends on the flight
chain, so import it from there rather than from this package.

=============================================================================
"""

from .headers import Headers
from .cookies import SetCookie, parse_cookies
from .request import Request, parse_query
from .response import (
    Response,
    write_error,
    not_found,       # 404 Not Found: {path}
    unauthorized,    # 401
    forbidden,       # 403
    internal_error,  # 500
)
from .status_codes import HTTPStatus

__all__ = [
    "Headers",
    "SetCookie",
    "parse_cookies",
    "Request",
    "parse_query",
    "Response",
    "write_error",
    "not_found",
    "unauthorized",
    "forbidden",
    "internal_error",
    "HTTPStatus",
]
