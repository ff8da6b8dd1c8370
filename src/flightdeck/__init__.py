"""
=============================================================================
FLIGHTDECK
=============================================================================

A small request-handling layer for server-rendered sites that run as CGI
programs: one process per request, no listener of its own.

=============================================================================
WHAT'S IN THE BOX
=============================================================================

    http/          Request, Response, Headers, cookies, status codes,
                   and the Router (``:name`` binder segments)
    flights/       per-route pre/post steps that can short-circuit:
                   session load/save, login required, CSRF
    sessions/      file-backed sessions, one JSON file per visitor
    transport/     CGI environment + stdin in, Status framing out
    app.py         Application: router + config + session store
    config.py      AppConfig, from code or FLIGHTDECK_* variables
    log.py         logging setup and access log lines

=============================================================================
QUICK START
=============================================================================

    from flightdeck import Application, session_flights

    app = Application()
    load, save = session_flights()

    @app.get("/user/:username", pre=[load], post=[save])
    def user(request, response, context):
        response.write(f"User Path: {request.path_params['username']}\\n")

    app.run()

=============================================================================
"""

__version__ = "0.4.0"

from .errors import (
    ConfigError,
    FlightdeckError,
    RequestError,
    SessionError,
    SessionIOError,
    SessionNotInitialized,
    SessionParseError,
)
from .http import Request, Response, HTTPStatus, SetCookie
from .sessions import Session, SessionConfig, SessionData, SessionStore
from .flights import (
    Flight,
    Outcome,
    csrf_protect,
    require_login,
    session_flights,
)
from .http.router import Route, Router
from .context import RequestContext
from .config import AppConfig
from .app import Application, create_app

__all__ = [
    "__version__",
    "Application",
    "create_app",
    "AppConfig",
    "RequestContext",
    "Router",
    "Route",
    "Request",
    "Response",
    "HTTPStatus",
    "SetCookie",
    "Flight",
    "Outcome",
    "session_flights",
    "require_login",
    "csrf_protect",
    "Session",
    "SessionConfig",
    "SessionData",
    "SessionStore",
    "FlightdeckError",
    "ConfigError",
    "RequestError",
    "SessionError",
    "SessionIOError",
    "SessionParseError",
    "SessionNotInitialized",
]
