"""
=============================================================================
APPLICATION
=============================================================================

Ties the pieces together for one request.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     ONE CGI INVOCATION                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │   environ + stdin                                                   │
    │        │                                                            │
    │        ▼                                                            │
    │   build_request()  ── RequestError ──► 400 / 413 ─────────┐         │
    │        │                                                  │         │
    │        ▼                                                  │         │
    │   Application.dispatch()                                  │         │
    │        │   RequestContext(sessions, state, config)        │         │
    │        ▼                                                  │         │
    │   Router.handle()                                         │         │
    │        │  no route     → 404 Not Found: {path}            │         │
    │        │  raised       → logged, 500 Internal Server Error│         │
    │        │  matched      → pre-flights → handler → post     │         │
    │        ▼                                                  │         │
    │   session.release(), access log line                      │         │
    │        │                                                  │         │
    │        ▼                                                  ▼         │
    │   send_response()  → "Status: ..." framing on stdout                │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
USAGE
=============================================================================

    # app.py
    from flightdeck import Application, session_flights, require_login

    app = Application()
    load, save = session_flights()

    @app.get("/")
    def home(request, response, context):
        response.html("<h1>Welcome</h1>")

    @app.get("/dashboard", pre=[load, require_login("/auth/login")], post=[save])
    def dashboard(request, response, context):
        data = context.get_session().get_data()
        response.write(f"Hello {data.username}")

    if __name__ == "__main__":
        app.run()

Or, without the __main__ block:

    python -m flightdeck app:app

=============================================================================
"""

import logging
import time
from dataclasses import replace
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

from .config import AppConfig
from .context import RequestContext
from .errors import RequestError
from .flights.base import AnyFlight
from .http.request import Request
from .http.response import Response, internal_error, not_found, write_error
from .http.router import Handler, Route, RouteGroup, Router
from .log import log_request, new_request_id, setup_logging
from .sessions import JsonSessionCodec, SessionData, SessionStore
from .transport import CGIProvider, TransportProvider, build_request, send_response


logger = logging.getLogger(__name__)

S = TypeVar("S")


class Application(Generic[S]):
    """
    A routed web application served one request at a time.

    =========================================================================
    COMPONENTS
    =========================================================================

    - AppConfig:      settings, validated at construction
    - Router:         route table and flight execution
    - SessionStore:   file-backed sessions, reached via context.sessions
    - state:          any object handlers need (shared across dispatches,
                      exposed as context.state)

    =========================================================================
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        state: Optional[S] = None,
        session_factory: Callable[[], Any] = SessionData,
        session_codec: Optional[JsonSessionCodec] = None,
    ):
        """
        Args:
            config: Settings. ``AppConfig()`` defaults if omitted.
            state: Application state handed to every handler.
            session_factory: Builds an empty session payload.
            session_codec: Serializer for session files.
        """
        self.config = config or AppConfig()
        self.config.validate()

        self.state = state
        self._router = Router()
        self._store = SessionStore(
            self.config.session_config(),
            factory=session_factory,
            codec=session_codec,
        )

    def configure(self, **changes: Any) -> "Application[S]":
        """
        Replace config fields after construction and rebuild the session
        store to match. Used by the command line overrides.

            app.configure(session_dir="/var/lib/myapp/sessions")

        Raises:
            ConfigError: the resulting config does not validate.
        """
        config = replace(self.config, **changes)
        config.validate()
        self.config = config
        self._store = SessionStore(
            config.session_config(),
            factory=self._store.factory,
            codec=self._store.codec,
        )
        return self

    @property
    def router(self) -> Router:
        return self._router

    @property
    def store(self) -> SessionStore:
        return self._store

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(
        self,
        method: str,
        pattern: str,
        handler: Handler,
        pre: Iterable[AnyFlight] = (),
        post: Iterable[AnyFlight] = (),
        name: Optional[str] = None,
    ) -> Route:
        return self._router.add_route(method, pattern, handler, pre=pre, post=post, name=name)

    def route(self, pattern: str, method: str = "GET", **kwargs):
        return self._router.route(pattern, method, **kwargs)

    def get(self, pattern: str, **kwargs):
        return self._router.get(pattern, **kwargs)

    def post(self, pattern: str, **kwargs):
        return self._router.post(pattern, **kwargs)

    def put(self, pattern: str, **kwargs):
        return self._router.put(pattern, **kwargs)

    def delete(self, pattern: str, **kwargs):
        return self._router.delete(pattern, **kwargs)

    def patch(self, pattern: str, **kwargs):
        return self._router.patch(pattern, **kwargs)

    def group(self, prefix: str, pre: Iterable[AnyFlight] = (), post: Iterable[AnyFlight] = ()) -> RouteGroup:
        return self._router.group(prefix, pre=pre, post=post)

    # =========================================================================
    # DISPATCH
    # =========================================================================

    def new_context(self) -> RequestContext[S]:
        return RequestContext(sessions=self._store, state=self.state, config=self.config)

    def dispatch(self, request: Request) -> Response:
        """
        Run ``request`` through the router and return the finished response.

        Never raises for handler or flight failures: those are logged and
        turned into a generic 500. The session attached during the request
        is released whatever happens.
        """
        response = Response()
        context = self.new_context()
        request_id = new_request_id()
        started = time.time()

        try:
            if not self._router.handle(request, response, context):
                not_found(response, request.path)
        except Exception as e:
            logger.exception(f"[{request_id}] Handler error on {request.method} {request.path}: {e}")
            # Drop whatever the handler had set (Location, cookies, body).
            response = Response()
            internal_error(response)
        finally:
            if context.session is not None:
                context.session.release()
            log_request(request, response, started, self.config.log_format, request_id)

        return response

    def run(self, provider: Optional[TransportProvider] = None) -> Response:
        """
        Serve the single request the gateway started this process for.

        Returns the response that was sent, which is handy in tests.
        """
        provider = provider or CGIProvider()
        setup_logging(self.config)

        try:
            request = build_request(provider, self.config.max_body_size)
        except RequestError as e:
            logger.warning(f"Rejected malformed request: {e}")
            response = write_error(Response(), e.status_code, str(e))
            send_response(provider, response)
            return response

        response = self.dispatch(request)
        send_response(provider, response)
        return response


def create_app(config: Optional[AppConfig] = None, **kwargs: Any) -> Application:
    """
    Factory for an Application, reading AppConfig from the environment
    when no config is given.

        app = create_app()          # FLIGHTDECK_* variables apply
    """
    return Application(config or AppConfig.from_env(), **kwargs)
