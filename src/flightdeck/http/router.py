"""
=============================================================================
URL ROUTER
=============================================================================

Matches a request to the first registered route whose method and path
pattern fit, then runs that route's flights and handler.

=============================================================================
ROUTING FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │   GET /user/alice?foo=bar                                           │
    │        │                                                            │
    │        ▼                                                            │
    │   split_path("/user/alice")  →  ["user", "alice"]                   │
    │        │                                                            │
    │        ▼                                                            │
    │   Registered routes, tried in order:                                │
    │     GET  /                     0 segments  ✗ count differs          │
    │     GET  /about                1 segment   ✗ count differs          │
    │     POST /user/:username       2 segments  ✗ method differs         │
    │     GET  /user/:username       2 segments  ✓ MATCH                  │
    │     GET  /user/me              (never reached: first match wins)    │
    │        │                                                            │
    │        ▼                                                            │
    │   request.path_params = {"username": "alice"}                       │
    │   pre-flights → handler → post-flights                              │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PATTERN RULES
=============================================================================

Patterns and paths are both split on "/" with empty segments dropped:

    "/"            → []
    "/about"       → ["about"]
    "about/"       → ["about"]
    "//user//x/"   → ["user", "x"]

A pattern segment is either

    literal   "user"       must equal the request segment byte for byte
    binder    ":username"  captures exactly one request segment

There is no wildcard: a binder never spans several segments, and a
request whose segment count differs from the pattern's never matches.
Register specific routes (/user/me) before binders (/user/:username).

=============================================================================
NO MATCH
=============================================================================

handle() returns False and writes nothing. Producing the 404 is the
caller's job (Application.dispatch does it).

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple
import logging

from .request import Request
from .response import Response
from ..flights.base import AnyFlight, Outcome, run_flights


logger = logging.getLogger(__name__)


# Handler: writes into the response, returns nothing, may raise.
Handler = Callable[[Request, Response, Any], None]


def split_path(path: str) -> List[str]:
    """Split on "/" and drop empty segments."""
    return [segment for segment in path.split("/") if segment]


def is_binder(segment: str) -> bool:
    return segment.startswith(":")


@dataclass(frozen=True)
class Route:
    """
    A registered route. Immutable once built.

        Route(
            method="GET",
            pattern="/user/:username",
            handler=show_user,
            pre_flights=(load_session,),
            post_flights=(save_session,),
            name="user",
        )

    ``segments`` is derived from ``pattern`` at construction.
    """

    method: str
    pattern: str
    handler: Handler
    pre_flights: Tuple[AnyFlight, ...] = ()
    post_flights: Tuple[AnyFlight, ...] = ()
    name: Optional[str] = None
    segments: Tuple[str, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "pre_flights", tuple(self.pre_flights))
        object.__setattr__(self, "post_flights", tuple(self.post_flights))

        segments = tuple(split_path(self.pattern))
        seen = set()
        for segment in segments:
            if not is_binder(segment):
                continue
            param = segment[1:]
            if not param:
                raise ValueError(f"Empty parameter name in pattern {self.pattern!r}")
            if param in seen:
                raise ValueError(f"Duplicate parameter {param!r} in pattern {self.pattern!r}")
            seen.add(param)
        object.__setattr__(self, "segments", segments)

    @property
    def param_names(self) -> List[str]:
        return [s[1:] for s in self.segments if is_binder(s)]

    def match_path(self, path_segments: Sequence[str]) -> Optional[Dict[str, str]]:
        """
        Compare against already-split request segments.

        Returns the bound parameters, or None if the path doesn't fit.
        The method is not checked here.
        """
        if len(path_segments) != len(self.segments):
            return None

        params: Dict[str, str] = {}
        for route_seg, req_seg in zip(self.segments, path_segments):
            if is_binder(route_seg):
                params[route_seg[1:]] = req_seg
            elif route_seg != req_seg:
                return None
        return params


@dataclass
class RouteMatch:
    """The route that matched and the parameters its binders captured."""

    route: Route
    params: Dict[str, str]


class Router:
    """
    Ordered route table.

    ==========================================================================
    REGISTRATION
    ==========================================================================

        router = Router()

        # explicit
        router.add_route("GET", "/about", about)

        # decorator
        @router.get("/user/:username", pre=[load], post=[save])
        def show_user(request, response, context):
            response.write(f"User Path: {request.path_params['username']}")

        # group sharing a prefix and flights
        account = router.group("/account", pre=[load, require_login()], post=[save])

        @account.get("/settings")
        def settings(request, response, context):
            ...

    ==========================================================================
    """

    def __init__(self) -> None:
        self._routes: List[Route] = []
        self._named_routes: Dict[str, Route] = {}

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def register(self, route: Route) -> Route:
        """Append ``route`` to the table. Order of registration is match order."""
        self._routes.append(route)
        if route.name:
            self._named_routes[route.name] = route
        logger.debug(f"Registered route {route.method} {route.pattern}")
        return route

    def add_route(
        self,
        method: str,
        pattern: str,
        handler: Handler,
        pre: Iterable[AnyFlight] = (),
        post: Iterable[AnyFlight] = (),
        name: Optional[str] = None,
    ) -> Route:
        return self.register(Route(
            method=method,
            pattern=pattern,
            handler=handler,
            pre_flights=tuple(pre),
            post_flights=tuple(post),
            name=name,
        ))

    def route(
        self,
        pattern: str,
        method: str = "GET",
        pre: Iterable[AnyFlight] = (),
        post: Iterable[AnyFlight] = (),
        name: Optional[str] = None,
    ) -> Callable[[Handler], Handler]:
        """Decorator form of add_route(). Returns the handler unchanged."""
        pre, post = tuple(pre), tuple(post)

        def decorator(handler: Handler) -> Handler:
            self.add_route(method, pattern, handler, pre=pre, post=post, name=name)
            return handler
        return decorator

    def get(self, pattern: str, **kwargs: Any) -> Callable[[Handler], Handler]:
        return self.route(pattern, "GET", **kwargs)

    def post(self, pattern: str, **kwargs: Any) -> Callable[[Handler], Handler]:
        return self.route(pattern, "POST", **kwargs)

    def put(self, pattern: str, **kwargs: Any) -> Callable[[Handler], Handler]:
        return self.route(pattern, "PUT", **kwargs)

    def delete(self, pattern: str, **kwargs: Any) -> Callable[[Handler], Handler]:
        return self.route(pattern, "DELETE", **kwargs)

    def patch(self, pattern: str, **kwargs: Any) -> Callable[[Handler], Handler]:
        return self.route(pattern, "PATCH", **kwargs)

    def group(
        self,
        prefix: str,
        pre: Iterable[AnyFlight] = (),
        post: Iterable[AnyFlight] = (),
    ) -> "RouteGroup":
        """Register routes under ``prefix`` with shared flights."""
        return RouteGroup(self, prefix, tuple(pre), tuple(post))

    # =========================================================================
    # ROUTE MATCHING
    # =========================================================================

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """
        First route whose method and pattern fit, or None.

        Parameters captured while inspecting a route that then fails are
        thrown away with it.
        """
        method = method.upper()
        segments = split_path(path)

        for route in self._routes:
            if route.method != method:
                continue
            params = route.match_path(segments)
            if params is not None:
                return RouteMatch(route=route, params=params)
        return None

    def handle(self, request: Request, response: Response, context: Any) -> bool:
        """
        Dispatch ``request`` to its route.

        =====================================================================
        DISPATCH STEPS
        =====================================================================

        1. match()                   no route → return False
        2. request.path_params       ← captured binders
        3. pre-flights               REJECTED → return True, nothing else runs
        4. handler                   exceptions propagate to the caller
        5. post-flights              REJECTED → remaining ones skipped

        =====================================================================

        Returns:
            True if a route matched (even if a flight rejected), else False.
        """
        match = self.match(request.method, request.path)
        if match is None:
            logger.debug(f"No route for {request.method} {request.path}")
            return False

        route = match.route
        request.path_params = match.params
        logger.debug(f"{request.method} {request.path} → {route.pattern}")

        if run_flights(route.pre_flights, request, response, context, "pre") is Outcome.REJECTED:
            return True

        route.handler(request, response, context)

        run_flights(route.post_flights, request, response, context, "post")
        return True

    # =========================================================================
    # UTILITY METHODS
    # =========================================================================

    def url_for(self, name: str, **params: str) -> Optional[str]:
        """
        Path for a named route, binders filled from ``params``.

            router.url_for("user", username="alice")  # "/user/alice"

        Raises:
            KeyError: a binder has no value in ``params``.
        """
        route = self._named_routes.get(name)
        if route is None:
            return None

        parts = []
        for segment in route.segments:
            if is_binder(segment):
                parts.append(str(params[segment[1:]]))
            else:
                parts.append(segment)
        return "/" + "/".join(parts)

    def routes(self) -> List[Route]:
        return list(self._routes)

    def print_routes(self) -> None:
        """
        Print the route table, e.g.:

            Registered Routes:
            ------------------------------------------------------------
              GET      /                              0 pre / 0 post
              GET      /user/:username                1 pre / 1 post
            ------------------------------------------------------------
        """
        print("\nRegistered Routes:")
        print("-" * 60)
        for route in self._routes:
            flights = f"{len(route.pre_flights)} pre / {len(route.post_flights)} post"
            print(f"  {route.method:8} {route.pattern:30} {flights}")
        print("-" * 60)

    def __len__(self) -> int:
        return len(self._routes)


class RouteGroup:
    """
    Registers into a parent router with a path prefix and flights
    prepended (pre) / appended (post) to every route's own.

    Routes land in the parent's table in the order they are declared, so
    groups don't change match order.
    """

    def __init__(
        self,
        router: Router,
        prefix: str,
        pre: Tuple[AnyFlight, ...] = (),
        post: Tuple[AnyFlight, ...] = (),
    ):
        self.router = router
        self.prefix = "/" + "/".join(split_path(prefix))
        self.pre = pre
        self.post = post

    def add_route(
        self,
        method: str,
        pattern: str,
        handler: Handler,
        pre: Iterable[AnyFlight] = (),
        post: Iterable[AnyFlight] = (),
        name: Optional[str] = None,
    ) -> Route:
        full_pattern = self.prefix.rstrip("/") + "/" + "/".join(split_path(pattern))
        return self.router.add_route(
            method,
            full_pattern,
            handler,
            pre=self.pre + tuple(pre),
            post=tuple(post) + self.post,
            name=name,
        )

    def route(
        self,
        pattern: str,
        method: str = "GET",
        pre: Iterable[AnyFlight] = (),
        post: Iterable[AnyFlight] = (),
        name: Optional[str] = None,
    ) -> Callable[[Handler], Handler]:
        pre, post = tuple(pre), tuple(post)

        def decorator(handler: Handler) -> Handler:
            self.add_route(method, pattern, handler, pre=pre, post=post, name=name)
            return handler
        return decorator

    def get(self, pattern: str, **kwargs: Any) -> Callable[[Handler], Handler]:
        return self.route(pattern, "GET", **kwargs)

    def post(self, pattern: str, **kwargs: Any) -> Callable[[Handler], Handler]:
        return self.route(pattern, "POST", **kwargs)
