"""
=============================================================================
FLIGHTS: PER-ROUTE MIDDLEWARE
=============================================================================

A flight is a step that runs before ("pre-flight") or after
("post-flight") a route's handler and says whether the chain may go on.

=============================================================================
EXECUTION ORDER
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                     │
    │   pre[0] ──► pre[1] ──► ... ──► HANDLER ──► post[0] ──► post[1] ... │
    │     │          │                               │                    │
    │  REJECTED   REJECTED                        REJECTED                │
    │     │          │                               │                    │
    │     ▼          ▼                               ▼                    │
    │   stop: handler and all post-flights      stop: remaining           │
    │   are skipped                             post-flights skipped,     │
    │                                           handler output stays      │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

- Pre-flights run in registration order, strictly before the handler.
- The handler runs only if every pre-flight returned CONTINUE.
- Post-flights run in registration order, only if the handler ran.
- REJECTED ends the current phase. Nothing is rolled back.
- A rejecting flight writes its own response (status, body, redirect).
  The chain never writes a default rejection.

Unlike a wrap-the-next-handler middleware pipeline, a flight never calls
the next step itself. It returns an Outcome and the router decides what
runs next, so a flight cannot run code "around" the handler and cannot
suspend independently of the others.

=============================================================================
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Iterable, Union
import logging

from ..http.request import Request
from ..http.response import Response


logger = logging.getLogger(__name__)


class Outcome(Enum):
    """What a flight tells the chain."""

    CONTINUE = "continue"
    REJECTED = "rejected"

    @classmethod
    def of(cls, proceed: bool) -> "Outcome":
        """``Outcome.of(user_ok)`` reads better than a conditional expression."""
        return cls.CONTINUE if proceed else cls.REJECTED

    @property
    def proceeds(self) -> bool:
        return self is Outcome.CONTINUE


# Anything callable as flight(request, response, context) -> Outcome.
FlightFunc = Callable[[Request, Response, Any], Outcome]


class Flight(ABC):
    """
    Base class for flights that carry configuration.

    Plain functions with the same signature work too; subclass this when
    the flight needs constructor arguments:

        class RequireHeader(Flight):
            def __init__(self, name):
                self.header = name

            def __call__(self, request, response, context):
                if self.header in request.headers:
                    return Outcome.CONTINUE
                write_error(response, HTTPStatus.BAD_REQUEST)
                return Outcome.REJECTED
    """

    @abstractmethod
    def __call__(self, request: Request, response: Response, context: Any) -> Outcome:
        """Inspect/modify the request cycle and return an Outcome."""

    @property
    def name(self) -> str:
        return self.__class__.__name__


AnyFlight = Union[Flight, FlightFunc]


def flight_name(flight: AnyFlight) -> str:
    """Best human-readable name for logs."""
    if isinstance(flight, Flight):
        return flight.name
    return getattr(flight, "__qualname__", None) or getattr(flight, "__name__", repr(flight))


def run_flights(
    flights: Iterable[AnyFlight],
    request: Request,
    response: Response,
    context: Any,
    phase: str = "pre",
) -> Outcome:
    """
    Run ``flights`` in order until one rejects.

    Returns:
        Outcome.REJECTED if some flight rejected, else Outcome.CONTINUE.

    Raises:
        TypeError: a flight returned something other than an Outcome.
            ``True``/``None`` are refused so a forgotten ``return`` can't
            silently let a request through.
    """
    for flight in flights:
        outcome = flight(request, response, context)
        if not isinstance(outcome, Outcome):
            raise TypeError(
                f"{phase}-flight {flight_name(flight)} returned {outcome!r}, "
                f"expected an Outcome"
            )
        if outcome is Outcome.REJECTED:
            logger.debug(
                f"{phase}-flight {flight_name(flight)} rejected "
                f"{request.method} {request.path}"
            )
            return Outcome.REJECTED
    return Outcome.CONTINUE
