"""
=============================================================================
FLIGHTS
=============================================================================

Short-circuiting steps attached per route, run before ("pre-flight") or
after ("post-flight") the handler. See base.py for the execution rules.

Built-in flights:

    LoadSession / SaveSession   attach and persist the visitor's session
    RequireLogin                reject visitors without a user id
    CsrfProtect                 synchronizer-token check on unsafe methods

Typical page that needs a logged-in user:

    load, save = session_flights()
    router.add_route(
        "GET", "/dashboard", dashboard,
        pre=[load, require_login("/auth/login")],
        post=[save],
    )

=============================================================================
"""

from .base import Flight, FlightFunc, Outcome, flight_name, run_flights
from .session import LoadSession, SaveSession, session_flights
from .auth import RequireLogin, require_login
from .csrf import CsrfProtect, csrf_protect

__all__ = [
    "Flight",
    "FlightFunc",
    "Outcome",
    "flight_name",
    "run_flights",
    "LoadSession",
    "SaveSession",
    "session_flights",
    "RequireLogin",
    "require_login",
    "CsrfProtect",
    "csrf_protect",
]
