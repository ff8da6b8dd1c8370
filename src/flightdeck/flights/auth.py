"""
Login-required pre-flight.

Must come after LoadSession in the route's pre-flights.
"""

from typing import Any, Optional

from ..http.request import Request
from ..http.response import Response, unauthorized
from ..http.status_codes import HTTPStatus
from .base import Flight, Outcome


def session_user_id(data: Any) -> Optional[int]:
    """User id from a session payload, for dataclass or dict payloads."""
    if isinstance(data, dict):
        return data.get("user_id")
    return getattr(data, "user_id", None)


class RequireLogin(Flight):
    """
    Reject unless the session payload carries a positive user id.

    Without ``redirect_to`` the rejection is a plain 401; with it, a 302
    to that location (the usual choice for browser pages).
    """

    def __init__(self, redirect_to: Optional[str] = None):
        self.redirect_to = redirect_to

    def __call__(self, request: Request, response: Response, context: Any) -> Outcome:
        session = context.get_session()
        user_id = session_user_id(session.get_data())

        if isinstance(user_id, int) and not isinstance(user_id, bool) and user_id > 0:
            return Outcome.CONTINUE

        if self.redirect_to:
            response.redirect(self.redirect_to, HTTPStatus.FOUND)
        else:
            unauthorized(response, "Login required")
        return Outcome.REJECTED


def require_login(redirect_to: Optional[str] = None) -> RequireLogin:
    return RequireLogin(redirect_to)
