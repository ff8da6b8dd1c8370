"""
=============================================================================
CSRF PRE-FLIGHT
=============================================================================

Session-backed synchronizer token:

    GET  /auth/login      token missing → generate, store in session
                          handler renders <input name="csrf_token" value=...>
    POST /auth/login      form csrf_token == session token ?  continue
                                                            : 403, REJECTED

Works with a payload that has a ``csrf_token`` attribute (SessionData has
one) or with a dict payload. Must come after LoadSession.

=============================================================================
"""

import secrets
from typing import Any, Optional

from ..http.request import Request
from ..http.response import Response, forbidden
from .base import Flight, Outcome


UNSAFE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


def session_csrf_token(data: Any) -> Optional[str]:
    """Token from a session payload, for dataclass or dict payloads."""
    if isinstance(data, dict):
        return data.get("csrf_token")
    return getattr(data, "csrf_token", None)


def store_csrf_token(data: Any, token: str) -> None:
    if isinstance(data, dict):
        data["csrf_token"] = token
    elif hasattr(data, "csrf_token"):
        data.csrf_token = token
    else:
        raise TypeError(
            f"{type(data).__name__} session payload has no csrf_token attribute"
        )


def tokens_match(submitted: str, expected: str) -> bool:
    """Constant-time comparison that also accepts non-ASCII input."""
    return secrets.compare_digest(submitted.encode("utf-8"), expected.encode("utf-8"))


class CsrfProtect(Flight):
    """Issue a per-session token and check it on state-changing requests."""

    def __init__(
        self,
        field_name: str = "csrf_token",
        header_name: str = "X-CSRF-Token",
        token_bytes: int = 32,
    ):
        self.field_name = field_name
        self.header_name = header_name
        self.token_bytes = token_bytes

    def __call__(self, request: Request, response: Response, context: Any) -> Outcome:
        session = context.get_session()
        data = session.get_data()

        expected = session_csrf_token(data)
        if not isinstance(expected, str) or not expected:
            expected = secrets.token_hex(self.token_bytes)
            store_csrf_token(data, expected)
            session.mark_modified()

        if request.method not in UNSAFE_METHODS:
            return Outcome.CONTINUE

        submitted = request.form.get(self.field_name) or request.headers.get(self.header_name)
        if not submitted or not tokens_match(submitted, expected):
            forbidden(response, "CSRF token missing or invalid")
            return Outcome.REJECTED
        return Outcome.CONTINUE


csrf_protect = CsrfProtect()
