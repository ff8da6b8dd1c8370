"""
=============================================================================
SESSION FLIGHTS
=============================================================================

The pre/post pair that gives a route a session:

    pre   LoadSession   cookie → store.load() → (or store.create_new())
                        → context.attach_session()
    ...   handler       context.get_session().get_data() ...
    post  SaveSession   session.save() → Set-Cookie if the session is new,
                        expiring Set-Cookie if it was deleted

=============================================================================
THE COOKIE IS SENT ONCE
=============================================================================

    request 1 (no cookie)     create_new()        Set-Cookie: session_id=4f1c...
    request 2 (cookie 4f1c)   load("4f1c...")     (no Set-Cookie)
    request 3 (logout)        mark_deleted()      Set-Cookie: session_id=; Max-Age=0

A session that is not new never re-emits its cookie, so Max-Age counts
from the first response.

=============================================================================
"""

import logging
from typing import Any, Optional, Tuple

from ..http.request import Request
from ..http.response import Response
from ..sessions import SessionStore
from .base import Flight, Outcome


logger = logging.getLogger(__name__)


def _store(explicit: Optional[SessionStore], context: Any) -> SessionStore:
    return explicit if explicit is not None else context.sessions


class LoadSession(Flight):
    """
    Pre-flight: attach the visitor's session to the context.

    An absent cookie, a malformed id or a missing file all lead to a brand
    new session. A corrupt session file raises SessionParseError and fails
    the request.
    """

    def __init__(self, store: Optional[SessionStore] = None):
        self.store = store

    def __call__(self, request: Request, response: Response, context: Any) -> Outcome:
        if context.has_session:
            return Outcome.CONTINUE

        store = _store(self.store, context)
        session_id = request.cookies.get(store.config.cookie_name)

        session = store.load(session_id) if session_id else None
        if session is None:
            session = store.create_new()
            logger.debug(f"New session for {request.method} {request.path}")

        context.attach_session(session)
        return Outcome.CONTINUE


class SaveSession(Flight):
    """
    Post-flight: persist the session and emit its cookie when needed.
    """

    def __init__(self, store: Optional[SessionStore] = None):
        self.store = store

    def __call__(self, request: Request, response: Response, context: Any) -> Outcome:
        session = context.get_session()
        store = _store(self.store, context)

        was_new = session.is_new
        was_deleted = session.is_deleted
        session_id = session.id

        session.save()

        cookie = store.config.cookie(session_id)
        if was_deleted:
            response.set_cookie(cookie.expired())
        elif was_new:
            response.set_cookie(cookie)
        return Outcome.CONTINUE


def session_flights(store: Optional[SessionStore] = None) -> Tuple[LoadSession, SaveSession]:
    """
    The (pre, post) pair, ready to hand to route registration:

        load, save = session_flights()
        router.add_route("GET", "/dashboard", dashboard, pre=[load], post=[save])
    """
    return LoadSession(store), SaveSession(store)
