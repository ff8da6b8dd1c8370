"""
=============================================================================
SESSIONS
=============================================================================

File-backed, cookie-keyed session state.

    store.py   SessionStore / Session / SessionConfig
    codec.py   JSON encoding of payloads
    data.py    SessionData, the default payload

The store is never called by the router. Flights load and save sessions
(see flightdeck.flights.session) and hand them to handlers through the
request context.

=============================================================================
"""

from .codec import JsonSessionCodec
from .data import SessionData, MAX_SESSION_ERRORS
from .store import (
    Session,
    SessionConfig,
    SessionStore,
    generate_session_id,
    is_valid_session_id,
)

__all__ = [
    "Session",
    "SessionConfig",
    "SessionStore",
    "SessionData",
    "JsonSessionCodec",
    "MAX_SESSION_ERRORS",
    "generate_session_id",
    "is_valid_session_id",
]
