"""
=============================================================================
REQUEST CONTEXT
=============================================================================

The third argument every handler and flight receives:

    def handler(request: Request, response: Response, context: RequestContext):
        session = context.get_session()
        db = context.state.db

It carries what is not part of the HTTP exchange itself: the session
store, the session a pre-flight attached, the configuration, and an
application-defined ``state`` object (database handles, template
environments, ...). ``RequestContext`` is generic over that state type,
so a handler can annotate ``RequestContext[MyState]`` and get a typed
``context.state``.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Optional, TypeVar, TYPE_CHECKING

from .errors import SessionNotInitialized
from .sessions import Session, SessionStore

if TYPE_CHECKING:
    from .config import AppConfig


S = TypeVar("S")


@dataclass
class RequestContext(Generic[S]):
    """
    Per-request context.

    A fresh one is made for every dispatch; ``state`` is shared across them.
    """

    sessions: SessionStore
    state: Optional[S] = None
    config: Optional["AppConfig"] = None
    session: Optional[Session] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    def get_session(self) -> Session:
        """
        The session attached by a pre-flight.

        Raises:
            SessionNotInitialized: no pre-flight attached one. Register
                the session flights on the route.
        """
        if self.session is None:
            raise SessionNotInitialized(
                "No session on this request; add the session pre-flight to the route"
            )
        return self.session

    def attach_session(self, session: Session) -> None:
        self.session = session

    @property
    def has_session(self) -> bool:
        return self.session is not None

    def rotate_session(self) -> Session:
        """
        Replace the attached session with a brand new one.

        The old session's file is deleted right away and the new one gets
        its cookie from the save post-flight. Call this when a visitor logs
        in, so an id planted before login is worthless afterwards.
        """
        old = self.get_session()
        old.mark_deleted()
        old.save()
        old.release()

        self.session = self.sessions.create_new()
        return self.session
