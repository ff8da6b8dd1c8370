"""
=============================================================================
FILE-BACKED SESSION STORE
=============================================================================

Server-side state for one browser, one file per session, keyed by a
random id the browser carries in a cookie.

=============================================================================
SESSION LIFECYCLE
=============================================================================

    ┌──────────────────────┐         ┌──────────────────────┐
    │ store.create_new()   │         │ store.load(id)       │
    │  is_new   = True     │         │  is_new   = False    │
    │  modified = True     │         │  modified = False    │
    │  data     = None     │         │  data     = parsed   │
    └──────────┬───────────┘         └──────────┬───────────┘
               │                                │  (None if no file)
               └───────────────┬────────────────┘
                               ▼
               get_data()      materializes a default payload,
                               does NOT mark the session dirty
               mark_modified() caller changed the payload
               mark_deleted()  discard on the next save()
                               │
                               ▼
               save()          no-op unless modified / new / deleted
                               deleted  → remove the file
                               otherwise → mkdir -p, overwrite file
                               clears modified and is_new
                               │
                               ▼
               release()       drops payload and id together
                               (the file is left alone)

=============================================================================
DIRTY TRACKING
=============================================================================

Reading is free, writing needs a flag:

    data = session.get_data()   # session.modified unchanged
    data.user_id = 9876
    session.mark_modified()     # without this, save() writes nothing

The payload is a plain mutable object, so the store cannot see changes
to it. The explicit flag keeps every unmodified request from rewriting
its session file.

=============================================================================
CONCURRENCY
=============================================================================

No locking and no write-then-rename. Two processes saving the same
session race, and the later save() wins. That is fine for one process per
request (CGI). Anything that serves overlapping requests for one visitor
from one process has to add a lock around load → save first.

=============================================================================
"""

import logging
import re
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Generic, Optional, TypeVar, Union

from ..errors import SessionError, SessionIOError, SessionParseError
from ..http.cookies import SetCookie
from .codec import JsonSessionCodec


logger = logging.getLogger(__name__)


T = TypeVar("T")

SESSION_ID_BYTES = 32                       # 256 random bits
SESSION_ID_PATTERN = re.compile(r"[0-9a-f]{64}")


def generate_session_id() -> str:
    """64 lowercase hex characters from the OS CSPRNG."""
    return secrets.token_hex(SESSION_ID_BYTES)


def is_valid_session_id(session_id: str) -> bool:
    """
    True if ``session_id`` could have come from generate_session_id().

    The id comes from a cookie and becomes part of a file path, so
    anything else (``../../etc/passwd``) is rejected before touching disk.
    """
    return bool(session_id) and SESSION_ID_PATTERN.fullmatch(session_id) is not None


@dataclass(frozen=True)
class SessionConfig:
    """
    Where sessions live and how their cookie looks.

    Built by AppConfig.session_config() and handed to SessionStore.
    """

    session_dir: Path = Path("./sessions")
    cookie_name: str = "session_id"
    max_age: int = 86400
    cookie_path: str = "/"
    secure: bool = False
    samesite: str = "Lax"
    max_file_size: int = 1024 * 1024

    def cookie(self, session_id: str) -> SetCookie:
        """The Set-Cookie directive that hands ``session_id`` to the browser."""
        return SetCookie(
            name=self.cookie_name,
            value=session_id,
            max_age=self.max_age,
            path=self.cookie_path,
            secure=self.secure,
            httponly=True,
            samesite=self.samesite,
        )


class Session(Generic[T]):
    """
    One visitor's session.

    Create through ``SessionStore.create_new()`` or ``SessionStore.load()``
    rather than directly. Usable as a context manager; leaving the block
    releases the session:

        with store.create_new() as session:
            session.get_data().user_id = 9876
            session.mark_modified()
            session.save()
    """

    def __init__(
        self,
        store: "SessionStore[T]",
        session_id: str,
        data: Optional[T] = None,
        is_new: bool = False,
        modified: bool = False,
    ):
        self._store = store
        self._id: Optional[str] = session_id
        self.data: Optional[T] = data
        self.is_new = is_new
        self.modified = modified
        self.is_deleted = False

    @property
    def id(self) -> str:
        if self._id is None:
            raise SessionError("Session has been released")
        return self._id

    @property
    def released(self) -> bool:
        return self._id is None

    @property
    def path(self) -> Path:
        return self._store.path_for(self.id)

    # =========================================================================
    # PAYLOAD
    # =========================================================================

    def get_data(self) -> T:
        """
        The payload, creating a default one on first access.

        Does not mark the session modified. Call mark_modified() after
        changing what this returns.
        """
        if self._id is None:
            raise SessionError("Session has been released")
        if self.data is None:
            logger.debug(f"Initializing empty data for session {self._id[:8]}")
            self.data = self._store.factory()
        return self.data

    def mark_modified(self) -> None:
        self.modified = True

    def mark_deleted(self) -> None:
        """Discard this session (file included) on the next save()."""
        self.is_deleted = True

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def save(self) -> None:
        """
        Persist the session if there is anything to persist.

        =====================================================================
        WHAT GETS WRITTEN
        =====================================================================

            flags                         action
            ─────────────────────────     ─────────────────────────────
            !modified and !new and        nothing
              !deleted
            deleted                       remove <dir>/<id>.json
            otherwise                     write payload (or a default
                                          payload if never materialized)

        The file is truncated and rewritten in place; a crash mid-write
        can leave it truncated, which the next load() reports as
        SessionParseError.

        Raises:
            SessionIOError: directory creation, write or removal failed.
        """
        if not (self.modified or self.is_new or self.is_deleted):
            return

        if self.is_deleted:
            self._store.delete(self.id)
            self.modified = False
            self.is_new = False
            return

        path = self.path
        payload = self.data if self.data is not None else self._store.factory()
        text = self._store.codec.encode(payload)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SessionIOError(
                f"Failed to create session directory '{path.parent}': {e}",
                path=str(path.parent),
            ) from e

        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(text)
        except OSError as e:
            raise SessionIOError(
                f"Failed to write session file '{path}': {e}", path=str(path)
            ) from e

        self.modified = False
        self.is_new = False
        logger.debug(f"Session saved: {path}")

    def release(self) -> None:
        """Drop the payload and the id. The backing file is untouched."""
        if self._id is not None:
            logger.debug(f"Session released: {self._id[:8]}")
        self.data = None
        self._id = None

    def __enter__(self) -> "Session[T]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        ident = self._id[:8] if self._id else "<released>"
        return (
            f"Session(id={ident}..., is_new={self.is_new}, "
            f"modified={self.modified}, is_deleted={self.is_deleted})"
        )


class SessionStore(Generic[T]):
    """
    Creates, loads and locates sessions holding payloads of type ``T``.

    ``factory`` builds the default payload (``SessionData`` for the
    built-in flights; any dataclass or dict type works):

        store = SessionStore(SessionConfig(session_dir=Path("/var/lib/app/sessions")),
                             factory=SessionData)
    """

    def __init__(
        self,
        config: Optional[SessionConfig] = None,
        factory: Optional[Callable[[], T]] = None,
        codec: Optional[JsonSessionCodec] = None,
    ):
        if factory is None:
            from .data import SessionData
            factory = SessionData  # type: ignore[assignment]
        self.config = config or SessionConfig()
        self.factory: Callable[[], T] = factory  # type: ignore[assignment]
        self.codec = codec or JsonSessionCodec()

    @property
    def session_dir(self) -> Path:
        return Path(self.config.session_dir)

    def path_for(self, session_id: str) -> Path:
        """``<session_dir>/<id>.<ext>``"""
        if not is_valid_session_id(session_id):
            raise SessionIOError(f"Invalid session id: {session_id!r}")
        return self.session_dir / f"{session_id}.{self.codec.extension}"

    def create_new(self) -> Session[T]:
        """Fresh session with a random id. Nothing is written yet."""
        session = Session(self, generate_session_id(), is_new=True, modified=True)
        logger.debug(f"Session created: {session.id[:8]}")
        return session

    def load(self, session_id: Union[str, None]) -> Optional[Session[T]]:
        """
        Load the session stored under ``session_id``.

        Returns:
            The session, or None when the id is malformed or has no file
            (the caller then creates a new one).

        Raises:
            SessionIOError: the file exists but could not be read.
            SessionParseError: the file does not decode into ``T``.
        """
        if not session_id or not is_valid_session_id(session_id):
            logger.debug(f"Ignoring malformed session id {session_id!r}")
            return None

        path = self.path_for(session_id)
        try:
            with open(path, "rb") as f:
                raw = f.read(self.config.max_file_size + 1)
        except FileNotFoundError:
            logger.debug(f"Session file not found: {path}")
            return None
        except OSError as e:
            raise SessionIOError(
                f"Failed to read session file '{path}': {e}", path=str(path)
            ) from e

        if len(raw) > self.config.max_file_size:
            raise SessionIOError(
                f"Session file '{path}' exceeds {self.config.max_file_size} bytes",
                path=str(path),
            )

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SessionParseError(
                f"Session file '{path}' is not UTF-8: {e}", path=str(path)
            ) from e

        try:
            data = self.codec.decode(text, self.factory)
        except SessionParseError as e:
            e.path = str(path)
            logger.warning(f"Failed to parse session file '{path}': {e}")
            raise

        logger.debug(f"Session loaded: {path}")
        return Session(self, session_id, data=data, is_new=False, modified=False)

    def delete(self, session_id: str) -> bool:
        """
        Remove a session's file. Returns False if there was none.

        Raises:
            SessionIOError: the file exists but could not be removed.
        """
        path = self.path_for(session_id)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise SessionIOError(
                f"Failed to remove session file '{path}': {e}", path=str(path)
            ) from e
        logger.debug(f"Session file removed: {path}")
        return True
